"""FastAPI dependencies for the StudioVault API.

Routes receive the vault service through dependency injection so tests can
swap in a service bound to a temporary vault.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from studiovault.core.service import VaultService, get_vault_service


async def get_service() -> VaultService:
    """
    Get the vault service for request processing.

    Returns:
        VaultService instance
    """
    return get_vault_service()


async def require_open_vault(
    service: Annotated[VaultService, Depends(get_service)],
) -> VaultService:
    """
    Require a vault root to be set.

    Raises:
        HTTPException: If no vault is open yet
    """
    if service.root is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No vault is open. Open a vault or request the initial state.",
        )
    return service


# Type aliases for dependency injection
VaultServiceDep = Annotated[VaultService, Depends(get_service)]
OpenVaultDep = Annotated[VaultService, Depends(require_open_vault)]
