"""Vault root endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from studiovault.api.deps import OpenVaultDep, VaultServiceDep

router = APIRouter()


class VaultResponse(BaseModel):
    """Currently open vault."""

    root_path: str | None


class OpenVaultRequest(BaseModel):
    """Request to open a folder as the vault."""

    path: str = Field(..., description="Absolute path of the vault folder")


class WorkspaceRequest(BaseModel):
    """Request to create a top-level workspace folder."""

    name: str = Field(..., description="Workspace name")


class WorkspaceResponse(BaseModel):
    path: str


@router.get("/vault", response_model=VaultResponse)
async def get_vault(service: VaultServiceDep) -> VaultResponse:
    """Get the currently open vault."""
    root = service.root
    return VaultResponse(root_path=str(root) if root is not None else None)


@router.put("/vault", response_model=VaultResponse)
async def open_vault(request: OpenVaultRequest, service: VaultServiceDep) -> VaultResponse:
    """
    Open a folder as the vault root.

    The folder must already exist. The choice is remembered for the next
    start.
    """
    root = await service.open_vault(request.path)
    if root is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Vault path must be an existing directory",
        )
    return VaultResponse(root_path=root)


@router.post("/vault/initial")
async def initial_state(service: VaultServiceDep) -> dict[str, Any]:
    """
    Open the default vault hub, creating it if needed.

    Returns:
        Root path and its top-level entries
    """
    state = await service.get_initial_state()
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create the vault hub",
        )
    return {
        "root_path": state.root_path,
        "entries": [entry.to_record() for entry in state.entries],
    }


@router.post(
    "/workspaces",
    response_model=WorkspaceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_workspace(
    request: WorkspaceRequest, service: OpenVaultDep
) -> WorkspaceResponse:
    """Create a workspace folder under the vault root (idempotent)."""
    path = await service.create_workspace(request.name)
    if path is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid workspace name",
        )
    return WorkspaceResponse(path=path)
