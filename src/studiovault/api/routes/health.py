"""Health check endpoints."""

import os
from typing import Any

from fastapi import APIRouter

from studiovault.api.deps import VaultServiceDep

router = APIRouter()


def _vault_status(service) -> tuple[bool, str]:
    root = service.root
    if root is None:
        return False, "no vault open"
    if not os.path.isdir(root):
        return False, f"vault root missing: {root}"
    return True, str(root)


@router.get("/health")
async def health_check(service: VaultServiceDep) -> dict[str, Any]:
    """
    Check the health of the vault service.

    Returns:
        dict with status and component health details
    """
    vault_ok, vault_message = _vault_status(service)
    return {
        "status": "healthy" if vault_ok else "degraded",
        "components": {
            "vault": {"healthy": vault_ok, "message": vault_message},
        },
    }


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """
    Kubernetes-style liveness probe.

    Returns:
        Simple OK response if the service is running
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(service: VaultServiceDep) -> dict[str, Any]:
    """
    Kubernetes-style readiness probe.

    Returns:
        OK once a vault is open and its root exists
    """
    vault_ok, vault_message = _vault_status(service)
    if vault_ok:
        return {"status": "ok", "ready": True}

    return {
        "status": "not_ready",
        "ready": False,
        "reason": vault_message,
    }
