"""Directory listing and navigation endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from studiovault.api.deps import VaultServiceDep

router = APIRouter()


class RenameRequest(BaseModel):
    """Request to rename a file or folder in place."""

    path: str = Field(..., description="Entry to rename")
    new_name: str = Field(..., description="New name within the same folder")


class RenameResponse(BaseModel):
    path: str


class ParentResponse(BaseModel):
    parent: str | None


def _resolve_dir(service, path: str | None) -> str | None:
    if path:
        return path
    root = service.root
    return str(root) if root is not None else None


@router.get("/entries")
async def list_entries(
    service: VaultServiceDep,
    path: str | None = Query(default=None, description="Directory (default: root)"),
) -> list[dict[str, Any]]:
    """
    List the immediate children of a directory.

    Paths outside the vault and unreadable directories give an empty list.
    """
    entries = await service.list_entries(_resolve_dir(service, path))
    return [entry.to_record() for entry in entries]


@router.get("/entries/recent")
async def list_recent(
    service: VaultServiceDep,
    path: str | None = Query(default=None, description="Subtree (default: root)"),
    limit: int | None = Query(default=None, description="Maximum entries"),
    exclude_direct: bool = Query(
        default=False, description="Skip documents directly inside the subtree"
    ),
) -> list[dict[str, Any]]:
    """Newest documents below a directory."""
    entries = await service.list_recent_documents(
        _resolve_dir(service, path),
        limit,
        exclude_direct_descendants=exclude_direct,
    )
    return [entry.to_record() for entry in entries]


@router.get("/entries/parent", response_model=ParentResponse)
async def parent_of(
    service: VaultServiceDep,
    path: str = Query(..., description="Entry path"),
) -> ParentResponse:
    """Parent folder for upward navigation; null at the vault root."""
    return ParentResponse(parent=service.parent_of(path))


@router.post("/entries/rename", response_model=RenameResponse)
async def rename_entry(request: RenameRequest, service: VaultServiceDep) -> RenameResponse:
    """Rename a file or folder without moving it."""
    new_path = await service.rename(request.path, request.new_name)
    if new_path is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rename failed",
        )
    return RenameResponse(path=new_path)
