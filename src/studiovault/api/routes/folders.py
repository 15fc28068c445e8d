"""Folder endpoints."""

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from studiovault.api.deps import VaultServiceDep
from studiovault.api.responses import operation_response

router = APIRouter()


class CreateFolderRequest(BaseModel):
    """Request to create a folder."""

    parent_dir: str = Field(..., description="Folder that receives the new one")
    name: str = Field(..., description="Folder name as typed by the user")


@router.post("/folders")
async def create_folder(
    request: CreateFolderRequest, service: VaultServiceDep
) -> JSONResponse:
    """Create a single folder."""
    result = await service.create_folder(request.parent_dir, request.name)
    return operation_response(result)


@router.delete("/folders")
async def delete_folder(
    service: VaultServiceDep,
    path: str = Query(..., description="Folder path"),
) -> dict[str, bool]:
    """Delete a folder recursively. The vault root cannot be deleted."""
    if not await service.delete_folder(path):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not delete folder",
        )
    return {"success": True}
