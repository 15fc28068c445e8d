"""Document endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from studiovault.api.deps import VaultServiceDep
from studiovault.api.responses import operation_response

router = APIRouter()


class DocumentResponse(BaseModel):
    """Raw document content."""

    path: str
    content: str


class WriteDocumentRequest(BaseModel):
    path: str = Field(..., description="Document to overwrite")
    content: str = Field(..., description="Full new content")


class CreateDocumentRequest(BaseModel):
    """Request to create a new document."""

    parent_dir: str = Field(..., description="Folder that receives the document")
    name: str = Field(..., description="Document name as typed by the user")
    content: str | None = Field(
        default=None, description="Initial content (default: header template)"
    )


class UpdateAttributesRequest(BaseModel):
    """Request to merge values into a document header."""

    path: str = Field(..., description="Document to update")
    updates: dict[str, Any] = Field(
        ..., description="Header values to set; null removes a key"
    )


class AttributesResponse(BaseModel):
    path: str
    attributes: dict[str, Any]


class ImportDocumentRequest(BaseModel):
    """Request to copy an external .md or .txt file into the vault."""

    destination_dir: str = Field(..., description="Folder inside the vault")
    source_path: str = Field(..., description="File to import")


@router.get("/documents", response_model=DocumentResponse)
async def read_document(
    service: VaultServiceDep,
    path: str = Query(..., description="Document path"),
) -> DocumentResponse:
    """Read a document as text."""
    content = await service.read_document(path)
    return DocumentResponse(path=path, content=content)


@router.put("/documents", response_model=DocumentResponse)
async def write_document(
    request: WriteDocumentRequest, service: VaultServiceDep
) -> DocumentResponse:
    """Overwrite a document with new content."""
    await service.write_document(request.path, request.content)
    return DocumentResponse(path=request.path, content=request.content)


@router.post("/documents")
async def create_document(
    request: CreateDocumentRequest, service: VaultServiceDep
) -> JSONResponse:
    """
    Create a document without overwriting an existing one.

    Names without an extension are slugified and get ``.md``.
    """
    result = await service.create_document(
        request.parent_dir, request.name, request.content
    )
    return operation_response(result)


@router.patch("/documents/attributes", response_model=AttributesResponse)
async def update_attributes(
    request: UpdateAttributesRequest, service: VaultServiceDep
) -> AttributesResponse:
    """Merge values into the document header, keeping the body."""
    attributes = await service.update_document_attributes(request.path, request.updates)
    return AttributesResponse(path=request.path, attributes=attributes)


@router.post("/documents/import")
async def import_document(
    request: ImportDocumentRequest, service: VaultServiceDep
) -> JSONResponse:
    """Import an external document; ``.txt`` files become ``.md``."""
    result = await service.import_document(request.destination_dir, request.source_path)
    return operation_response(result)


@router.delete("/files")
async def delete_file(
    service: VaultServiceDep,
    path: str = Query(..., description="File path"),
) -> dict[str, bool]:
    """Delete a single file."""
    if not await service.delete_file(path):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not delete file",
        )
    return {"success": True}
