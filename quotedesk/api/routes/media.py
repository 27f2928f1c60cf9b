"""Media upload and storage endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse

from ... import imaging, schemas, storage
from ...constants import AssetKind
from ...exceptions import QuoteDeskError
from ..deps import http_error_for

router = APIRouter(tags=["media"])


@router.post(
    "/media/images",
    response_model=schemas.UploadedImage,
    status_code=status.HTTP_201_CREATED,
    summary="Normalize and store a single image",
)
async def upload_image(
    file: UploadFile = File(...),
    kind: AssetKind = Query(AssetKind.GALLERY),
    path_hint: Optional[str] = Query(None, description="Storage namespace, e.g. programs/{id}/gallery"),
) -> schemas.UploadedImage:
    raw_bytes = await file.read()
    try:
        encoded = await imaging.normalize_for(kind, raw_bytes, file.content_type, file.filename)
        url = await storage.upload(encoded, path_hint or storage.storage_path("uploads", None, kind.value))
    except QuoteDeskError as exc:
        raise http_error_for(exc) from exc
    return schemas.UploadedImage(
        url=url, content_type=encoded.content_type, width=encoded.width, height=encoded.height
    )


@router.get("/storage/{file_path:path}", summary="Serve a stored image")
def get_stored_file(file_path: str) -> FileResponse:
    target = storage.resolve_stored_file(file_path)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(target)
