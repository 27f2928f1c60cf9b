"""Branding settings endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ... import catalog, imaging, schemas, storage
from ...constants import AssetKind
from ...exceptions import QuoteDeskError
from ..deps import get_db, http_error_for, require_confirmation

router = APIRouter(prefix="/settings", tags=["settings"])

BRANDING_ASSETS: dict[str, tuple[AssetKind, str]] = {
    "logo": (AssetKind.LOGO, "logos"),
    "banner": (AssetKind.BANNER, "banners"),
}


@router.get("", response_model=schemas.Branding)
def get_settings(db: Session = Depends(get_db)) -> schemas.Branding:
    return schemas.Branding.model_validate(catalog.get_branding(db))


@router.put("", response_model=schemas.Branding)
def update_settings(payload: schemas.Branding, db: Session = Depends(get_db)) -> schemas.Branding:
    return schemas.Branding.model_validate(catalog.save_branding(db, payload))


@router.delete(
    "",
    response_model=schemas.Branding,
    dependencies=[Depends(require_confirmation)],
    summary="Clear the saved logo and banner",
)
def clear_settings(db: Session = Depends(get_db)) -> schemas.Branding:
    return schemas.Branding.model_validate(catalog.clear_branding(db))


@router.post("/{asset}", response_model=schemas.Branding, summary="Upload a logo or banner")
async def upload_branding_image(
    asset: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
) -> schemas.Branding:
    if asset not in BRANDING_ASSETS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown branding asset '{asset}'"
        )
    kind, folder = BRANDING_ASSETS[asset]
    try:
        encoded = await imaging.normalize_for(kind, await file.read(), file.content_type, file.filename)
        url = await storage.upload(encoded, storage.storage_path("branding", folder))
    except QuoteDeskError as exc:
        raise http_error_for(exc) from exc

    field = "logo_image" if kind is AssetKind.LOGO else "banner_image"
    payload = schemas.Branding.model_validate({field: url})
    return schemas.Branding.model_validate(catalog.save_branding(db, payload))
