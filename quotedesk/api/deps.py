"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import Generator

from fastapi import Depends, HTTPException, Path, Query, UploadFile, status
from sqlalchemy.orm import Session

from .. import catalog, schemas
from ..database import SessionLocal
from ..drafting import DraftingClient, GeminiClient
from ..exceptions import DecodeError, RenderError, SaveError, SaveErrorReason, UploadError
from ..workspace import PendingFile

SAVE_ERROR_STATUS: dict[SaveErrorReason, int] = {
    SaveErrorReason.DUPLICATE: status.HTTP_409_CONFLICT,
    SaveErrorReason.OVERSIZED: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    SaveErrorReason.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_db() -> Generator[Session, None, None]:
    """Provide a scoped database session to request handlers."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:  # pragma: no cover - safety rollback
        db.rollback()
        raise
    finally:
        db.close()


def require_confirmation(
    confirm: bool = Query(False, description="Must be true for destructive operations"),
) -> None:
    """Reject destructive requests that were not explicitly confirmed."""

    if not confirm:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This operation is destructive; repeat it with confirm=true",
        )


def get_program_or_404(
    program_id: str = Path(..., min_length=1), db: Session = Depends(get_db)
) -> schemas.Program:
    row = catalog.get_program(db, program_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    return catalog.program_from_row(row)


def http_error_for(exc: Exception) -> HTTPException:
    """Translate a service error into the matching HTTP response."""

    if isinstance(exc, SaveError):
        return HTTPException(status_code=SAVE_ERROR_STATUS[exc.reason], detail=exc.detail)
    if isinstance(exc, DecodeError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, RenderError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, UploadError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


async def read_pending(file: UploadFile) -> PendingFile:
    return PendingFile(
        data=await file.read(), content_type=file.content_type, filename=file.filename
    )


def get_drafting_client() -> DraftingClient:
    return GeminiClient()
