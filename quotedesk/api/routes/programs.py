"""Program catalog endpoints: editing, imagery and quote generation."""
from __future__ import annotations

from typing import Annotated, List

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Path,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ... import catalog, imaging, quotes, schemas, storage
from ...constants import AssetKind, Portal
from ...drafting import DraftingClient, generate_email_draft, generate_program_highlights
from ...exceptions import QuoteDeskError, SaveError
from ...rendering import render_proposal
from ...workspace import ProgramDraft, normalize_and_upload_batch
from ..deps import (
    get_db,
    get_drafting_client,
    get_program_or_404,
    http_error_for,
    read_pending,
    require_confirmation,
)

router = APIRouter(tags=["programs"])

PROGRAM_IMAGE_KINDS = (AssetKind.HERO, AssetKind.BANNER, AssetKind.GALLERY, AssetKind.TIMETABLE)


def _portal_program_or_404(db: Session, portal: Portal, program_id: str) -> schemas.Program:
    if catalog.get_program_portal(db, program_id) != portal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    return catalog.program_from_row(catalog.get_program(db, program_id))


def _save(db: Session, program: schemas.Program, portal: Portal, response: Response) -> schemas.Program:
    if catalog.exceeds_payload_warning(program):
        response.headers["X-Payload-Warning"] = "Payload exceeds 5 MB; saving may fail"
    try:
        return catalog.save_program(db, program, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc


@router.post(
    "/portals/{portal}/programs",
    response_model=schemas.Program,
    status_code=status.HTTP_201_CREATED,
)
def create_program(
    portal: Portal,
    payload: schemas.Program,
    response: Response,
    db: Session = Depends(get_db),
) -> schemas.Program:
    return _save(db, payload.model_copy(update={"id": ""}), portal, response)


@router.put("/portals/{portal}/programs/{program_id}", response_model=schemas.Program)
def update_program(
    portal: Portal,
    program_id: str,
    payload: schemas.Program,
    response: Response,
    db: Session = Depends(get_db),
) -> schemas.Program:
    _portal_program_or_404(db, portal, program_id)
    return _save(db, payload.model_copy(update={"id": program_id}), portal, response)


@router.delete(
    "/programs/{program_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_confirmation)],
)
def delete_program(program_id: str, db: Session = Depends(get_db)) -> Response:
    if not catalog.delete_program(db, program_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/portals/{portal}/programs/{program_id}/images/{kind}",
    response_model=schemas.ImageBatchResult,
    summary="Normalize, upload and attach program images",
)
async def upload_program_images(
    portal: Portal,
    program_id: str,
    kind: AssetKind,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
) -> schemas.ImageBatchResult:
    if kind not in PROGRAM_IMAGE_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"'{kind.value}' is not a program image"
        )
    draft = ProgramDraft(_portal_program_or_404(db, portal, program_id))
    path_hint = storage.storage_path("programs", program_id, kind.value)
    pending = [await read_pending(file) for file in files]

    if kind in (AssetKind.HERO, AssetKind.BANNER):
        if len(pending) != 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Upload exactly one image"
            )
        item = pending[0]
        try:
            encoded = await imaging.normalize_for(kind, item.data, item.content_type, item.filename)
            url = await storage.upload(encoded, path_hint)
        except QuoteDeskError as exc:
            raise http_error_for(exc) from exc
        if kind is AssetKind.HERO:
            draft.hero_image = url
        else:
            draft.banner_image = url
        uploaded, failed = [url], []
    else:
        if kind is AssetKind.TIMETABLE and not draft.can_add_timetables(len(pending)):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="At most 5 timetable images can be attached",
            )
        append = draft.append_gallery if kind is AssetKind.GALLERY else draft.append_timetable
        outcome = await normalize_and_upload_batch(pending, kind, path_hint, on_complete=append)
        uploaded, failed = outcome.uploaded, outcome.failed

    try:
        program = draft.promote(db, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc
    return schemas.ImageBatchResult(program=program, uploaded=uploaded, failed=failed)


@router.delete(
    "/portals/{portal}/programs/{program_id}/images/{kind}/{index}",
    response_model=schemas.Program,
)
def remove_program_image(
    portal: Portal,
    program_id: str,
    kind: AssetKind,
    index: Annotated[int, Path(ge=0)],
    db: Session = Depends(get_db),
) -> schemas.Program:
    draft = ProgramDraft(_portal_program_or_404(db, portal, program_id))
    try:
        if kind is AssetKind.GALLERY:
            draft.remove_gallery(index)
        elif kind is AssetKind.TIMETABLE:
            draft.remove_timetable(index)
        else:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only gallery and timetable images can be removed by index",
            )
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found") from exc
    try:
        return draft.promote(db, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc


@router.get("/programs/{program_id}/airports", response_model=schemas.AirportOptions)
def list_transfer_airports(
    program: schemas.Program = Depends(get_program_or_404),
) -> schemas.AirportOptions:
    return schemas.AirportOptions(
        region=quotes.transfer_region(program), airports=quotes.available_airports(program)
    )


@router.post(
    "/programs/{program_id}/proposal",
    response_class=HTMLResponse,
    summary="Render a printable proposal with the stored branding",
)
def create_proposal(
    quote: schemas.QuoteDetails,
    program: schemas.Program = Depends(get_program_or_404),
    db: Session = Depends(get_db),
) -> str:
    try:
        prepared = quotes.prepare_quote(program, quote)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    branding = schemas.Branding.model_validate(catalog.get_branding(db))
    return render_proposal(program, prepared, branding)


@router.post("/programs/{program_id}/email-draft", response_model=schemas.EmailDraft)
def create_email_draft(
    quote: schemas.QuoteDetails,
    program: schemas.Program = Depends(get_program_or_404),
    client: DraftingClient = Depends(get_drafting_client),
) -> schemas.EmailDraft:
    prepared = quote.model_copy(
        update={
            "price_per_student": quotes.format_price(
                quote.price_per_student, quotes.currency_symbol(program)
            )
        }
    )
    return schemas.EmailDraft(draft=generate_email_draft(program, prepared, client))


@router.get("/programs/{program_id}/highlights", response_model=schemas.ProgramHighlights)
def get_program_highlights(
    program: schemas.Program = Depends(get_program_or_404),
    client: DraftingClient = Depends(get_drafting_client),
) -> schemas.ProgramHighlights:
    return schemas.ProgramHighlights(highlights=generate_program_highlights(program, client))
