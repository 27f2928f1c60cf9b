"""Portal level catalog endpoints: listing and reconciliation."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ... import catalog, schemas
from ...constants import PORTALS, Portal
from ...exceptions import SaveError
from ..deps import get_db, http_error_for, require_confirmation

router = APIRouter(prefix="/portals", tags=["portals"])


@router.get("", response_model=List[schemas.PortalInfo])
def list_portals(db: Session = Depends(get_db)) -> List[schemas.PortalInfo]:
    return [
        schemas.PortalInfo(
            portal=portal, label=config.label, program_count=catalog.count_programs(db, portal)
        )
        for portal, config in PORTALS.items()
    ]


@router.get(
    "/{portal}/programs",
    response_model=List[schemas.Program],
    summary="List the programs of a portal",
)
def list_programs(portal: Portal, db: Session = Depends(get_db)) -> List[schemas.Program]:
    return catalog.fetch_programs(db, portal)


@router.post(
    "/{portal}/restore",
    response_model=schemas.RestoreResult,
    summary="Re-insert factory programs missing from the portal",
)
def restore_programs(portal: Portal, db: Session = Depends(get_db)) -> schemas.RestoreResult:
    try:
        restored = catalog.restore_missing_programs(db, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc
    return schemas.RestoreResult(portal=portal, restored=restored)


@router.post(
    "/{portal}/seed",
    response_model=List[schemas.Program],
    status_code=status.HTTP_201_CREATED,
    summary="Insert the full factory catalog into the portal",
)
def seed_portal(
    portal: Portal,
    confirm: bool = Query(False, description="Required when the portal already has programs"),
    db: Session = Depends(get_db),
) -> List[schemas.Program]:
    if not confirm and catalog.count_programs(db, portal):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Portal is not empty; seeding would duplicate programs. Repeat with confirm=true",
        )
    try:
        return catalog.seed_programs(db, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc


@router.post(
    "/{portal}/reset",
    response_model=List[schemas.Program],
    dependencies=[Depends(require_confirmation)],
    summary="Delete every program of the portal and seed it again",
)
def reset_portal(portal: Portal, db: Session = Depends(get_db)) -> List[schemas.Program]:
    try:
        return catalog.reset_and_seed(db, portal)
    except SaveError as exc:
        raise http_error_for(exc) from exc
