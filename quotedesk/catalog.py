"""Catalog persistence and reconciliation against the factory dataset."""
from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .constants import (
    MAX_PAYLOAD_BYTES,
    PAYLOAD_WARNING_BYTES,
    PERSISTED_ID_MIN_LENGTH,
    PORTALS,
    Portal,
)
from .exceptions import FetchError, SaveError, SaveErrorReason
from .seed_data import factory_programs

logger = logging.getLogger(__name__)

PROGRAM_COLUMNS: tuple[str, ...] = tuple(schemas.Program.model_fields)


# Row mapping


def program_to_row(program: schemas.Program) -> dict[str, Any]:
    """Translate a program into its snake_case store representation."""

    return program.model_dump(mode="json")


def program_from_row(row: Any) -> schemas.Program:
    """Build a program from a store row (mapping or ORM instance)."""

    if not isinstance(row, dict):
        row = {column: getattr(row, column) for column in PROGRAM_COLUMNS}
    return schemas.Program.model_validate({key: row.get(key) for key in PROGRAM_COLUMNS if key in row})


def is_persisted_id(program_id: str | None) -> bool:
    return bool(program_id) and len(program_id) >= PERSISTED_ID_MIN_LENGTH


def estimate_payload_size(program: schemas.Program) -> int:
    """Approximate serialized size of a program in bytes."""

    return len(json.dumps(program_to_row(program), ensure_ascii=False).encode("utf-8"))


def exceeds_payload_warning(program: schemas.Program) -> bool:
    return estimate_payload_size(program) > PAYLOAD_WARNING_BYTES


# Reads


def _portal_tag(portal: Portal) -> str:
    return PORTALS[portal].tag


def _load_rows(session: Session, portal: Portal) -> Sequence[models.Program]:
    statement = (
        select(models.Program)
        .where(models.Program.portal_type == _portal_tag(portal))
        .order_by(models.Program.created_at, models.Program.seq)
    )
    try:
        return session.scalars(statement).all()
    except SQLAlchemyError as exc:
        raise FetchError(f"Could not load programs for {portal.value}") from exc


def fetch_programs(session: Session, portal: Portal) -> list[schemas.Program]:
    """Return the portal's programs, or its factory slice when the store is unreachable."""

    try:
        rows = _load_rows(session, portal)
    except FetchError as exc:
        logger.error("%s; serving factory catalog instead: %s", exc, exc.__cause__)
        session.rollback()
        return factory_programs(portal)
    return [program_from_row(row) for row in rows]


def get_program(session: Session, program_id: str) -> models.Program | None:
    statement = select(models.Program).where(models.Program.id == program_id)
    return session.scalars(statement).first()


def get_program_portal(session: Session, program_id: str) -> Portal | None:
    row = get_program(session, program_id)
    if not row:
        return None
    return next(portal for portal, config in PORTALS.items() if config.tag == row.portal_type)


def count_programs(session: Session, portal: Portal) -> int:
    statement = select(func.count()).select_from(models.Program).where(
        models.Program.portal_type == _portal_tag(portal)
    )
    return session.scalar(statement) or 0


# Writes


def _apply(row: models.Program, program: schemas.Program, portal: Portal) -> None:
    for column, value in program_to_row(program).items():
        if column == "id":
            continue
        setattr(row, column, value)
    row.portal_type = _portal_tag(portal)


def save_program(
    session: Session, program: schemas.Program, portal: Portal
) -> schemas.Program:
    """Update ``program`` in place when it carries a durable id, else insert it."""

    size = estimate_payload_size(program)
    if size > MAX_PAYLOAD_BYTES:
        raise SaveError(SaveErrorReason.OVERSIZED)
    if size > PAYLOAD_WARNING_BYTES:
        logger.warning(
            "Program '%s' payload is %.2f MB; saving may fail", program.name, size / (1024 * 1024)
        )

    try:
        if is_persisted_id(program.id):
            row = get_program(session, program.id)
            if row is None:
                raise SaveError(SaveErrorReason.UNKNOWN, f"Program {program.id} does not exist")
        else:
            row = models.Program()
            session.add(row)
        _apply(row, program, portal)
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        logger.error("Duplicate entry while saving '%s': %s", program.name, exc.orig)
        raise SaveError(SaveErrorReason.DUPLICATE) from exc
    except DataError as exc:
        session.rollback()
        logger.error("Oversized payload while saving '%s': %s", program.name, exc.orig)
        raise SaveError(SaveErrorReason.OVERSIZED) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error saving program '%s': %s", program.name, exc)
        raise SaveError(SaveErrorReason.UNKNOWN, str(exc)) from exc

    return program_from_row(row)


def delete_program(session: Session, program_id: str) -> bool:
    try:
        result = session.execute(delete(models.Program).where(models.Program.id == program_id))
        session.flush()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error deleting program %s: %s", program_id, exc)
        return False
    if not result.rowcount:
        logger.warning("Delete requested for unknown program %s", program_id)
        return False
    return True


# Reconciliation


def seed_programs(session: Session, portal: Portal) -> list[schemas.Program]:
    """Insert every factory entry for ``portal`` as a new record, duplicates included."""

    seeded = [
        save_program(session, program.model_copy(update={"id": ""}), portal)
        for program in factory_programs(portal)
    ]
    logger.info("Seeded %d programs into %s", len(seeded), portal.value)
    return seeded


def restore_missing_programs(session: Session, portal: Portal) -> bool:
    """Insert factory entries whose names are absent from the portal.

    Matching is by name only, so a renamed record is treated as missing and
    its factory original comes back alongside it.
    """

    statement = select(models.Program.name).where(
        models.Program.portal_type == _portal_tag(portal)
    )
    try:
        current_names = set(session.scalars(statement).all())
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error checking existing programs for %s: %s", portal.value, exc)
        return False

    missing = [program for program in factory_programs(portal) if program.name not in current_names]
    if not missing:
        return False

    logger.info("Restoring %d missing programs for %s", len(missing), portal.value)
    for program in missing:
        save_program(session, program.model_copy(update={"id": ""}), portal)
    return True


def reset_and_seed(session: Session, portal: Portal) -> list[schemas.Program]:
    """Delete every record of ``portal`` and seed it again from the factory catalog."""

    try:
        session.execute(
            delete(models.Program).where(models.Program.portal_type == _portal_tag(portal))
        )
        session.flush()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Error deleting programs for %s: %s", portal.value, exc)
        raise SaveError(SaveErrorReason.UNKNOWN, str(exc)) from exc
    return seed_programs(session, portal)


# Branding settings

BRANDING_ROW_ID = 1


def get_branding(session: Session) -> models.BrandingSettings:
    settings = session.get(models.BrandingSettings, BRANDING_ROW_ID)
    if settings is None:
        settings = models.BrandingSettings(id=BRANDING_ROW_ID)
        session.add(settings)
        session.flush()
    return settings


def save_branding(session: Session, payload: schemas.Branding) -> models.BrandingSettings:
    settings = get_branding(session)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(settings, field, value or None)
    session.add(settings)
    session.flush()
    return settings


def clear_branding(session: Session) -> models.BrandingSettings:
    settings = get_branding(session)
    settings.logo_image = None
    settings.banner_image = None
    session.flush()
    return settings
