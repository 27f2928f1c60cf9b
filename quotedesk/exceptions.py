"""Error types raised by the Quote Desk services."""
from __future__ import annotations

from enum import Enum


class QuoteDeskError(Exception):
    """Base class for service level failures."""


class DecodeError(QuoteDeskError):
    """The uploaded bytes could not be parsed as an image."""


class RenderError(QuoteDeskError):
    """The drawing surface for a normalized image could not be produced."""


class UploadError(QuoteDeskError):
    """Writing an image to object storage failed."""


class FetchError(QuoteDeskError):
    """Reading catalog records from the store failed."""


class AIServiceError(QuoteDeskError):
    """The drafting collaborator could not produce a response."""


class SaveErrorReason(str, Enum):
    DUPLICATE = "duplicate"
    OVERSIZED = "oversized"
    UNKNOWN = "unknown"


SAVE_ERROR_MESSAGES: dict[SaveErrorReason, str] = {
    SaveErrorReason.DUPLICATE: "A record with the same key already exists (duplicate entry).",
    SaveErrorReason.OVERSIZED: "The record is too large to save. Please use fewer or smaller images.",
    SaveErrorReason.UNKNOWN: "An unknown error occurred while saving the record.",
}


class SaveError(QuoteDeskError):
    """A catalog write failed; ``reason`` tells duplicate and oversized apart."""

    def __init__(self, reason: SaveErrorReason, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail or SAVE_ERROR_MESSAGES[reason]
        super().__init__(self.detail)
