"""Application-wide constants and defaults."""
from __future__ import annotations

import os
from enum import Enum
from typing import NamedTuple

APP_NAME = "Quote Desk"
APP_VERSION = "1.0.0"


class Portal(str, Enum):
    """Audience segment that partitions the program catalog."""

    YL_GROUPS = "YL_GROUPS"
    YL_INDIVIDUAL = "YL_INDIVIDUAL"
    ADULTS = "ADULTS"


class PortalConfig(NamedTuple):
    tag: str
    label: str
    factory_id_prefix: str


PORTALS: dict[Portal, PortalConfig] = {
    Portal.YL_GROUPS: PortalConfig(
        tag="YL_GROUPS", label="Young Learners - Groups", factory_id_prefix=""
    ),
    Portal.YL_INDIVIDUAL: PortalConfig(
        tag="YL_INDIVIDUAL", label="Young Learners - Individual", factory_id_prefix="ind-"
    ),
    Portal.ADULTS: PortalConfig(tag="ADULTS", label="Adults", factory_id_prefix="adult-"),
}


class AssetKind(str, Enum):
    LOGO = "logo"
    BANNER = "banner"
    HERO = "hero"
    GALLERY = "gallery"
    TIMETABLE = "timetable"


class ImageBudget(NamedTuple):
    max_width: int
    quality: float


IMAGE_BUDGETS: dict[AssetKind, ImageBudget] = {
    AssetKind.LOGO: ImageBudget(max_width=500, quality=0.7),
    AssetKind.BANNER: ImageBudget(max_width=1200, quality=0.8),
    AssetKind.HERO: ImageBudget(max_width=1200, quality=0.8),
    AssetKind.GALLERY: ImageBudget(max_width=800, quality=0.7),
    AssetKind.TIMETABLE: ImageBudget(max_width=1000, quality=0.7),
}

DEFAULT_MAX_WIDTH = 1024
DEFAULT_QUALITY = 0.7

MAX_TIMETABLE_IMAGES = 5

# Persisted ids are UUID4 strings; anything this short or shorter is a
# factory or client-side placeholder id.
PERSISTED_ID_MIN_LENGTH = 21

PAYLOAD_WARNING_BYTES = 5 * 1024 * 1024
MAX_PAYLOAD_BYTES = int(os.getenv("MAX_PAYLOAD_BYTES", str(50 * 1024 * 1024)))

TRANSFER_AIRPORTS: dict[str, tuple[str, ...]] = {
    "London": (
        "London Heathrow",
        "London Gatwick",
        "London City",
        "London Luton",
        "London Stansted",
    ),
    "Bedford": (
        "London Heathrow",
        "London Gatwick",
        "London City",
        "London Luton",
        "London Stansted",
    ),
    "Manchester": ("Manchester Airport",),
    "Wellington": ("Exeter Airport", "Bristol Airport"),
    "Malta": ("Malta International Airport",),
}

DEFAULT_TRANSFER_REGION = "London"

AI_UNAVAILABLE_MESSAGE = (
    "The AI drafting service is unavailable right now. Please try again later."
)
AI_EMPTY_MESSAGE = "The email draft could not be generated."
DEFAULT_PROGRAM_HIGHLIGHTS: tuple[str, ...] = (
    "Great location",
    "Intensive English tuition",
    "Cultural activities",
)
