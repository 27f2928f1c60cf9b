"""Pydantic schemas powering the Quote Desk API."""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .constants import MAX_TIMETABLE_IMAGES, Portal


class CamelModel(BaseModel):
    """Models exchanged with the front end use camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccommodationType(str, Enum):
    RESIDENCE = "Residence"
    FAMILY_STAY = "Family-Stay"
    HOTEL = "Hotel"
    CAMPUS = "Campus"


class Program(CamelModel):
    id: str = Field("", description="Durable identity; empty until persisted")
    name: str = Field(..., min_length=1)
    location: str = ""
    city: str = ""
    country: str = ""
    age_range: str = ""
    dates: str = ""
    duration: str = ""
    accommodation_type: AccommodationType = AccommodationType.RESIDENCE
    accommodation_details: str = ""
    included_services: List[str] = Field(default_factory=list)
    young_learners_goals: List[str] = Field(default_factory=list)
    description: str = ""
    hero_image: str = ""
    banner_image: Optional[str] = None
    gallery_images: List[str] = Field(default_factory=list)
    timetable_images: List[str] = Field(default_factory=list, max_length=MAX_TIMETABLE_IMAGES)
    base_price_note: str = ""

    @field_validator(
        "included_services",
        "young_learners_goals",
        "gallery_images",
        "timetable_images",
        mode="before",
    )
    @classmethod
    def normalize_lists(cls, value: Any) -> List[str]:
        if value is None:
            return []
        return value


class PortalInfo(BaseModel):
    portal: Portal
    label: str
    program_count: Optional[int] = None


class RestoreResult(BaseModel):
    portal: Portal
    restored: bool


class PriceType(str, Enum):
    NET = "Net"
    GROSS = "Gross"


class TransferType(str, Enum):
    SOLO = "Solo"
    MULTI_PERSON = "Multi-Person"
    ACCOMPANIED_UM = "Accompanied-UM"


class QuoteDetails(CamelModel):
    agency_name: str = Field(..., min_length=1)
    consultant_name: str = Field(..., min_length=1)
    student_count: str = ""
    group_leader_count: str = "0"
    price_per_student: str = ""
    price_type: PriceType = PriceType.GROSS
    extra_leader_price: str = ""
    duration_weeks: str = ""
    notes: str = ""
    transfer_airport: Optional[str] = None
    transfer_type: Optional[TransferType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("transfer_airport", mode="before")
    @classmethod
    def blank_airport_is_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("end_date")
    @classmethod
    def validate_dates(cls, value: Optional[date], info: ValidationInfo) -> Optional[date]:
        start = info.data.get("start_date")
        if value and start and value < start:
            raise ValueError("end_date cannot be before start_date")
        return value


class AirportOptions(BaseModel):
    region: str
    airports: List[str]


class Branding(CamelModel):
    """Logo and banner references applied to every proposal."""

    logo_image: Optional[str] = None
    banner_image: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class UploadedImage(CamelModel):
    url: str
    content_type: str
    width: int
    height: int


class ImageBatchResult(CamelModel):
    program: Program
    uploaded: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)


class EmailDraft(BaseModel):
    draft: str


class ProgramHighlights(BaseModel):
    highlights: List[str]
