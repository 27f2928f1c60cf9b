"""SQLAlchemy models for the Quote Desk backend."""
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from .database import Base


def _new_identity() -> str:
    return str(uuid4())


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Program(Base, TimestampMixin):
    __tablename__ = "programs"

    # Insertion sequence; ``id`` is the durable identity exposed to clients.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), nullable=False, unique=True, index=True, default=_new_identity)
    portal_type = Column(String(32), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=False, default="")
    city = Column(String(120), nullable=False, default="")
    country = Column(String(120), nullable=False, default="")
    age_range = Column(String(60), nullable=False, default="")
    dates = Column(Text, nullable=False, default="")
    duration = Column(String(120), nullable=False, default="")
    accommodation_type = Column(String(32), nullable=False, default="Residence")
    accommodation_details = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    hero_image = Column(Text, nullable=False, default="")
    banner_image = Column(Text, nullable=True)
    base_price_note = Column(String(200), nullable=False, default="")
    included_services = Column(JSON, nullable=False, default=list)
    young_learners_goals = Column(JSON, nullable=False, default=list)
    gallery_images = Column(JSON, nullable=False, default=list)
    timetable_images = Column(JSON, nullable=False, default=list)


class BrandingSettings(Base, TimestampMixin):
    __tablename__ = "branding_settings"

    id = Column(Integer, primary_key=True)
    logo_image = Column(Text, nullable=True)
    banner_image = Column(Text, nullable=True)
