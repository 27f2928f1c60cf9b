"""AI drafting collaborator for outreach emails and program highlights."""
from __future__ import annotations

import json
import logging
import os
from typing import Protocol

import requests

from .constants import AI_EMPTY_MESSAGE, AI_UNAVAILABLE_MESSAGE, DEFAULT_PROGRAM_HIGHLIGHTS
from .exceptions import AIServiceError
from .schemas import Program, QuoteDetails

logger = logging.getLogger(__name__)

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
REQUEST_TIMEOUT_SECONDS = 30


class DraftingClient(Protocol):
    def generate(self, prompt: str, *, json_output: bool = False) -> str: ...


class GeminiClient:
    """Minimal ``generateContent`` client over plain HTTPS."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self.model = model or GEMINI_MODEL
        self.session = session or requests.Session()

    def generate(self, prompt: str, *, json_output: bool = False) -> str:
        if not self.api_key:
            raise AIServiceError("GEMINI_API_KEY is not configured")

        body: dict[str, object] = {"contents": [{"parts": [{"text": prompt}]}]}
        if json_output:
            body["generationConfig"] = {"responseMimeType": "application/json"}

        try:
            response = self.session.post(
                GEMINI_ENDPOINT.format(model=self.model),
                params={"key": self.api_key},
                json=body,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise AIServiceError(f"Drafting request failed: {exc}") from exc

        try:
            parts = payload["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AIServiceError("Drafting response had no candidates") from exc
        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise AIServiceError("Drafting response parts were malformed")
        return "".join(str(part.get("text") or "") for part in parts)


def build_email_prompt(program: Program, quote: QuoteDetails) -> str:
    return f"""
You are a professional study-abroad education consultant.
Using the details below, write a polite, professional and persuasive email draft
on behalf of the agency and consultant, to be sent to a parent or corporate client.
The email should highlight the advantages of the programme.

Sender:
- Agency: {quote.agency_name}
- Contact: {quote.consultant_name}

Programme:
- Name: {program.name}
- Location: {program.location}, {program.city}, {program.country}
- Age range: {program.age_range}
- Accommodation: {program.accommodation_type.value} - {program.accommodation_details}

Quote:
- Students: {quote.student_count}
- Group leaders: {quote.group_leader_count}
- Duration: {quote.duration_weeks} weeks
- Total price per student: {quote.price_per_student} ({quote.price_type.value})
- Extra leader price: {quote.extra_leader_price or 'Not specified'}
- Notes: {quote.notes}

Write only the email body, with the subject line at the very top.
"""


def build_highlights_prompt(program: Program) -> str:
    return f"""
Write 3 short, punchy highlight bullet points for the summer school programme below.
Programme: {program.name} ({program.city}, {program.country})
Description: {program.description}
Included services: {', '.join(program.included_services)}

Answer as a JSON array: ["Highlight 1", "Highlight 2", "Highlight 3"]
"""


def generate_email_draft(
    program: Program, quote: QuoteDetails, client: DraftingClient | None = None
) -> str:
    """Draft an outreach email; failures come back as a readable message."""

    client = client or GeminiClient()
    try:
        text = client.generate(build_email_prompt(program, quote))
    except AIServiceError as exc:
        logger.error("Email drafting unavailable: %s", exc)
        return AI_UNAVAILABLE_MESSAGE
    return text.strip() or AI_EMPTY_MESSAGE


def generate_program_highlights(
    program: Program, client: DraftingClient | None = None
) -> list[str]:
    client = client or GeminiClient()
    try:
        text = client.generate(build_highlights_prompt(program), json_output=True)
        highlights = json.loads(text) if text else []
    except (AIServiceError, ValueError) as exc:
        logger.warning("Highlight generation failed for '%s': %s", program.name, exc)
        return list(DEFAULT_PROGRAM_HIGHLIGHTS)
    if not isinstance(highlights, list):
        return list(DEFAULT_PROGRAM_HIGHLIGHTS)
    return [str(item) for item in highlights]
