"""Proposal document rendering."""
from __future__ import annotations

import re
from datetime import date

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup, escape

from .constants import APP_NAME
from .quotes import currency_symbol
from .schemas import Branding, Program, QuoteDetails

PROPOSAL_TEMPLATE = "proposal.html"

_EMPHASIS_RE = re.compile(r"\*\*(.+?)\*\*")


def emphasis(text: str) -> Markup:
    """Escape ``text`` and turn ``**bold**`` runs into ``<strong>`` tags."""

    return Markup(_EMPHASIS_RE.sub(r"<strong>\1</strong>", str(escape(text))))


_ENV = Environment(
    loader=PackageLoader("quotedesk", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    enable_async=False,
)
_ENV.filters["emphasis"] = emphasis


def render_proposal(
    program: Program,
    quote: QuoteDetails,
    branding: Branding,
    issued_on: date | None = None,
) -> str:
    """Render a printable proposal for ``program`` using the given branding."""

    template = _ENV.get_template(PROPOSAL_TEMPLATE)
    return template.render(
        program=program,
        quote=quote,
        branding=branding,
        banner=program.banner_image or branding.banner_image,
        currency=currency_symbol(program),
        issued_on=issued_on or date.today(),
        app_name=APP_NAME,
    )
