"""Jinja2 templates shared by routes and exception handlers."""

import re
from pathlib import Path
from urllib.parse import quote

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

_NON_WORD = re.compile(r"[\W_]+")

# Segments that follow /images/{id}/ and name an action rather than a title
RESERVED_SEGMENTS = frozenset({"edit", "delete"})


def title_slug(title: str) -> str:
    """URL segment for an image title: ``"Sunset/Goa"`` -> ``"sunset-goa"``.

    Images are looked up by id; the segment is only for readability.
    """
    slug = _NON_WORD.sub("-", title).strip("-").lower() or "image"
    if slug in RESERVED_SEGMENTS:
        slug = f"{slug}-image"
    return quote(slug, safe="-")


def image_url(image) -> str:
    """Path of an image's page, e.g. ``/images/4/sunset-over-goa``."""
    return f"/images/{image.id}/{title_slug(image.title)}"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["image_url"] = image_url
