"""
Link Routes - Web surface for inbound links

Serves the pages that inbound links land on when the app is not installed or
universal-link verification has not caught up yet:
- /property/{id}: canonical web page of a listing
- /property.html, /deeplink-handler.html: redirector pages that try the
  native app link first and fall back to the web page

Also exposes the classifier and the listing fetch as JSON endpoints.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from loguru import logger
from pydantic import BaseModel

from core.deeplink import AuthIntent, LinkClassifier, LinkPatterns
from listings import BasePropertySource, PropertyFetchError
from utils.formatting import format_area, format_price


# =============================================================================
# Router Setup
# =============================================================================

TEMPLATES_DIR = Path(__file__).parent / "templates"

router = APIRouter(tags=["links"])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["price"] = format_price
templates.env.filters["area"] = format_area


def get_source(request: Request) -> BasePropertySource:
    return request.app.state.property_source


def get_patterns(request: Request) -> LinkPatterns:
    return request.app.state.link_patterns


def get_link_classifier(request: Request) -> LinkClassifier:
    return request.app.state.link_classifier


# =============================================================================
# API Request Models
# =============================================================================


class ClassifyRequest(BaseModel):
    """Request body for link classification."""
    url: str


# =============================================================================
# JSON API
# =============================================================================


@router.post("/api/links/classify")
async def classify_link(request: Request, body: ClassifyRequest):
    """Classify a raw link. Auth tokens are never echoed back."""
    intent = get_link_classifier(request).classify(body.url)
    if isinstance(intent, AuthIntent):
        return intent.to_dict(include_tokens=False)
    return intent.to_dict()


@router.get("/api/properties/{property_id}")
async def get_property(request: Request, property_id: str):
    """Get a listing by id."""
    try:
        listing = await get_source(request).get_property(property_id)
    except PropertyFetchError as e:
        logger.warning(f"Listing fetch failed for {property_id}: {e.reason}")
        raise HTTPException(status_code=502, detail="Listing backend unavailable")

    if listing is None:
        raise HTTPException(status_code=404, detail="Property not found")

    return listing.to_dict()


# =============================================================================
# Pages
# =============================================================================


@router.get("/property/{property_id}", response_class=HTMLResponse)
async def property_page(request: Request, property_id: str):
    """Server-rendered listing page (canonical web link target)."""
    patterns = get_patterns(request)
    try:
        listing = await get_source(request).get_property(property_id)
    except PropertyFetchError as e:
        logger.warning(f"Listing fetch failed for {property_id}: {e.reason}")
        raise HTTPException(status_code=502, detail="Listing backend unavailable")

    return templates.TemplateResponse(
        request,
        "property.html",
        {
            "title": listing.title if listing else "Oglas nije pronađen",
            "listing": listing,
            "property_id": property_id,
            "app_link": patterns.app_link(property_id),
        },
        status_code=200 if listing else 404,
    )


def _redirector(request: Request, property_id: Optional[str]) -> HTMLResponse:
    patterns = get_patterns(request)
    property_id = (property_id or "").strip()
    if not property_id:
        return templates.TemplateResponse(
            request,
            "deeplink_handler.html",
            {"title": "DomGo", "property_id": None},
            status_code=400,
        )

    return templates.TemplateResponse(
        request,
        "deeplink_handler.html",
        {
            "title": "DomGo",
            "property_id": property_id,
            "app_link": patterns.app_link(property_id),
            "web_link": patterns.web_link(property_id),
        },
    )


@router.get("/property.html", response_class=HTMLResponse)
async def property_landing(request: Request, id: Optional[str] = Query(default=None)):
    """Landing page shared from the app; redirects into the app."""
    return _redirector(request, id)


@router.get("/deeplink-handler.html", response_class=HTMLResponse)
async def deeplink_handler(request: Request, id: Optional[str] = Query(default=None)):
    """Generic deep-link handler page."""
    return _redirector(request, id)
