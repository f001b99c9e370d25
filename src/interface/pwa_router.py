"""PWA shell: web manifest and the HTML page that boots the client."""

import logging
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from src.core.config import constants, settings


logger = logging.getLogger(__name__)

router = APIRouter(tags=["pwa"])

templates = Jinja2Templates(directory=str(constants.TEMPLATES_DIR))

MANIFEST_MEDIA_TYPE = "application/manifest+json"
CLIENT_SCRIPT_PATH = "/dist/main.js"
THEME_COLOR = "#D97706"
BACKGROUND_COLOR = "#FEF3C7"

ICON_SVG_192 = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 192 192">
  <rect width="192" height="192" fill="#D97706" rx="24"/>
  <circle cx="96" cy="80" r="35" fill="#8B4513"/>
  <circle cx="96" cy="96" r="30" fill="#A0522D"/>
  <circle cx="96" cy="110" r="25" fill="#CD853F"/>
  <circle cx="85" cy="75" r="3" fill="white"/>
  <circle cx="107" cy="75" r="3" fill="white"/>
  <path d="M85 85 Q96 95 107 85" stroke="white" stroke-width="2" fill="none"/>
</svg>"""

ICON_SVG_512 = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 512 512">
  <rect width="512" height="512" fill="#D97706" rx="64"/>
  <circle cx="256" cy="200" r="90" fill="#8B4513"/>
  <circle cx="256" cy="256" r="80" fill="#A0522D"/>
  <circle cx="256" cy="300" r="65" fill="#CD853F"/>
  <circle cx="230" cy="190" r="8" fill="white"/>
  <circle cx="282" cy="190" r="8" fill="white"/>
  <path d="M230 220 Q256 240 282 220" stroke="white" stroke-width="6" fill="none"/>
</svg>"""


def svg_data_uri(svg: str) -> str:
    """Inline an SVG document as a data URI (percent-encoded like encodeURIComponent)."""
    return "data:image/svg+xml;charset=utf-8," + quote(svg, safe="-_.!~*'()")


def build_manifest() -> dict[str, Any]:
    """Build the web app manifest with inlined icons."""
    return {
        "name": "Tender - Chore Tracker",
        "short_name": "Tender",
        "display": "standalone",
        "orientation": "portrait",
        "background_color": BACKGROUND_COLOR,
        "theme_color": THEME_COLOR,
        "description": "A simple chore tracker for your household.",
        "start_url": "/",
        "categories": ["productivity", "utilities"],
        "icons": [
            {
                "src": svg_data_uri(ICON_SVG_192),
                "sizes": "192x192",
                "type": "image/svg+xml",
                "purpose": "any maskable",
            },
            {
                "src": svg_data_uri(ICON_SVG_512),
                "sizes": "512x512",
                "type": "image/svg+xml",
                "purpose": "any maskable",
            },
        ],
    }


@router.get("/manifest.json")
async def get_manifest() -> JSONResponse:
    """Serve the web app manifest."""
    return JSONResponse(content=build_manifest(), media_type=MANIFEST_MEDIA_TYPE)


@router.get("/{full_path:path}", include_in_schema=False)
async def get_app_shell(request: Request, full_path: str) -> Response:
    """Render the single-page client shell for every other path."""
    logger.debug("serving_app_shell", extra={"path": full_path})
    return templates.TemplateResponse(
        request,
        name="index.html",
        context={
            "app_version": settings.app_version,
            "client_script": CLIENT_SCRIPT_PATH,
            "theme_color": THEME_COLOR,
        },
    )
