"""
Pagination endpoint.
"""

import logging

from fastapi import APIRouter

from core import is_image_only_page, paginate

from ..logging_config import log_timing
from ..requests import PaginateRequest
from ..state import get_config

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/paginate")
async def paginate_route(request: PaginateRequest) -> dict:
    """Split chapter markdown into pages."""
    settings = get_config().paginator
    with log_timing(logger, "Paginating chapter"):
        pages = paginate(
            request.content,
            lines_per_page=request.linesPerPage or settings.lines_per_page,
            chars_per_line=request.charsPerLine or settings.chars_per_line,
        )
    return {
        "pages": pages,
        "imageOnly": [is_image_only_page(page) for page in pages],
        "totalPages": len(pages),
    }
