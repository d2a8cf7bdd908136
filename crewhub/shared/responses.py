"""Response envelope and pagination helpers shared by all routers"""

from typing import Any, Optional

from ..config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    return {"success": True, "data": data, "message": message}


def error_response(error: str, details: Any = None) -> dict:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body


def normalize_pagination(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to 1..MAX_PAGE_SIZE"""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else DEFAULT_PAGE_SIZE
    return page, min(limit, MAX_PAGE_SIZE)


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": (total + limit - 1) // limit if limit else 0,
    }
