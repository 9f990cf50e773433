"""Shared request body decoding and HTTP error builders for the API routers."""

import json
import logging
from typing import Any, Dict, List
from fastapi import HTTPException, Request, status

from portfolio_api.storage import DatabaseStorage, DuplicateSlugError

# Configure logging
logger = logging.getLogger(__name__)


async def json_body(request: Request) -> Any:
    """
    Dependency decoding the JSON request body.

    Runs as an ordinary dependency, so route-level dependencies such as the
    contact rate limit see the request before a malformed body is rejected.

    Returns:
        Any: Decoded body, or None when the body is empty

    Raises:
        HTTPException: 400 if the body is not valid JSON
    """
    body = await request.body()
    if not body:
        return None

    try:
        return json.loads(body)
    except ValueError:
        logger.warning(f"Malformed JSON body on {request.method} {request.url.path}")
        raise invalid_data_error("Invalid request", [{
            "field": "body",
            "message": "Body must be valid JSON",
            "type": "json_invalid",
        }])


def invalid_data_error(message: str, details: List[Dict[str, str]]) -> HTTPException:
    """400 carrying field-level validation details."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": message, "details": details}
    )


def duplicate_slug_error(message: str, exc: DuplicateSlugError) -> HTTPException:
    logger.warning(f"Duplicate slug rejected: {exc.slug}")
    return invalid_data_error(message, [{
        "field": "slug",
        "message": "Slug already exists",
        "type": "unique",
    }])


def server_error(storage: DatabaseStorage, message: str, exc: Exception) -> HTTPException:
    """
    Log a persistence failure and hide it behind a generic 500.

    The session is rolled back so it can be closed cleanly.
    """
    logger.error(f"{message}: {exc}")
    storage.db.rollback()
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message
    )
