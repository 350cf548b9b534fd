"""Classify raw HTTP outcomes into typed results or server errors."""

from __future__ import annotations

import logging

from .exceptions import ServerError
from .models import AuthorizeResponse, ReportResponse
from .parsing import parse_authorize, parse_report_error

logger = logging.getLogger(__name__)


def ensure_not_server_error(status_code: int, body: str) -> None:
    """Raise `ServerError` for 5xx statuses, keeping the raw body."""

    if status_code < 500:
        return
    logger.warning("3scale server error %s: %s", status_code, body[:200])
    raise ServerError(
        f"3scale server error {status_code}: {body[:200]}",
        status_code=status_code,
        details=body,
    )


def classify_authorize(status_code: int, body: str, *, oauth: bool = False) -> AuthorizeResponse:
    """Turn an authorize/oauth_authorize/authrep reply into an `AuthorizeResponse`.

    200 replies carry a ``<status>`` document, 403 an ``<error>`` document and
    409 a ``<status>`` document whose ``<reason>`` explains the denial. Both
    shapes are accepted on any status below 500.
    """

    ensure_not_server_error(status_code, body)
    response = parse_authorize(body, oauth=oauth)
    logger.debug(
        "3scale authorize status=%s success=%s error_code=%s",
        status_code,
        response.success,
        response.error_code,
    )
    return response


def classify_report(status_code: int, body: str) -> ReportResponse:
    """Turn a report reply into a `ReportResponse`; 2xx bodies are ignored."""

    ensure_not_server_error(status_code, body)
    if 200 <= status_code < 300:
        logger.debug("3scale report accepted with status %s", status_code)
        return ReportResponse(success=True)
    response = parse_report_error(body)
    logger.debug(
        "3scale report rejected status=%s error_code=%s", status_code, response.error_code
    )
    return response


__all__ = ["classify_authorize", "classify_report", "ensure_not_server_error"]
