"""Parse 3scale XML payloads into typed results."""

from __future__ import annotations

from datetime import datetime, timezone
from xml.etree import ElementTree

from .exceptions import UnexpectedResponseError
from .models import AuthorizeResponse, ReportResponse, UsageReport

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def parse_timestamp(text: str) -> datetime:
    """Parse ``2010-04-26 00:00:00 +0000`` into an aware UTC datetime."""

    try:
        parsed = datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise UnexpectedResponseError(f"Invalid timestamp {text!r}", details=text) from exc
    return parsed.astimezone(timezone.utc)


def parse_authorize(body: str, *, oauth: bool = False) -> AuthorizeResponse:
    """Parse a ``<status>`` or ``<error>`` document.

    For ``<status>`` roots ``success`` mirrors ``<authorized>``, except in the
    OAuth flow where any ``<status>`` document reads as a success and a
    rejection only shows up through ``error_message``.
    """

    root = _parse_document(body)
    if root.tag == "error":
        code, message = _error_fields(root, body)
        return AuthorizeResponse(success=False, error_code=code, error_message=message)
    if root.tag != "status":
        raise UnexpectedResponseError(f"Unexpected root element <{root.tag}>", details=body)

    authorized = _parse_bool(_required_text(root, "authorized", body), body)
    application = root.find("application")
    return AuthorizeResponse(
        success=True if oauth else authorized,
        plan=_optional_text(root, "plan"),
        app_id=_optional_text(application, "id"),
        app_key=_optional_text(application, "key"),
        redirect_url=_optional_text(application, "redirect_url"),
        usage_reports=_parse_usage_reports(root, body),
        error_message=_optional_text(root, "reason"),
    )


def parse_report_error(body: str) -> ReportResponse:
    """Parse the ``<error>`` document returned for a rejected report."""

    root = _parse_document(body)
    if root.tag != "error":
        raise UnexpectedResponseError(f"Unexpected root element <{root.tag}>", details=body)
    code, message = _error_fields(root, body)
    return ReportResponse(success=False, error_code=code, error_message=message)


def _parse_document(body: str) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(body)
    except ElementTree.ParseError as exc:
        raise UnexpectedResponseError(f"Response is not valid XML: {exc}", details=body) from exc


def _error_fields(root: ElementTree.Element, body: str) -> tuple[str, str]:
    code = root.get("code")
    if not code:
        raise UnexpectedResponseError("Error element has no code attribute", details=body)
    return code, (root.text or "").strip()


def _parse_usage_reports(root: ElementTree.Element, body: str) -> tuple[UsageReport, ...]:
    container = root.find("usage_reports")
    if container is None:
        return ()
    reports = []
    for element in container.findall("usage_report"):
        metric = element.get("metric")
        period = element.get("period")
        if not metric or not period:
            raise UnexpectedResponseError(
                "usage_report is missing its metric or period attribute", details=body
            )
        reports.append(
            UsageReport(
                metric=metric,
                period=period,
                period_start=parse_timestamp(_required_text(element, "period_start", body)),
                period_end=parse_timestamp(_required_text(element, "period_end", body)),
                current_value=_parse_int(_required_text(element, "current_value", body), body),
                max_value=_parse_int(_required_text(element, "max_value", body), body),
                exceeded=_parse_bool(element.get("exceeded", "false"), body),
            )
        )
    return tuple(reports)


def _required_text(parent: ElementTree.Element, tag: str, body: str) -> str:
    text = _optional_text(parent, tag)
    if text is None:
        raise UnexpectedResponseError(f"Missing <{tag}> in <{parent.tag}>", details=body)
    return text


def _optional_text(parent: ElementTree.Element | None, tag: str) -> str | None:
    if parent is None:
        return None
    element = parent.find(tag)
    if element is None:
        return None
    return (element.text or "").strip()


def _parse_bool(text: str, body: str) -> bool:
    normalized = text.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise UnexpectedResponseError(f"Expected true/false, got {text!r}", details=body)


def _parse_int(text: str, body: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise UnexpectedResponseError(f"Expected an integer, got {text!r}", details=body) from exc


__all__ = ["parse_authorize", "parse_report_error", "parse_timestamp", "TIMESTAMP_FORMAT"]
