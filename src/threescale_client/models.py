"""Typed results returned by the 3scale client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class UsageReport:
    """Consumption of one metric over one period, against its limit."""

    metric: str
    period: str
    period_start: datetime
    period_end: datetime
    current_value: int
    max_value: int
    exceeded: bool = False


@dataclass(frozen=True, slots=True)
class AuthorizeResponse:
    """Outcome of an authorize, oauth_authorize or authrep call.

    ``success`` is false on business failures, with ``error_code`` and/or
    ``error_message`` populated. OAuth authorizations rejected for exceeded
    limits still read ``success=True``; check ``error_message`` as well.
    """

    success: bool
    plan: str | None = None
    app_id: str | None = None
    app_key: str | None = None
    redirect_url: str | None = None
    usage_reports: tuple[UsageReport, ...] = ()
    error_code: str | None = None
    error_message: str | None = None

    @property
    def has_exceeded(self) -> bool:
        return any(report.exceeded for report in self.usage_reports)

    def find_usage_report(self, metric: str, period: str) -> UsageReport | None:
        for report in self.usage_reports:
            if report.metric == metric and report.period == period:
                return report
        return None


@dataclass(frozen=True, slots=True)
class ReportResponse:
    """Outcome of a report call."""

    success: bool
    error_code: str | None = None
    error_message: str | None = None


__all__ = ["UsageReport", "AuthorizeResponse", "ReportResponse"]
