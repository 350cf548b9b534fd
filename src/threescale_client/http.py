"""HTTP transport used by the 3scale client."""

from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple, Protocol

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .exceptions import TransportError

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpResponse(NamedTuple):
    """Status code and raw body of a completed request.

    Unpacks as ``(status_code, body)``; transports may return a plain
    two-item tuple instead.
    """

    status_code: int
    body: str


class Transport(Protocol):
    """What the client needs from an HTTP implementation.

    Implementations return every HTTP status as-is and raise
    `TransportError` only when no response was received.
    """

    def get(self, url: str) -> HttpResponse: ...

    def post(self, url: str, body: str) -> HttpResponse: ...


class RequestsTransport:
    """`Transport` backed by a `requests.Session`."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float | tuple[float, float] | None = 30.0,
        verify_ssl: bool | str = True,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._verify = verify_ssl
        self._headers = dict(default_headers or {})
        if isinstance(verify_ssl, bool) and not verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    def get(self, url: str) -> HttpResponse:
        return self._send("GET", url, headers=dict(self._headers))

    def post(self, url: str, body: str) -> HttpResponse:
        headers = dict(self._headers)
        headers["Content-Type"] = FORM_CONTENT_TYPE
        return self._send("POST", url, headers=headers, data=body)

    def close(self) -> None:
        self._session.close()

    def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        data: str | None = None,
    ) -> HttpResponse:
        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                data=data,
                timeout=self._timeout,
                verify=self._verify,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise TransportError(
                f"Failed to communicate with 3scale: {reason}", details=reason
            ) from exc
        return HttpResponse(status_code=response.status_code, body=response.text)


__all__ = ["HttpResponse", "Transport", "RequestsTransport", "FORM_CONTENT_TYPE"]
