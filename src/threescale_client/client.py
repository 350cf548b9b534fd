"""High-level 3scale Service Management client."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .config import DEFAULT_HOST, DEFAULT_SCHEME, ClientConfig
from .encoding import encode_query
from .exceptions import InvalidInputError
from .http import RequestsTransport, Transport
from .models import AuthorizeResponse, ReportResponse
from .params import ParameterMap
from .responses import classify_authorize, classify_report

AUTHORIZE_PATH = "/transactions/authorize.xml"
OAUTH_AUTHORIZE_PATH = "/transactions/oauth_authorize.xml"
AUTHREP_PATH = "/transactions/authrep.xml"
REPORT_PATH = "/transactions.xml"

logger = logging.getLogger(__name__)


class ThreeScaleClient:
    """Authorize and report API traffic against a 3scale provider account."""

    def __init__(
        self,
        provider_key: str,
        host: str = DEFAULT_HOST,
        *,
        transport: Transport | None = None,
        scheme: str = DEFAULT_SCHEME,
        timeout: float = 30.0,
        verify_ssl: bool | str = True,
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        if not provider_key:
            raise InvalidInputError("A provider key is required")
        self.config = ClientConfig(
            provider_key=provider_key,
            host=host,
            scheme=scheme,
            timeout=timeout,
            verify_ssl=verify_ssl,
            default_headers=default_headers,
        )
        self._transport: Transport = transport or RequestsTransport(
            timeout=timeout,
            verify_ssl=verify_ssl,
            default_headers=self.config.resolved_headers(),
        )

    @classmethod
    def from_config(
        cls, config: ClientConfig, *, transport: Transport | None = None
    ) -> ThreeScaleClient:
        return cls(
            config.provider_key,
            config.host,
            transport=transport,
            scheme=config.scheme,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            default_headers=config.default_headers,
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        transport: Transport | None = None,
    ) -> ThreeScaleClient:
        return cls.from_config(ClientConfig.from_env(environ), transport=transport)

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> ThreeScaleClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def provider_key(self) -> str:
        return self.config.provider_key

    # Public API --------------------------------------------------------------
    def authorize(self, params: ParameterMap | None = None) -> AuthorizeResponse:
        """Check whether an application may call the API, without reporting usage."""

        query = encode_query(self._request_params(params))
        status_code, body = self._get(AUTHORIZE_PATH, query)
        return classify_authorize(status_code, body)

    def oauth_authorize(self, params: ParameterMap | None = None) -> AuthorizeResponse:
        """Authorize an OAuth application and fetch its key and redirect URL.

        A request rejected for exceeded limits still comes back with
        ``success=True``; inspect ``error_message`` too.
        """

        query = encode_query(self._request_params(params))
        status_code, body = self._get(OAUTH_AUTHORIZE_PATH, query)
        return classify_authorize(status_code, body, oauth=True)

    def authrep(self, params: ParameterMap | None = None) -> AuthorizeResponse:
        """Authorize and report in one call; usage defaults to one hit."""

        merged = self._request_params(
            with_default_usage(params if params is not None else ParameterMap())
        )
        query = encode_query(merged, escape_brackets=True)
        status_code, body = self._get(AUTHREP_PATH, query)
        return classify_authorize(status_code, body)

    def report(self, *transactions: ParameterMap | list[ParameterMap] | None) -> ReportResponse:
        """Report usage for one or more transactions.

        Accepts maps as positional arguments or a single list of maps. Each
        transaction without a ``usage`` entry is reported as one hit.
        """

        entries = _normalize_transactions(transactions)
        if not entries:
            raise InvalidInputError("No transactions to report")

        payload = ParameterMap()
        payload.add("provider_key", self.provider_key)
        payload.add("transactions", [with_default_usage(entry) for entry in entries])
        body = encode_query(payload)

        url = self.config.endpoint_url(REPORT_PATH)
        self._log_request("POST", REPORT_PATH, len(entries))
        status_code, response_body = self._transport.post(url, body)
        return classify_report(status_code, response_body)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    # Internal helpers -------------------------------------------------------
    def _request_params(self, params: ParameterMap | None) -> ParameterMap:
        merged = ParameterMap()
        merged.add("provider_key", self.provider_key)
        if params is not None:
            merged.update(params)
            # The configured key wins over one supplied by the caller.
            merged.add("provider_key", self.provider_key)
        return merged

    def _get(self, path: str, query: str) -> tuple[int, str]:
        url = self.config.endpoint_url(path, query)
        self._log_request("GET", path)
        status_code, body = self._transport.get(url)
        return status_code, body

    def _log_request(self, method: str, path: str, transactions: int | None = None) -> None:
        if transactions is None:
            logger.info("3scale request %s %s (host=%s)", method, path, self.host)
        else:
            logger.info(
                "3scale request %s %s (host=%s, transactions=%d)",
                method,
                path,
                self.host,
                transactions,
            )


def with_default_usage(params: ParameterMap) -> ParameterMap:
    """Return ``params`` with ``usage[hits]=1`` appended when no usage is given.

    The argument is never modified; a copy is returned when a default is added.
    """

    if "usage" in params:
        return params
    usage = ParameterMap()
    usage.add("hits", "1")
    augmented = params.copy()
    augmented.add("usage", usage)
    return augmented


def _normalize_transactions(
    transactions: tuple[ParameterMap | list[ParameterMap] | None, ...],
) -> list[ParameterMap]:
    if len(transactions) == 1 and isinstance(transactions[0], (list, tuple)):
        transactions = tuple(transactions[0])
    entries = [entry for entry in transactions if entry is not None]
    for entry in entries:
        if not isinstance(entry, ParameterMap):
            raise InvalidInputError(
                f"Transactions must be ParameterMap instances, got {type(entry).__name__}"
            )
    return entries


__all__ = [
    "ThreeScaleClient",
    "with_default_usage",
    "AUTHORIZE_PATH",
    "OAUTH_AUTHORIZE_PATH",
    "AUTHREP_PATH",
    "REPORT_PATH",
]
