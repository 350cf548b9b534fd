"""Configuration helpers for the 3scale client."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_HOST = "su1.3scale.net"
DEFAULT_SCHEME = "http"

ENV_PROVIDER_KEY = "THREESCALE_PROVIDER_KEY"
ENV_HOST = "THREESCALE_HOST"
ENV_SCHEME = "THREESCALE_SCHEME"
ENV_TIMEOUT = "THREESCALE_TIMEOUT"
ENV_VERIFY_SSL = "THREESCALE_VERIFY_SSL"

_FALSEY = {"0", "false", "no", "off"}


@dataclass(slots=True)
class ClientConfig:
    """Typed configuration for `ThreeScaleClient`."""

    provider_key: str
    host: str = DEFAULT_HOST
    scheme: str = DEFAULT_SCHEME
    timeout: float = 30.0
    verify_ssl: bool | str = True
    default_headers: Mapping[str, str] | None = None

    def base_url(self) -> str:
        return f"{self.scheme}://{self.host.rstrip('/')}"

    def endpoint_url(self, path: str, query: str | None = None) -> str:
        url = f"{self.base_url()}/{path.lstrip('/')}"
        if query:
            url = f"{url}?{query}"
        return url

    def resolved_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/xml"}
        if self.default_headers:
            headers.update(self.default_headers)
        return headers

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a config from ``THREESCALE_*`` environment variables."""

        env = os.environ if environ is None else environ
        provider_key = (env.get(ENV_PROVIDER_KEY) or "").strip()
        if not provider_key:
            raise ConfigurationError(f"{ENV_PROVIDER_KEY} must be set")

        timeout_raw = env.get(ENV_TIMEOUT)
        timeout = 30.0
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{ENV_TIMEOUT} must be a number, got {timeout_raw!r}"
                ) from exc

        scheme = (env.get(ENV_SCHEME) or DEFAULT_SCHEME).strip().lower()
        if scheme not in {"http", "https"}:
            raise ConfigurationError(f"{ENV_SCHEME} must be http or https, got {scheme!r}")

        # Accept common truthy/falsey representations (1/0, true/false, yes/no).
        verify_raw = env.get(ENV_VERIFY_SSL)
        verify_ssl = verify_raw is None or verify_raw.strip().lower() not in _FALSEY

        return cls(
            provider_key=provider_key,
            host=(env.get(ENV_HOST) or DEFAULT_HOST).strip(),
            scheme=scheme,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )
