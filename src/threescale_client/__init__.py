"""High-level 3scale client entrypoints."""
from .client import ThreeScaleClient
from .config import DEFAULT_HOST, ClientConfig
from .exceptions import InvalidInputError, ServerError, ThreeScaleError, UnexpectedResponseError
from .models import AuthorizeResponse, ReportResponse, UsageReport
from .params import ParameterMap, ValueKind

__all__ = [
    "ThreeScaleClient",
    "ClientConfig",
    "DEFAULT_HOST",
    "ParameterMap",
    "ValueKind",
    "AuthorizeResponse",
    "ReportResponse",
    "UsageReport",
    "ThreeScaleError",
    "InvalidInputError",
    "ServerError",
    "UnexpectedResponseError",
]
