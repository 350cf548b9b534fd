"""Flatten parameter maps into the nested-bracket query encoding."""

from __future__ import annotations

from urllib.parse import quote, quote_plus

from .params import ParameterMap, ValueKind

_SCALAR_KINDS = (ValueKind.STRING, ValueKind.INTEGER)


def flatten_params(params: ParameterMap, *, bracket_root: bool = False) -> list[tuple[str, str]]:
    """Return ``(path, value)`` pairs in insertion order.

    Top-level scalars keep their bare key (``app_id``). Nested maps and
    arrays append one ``[segment]`` per level, arrays using the zero-based
    element position (``transactions[0][usage][hits]``). With
    ``bracket_root`` the first segment of a nested path is bracketed too
    (``[usage][hits]``), which is the form the authrep endpoint expects.
    """

    pairs: list[tuple[str, str]] = []
    for key in params.keys():
        kind = params.type_of(key)
        if kind in _SCALAR_KINDS:
            pairs.append((key, params.string_value(key)))
            continue
        root = f"[{key}]" if bracket_root else key
        _walk_value(params, key, root, pairs)
    return pairs


def encode_query(params: ParameterMap, *, escape_brackets: bool = False) -> str:
    """Serialize ``params`` into a query string or form body.

    Values are always percent-encoded with ``+`` for spaces. Keys keep
    their brackets literal and percent-encode everything else, unless
    ``escape_brackets`` is set, in which case the bracket-rooted path is
    percent-encoded entirely (``%5Busage%5D%5Bhits%5D=1``).
    """

    pairs = flatten_params(params, bracket_root=escape_brackets)
    segments = []
    for path, value in pairs:
        encoded_key = quote(path, safe="" if escape_brackets else "[]")
        segments.append(f"{encoded_key}={quote_plus(value, safe='')}")
    return "&".join(segments)


def _walk(params: ParameterMap, prefix: str, pairs: list[tuple[str, str]]) -> None:
    for key in params.keys():
        _walk_value(params, key, f"{prefix}[{key}]", pairs)


def _walk_value(
    params: ParameterMap, key: str, path: str, pairs: list[tuple[str, str]]
) -> None:
    kind = params.type_of(key)
    if kind in _SCALAR_KINDS:
        pairs.append((path, params.string_value(key)))
    elif kind is ValueKind.MAP:
        _walk(params.map_value(key), path, pairs)
    elif kind is ValueKind.ARRAY:
        for index, member in enumerate(params.array_value(key)):
            _walk(member, f"{path}[{index}]", pairs)


__all__ = ["flatten_params", "encode_query"]
