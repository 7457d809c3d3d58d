import re
from typing import Optional, Union

_SENTINEL = object()

_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1

# Sign, then a digit, then digits/letters/underscores; int() decides the rest.
_INTEGER_SHAPE = re.compile(r"[+-]?[0-9][0-9A-Za-z_]*")


def try_parse_integer(token: str):
    """Interpret ``token`` as a base-prefixed 64-bit integer literal.

    Accepts decimal, ``0x``/``0o``/``0b`` prefixes and C-style leading-zero
    octal (``017`` is 15). Returns `_SENTINEL` when the token is not an
    integer literal or does not fit in a signed 64-bit value.
    """
    if not _INTEGER_SHAPE.fullmatch(token):
        return _SENTINEL

    body = token.lstrip("+-")
    try:
        if len(body) > 1 and body[0] == "0" and (body[1].isdigit() or body[1] == "_"):
            value = int(token, 8)
        else:
            value = int(token, 0)
    except ValueError:
        return _SENTINEL

    if value < _INT_MIN or value > _INT_MAX:
        return _SENTINEL
    return value


def resolve_param(token: str) -> Union[int, str]:
    """Integer literals become ints; anything else stays an opaque token."""
    value = try_parse_integer(token)
    if value is _SENTINEL:
        return token
    return value


def extract_string_literal(text: str) -> Optional[str]:
    """Return the text between the first two double quotes, or ``None``.

    Escaped quotes are not recognised: ``"a\\"b"`` yields ``a\\``.
    """
    start = text.find('"')
    if start < 0:
        return None
    end = text.find('"', start + 1)
    if end < 0:
        return None
    return text[start + 1:end]


__all__ = ["try_parse_integer", "resolve_param", "extract_string_literal"]
