"""Rendering of expected and candidate values for descriptions and failures."""

from __future__ import annotations

import numpy as np

_SCIENTIFIC_LOW: int = -4
_SCIENTIFIC_HIGH: int = 6

_NAMED_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def format_float(value: float | np.floating) -> str:
    """Render *value* with the shortest digits that round-trip at its precision.

    Scientific notation is used when the decimal exponent is below -4 or at
    least 6; otherwise the number is positional and keeps a trailing ``.0``
    when integral.
    """
    number = value if isinstance(value, np.floating) else np.float64(value)
    if np.isnan(number):
        return "nan"
    if np.isinf(number):
        return "-inf" if number < 0 else "inf"
    scientific = np.format_float_scientific(number, unique=True, trim="-", exp_digits=2)
    exponent = int(scientific.rsplit("e", 1)[1])
    if exponent < _SCIENTIFIC_LOW or exponent >= _SCIENTIFIC_HIGH:
        return scientific
    return np.format_float_positional(number, unique=True, trim="0")


def format_complex(value: complex | np.complexfloating) -> str:
    """Render *value* as ``R + Ii``, or just ``R`` when the imaginary part is 0."""
    real, imag = value.real, value.imag
    if imag == 0:
        return format_float(real)
    sign = "-" if imag < 0 else "+"
    return f"{format_float(real)} {sign} {format_float(abs(imag))}i"


def _escape(ch: str) -> str:
    if ch in _NAMED_ESCAPES:
        return _NAMED_ESCAPES[ch]
    if ch.isprintable():
        return ch
    code = ord(ch)
    if code < 0x100:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def quote(text: str) -> str:
    """Return *text* in double quotes with non-printable characters escaped."""
    return '"' + "".join(_escape(ch) for ch in text) + '"'


def render(value: object) -> str:  # noqa: PLR0911 - one branch per shape
    """Render *value* for a description or the ``Actual:`` line.

    Strings are shown bare; containers render their elements recursively.
    """
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        return format_float(value)
    if isinstance(value, (complex, np.complexfloating)):
        return format_complex(value)
    if isinstance(value, list):
        return "[" + ", ".join(render(item) for item in value) + "]"
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        inner = ", ".join(render(item) for item in value)
        return f"({inner},)" if len(value) == 1 else f"({inner})"
    if isinstance(value, dict):
        items = ", ".join(f"{render(k)}: {render(v)}" for k, v in value.items())
        return "{" + items + "}"
    if isinstance(value, np.ndarray):
        return render(value.tolist())
    return repr(value)


__all__ = ["format_complex", "format_float", "quote", "render"]
