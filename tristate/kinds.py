"""Runtime classification of candidate values and cross-kind numeric folding.

Python's own ``int``, ``float`` and ``complex`` are joined by the fixed-width
scalars of numpy and ctypes. Every value is sorted into a :class:`Kind`, and
numeric kinds are compared under a single folding rule:

1. A complex operand with a nonzero imaginary part only equals another
   complex value; otherwise the zero imaginary part is dropped.
2. If either operand is single precision both are rounded to binary32.
3. Else if either operand is double precision both are rounded to binary64.
4. Else both are integers and compare exactly.

Rounding is IEEE-754 round-half-even throughout, so an integer may equal
several neighbouring integers once they share a ``float32`` value.
"""

from __future__ import annotations

import ctypes
import dataclasses as dc
import enum
import inspect
import math
import typing as t

import numpy as np


class Kind(enum.Enum):
    """Coarse runtime category of a value."""

    BOOL = "bool"
    SIGNED = "signed integer"
    UNSIGNED = "unsigned integer"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"
    STRING = "string"
    BYTES = "bytes"
    ADDRESS = "address"
    NONE = "none"
    POINTER = "pointer"
    FUNCTION = "function"
    SLICE = "list"
    ARRAY = "array"
    MAP = "dict"
    STRUCT = "dataclass"
    OTHER = "other"


INTEGER_KINDS: t.Final = frozenset({Kind.SIGNED, Kind.UNSIGNED})
FLOAT_KINDS: t.Final = frozenset({Kind.FLOAT32, Kind.FLOAT64})
COMPLEX_KINDS: t.Final = frozenset({Kind.COMPLEX64, Kind.COMPLEX128})
NUMERIC_KINDS: t.Final = INTEGER_KINDS | FLOAT_KINDS | COMPLEX_KINDS

# Kinds whose values are shared by reference rather than copied.
REFERENCE_KINDS: t.Final = frozenset(
    {Kind.POINTER, Kind.FUNCTION, Kind.SLICE, Kind.MAP, Kind.OTHER}
)

_CTYPES_CODES: t.Final[dict[str, Kind]] = {
    "b": Kind.SIGNED,
    "h": Kind.SIGNED,
    "i": Kind.SIGNED,
    "l": Kind.SIGNED,
    "q": Kind.SIGNED,
    "B": Kind.UNSIGNED,
    "H": Kind.UNSIGNED,
    "I": Kind.UNSIGNED,
    "L": Kind.UNSIGNED,
    "Q": Kind.UNSIGNED,
    "f": Kind.FLOAT32,
    "d": Kind.FLOAT64,
    "g": Kind.FLOAT64,
    "?": Kind.BOOL,
}

_FLOAT32_MANTISSA_BITS: t.Final = 24
_FLOAT32_MAX_BITS: t.Final = 128


def _classify_ctypes(value: ctypes._SimpleCData) -> Kind:
    if isinstance(value, ctypes.c_void_p):
        return Kind.ADDRESS
    code = getattr(type(value), "_type_", "")
    return _CTYPES_CODES.get(code, Kind.OTHER)


def _classify_numpy(value: np.generic) -> Kind:
    if isinstance(value, np.bool_):
        return Kind.BOOL
    if isinstance(value, np.unsignedinteger):
        return Kind.UNSIGNED
    if isinstance(value, np.signedinteger):
        return Kind.SIGNED
    if isinstance(value, np.floating):
        return Kind.FLOAT32 if value.itemsize <= 4 else Kind.FLOAT64
    if isinstance(value, np.complexfloating):
        return Kind.COMPLEX64 if value.itemsize <= 8 else Kind.COMPLEX128
    if isinstance(value, np.str_):
        return Kind.STRING
    if isinstance(value, np.bytes_):
        return Kind.BYTES
    return Kind.OTHER


def classify(value: object) -> Kind:  # noqa: PLR0911 - one branch per kind
    """Return the :class:`Kind` of *value*."""
    if value is None:
        return Kind.NONE
    # bool is a subclass of int and must be checked first.
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, np.generic):
        return _classify_numpy(value)
    if isinstance(value, int):
        return Kind.SIGNED
    if isinstance(value, float):
        return Kind.FLOAT64
    if isinstance(value, complex):
        return Kind.COMPLEX128
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if isinstance(value, ctypes._SimpleCData):
        return _classify_ctypes(value)
    if isinstance(value, ctypes._Pointer):
        return Kind.POINTER
    if inspect.isroutine(value):
        return Kind.FUNCTION
    if isinstance(value, list):
        return Kind.SLICE
    if isinstance(value, (tuple, np.ndarray)):
        return Kind.ARRAY
    if isinstance(value, dict):
        return Kind.MAP
    if dc.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    return Kind.OTHER


def is_numeric(kind: Kind) -> bool:
    """Return ``True`` for integer, float and complex kinds."""
    return kind in NUMERIC_KINDS


def is_null_pointer(value: object) -> bool:
    """Return ``True`` for ctypes pointers that address nothing."""
    return isinstance(value, ctypes._Pointer) and not bool(value)


def type_name(value: object) -> str:
    """Return the short type name used in diagnostics."""
    return type(value).__name__


def numeric_value(value: object, kind: Kind) -> int | float | complex | np.generic:
    """Return a normalized view of a numeric *value* of *kind*.

    Integers widen to Python ``int``. Single precision values stay as numpy
    ``float32``/``complex64`` so their precision is not silently widened.
    """
    if isinstance(value, ctypes._SimpleCData):
        value = value.value
    if kind in INTEGER_KINDS:
        return int(value)  # type: ignore[call-overload]
    if kind is Kind.FLOAT32:
        return np.float32(value)  # type: ignore[arg-type]
    if kind is Kind.FLOAT64:
        return float(value)  # type: ignore[arg-type]
    if kind is Kind.COMPLEX64:
        return np.complex64(value)  # type: ignore[arg-type]
    if kind is Kind.COMPLEX128:
        return complex(value)  # type: ignore[arg-type]
    msg = f"{kind.value} is not a numeric kind"
    raise ValueError(msg)


def int_to_float32(n: int) -> float:
    """Round the integer *n* to binary32, returning it as a Python float.

    The rounding is done on the integer itself so that values above 2**53 are
    not rounded twice on their way through binary64.
    """
    magnitude = abs(n)
    excess = magnitude.bit_length() - _FLOAT32_MANTISSA_BITS
    if excess > 0:
        quotient, remainder = divmod(magnitude, 1 << excess)
        half = 1 << (excess - 1)
        if remainder > half or (remainder == half and quotient & 1):
            quotient += 1
        magnitude = quotient << excess
    if magnitude.bit_length() > _FLOAT32_MAX_BITS:
        return -math.inf if n < 0 else math.inf
    return -float(magnitude) if n < 0 else float(magnitude)


def int_to_float64(n: int) -> float:
    """Round the integer *n* to binary64, overflowing to an infinity."""
    try:
        return float(n)
    except OverflowError:
        return -math.inf if n < 0 else math.inf


def to_float32(value: object, kind: Kind) -> float:
    """Round a real numeric view to binary32."""
    if kind in INTEGER_KINDS:
        return int_to_float32(t.cast("int", value))
    with np.errstate(over="ignore"):
        return float(np.float32(value))  # type: ignore[arg-type]


def to_float64(value: object, kind: Kind) -> float:
    """Round a real numeric view to binary64."""
    if kind in INTEGER_KINDS:
        return int_to_float64(t.cast("int", value))
    return float(value)  # type: ignore[arg-type]


def _strip_imaginary(value: t.Any, kind: Kind) -> tuple[t.Any, Kind]:
    if kind is Kind.COMPLEX64:
        return np.float32(value.real), Kind.FLOAT32
    if kind is Kind.COMPLEX128:
        return float(value.real), Kind.FLOAT64
    return value, kind


def _has_imaginary(value: t.Any, kind: Kind) -> bool:
    return kind in COMPLEX_KINDS and value.imag != 0


def compare_real(a: object, kind_a: Kind, b: object, kind_b: Kind) -> int | None:
    """Three-way compare two real numeric views under the folding rule.

    Returns ``-1``, ``0`` or ``1``, or ``None`` when the operands are
    unordered because one of them is NaN.
    """
    kinds = {kind_a, kind_b}
    if Kind.FLOAT32 in kinds:
        left, right = to_float32(a, kind_a), to_float32(b, kind_b)
    elif Kind.FLOAT64 in kinds:
        left, right = to_float64(a, kind_a), to_float64(b, kind_b)
    else:
        ia, ib = t.cast("int", a), t.cast("int", b)
        return (ia > ib) - (ia < ib)
    if math.isnan(left) or math.isnan(right):
        return None
    return (left > right) - (left < right)


def numbers_equal(a: object, kind_a: Kind, b: object, kind_b: Kind) -> bool:
    """Return ``True`` when numerics *a* and *b* are equal after folding."""
    va = numeric_value(a, kind_a)
    vb = numeric_value(b, kind_b)
    if _has_imaginary(va, kind_a) or _has_imaginary(vb, kind_b):
        if kind_a not in COMPLEX_KINDS or kind_b not in COMPLEX_KINDS:
            return False
        if Kind.COMPLEX64 in (kind_a, kind_b):
            return bool(np.complex64(va) == np.complex64(vb))
        return complex(va) == complex(vb)
    va, kind_a = _strip_imaginary(va, kind_a)
    vb, kind_b = _strip_imaginary(vb, kind_b)
    return compare_real(va, kind_a, vb, kind_b) == 0


def compare_numbers(a: object, kind_a: Kind, b: object, kind_b: Kind) -> int | None:
    """Three-way compare two real numerics of any integer or float kind."""
    return compare_real(
        numeric_value(a, kind_a), kind_a, numeric_value(b, kind_b), kind_b
    )


__all__ = [
    "COMPLEX_KINDS",
    "FLOAT_KINDS",
    "INTEGER_KINDS",
    "NUMERIC_KINDS",
    "REFERENCE_KINDS",
    "Kind",
    "classify",
    "compare_numbers",
    "compare_real",
    "int_to_float32",
    "int_to_float64",
    "is_null_pointer",
    "is_numeric",
    "numbers_equal",
    "numeric_value",
    "to_float32",
    "to_float64",
    "type_name",
]
