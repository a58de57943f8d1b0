"""Value model for the tagged wire format.

Defines which Python values the format carries and how each maps onto a
grammar production:

    None                 -> Nil
    bool                 -> Boolean (true / false)
    int                  -> Integer (up to sys.get_int_max_str_digits() digits)
    float (finite)       -> Float
    float (+inf / -inf)  -> PositiveInfinity / NegativeInfinity
    str                  -> Text
    Mapping              -> Container (decoded as dict)

Everything else is rejected. In particular callables, modules, classes,
generators, coroutines, files, sockets, locks and threads are never
serializable, and neither are sequences, sets or bytes: the format has no
production for them and silently coercing them would not round-trip.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Mapping
from enum import StrEnum

from caretwire.diagnostics import ErrorTemplate, UnsupportedTypeError

__all__ = [
    "KEY_KINDS",
    "Key",
    "Scalar",
    "Value",
    "ValueKind",
    "classify",
    "classify_key",
    "key_sort_key",
]

type Scalar = None | bool | int | float | str
type Key = bool | int | float | str
type Value = Scalar | Mapping[Key, "Value"]


class ValueKind(StrEnum):
    """Kind of a value, one member per value-bearing grammar production.

    StrEnum provides automatic string conversion: str(ValueKind.TEXT) == "text"
    """

    NIL = "nil"
    TRUE = "true"
    FALSE = "false"
    INTEGER = "integer"
    FLOAT = "float"
    INF = "inf"
    NEG_INF = "-inf"
    TEXT = "text"
    CONTAINER = "container"


# Kinds allowed as container keys. Nil is excluded because it marks
# absence, Container because a container is not hashable.
KEY_KINDS: frozenset[ValueKind] = frozenset(ValueKind) - {ValueKind.NIL, ValueKind.CONTAINER}


def classify(value: object, value_path: tuple[str, ...] = ()) -> ValueKind:
    """Determine the grammar production for a value.

    Args:
        value: Value to classify
        value_path: Key path reported if the value is rejected

    Returns:
        The ValueKind of value

    Raises:
        UnsupportedTypeError: If value has no production (including NaN and
            integers too long for decimal conversion)

    Example:
        >>> classify(True)
        <ValueKind.TRUE: 'true'>
        >>> classify(float("-inf"))
        <ValueKind.NEG_INF: '-inf'>
    """
    match value:
        case None:
            return ValueKind.NIL
        case bool():
            return ValueKind.TRUE if value else ValueKind.FALSE
        case int():
            if not _fits_digit_limit(value):
                raise UnsupportedTypeError(
                    ErrorTemplate.integer_too_large(sys.get_int_max_str_digits(), value_path)
                )
            return ValueKind.INTEGER
        case float():
            if math.isnan(value):
                raise UnsupportedTypeError(ErrorTemplate.nan_not_supported(value_path))
            if math.isinf(value):
                return ValueKind.INF if value > 0 else ValueKind.NEG_INF
            return ValueKind.FLOAT
        case str():
            return ValueKind.TEXT
        case Mapping():
            return ValueKind.CONTAINER
        case _:
            raise UnsupportedTypeError(
                ErrorTemplate.unsupported_type(type(value).__name__, value_path)
            )


def classify_key(key: object, value_path: tuple[str, ...] = ()) -> ValueKind:
    """Classify a container key, rejecting kinds that cannot be keys.

    Args:
        key: Container key to classify
        value_path: Key path of the container holding key

    Returns:
        The ValueKind of key

    Raises:
        UnsupportedTypeError: If key is unsupported, NaN, None or a container
    """
    kind = classify(key, value_path)
    if kind not in KEY_KINDS:
        raise UnsupportedTypeError(ErrorTemplate.invalid_key(type(key).__name__, value_path))
    return kind


def key_sort_key(key: Key) -> tuple[int, Key]:
    """Total ordering over valid keys: booleans, then numbers, then text.

    Mixed str/number keys are not comparable in Python, so sorting ranks
    by kind first.
    """
    match key:
        case bool():
            return (0, key)
        case int() | float():
            return (1, key)
        case _:
            return (2, key)


def _fits_digit_limit(value: int) -> bool:
    """True if str(value) stays within sys.get_int_max_str_digits().

    A limit of 0 disables the check. Three bits per allowed digit is a
    safe lower bound, so only very large integers pay for a trial conversion.
    """
    limit = sys.get_int_max_str_digits()
    if limit == 0 or value.bit_length() <= 3 * limit:
        return True
    try:
        str(int(value))
    except ValueError:
        return False
    return True
