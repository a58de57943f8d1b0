"""Encode values into the tagged wire format.

Converts an ordered sequence of values into one flat string:

    header, production(value_1), production(value_2), ...

Every production is self-delimiting (fixed tag, explicit terminator, or
escaped text bounded by the next tag), so values are simply concatenated.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from caretwire.config import DEFAULT_CONFIG, CodecConfig
from caretwire.constants import HEADER, MARKER, Tag
from caretwire.core import CycleGuard, DepthGuard
from caretwire.diagnostics import SerializationError
from caretwire.values import ValueKind, classify, classify_key, key_sort_key

from .escape import escape

__all__ = ["Serializer", "serialize"]

logger = logging.getLogger(__name__)

_FIXED_PRODUCTIONS: dict[ValueKind, str] = {
    ValueKind.NIL: MARKER + Tag.NIL,
    ValueKind.TRUE: MARKER + Tag.TRUE,
    ValueKind.FALSE: MARKER + Tag.FALSE,
    ValueKind.INF: MARKER + Tag.INF,
    ValueKind.NEG_INF: MARKER + Tag.NEG_INF,
}

_TEXT: str = MARKER + Tag.TEXT
_INTEGER: str = MARKER + Tag.INTEGER
_FLOAT: str = MARKER + Tag.FLOAT
_FLOAT_END: str = MARKER + Tag.FLOAT_END
_CONTAINER_START: str = MARKER + Tag.CONTAINER_START
_CONTAINER_END: str = MARKER + Tag.CONTAINER_END


@dataclass(slots=True)
class _EncodeContext:
    """Per-call encoding state threaded through the recursive writers."""

    output: list[str]
    cycle_guard: CycleGuard
    depth_guard: DepthGuard
    sort_keys: bool = False
    containers: int = 0


class Serializer:
    """Converts values to the tagged wire format.

    Thread-safe serializer with no mutable instance state.
    All encoding state (output buffer, ancestor set, depth) is local to the
    serialize() call, so instances can be shared and calls can nest.

    Usage:
        >>> serializer = Serializer()
        >>> serializer.serialize("hi", None, 3)
        '^1^Shi^Z^N3'
    """

    __slots__ = ("_config",)

    def __init__(self, config: CodecConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG

    @property
    def config(self) -> CodecConfig:
        """Configuration used by this serializer."""
        return self._config

    def serialize(self, *values: object) -> str:
        """Serialize values, in order, into one string.

        Pure function - builds output locally without mutating instance state.

        Args:
            *values: Values to encode. None is a positional value of its own.

        Returns:
            Encoded string starting with the protocol header

        Raises:
            UnsupportedTypeError: If a value (or key) has no production
            CircularReferenceError: If a container is its own ancestor
            DepthLimitExceededError: If containers nest deeper than max_depth
        """
        context = _EncodeContext(
            output=[HEADER],
            cycle_guard=CycleGuard(),
            depth_guard=DepthGuard(max_depth=self._config.max_depth),
            sort_keys=self._config.sort_keys,
        )
        try:
            for index, value in enumerate(values):
                self._encode_value(value, (f"[{index}]",), context)
        except SerializationError as e:
            code = e.diagnostic.code.name if e.diagnostic else type(e).__name__
            logger.debug(
                "Serialization aborted after %d container(s): %s", context.containers, code
            )
            raise

        encoded = "".join(context.output)
        logger.debug("Serialized %d value(s) into %d characters", len(values), len(encoded))
        return encoded

    def _encode_value(
        self,
        value: object,
        value_path: tuple[str, ...],
        context: _EncodeContext,
    ) -> None:
        """Append the production for one value."""
        kind = classify(value, value_path)
        match kind:
            case ValueKind.TEXT:
                context.output.append(_TEXT)
                context.output.append(escape(value))  # type: ignore[arg-type]
            case ValueKind.INTEGER:
                # int() strips subclasses such as IntEnum whose str() is not numeric
                context.output.append(_INTEGER + str(int(value)))  # type: ignore[call-overload]
            case ValueKind.FLOAT:
                text = repr(float(value))  # type: ignore[arg-type]
                context.output.append(_FLOAT + text + _FLOAT_END)
            case ValueKind.CONTAINER:
                self._encode_container(value, value_path, context)  # type: ignore[arg-type]
            case _:
                context.output.append(_FIXED_PRODUCTIONS[kind])

    def _encode_container(
        self,
        container: Mapping[object, object],
        value_path: tuple[str, ...],
        context: _EncodeContext,
    ) -> None:
        """Append start tag, key/value productions, end tag."""
        context.depth_guard.check(value_path)
        with context.depth_guard, context.cycle_guard.entered(container, value_path):
            context.containers += 1
            context.output.append(_CONTAINER_START)
            path = context.cycle_guard.path

            entries = list(container.items())
            for key, _ in entries:
                classify_key(key, path)
            if context.sort_keys:
                entries.sort(key=lambda entry: key_sort_key(entry[0]))  # type: ignore[arg-type]

            for key, entry in entries:
                self._encode_value(key, path, context)
                self._encode_value(entry, (*path, repr(key)), context)

            context.output.append(_CONTAINER_END)


def serialize(*values: object, config: CodecConfig | None = None) -> str:
    """Serialize values to the tagged wire format.

    Convenience function for Serializer.serialize().

    Args:
        *values: Values to encode, in order
        config: Optional codec configuration

    Returns:
        Encoded string

    Raises:
        UnsupportedTypeError: If a value (or key) has no production
        CircularReferenceError: If a container is its own ancestor
        DepthLimitExceededError: If containers nest deeper than max_depth

    Example:
        >>> serialize({"a": 1, "b": True})
        '^1^T^Sa^N1^Sb^B^t'
        >>> serialize()
        '^1'
    """
    return Serializer(config).serialize(*values)
