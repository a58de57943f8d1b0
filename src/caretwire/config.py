"""Codec configuration for Serializer and Deserializer.

Provides a single frozen dataclass that encapsulates the tunable limits of
the encoder and decoder, so both directions agree on nesting depth without
passing individual parameters around.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from caretwire.constants import MAX_DEPTH, MAX_INPUT_SIZE

__all__ = ["DEFAULT_CONFIG", "CodecConfig"]


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Immutable configuration for encoding and decoding.

    All fields have sensible defaults; ``CodecConfig()`` is a usable
    configuration.

    Attributes:
        max_depth: Maximum container nesting depth (default: 100). Applies to
            both directions; the encoder raises and the decoder fails
            gracefully when exceeded.
        max_input_size: Maximum encoded input length in characters accepted
            by the decoder (default: 10 MB).
        sort_keys: Emit container entries sorted by key instead of in
            insertion order (default: False). Produces canonical output for
            equal containers built in different orders.

    Example:
        >>> from caretwire import serialize
        >>> config = CodecConfig(sort_keys=True)
        >>> serialize({"b": 1, "a": 2}, config=config)
        '^1^T^Sa^N2^Sb^N1^t'
    """

    max_depth: int = MAX_DEPTH
    max_input_size: int = MAX_INPUT_SIZE
    sort_keys: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_depth or max_input_size is not positive.
        """
        if self.max_depth <= 0:
            msg = "max_depth must be positive"
            raise ValueError(msg)
        if self.max_input_size <= 0:
            msg = "max_input_size must be positive"
            raise ValueError(msg)


DEFAULT_CONFIG: CodecConfig = CodecConfig()
