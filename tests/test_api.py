"""Tests for the public caretwire API surface.

Python 3.13+.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import caretwire
from caretwire import (
    CaretwireError,
    CodecConfig,
    DecodeResult,
    decode,
    deserialize,
    pack,
    serialize,
    unpack,
)


class TestPublicSurface:
    """Test package-level exports."""

    def test_all_exports_resolve(self) -> None:
        """Every name in __all__ is importable from the package."""
        for name in caretwire.__all__:
            assert hasattr(caretwire, name), name

    def test_version(self) -> None:
        """__version__ is a non-empty string."""
        assert isinstance(caretwire.__version__, str)
        assert caretwire.__version__

    def test_protocol_version(self) -> None:
        """The protocol version matches the header written by serialize."""
        assert serialize() == "^" + caretwire.__protocol_version__

    def test_error_base(self) -> None:
        """All public exceptions derive from CaretwireError."""
        for name in (
            "SerializationError",
            "UnsupportedTypeError",
            "CircularReferenceError",
            "DepthLimitExceededError",
            "CompressionError",
        ):
            assert issubclass(getattr(caretwire, name), CaretwireError)


class TestEndToEnd:
    """Test the documented usage paths."""

    def test_serialize_deserialize(self) -> None:
        """The basic pair round-trips a mixed sequence."""
        encoded = serialize("a", None, {"n": 1.5, "ok": True}, -3)
        assert deserialize(encoded) == (True, "a", None, {"n": 1.5, "ok": True}, -3)

    def test_decode_result(self) -> None:
        """decode returns a DecodeResult."""
        result = decode(serialize(1))
        assert isinstance(result, DecodeResult)
        assert result.values == (1,)

    def test_pack_unpack(self) -> None:
        """pack/unpack round-trip through printable text."""
        assert unpack(pack("x", None)) == (True, "x", None)

    def test_shared_config(self) -> None:
        """One configuration drives both directions."""
        config = CodecConfig(max_depth=3, sort_keys=True)
        encoded = serialize({"b": {"c": {}}, "a": 0}, config=config)
        assert encoded == "^1^T^Sa^N0^Sb^T^Sc^T^t^t^t"
        assert deserialize(encoded, config) == (True, {"a": 0, "b": {"c": {}}})


class TestConcurrency:
    """Test that calls share no mutable state."""

    def test_parallel_round_trips(self) -> None:
        """Concurrent encode and decode calls do not interfere."""

        def round_trip(index: int) -> tuple[object, ...]:
            shared = {"i": index}
            return deserialize(serialize(index, {"a": shared, "b": shared}, None))

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(round_trip, range(200)))

        for index, result in enumerate(results):
            assert result == (True, index, {"a": {"i": index}, "b": {"i": index}}, None)
