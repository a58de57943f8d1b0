"""Property-based round-trip tests for serialize() and deserialize().

Properties:
    - deserialize(serialize(*values)) == (True, *values) for every supported
      value sequence without cycles
    - positional None slots survive with the exact value count
    - shared non-ancestor containers decode as equal independent copies
    - self-referential containers are always rejected
    - deserialize() never raises, whatever the input

Python 3.13+.
"""

from __future__ import annotations

import math

import pytest
from hypothesis import HealthCheck, event, example, given, settings
from hypothesis import strategies as st

from caretwire import CodecConfig, CircularReferenceError, deserialize, serialize
from tests.strategies import any_text, tagged_values, value_sequences, values

# ============================================================================
# Round trip
# ============================================================================


class TestRoundTrip:
    """Round-trip properties over generated values."""

    @given(value_sequences)
    def test_sequence_round_trip(self, items: list[object]) -> None:
        """Any supported value sequence decodes back to itself."""
        event(f"sequence_length={len(items)}")
        assert deserialize(serialize(*items)) == (True, *items)

    @given(tagged_values())
    @example({"a": 1, "b": True})
    @example({"": {"": None}})
    @example("^\x01\x02\x03\x04\x05")
    @example(-math.inf)
    def test_single_value_round_trip(self, value: object) -> None:
        """A single value decodes back to itself."""
        assert deserialize(serialize(value)) == (True, value)

    @given(values)
    def test_sorted_round_trip(self, value: object) -> None:
        """Key sorting changes only the wire order, never the decoded value."""
        config = CodecConfig(sort_keys=True)
        assert deserialize(serialize(value, config=config), config) == (True, value)

    @given(st.lists(st.one_of(st.none(), values), max_size=8))
    def test_count_preserved(self, items: list[object]) -> None:
        """The decoded value count always matches, None slots included."""
        event(f"none_count={sum(1 for item in items if item is None)}")
        result = deserialize(serialize(*items))
        assert len(result) == len(items) + 1

    @given(st.integers())
    def test_integer_type_preserved(self, value: int) -> None:
        """Integers come back as int."""
        _, decoded = deserialize(serialize(value))
        assert type(decoded) is int
        assert decoded == value

    @given(st.floats(allow_nan=False))
    def test_float_type_preserved(self, value: float) -> None:
        """Floats come back as float with the same bits, sign of zero included."""
        _, decoded = deserialize(serialize(value))
        assert type(decoded) is float
        assert decoded == value
        assert math.copysign(1.0, decoded) == math.copysign(1.0, value)  # type: ignore[arg-type]

    @given(any_text)
    def test_text_round_trip(self, text: str) -> None:
        """Arbitrary text, reserved characters included, survives."""
        assert deserialize(serialize(text)) == (True, text)


# ============================================================================
# Scenarios
# ============================================================================


class TestRoundTripScenarios:
    """Concrete round-trip scenarios."""

    def test_two_entry_container(self) -> None:
        """{"a": 1, "b": True} decodes to exactly those two entries."""
        ok, value = deserialize(serialize({"a": 1, "b": True}))
        assert ok is True
        assert value == {"a": 1, "b": True}
        assert value["b"] is True  # type: ignore[index]
        assert type(value["a"]) is int  # type: ignore[index]
        assert len(value) == 2  # type: ignore[arg-type]

    def test_positional_none(self) -> None:
        """(A, None, C) comes back as exactly three values."""
        result = deserialize(serialize("A", None, "C"))
        assert result == (True, "A", None, "C")
        assert len(result) == 4

    def test_shared_container(self) -> None:
        """Shared non-ancestor containers decode as independent equal copies."""
        shared = {"k": 1}
        ok, value = deserialize(serialize({"a": shared, "b": shared}))
        assert ok is True
        assert value == {"a": {"k": 1}, "b": {"k": 1}}
        assert value["a"] is not value["b"]  # type: ignore[index]

    @given(st.integers(min_value=1, max_value=20))
    def test_self_reference_always_rejected(self, depth: int) -> None:
        """A container that reaches itself through any chain is rejected."""
        root: dict[str, object] = {}
        node = root
        for _ in range(depth - 1):
            child: dict[str, object] = {}
            node["next"] = child
            node = child
        node["back"] = root

        with pytest.raises(CircularReferenceError):
            serialize(root)


# ============================================================================
# Robustness
# ============================================================================


class TestDecodeNeverRaises:
    """deserialize() returns a result for any input."""

    @given(st.text())
    def test_arbitrary_text(self, text: str) -> None:
        """Arbitrary text never raises."""
        result = deserialize(text)
        assert result[0] in (True, False)
        if result[0] is False:
            assert len(result) == 2
            assert isinstance(result[1], str)

    @given(st.text(alphabet="^1TtSNFfBbZIi\x01\x05-.e0123456789xa", max_size=60))
    def test_tag_soup(self, body: str) -> None:
        """Tag-dense input after a valid header never raises."""
        result = deserialize("^1" + body)
        event(f"ok={result[0]}")
        assert result[0] in (True, False)

    @given(value_sequences, st.data())
    def test_truncated_valid_input(self, items: list[object], data: st.DataObject) -> None:
        """Any prefix of a valid encoding decodes or fails gracefully."""
        encoded = serialize(*items)
        cut = data.draw(st.integers(min_value=0, max_value=len(encoded)))
        result = deserialize(encoded[:cut])
        event(f"prefix_ok={result[0]}")
        assert result[0] in (True, False)

    @pytest.mark.fuzz
    @settings(max_examples=5000, suppress_health_check=[HealthCheck.too_slow])
    @given(value_sequences, st.data())
    def test_mutated_valid_input(self, items: list[object], data: st.DataObject) -> None:
        """Single-character mutations of valid encodings never raise."""
        encoded = serialize(*items)
        if not encoded:
            return
        index = data.draw(st.integers(min_value=0, max_value=len(encoded) - 1))
        replacement = data.draw(st.characters())
        mutated = encoded[:index] + replacement + encoded[index + 1 :]
        result = deserialize(mutated)
        event(f"mutation_ok={result[0]}")
        assert result[0] in (True, False)
