#!/usr/bin/env python3
# FUZZ_PLUGIN_HEADER_START
# FUZZ_PLUGIN: codec - decoder robustness and encode/decode roundtrip
# Intentional: This header is intentionally placed for dynamic plugin discovery.
# FUZZ_PLUGIN_HEADER_END
"""Codec Fuzzer (Atheris).

Targets: caretwire.wire.decoder.deserialize,
         caretwire.wire.encoder.serialize,
         caretwire.compression.unpack

Concern boundary: The decoder is the only component that consumes
untrusted input. This fuzzer feeds it raw fuzzed text, structurally valid
encodings built from fuzzed values, and single-character mutations of
valid encodings.

Invariants:
- deserialize() and unpack() never raise
- deserialize(serialize(*values)) == (True, *values)
- A failure result is always (False, str)

Pattern Routing:
Deterministic round-robin from a weighted schedule. Pattern selection is
independent of fuzzed bytes to avoid coverage-guided mutation bias.

Requires Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Any

_atheris_mod: Any = None

try:  # noqa: SIM105 - need module ref for the dependency check
    import atheris as _atheris_mod  # type: ignore[no-redef]
except ImportError:
    pass

if _atheris_mod is None:
    print("Missing dependency: atheris (pip install atheris)", file=sys.stderr)
    sys.exit(1)

import atheris  # noqa: E402

# --- Instrumentation ---

logging.getLogger("caretwire").setLevel(logging.CRITICAL)

atheris.enabled_hooks.add("str")
atheris.enabled_hooks.add("RegEx")

with atheris.instrument_imports(include=["caretwire"]):
    from caretwire import deserialize, serialize, unpack
    from caretwire.constants import ESCAPE_TABLE, HEADER, MARKER, Tag


class CodecFuzzError(Exception):
    """Invariant violation found by the fuzzer."""


@dataclass
class CodecFuzzState:
    """Iteration counters and per-pattern coverage."""

    iterations: int = 0
    decode_failures: int = 0
    checkpoint_interval: int = 1000
    pattern_coverage: dict[str, int] = field(default_factory=dict)


_state = CodecFuzzState()

# Pattern weights: (name, weight)
_PATTERN_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("raw_text", 30),
    ("tag_soup", 25),
    ("roundtrip", 25),
    ("mutated_encoding", 15),
    ("packed", 5),
)

_PATTERN_SCHEDULE: tuple[str, ...] = tuple(
    name for name, weight in _PATTERN_WEIGHTS for _ in range(weight)
)

_TAG_ALPHABET = "".join(str(tag) for tag in Tag) + "".join(ESCAPE_TABLE) + "\x05-.e0123456789"


def _check_result(result: tuple[object, ...], source: str) -> None:
    if result[0] is True:
        return
    if result[0] is not False or len(result) != 2 or not isinstance(result[1], str):
        msg = f"Malformed failure result {result!r} for {source!r}"
        raise CodecFuzzError(msg)
    _state.decode_failures += 1


def _gen_scalar(fdp: atheris.FuzzedDataProvider) -> object:
    match fdp.ConsumeIntInRange(0, 6):
        case 0:
            return None
        case 1:
            return fdp.ConsumeBool()
        case 2:
            return fdp.ConsumeInt(8)
        case 3:
            return fdp.ConsumeRegularFloat()
        case 4:
            return fdp.PickValueInList([float("inf"), float("-inf")])
        case _:
            return fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 16))


def _gen_key(fdp: atheris.FuzzedDataProvider) -> object:
    key = _gen_scalar(fdp)
    return "" if key is None else key


def _gen_value(fdp: atheris.FuzzedDataProvider, depth: int = 0) -> object:
    if depth < 4 and fdp.ConsumeIntInRange(0, 3) == 0:
        return {
            _gen_key(fdp): _gen_value(fdp, depth + 1)
            for _ in range(fdp.ConsumeIntInRange(0, 4))
        }
    return _gen_scalar(fdp)


def _fuzz_raw_text(fdp: atheris.FuzzedDataProvider) -> None:
    text = fdp.ConsumeUnicode(fdp.remaining_bytes())
    _check_result(deserialize(text), text)


def _fuzz_tag_soup(fdp: atheris.FuzzedDataProvider) -> None:
    chars = [
        MARKER if fdp.ConsumeBool() else fdp.PickValueInList(list(_TAG_ALPHABET))
        for _ in range(fdp.ConsumeIntInRange(0, 64))
    ]
    text = HEADER + "".join(chars)
    _check_result(deserialize(text), text)


def _fuzz_roundtrip(fdp: atheris.FuzzedDataProvider) -> None:
    values = [_gen_value(fdp) for _ in range(fdp.ConsumeIntInRange(0, 4))]
    encoded = serialize(*values)
    result = deserialize(encoded)
    if result != (True, *values):
        msg = f"Roundtrip mismatch: {values!r} -> {encoded!r} -> {result!r}"
        raise CodecFuzzError(msg)


def _fuzz_mutated_encoding(fdp: atheris.FuzzedDataProvider) -> None:
    encoded = serialize(_gen_value(fdp))
    index = fdp.ConsumeIntInRange(0, len(encoded) - 1)
    replacement = fdp.ConsumeUnicode(1) or MARKER
    mutated = encoded[:index] + replacement + encoded[index + 1 :]
    _check_result(deserialize(mutated), mutated)


def _fuzz_packed(fdp: atheris.FuzzedDataProvider) -> None:
    text = fdp.ConsumeString(fdp.ConsumeIntInRange(0, 256))
    _check_result(unpack(text), text)


_PATTERN_DISPATCH = {
    "raw_text": _fuzz_raw_text,
    "tag_soup": _fuzz_tag_soup,
    "roundtrip": _fuzz_roundtrip,
    "mutated_encoding": _fuzz_mutated_encoding,
    "packed": _fuzz_packed,
}


def test_one_input(data: bytes) -> None:
    """Atheris entry point: route fuzzed bytes to one codec pattern."""
    pattern = _PATTERN_SCHEDULE[_state.iterations % len(_PATTERN_SCHEDULE)]
    _state.iterations += 1
    _state.pattern_coverage[pattern] = _state.pattern_coverage.get(pattern, 0) + 1

    if _state.iterations % _state.checkpoint_interval == 0:
        print(
            f"[codec] iterations={_state.iterations} "
            f"decode_failures={_state.decode_failures} "
            f"coverage={_state.pattern_coverage}",
            file=sys.stderr,
        )

    fdp = atheris.FuzzedDataProvider(data)
    if fdp.remaining_bytes() < 2:
        return
    _PATTERN_DISPATCH[pattern](fdp)


def main() -> None:
    """Run the codec fuzzer with CLI support."""
    parser = argparse.ArgumentParser(
        description="caretwire codec fuzzer using Atheris/libFuzzer",
        epilog="All unrecognized arguments are passed to libFuzzer.",
    )
    parser.add_argument(
        "--checkpoint-interval", type=int, default=1000,
        help="Emit report every N iterations (default: 1000)",
    )

    args, remaining = parser.parse_known_args()
    _state.checkpoint_interval = args.checkpoint_interval

    if not any(arg.startswith("-rss_limit_mb") for arg in remaining):
        remaining.append("-rss_limit_mb=2048")

    sys.argv = [sys.argv[0], *remaining]
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
