"""Tests for core/cycle_guard.py and core/depth_guard.py.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from caretwire.config import CodecConfig
from caretwire.constants import MAX_DEPTH
from caretwire.core import CycleGuard, DepthGuard, depth_clamp
from caretwire.core.depth_guard import _clamp
from caretwire.diagnostics import (
    CircularReferenceError,
    DepthLimitExceededError,
    DiagnosticCode,
)
from caretwire.wire import serialize

# ============================================================================
# CycleGuard
# ============================================================================


class TestCycleGuard:
    """Test ancestor tracking."""

    def test_starts_empty(self) -> None:
        """A new guard has no open containers."""
        guard = CycleGuard()
        assert guard.is_empty
        assert guard.depth == 0

    def test_enter_and_leave(self) -> None:
        """enter/leave add and remove a container."""
        guard = CycleGuard()
        data: dict[str, int] = {}

        guard.enter(data)
        assert data in guard
        assert guard.depth == 1

        guard.leave(data)
        assert data not in guard
        assert guard.is_empty

    def test_reentering_ancestor_raises(self) -> None:
        """Entering an open container is a cycle."""
        guard = CycleGuard()
        data: dict[str, int] = {}
        guard.enter(data)

        with pytest.raises(CircularReferenceError) as exc_info:
            guard.enter(data, ("[0]", "'self'"))

        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.CIRCULAR_REFERENCE
        assert diagnostic.value_path == ("[0]", "'self'")

    def test_identity_not_equality(self) -> None:
        """Equal but distinct containers are not a cycle."""
        guard = CycleGuard()
        first: dict[str, int] = {}
        second: dict[str, int] = {}

        guard.enter(first)
        guard.enter(second)
        assert guard.depth == 2

    def test_reenter_after_leave(self) -> None:
        """A container may be entered again once left."""
        guard = CycleGuard()
        data: dict[str, int] = {}

        with guard.entered(data):
            pass
        with guard.entered(data):
            assert data in guard

    def test_entered_releases_on_error(self) -> None:
        """entered() leaves the container even when the block raises."""
        guard = CycleGuard()
        data: dict[str, int] = {}

        with pytest.raises(RuntimeError), guard.entered(data):
            raise RuntimeError

        assert guard.is_empty

    def test_nested_cycle_leaves_no_residue(self) -> None:
        """A detected cycle unwinds every entered container."""
        guard = CycleGuard()
        outer: dict[str, int] = {}
        inner: dict[str, int] = {}

        with pytest.raises(CircularReferenceError):  # noqa: SIM117
            with guard.entered(outer), guard.entered(inner):
                guard.enter(outer)

        assert guard.is_empty

    def test_path_follows_innermost(self) -> None:
        """path reports the key path of the innermost open container."""
        guard = CycleGuard()
        outer: dict[str, int] = {}
        inner: dict[str, int] = {}

        assert guard.path == ()
        with guard.entered(outer, ("[0]",)):
            with guard.entered(inner, ("[0]", "'a'")):
                assert guard.path == ("[0]", "'a'")
            assert guard.path == ("[0]",)
        assert guard.path == ()

    def test_leave_out_of_order(self) -> None:
        """Leaving an outer container keeps the innermost path."""
        guard = CycleGuard()
        outer: dict[str, int] = {}
        inner: dict[str, int] = {}

        guard.enter(outer, ("[0]",))
        guard.enter(inner, ("[0]", "'a'"))
        guard.leave(outer)

        assert outer not in guard
        assert guard.path == ("[0]", "'a'")
        guard.leave(inner)
        assert guard.is_empty


# ============================================================================
# DepthGuard
# ============================================================================


class TestDepthGuard:
    """Test DepthGuard context manager."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_DEPTH by default."""
        guard = DepthGuard()
        assert guard.max_depth == MAX_DEPTH
        assert guard.current_depth == 0

    def test_context_manager_tracks_depth(self) -> None:
        """Entering increments, exiting decrements."""
        guard = DepthGuard(max_depth=5)
        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
        assert guard.depth == 0

    def test_exceeding_raises(self) -> None:
        """Entering at max_depth raises DepthLimitExceededError."""
        guard = DepthGuard(max_depth=2)
        with guard, guard:
            assert guard.is_exceeded()
            with pytest.raises(DepthLimitExceededError) as exc_info:
                guard.__enter__()

        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.MAX_DEPTH_EXCEEDED
        assert "(2)" in diagnostic.message

    def test_failed_enter_does_not_increment(self) -> None:
        """A rejected enter leaves current_depth unchanged."""
        guard = DepthGuard(max_depth=1)
        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.current_depth == 1
        assert guard.current_depth == 0

    def test_check_reports_path(self) -> None:
        """check() carries the value path into the diagnostic."""
        guard = DepthGuard(max_depth=1)
        with guard, pytest.raises(DepthLimitExceededError) as exc_info:
            guard.check(("[0]", "'a'"))

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.value_path == ("[0]", "'a'")

    def test_is_recursion_error(self) -> None:
        """DepthLimitExceededError is catchable as RecursionError."""
        guard = DepthGuard(max_depth=1)
        with guard, pytest.raises(RecursionError):
            guard.check()

    @given(st.integers(min_value=1, max_value=50))
    def test_depth_balanced(self, levels: int) -> None:
        """Depth returns to zero after any number of nested entries."""
        guard = DepthGuard(max_depth=levels)
        entered = 0
        for _ in range(levels):
            guard.__enter__()
            entered += 1
        assert guard.is_exceeded()
        for _ in range(entered):
            guard.__exit__(None, None, None)
        assert guard.depth == 0


class TestDepthClamp:
    """Test depth_clamp() against the recursion limit."""

    @pytest.fixture(autouse=True)
    def _fresh_clamp_cache(self) -> None:
        _clamp.cache_clear()

    def test_small_depth_unchanged(self) -> None:
        """Depths well below the limit pass through."""
        assert depth_clamp(10) == 10

    def test_large_depth_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Depths near the recursion limit are clamped with a warning."""
        limit = sys.getrecursionlimit()
        with caplog.at_level(logging.WARNING, logger="caretwire.core.depth_guard"):
            clamped = depth_clamp(limit * 2)

        assert clamped == (limit - 50) // 2
        assert "does not fit the interpreter recursion limit" in caplog.text

    def test_guard_clamps_on_construction(self) -> None:
        """DepthGuard applies depth_clamp to max_depth."""
        limit = sys.getrecursionlimit()
        guard = DepthGuard(max_depth=limit * 2)
        assert guard.max_depth == (limit - 50) // 2

    def test_warning_logged_once(self, caplog: pytest.LogCaptureFixture) -> None:
        """Repeated serialize() calls with an oversized depth warn once."""
        config = CodecConfig(max_depth=sys.getrecursionlimit() * 2)
        with caplog.at_level(logging.WARNING, logger="caretwire.core.depth_guard"):
            for _ in range(3):
                assert serialize({"a": {}}, config=config) == "^1^T^Sa^T^t^t"

        warnings = [r for r in caplog.records if r.name == "caretwire.core.depth_guard"]
        assert len(warnings) == 1

    def test_new_recursion_limit_recomputed(self) -> None:
        """Raising the recursion limit lifts the cap."""
        previous = sys.getrecursionlimit()
        requested = previous * 2
        try:
            sys.setrecursionlimit(requested * 2 + 50)
            assert depth_clamp(requested) == requested
        finally:
            sys.setrecursionlimit(previous)
        assert depth_clamp(requested) == (previous - 50) // 2
