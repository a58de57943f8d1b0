"""Nesting limit for the recursive encoder.

The encoder recurses once per container level. DepthGuard counts open
containers and refuses to open one more than ``max_depth``, so a deeply
nested (or adversarially built) value fails with DepthLimitExceededError
long before the interpreter would raise RecursionError.

The decoder is iterative and enforces the same limit on its own frame
stack; it does not use this guard.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from functools import lru_cache

from caretwire.constants import MAX_DEPTH
from caretwire.diagnostics import DepthLimitExceededError, ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)

# Interpreter frames used per container level by the encoder
# (_encode_value -> _encode_container).
_FRAMES_PER_LEVEL = 2


@dataclass(slots=True)
class DepthGuard:
    """Counter of open containers, used as a context manager.

    Usage:
        guard = DepthGuard(max_depth=config.max_depth)
        guard.check(value_path)
        with guard:
            ...  # write the container's entries

    Not frozen: entering and leaving the block updates current_depth. One
    guard belongs to one serialize() call, so no locking is needed.

    Attributes:
        max_depth: Containers allowed to be open at once, clamped to what
            the interpreter stack can hold
        current_depth: Containers currently open
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        # Checked before counting: a raising __enter__ gets no __exit__.
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Containers currently open."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """True when no further container may be opened."""
        return self.current_depth >= self.max_depth

    def check(self, value_path: tuple[str, ...] = ()) -> None:
        """Fail if opening another container would exceed max_depth.

        Args:
            value_path: Key path of the container about to be opened

        Raises:
            DepthLimitExceededError: If max_depth containers are already open
        """
        if self.is_exceeded():
            raise DepthLimitExceededError(
                ErrorTemplate.max_depth_exceeded(self.max_depth, value_path)
            )


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Largest usable nesting depth not above requested_depth.

    A limit the interpreter stack cannot reach would surface as
    RecursionError instead of DepthLimitExceededError, so the requested
    depth is capped at the levels that fit in ``sys.getrecursionlimit()``
    after reserving frames for the caller. A WARNING is logged the first
    time a given depth is capped under a given recursion limit, so building
    a guard per serialize() call does not repeat it.

    Args:
        requested_depth: Configured maximum depth
        reserve_frames: Frames kept free for the caller (default: 50)

    Returns:
        requested_depth, or the cap if it is lower

    Example:
        >>> depth_clamp(10)
        10
    """
    return _clamp(requested_depth, reserve_frames, sys.getrecursionlimit())


@lru_cache(maxsize=32)
def _clamp(requested_depth: int, reserve_frames: int, limit: int) -> int:
    usable = (limit - reserve_frames) // _FRAMES_PER_LEVEL
    if requested_depth <= usable:
        return requested_depth
    logger.warning(
        "Nesting depth %d does not fit the interpreter recursion limit (%d); "
        "using %d. Raise sys.setrecursionlimit() to allow deeper values.",
        requested_depth,
        limit,
        usable,
    )
    return usable
