"""Core utilities shared by the encoder and decoder.

This package provides the per-call guards that keep encoding bounded:

    core <- wire

Exports:
    CycleGuard: Ancestor set rejecting self-referential containers
    DepthGuard: Context manager for recursion depth limiting
    depth_clamp: Clamp a depth against the interpreter recursion limit

Python 3.13+.
"""

from .cycle_guard import CycleGuard
from .depth_guard import DepthGuard, depth_clamp

__all__ = ["CycleGuard", "DepthGuard", "depth_clamp"]
