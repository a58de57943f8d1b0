"""Ancestor tracking for cycle detection during encoding.

A CycleGuard records the identity of every container the encoder is
currently writing. Entering a container that is already open means the
container is its own ancestor and the encode must stop.

Only ancestors are tracked: once a container's entries are written it is
removed, so the same container may appear again in an unrelated branch and
is then encoded as an independent copy.

Thread-safe: one guard per serialize() call, never shared.
Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from caretwire.diagnostics import CircularReferenceError, ErrorTemplate

__all__ = ["CircularReferenceError", "CycleGuard"]


@dataclass(slots=True)
class CycleGuard:
    """Set of containers currently being written.

    Identity is ``id(container)``. The ids stay valid for the whole guard
    lifetime because every open container is referenced by the encoder's
    call stack.

    Example:
        >>> guard = CycleGuard()
        >>> data = {}
        >>> with guard.entered(data):
        ...     guard.enter(data)
        Traceback (most recent call last):
        ...
        caretwire.diagnostics.errors.CircularReferenceError: ...
        >>> guard.is_empty
        True
    """

    # id(container) -> key path, in opening order
    _ancestors: dict[int, tuple[str, ...]] = field(default_factory=dict, init=False, repr=False)

    def enter(self, container: object, value_path: tuple[str, ...] = ()) -> None:
        """Mark container as open.

        Args:
            container: Container about to be written
            value_path: Key path of container, reported if a cycle is found
                and exposed as path while it is open

        Raises:
            CircularReferenceError: If container is already open
        """
        identity = id(container)
        if identity in self._ancestors:
            raise CircularReferenceError(ErrorTemplate.circular_reference(value_path))
        self._ancestors[identity] = value_path

    def leave(self, container: object) -> None:
        """Mark container as fully written."""
        self._ancestors.pop(id(container), None)

    @contextmanager
    def entered(
        self, container: object, value_path: tuple[str, ...] = ()
    ) -> Iterator[CycleGuard]:
        """Hold container open for the duration of the block.

        The container is released even when the block raises, so a failed
        encode never leaves residue in the guard.
        """
        self.enter(container, value_path)
        try:
            yield self
        finally:
            self.leave(container)

    def __contains__(self, container: object) -> bool:
        return id(container) in self._ancestors

    @property
    def depth(self) -> int:
        """Number of containers currently open."""
        return len(self._ancestors)

    @property
    def is_empty(self) -> bool:
        """True when no container is open."""
        return not self._ancestors

    @property
    def path(self) -> tuple[str, ...]:
        """Key path of the innermost open container, () when none is open."""
        return next(reversed(self._ancestors.values()), ())
