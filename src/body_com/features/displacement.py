"""Reference pose tracking and signed COM displacement."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

import numpy as np

LOGGER = logging.getLogger(__name__)

# X and Y follow the screen (current - reference); Z follows depth (reference - current).
AXIS_SIGNS = np.array([-1.0, -1.0, 1.0])


class DisplacementMode(str, Enum):
    """When displacement becomes available."""

    AFTER_REFERENCE = "after-reference"
    ALWAYS = "always"


def signed_displacement(reference: Iterable[float], current: Iterable[float]) -> np.ndarray:
    """Return ``(-(rx-cx), -(ry-cy), rz-cz)``."""
    ref = np.asarray(reference, dtype=float)
    cur = np.asarray(current, dtype=float)
    # adding 0.0 turns -0.0 into 0.0 for unchanged axes
    return AXIS_SIGNS * (ref - cur) + 0.0


class ReferenceTracker:
    """Holds the operator-set reference COM for the lifetime of a run.

    The tracker starts without a reference. ``set_reference`` stores (or
    replaces) the reference; nothing clears it again.
    """

    def __init__(self, mode: DisplacementMode | str = DisplacementMode.AFTER_REFERENCE) -> None:
        self.mode = DisplacementMode(mode)
        self._reference: Optional[np.ndarray] = None
        self._reference_2d: Optional[np.ndarray] = None

    @property
    def has_reference(self) -> bool:
        return self._reference is not None

    @property
    def reference(self) -> Optional[np.ndarray]:
        if self._reference is not None:
            return self._reference.copy()
        if self.mode is DisplacementMode.ALWAYS:
            return np.zeros(3, dtype=float)
        return None

    @property
    def reference_2d(self) -> Optional[np.ndarray]:
        if self._reference_2d is not None:
            return self._reference_2d.copy()
        if self.mode is DisplacementMode.ALWAYS and self._reference is None:
            return np.zeros(2, dtype=float)
        return None

    def set_reference(self, com: Iterable[float], com_2d: Optional[Iterable[float]] = None) -> None:
        self._reference = np.array(com, dtype=float)
        self._reference_2d = None if com_2d is None else np.array(com_2d, dtype=float)
        LOGGER.info(
            "Reference COM set to (%.2f, %.2f, %.2f)",
            self._reference[0],
            self._reference[1],
            self._reference[2],
        )

    def displacement(self, current_com: Iterable[float]) -> Optional[np.ndarray]:
        """Signed displacement from the reference, or None while unavailable."""
        reference = self.reference
        if reference is None:
            return None
        return signed_displacement(reference, current_com)


__all__ = ["AXIS_SIGNS", "DisplacementMode", "ReferenceTracker", "signed_displacement"]
