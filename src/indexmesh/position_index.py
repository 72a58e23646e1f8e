"""Exact-match position → vertex id index."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np


def position_key(position: Sequence[float]) -> bytes:
    """Bit-exact hash key of a 3D position.

    Positions are keyed at the precision vertex buffers store them in
    (three little-endian float32 values), so two positions share a key
    exactly when they would be emitted as identical bytes.  ``0.0`` and
    ``-0.0`` are different keys.
    """
    arr = np.asarray(position, dtype="<f4")
    if arr.shape != (3,):
        raise ValueError(f"Position must have 3 components, got shape {arr.shape}")
    return arr.tobytes()


class PositionIndex:
    """Dense ids for distinct positions, assigned in first-seen order.

    No epsilon merging: positions that differ in any bit get separate ids.
    """

    def __init__(self) -> None:
        self._ids: Dict[bytes, int] = {}

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, position: Sequence[float]) -> bool:
        return position_key(position) in self._ids

    @property
    def next_id(self) -> int:
        return len(self._ids)

    def resolve(self, position: Sequence[float]) -> int:
        """Return the id for *position*, assigning the next one if unseen."""
        return self.resolve_key(position_key(position))

    def resolve_key(self, key: bytes) -> int:
        idx = self._ids.get(key)
        if idx is None:
            idx = len(self._ids)
            self._ids[key] = idx
        return idx

    def lookup(self, position: Sequence[float]) -> Optional[int]:
        """Return the id for *position*, or ``None`` without assigning one."""
        return self._ids.get(position_key(position))

    def copy(self) -> "PositionIndex":
        clone = PositionIndex()
        clone._ids = dict(self._ids)
        return clone
