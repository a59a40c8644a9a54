"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Any, Dict

RNGStatePayload = Dict[str, Any]


class RNG:
    """Wrapper around random.Random that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def uniform(self, a: float, b: float) -> float:
        """Return a random floating point number N such that a <= N <= b."""
        return self._random.uniform(a, b)

    def export_state(self) -> RNGStatePayload:
        """Return a JSON-safe snapshot of the generator state."""
        version, internal, gauss_next = self._random.getstate()
        return {"seed": self.seed, "version": version, "internal": list(internal), "gauss_next": gauss_next}

    def restore_state(self, payload: RNGStatePayload) -> None:
        """Restore a snapshot produced by export_state."""
        try:
            version = payload["version"]
            internal = tuple(int(value) for value in payload["internal"])
            gauss_next = payload.get("gauss_next")
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("RNG state payload is malformed.") from exc
        try:
            self._random.setstate((version, internal, gauss_next))
        except (TypeError, ValueError) as exc:
            raise ValueError("RNG state payload was rejected.") from exc
