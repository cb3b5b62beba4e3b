"""Deterministic random source.

A linear congruential generator with the classic ANSI C constants. It is the
only mutable state a generator touches: every draw advances the cursor, and
two generators seeded alike produce identical sequences.
"""

DEFAULT_SEED = 0x5EED


class SeededRng:
    """Seeded linear congruential generator.

    Args:
        seed: Initial state; ``0`` or ``None`` selects ``DEFAULT_SEED``
    """

    MODULUS = 0x80000000
    MULTIPLIER = 1103515245
    INCREMENT = 12345

    __slots__ = ("_state",)

    def __init__(self, seed: int | None = None) -> None:
        state = int(seed) % self.MODULUS if seed else 0
        self._state = state or DEFAULT_SEED

    @property
    def state(self) -> int:
        return self._state

    def next_int(self) -> int:
        """Advance and return the raw state in ``[0, 2**31)``."""
        self._state = (self.MULTIPLIER * self._state + self.INCREMENT) % self.MODULUS
        return self._state

    def next_float(self) -> float:
        """Return a float in ``[0, 1)``."""
        return self.next_int() / self.MODULUS

    def next_range(self, low: float, high: float) -> float:
        """Return a float in ``[low, high)``."""
        return low + self.next_float() * (high - low)

    def __repr__(self) -> str:
        return f"SeededRng(state={self._state})"
