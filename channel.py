import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

log = logging.getLogger(__name__)


def flip_bit(c: np.ndarray, position: int) -> np.ndarray:
    """Return a copy of c with the bit at 0-indexed position inverted."""
    y = np.asarray(c, dtype=int).reshape(-1).copy()
    if not 0 <= position < len(y):
        raise IndexError(f"position {position} outside codeword of length {len(y)}")
    y[position] = 1 - y[position]
    return y


class Channel(ABC):
    """Abstract base class for memoryless binary channels."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def transmit(self, c: np.ndarray) -> np.ndarray:
        """Transmit a codeword c through the channel and return the received vector."""
        pass


class SingleBitErrorChannel(Channel):
    """Flips exactly one bit per transmission (or none when disabled)."""

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        position: Optional[int] = None,
        enabled: bool = True,
    ):
        """
        Parameters
        ----------
        rng : np.random.Generator | None
            Source for the random error position.
        position : int | None
            Optional fixed 0-indexed position to flip (debug mode).
        enabled : bool
            If False, codewords pass through unchanged.
        """
        super().__init__(rng)
        self.position = position
        self.enabled = enabled
        self.last_position: Optional[int] = None

    def transmit(self, c: np.ndarray) -> np.ndarray:
        c = np.asarray(c, dtype=int).reshape(-1)
        if not self.enabled or len(c) == 0:
            self.last_position = None
            return c.copy()
        if self.position is not None:
            pos = int(self.position)
        else:
            pos = int(self.rng.integers(0, len(c)))
        self.last_position = pos
        log.debug(f"Flipping bit at 0-indexed position {pos}")
        return flip_bit(c, pos)


class BSCChannel(Channel):
    """Binary Symmetric Channel (BSC) with hard-decision output."""

    def __init__(self, p: float, rng: Optional[np.random.Generator] = None):
        """
        Parameters
        ----------
        p : float
            Crossover probability.
        rng : np.random.Generator | None
            Noise source.
        """
        super().__init__(rng)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"crossover probability must be in [0, 1], got {p}")
        self.p = float(p)

    def transmit(self, c: np.ndarray) -> np.ndarray:
        y = np.asarray(c).copy().astype(int)
        # Random error pattern according to BSC(p)
        noise = (self.rng.random(size=y.shape) < self.p).astype(int)
        y ^= noise
        return y
