import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from codes import LinearBlockCode

log = logging.getLogger(__name__)


def syndrome_to_position(s: np.ndarray) -> Optional[int]:
    """
    Read the syndrome as a binary number (row 0 = LSB).
    Returns the 1-indexed error position, or None for an all-zero syndrome.
    """
    s = np.asarray(s, dtype=int).reshape(-1)
    position = sum(int(bit) << i for i, bit in enumerate(s))
    return position if position else None


def locate_error_by_scan(s: np.ndarray, H: np.ndarray) -> Optional[int]:
    """Find the column of H equal to the syndrome; 1-indexed, None if zero or absent."""
    s = np.asarray(s, dtype=int).reshape(-1)
    if not np.any(s):
        return None
    matches = np.flatnonzero(np.all(H == s.reshape(-1, 1), axis=0))
    return int(matches[0]) + 1 if len(matches) else None


def correct_error(c: np.ndarray, position: Optional[int]) -> np.ndarray:
    """Flip the bit at 1-indexed position of c in place; None leaves c untouched."""
    if position is not None:
        c[position - 1] = 1 - c[position - 1]
    return c


def verify(corrected: np.ndarray, original: np.ndarray) -> bool:
    return bool(np.array_equal(np.asarray(corrected), np.asarray(original)))


@dataclass
class DecodeResult:
    syndrome: np.ndarray
    error_position: Optional[int]  # 1-indexed, None if no error detected
    codeword: np.ndarray


class ChannelDecoder(ABC):
    """Abstract base class for all channel decoders."""

    def __init__(self, code: LinearBlockCode):
        self.code = code

    @abstractmethod
    def decode_to_codeword(self, received_vector: np.ndarray) -> np.ndarray:
        """Decode a received vector and return the estimated codeword."""
        pass


class SyndromeDecoder(ChannelDecoder):
    """
    Hard-decision syndrome decoder for single-error-correcting codes.

    A zero syndrome is reported as "no error detected". Under the single-error
    model a double error can also produce a zero syndrome, or point at a third
    bit; neither case is detected.
    """

    def decode(self, y: np.ndarray) -> DecodeResult:
        s = self.code.syndrome(y)
        position = syndrome_to_position(s)
        c_hat = np.asarray(y, dtype=int).reshape(-1).copy()
        if position is None:
            log.debug("Zero syndrome, no error detected")
        elif position > self.code.n:
            # only reachable for codes whose columns do not cover every nonzero pattern
            log.warning(f"Syndrome {s.tolist()} points outside the codeword; leaving it as received")
            position = None
        else:
            log.debug(f"Syndrome {s.tolist()} -> correcting position {position}")
            correct_error(c_hat, position)
        return DecodeResult(syndrome=s, error_position=position, codeword=c_hat)

    def decode_to_codeword(self, y: np.ndarray) -> np.ndarray:
        """Return the corrected codeword."""
        return self.decode(y).codeword
