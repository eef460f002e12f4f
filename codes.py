import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

log = logging.getLogger(__name__)


class InvalidParameter(ValueError):
    """The parity bit count does not describe a usable Hamming code."""


class SizeMismatch(ValueError):
    """A vector length disagrees with the dimensions of the parity-check matrix."""


def hamming_parameters(m: int) -> Tuple[int, int]:
    """
    Derive codeword length n and information length k from the number of parity bits m.
    Raises InvalidParameter for anything but a positive integer.
    """
    if isinstance(m, bool) or not isinstance(m, (int, np.integer)):
        raise InvalidParameter(f"m must be an integer, got {m!r}")
    m = int(m)
    if m <= 0:
        raise InvalidParameter(f"m must be at least 1, got {m}")
    n = (1 << m) - 1
    k = n - m
    if k < 0:
        raise InvalidParameter(f"m={m} gives a negative information length k={k}")
    return n, k


def is_power_of_two(p: int) -> bool:
    return p > 0 and (p & (p - 1)) == 0


def parity_positions(n: int) -> NDArray:
    """0-indexed columns whose 1-indexed position is a power of two."""
    return np.array([j for j in range(n) if is_power_of_two(j + 1)], dtype=int)


def information_positions(n: int) -> NDArray:
    """0-indexed columns that carry payload bits, in payload order."""
    return np.array([j for j in range(n) if not is_power_of_two(j + 1)], dtype=int)


def build_parity_check_matrix(m: int) -> NDArray:
    """
    Build the m x n parity-check matrix of the Hamming code.

    Row i is the check covering bit weight 2^i; column j holds the binary
    representation of j + 1 with row 0 as least significant bit.
    The returned array is read-only.
    """
    n, _ = hamming_parameters(m)
    positions = np.arange(1, n + 1)
    rows = np.arange(m).reshape(-1, 1)
    H = ((positions >> rows) & 1).astype(int)  # shape (m, n)
    H.flags.writeable = False
    log.debug(f"Built parity-check matrix m={m}, n={n}")
    return H


def _as_bits(v, name: str) -> NDArray:
    raw = np.asarray(v).reshape(-1)
    # checked before the int cast, which would truncate 0.7 to 0
    if raw.size and not np.all((raw == 0) | (raw == 1)):
        raise ValueError(f"{name} must contain only 0 and 1")
    return raw.astype(int)


def hamming_encode(u, H: NDArray) -> NDArray:
    """
    Encode information bits u with parity-check matrix H.

    Information bits go, in order, to the non-power-of-two positions; the bit at
    position 2^i is then set so that row i of H sums to zero.
    """
    m, n = H.shape
    k = n - m
    u = _as_bits(u, "information vector")
    if len(u) != k:
        raise SizeMismatch(f"Expected {k} information bits for a {m}x{n} matrix, got {len(u)}")

    c = np.zeros(n, dtype=int)
    c[information_positions(n)] = u

    # parity slots are still zero, so each row XOR only sees the other covered bits
    for i in range(m):
        pos = (1 << i) - 1
        c[pos] = int(np.sum(c[H[i] == 1]) % 2)
    return c


def compute_syndrome(c, H: NDArray) -> NDArray:
    """Re-evaluate every parity check of H against codeword c; one bit per row."""
    c = np.asarray(c, dtype=int).reshape(-1)
    if len(c) != H.shape[1]:
        raise SizeMismatch(f"Expected codeword length {H.shape[1]}, got {len(c)}")
    return (c @ H.T) % 2


class LinearBlockCode(ABC):
    """Binary linear block code described by its parity-check matrix H."""

    def __init__(self, n: int, k: int, name: str = "Generic Code"):
        self.n = n  # Codeword length
        self.k = k  # Information length
        self.name = name
        self.field_order = 2
        self.H: Optional[NDArray] = None
        self.d_min = None
        self.t = None  # Error correction capability

    @abstractmethod
    def encode(self, u: np.ndarray) -> np.ndarray:
        """Map k information bits to an n-bit codeword."""
        pass

    @abstractmethod
    def extract_info(self, c: np.ndarray) -> np.ndarray:
        """Recover the k information bits from a codeword."""
        pass

    def syndrome(self, c: np.ndarray) -> np.ndarray:
        return compute_syndrome(c, self.H)

    def is_codeword(self, c: np.ndarray) -> bool:
        return not np.any(self.syndrome(c))

    def generate_message(self, rng: np.random.Generator) -> NDArray:
        return rng.integers(0, self.field_order, size=(self.k,), dtype=np.int64)


class HammingCode(LinearBlockCode):
    """Binary Hamming code with m parity bits at the power-of-two positions."""

    def __init__(self, m: int):
        n, k = hamming_parameters(m)
        super().__init__(n, k, f"Hamming({n},{k})")
        self.m = int(m)
        self.H = build_parity_check_matrix(self.m)
        self.d_min = 3
        self.t = 1
        self.info_positions = information_positions(n)
        log.info(f"HammingCode(m={self.m}, n={n}, k={k})")

    def encode(self, u: np.ndarray) -> np.ndarray:
        return hamming_encode(u, self.H)

    def extract_info(self, c: np.ndarray) -> np.ndarray:
        c = np.asarray(c, dtype=int).reshape(-1)
        if len(c) != self.n:
            raise SizeMismatch(f"Expected codeword length {self.n}, got {len(c)}")
        return c[self.info_positions]
