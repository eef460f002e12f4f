import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from channel import BSCChannel, Channel, SingleBitErrorChannel
from codes import HammingCode, LinearBlockCode, SizeMismatch
from decoder import SyndromeDecoder, verify

log = logging.getLogger(__name__)


# parallelized function to run a single crossover probability point
def _run_single_p_point(idx: int, m: int, p: float, n_blocks: int, base_seed: Optional[int]):
    """Worker entry point; builds its own code and channel in the child process."""
    seed = (base_seed + idx) if base_seed is not None else None
    rng = np.random.default_rng(seed)
    code = HammingCode(m)
    stats = monte_carlo(code, BSCChannel(p, rng=rng), n_blocks=n_blocks, rng=rng)
    return idx, stats


# ============================================================
# 1. Data structures
# ============================================================

@dataclass
class RunResult:
    """Everything one pass of the pipeline produced."""
    m: int
    n: int
    k: int
    info: np.ndarray
    H: np.ndarray
    codeword: np.ndarray
    received: np.ndarray
    injected_position: Optional[int]  # 1-indexed
    syndrome: np.ndarray
    detected_position: Optional[int]  # 1-indexed
    corrected: np.ndarray
    matches: bool


@dataclass
class MonteCarloStats:
    """Aggregate Monte Carlo statistics for a fixed channel setting."""
    n_blocks: int
    k: int
    n_block_errors: int = 0
    n_bit_errors: int = 0

    @property
    def wer(self) -> float:
        """Block error rate = WER."""
        return self.n_block_errors / self.n_blocks if self.n_blocks > 0 else 0.0

    @property
    def ber(self) -> float:
        """Information bit error rate."""
        total_bits = self.n_blocks * self.k
        return self.n_bit_errors / total_bits if total_bits > 0 else 0.0


@dataclass
class SweepResult:
    """Statistics for one code when sweeping the BSC crossover probability."""
    param_values: np.ndarray
    param_name: str
    label: str
    bler: np.ndarray
    ber: np.ndarray


# ============================================================
# 2. Single run
# ============================================================

def _format_bits_with_diff(ref_vec: np.ndarray, vec: np.ndarray, enable_color: bool = True) -> str:
    """Bit vector as text, positions where vec != ref in red (ANSI escape)."""
    tokens: list[str] = []
    for rb, vb in zip(np.asarray(ref_vec, dtype=int), np.asarray(vec, dtype=int)):
        if enable_color and (rb != vb):
            tokens.append(f"\033[31m{vb}\033[0m")  # red
        else:
            tokens.append(str(vb))
    return "[" + " ".join(tokens) + "]"


def run_single(
        m: int,
        rng: Optional[np.random.Generator] = None,
        error_position: Optional[int] = None,
        inject_error: bool = True,
        info: Optional[Sequence[int]] = None,
        verbose: bool = False,
) -> RunResult:
    """
    Derive, build, encode, corrupt one bit, decode, correct and verify.

    Parameters
    ----------
    m : int
        Number of parity bits.
    rng : np.random.Generator | None
        Source of the information bits and of the error position.
    error_position : int | None
        1-indexed position to corrupt. If None, one is drawn uniformly.
    inject_error : bool
        If False, the codeword is decoded uncorrupted.
    info : sequence of int | None
        Information bits. If None, a random vector of length k is drawn.
    verbose : bool
        If True, pretty-print the run.
    """
    rng = rng if rng is not None else np.random.default_rng()
    code = HammingCode(m)

    if info is None:
        u = code.generate_message(rng)
    else:
        u = np.asarray(info, dtype=int).reshape(-1)
        if len(u) != code.k:
            raise SizeMismatch(f"Expected {code.k} information bits for m={code.m}, got {len(u)}")

    c = code.encode(u)

    position = error_position - 1 if error_position is not None else None
    channel = SingleBitErrorChannel(rng, position=position, enabled=inject_error)
    y = channel.transmit(c)
    injected = channel.last_position + 1 if channel.last_position is not None else None

    decoded = SyndromeDecoder(code).decode(y)
    ok = verify(decoded.codeword, c)
    log.info(f"{code.name}: injected={injected}, detected={decoded.error_position}, match={ok}")

    result = RunResult(
        m=code.m, n=code.n, k=code.k,
        info=u, H=code.H, codeword=c, received=y,
        injected_position=injected,
        syndrome=decoded.syndrome,
        detected_position=decoded.error_position,
        corrected=decoded.codeword,
        matches=ok,
    )

    if verbose:
        print("\n" + "=" * 80)
        print(f">>> Single run: code={code.name}, channel={type(channel).__name__}")
        print("-" * 80)
        print(f"u ({code.k:2d}): {_format_bits_with_diff(u, u)}")
        for i, row in enumerate(code.H):
            print(f"P{i + 1:<6d}: {_format_bits_with_diff(row, row)}")
        print(f"c ({code.n:2d}): {_format_bits_with_diff(c, c)}")
        print(f"y        : {_format_bits_with_diff(c, y)}")
        print(f"flipped  : {injected}")
        print(f"syndrome : {_format_bits_with_diff(decoded.syndrome, decoded.syndrome)}")
        print(f"located  : {decoded.error_position}")
        print(f"c_hat    : {_format_bits_with_diff(c, decoded.codeword)}")
        print(f"block OK : {ok}")
        print("=" * 80)

    return result


# ============================================================
# 3. Monte Carlo
# ============================================================

def monte_carlo(
        code: LinearBlockCode,
        channel: Channel,
        n_blocks: int,
        rng: Optional[np.random.Generator] = None,
        log_every: int = 0,
) -> MonteCarloStats:
    """Encode random messages, send them through channel and count residual errors."""
    rng = rng if rng is not None else np.random.default_rng()
    decoder = SyndromeDecoder(code)
    stats = MonteCarloStats(n_blocks=0, k=code.k)

    for blk in range(1, n_blocks + 1):
        u = code.generate_message(rng)
        c_hat = decoder.decode_to_codeword(channel.transmit(code.encode(u)))
        bit_errs = int(np.sum(u != code.extract_info(c_hat)))

        stats.n_blocks += 1
        stats.n_bit_errors += bit_errs
        if bit_errs > 0:
            stats.n_block_errors += 1

        if log_every and blk % log_every == 0:
            log.info(f"[MC] blocks={blk}, errors={stats.n_block_errors}, current WER={stats.wer:.3e}")

    return stats


def sweep_bsc(
        m: int,
        p_values: Sequence[float],
        n_blocks: int,
        seed: Optional[int] = None,
        label: Optional[str] = None,
        max_workers: int = 1,
) -> SweepResult:
    """
    Monte Carlo WER/BER of Hamming(m) over a BSC for each crossover probability.
    Point idx is seeded with seed + idx, so results do not depend on max_workers.
    """
    p_values = np.asarray(p_values, dtype=float)
    label = label or HammingCode(m).name
    n_points = len(p_values)
    stats_list: List[Optional[MonteCarloStats]] = [None] * n_points

    log.info(f"Starting BSC sweep: {label} ({n_points} points, workers={max_workers})")

    if max_workers > 1:
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_run_single_p_point, idx, m, float(p), n_blocks, seed)
                for idx, p in enumerate(p_values)
            ]
            for future in as_completed(futures):
                idx, stats = future.result()
                stats_list[idx] = stats
    else:
        for idx, p in enumerate(p_values):
            _, stats_list[idx] = _run_single_p_point(idx, m, float(p), n_blocks, seed)

    for p, stats in zip(p_values, stats_list):
        log.info(f"[{label}] p={p:.4f} | WER={stats.wer:.3e} | BER={stats.ber:.3e} | Blocks={stats.n_blocks}")

    return SweepResult(
        param_values=p_values,
        param_name="BSC Crossover Probability p",
        label=label,
        bler=np.array([s.wer for s in stats_list], dtype=float),
        ber=np.array([s.ber for s in stats_list], dtype=float),
    )


# ============================================================
# 4. Plotting helpers
# ============================================================

def plot_parity_check_matrix(H: np.ndarray, title: Optional[str] = None):
    fig, ax = plt.subplots()
    m, n = H.shape
    ax.imshow(H, cmap="Greys", aspect="auto", interpolation="nearest")
    ax.set_xlabel("Codeword position")
    ax.set_ylabel("Parity check")
    ax.set_xticks(range(n))
    ax.set_xticklabels([str(j + 1) for j in range(n)])
    ax.set_yticks(range(m))
    ax.set_yticklabels([f"P{i + 1}" for i in range(m)])
    if title: ax.set_title(title)
    return fig, ax


def plot_wer_vs_p(results: List[SweepResult], title: Optional[str] = None):
    fig, ax = plt.subplots()
    for res in results:
        # zero WER cannot be drawn on a log axis
        y_vals = np.where(res.bler <= 0, np.nan, res.bler)
        ax.plot(res.param_values, y_vals, marker="o", label=res.label)
    ax.set_xlabel(results[0].param_name)
    ax.set_ylabel("Word Error Rate (WER)")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.grid(True, which="both", linestyle=":")
    ax.legend()
    if title: ax.set_title(title)
    return fig, ax
