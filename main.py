import argparse
import logging
import sys
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from codes import InvalidParameter, SizeMismatch
from config import RunConfig, SweepConfig
from report import write_report
from runner import plot_parity_check_matrix, plot_wer_vs_p, run_single, sweep_bsc

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Hamming code demo: encode, corrupt one bit, decode and correct")
    ap.add_argument("--m", type=int, default=None, help="number of parity bits (prompted for if omitted)")
    ap.add_argument("--seed", type=int, default=None, help="seed for information bits and error position")
    ap.add_argument("--output", default=RunConfig.output_path, help="report file, overwritten every run")
    ap.add_argument("--error-position", type=int, default=None,
                    help="1-indexed position to corrupt (random if omitted)")
    ap.add_argument("--no-error", action="store_true", help="decode the codeword without corrupting it")
    ap.add_argument("-v", "--verbose", action="store_true", help="print the run to stdout")
    ap.add_argument("--log-level", default=RunConfig.log_level,
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--sweep", action="store_true", help="also run a Monte Carlo WER sweep over a BSC")
    ap.add_argument("--p-values", type=float, nargs="+", default=None, help="BSC crossover probabilities")
    ap.add_argument("--blocks", type=int, default=SweepConfig.n_blocks, help="blocks per sweep point")
    ap.add_argument("--workers", type=int, default=SweepConfig.max_workers, help="processes for the sweep")
    ap.add_argument("--plot", default=None, metavar="PREFIX",
                    help="save figures as PREFIX_matrix.png / PREFIX_wer.png instead of showing them")
    return ap


def config_from_args(args: argparse.Namespace) -> RunConfig:
    sweep = None
    if args.sweep:
        sweep = SweepConfig(n_blocks=args.blocks, max_workers=args.workers, plot_prefix=args.plot)
        if args.p_values:
            sweep.p_values = list(args.p_values)
    return RunConfig(
        m=args.m,
        seed=args.seed,
        output_path=args.output,
        error_position=args.error_position,
        inject_error=not args.no_error,
        verbose=args.verbose,
        log_level=args.log_level,
        sweep=sweep,
    )


def prompt_m() -> int:
    try:
        raw = input("Enter the number of parity bits (m): ")
    except EOFError:
        raise InvalidParameter("no value for m on standard input") from None
    try:
        return int(raw.strip())
    except ValueError:
        raise InvalidParameter(f"m must be an integer, got {raw.strip()!r}") from None


def run(cfg: RunConfig) -> None:
    rng = np.random.default_rng(cfg.seed)
    result = run_single(
        cfg.m, rng,
        error_position=cfg.error_position,
        inject_error=cfg.inject_error,
        verbose=cfg.verbose,
    )
    write_report(result, cfg.output_path)
    print(f"Result written to {cfg.output_path}")

    if cfg.sweep is not None:
        sw = cfg.sweep
        res = sweep_bsc(cfg.m, sw.p_values, sw.n_blocks, seed=cfg.seed, max_workers=sw.max_workers)
        for p, wer, ber in zip(res.param_values, res.bler, res.ber):
            print(f"[{res.label}] p={p:.4f} | WER={wer:.3e} | BER={ber:.3e}")
        fig1, _ = plot_parity_check_matrix(result.H, title=f"{res.label} parity-check matrix")
        fig2, _ = plot_wer_vs_p([res], title=f"{res.label} WER over BSC")
        if sw.plot_prefix:
            fig1.savefig(f"{sw.plot_prefix}_matrix.png")
            fig2.savefig(f"{sw.plot_prefix}_wer.png")
            plt.close(fig1)
            plt.close(fig2)
        else:
            plt.show()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    cfg = config_from_args(parser.parse_args(argv))
    logging.basicConfig(level=getattr(logging, cfg.log_level),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        if cfg.m is None:
            cfg.m = prompt_m()
        if cfg.m > cfg.max_m:
            parser.error(f"m={cfg.m} is too large for a dense matrix (max {cfg.max_m})")
        if cfg.error_position is not None and not cfg.inject_error:
            parser.error("--error-position and --no-error are mutually exclusive")
        run(cfg)
    except (InvalidParameter, SizeMismatch, IndexError) as e:
        parser.exit(2, f"error: {e}\n")
    except OSError as e:
        log.error(f"Could not write report: {e}")
        parser.exit(1, f"error: could not write report: {e}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
