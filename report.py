import logging
import os
import stat
import tempfile
from typing import List

import numpy as np

log = logging.getLogger(__name__)


def format_bits(v) -> str:
    return "[" + " ".join(str(int(b)) for b in np.asarray(v).reshape(-1)) + "]"


def format_report(result) -> str:
    """Render a RunResult as the human-readable run report."""
    lines: List[str] = []
    lines.append(f"Generated information vector: {format_bits(result.info)}")
    m, n = result.H.shape
    lines.append(f"Parity-check matrix ({m}x{n}):")
    for i, row in enumerate(result.H):
        lines.append(f"P{i + 1}: {format_bits(row)}")
    lines.append(f"Encoded codeword: {format_bits(result.codeword)}")
    if result.injected_position is not None:
        lines.append(f"Error injected at position {result.injected_position}: {format_bits(result.received)}")
    else:
        lines.append(f"No error injected: {format_bits(result.received)}")
    lines.append(f"Syndrome: {format_bits(result.syndrome)}")
    if result.detected_position is not None:
        lines.append(f"Error found at position {result.detected_position}")
        lines.append(f"Corrected codeword: {format_bits(result.corrected)}")
    else:
        lines.append("No error detected")
    if result.matches:
        lines.append("Result matches the original codeword")
    else:
        lines.append("Result does NOT match the original codeword")
    return "\n".join(lines) + "\n"


def _report_mode(path: str) -> int:
    """Mode of the existing report, else what a plain open() would create."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_report(result, path: str) -> None:
    """
    Overwrite path with the report of a run.

    The text goes to a temporary file next to the target which then replaces it,
    so a failed write leaves any previous report untouched.
    """
    text = format_report(result)
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".hamming_report_", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates the file owner-only
        os.chmod(tmp_path, _report_mode(path))
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    log.info(f"Report written to {path}")
