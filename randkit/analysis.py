#!/usr/bin/env python3
"""
Data Analysis
=============
Byte-level statistics for a piece of data, rendered with Rich.

Reports size, distinct byte values, Shannon entropy, mean byte value and a
chi-square statistic against the uniform distribution. Random data should
show close to 8 bits of entropy per byte, a mean near 127.5 and a
chi-square value near 255.

Usage:
    from randkit.analysis import analyze_bytes, render_report

    report = analyze_bytes(Path("key.bin").read_bytes())
    render_report(report)
"""

import math
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .errors import CorpusIOError, EmptyCorpusError


@dataclass
class ByteReport:
    """Statistics for one input."""
    size: int
    distinct: int
    entropy: float          # bits per byte
    mean: float
    chi_square: float

    @property
    def entropy_ratio(self) -> float:
        """Entropy relative to the 8-bit maximum."""
        return self.entropy / 8.0


def analyze_bytes(data: bytes) -> ByteReport:
    """
    Compute statistics for data.

    Raises:
        EmptyCorpusError: If data is empty
    """
    if not data:
        raise EmptyCorpusError("Nothing to analyze: input is empty")

    size = len(data)
    counts = Counter(data)

    entropy = 0.0
    for count in counts.values():
        p = count / size
        entropy -= p * math.log2(p)

    expected = size / 256
    chi_square = sum((counts.get(b, 0) - expected) ** 2 / expected for b in range(256))

    return ByteReport(
        size=size,
        distinct=len(counts),
        entropy=entropy,
        mean=sum(data) / size,
        chi_square=chi_square,
    )


def read_input(path: Optional[Path] = None) -> bytes:
    """Read all bytes from path, or from standard input when path is None."""
    if path is None:
        return sys.stdin.buffer.read()
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise CorpusIOError(f"Cannot read {path}: {e.strerror or e}") from None


def render_report(report: ByteReport, console: Optional[Console] = None):
    """Print report as a two-column table."""
    console = console or Console()

    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Size", f"{report.size} bytes")
    table.add_row("Distinct bytes", f"{report.distinct} / 256")
    table.add_row("Entropy", f"{report.entropy:.4f} bits/byte ({report.entropy_ratio:.1%})")
    table.add_row("Mean byte value", f"{report.mean:.4f}")
    table.add_row("Chi-square (255 dof)", f"{report.chi_square:.2f}")

    console.print(table)
