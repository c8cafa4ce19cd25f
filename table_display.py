"""
Display and export of truth tables built by truth_tables.truth_table.

Main features:
- Box-drawn text rendering: atomic columns centred, proposition columns
  right-justified, bold header
- Printing straight to stdout from a table or from the builder's arguments
- Heat-map of a table with matplotlib
- CSV export through pandas
"""

from __future__ import annotations
from typing import Any, List, Sequence
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from truth_tables import TruthTable, truth_table

BOLD = "\x1b[1m"
RESET = "\x1b[0m"


def truth_table_frame(
    table: TruthTable,
    true_text: str = "true",
    false_text: str = "false",
) -> pd.DataFrame:
    """Return the table as a DataFrame of "true"/"false" text cells."""
    cells = np.where(table.to_array(), true_text, false_text)
    return pd.DataFrame(cells, columns=list(table.header))


def _center(text: str, width: int) -> str:
    # extra padding goes to the right
    pad = width - len(text)
    left = pad // 2
    return " " * left + text + " " * (pad - left)


def render_truth_table(
    table: TruthTable,
    bold_header: bool = True,
    true_text: str = "true",
    false_text: str = "false",
) -> str:
    """
    Render a truth table as a box-drawn grid.

    Parameters
    ----------
    table:
        Result of truth_table.
    bold_header:
        If True, wrap header names in ANSI bold escapes.
    true_text, false_text:
        Text used for the two truth values.

    Returns
    -------
    str
        Lines joined with newlines, for example:
            +-------+-------+---------+
            | p     | q     | p_iff_q |
            +-------+-------+---------+
            | true  | true  |    true |
            +-------+-------+---------+
            ...
    """
    frame = truth_table_frame(table, true_text, false_text)
    if frame.shape[1] == 0:
        return ""

    widths: List[int] = [
        max(len(name), int(frame[name].str.len().max())) for name in frame.columns
    ]
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: Sequence[str]) -> str:
        return "|" + "|".join(f" {cell} " for cell in cells) + "|"

    header_cells = []
    for name, width in zip(frame.columns, widths):
        padding = " " * (width - len(name))
        header_cells.append(f"{BOLD}{name}{RESET}{padding}" if bold_header else name + padding)

    lines = [border, line(header_cells), border]
    n = table.n_atomics
    for values in frame.itertuples(index=False):
        cells = [
            _center(text, width) if i < n else text.rjust(width)
            for i, (text, width) in enumerate(zip(values, widths))
        ]
        lines.append(line(cells))
        lines.append(border)
    return "\n".join(lines)


def print_truth_table(
    table_or_atomics: Any,
    propositions: Any = None,
    **options: Any,
) -> None:
    """
    Print a truth table to stdout.

    Accepts either a TruthTable or the arguments of truth_table, so
    print_truth_table(["p", "q"], [f, ("g", "not p")]) builds and prints
    in one call. Keyword options go to render_truth_table.
    """
    if isinstance(table_or_atomics, TruthTable):
        if propositions is not None:
            raise ValueError("propositions cannot be given with an already built table")
        table = table_or_atomics
    else:
        table = truth_table(table_or_atomics, propositions)
    print(render_truth_table(table, **options))


def plot_truth_table(
    table: TruthTable,
    title: str | None = None,
) -> None:
    """
    Plot a truth table as a heat-map using matplotlib.

    Each row is an assignment, each column an atomic or proposition; a
    vertical line separates atomic columns from proposition columns.
    """
    matrix = table.to_array().astype(int)
    if matrix.shape[1] == 0:
        raise ValueError("Truth table has no columns to plot")

    plt.imshow(matrix, aspect="auto", interpolation="nearest", vmin=0, vmax=1)
    plt.xticks(range(len(table.header)), table.header, rotation=45, ha="right")
    plt.ylabel("Assignment index")
    if table.n_atomics and table.n_propositions:
        plt.axvline(table.n_atomics - 0.5, color="red", linewidth=2)

    if title is None:
        title = f"Truth table over {table.n_atomics} atomic propositions"
    plt.title(title)

    plt.colorbar(label="Value")
    plt.tight_layout()
    plt.show()


def export_to_csv(
    table: TruthTable,
    output_file: str = "truth_table.csv",
    true_text: str = "true",
    false_text: str = "false",
) -> str:
    """Write the table to CSV and return the path written.

    A bare file name is placed in a "tables" directory, created if missing.
    """
    tables_dir = "tables"
    if os.path.dirname(output_file) == "":
        os.makedirs(tables_dir, exist_ok=True)
        output_file = os.path.join(tables_dir, output_file)

    truth_table_frame(table, true_text, false_text).to_csv(output_file, index=False)
    print(f"Truth table saved to {output_file}")
    return output_file
