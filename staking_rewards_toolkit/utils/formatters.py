"""Shared formatting and file utilities for commands."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table

from staking_rewards_toolkit.shared.constants import NATIVE_SYMBOL
from staking_rewards_toolkit.utils.numeric import format_numeric

# Shared console instance
console = Console()


def shorten_address(
    address: Optional[str], start_chars: int = 6, end_chars: int = 4
) -> str:
    """
    Shorten a wallet address for display.

    Args:
        address: Full address
        start_chars: Characters kept from the start
        end_chars: Characters kept from the end

    Returns:
        Shortened address like "erd1qq...x7kz", or "" for empty input
    """
    if not address:
        return ""
    if len(address) <= start_chars + end_chars + 3:
        return address
    return f"{address[:start_chars]}...{address[-end_chars:]}"


def format_egld(amount: Optional[float], symbol: str = NATIVE_SYMBOL) -> str:
    """
    Format a native amount: 1234.5 -> "1,234.50 EGLD".

    At least two and at most six fraction digits; "-" for missing values.
    """
    if amount is None or isinstance(amount, bool):
        return "-"
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return "-"
    if value != value:  # NaN
        return "-"
    text = format_numeric(value, 6)
    whole, _, fraction = text.partition(".")
    fraction = fraction.ljust(2, "0")
    return f"{whole}.{fraction} {symbol}"


def format_usd(amount: Optional[float]) -> str:
    """Format a USD amount with two decimals."""
    if amount is None:
        return "-"
    return f"${float(amount):,.2f}"


def save_json_output(
    data: Dict[str, Any],
    filename: str,
    output_dir: str = "output",
    print_path: bool = True,
) -> str:
    """
    Save data to a JSON file with automatic directory creation.

    Args:
        data: Data to save
        filename: Output filename (can include subdirectories)
        output_dir: Base output directory (default: 'output')
        print_path: Whether to print the saved file path

    Returns:
        Full path to saved file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filepath = output_path / filename
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)

    if print_path:
        console.print(f"[cyan]Data saved to:[/cyan] {filepath}")

    return str(filepath)


def generate_timestamped_filename(prefix: str, extension: str = "json") -> str:
    """
    Generate a filename with timestamp.

    Returns:
        Filename like "prefix_20240315_123456.json"
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{timestamp}.{extension}"


def create_table(*columns: str, right_align_from: int = 1) -> Table:
    """
    Create a Rich table with the toolkit's standard styling.

    Columns at index >= right_align_from are right-justified (numbers).
    """
    table = Table(
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
        pad_edge=False,
        box=None,
    )
    for idx, column in enumerate(columns):
        table.add_column(
            column, justify="right" if idx >= right_align_from else "left"
        )
    return table
