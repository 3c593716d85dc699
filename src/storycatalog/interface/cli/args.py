from __future__ import annotations

"""
CLI Argument Definition.

Defines the command-line schema for registering story batches and driving
the navigator from a terminal or a script.
"""

import argparse
from typing import Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the storycatalog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="storycatalog",
        description="Register story batches, then browse the resulting catalog.",
    )

    # --- Input ---
    p.add_argument(
        "batches",
        nargs="*",
        metavar="BATCH",
        help="JSON file with a story batch (id -> story, or {\"stories\": {...}}). "
             "Files are registered in order.",
    )

    # --- Selection ---
    p.add_argument(
        "--view-mode",
        dest="view_mode",
        default=None,
        help="View mode used for navigation (defaults to the configured one).",
    )
    p.add_argument(
        "--select",
        dest="select_id",
        default=None,
        metavar="ID",
        help="Select a story by id.",
    )
    p.add_argument(
        "--kind",
        default=None,
        help="Kind of the story to select (used with --name).",
    )
    p.add_argument(
        "--name",
        default=None,
        help="Name of the story to select. Without --kind, the kind of the current story is used.",
    )

    # --- Sequential navigation ---
    jumps = p.add_mutually_exclusive_group()
    jumps.add_argument("--next", dest="jump", action="store_const", const="story+1",
                       help="Move to the next story.")
    jumps.add_argument("--prev", dest="jump", action="store_const", const="story-1",
                       help="Move to the previous story.")
    jumps.add_argument("--next-component", dest="jump", action="store_const", const="component+1",
                       help="Move to the first story of the next component.")
    jumps.add_argument("--prev-component", dest="jump", action="store_const", const="component-1",
                       help="Move to the first story of the previous component.")
    p.add_argument(
        "--times",
        type=_positive_int,
        default=1,
        help="How many times to repeat the move (default: 1).",
    )

    # --- Lookups ---
    p.add_argument(
        "--parameters",
        dest="parameters_id",
        default=None,
        metavar="ID",
        help="Print the parameters of a story.",
    )
    p.add_argument(
        "--param",
        dest="parameter_name",
        default=None,
        metavar="NAME",
        help="Restrict --parameters to a single parameter.",
    )

    # --- Output and runtime ---
    p.add_argument("--json", dest="json_output", action="store_true",
                   help="Print the catalog and selection as JSON.")
    p.add_argument("--dump-config", action="store_true",
                   help="Print the effective configuration and exit.")
    p.add_argument("--use-defaults", action="store_true",
                   help="Ignore the saved configuration file.")
    p.add_argument("--log-file", default=None,
                   help="Also write logs to this file.")
    p.add_argument("--debug", action="store_true",
                   help="Enable debug logging.")

    return p


def parse_jump(jump: Optional[str]) -> Optional[tuple]:
    """
    Decode the --next/--prev style flags.

    Returns:
        Optional[tuple]: ("story" | "component", direction) or None.
    """
    if not jump:
        return None
    target, sign = jump[:-2], jump[-2:]
    return target, (1 if sign == "+1" else -1)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number
