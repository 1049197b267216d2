"""
measurekit - Measurement Toolkit

Command line entry point.

Usage:
    python main.py categories                       # List categories
    python main.py units Length                     # List units of a category
    python main.py convert 1 length.mile length.meter
    python main.py --data-dir ~/.measurekit convert 5 length.kilometer length.mile
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from measurekit import __version__
from measurekit.config import ToolkitConfig
from measurekit.core.conversion import is_valid_result
from measurekit.core.store import ToolkitStateStore
from measurekit.core.types import MeasurementCategory, UnitDefinition, identity_for
from measurekit.utils.formatting import describe_conversion


def parse_category(text: str) -> MeasurementCategory:
    """Accept a category by title ("Fuel Consumption") or name ("fuel_consumption")."""
    wanted = text.strip().lower()
    for category in MeasurementCategory:
        if wanted in (category.value.lower(), category.name.lower(), category.name.lower().replace("_", "-")):
            return category
    raise argparse.ArgumentTypeError(f"unknown category: {text!r}")


def find_unit(store: ToolkitStateStore, unit_id: str) -> UnitDefinition | None:
    """Look a unit up by definition id across every category."""
    for category in store.catalog.categories():
        for unit in store.units_for(category):
            if unit.id == unit_id:
                return unit
    return None


def open_store(args: argparse.Namespace) -> ToolkitStateStore:
    config = ToolkitConfig.from_env()
    if args.data_dir:
        config = replace(config, data_dir=Path(args.data_dir).expanduser())
    store = ToolkitStateStore.from_config(config)
    asyncio.run(store.hydrate())
    return store


# =============================================================================
# Commands
# =============================================================================

def cmd_categories(store: ToolkitStateStore, args: argparse.Namespace) -> int:
    for category in store.catalog.categories():
        base = store.catalog.base_unit_for(category)
        count = len(store.units_for(category))
        print(f"{category.value:18s} {count:3d} units  (base: {base.symbol})")
    return 0


def cmd_units(store: ToolkitStateStore, args: argparse.Namespace) -> int:
    print(f"{args.category.value}")
    print("=" * 40)
    for unit in store.units_for(args.category):
        marker = "*" if unit.is_system_unit else " "
        print(f"{marker} {unit.symbol:10s} {unit.name:28s} {unit.id}")
    return 0


def cmd_convert(store: ToolkitStateStore, args: argparse.Namespace) -> int:
    source = find_unit(store, args.from_unit)
    target = find_unit(store, args.to_unit)
    for unit_id, unit in ((args.from_unit, source), (args.to_unit, target)):
        if unit is None:
            print(f"error: unknown unit id {unit_id!r}", file=sys.stderr)
            return 2

    if source.category != target.category:
        print(f"error: cannot convert {source.category.value} to {target.category.value}",
              file=sys.stderr)
        return 2

    from_identity = identity_for(source)
    to_identity = identity_for(target)
    result = store.convert(args.value, from_identity, to_identity)
    if not is_valid_result(result):
        print("error: conversion has no finite result", file=sys.stderr)
        return 1

    settings = store.settings
    precision = settings.precision if args.precision is None else store.config.clamp_precision(args.precision)
    print(describe_conversion(args.value, source, result, target, precision,
                              settings.grouping_separator_enabled))

    if store.config.data_dir is not None:
        store.add_history_entry(source.category, from_identity, to_identity, args.value, result)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="measurekit - Measurement Toolkit",
        prog="measurekit"
    )
    parser.add_argument(
        "--data-dir",
        help="Directory holding stored custom units, settings and history"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("categories", help="List measurement categories")

    units = commands.add_parser("units", help="List the units of a category")
    units.add_argument("category", type=parse_category)

    convert = commands.add_parser("convert", help="Convert a value between two units")
    convert.add_argument("value", type=float)
    convert.add_argument("from_unit", metavar="FROM", help="Source unit id (e.g. length.mile)")
    convert.add_argument("to_unit", metavar="TO", help="Target unit id (e.g. length.meter)")
    convert.add_argument(
        "--precision", "-p",
        type=int,
        help="Fraction digits (defaults to the stored setting)"
    )

    return parser


COMMANDS = {
    "categories": cmd_categories,
    "units": cmd_units,
    "convert": cmd_convert,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    with open_store(args) as store:
        return COMMANDS[args.command](store, args)


if __name__ == "__main__":
    sys.exit(main())
