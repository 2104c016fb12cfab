#!/usr/bin/env python3
"""
Invoice Number Tool

Generates, parses and sorts invoice numbers, and resolves division prices,
from the command line.

Usage:
    python invoice_numbers.py generate "Sapphire Productions" 2026 2 3
    python invoice_numbers.py parse SAP-2602-C003-01
    python invoice_numbers.py sort CEE-2601-C002-01 CEE-2601-C001-01
    python invoice_numbers.py price --regular 130 --early-bird 100 --deadline 2026-03-01
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.invoice_number import (
    InvoiceNumber,
    format_invoice_number,
    get_organizer_code,
    parse_invoice_number,
    sort_invoice_numbers,
)
from domain.pricing import DivisionPricing, EarlyBirdTier, RegularTier, resolve_division_pricing
from services.settings import configure_logging, get_settings


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid price: {value!r}")


def _datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO date/time: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate, parse and sort ORG-YYEE-CNNN-VV invoice numbers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Invoice for the 3rd club at Sapphire Productions' 2nd event of 2026
  python invoice_numbers.py generate "Sapphire Productions" 2026 2 3

  # Revised invoice (version 2)
  python invoice_numbers.py generate "Cheer Elite Events" 2025 1 1 --version 2

  # Show the parts of an invoice number
  python invoice_numbers.py parse SAP-2602-C003-01

  # Sort invoice numbers
  python invoice_numbers.py sort SAP-2602-C003-01 CEE-2501-C001-01

  # Price a division on a given day
  python invoice_numbers.py price --regular 130 --early-bird 100 \\
      --deadline 2026-03-01 --on 2026-02-15
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate an invoice number")
    generate.add_argument("organizer", help="Organizer name (e.g., \"Cheer Elite Events\")")
    generate.add_argument("year", type=int, help="Event year (e.g., 2026)")
    generate.add_argument("event_sequence", type=int, help="Organizer's Nth event of the year")
    generate.add_argument("club_sequence", type=int, help="Nth club to register for the event")
    generate.add_argument("--version", "-v", type=int, default=1, help="Invoice version (default: 1)")

    parse = subparsers.add_parser("parse", help="Show the parts of an invoice number")
    parse.add_argument("invoice_number")

    sort = subparsers.add_parser("sort", help="Sort invoice numbers")
    sort.add_argument("invoice_numbers", nargs="+")

    price = subparsers.add_parser("price", help="Resolve the active price of a division")
    price.add_argument("--regular", type=_decimal, required=True, help="Regular price")
    price.add_argument("--early-bird", type=_decimal, help="Early-bird price")
    price.add_argument("--deadline", help="Early-bird deadline (YYYY-MM-DD, inclusive)")
    price.add_argument("--on", type=_datetime, help="Date to price at (default: now)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    if args.command == "generate":
        config = InvoiceNumber(
            organizer_code=get_organizer_code(args.organizer),
            year=args.year,
            event_sequence=args.event_sequence,
            club_sequence=args.club_sequence,
            version=args.version,
        )
        invoice_number = format_invoice_number(config)
        print(invoice_number)
        if not config.fits_fixed_width():
            print(f"WARNING: {invoice_number} exceeds the fixed field widths and will not parse", file=sys.stderr)
        return 0

    if args.command == "parse":
        parsed = parse_invoice_number(args.invoice_number, century=settings.invoice_century)
        if parsed is None:
            print(f"ERROR: invalid invoice number: {args.invoice_number}", file=sys.stderr)
            return 1
        print(f"Organizer code: {parsed.organizer_code}")
        print(f"Year:           {parsed.year}")
        print(f"Event:          {parsed.event_sequence}")
        print(f"Club:           {parsed.club_sequence}")
        print(f"Version:        {parsed.version}")
        return 0

    if args.command == "sort":
        for invoice_number in sort_invoice_numbers(args.invoice_numbers):
            print(invoice_number)
        return 0

    early_bird = None
    if args.early_bird is not None:
        early_bird = EarlyBirdTier(price=args.early_bird, deadline=args.deadline)
    pricing = DivisionPricing(regular=RegularTier(price=args.regular), early_bird=early_bird)
    rate = resolve_division_pricing(pricing, args.on)
    print(f"{rate.tier.value} {rate.price}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
