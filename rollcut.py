# rollcut - main entry
# - Rooms from CSV, settings from config.properties
# - Clean error reporting (no traceback)
# - Summary page optional via config

import argparse
import logging
import sys

from io_utils import config_float, load_settings, parse_properties, parse_rooms
from packing import compute_layout_with
from costing import compute_quote
from pdf_export import generate_pdf


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Carpet roll cutting layout and broadloom quote"
    )
    parser.add_argument("rooms_csv", help="rooms.csv input")
    parser.add_argument("config_properties", help="config.properties input")
    parser.add_argument("output_pdf", help="output PDF path")
    parser.add_argument("--roll-width", type=float, default=None,
                        help="override roll-width from config (meters)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log layout decisions")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        # --- LOAD INPUT FILES ---
        rooms = parse_rooms(args.rooms_csv)
        cfg = parse_properties(args.config_properties)

        # --- CONFIG VALUES ---
        if args.roll_width is not None:
            cfg["roll-width"] = str(args.roll_width)
        settings = load_settings(cfg)
        price_per_m2 = config_float(cfg, "price-per-m2", 0.0)
        currency = cfg.get("currency", "$")

        # --- LAYOUT ---
        result = compute_layout_with(rooms, settings)
        quote = compute_quote(result, price_per_m2)

        # --- PDF OUTPUT ---
        generate_pdf(
            output_path=args.output_pdf,
            result=result,
            quote=quote,
            rooms=rooms,
            cfg=cfg,
            currency=currency
        )
    except ValueError as ve:
        print(f"\n[ERROR] {str(ve).strip()}\n")
        return 1
    except OSError as oe:
        print(f"\n[ERROR] {oe}\n")
        return 1

    if not result.pieces:
        print("[WARNING] No rooms with usable dimensions; the layout is empty.")

    print(f"Success! PDF saved to {args.output_pdf}")
    print(f"Broadloom required: {quote.broadloom_meters:.2f} m "
          f"({len(quote.shelves)} rows, {quote.efficiency_percent:.0f}% efficiency)")
    print(f"Total cost: {quote.carpet_cost:.2f} {currency}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
