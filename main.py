"""Simple CLI entry to exercise the trip sheet builder."""

import argparse
import json
import logging
import mimetypes
from pathlib import Path

from tripsheet.models import trip_to_dict
from tripsheet.normalizer import normalize_extraction
from tripsheet.route_map import render_svg_map
from tripsheet.services.extraction import extract_trip_data


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a normalized trip sheet from a document or raw JSON.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize_cmd = subparsers.add_parser("normalize", help="Normalize a raw extraction JSON file")
    normalize_cmd.add_argument("raw_file", type=Path, help="Path to the raw extraction JSON")

    extract_cmd = subparsers.add_parser("extract", help="Extract a trip from a PDF or image trip sheet")
    extract_cmd.add_argument("document", type=Path, help="Path to the trip sheet (PDF or image)")

    for sub in (normalize_cmd, extract_cmd):
        sub.add_argument("--output", type=Path, help="Optional path to save the trip JSON")
        sub.add_argument("--svg", type=Path, help="Optional path to save the route map SVG")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "normalize":
        trip = normalize_extraction(json.loads(args.raw_file.read_text()))
    else:
        mime_type = mimetypes.guess_type(args.document.name)[0] or "application/pdf"
        trip = extract_trip_data(args.document.read_bytes(), mime_type)

    result = json.dumps(trip_to_dict(trip), indent=2)
    if args.output:
        args.output.write_text(result)
        print(f"Trip saved to {args.output}")
    else:
        print(result)

    if args.svg:
        args.svg.write_text(render_svg_map(trip.legs))
        print(f"Route map saved to {args.svg}")


if __name__ == "__main__":
    main()
