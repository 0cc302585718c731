from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from mrz_decoder.config import CONFIG
from mrz_decoder.errors import DecodeError
from mrz_decoder.pipeline.parser import default_options, parse
from mrz_decoder.pipeline.policy import ChecksumPolicy, parse_reference_date

LOGGER = logging.getLogger("mrz_decoder.scripts.parse_mrz")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode an ICAO 9303 machine-readable zone.")
    parser.add_argument("path", nargs="?", help="File holding the MRZ lines (defaults to stdin).")
    parser.add_argument("--lenient", action="store_true", help="Report check digit mismatches instead of failing.")
    parser.add_argument("--reference-date", help="Date used to infer the century of two-digit years.")
    parser.add_argument("--uppercase", action="store_true", help="Uppercase the input before decoding.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

    try:
        text = Path(args.path).read_text() if args.path else sys.stdin.read()
    except OSError as exc:
        LOGGER.error("Could not read MRZ input: %s", exc)
        print(json.dumps({"error": {"code": "unreadable_input", "message": str(exc), "field": None}}, indent=2))
        return 1
    options = default_options()
    if args.lenient:
        options = replace(options, checksums=ChecksumPolicy.lenient())
    if args.reference_date:
        options = replace(options, reference_date=parse_reference_date(args.reference_date))
    if args.uppercase:
        options = replace(options, normalize_case=True)

    try:
        document = parse(text, options)
    except DecodeError as exc:
        LOGGER.error("Could not decode MRZ: %s", exc)
        print(json.dumps({"error": exc.to_payload()}, indent=2))
        return 1
    print(json.dumps(document.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
