#!/usr/bin/env python3
"""Parse headers and print the resulting Document as JSON."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from unrealdocpy.config import Settings, load_settings
from unrealdocpy.document import document_to_dict
from unrealdocpy.pipeline import parse_header_files


def _collect_headers(paths: list[Path]) -> list[Path]:
    headers: list[Path] = []
    for path in paths:
        if path.is_dir():
            headers.extend(sorted(item for item in path.rglob("*.h") if item.is_file()))
        else:
            headers.append(path)
    return headers


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump the Document extracted from reflected headers")
    parser.add_argument("paths", type=Path, nargs="+", help="Header files or directories of headers")
    parser.add_argument("--config", type=Path, default=None, help="TOML settings file")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument("--verbose", action="store_true", help="Log progress at debug level")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    settings = load_settings(args.config) if args.config is not None else Settings()
    headers = _collect_headers(args.paths)
    if not headers:
        raise SystemExit("No header files found")

    result = parse_header_files(headers, settings)
    print(json.dumps(document_to_dict(result.document), indent=args.indent))
    return 1 if result.has_failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
