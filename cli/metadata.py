#!/usr/bin/env python3
"""Extract canonical metadata from a file."""

import argparse
import json
import logging
import sys
import time

from extraction_bridge.bridge import get_bridge
from extraction_bridge.files import LocalFile


def main():
    parser = argparse.ArgumentParser(description="Extract canonical metadata from a file")
    parser.add_argument("file", help="Path to file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--json", action="store_true", help="Output as JSON (default: human-readable)"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    file = LocalFile(args.file)
    if not file.path.is_file():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    bridge = get_bridge()

    start_time = time.perf_counter()
    subtypes = bridge.get_subtypes(file)
    metadata = bridge.extract_metadata(file)
    elapsed = time.perf_counter() - start_time

    if args.json:
        output = {
            "file": args.file,
            "subtypes": list(subtypes),
            "metadata": metadata,
            "elapsed_seconds": round(elapsed, 2),
        }
        print(json.dumps(output, indent=2, default=str))
    else:
        print(f"File: {args.file}")
        print(f"Subtypes: {', '.join(subtypes) if subtypes else '(none)'}")
        if metadata:
            width = max(len(key) for key in metadata)
            for key in sorted(metadata):
                print(f"  {key:<{width}}  {metadata[key]}")
        else:
            print("No metadata extracted")
        print()
        print(f"Elapsed: {elapsed:.2f}s")


if __name__ == "__main__":
    main()
