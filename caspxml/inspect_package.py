"""
Debug dump of one .package file: resource type counts, then every CAS Part
with its decoded name and color tag. Handy when a new set doesn't group the
way you expect.
"""

import os
import sys
import logging
import argparse
from collections import Counter

from .package_reader import read_package, iter_cas_parts
from .decoder import decode_record_name
from .classifier import detect_color
from .errors import PackageError
from .main import setup_logging

logger = logging.getLogger("CaspXml")


def describe_package(records):
    """Lines describing the records of one package"""
    lines = [f"Total entries in package: {len(records)}"]
    counts = Counter(r.type for r in records)
    for res_type, count in sorted(counts.items()):
        lines.append(f"  {res_type:08X}: {count}")

    casps = list(iter_cas_parts(records))
    lines.append(f"Found {len(casps)} CAS Part(s).")
    for record in casps:
        result = decode_record_name(record)
        color = detect_color(result.name)
        line = (
            f"  {record.instance} (group {record.group:08X}, {record.size_decompressed} bytes) - "
            f"{result.name!r} [{color.subtype}{' ' + color.suffix if color.suffix else ''}]"
        )
        if not result.ok:
            line += f" decode error: {result.error}"
        lines.append(line)
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="caspxml-inspect",
        description="Inspect the CAS Part resources of a .package file.",
    )
    parser.add_argument('package', help="Path to the .package file to inspect.")
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    path = os.path.abspath(args.package)
    if not os.path.isfile(path):
        logger.error(f"Package file not found: {path}")
        return 1

    logger.info(f"Inspecting package: {path}")
    try:
        records = read_package(path)
    except (PackageError, OSError) as e:
        logger.error(f"Error processing package: {e}")
        return 1

    for line in describe_package(records):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
