"""
caspxml

Reads every Sims 4 .package file in the input folder, collects the instance
ids of the CAS Part (CASP) resources and writes one WickedWhims SnippetTuning
XML file whose blocks depend on keywords in the package filenames.
"""

import sys
import logging
import argparse

from .constants import VERSION, DEFAULT_CREATOR, DEFAULT_ICON, SUBTYPES, PART_TYPES
from .config import TuningConfig
from .manager import TuningManager
from .errors import CaspXmlError

logger = logging.getLogger("CaspXml")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_file=None, verbose=False):
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="caspxml",
        description="Generate a WickedWhims CAS parts snippet tuning from .package files.",
        epilog='Example: caspxml -c "MyName" -s VAMPIRE --in ./packages --out ./tuning',
    )
    parser.add_argument('-c', '--creator', default=DEFAULT_CREATOR,
                        help="Your creator name.")
    parser.add_argument('-b', '--basename',
                        help="Base name for the snippet. Defaults to the first package file's name.")
    parser.add_argument('-i', '--icon', default=DEFAULT_ICON,
                        help="Instance key (hex) of the CAS part display icon.")
    parser.add_argument('-s', '--subtype', choices=SUBTYPES,
                        help="Override automatic detection of the CAS part subtype.")
    parser.add_argument('-t', '--type', choices=PART_TYPES,
                        help="Use this part type for files whose name doesn't give one away.")
    parser.add_argument('--in', '--input', dest='input', default='.',
                        help="Directory containing your .package files.")
    parser.add_argument('--out', '--output', dest='output', default='.',
                        help="Directory where the generated XML file is saved.")
    parser.add_argument('--log-file', help="Also write the log to this file.")
    parser.add_argument('-v', '--verbose', action='store_true', help="Debug logging.")
    parser.add_argument('--version', action='version', version=f"%(prog)s {VERSION}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    try:
        config = TuningConfig.from_args(args)
    except ValueError as e:
        logger.error(str(e))
        return 2

    logger.info("Starting CAS Part extractor...")
    try:
        TuningManager(config).run()
    except CaspXmlError as e:
        logger.error(f"Aborted: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
