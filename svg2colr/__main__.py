"""Build a COLR/CPAL color font from each source directory.

A source directory holds an ``info.json`` with the font names and one
``<hex codepoint>.svg`` per character.
"""

import argparse
import logging
import pathlib
import sys

from . import __version__
from .build import buildFont
from .errors import Svg2ColrError


logger = logging.getLogger("svg2colr")


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="svg2colr", description=__doc__, formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("sources", nargs="+", type=pathlib.Path, metavar="SOURCE_DIR")
    parser.add_argument(
        "--build-dir", type=pathlib.Path, default=pathlib.Path("build"), help="where out.ttx and fonts go"
    )
    parser.add_argument("--outline-compiler", choices=["pens", "fontforge"], default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    options = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(levelname)s:%(name)s: %(message)s",
    )

    for sourceDir in options.sources:
        try:
            buildFont(sourceDir, options.build_dir, outlineCompilerName=options.outline_compiler)
        except (Svg2ColrError, OSError) as e:
            logger.error("%s: %s", sourceDir, e)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
