"""Build COLR/CPAL color fonts from directories of SVG files."""

from .build import buildFont, processFile, FontData
from .config import BuildConfig
from .errors import Svg2ColrError, InvalidColor, CompilerError

__version__ = "0.1.0"
