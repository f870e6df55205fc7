__title__ = 'arglet'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
__version__ = "0.1.0"

from .arguments import *
from .containers import *
from .faults import *
from .parsers import *
from .streams import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the containers
__all__ += containers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parsers
__all__ += parsers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the streams
__all__ += streams.__all__  # type: ignore[attr-defined]
