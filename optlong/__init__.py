__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'optlong'
__license__ = 'MIT'
__version__ = "0.1.0"

from .destinations import Slot, Attribute
from .faults import *
from .parser import *
from .results import *
from .specs import *
from .values import Pair

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
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "Slot",
    "Attribute",
    "Pair",
)

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the specs
__all__ += specs.__all__  # type: ignore[attr-defined]
