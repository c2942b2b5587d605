"""verdict - judge a case, then see how you judged."""

from .app import CourtRuntime
from .config import Settings, load_settings

__version__ = "0.1.0"

__all__ = ["CourtRuntime", "Settings", "__version__", "load_settings"]
