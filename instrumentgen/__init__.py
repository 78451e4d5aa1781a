"""Generate traced wrapper classes for abstract classes marked with ``@Instrumentation``."""

from .markers import Instrumentation

__version__ = "0.1.0"

__all__ = ["Instrumentation", "__version__"]
