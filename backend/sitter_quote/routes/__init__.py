# Import the shared blueprint and *register* routes by importing each module.
from .blueprint import api_bp

# Route modules (import order does not matter as long as it happens)
from . import health       # noqa: F401
from . import settings     # noqa: F401
from . import options      # noqa: F401
from . import validation   # noqa: F401
from . import estimate     # noqa: F401

__all__ = ["api_bp"]
