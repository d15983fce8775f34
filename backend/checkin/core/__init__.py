"""
Core module for application configuration, the decision engine and the
check-in services.

Note: auth and security modules are not imported at package level to avoid
circular imports with checkin.models.
Import them directly: from checkin.core.auth import ...
"""
from .config import settings

__all__ = ["settings"]
