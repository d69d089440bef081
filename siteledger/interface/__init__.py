"""Mini README: User interface package for siteledger.

Exposes the FastAPI application factory so launchers can build the
console without importing the web module directly.
"""

from .web_app import create_application

__all__ = ["create_application"]
