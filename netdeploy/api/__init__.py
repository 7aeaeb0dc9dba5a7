"""
API server for NetDeploy.

Provides REST endpoints for:
- Device registration
- Sorted device listing
- Device tree and subtree views
"""

from .server import create_app, run_server
from .routes import router

__all__ = [
    "create_app",
    "run_server",
    "router",
]
