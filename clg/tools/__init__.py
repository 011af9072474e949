"""Tools registration for clg.

This module imports all tool modules for side-effect registration with FastMCP.
"""

from clg.tools import merge_requests, projects

__all__ = [
    "merge_requests",
    "projects",
]
