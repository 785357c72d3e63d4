"""
CLI Layer

Command line entry point and report rendering.
"""

from pathlister.cli.app import app, files, dirs, version

__all__ = [
    "app",
    "files",
    "dirs",
    "version",
]
