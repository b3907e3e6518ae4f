"""Extraction of OpenGL state-query tables from the specification's table sources."""

__version__ = "0.1.0"
