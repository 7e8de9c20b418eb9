"""
Top-level package for the skills MCP server.

This package loads a static catalog of skill documents, ranks them
lexically against free-text tasks, derives short workflows from the
matches, and serves all of it to agent clients over MCP and to the
browsing site over HTTP.  There are no side-effects on import: the
catalog is loaded lazily on first use.
"""

__version__ = "1.0.0"
