"""
Kaleido Command-Line Interface
==============================

This package provides the command-line tools for the Kaleido front end:

- **kparse**: parse Kaleido source and report each top-level construct

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["kparse"]
