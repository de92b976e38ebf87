"""
SIGACTS package
===============

This package contains the SIGACTS incident explorer.

- Dataset loading (CSV -> Incident list) is in `sigacts/loader.py`.
- Index building (date index, distinct-value sets) is in `sigacts/indices.py`.
- The query engine (lifecycle, lookups) is in `sigacts/engine.py`.
- Dashboard aggregates (treemap/radar/heatmap) are in `sigacts/aggregates.py`.
- The HTTP API is in `sigacts/server.py`, the CLI entry point in `sigacts/cli.py`.
"""

__version__ = '0.1.0'
