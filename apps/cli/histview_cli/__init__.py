"""histview CLI application.

Read-only command line front end for the histview engine.

Execution Context:
    CLI package - installed as the `histview` console script

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

__version__ = "0.1.0"
