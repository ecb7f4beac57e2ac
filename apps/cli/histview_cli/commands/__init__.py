"""histview CLI command modules.

Contains all Click command implementations for the histview CLI.

Execution Context:
    Imported by main.py

Dependencies:
    - click: CLI framework

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations
