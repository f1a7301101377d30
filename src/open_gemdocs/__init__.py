"""open-gemdocs — Ruby gem documentation for coding agents and the browser."""

from __future__ import annotations

__version__ = "0.1.0"
