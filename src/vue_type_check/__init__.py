"""vue-type-check - Batch type checking for Vue single file components."""

from __future__ import annotations

__version__ = "1.3.0"
