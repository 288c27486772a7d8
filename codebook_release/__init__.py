"""Release automation for the Codebook editor extension."""

from __future__ import annotations

__version__ = "0.1.0"
