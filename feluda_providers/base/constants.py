"""Shared sentinel strings for provider clients and the dispatcher.

# pragma: allowlist secret
"""
from __future__ import annotations

# Missing credential sentinel
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret

INVALID_MODEL_MESSAGE = "Invalid model selected"
NO_CONTENT_MESSAGE = "No content generated"

# Trailing markers treated as a cut-off response.
TRUNCATION_MARKERS = ("...", "…")

__all__ = [
    "MISSING_API_KEY_ERROR",
    "INVALID_MODEL_MESSAGE",
    "NO_CONTENT_MESSAGE",
    "TRUNCATION_MARKERS",
]
