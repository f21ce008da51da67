"""Utility helpers (retry, diagnostics)."""
