"""Playnite library export adapter."""

from __future__ import annotations

from .translator import ImportValidationError, ValidationIssue, parse_import_payload

__all__ = ["ImportValidationError", "ValidationIssue", "parse_import_payload"]
