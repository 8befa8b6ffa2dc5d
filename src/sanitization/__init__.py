"""ClearURLs-style URL sanitization package."""

from src.sanitization.clean import (
    build_rule_store,
    clean_message,
    clean_url,
    refresh_rules,
    refresh_rules_async,
)
from src.sanitization.domain.models import CleanOutcome, CleanResult, LinkCleanResult

__all__ = [
    "build_rule_store",
    "clean_message",
    "clean_url",
    "CleanOutcome",
    "CleanResult",
    "LinkCleanResult",
    "refresh_rules",
    "refresh_rules_async",
]
