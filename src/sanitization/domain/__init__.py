"""Domain models, ruleset parsing and the URL sanitization engine."""

from src.sanitization.domain.engine import UrlSanitizer, clean, sanitize
from src.sanitization.domain.errors import (
    BadPatternError,
    EngineError,
    FetchFailedError,
    InvalidUrlError,
    ParseFailedError,
    RedirectLoopError,
    RuleStoreError,
    SanitizerError,
)
from src.sanitization.domain.links import extract_links
from src.sanitization.domain.models import (
    CleanOutcome,
    CleanResult,
    LinkCleanResult,
    Provider,
    Redirection,
    RuleSet,
)
from src.sanitization.domain.rules import compute_rules_hash, parse_ruleset, unescape_pattern

__all__ = [
    "BadPatternError",
    "clean",
    "CleanOutcome",
    "CleanResult",
    "compute_rules_hash",
    "EngineError",
    "extract_links",
    "FetchFailedError",
    "InvalidUrlError",
    "LinkCleanResult",
    "parse_ruleset",
    "ParseFailedError",
    "Provider",
    "Redirection",
    "RedirectLoopError",
    "RuleSet",
    "RuleStoreError",
    "sanitize",
    "SanitizerError",
    "unescape_pattern",
    "UrlSanitizer",
]
