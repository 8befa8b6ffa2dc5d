import hashlib
import json
import re
from re import Pattern
from typing import Any

from src.sanitization.domain.errors import BadPatternError, ParseFailedError
from src.sanitization.domain.models import Provider, Redirection, RuleSet

# Upstream JSON field name -> Provider attribute, for the plain pattern lists.
_PATTERN_LIST_FIELDS: tuple[tuple[str, str], ...] = (
    ("rules", "rules"),
    ("referralMarketing", "referral_marketing"),
    ("rawRules", "raw_rules"),
    ("exceptions", "exceptions"),
)


def unescape_pattern(pattern: str) -> str:
    return pattern.replace("\\\\", "\\")


def compile_pattern(provider: str, field: str, pattern: Any) -> Pattern[str]:
    if not isinstance(pattern, str):
        raise ParseFailedError(f"Provider {provider!r}: {field} entries must be strings, got {type(pattern).__name__}")
    try:
        return re.compile(unescape_pattern(pattern), re.IGNORECASE)
    except re.error as exc:
        raise BadPatternError(provider, field, pattern, str(exc)) from exc


def parse_provider(name: str, data: Any) -> Provider:
    if not isinstance(data, dict):
        raise ParseFailedError(f"Provider {name!r} must be an object, got {type(data).__name__}")

    url_pattern = data.get("urlPattern")
    if not url_pattern:
        raise ParseFailedError(f"Provider {name!r} is missing urlPattern")

    complete_provider = data.get("completeProvider", False)
    if not isinstance(complete_provider, bool):
        raise ParseFailedError(f"Provider {name!r}: completeProvider must be a boolean")

    lists: dict[str, tuple[Pattern[str], ...]] = {}
    for source_field, attr in _PATTERN_LIST_FIELDS:
        lists[attr] = tuple(
            compile_pattern(name, source_field, p) for p in _pattern_list(name, source_field, data)
        )

    redirections: list[Redirection] = []
    for index, raw in enumerate(_pattern_list(name, "redirections", data)):
        compiled = compile_pattern(name, "redirections", raw)
        if compiled.groups < 1:
            raise BadPatternError(name, "redirections", raw, "redirection needs a capture group")
        redirections.append(Redirection(label=f"{name}#{index}", pattern=compiled))

    return Provider(
        name=name,
        url_pattern=compile_pattern(name, "urlPattern", url_pattern),
        complete_provider=complete_provider,
        redirections=tuple(redirections),
        **lists,
    )


def parse_ruleset(document: str | bytes | dict[str, Any]) -> RuleSet:
    """Build a RuleSet from a ClearURLs document.

    Accepts the raw JSON text or an already-decoded object. Any structural
    problem raises ParseFailedError and any regex that does not compile raises
    BadPatternError; a partially parsed ruleset is never returned.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseFailedError(f"Ruleset is not valid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise ParseFailedError("Ruleset root must be an object")
    providers = document.get("providers")
    if not isinstance(providers, dict):
        raise ParseFailedError("Ruleset has no providers object")

    return RuleSet.from_providers([parse_provider(str(name), data) for name, data in providers.items()])


def compute_rules_hash(document: str | bytes) -> str:
    if isinstance(document, str):
        document = document.encode("utf-8")
    return hashlib.sha256(document).hexdigest()


def _pattern_list(provider: str, field: str, data: dict[str, Any]) -> list[Any]:
    value = data.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseFailedError(f"Provider {provider!r}: {field} must be a list")
    return value
