from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from re import Pattern


@dataclass(frozen=True)
class Redirection:
    label: str
    pattern: Pattern[str]


@dataclass(frozen=True)
class Provider:
    name: str
    url_pattern: Pattern[str]
    complete_provider: bool = False
    redirections: tuple[Redirection, ...] = ()
    rules: tuple[Pattern[str], ...] = ()
    referral_marketing: tuple[Pattern[str], ...] = ()
    raw_rules: tuple[Pattern[str], ...] = ()
    # Parsed for completeness; the engine does not consult them.
    exceptions: tuple[Pattern[str], ...] = ()

    @property
    def removal_patterns(self) -> tuple[Pattern[str], ...]:
        return self.rules + self.referral_marketing


@dataclass(frozen=True)
class RuleSet:
    """Immutable snapshot of providers, iterated lexicographically by name."""

    providers: tuple[Provider, ...] = ()

    @classmethod
    def from_providers(cls, providers: list[Provider] | tuple[Provider, ...]) -> "RuleSet":
        seen: set[str] = set()
        for provider in providers:
            if provider.name in seen:
                raise ValueError(f"Duplicate provider name: {provider.name}")
            seen.add(provider.name)
        return cls(providers=tuple(sorted(providers, key=lambda p: p.name)))

    def __iter__(self) -> Iterator[Provider]:
        return iter(self.providers)

    def __len__(self) -> int:
        return len(self.providers)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self.providers)

    def get(self, name: str) -> Provider | None:
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.providers)


class CleanOutcome(str, Enum):
    UNCHANGED = "unchanged"
    CLEANED = "cleaned"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class CleanResult:
    outcome: CleanOutcome
    original: str
    url: str
    matched_providers: tuple[str, ...] = field(default_factory=tuple)

    @property
    def changed(self) -> bool:
        return self.outcome is CleanOutcome.CLEANED

    @property
    def blocked(self) -> bool:
        return self.outcome is CleanOutcome.BLOCKED


@dataclass(frozen=True)
class LinkCleanResult:
    original: str
    result: CleanResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def final_url(self) -> str:
        """URL a caller should show: the cleaned one, or the original on error."""
        if self.result is None:
            return self.original
        return self.result.url
