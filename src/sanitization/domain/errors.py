class SanitizerError(Exception):
    """Base class for every error raised by the sanitizer."""


class RuleStoreError(SanitizerError):
    """The ruleset could not be obtained."""


class FetchFailedError(RuleStoreError):
    """Network/HTTP failure, hash mismatch or cache write failure during a refresh."""


class ParseFailedError(RuleStoreError):
    """The ruleset document is malformed or a provider lacks required fields."""


class BadPatternError(RuleStoreError):
    def __init__(self, provider: str, field: str, pattern: str, reason: str) -> None:
        super().__init__(f"Provider {provider!r} has an invalid {field} pattern {pattern!r}: {reason}")
        self.provider = provider
        self.field = field
        self.pattern = pattern
        self.reason = reason


class EngineError(SanitizerError):
    """A single URL could not be sanitized."""


class InvalidUrlError(EngineError):
    def __init__(self, url: str, reason: str = "not a well-formed URL") -> None:
        super().__init__(f"{reason}: {url!r}")
        self.url = url


class RedirectLoopError(EngineError):
    def __init__(self, url: str, max_depth: int) -> None:
        super().__init__(f"Redirect depth exceeded {max_depth} while resolving {url!r}")
        self.url = url
        self.max_depth = max_depth
