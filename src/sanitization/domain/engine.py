from dataclasses import dataclass, field
from re import Pattern
from urllib.parse import SplitResult, unquote, unquote_plus, urlsplit, urlunsplit

from src.config.logger_config import logger
from src.config.settings import MAX_REDIRECT_DEPTH
from src.sanitization.domain.errors import InvalidUrlError, RedirectLoopError
from src.sanitization.domain.models import CleanOutcome, CleanResult, Provider, RuleSet


@dataclass
class _Trace:
    matched: list[str] = field(default_factory=list)
    blocked: bool = False


class UrlSanitizer:
    """Applies ClearURLs providers to a URL.

    Stateless apart from its configuration, so one instance can be shared
    between threads. Every call owns its working URL; the RuleSet is only read.
    """

    def __init__(self, max_depth: int = MAX_REDIRECT_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth

    def clean(self, url: str, ruleset: RuleSet, depth: int = 0) -> str:
        """Return the cleaned URL, or an empty string when a complete provider blocks it."""
        return self._clean(url, ruleset, depth, _Trace())

    def sanitize(self, url: str, ruleset: RuleSet) -> CleanResult:
        """Clean `url` and classify the outcome.

        UNCHANGED covers both "no provider matched" (the url may still lose its
        trailing `?` or `/`) and "matching providers removed nothing".
        """
        trace = _Trace()
        cleaned = self._clean(url, ruleset, 0, trace)
        if trace.blocked:
            outcome = CleanOutcome.BLOCKED
            cleaned = ""
        elif not trace.matched or cleaned == url:
            outcome = CleanOutcome.UNCHANGED
        else:
            outcome = CleanOutcome.CLEANED
        return CleanResult(
            outcome=outcome,
            original=url,
            url=cleaned,
            matched_providers=tuple(trace.matched),
        )

    def _clean(self, url: str, ruleset: RuleSet, depth: int, trace: _Trace) -> str:
        if depth > self.max_depth:
            raise RedirectLoopError(url, self.max_depth)

        working = url
        for provider in ruleset:
            if not provider.url_pattern.search(working):
                continue
            trace.matched.append(provider.name)

            if provider.complete_provider:
                logger.debug("Provider {} blocks {}", provider.name, working)
                trace.blocked = True
                return ""

            if provider.redirections:
                working = self._follow_redirections(provider, working, ruleset, depth, trace)
                if trace.blocked:
                    return ""

            working = self._filter_query(working, provider.removal_patterns)

            for raw_rule in provider.raw_rules:
                working = raw_rule.sub("", working)

        return self._trim(working)

    def _follow_redirections(
        self,
        provider: Provider,
        working: str,
        ruleset: RuleSet,
        depth: int,
        trace: _Trace,
    ) -> str:
        # Every redirection is tested against the URL as it entered this step;
        # when several match, the last one wins.
        source = working
        for redirection in provider.redirections:
            match = redirection.pattern.search(source)
            if match is None or match.group(1) is None:
                continue
            target = unquote(match.group(1))
            logger.debug("Redirection {} resolved {} -> {}", redirection.label, source, target)
            working = self._clean(target, ruleset, depth + 1, trace)
            if trace.blocked:
                return ""
        return working

    def _filter_query(self, url: str, patterns: tuple[Pattern[str], ...]) -> str:
        parts = self._split(url)
        if not parts.query or not patterns:
            return url

        segments = parts.query.split("&")
        kept = [s for s in segments if s and not self._is_tracking_param(s, patterns)]
        if len(kept) == len(segments):
            return url
        return urlunsplit(parts._replace(query="&".join(kept)))

    @staticmethod
    def _split(url: str) -> SplitResult:
        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise InvalidUrlError(url, str(exc)) from exc
        if not parts.scheme or not parts.netloc:
            raise InvalidUrlError(url)
        return parts

    @staticmethod
    def _is_tracking_param(segment: str, patterns: tuple[Pattern[str], ...]) -> bool:
        key = unquote_plus(segment.split("=", 1)[0]).lower()
        return any(pattern.search(key) for pattern in patterns)

    @staticmethod
    def _trim(url: str) -> str:
        if url.endswith("?"):
            url = url[:-1]
        if url.endswith("/"):
            url = url[:-1]
        return url


_default_sanitizer = UrlSanitizer()


def clean(url: str, ruleset: RuleSet, depth: int = 0) -> str:
    return _default_sanitizer.clean(url, ruleset, depth)


def sanitize(url: str, ruleset: RuleSet) -> CleanResult:
    return _default_sanitizer.sanitize(url, ruleset)
