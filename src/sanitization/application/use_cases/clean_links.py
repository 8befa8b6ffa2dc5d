from src.config.logger_config import logger
from src.sanitization.application.rule_store import RuleStore
from src.sanitization.domain.engine import UrlSanitizer
from src.sanitization.domain.errors import EngineError
from src.sanitization.domain.links import extract_links
from src.sanitization.domain.models import LinkCleanResult


class CleanLinksUseCase:
    """Cleans every link found in a chat message.

    Engine errors are recorded per link so the caller can keep the original
    URL; a Rule Store failure aborts the whole message.
    """

    def __init__(self, rule_store: RuleStore, sanitizer: UrlSanitizer | None = None) -> None:
        self.rule_store = rule_store
        self.sanitizer = sanitizer or UrlSanitizer()

    def execute(self, text: str) -> list[LinkCleanResult]:
        links = extract_links(text)
        if not links:
            return []

        ruleset = self.rule_store.get_ruleset()
        results: list[LinkCleanResult] = []
        for link in links:
            logger.info("Cleaning link {}", link)
            try:
                result = self.sanitizer.sanitize(link, ruleset)
            except EngineError as exc:
                logger.warning("Leaving {} untouched: {}", link, exc)
                results.append(LinkCleanResult(original=link, error=f"{type(exc).__name__}: {exc}"))
                continue
            logger.info("Link {} -> {} ({})", link, result.url, result.outcome.value)
            results.append(LinkCleanResult(original=link, result=result))
        return results


def changed_links(results: list[LinkCleanResult]) -> list[str]:
    return [r.result.url for r in results if r.result is not None and r.result.changed]
