import threading
from datetime import datetime, timedelta

from src.config.logger_config import logger
from src.config.settings import MAX_AGE_HOURS, VERIFY_HASH
from src.sanitization.domain.errors import FetchFailedError
from src.sanitization.domain.models import RuleSet
from src.sanitization.domain.rules import parse_ruleset
from src.sanitization.infrastructure.rules_cache import RulesFileCache
from src.sanitization.infrastructure.rules_client import ClearUrlsClient


class RuleStore:
    """Hands out a parsed RuleSet, refreshing the cache file when it is stale.

    There is no fallback: a failed download, a failed cache write or a broken
    document raises, and the previous cache file is left untouched.
    """

    def __init__(
        self,
        client: ClearUrlsClient,
        cache: RulesFileCache,
        max_age: timedelta = timedelta(hours=MAX_AGE_HOURS),
        verify_hash: bool = VERIFY_HASH,
    ) -> None:
        self.client = client
        self.cache = cache
        self.max_age = max_age
        self.verify_hash = verify_hash
        self._lock = threading.Lock()
        # (ruleset, cache mtime), always swapped as a whole.
        self._memo: tuple[RuleSet, datetime | None] | None = None

    def get_ruleset(self) -> RuleSet:
        if self.cache.is_stale(self.max_age):
            with self._lock:
                # Another thread may have refreshed while we waited.
                if self.cache.is_stale(self.max_age):
                    logger.info("Rules cache {} missing or stale, refreshing", self.cache.path)
                    return self._refresh_locked()
        return self._load_cached()

    def refresh(self) -> RuleSet:
        with self._lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> RuleSet:
        document = self.client.fetch_rules()
        if self.verify_hash:
            self.client.verify(document, self.client.fetch_hash())
        ruleset = parse_ruleset(document)
        self.cache.write_text(document)
        self._remember(ruleset)
        logger.info("Loaded {} providers from {}", len(ruleset), self.client.rules_url)
        return ruleset

    def _load_cached(self) -> RuleSet:
        mtime = self.cache.last_modified()
        memo = self._memo
        if memo is not None and mtime is not None and memo[1] == mtime:
            return memo[0]
        try:
            document = self.cache.read_text()
        except OSError as exc:
            raise FetchFailedError(f"Failed to read rules cache {self.cache.path}: {exc}") from exc
        ruleset = parse_ruleset(document)
        self._memo = (ruleset, mtime)
        logger.debug("Parsed {} providers from cache {}", len(ruleset), self.cache.path)
        return ruleset

    def _remember(self, ruleset: RuleSet) -> None:
        self._memo = (ruleset, self.cache.last_modified())
