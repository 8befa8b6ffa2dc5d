import asyncio
from dataclasses import dataclass

import aiohttp

from src.config.logger_config import logger
from src.config.settings import REFRESH_INTERVAL_SECONDS, VERIFY_HASH
from src.sanitization.domain.errors import RuleStoreError
from src.sanitization.domain.rules import parse_ruleset
from src.sanitization.infrastructure.rules_cache import RulesFileCache
from src.sanitization.infrastructure.rules_client import ClearUrlsClient


@dataclass(frozen=True)
class RefreshWorkflowConfig:
    interval_seconds: float = REFRESH_INTERVAL_SECONDS
    verify_hash: bool = VERIFY_HASH
    connector_limit_per_host: int = 2
    connector_ttl_dns_cache: int = 300


@dataclass(frozen=True)
class RefreshSummary:
    provider_count: int
    cache_path: str


class RulesRefreshWorkflow:
    """Keeps the rules cache file fresh ahead of RuleStore readers."""

    def __init__(
        self,
        client: ClearUrlsClient,
        cache: RulesFileCache,
        config: RefreshWorkflowConfig | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.config = config or RefreshWorkflowConfig()
        self._stopped = asyncio.Event()

    async def run_once(self, session: aiohttp.ClientSession) -> RefreshSummary:
        document = await self.client.fetch_rules_async(session)
        if self.config.verify_hash:
            self.client.verify(document, await self.client.fetch_hash_async(session))
        # Validate before replacing the cache.
        ruleset = parse_ruleset(document)
        path = self.cache.write_text(document)
        logger.info("Refreshed rules cache {} ({} providers)", path, len(ruleset))
        return RefreshSummary(provider_count=len(ruleset), cache_path=str(path))

    async def run_forever(self) -> None:
        connector = aiohttp.TCPConnector(
            limit_per_host=self.config.connector_limit_per_host,
            ttl_dns_cache=self.config.connector_ttl_dns_cache,
        )
        async with aiohttp.ClientSession(connector=connector) as session:
            while not self._stopped.is_set():
                try:
                    await self.run_once(session)
                except RuleStoreError as exc:
                    logger.warning("Rules refresh failed, keeping previous cache: {}", exc)
                try:
                    await asyncio.wait_for(self._stopped.wait(), timeout=self.config.interval_seconds)
                except asyncio.TimeoutError:
                    pass
        logger.info("Rules refresh loop stopped")

    def stop(self) -> None:
        self._stopped.set()
