from __future__ import annotations

import asyncio
from datetime import timedelta
from pathlib import Path

import aiohttp

from src.config.settings import (
    CACHE_PATH,
    HASH_URL,
    MAX_AGE_HOURS,
    MAX_REDIRECT_DEPTH,
    RULES_URL,
    VERIFY_HASH,
)
from src.sanitization.application.rule_store import RuleStore
from src.sanitization.application.use_cases.clean_links import CleanLinksUseCase
from src.sanitization.application.workflows.refresh_rules import (
    RefreshSummary,
    RefreshWorkflowConfig,
    RulesRefreshWorkflow,
)
from src.sanitization.domain.engine import UrlSanitizer
from src.sanitization.domain.models import CleanResult, LinkCleanResult
from src.sanitization.infrastructure.rules_cache import RulesFileCache
from src.sanitization.infrastructure.rules_client import ClearUrlsClient


def build_rule_store(
    *,
    rules_url: str = RULES_URL,
    hash_url: str = HASH_URL,
    cache_path: str | Path = CACHE_PATH,
    max_age_hours: float = MAX_AGE_HOURS,
    verify_hash: bool = VERIFY_HASH,
) -> RuleStore:
    return RuleStore(
        client=ClearUrlsClient(rules_url=rules_url, hash_url=hash_url),
        cache=RulesFileCache(cache_path),
        max_age=timedelta(hours=max_age_hours),
        verify_hash=verify_hash,
    )


def clean_url(
    url: str,
    *,
    rule_store: RuleStore | None = None,
    max_depth: int = MAX_REDIRECT_DEPTH,
) -> CleanResult:
    store = rule_store or build_rule_store()
    return UrlSanitizer(max_depth=max_depth).sanitize(url, store.get_ruleset())


def clean_message(
    text: str,
    *,
    rule_store: RuleStore | None = None,
    max_depth: int = MAX_REDIRECT_DEPTH,
) -> list[LinkCleanResult]:
    use_case = CleanLinksUseCase(
        rule_store=rule_store or build_rule_store(),
        sanitizer=UrlSanitizer(max_depth=max_depth),
    )
    return use_case.execute(text)


async def refresh_rules_async(
    *,
    rules_url: str = RULES_URL,
    hash_url: str = HASH_URL,
    cache_path: str | Path = CACHE_PATH,
    verify_hash: bool = VERIFY_HASH,
) -> RefreshSummary:
    workflow = RulesRefreshWorkflow(
        client=ClearUrlsClient(rules_url=rules_url, hash_url=hash_url),
        cache=RulesFileCache(cache_path),
        config=RefreshWorkflowConfig(verify_hash=verify_hash),
    )
    async with aiohttp.ClientSession() as session:
        return await workflow.run_once(session)


def refresh_rules(
    *,
    rules_url: str = RULES_URL,
    hash_url: str = HASH_URL,
    cache_path: str | Path = CACHE_PATH,
    verify_hash: bool = VERIFY_HASH,
) -> RefreshSummary:
    return asyncio.run(
        refresh_rules_async(
            rules_url=rules_url,
            hash_url=hash_url,
            cache_path=cache_path,
            verify_hash=verify_hash,
        )
    )
