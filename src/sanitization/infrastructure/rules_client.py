import asyncio

import aiohttp
import requests

from src.config.logger_config import logger
from src.config.settings import HASH_URL, HTTP_TIMEOUT_SECONDS, RULES_URL
from src.sanitization.domain.errors import FetchFailedError
from src.sanitization.domain.rules import compute_rules_hash

USER_AGENT = "url-sanitizer/0.1 (+https://docs.clearurls.xyz)"


class ClearUrlsClient:
    """Downloads the ClearURLs rules document and its published SHA-256 hash.

    Failures are not retried here; they surface as FetchFailedError and the
    caller decides whether to try again later.
    """

    def __init__(
        self,
        rules_url: str = RULES_URL,
        hash_url: str = HASH_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self.rules_url = rules_url
        self.hash_url = hash_url
        self.timeout = timeout

    def fetch_rules(self) -> str:
        return self._get(self.rules_url)

    def fetch_hash(self) -> str:
        return self._get(self.hash_url).strip().lower()

    async def fetch_rules_async(self, session: aiohttp.ClientSession) -> str:
        return await self._get_async(session, self.rules_url)

    async def fetch_hash_async(self, session: aiohttp.ClientSession) -> str:
        return (await self._get_async(session, self.hash_url)).strip().lower()

    @staticmethod
    def verify(document: str, expected_hash: str) -> None:
        actual = compute_rules_hash(document)
        if actual != expected_hash.strip().lower():
            raise FetchFailedError(f"Rules hash mismatch: expected {expected_hash}, got {actual}")

    def _get(self, url: str) -> str:
        logger.info("Downloading {}", url)
        try:
            resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Request to {} failed: {}", url, exc)
            raise FetchFailedError(f"GET {url} failed: {exc}") from exc

        if resp.status_code != 200:
            logger.error("HTTP {} from {}", resp.status_code, url)
            raise FetchFailedError(f"GET {url} returned HTTP {resp.status_code}")
        return self._decode(resp.content, url)

    async def _get_async(self, session: aiohttp.ClientSession, url: str) -> str:
        logger.info("Downloading {}", url)
        timeout = aiohttp.ClientTimeout(total=self.timeout, connect=10)
        try:
            async with session.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout) as resp:
                if resp.status != 200:
                    logger.error("HTTP {} from {}", resp.status, url)
                    raise FetchFailedError(f"GET {url} returned HTTP {resp.status}")
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error("Request to {} failed: {}", url, exc)
            raise FetchFailedError(f"GET {url} failed: {exc}") from exc
        return self._decode(body, url)

    @staticmethod
    def _decode(body: bytes, url: str) -> str:
        # Always UTF-8, whatever charset the server declares.
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.error("Body from {} is not UTF-8: {}", url, exc)
            raise FetchFailedError(f"GET {url} returned a body that is not UTF-8: {exc}") from exc
