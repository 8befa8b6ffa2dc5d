"""Infrastructure adapters for the rules source."""

from src.sanitization.infrastructure.rules_cache import RulesFileCache
from src.sanitization.infrastructure.rules_client import ClearUrlsClient

__all__ = ["ClearUrlsClient", "RulesFileCache"]
