# Rules source and sanitizer limits, overridable through environment / .env

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


RULES_URL = os.getenv("CLEARURLS_RULES_URL", "https://rules2.clearurls.xyz/data.minify.json")
HASH_URL = os.getenv("CLEARURLS_HASH_URL", "https://rules2.clearurls.xyz/rules.minify.hash")
CACHE_PATH = Path(os.getenv("CLEARURLS_CACHE_PATH", "artifacts/rules/data.minify.json"))

# Staleness is measured from the cache file's mtime.
MAX_AGE_HOURS = float(os.getenv("CLEARURLS_MAX_AGE_HOURS", "24"))
VERIFY_HASH = _env_bool("CLEARURLS_VERIFY_HASH", False)
REFRESH_INTERVAL_SECONDS = float(os.getenv("CLEARURLS_REFRESH_INTERVAL_SECONDS", str(6 * 60 * 60)))

MAX_REDIRECT_DEPTH = int(os.getenv("SANITIZER_MAX_REDIRECT_DEPTH", "5"))
HTTP_TIMEOUT_SECONDS = float(os.getenv("SANITIZER_HTTP_TIMEOUT_SECONDS", "30"))
