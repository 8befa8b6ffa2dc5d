import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from src.sanitization.domain.errors import FetchFailedError


class RulesFileCache:
    """Verbatim copy of the last downloaded ruleset; its mtime is the freshness signal."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def last_modified(self) -> datetime | None:
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def is_stale(self, max_age: timedelta, now: datetime | None = None) -> bool:
        modified = self.last_modified()
        if modified is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - modified > max_age

    def read_text(self) -> str:
        with self.path.open(encoding="utf-8", newline="") as f:
            return f.read()

    def write_text(self, document: str) -> Path:
        # Write to a sibling temp file and rename, so readers never see a
        # half-written document and concurrent writers resolve to the last rename.
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                    f.write(document)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise FetchFailedError(f"Failed to write rules cache {self.path}: {exc}") from exc
        return self.path
