"""
Size-based file rotation with age and count retention.

Rotation itself is the standard library's ``RotatingFileHandler``; this
module only changes how backups are named and pruned. Backups are named
``<stem>-<YYYY-MM-DDTHH-MM-SS.mmm><ext>`` next to the active file, and the
embedded timestamp is what retention compares against.
"""

from __future__ import annotations

import os
import re
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable

BACKUP_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AgedRotatingFileHandler(RotatingFileHandler):
    """Rotating handler that prunes backups by age and count.

    Args:
        filename: Path of the active log file.
        max_bytes: Size that triggers a rotation.
        max_age: Days a backup is kept; ``0`` disables age pruning.
        max_backups: Newest backups kept; ``0`` keeps all.
        local_time: Name backups with local time instead of UTC.
        clock: Returns the current time; injectable for tests.
    """

    def __init__(
        self,
        filename: str | os.PathLike[str],
        *,
        max_bytes: int,
        max_age: int = 0,
        max_backups: int = 0,
        local_time: bool = True,
        clock: Clock | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(
            filename,
            mode="a",
            maxBytes=max_bytes,
            backupCount=0,
            encoding=encoding,
            delay=True,
        )
        self.max_age = max_age
        self.max_backups = max_backups
        self.local_time = local_time
        self._clock = clock or _utc_now
        self._purged_on_open = False
        path = Path(self.baseFilename)
        self._stem = path.stem
        self._suffix = path.suffix
        self._backup_pattern = re.compile(
            rf"^{re.escape(self._stem)}-(\d{{4}}-\d{{2}}-\d{{2}}T\d{{2}}-\d{{2}}-\d{{2}})\.(\d{{3}}){re.escape(self._suffix)}$"
        )

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        if not self._purged_on_open:
            self._purged_on_open = True
            self.purge()
        return super()._open()

    def _now(self) -> datetime:
        """Current time in the naming timezone, without tzinfo."""
        now = self._clock()
        now = now.astimezone() if self.local_time else now.astimezone(timezone.utc)
        return now.replace(tzinfo=None)

    def backup_path(self, when: datetime) -> Path:
        stamp = f"{when.strftime(BACKUP_TIME_FORMAT)}.{when.microsecond // 1000:03d}"
        return Path(self.baseFilename).with_name(f"{self._stem}-{stamp}{self._suffix}")

    def backups(self) -> list[tuple[datetime, Path]]:
        """Existing backups of this file, newest first."""
        directory = Path(self.baseFilename).parent
        if not directory.is_dir():
            return []
        found = []
        for entry in directory.iterdir():
            match = self._backup_pattern.match(entry.name)
            if not match or not entry.is_file():
                continue
            try:
                when = datetime.strptime(match.group(1), BACKUP_TIME_FORMAT)
            except ValueError:
                continue
            found.append((when.replace(microsecond=int(match.group(2)) * 1000), entry))
        found.sort(key=lambda item: item[0], reverse=True)
        return found

    def purge(self) -> list[Path]:
        """Delete backups past ``max_age`` days or beyond ``max_backups``."""
        backups = self.backups()
        doomed: list[Path] = []
        if self.max_age > 0:
            cutoff = self._now() - timedelta(days=self.max_age)
            doomed.extend(path for when, path in backups if when < cutoff)
            backups = [(when, path) for when, path in backups if when >= cutoff]
        if self.max_backups > 0:
            doomed.extend(path for _, path in backups[self.max_backups :])
        for path in doomed:
            path.unlink(missing_ok=True)
        return doomed

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None  # type: ignore[assignment]
        if os.path.exists(self.baseFilename):
            self.rotate(self.baseFilename, str(self.backup_path(self._now())))
        self.purge()
