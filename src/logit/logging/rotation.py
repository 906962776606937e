"""
Size- and time-triggered rotating file writer.

The active file is rotated before a write when the write would push it
past ``max_size_bytes`` or when ``rotation_interval`` has elapsed since the
last rotation, whichever comes first. The new bytes always land in the
fresh file, so concatenating the backups (oldest first) and the active
file reproduces the written stream exactly.

All clock readings are converted to UTC, so the date in file names and the
backup timestamps are UTC dates, not the host's local date.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from ..constants import COMPRESSED_EXTENSION
from ..exceptions import InvalidConfigurationError, RotationError
from .retention import LogFileNamer, compress_file, enforce_retention

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ErrorHandler = Callable[[Exception], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken as local time."""
    return value.astimezone(timezone.utc)


def _log_rotation_error(error: Exception) -> None:
    logger.warning(f"Log rotation failed, continuing with current file: {error}")


class RotatingWriter:
    """Append-only byte sink with size and time based rotation.

    Safe for concurrent use: the trigger checks, the rotation and the
    write happen under one lock. Rotation failures never fail a write;
    they are passed to ``on_error`` and the bytes go to the existing file.
    """

    def __init__(
        self,
        directory: Path,
        namer: LogFileNamer,
        max_size_bytes: int,
        rotation_interval: timedelta,
        max_backups: int = 0,
        max_age: Optional[timedelta] = None,
        compress: bool = False,
        clock: Optional[Clock] = None,
        on_error: Optional[ErrorHandler] = None,
    ):
        if max_size_bytes <= 0:
            raise InvalidConfigurationError("max_size_bytes", max_size_bytes, "a positive byte count")
        if rotation_interval <= timedelta(0):
            raise InvalidConfigurationError("rotation_interval", rotation_interval, "a positive duration")
        if max_backups < 0:
            raise InvalidConfigurationError("max_backups", max_backups, "zero or a positive count")

        self.directory = Path(directory)
        self.namer = namer
        self.max_size_bytes = max_size_bytes
        self.rotation_interval = rotation_interval
        self.max_backups = max_backups
        self.max_age = max_age
        self.compress = compress

        self._clock = clock or _utc_now
        self._on_error = on_error or _log_rotation_error
        self._lock = threading.Lock()

        # Rotation state, guarded by _lock
        self._file: Optional[BinaryIO] = None
        self._path: Optional[Path] = None
        self._size = 0
        self._last_rotation = self._now()
        self._last_backup_stamp: Optional[datetime] = None

    @property
    def path(self) -> Optional[Path]:
        """Path of the active file, None until the first write."""
        return self._path

    @property
    def current_size(self) -> int:
        return self._size

    def write(self, data: bytes) -> int:
        """Append ``data`` to the active file, rotating first if needed.

        Raises:
            OSError: the bytes could not be written.
        """
        with self._lock:
            if self._file is None:
                self._open_active()

            if self._should_rotate(len(data)):
                try:
                    self._rotate()
                except RotationError as e:
                    self._on_error(e)

            written = self._file.write(data)
            self._file.flush()
            self._size += written
            return written

    def rotate(self) -> Path:
        """Force a rotation. Returns the backup path.

        Raises:
            RotationError: the active file could not be archived; the
                writer keeps using it.
        """
        with self._lock:
            if self._file is None:
                self._open_active()
            return self._rotate()

    def flush(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        """Flush and close the active file. A later write reopens it."""
        with self._lock:
            self._close_file()

    def _now(self) -> datetime:
        return _as_utc(self._clock())

    def _should_rotate(self, incoming: int) -> bool:
        now = self._now()
        time_due = now - self._last_rotation >= self.rotation_interval

        if self._size == 0:
            # Nothing to archive; an empty file is never rotated
            if time_due:
                self._last_rotation = now
            return False

        if self._size + incoming > self.max_size_bytes:
            return True
        return time_due

    def _rotate(self) -> Path:
        now = self._now()
        active = self._path

        self._close_file()
        backup = self._backup_path(active, now)
        try:
            active.rename(backup)
        except OSError as e:
            self._open(active)
            raise RotationError(active, e) from e

        self._last_rotation = now
        self._open_active()
        logger.debug(f"Rotated {active.name} to {backup.name}")

        return self._housekeeping(backup, now)

    def _housekeeping(self, backup: Path, now: datetime) -> Path:
        """Compress the new backup and apply retention. Errors are reported, not raised."""
        if self.compress:
            try:
                backup = compress_file(backup)
            except OSError as e:
                self._on_error(RotationError(backup, e))

        try:
            deleted = enforce_retention(self.directory, self.namer, self.max_backups, self.max_age, now)
        except OSError as e:
            self._on_error(RotationError(backup, e))
        else:
            if deleted:
                logger.debug(f"Removed {len(deleted)} expired log backup(s)")

        return backup

    def _backup_path(self, active: Path, now: datetime) -> Path:
        stamp = now
        if self._last_backup_stamp is not None and stamp <= self._last_backup_stamp:
            stamp = self._last_backup_stamp + timedelta(microseconds=1)

        while True:
            candidate = active.with_name(self.namer.backup_name(active.name, stamp))
            compressed = candidate.with_name(candidate.name + COMPRESSED_EXTENSION)
            if not candidate.exists() and not compressed.exists():
                break
            stamp += timedelta(microseconds=1)

        self._last_backup_stamp = stamp
        return candidate

    def _open_active(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._open(self.directory / self.namer.active_name(self._now()))

    def _open(self, path: Path) -> None:
        self._file = open(path, "ab")
        self._path = path
        self._size = self._file.tell()

    def _close_file(self) -> None:
        if self._file is not None and not self._file.closed:
            try:
                self._file.flush()
            finally:
                self._file.close()
        self._file = None
