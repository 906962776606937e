"""
Backup naming, compression and retention for rotated log files.

Active files are named ``{app}_{version}_{YYYY-MM-DD}.log`` when they are
created. A rotated file keeps its stem and gains the rotation timestamp:
``{app}_{version}_{YYYY-MM-DD}-{YYYYmmddTHHMMSSffffff}.log``, plus ``.gz``
once compressed.

Dates and timestamps are UTC; the writer converts its clock before naming.
"""

import gzip
import os
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from ..constants import (
    BACKUP_TIMESTAMP_FORMAT,
    COMPRESSED_EXTENSION,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_EXTENSION,
)


class LogFileNamer:
    """Builds and parses the file names of one logical log."""

    def __init__(self, app_name: str, app_version: str, extension: str = LOG_FILE_EXTENSION):
        self.prefix = f"{app_name}_{app_version}_"
        self.extension = extension

    def active_name(self, now: datetime) -> str:
        return f"{self.prefix}{now.strftime(LOG_FILE_DATE_FORMAT)}{self.extension}"

    def backup_name(self, active_name: str, stamp: datetime) -> str:
        stem = active_name[: -len(self.extension)] if active_name.endswith(self.extension) else active_name
        return f"{stem}-{stamp.strftime(BACKUP_TIMESTAMP_FORMAT)}{self.extension}"

    def parse_backup(self, filename: str) -> Optional[datetime]:
        """Extract the rotation timestamp from a backup name, None if not a backup."""
        if not filename.startswith(self.prefix):
            return None
        name = filename
        if name.endswith(COMPRESSED_EXTENSION):
            name = name[: -len(COMPRESSED_EXTENSION)]
        if not name.endswith(self.extension):
            return None
        stem = name[: -len(self.extension)]
        if "-" not in stem:
            return None
        suffix = stem.rsplit("-", 1)[1]
        try:
            return datetime.strptime(suffix, BACKUP_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            return None


def compress_file(path: Path) -> Path:
    """Gzip-compress a file in place. Returns the .gz path."""
    path = Path(path)
    gz_path = path.with_name(path.name + COMPRESSED_EXTENSION)
    with open(path, "rb") as f_in, gzip.open(gz_path, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(path)
    return gz_path


def list_backups(directory: Path, namer: LogFileNamer) -> List[Tuple[datetime, Path]]:
    """List backups of one log, oldest first."""
    directory = Path(directory)
    if not directory.is_dir():
        return []

    backups = []
    for entry in directory.iterdir():
        stamp = namer.parse_backup(entry.name)
        if stamp is not None and entry.is_file():
            backups.append((stamp, entry))
    backups.sort(key=lambda item: (item[0], item[1].name))
    return backups


def enforce_retention(
    directory: Path,
    namer: LogFileNamer,
    max_backups: int,
    max_age: Optional[timedelta],
    now: datetime,
) -> List[Path]:
    """Delete backups that are too old or exceed the count limit.

    ``max_backups == 0`` keeps any number of backups and ``max_age=None``
    keeps backups of any age. Returns the deleted paths.
    """
    deleted = []
    survivors = []

    cutoff = now - max_age if max_age else None
    for stamp, path in list_backups(directory, namer):
        if cutoff is not None and stamp < cutoff:
            os.remove(path)
            deleted.append(path)
        else:
            survivors.append(path)

    if max_backups > 0:
        while len(survivors) > max_backups:
            path = survivors.pop(0)
            os.remove(path)
            deleted.append(path)

    return deleted
