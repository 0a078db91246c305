# =====================================================================
# FILE: backup_names.py
# =====================================================================
# Helpers for working with backup copies of save files by name alone:
# mapping a backup to its live save, grouping, numbering and pruning.
# Nothing in here touches the file system; callers pass in the names
# they have listed themselves.

import logging
from collections import defaultdict

from grammar import DIGITS
from name_parser import parse, try_parse
from save_info import SaveNameInfo

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_COUNT = 10
DEFAULT_FIRST_BACKUP_ID = "1"


def get_original_from_backup(backup_filename: str) -> str | None:
    """
    Gets the name of the live save a backup belongs to.
    e.g., "user2.dat.bak13" -> "user2.dat"
    e.g., "__pin__user4_1.0.28650.dat.bak" -> "__pin__user4_1.0.28650.dat"

    Args:
        backup_filename: The full filename of the backup file.

    Returns:
        The original save filename, or None if the name is not a backup
        or does not follow the naming scheme.
    """
    # Handle cases where the input is None or not a string
    if not isinstance(backup_filename, str):
        return None

    info = try_parse(backup_filename)
    if info is None or not info.is_backup:
        return None
    return str(info.without_backup())


def backup_sort_key(info: SaveNameInfo) -> int:
    """Orders backups by number. A backup without a number comes first."""
    return int(info.backup_id) if info.backup_id else 0


def group_backups(filenames) -> dict[str, list[str]]:
    """
    Groups backup filenames by the live save they belong to.

    Names that are not backups are skipped. Each list is ordered from the
    oldest backup (lowest number) to the newest.
    """
    grouped = defaultdict(list)
    for filename in filenames:
        info = try_parse(filename)
        if info is None or not info.is_backup:
            continue
        grouped[str(info.without_backup())].append(info)

    return {
        original_name: [str(info) for info in sorted(backups, key=backup_sort_key)]
        for original_name, backups in grouped.items()
    }


def next_backup_name(original_filename: str, existing_filenames, first_backup_id: str = DEFAULT_FIRST_BACKUP_ID) -> str:
    """
    Picks the name for a new backup of `original_filename`.

    The new backup is numbered one past the highest existing backup of the
    same save, but never below `first_backup_id`. With no backups yet it
    gets `first_backup_id` as is, so "" gives an unnumbered first backup.

    Raises:
        ParseFailure: If `original_filename` is not a save file name.
        ValueError: If `original_filename` is itself a backup.
    """
    original = parse(original_filename)
    if original.is_backup:
        raise ValueError(f"'{original_filename}' is already a backup")

    backups = group_backups(existing_filenames).get(original_filename, [])
    if not backups:
        return str(original.with_backup(first_backup_id))

    newest = parse(backups[-1])
    next_id = str(max(backup_sort_key(newest) + 1, int(first_backup_id or 0)))
    logger.debug("Next backup of %s is number %s", original_filename, next_id)
    return str(original.with_backup(next_id))


def select_backups_to_prune(filenames, backup_count: int) -> list[str]:
    """
    Finds the backups that exceed the configured limit.

    For every save, all but the `backup_count` newest backups are returned,
    oldest first.
    """
    if backup_count < 0:
        raise ValueError(f"backup_count must not be negative, got {backup_count}")

    to_prune = []
    for original_name, backups in group_backups(filenames).items():
        if len(backups) > backup_count:
            num_to_delete = len(backups) - backup_count
            logger.debug("%d old backup(s) of %s over the limit of %d", num_to_delete, original_name, backup_count)
            to_prune.extend(backups[:num_to_delete])
    return to_prune


class BackupNamer:
    """
    Numbers and prunes backups using the user's settings.

    Build it from the dictionary returned by ConfigManager.load_settings().
    """
    def __init__(self, backup_count=DEFAULT_BACKUP_COUNT, first_backup_id=DEFAULT_FIRST_BACKUP_ID):
        if backup_count < 0:
            raise ValueError(f"backup_count must not be negative, got {backup_count}")
        if not isinstance(first_backup_id, str) or any(c not in DIGITS for c in first_backup_id):
            raise ValueError(f"first_backup_id must be digits only, got {first_backup_id!r}")
        self.backup_count = backup_count
        self.first_backup_id = first_backup_id

    @classmethod
    def from_settings(cls, settings):
        return cls(
            backup_count=settings.get("backup_count", DEFAULT_BACKUP_COUNT),
            first_backup_id=settings.get("first_backup_id", DEFAULT_FIRST_BACKUP_ID),
        )

    def next_backup_name(self, original_filename, existing_filenames):
        return next_backup_name(original_filename, existing_filenames, first_backup_id=self.first_backup_id)

    def backups_to_prune(self, filenames):
        """Backups that go over the configured backup_count, oldest first."""
        return select_backups_to_prune(filenames, self.backup_count)
