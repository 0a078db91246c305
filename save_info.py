"""
This module defines SaveNameInfo, the decoded form of a save file name, and
format_name, which turns it back into the file name.
"""

from dataclasses import dataclass, replace

from grammar import (
    BACKUP_MARKER,
    DIGITS,
    INTERNAL_TAG_MARKER,
    SUFFIX,
    USER_PREFIX,
    VERSION_PREFIX,
    ParseFailure,
    match_internal_tag,
    match_version,
)


class InvalidSaveNameError(ValueError):
    """Raised when a SaveNameInfo is built from ill-formed field values."""


@dataclass(frozen=True)
class SaveNameInfo:
    """
    The four fields of a save file name.

    backup_id None means the file is not a backup, while "" is a backup
    without a number ("user2.dat.bak").

    A tag that ends in something the version/suffix grammar accepts (for
    example "a_1" without a version) cannot be told apart from a shorter
    tag once formatted. Such records format fine but do not parse back to
    themselves; see name_parser.is_canonical.
    """
    tag: str
    version: str | None = None
    backup_id: str | None = None
    internal_tag: str | None = None

    def __post_init__(self):
        if not isinstance(self.tag, str) or not self.tag:
            raise InvalidSaveNameError(f"User tag must be a non-empty string, got {self.tag!r}")

        if self.version is not None and not _is_version(self.version):
            raise InvalidSaveNameError(f"Invalid version tag: {self.version!r}")

        if self.backup_id is not None:
            if not isinstance(self.backup_id, str) or any(c not in DIGITS for c in self.backup_id):
                raise InvalidSaveNameError(f"Backup id must be digits only, got {self.backup_id!r}")

        if self.internal_tag is not None and not _is_internal_tag(self.internal_tag):
            raise InvalidSaveNameError(f"Invalid internal tag: {self.internal_tag!r}")

    @property
    def is_backup(self) -> bool:
        return self.backup_id is not None

    def with_backup(self, backup_id: str = "") -> "SaveNameInfo":
        """Returns the same save marked as a backup with the given id."""
        return replace(self, backup_id=backup_id)

    def without_backup(self) -> "SaveNameInfo":
        """Returns the live save this record is (or would be) a backup of."""
        return replace(self, backup_id=None)

    def __str__(self) -> str:
        return format_name(self)


def _is_version(version) -> bool:
    if not isinstance(version, str):
        return False
    try:
        rest, matched = match_version(VERSION_PREFIX + version)
    except ParseFailure:
        return False
    return rest == "" and matched == version


def _is_internal_tag(internal_tag) -> bool:
    # The tag has to come back unchanged from its own formatted marker,
    # which rules out empty tags, "__" runs and a trailing "_"
    if not isinstance(internal_tag, str) or INTERNAL_TAG_MARKER in internal_tag:
        return False
    try:
        rest, matched = match_internal_tag(f"{INTERNAL_TAG_MARKER}{internal_tag}{INTERNAL_TAG_MARKER}")
    except ParseFailure:
        return False
    return rest == "" and matched == internal_tag


def format_name(info: SaveNameInfo) -> str:
    """
    Builds the file name for a SaveNameInfo.

    e.g. SaveNameInfo("4", "1.0.28650", "13", "pin") -> "__pin__user4_1.0.28650.dat.bak13"
    e.g. SaveNameInfo("2", backup_id="") -> "user2.dat.bak"
    """
    parts = []

    # Marker used for internal file management
    if info.internal_tag is not None:
        parts.append(f"{INTERNAL_TAG_MARKER}{info.internal_tag}{INTERNAL_TAG_MARKER}")

    parts.append(f"{USER_PREFIX}{info.tag}")

    if info.version is not None:
        parts.append(f"{VERSION_PREFIX}{info.version}")

    parts.append(SUFFIX)

    # An empty backup id still marks the file as a backup
    if info.backup_id is not None:
        parts.append(f"{BACKUP_MARKER}{info.backup_id}")

    return "".join(parts)
