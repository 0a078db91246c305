# =====================================================================
# FILE: name_parser.py
# =====================================================================
# Turns a save file name into a SaveNameInfo by running the grammar
# matchers left to right: internal tag, user tag, version, suffix.

import logging

from grammar import ParseFailure, match_internal_tag, match_suffix, match_user_tag, match_version, optional
from save_info import SaveNameInfo, format_name

logger = logging.getLogger(__name__)


def parse(name: str) -> SaveNameInfo:
    """
    Parses a full save file name.

    e.g. "__pin__user4_1.0.28650.dat.bak13" -> SaveNameInfo(tag="4", version="1.0.28650",
         backup_id="13", internal_tag="pin")

    Args:
        name: The file name, without any directory part.

    Returns:
        The decoded SaveNameInfo.

    Raises:
        ParseFailure: If the name does not follow the naming scheme. Nothing
            is returned for a partial match.
    """
    if not isinstance(name, str):
        raise ParseFailure(repr(name), "file name string")

    rest, internal_tag = match_internal_tag(name)
    rest, tag = match_user_tag(rest)
    rest, version = optional(match_version, rest)
    rest, backup_id = match_suffix(rest)

    return SaveNameInfo(
        tag=tag,
        version=version,
        backup_id=backup_id,
        internal_tag=internal_tag,
    )


def try_parse(name) -> SaveNameInfo | None:
    """Like parse, but returns None for names outside the naming scheme."""
    try:
        return parse(name)
    except ParseFailure as e:
        logger.debug("Not a save file name: %r (%s)", name, e)
        return None


def is_canonical(info: SaveNameInfo) -> bool:
    """True if formatting the record and parsing it again gives the same record."""
    return try_parse(format_name(info)) == info
