# =====================================================================
# FILE: grammar.py
# =====================================================================
# The matchers that make up the save file name grammar:
#
#   [__{internal_tag}__]user{tag}[_{version}].dat[.bak{backup_id}]
#
# Every matcher takes the remaining input and returns a tuple
# (rest, value). An optional element that is not there returns
# value None; a structural mismatch raises ParseFailure.

DIGITS = "0123456789"

INTERNAL_TAG_MARKER = "__"
USER_PREFIX = "user"
VERSION_PREFIX = "_"
VERSION_SEPARATOR = "."
SUFFIX = ".dat"
BACKUP_MARKER = ".bak"


class ParseFailure(ValueError):
    """Raised when the input does not belong to the naming scheme."""
    def __init__(self, remainder, expected=None):
        self.remainder = remainder
        self.expected = expected
        if expected:
            message = f"expected {expected} at '{remainder}'"
        else:
            message = f"unexpected input at '{remainder}'"
        super().__init__(message)


def literal(text: str, expected: str) -> tuple[str, str]:
    """Consumes the exact string `expected`."""
    if not text.startswith(expected):
        raise ParseFailure(text, repr(expected))
    return text[len(expected):], expected


def digits(text: str, minimum: int = 0) -> tuple[str, str]:
    """Consumes a run of ASCII digits, at least `minimum` of them."""
    end = 0
    while end < len(text) and text[end] in DIGITS:
        end += 1
    if end < minimum:
        raise ParseFailure(text, "digit")
    return text[end:], text[:end]


def end_of_input(text: str) -> tuple[str, None]:
    if text:
        raise ParseFailure(text, "end of input")
    return text, None


def optional(matcher, text: str):
    """
    Runs `matcher` and reports a failure as absence. The input is left
    untouched when the matcher fails.
    """
    try:
        return matcher(text)
    except ParseFailure:
        return text, None


def peek(matcher, text: str):
    """Runs `matcher` without consuming anything."""
    _, value = matcher(text)
    return text, value


def match_internal_tag(text: str) -> tuple[str, str | None]:
    """
    Matches the internal management tag, e.g. "__pin__user4.dat" -> ("user4.dat", "pin").

    No opening marker means there is no internal tag. An opening marker
    without a closing one is a failure.
    """
    if not text.startswith(INTERNAL_TAG_MARKER):
        return text, None
    rest, _ = literal(text, INTERNAL_TAG_MARKER)

    # The tag is never empty and never holds the marker itself
    end = rest.find(INTERNAL_TAG_MARKER)
    if end <= 0:
        raise ParseFailure(rest, "closing internal tag marker")
    internal_tag = rest[:end]
    rest, _ = literal(rest[end:], INTERNAL_TAG_MARKER)
    return rest, internal_tag


def match_version(text: str) -> tuple[str, str | None]:
    """
    Matches a version tag such as "_1.0.28891" or the legacy "_1.2.3.28891".

    Returns the version without its leading underscore. A separator that is
    not followed by a digit group is left for the next matcher.
    """
    if not text.startswith(VERSION_PREFIX):
        return text, None
    rest, _ = literal(text, VERSION_PREFIX)
    start = rest
    rest, _ = digits(rest, minimum=1)
    while rest.startswith(VERSION_SEPARATOR) and len(rest) > 1 and rest[1] in DIGITS:
        rest, _ = digits(rest[1:], minimum=1)
    return rest, start[:len(start) - len(rest)]


def match_backup(text: str) -> tuple[str, str]:
    """Matches ".bak" plus an optional numeric id up to the end of the input."""
    rest, _ = literal(text, BACKUP_MARKER)
    rest, backup_id = digits(rest)
    rest, _ = end_of_input(rest)
    return rest, backup_id


def match_suffix(text: str) -> tuple[str, str | None]:
    """
    Matches ".dat" with an optional backup marker, then the end of the input.

    The value is the backup id: None for a live save, "" for a backup
    without a number.
    """
    rest, _ = literal(text, SUFFIX)
    rest, backup_id = optional(match_backup, rest)
    rest, _ = end_of_input(rest)
    return rest, backup_id


def match_tail(text: str) -> tuple[str, tuple[str | None, str | None]]:
    """Optional version followed by the suffix. Value is (version, backup_id)."""
    rest, version = optional(match_version, text)
    rest, backup_id = match_suffix(rest)
    return rest, (version, backup_id)


def match_user_tag(text: str) -> tuple[str, str]:
    """
    Matches "user" and the slot tag after it.

    The tag takes one character at a time and ends at the first position
    where the rest of the input is a valid version and suffix, so
    "user1.dat.dat" gives the tag "1.dat" with ".dat" left over.
    """
    rest, _ = literal(text, USER_PREFIX)

    # At least one character belongs to the tag
    for end in range(1, len(rest) + 1):
        try:
            peek(match_tail, rest[end:])
        except ParseFailure:
            continue
        return rest[end:], rest[:end]

    raise ParseFailure(rest, "version and suffix after user tag")
