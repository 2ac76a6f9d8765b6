# hoozin/services/room_names.py
from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

_CAPACITY_SUFFIX = re.compile(r"\s*\((\d+)\)\s*$")

# Shorter common prefixes are left in place.
_MIN_PREFIX_LENGTH = 3


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch == "-"


def extract_capacity(name: str) -> Tuple[str, Optional[int]]:
    """
    Split a trailing "(<n>)" capacity annotation off a room name.

    A capacity of 0 is treated as absent.
    """
    match = _CAPACITY_SUFFIX.search(name)
    if match is None:
        return name.strip(), None
    capacity = int(match.group(1))
    return name[: match.start()].strip(), capacity or None


def common_prefix(names: Sequence[str]) -> str:
    """
    Longest case-sensitive leading substring shared by every name.
    """
    if not names:
        return ""
    prefix = names[0]
    for name in names[1:]:
        i = 0
        while i < len(prefix) and i < len(name) and prefix[i] == name[i]:
            i += 1
        prefix = prefix[:i]
        if not prefix:
            break
    return prefix


def _last_separator_end(prefix: str) -> Optional[int]:
    """
    Index just past the last separator run in `prefix`, or None.

    A separator run is a maximal run of non-alphanumeric characters holding
    whitespace and at least one non-whitespace character, such as " - " or
    ": ". A hyphen inside a word ("A-Team") is never a separator.
    """
    cut = None
    i = 0
    while i < len(prefix):
        if prefix[i].isalnum():
            i += 1
            continue
        start = i
        while i < len(prefix) and not prefix[i].isalnum():
            i += 1
        run = prefix[start:i]
        if run.strip() and any(ch.isspace() for ch in run):
            cut = i
    return cut


def _trim_to_name_char(prefix: str) -> str:
    end = len(prefix)
    while end > 0 and not _is_name_char(prefix[end - 1]):
        end -= 1
    return prefix[:end]


def strip_common_prefix(names: Sequence[str]) -> List[str]:
    """
    Remove the prefix shared by all names, when it is worth removing.

    Steps
    -----
    1) Longest common prefix across all names (needs more than one name).
    2) If it holds a separator run, cut back to the end of the last one, so
       a word following " - " or ": " stays in the name. The whole cut
       prefix, separator included, is removed.
    3) Otherwise trim the trailing run of characters that are neither
       letters, digits nor hyphen, and remove that plus any following
       whitespace.
    4) Nothing is removed unless at least 3 name characters remain in the
       prefix.
    """
    result = list(names)
    if len(result) <= 1:
        return result

    prefix = common_prefix(result)
    cut = _last_separator_end(prefix)
    if cut is not None:
        prefix = prefix[:cut]
        if len(_trim_to_name_char(prefix)) < _MIN_PREFIX_LENGTH:
            return result
    else:
        prefix = _trim_to_name_char(prefix)
        if len(prefix) < _MIN_PREFIX_LENGTH:
            return result

    return [
        name[len(prefix):].lstrip() if name.startswith(prefix) else name
        for name in result
    ]


def simplify_room_names(names: Sequence[str]) -> List[Tuple[str, Optional[int]]]:
    """
    Shorten a full set of room display names.

    Capacity annotations are extracted first, then the common prefix is
    computed over the whole set at once.

    Returns a list of (display_name, max_attendance) in input order.
    """
    extracted = [extract_capacity(name) for name in names]
    stripped = strip_common_prefix([name for name, _ in extracted])
    return [(name, capacity) for name, (_, capacity) in zip(stripped, extracted)]
