"""
Mapping of display names to filesystem-safe path segments.

``sanitize`` is deterministic but not injective: "Get User" and "Get_User"
both become "Get_User". ``allocate_segments`` resolves such collisions
inside one container by suffixing later siblings.
"""

import re
from typing import Iterable, Sequence

_UNSAFE = re.compile(r"[^A-Za-z0-9_\-]")


def sanitize(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    segment = _UNSAFE.sub("_", name or "")
    return segment or "_"


def allocate_segments(names: Sequence[str], reserved: Iterable[str] = ()) -> list[str]:
    """
    Assign a unique path segment to each name, in order.

    Uniqueness is case-insensitive so that two siblings never share a
    directory on case-insensitive filesystems. A segment that is already
    taken, or that matches a ``reserved`` name, gets the first free
    ``_2``, ``_3``, ... suffix.

    Args:
        names: Display names of the siblings, in container order.
        reserved: Segments the container uses for its own metadata.

    Returns:
        One segment per name, same order.
    """
    taken = {r.casefold() for r in reserved}
    segments: list[str] = []
    for name in names:
        base = sanitize(name)
        segment = base
        counter = 2
        while segment.casefold() in taken:
            segment = f"{base}_{counter}"
            counter += 1
        taken.add(segment.casefold())
        segments.append(segment)
    return segments
