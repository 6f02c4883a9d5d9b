"""Member list enumeration."""

from __future__ import annotations

from enum import Enum


class MemberList(Enum):
    """Which member set is the source of truth for unmapped-member checks."""

    DESTINATION = "destination"
    SOURCE = "source"
    NONE = "none"
