"""Per-source-member configuration."""

from __future__ import annotations


class SourceMemberConfig:
    """Metadata about one source member, independent of any destination member."""

    def __init__(self, source_member: str) -> None:
        self._source_member = source_member
        self._ignored = False

    @property
    def source_member(self) -> str:
        return self._source_member

    def ignore(self) -> None:
        self._ignored = True

    def is_ignored(self) -> bool:
        return self._ignored

    def __repr__(self) -> str:
        return f"SourceMemberConfig({self._source_member}, ignored={self._ignored})"
