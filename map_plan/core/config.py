"""Type map configuration.

TypeMapSettings is a Pydantic model carrying the per-profile defaults a
configuration front-end applies to every TypeMap it creates.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from map_plan.core.enums import MemberList

DEFAULT_PROFILE_NAME = "Default"


class TypeMapSettings(BaseModel):
    """Defaults applied to a TypeMap at creation time."""

    profile: str = DEFAULT_PROFILE_NAME
    member_list: MemberList = MemberList.DESTINATION
    ignore_prefixes: list[str] = []
    max_depth: int | None = Field(default=None, ge=1)
