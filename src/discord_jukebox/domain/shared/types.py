"""Reusable Pydantic Annotated types for domain-wide validation.

Constrained types are defined here once so models can simply annotate
their fields::

    from discord_jukebox.domain.shared.types import DiscordSnowflake, TrackUrlStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        url: TrackUrlStr
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

VolumeScalar = Annotated[float, Field(ge=0.0, le=1.0)]
"""Audio volume multiplier in [0.0, 1.0]."""

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackUrlStr = Annotated[str, Field(pattern=r"^http")]
"""Track URL: anything starting with http (covers https)."""
