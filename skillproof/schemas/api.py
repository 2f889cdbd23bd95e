from __future__ import annotations

from pydantic import BaseModel, Field

from .evidence import RawActivityRecord
from .platforms import PlatformCredentials


class PlatformRecordsPayload(BaseModel):
    platform_id: str = Field(min_length=1)
    records: list[RawActivityRecord] = Field(default_factory=list)


class VerifyRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    platforms: list[PlatformRecordsPayload] = Field(default_factory=list)


class CollectRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=200)
    credentials: dict[str, PlatformCredentials] = Field(default_factory=dict)
