from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlatformType(str, Enum):
    CODE_REPOSITORY = "code_repository"
    CODING_PLATFORM = "coding_platform"
    BLOG_PLATFORM = "blog_platform"
    FREELANCE_PLATFORM = "freelance_platform"
    DEPLOYMENT_PLATFORM = "deployment_platform"
    DATA_SCIENCE_PLATFORM = "data_science_platform"
    CUSTOM = "custom"


class PlatformCredentials(BaseModel):
    """Credentials plus the pre-fetched native payload for one platform.

    Unknown keys are kept so custom platforms can declare their own fields.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str | None = None
    username: str | None = None
    api_key: str | None = None
    cookie: str | None = None
    profile_url: str | None = None
    payload: Any = None

    def value(self, name: str) -> Any:
        if name in type(self).model_fields:
            return getattr(self, name)
        return (self.model_extra or {}).get(name)


class PlatformDescriptor(BaseModel):
    platform_id: str
    name: str
    platform_type: PlatformType
    description: str = ""
    # at least one of these must be supplied
    accepted_credentials: list[str] = Field(default_factory=list)


class PlatformFailure(BaseModel):
    platform_id: str
    error: str
