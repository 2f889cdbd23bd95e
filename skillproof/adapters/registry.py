from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from skillproof.schemas import PlatformDescriptor

from .base import Clock, PayloadLoader, PlatformAdapter
from .bitbucket import BitbucketAdapter
from .blog import DevToAdapter, MediumAdapter
from .coding import CodeforcesAdapter, HackerRankAdapter, LeetCodeAdapter
from .devpost import DevpostAdapter
from .freelance import FreelanceAdapter
from .github import GitHubAdapter
from .gitlab import GitLabAdapter
from .kaggle import KaggleAdapter

logger = logging.getLogger(__name__)

BUILTIN_ADAPTERS = (
    GitHubAdapter,
    GitLabAdapter,
    BitbucketAdapter,
    LeetCodeAdapter,
    CodeforcesAdapter,
    HackerRankAdapter,
    KaggleAdapter,
    DevpostAdapter,
    DevToAdapter,
    MediumAdapter,
    FreelanceAdapter,
)


class UnknownPlatformError(KeyError):
    def __init__(self, platform_id: str):
        super().__init__(platform_id)
        self.platform_id = platform_id

    def __str__(self) -> str:
        return f"Unknown platform '{self.platform_id}'."


class AdapterRegistry:
    """Explicit platform id -> adapter table, injected into the verification service."""

    def __init__(self, adapters: Iterable[PlatformAdapter] = ()) -> None:
        self._adapters: dict[str, PlatformAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: PlatformAdapter, *, replace: bool = False) -> None:
        platform_id = adapter.platform_id
        if not platform_id:
            raise ValueError("Adapter must declare a platform_id.")
        if platform_id in self._adapters and not replace:
            raise ValueError(f"Platform '{platform_id}' is already registered.")
        self._adapters[platform_id] = adapter
        logger.debug("adapter_registered platform=%s", platform_id)

    def get(self, platform_id: str) -> PlatformAdapter:
        try:
            return self._adapters[platform_id]
        except KeyError:
            raise UnknownPlatformError(platform_id) from None

    def __contains__(self, platform_id: object) -> bool:
        return platform_id in self._adapters

    def __iter__(self) -> Iterator[PlatformAdapter]:
        return iter(self._adapters.values())

    def __len__(self) -> int:
        return len(self._adapters)

    def platform_ids(self) -> list[str]:
        return list(self._adapters)

    def describe(self) -> list[PlatformDescriptor]:
        return [adapter.describe() for adapter in self._adapters.values()]


def build_default_registry(
    enabled: Iterable[str] | None = None,
    loader: PayloadLoader | None = None,
    clock: Clock | None = None,
) -> AdapterRegistry:
    """Registry with every built-in adapter, optionally restricted to ``enabled`` ids."""
    allowed = {platform_id.strip().lower() for platform_id in enabled} if enabled else None
    registry = AdapterRegistry()
    for adapter_cls in BUILTIN_ADAPTERS:
        if allowed is not None and adapter_cls.platform_id not in allowed:
            continue
        registry.register(adapter_cls(loader=loader, clock=clock))
    if allowed:
        unknown = allowed.difference(registry.platform_ids())
        if unknown:
            logger.warning("enabled_platforms_unknown platforms=%s", ",".join(sorted(unknown)))
    return registry
