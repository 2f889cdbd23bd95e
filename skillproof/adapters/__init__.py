from .base import (
    AdapterBase,
    AdapterFetchError,
    PayloadLoader,
    PlatformAdapter,
    parse_timestamp,
    payload_from_credentials,
)
from .bitbucket import BitbucketAdapter
from .blog import DevToAdapter, MediumAdapter
from .coding import CodeforcesAdapter, HackerRankAdapter, LeetCodeAdapter
from .custom import CustomPlatformAdapter, CustomPlatformConfig
from .devpost import DevpostAdapter
from .freelance import FreelanceAdapter
from .github import GitHubAdapter
from .gitlab import GitLabAdapter
from .kaggle import KaggleAdapter
from .registry import AdapterRegistry, UnknownPlatformError, build_default_registry

__all__ = [
    "AdapterBase",
    "AdapterFetchError",
    "PayloadLoader",
    "PlatformAdapter",
    "parse_timestamp",
    "payload_from_credentials",
    "BitbucketAdapter",
    "DevToAdapter",
    "MediumAdapter",
    "CodeforcesAdapter",
    "HackerRankAdapter",
    "LeetCodeAdapter",
    "CustomPlatformAdapter",
    "CustomPlatformConfig",
    "DevpostAdapter",
    "FreelanceAdapter",
    "GitHubAdapter",
    "GitLabAdapter",
    "KaggleAdapter",
    "AdapterRegistry",
    "UnknownPlatformError",
    "build_default_registry",
]
