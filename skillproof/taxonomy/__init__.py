from functools import lru_cache

from .local_taxonomy import LocalTaxonomy
from .provider import TechnologyTaxonomy


@lru_cache(maxsize=1)
def get_default_taxonomy() -> TechnologyTaxonomy:
    return LocalTaxonomy()


__all__ = ["TechnologyTaxonomy", "LocalTaxonomy", "get_default_taxonomy"]
