"""Generation registry and cutover."""

from __future__ import annotations

import logging

from swcache.config import WorkerConfig
from swcache.store import CacheStore
from swcache.types import Generation, GenerationKind

logger = logging.getLogger(__name__)


class GenerationRegistry:
    """The canonical current generation of each kind."""

    def __init__(self, static: str, dynamic: str) -> None:
        if static == dynamic:
            raise ValueError("static and dynamic generations must have different names")
        self._generations = {
            GenerationKind.STATIC: Generation(static, GenerationKind.STATIC),
            GenerationKind.DYNAMIC: Generation(dynamic, GenerationKind.DYNAMIC),
        }

    @classmethod
    def from_config(cls, config: WorkerConfig) -> GenerationRegistry:
        return cls(config.static_generation, config.dynamic_generation)

    def generation(self, kind: GenerationKind) -> Generation:
        return self._generations[kind]

    def name_for(self, kind: GenerationKind) -> str:
        """Current generation name for a kind."""
        return self._generations[kind].name

    def current(self) -> frozenset[str]:
        """Names of all current generations."""
        return frozenset(g.name for g in self._generations.values())

    async def cutover(self, store: CacheStore) -> list[str]:
        """Delete every stored generation that is not current.

        Returns the names that were deleted, sorted.
        """
        current = self.current()
        stale = sorted((await store.list_generations()) - current)
        for name in stale:
            logger.info("Deleting stale cache generation %s", name)
            await store.delete_generation(name)
        return stale
