"""Entity view handed to the rendering layer by MessagingClient.use_entity()."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from chatsync.infrastructure.cache.cache_store import CacheEntry


class EntityView(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = None
    has_value: bool = False
    is_stale: bool = True
    is_fetching: bool = False

    @classmethod
    def from_entry(cls, entry: Optional[CacheEntry], in_flight: bool = False) -> "EntityView":
        if entry is None:
            return cls(is_fetching=in_flight)
        return cls(
            value=entry.value,
            has_value=entry.has_value,
            is_stale=entry.is_stale,
            is_fetching=entry.is_fetching or in_flight,
        )
