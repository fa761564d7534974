"""
In-memory filter catalog state.

Every change to the client-side filter list goes through reduce_filters(),
so the list's invariants (unique ids, newest first, counters never
decreasing) are enforced in one place.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Union

from .models import Filter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterCatalogState:
    """Snapshot of the catalog held by the controller."""

    filters: tuple[Filter, ...] = ()
    loaded: bool = False
    error: Optional[str] = None


# -----------------------------------------------------------------------------
# Actions
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class FiltersLoaded:
    filters: tuple[Filter, ...]


@dataclass(frozen=True)
class FiltersLoadFailed:
    message: str
    fallback: tuple[Filter, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FilterCreated:
    filter: Filter


@dataclass(frozen=True)
class FilterUpdated:
    filter: Filter


@dataclass(frozen=True)
class FilterDeleted:
    filter_id: str


@dataclass(frozen=True)
class FilterOpened:
    filter_id: str


FilterAction = Union[
    FiltersLoaded,
    FiltersLoadFailed,
    FilterCreated,
    FilterUpdated,
    FilterDeleted,
    FilterOpened,
]


def dedupe_by_id(filters: Iterable[Filter]) -> tuple[Filter, ...]:
    """Drop repeated ids, keeping the first occurrence and the order."""
    seen: set[str] = set()
    unique: list[Filter] = []
    for item in filters:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return tuple(unique)


def reduce_filters(state: FilterCatalogState, action: FilterAction) -> FilterCatalogState:
    """
    Apply one action to the catalog state and return the new state.

    Pure: the input state is never modified.
    """
    if isinstance(action, FiltersLoaded):
        return FilterCatalogState(filters=dedupe_by_id(action.filters), loaded=True)

    if isinstance(action, FiltersLoadFailed):
        return FilterCatalogState(
            filters=dedupe_by_id(action.fallback),
            loaded=True,
            error=action.message,
        )

    if isinstance(action, FilterCreated):
        rest = tuple(f for f in state.filters if f.id != action.filter.id)
        return replace(state, filters=(action.filter, *rest))

    if isinstance(action, FilterUpdated):
        if not any(f.id == action.filter.id for f in state.filters):
            logger.debug(f"Ignoring update for filter {action.filter.id} not in catalog")
            return state
        return replace(
            state,
            filters=tuple(
                action.filter if f.id == action.filter.id else f
                for f in state.filters
            ),
        )

    if isinstance(action, FilterDeleted):
        return replace(
            state,
            filters=tuple(f for f in state.filters if f.id != action.filter_id),
        )

    if isinstance(action, FilterOpened):
        return replace(
            state,
            filters=tuple(
                f.model_copy(update={"access_count": f.access_count + 1})
                if f.id == action.filter_id else f
                for f in state.filters
            ),
        )

    raise TypeError(f"Unknown filter action: {type(action).__name__}")
