"""
Filters module.

Manages the shared filter catalog: persistence in the document store and
the client-side view state built on top of it.

Public API:
- IFilterRepository: Interface for catalog persistence
- FilterRepository: Firestore implementation
- ViewStateController: Catalog state, navigation and privileged mutations
- Models: Filter, FilterCreate, FilterUpdate, FilterCategory, FilterType, ViewState
- Filter exceptions
"""

from .interfaces import IFilterCategorizer, IFilterRepository, ITrendGenerator
from .repository import FilterRepository
from .controller import ViewStateController
from .catalog import (
    FilterCatalogState,
    FilterCreated,
    FilterDeleted,
    FilterOpened,
    FilterUpdated,
    FiltersLoadFailed,
    FiltersLoaded,
    reduce_filters,
)
from .defaults import DEFAULT_FILTERS
from .models import (
    Filter,
    FilterCategory,
    FilterCreate,
    FilterType,
    FilterUpdate,
    ViewName,
    ViewState,
)
from .exceptions import (
    FilterError,
    FilterNotFoundError,
    FilterPermissionError,
    FilterStoreError,
    FilterValidationError,
    MissingIndexError,
)

__all__ = [
    # Interfaces
    "IFilterRepository",
    "IFilterCategorizer",
    "ITrendGenerator",
    # Implementations
    "FilterRepository",
    "ViewStateController",
    # Catalog state
    "FilterCatalogState",
    "FiltersLoaded",
    "FiltersLoadFailed",
    "FilterCreated",
    "FilterUpdated",
    "FilterDeleted",
    "FilterOpened",
    "reduce_filters",
    "DEFAULT_FILTERS",
    # Models
    "Filter",
    "FilterCategory",
    "FilterCreate",
    "FilterType",
    "FilterUpdate",
    "ViewName",
    "ViewState",
    # Exceptions
    "FilterError",
    "FilterNotFoundError",
    "FilterPermissionError",
    "FilterStoreError",
    "FilterValidationError",
    "MissingIndexError",
]
