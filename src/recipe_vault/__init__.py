from .models import FilterCriteria, PhotoBlob, Recipe, RecipeFields, SortOrder
from .record_store import RecordStore
from .storage import MemoryStore, SqliteStore
from .update_lifecycle import UpdateLifecycle
from .vault import RecipeVault

__all__ = [
    "FilterCriteria",
    "MemoryStore",
    "PhotoBlob",
    "Recipe",
    "RecipeFields",
    "RecipeVault",
    "RecordStore",
    "SortOrder",
    "SqliteStore",
    "UpdateLifecycle",
]
