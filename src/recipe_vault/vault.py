from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Union
from .edit_session import EditSession, FormPayload, Notifier, log_notice
from .models import CollectionStats, FilterCriteria, PhotoBlob, Recipe, SortOrder
from .photos import PhotoDecoder, read_blob_as_data_url
from .record_store import RecordStore
from .update_lifecycle import UpdateLifecycle
from . import view

logger = logging.getLogger(__name__)

EMPTY_COLLECTION = "No recipes yet. Add your first one on the left."
NO_MATCHES = "No recipes match your current filters."

Confirm = Callable[[str], Awaitable[bool]]


@dataclass
class VaultState:
    recipes: List[Recipe] = field(default_factory=list)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)


@dataclass
class ViewSnapshot:
    visible: List[Recipe]
    categories: List[str]
    stats: CollectionStats
    criteria: FilterCriteria
    editing_id: Optional[str] = None
    photo_preview: str = ""
    update_toast: bool = False

    @property
    def empty_message(self) -> str:
        if self.visible:
            return ""
        return EMPTY_COLLECTION if self.stats.total == 0 else NO_MATCHES


Listener = Callable[[ViewSnapshot], None]


class RecipeVault:
    """Single owner of the UI state; every change publishes a fresh snapshot."""

    def __init__(
        self,
        store: RecordStore,
        confirm: Confirm,
        notify: Notifier = log_notice,
        decoder: PhotoDecoder = read_blob_as_data_url,
        reload: Callable[[], None] = lambda: None,
    ):
        self.store = store
        self.updates = UpdateLifecycle(reload, on_change=lambda _: self._publish())
        self.session = EditSession(self.store, decoder=decoder, notify=notify)
        self.confirm = confirm
        self.state = VaultState()
        self._listeners: List[Listener] = []

    # --- change notification ---
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> ViewSnapshot:
        recipes, criteria = self.state.recipes, self.state.criteria
        visible = view.derive(recipes, criteria)
        return ViewSnapshot(
            visible=visible,
            categories=view.categories(recipes),
            stats=view.stats(recipes, visible),
            criteria=criteria.model_copy(),
            editing_id=self.session.editing_id,
            photo_preview=self.session.preview,
            update_toast=self.updates.toast_visible,
        )

    def _publish(self) -> ViewSnapshot:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def _sync(self) -> ViewSnapshot:
        self.state.recipes = self.store.recipes
        return self._publish()

    async def start(self) -> ViewSnapshot:
        await self.store.load()
        return self._sync()

    # --- filters ---
    def set_search(self, value: str) -> ViewSnapshot:
        self.state.criteria.search = value.strip().lower()
        return self._publish()

    def set_category(self, value: str) -> ViewSnapshot:
        self.state.criteria.category = value
        return self._publish()

    def set_favorites_only(self, value: bool) -> ViewSnapshot:
        self.state.criteria.favorites_only = value
        return self._publish()

    def set_sort(self, value: Union[SortOrder, str]) -> ViewSnapshot:
        self.state.criteria.sort = SortOrder(value)
        return self._publish()

    def reset_filters(self) -> ViewSnapshot:
        self.state.criteria = FilterCriteria()
        return self._publish()

    # --- editing ---
    def start_edit(self, recipe_id: str) -> bool:
        recipe = self.store.get(recipe_id)
        if recipe is None:
            return False
        self.session.start_edit(recipe)
        self._publish()
        return True

    def cancel_edit(self) -> ViewSnapshot:
        self.session.cancel()
        return self._publish()

    def clear_photo(self) -> ViewSnapshot:
        self.session.clear_photo()
        return self._publish()

    async def ingest_photo(self, blob: PhotoBlob) -> bool:
        accepted = await self.session.ingest_photo(blob)
        if accepted:
            self._publish()
        return accepted

    async def submit(self, payload: FormPayload) -> Optional[ViewSnapshot]:
        recipes = await self.session.submit(payload)
        if recipes is None:
            return None
        return self._sync()

    # --- record actions ---
    async def toggle_favorite(self, recipe_id: str) -> ViewSnapshot:
        await self.store.toggle_favorite(recipe_id)
        return self._sync()

    async def delete(self, recipe_id: str) -> bool:
        target = self.store.get(recipe_id)
        if target is None:
            return False
        if not await self.confirm(f'Delete "{target.name}"?'):
            logger.debug("delete of %s declined", recipe_id)
            return False
        outcome = await self.store.delete(recipe_id, editing_id=self.session.editing_id)
        if outcome.was_editing:
            self.session.forget(recipe_id)
        self._sync()
        return outcome.removed is not None
