from __future__ import annotations
import json
import logging
import time
import uuid
from typing import Callable, List, NamedTuple, Optional
from pydantic import ValidationError
from .errors import StorageFault
from .models import Recipe, RecipeFields
from .storage import PersistenceAdapter

logger = logging.getLogger(__name__)

STORAGE_KEY = "recipe-vault-v1"


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def decode_collection(raw: Optional[bytes]) -> List[Recipe]:
    """Parse persisted bytes; anything unusable reads as an empty collection."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        logger.warning("stored collection is not valid JSON; starting empty")
        return []
    if not isinstance(parsed, list):
        logger.warning("stored collection is not a sequence; starting empty")
        return []
    recipes: List[Recipe] = []
    for i, item in enumerate(parsed):
        try:
            recipes.append(Recipe.model_validate(item))
        except ValidationError:
            logger.warning("skipping malformed stored recipe at index %d", i)
    return recipes


def encode_collection(recipes: List[Recipe]) -> bytes:
    return json.dumps([r.to_storage() for r in recipes], ensure_ascii=False).encode("utf-8")


class DeleteOutcome(NamedTuple):
    recipes: List[Recipe]
    removed: Optional[Recipe]
    was_editing: bool


class RecordStore:
    """Owns the canonical, newest-first collection and persists every mutation whole."""

    def __init__(
        self,
        adapter: PersistenceAdapter,
        key: str = STORAGE_KEY,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_id,
    ):
        self.adapter = adapter
        self.key = key
        self.clock = clock
        self.id_factory = id_factory
        self._recipes: List[Recipe] = []

    @property
    def recipes(self) -> List[Recipe]:
        return list(self._recipes)

    def get(self, recipe_id: Optional[str]) -> Optional[Recipe]:
        if recipe_id is None:
            return None
        return next((r for r in self._recipes if r.id == recipe_id), None)

    async def load(self) -> List[Recipe]:
        try:
            raw = await self.adapter.get(self.key)
        except StorageFault:
            logger.warning("could not read stored collection; starting empty", exc_info=True)
            raw = None
        self._recipes = decode_collection(raw)
        logger.info("loaded %d recipe(s)", len(self._recipes))
        return self.recipes

    async def _save(self) -> None:
        await self.adapter.set(self.key, encode_collection(self._recipes))

    async def create(self, fields: RecipeFields, photo: str = "") -> Recipe:
        existing = {r.id for r in self._recipes}
        rid = self.id_factory()
        while rid in existing:
            rid = self.id_factory()
        recipe = Recipe(
            id=rid,
            created_at=self.clock(),
            favorite=False,
            photo=photo,
            **fields.model_dump(),
        )
        self._recipes.insert(0, recipe)
        await self._save()
        logger.info("created recipe %s", rid)
        return recipe

    async def update(self, recipe_id: str, fields: RecipeFields, photo: str = "") -> List[Recipe]:
        if self.get(recipe_id) is None:
            logger.debug("update: no recipe %s", recipe_id)
            return self.recipes
        changes = dict(fields.model_dump(), photo=photo)
        self._recipes = [
            r.model_copy(update=changes) if r.id == recipe_id else r for r in self._recipes
        ]
        await self._save()
        logger.info("updated recipe %s", recipe_id)
        return self.recipes

    async def toggle_favorite(self, recipe_id: str) -> List[Recipe]:
        if self.get(recipe_id) is None:
            logger.debug("toggle_favorite: no recipe %s", recipe_id)
            return self.recipes
        self._recipes = [
            r.model_copy(update={"favorite": not r.favorite}) if r.id == recipe_id else r
            for r in self._recipes
        ]
        await self._save()
        return self.recipes

    async def delete(self, recipe_id: str, editing_id: Optional[str] = None) -> DeleteOutcome:
        """Remove a recipe.

        ``was_editing`` tells the caller the removed id was the one under edit;
        resetting the edit session is left to the caller.
        """
        target = self.get(recipe_id)
        if target is None:
            logger.debug("delete: no recipe %s", recipe_id)
            return DeleteOutcome(self.recipes, None, False)
        self._recipes = [r for r in self._recipes if r.id != recipe_id]
        await self._save()
        logger.info("deleted recipe %s", recipe_id)
        return DeleteOutcome(self.recipes, target, editing_id == recipe_id)
