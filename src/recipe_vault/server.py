from __future__ import annotations
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel
from .config import DATA_DIR, DB_URL, STORAGE_KEY, configure_logging
from .models import PhotoBlob, Recipe, RecipeFields
from .photos import UNREADABLE_IMAGE
from .record_store import RecordStore
from .storage import SqliteStore
from .vault import RecipeVault


class RecipeListing(BaseModel):
    recipes: List[Recipe]
    categories: List[str]
    summary: str
    message: str = ""


notices: List[str] = []


async def _tool_call_confirms(prompt: str) -> bool:
    # Calling the delete tool is the user's confirmation.
    return True


store = SqliteStore(DB_URL)
vault = RecipeVault(RecordStore(store, key=STORAGE_KEY), confirm=_tool_call_confirms, notify=notices.append)
_loaded = False
# Tool calls run as concurrent tasks but share one edit session and one set of filters.
_lock = asyncio.Lock()

mcp = FastMCP("recipe-vault")


@asynccontextmanager
async def _session() -> AsyncIterator[RecipeVault]:
    global _loaded
    async with _lock:
        if not _loaded:
            await vault.start()
            _loaded = True
        yield vault


async def _attach_photo(v: RecipeVault, photo_path: Optional[str], clear_photo: bool) -> None:
    if clear_photo:
        v.clear_photo()
    if photo_path:
        notices.clear()
        try:
            blob = PhotoBlob.from_path(photo_path)
        except OSError as e:
            v.cancel_edit()
            raise ValueError(UNREADABLE_IMAGE) from e
        if not await v.ingest_photo(blob):
            v.cancel_edit()
            raise ValueError(notices[-1] if notices else f"could not attach {photo_path}")


@mcp.tool()
async def recipes_list(
    search: str = "",
    category: str = "",
    favorites_only: bool = False,
    sort: str = "newest",
) -> RecipeListing:
    """
    List saved recipes, filtered and sorted.

    This is a READ-ONLY operation (no state changes to stored recipes).

    Args:
      search: Case-insensitive text matched against name, category, instructions,
              notes, tags and ingredients. Empty matches everything.
      category: Exact category to keep. Empty means any category.
      favorites_only: Only return recipes marked as favorite.
      sort: "newest" (default), "az" (by name) or "favorites" (favorites first).

    Returns:
      The visible recipes, every known category, a one-line summary such as
      "2 of 5 shown • 1 favorite" and a message when nothing is visible.
    """
    async with _session() as v:
        v.reset_filters()
        v.set_search(search)
        v.set_category(category)
        v.set_favorites_only(favorites_only)
        snap = v.set_sort(sort)
        return RecipeListing(
            recipes=snap.visible,
            categories=snap.categories,
            summary=snap.stats.summary,
            message=snap.empty_message,
        )


@mcp.tool()
async def recipes_categories() -> List[str]:
    """
    List the distinct non-empty categories across all saved recipes, sorted by name.

    This is a READ-ONLY operation.
    """
    async with _session() as v:
        return v.snapshot().categories


@mcp.tool()
async def recipes_add(
    name: str,
    category: str = "",
    tags: Optional[List[str]] = None,
    ingredients: Optional[List[str]] = None,
    instructions: str = "",
    notes: str = "",
    photo_path: Optional[str] = None,
) -> Recipe:
    """
    Save a new recipe. New recipes start as non-favorites and appear first.

    This is a WRITE operation.

    Args:
      name: Recipe name.
      category: Free-text category, e.g. "Dinner".
      tags: Optional list of tags; blank entries are dropped.
      ingredients: Optional list, one ingredient per entry; blank entries are dropped.
      instructions / notes: Free text.
      photo_path: Optional path to an image file to attach.

    Returns:
      The stored recipe including its generated id.
    """
    async with _session() as v:
        v.cancel_edit()
        await _attach_photo(v, photo_path, clear_photo=False)
        fields = RecipeFields(
            name=name,
            category=category,
            tags=tags or [],
            ingredients=ingredients or [],
            instructions=instructions,
            notes=notes,
        )
        snap = await v.submit(fields)
        if snap is None:
            raise ValueError("a photo is still being processed; try again")
        return v.store.recipes[0]


@mcp.tool()
async def recipes_update(
    recipe_id: str,
    name: Optional[str] = None,
    category: Optional[str] = None,
    tags: Optional[List[str]] = None,
    ingredients: Optional[List[str]] = None,
    instructions: Optional[str] = None,
    notes: Optional[str] = None,
    photo_path: Optional[str] = None,
    clear_photo: bool = False,
) -> Optional[Recipe]:
    """
    Edit an existing recipe. Fields left out keep their current value.

    This is a WRITE operation. The favorite flag and creation time never change here.

    Args:
      recipe_id: Id returned by recipes_add or recipes_list.
      photo_path: Replace the photo with this image file.
      clear_photo: Remove the current photo.

    Returns:
      The updated recipe, or null if no recipe has that id.
    """
    async with _session() as v:
        if not v.start_edit(recipe_id):
            return None
        current = v.store.get(recipe_id)
        await _attach_photo(v, photo_path, clear_photo)
        given = {
            "name": name,
            "category": category,
            "tags": tags,
            "ingredients": ingredients,
            "instructions": instructions,
            "notes": notes,
        }
        payload = {k: getattr(current, k) if value is None else value for k, value in given.items()}
        if await v.submit(RecipeFields.model_validate(payload)) is None:
            v.cancel_edit()
            raise ValueError("a photo is still being processed; try again")
        return v.store.get(recipe_id)


@mcp.tool()
async def recipes_toggle_favorite(recipe_id: str) -> Optional[Recipe]:
    """
    Flip the favorite flag of one recipe.

    Returns the recipe after the change, or null if no recipe has that id.
    """
    async with _session() as v:
        await v.toggle_favorite(recipe_id)
        return v.store.get(recipe_id)


@mcp.tool()
async def recipes_delete(recipe_id: str) -> str:
    """
    Delete a recipe permanently.

    Returns:
      "removed" if the recipe was deleted, "not found" if it didn't exist.
    """
    async with _session() as v:
        return "removed" if await v.delete(recipe_id) else "not found"


def main() -> None:
    configure_logging()
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    async def prepare() -> None:
        await store.init()
        await store.dispose()

    # Ensure the table exists before serving
    asyncio.run(prepare())
    mcp.run()


if __name__ == "__main__":
    main()
