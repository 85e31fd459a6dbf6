from __future__ import annotations
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_entries(value: Any, separator: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(separator)
    return [str(item).strip() for item in value if str(item).strip()]


class SortOrder(str, Enum):
    newest = "newest"
    az = "az"
    favorites = "favorites"


class RecipeFields(BaseModel):
    """The overwritable part of a recipe, as submitted from the form."""

    name: str = ""
    category: str = ""
    tags: List[str] = []
    ingredients: List[str] = []
    instructions: str = ""
    notes: str = ""

    @field_validator("name", "category", "instructions", "notes", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> List[str]:
        return _clean_entries(value, ",")

    @field_validator("ingredients", mode="before")
    @classmethod
    def _split_ingredients(cls, value: Any) -> List[str]:
        return _clean_entries(value, "\n")

    @classmethod
    def from_form(cls, payload: Mapping[str, Any]) -> "RecipeFields":
        # Unknown keys (e.g. a hidden recipe id) are ignored.
        return cls.model_validate({k: payload.get(k) for k in cls.model_fields})


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: int = Field(..., alias="createdAt")
    name: str = ""
    category: str = ""
    tags: List[str] = []
    ingredients: List[str] = []
    instructions: str = ""
    notes: str = ""
    favorite: bool = False
    photo: str = ""

    @field_validator("photo", mode="before")
    @classmethod
    def _absent_photo(cls, value: Any) -> str:
        return value or ""

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class FilterCriteria(BaseModel):
    search: str = ""
    category: str = ""
    favorites_only: bool = False
    sort: SortOrder = SortOrder.newest


class CollectionStats(BaseModel):
    visible: int
    total: int
    favorites: int

    @property
    def summary(self) -> str:
        plural = "" if self.favorites == 1 else "s"
        return f"{self.visible} of {self.total} shown • {self.favorites} favorite{plural}"


class PhotoBlob(BaseModel):
    media_type: str = ""
    data: bytes = b""
    filename: str = ""

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")

    @classmethod
    def from_path(cls, path: Union[Path, str]) -> "PhotoBlob":
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(media_type=media_type or "", data=path.read_bytes(), filename=path.name)


class DraftKind(str, Enum):
    untouched = "untouched"
    cleared = "cleared"
    replaced = "replaced"


class PhotoDraft(BaseModel):
    """Unsaved photo choice of the current edit.

    ``untouched`` means submit keeps whatever the record already has,
    ``cleared`` removes it and ``replaced`` stores ``ref``.
    """

    model_config = ConfigDict(frozen=True)

    kind: DraftKind = DraftKind.untouched
    ref: str = ""

    @classmethod
    def untouched(cls) -> "PhotoDraft":
        return cls()

    @classmethod
    def cleared(cls) -> "PhotoDraft":
        return cls(kind=DraftKind.cleared)

    @classmethod
    def replaced(cls, ref: str) -> "PhotoDraft":
        return cls(kind=DraftKind.replaced, ref=ref)

    @property
    def touched(self) -> bool:
        return self.kind is not DraftKind.untouched
