from __future__ import annotations
import logging
from typing import Any, Callable, List, Mapping, Optional, Union
from .errors import InvalidPhotoInput
from .models import PhotoBlob, PhotoDraft, Recipe, RecipeFields
from .photos import NOT_AN_IMAGE, UNREADABLE_IMAGE, PhotoDecoder, read_blob_as_data_url, validate_photo
from .record_store import RecordStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]
FormPayload = Union[RecipeFields, Mapping[str, Any]]


def log_notice(message: str) -> None:
    logger.warning("notice: %s", message)


class EditSession:
    """Tracks the single in-progress edit and its unsaved photo draft.

    Idle when ``editing_id`` is None. Submitting creates a recipe when idle and
    updates the edited one otherwise; either way the session returns to idle.
    """

    def __init__(
        self,
        store: RecordStore,
        decoder: PhotoDecoder = read_blob_as_data_url,
        notify: Notifier = log_notice,
    ):
        self.store = store
        self.decoder = decoder
        self.notify = notify
        self.editing_id: Optional[str] = None
        self.photo_draft = PhotoDraft.untouched()
        self.is_photo_processing = False

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def preview(self) -> str:
        """Photo the form should currently show."""
        if self.photo_draft.touched:
            return self.photo_draft.ref
        existing = self.store.get(self.editing_id)
        return existing.photo if existing else ""

    def start_edit(self, recipe: Recipe) -> None:
        self.editing_id = recipe.id
        self.photo_draft = PhotoDraft.untouched()
        logger.debug("editing %s", recipe.id)

    def reset(self) -> None:
        self.editing_id = None
        self.photo_draft = PhotoDraft.untouched()

    cancel = reset

    def forget(self, recipe_id: str) -> bool:
        """Drop the session if it targets a recipe that no longer exists."""
        if self.editing_id != recipe_id:
            return False
        self.reset()
        return True

    def clear_photo(self) -> None:
        self.photo_draft = PhotoDraft.cleared()

    def resolve_photo(self, existing: Optional[Recipe]) -> str:
        if self.photo_draft.touched:
            return self.photo_draft.ref
        return existing.photo if existing else ""

    async def ingest_photo(self, blob: PhotoBlob) -> bool:
        if self.is_photo_processing:
            logger.debug("photo already processing; ignoring %s", blob.filename)
            return False
        try:
            validate_photo(blob)
        except InvalidPhotoInput as e:
            logger.info("rejected photo: %s", e)
            self.notify(NOT_AN_IMAGE)
            return False

        self.is_photo_processing = True
        try:
            ref = await self.decoder(blob)
        except Exception:
            logger.warning("could not decode photo %s", blob.filename, exc_info=True)
            self.notify(UNREADABLE_IMAGE)
            return False
        finally:
            self.is_photo_processing = False
        self.photo_draft = PhotoDraft.replaced(ref)
        return True

    async def submit(self, payload: FormPayload) -> Optional[List[Recipe]]:
        """Persist the form. Returns the new collection, or None when refused."""
        if self.is_photo_processing:
            logger.debug("submit refused while a photo is processing")
            return None
        fields = payload if isinstance(payload, RecipeFields) else RecipeFields.from_form(payload)
        photo = self.resolve_photo(self.store.get(self.editing_id))

        if self.editing_id is not None:
            recipes = await self.store.update(self.editing_id, fields, photo)
        else:
            await self.store.create(fields, photo)
            recipes = self.store.recipes
        self.reset()
        return recipes
