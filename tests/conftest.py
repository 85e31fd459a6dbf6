import itertools
from typing import List

import pytest

from recipe_vault.models import PhotoBlob, RecipeFields
from recipe_vault.record_store import RecordStore
from recipe_vault.storage import MemoryStore
from recipe_vault.vault import RecipeVault


class Confirmer:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


def soup_fields(**overrides) -> RecipeFields:
    values = {
        "name": "Soup",
        "category": "Dinner",
        "tags": ["easy"],
        "ingredients": ["water", "salt"],
        "instructions": "Boil",
        "notes": "",
    }
    values.update(overrides)
    return RecipeFields(**values)


@pytest.fixture
def adapter() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(adapter: MemoryStore) -> RecordStore:
    ticks = itertools.count(1000, 1000)
    ids = (f"r{i}" for i in itertools.count(1))
    return RecordStore(adapter, clock=lambda: next(ticks), id_factory=lambda: next(ids))


@pytest.fixture
def confirmer() -> Confirmer:
    return Confirmer()


@pytest.fixture
def notices() -> List[str]:
    return []


@pytest.fixture
def vault(store: RecordStore, confirmer: Confirmer, notices: List[str]) -> RecipeVault:
    return RecipeVault(store, confirm=confirmer, notify=notices.append)


@pytest.fixture
def jpeg() -> PhotoBlob:
    return PhotoBlob(media_type="image/jpeg", data=b"\xff\xd8\xff", filename="pie.jpg")


@pytest.fixture
def make_fields():
    return soup_fields
