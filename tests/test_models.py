from recipe_vault.models import CollectionStats, DraftKind, PhotoBlob, PhotoDraft, Recipe, RecipeFields


def test_from_form_trims_and_splits() -> None:
    fields = RecipeFields.from_form(
        {
            "recipeId": "ignored",
            "name": "  Pie ",
            "category": " Dessert",
            "tags": "sweet, , baked ,sweet",
            "ingredients": "flour\n  \n butter \napples\n",
            "instructions": " Bake ",
        }
    )
    assert fields.name == "Pie"
    assert fields.category == "Dessert"
    assert fields.tags == ["sweet", "baked", "sweet"]
    assert fields.ingredients == ["flour", "butter", "apples"]
    assert fields.instructions == "Bake"
    assert fields.notes == ""


def test_lists_are_cleaned_too() -> None:
    fields = RecipeFields(tags=[" a ", "   ", "b"], ingredients=["", "egg "])
    assert fields.tags == ["a", "b"]
    assert fields.ingredients == ["egg"]


def test_empty_name_is_accepted() -> None:
    assert RecipeFields.from_form({}).name == ""


def test_recipe_uses_camel_case_created_at_in_storage() -> None:
    recipe = Recipe.model_validate({"id": "x", "createdAt": 5, "name": "Tea", "photo": None})
    assert recipe.created_at == 5
    assert recipe.photo == ""
    stored = recipe.to_storage()
    assert stored["createdAt"] == 5
    assert "created_at" not in stored


def test_stats_summary_pluralizes() -> None:
    assert CollectionStats(visible=1, total=3, favorites=1).summary == "1 of 3 shown • 1 favorite"
    assert CollectionStats(visible=0, total=0, favorites=0).summary == "0 of 0 shown • 0 favorites"


def test_photo_draft_states() -> None:
    assert not PhotoDraft.untouched().touched
    cleared = PhotoDraft.cleared()
    assert cleared.touched and cleared.kind is DraftKind.cleared and cleared.ref == ""
    assert PhotoDraft.replaced("data:x").ref == "data:x"


def test_photo_blob_from_path(tmp_path) -> None:
    path = tmp_path / "cake.png"
    path.write_bytes(b"\x89PNG")
    blob = PhotoBlob.from_path(path)
    assert blob.media_type == "image/png"
    assert blob.is_image
    assert blob.data == b"\x89PNG"
    assert blob.filename == "cake.png"
