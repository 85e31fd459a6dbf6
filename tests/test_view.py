import pytest

from recipe_vault.models import FilterCriteria, Recipe, SortOrder
from recipe_vault import view


def recipe(id: str, created_at: int, **kwargs) -> Recipe:
    return Recipe(id=id, created_at=created_at, **kwargs)


@pytest.fixture
def recipes():
    # canonical order: newest first
    return [
        recipe("pie", 30, name="Pie", category="Dessert", tags=["Sweet"], favorite=True),
        recipe("soup", 20, name="soup", category="Dinner", ingredients=["Water", "Salt"]),
        recipe("eclair", 10, name="Éclair", category="Dessert", notes="Choux pastry", favorite=True),
        recipe("apple", 5, name="apple crumble", category=""),
    ]


def test_category_filter_is_exact(recipes) -> None:
    got = view.derive(recipes, FilterCriteria(category="Dinner"))
    assert [r.id for r in got] == ["soup"]
    assert view.derive(recipes, FilterCriteria(category="dinner")) == []


def test_favorites_only(recipes) -> None:
    got = view.derive(recipes, FilterCriteria(favorites_only=True))
    assert got and all(r.favorite for r in got)


@pytest.mark.parametrize(
    "search,expected",
    [
        ("pi", ["pie"]),
        ("zz", []),
        ("sweet", ["pie"]),
        ("salt", ["soup"]),
        ("choux", ["eclair"]),
        ("dessert", ["pie", "eclair"]),
        ("", ["pie", "soup", "eclair", "apple"]),
    ],
)
def test_search(recipes, search, expected) -> None:
    got = view.derive(recipes, FilterCriteria(search=search))
    assert [r.id for r in got] == expected


def test_filters_combine(recipes) -> None:
    criteria = FilterCriteria(category="Dessert", favorites_only=True, search="choux")
    assert [r.id for r in view.derive(recipes, criteria)] == ["eclair"]


def test_newest_sort_orders_by_created_at(recipes) -> None:
    shuffled = [recipes[2], recipes[0], recipes[3], recipes[1]]
    got = view.derive(shuffled, FilterCriteria(sort=SortOrder.newest))
    assert [r.created_at for r in got] == [30, 20, 10, 5]


def test_az_sort_ignores_case_and_accents(recipes) -> None:
    got = view.derive(recipes, FilterCriteria(sort=SortOrder.az))
    assert [r.name for r in got] == ["apple crumble", "Éclair", "Pie", "soup"]
    keys = [view.name_key(r.name) for r in got]
    assert keys == sorted(keys)


def test_favorites_sort_is_stable(recipes) -> None:
    got = view.derive(recipes, FilterCriteria(sort=SortOrder.favorites))
    assert [r.id for r in got] == ["pie", "eclair", "soup", "apple"]


def test_derive_leaves_canonical_order_alone(recipes) -> None:
    before = list(recipes)
    view.derive(recipes, FilterCriteria(sort=SortOrder.az))
    assert recipes == before


def test_categories_are_distinct_and_sorted(recipes) -> None:
    assert view.categories(recipes) == ["Dessert", "Dinner"]


def test_stats_count_favorites_over_whole_collection(recipes) -> None:
    visible = view.derive(recipes, FilterCriteria(category="Dinner"))
    stats = view.stats(recipes, visible)
    assert (stats.visible, stats.total, stats.favorites) == (1, 4, 2)
