"""Pure derivations over the canonical collection.

Nothing here mutates its input; every call returns fresh sequences.
"""
from __future__ import annotations
import unicodedata
from typing import Iterable, List, Sequence, Tuple
from .models import CollectionStats, FilterCriteria, Recipe, SortOrder


def name_key(value: str) -> Tuple[str, str]:
    """Sort key approximating a locale-aware comparison.

    Accents and case are ignored first and only break ties afterwards.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), value


def matches(recipe: Recipe, criteria: FilterCriteria) -> bool:
    if criteria.category and recipe.category != criteria.category:
        return False
    if criteria.favorites_only and not recipe.favorite:
        return False
    query = criteria.search.strip().lower()
    if not query:
        return True
    text = " ".join([recipe.name, recipe.category, recipe.instructions, recipe.notes])
    return (
        query in text.lower()
        or any(query in tag.lower() for tag in recipe.tags)
        or any(query in item.lower() for item in recipe.ingredients)
    )


def derive(recipes: Sequence[Recipe], criteria: FilterCriteria) -> List[Recipe]:
    visible = [r for r in recipes if matches(r, criteria)]
    if criteria.sort is SortOrder.az:
        visible.sort(key=lambda r: name_key(r.name))
    elif criteria.sort is SortOrder.favorites:
        visible.sort(key=lambda r: not r.favorite)
    else:
        visible.sort(key=lambda r: r.created_at, reverse=True)
    return visible


def categories(recipes: Iterable[Recipe]) -> List[str]:
    return sorted({r.category for r in recipes if r.category}, key=name_key)


def stats(recipes: Sequence[Recipe], visible: Sequence[Recipe]) -> CollectionStats:
    return CollectionStats(
        visible=len(visible),
        total=len(recipes),
        favorites=sum(1 for r in recipes if r.favorite),
    )
