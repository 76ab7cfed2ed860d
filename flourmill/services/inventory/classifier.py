"""
Category Classifier
Maps product labels onto the five tracked categories
"""
from typing import Optional, Tuple

from .records import Category, TRACKED_CATEGORIES

# Substring tested for each category, in priority order
CATEGORY_KEYWORDS: Tuple[Tuple[str, Category], ...] = tuple(
    (category.value, category) for category in TRACKED_CATEGORIES
)

_BY_NAME = {category.value: category for category in TRACKED_CATEGORIES}


def tracked_category(value: Optional[str]) -> Optional[Category]:
    """Return the tracked category named by value (case-insensitive), else None"""
    if value is None:
        return None
    if isinstance(value, Category):
        return value if value is not Category.UNCLASSIFIED else None
    return _BY_NAME.get(str(value).strip().lower())


def matching_categories(label: Optional[str]) -> Tuple[Category, ...]:
    """All categories whose keyword occurs in label, in priority order"""
    text = (label or "").lower()
    return tuple(category for keyword, category in CATEGORY_KEYWORDS if keyword in text)


def is_ambiguous(label: Optional[str]) -> bool:
    """True when a label contains more than one category keyword"""
    return len(matching_categories(label)) > 1


def classify(
    label: Optional[str],
    explicit_category: Optional[str] = None,
    exact: bool = False,
) -> Category:
    """
    Classify a product label.

    An explicit category naming one of the tracked categories wins. Otherwise
    the first keyword (wheat, ata, maida, suji, fine) contained in the
    lower-cased label decides. With ``exact=True`` the whole label must equal
    a category name, which is how production outputs are named.

    Returns Category.UNCLASSIFIED when nothing matches.
    """
    explicit = tracked_category(explicit_category)
    if explicit is not None:
        return explicit

    if exact:
        return _BY_NAME.get((label or "").strip().lower(), Category.UNCLASSIFIED)

    matches = matching_categories(label)
    return matches[0] if matches else Category.UNCLASSIFIED
