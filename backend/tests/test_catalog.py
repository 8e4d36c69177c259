import json

import pytest

from curations.catalog import Catalog, load_items, searchable_text
from curations.errors import InvalidInput


def test_bundled_catalog_loads_every_category(catalog):
    grouped = catalog.categories()
    assert list(grouped) == ["clothing", "accessories", "home"]
    assert all(len(items) == 3 for items in grouped.values())


def test_search_lace_includes_velvet_jacket(catalog):
    names = [it.name for it in catalog.search("lace")]
    assert "Velvet Lace Jacket" in names
    assert "Victorian Lace Gloves" in names
    assert "Skull Planter" not in names


def test_search_without_match_is_empty(catalog):
    assert catalog.search("zzz") == []


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_search_returns_whole_catalog_in_order(catalog, query):
    assert catalog.search(query) == catalog.all()


@pytest.mark.parametrize("query", ["LACE", "  Gothic ", "o-ring", "brass buttons"])
def test_search_is_exact_substring_filter(catalog, query):
    q = query.strip().lower()
    expected = [it for it in catalog.all() if q in it.search]
    assert catalog.search(query) == expected
    assert expected


def test_search_text_computed_when_missing(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps([
        {"category": "Home", "name": "Raven Bookends", "image": "", "description": "Cast iron pair.", "link": "x"},
    ]))
    (item,) = load_items(path)
    assert item.category == "home"
    assert item.search == searchable_text("Raven Bookends", "Cast iron pair.")
    assert Catalog([item]).search("iron pair") == [item]


def test_unknown_category_is_rejected(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(json.dumps([{"category": "garden", "name": "Gnome", "description": ""}]))
    with pytest.raises(InvalidInput):
        load_items(path)


def test_by_category(catalog):
    assert {it.category for it in catalog.by_category("ACCESSORIES")} == {"accessories"}
    assert catalog.by_category(None) == catalog.all()
