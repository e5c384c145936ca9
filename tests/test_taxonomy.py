"""Tests for the store category taxonomy."""

import json

import pytest

from shopsnap import create_app
from shopsnap.categorization import DEFAULT_TAXONOMY, StoreCategory, Taxonomy, load_taxonomy
from shopsnap.config import config
from shopsnap.errors import TaxonomyError


class TestDefaultTaxonomy:
    def test_shelf_walk_order(self):
        assert DEFAULT_TAXONOMY.names == [
            "Fresh Produce", "Dairy", "Meat & Fish", "Bakery", "Frozen", "Household",
        ]

    def test_fallback_is_last_category(self):
        assert DEFAULT_TAXONOMY.fallback.name == "Household"

    def test_rank_of_unknown_name_matches_fallback(self):
        assert DEFAULT_TAXONOMY.rank("Dairy") == 1
        assert DEFAULT_TAXONOMY.rank("Pharmacy") == 5
        assert DEFAULT_TAXONOMY.rank(None) == 5

    def test_membership(self):
        assert "Bakery" in DEFAULT_TAXONOMY
        assert "bakery" not in DEFAULT_TAXONOMY
        assert ["Bakery"] not in DEFAULT_TAXONOMY

    def test_to_list_includes_rank(self):
        entries = DEFAULT_TAXONOMY.to_list()
        assert entries[0]["name"] == "Fresh Produce"
        assert entries[0]["aisle"] == "Aisle 1-2"
        assert entries[-1]["rank"] == 5
        assert "milk" in entries[1]["keywords"]


class TestTaxonomyValidation:
    def test_empty_taxonomy_rejected(self):
        with pytest.raises(TaxonomyError):
            Taxonomy([])

    def test_duplicate_names_rejected(self):
        with pytest.raises(TaxonomyError):
            Taxonomy([StoreCategory("A", "1"), StoreCategory("A", "2")])

    @pytest.mark.parametrize("data", [
        {"name": "A"},
        [],
        ["Dairy"],
        [{"aisle": "1"}],
        [{"name": "A", "keywords": "milk"}],
        [{"name": "A", "keywords": [1, 2]}],
    ])
    def test_from_list_rejects_malformed_data(self, data):
        with pytest.raises(TaxonomyError):
            Taxonomy.from_list(data)

    def test_from_list_normalizes_keywords(self):
        taxonomy = Taxonomy.from_list([
            {"name": " Drinks ", "aisle": "9", "keywords": ["Juice", "  ", "WATER"]},
        ])
        category = taxonomy.get("Drinks")
        assert category.keywords == ("juice", "water")
        assert category.aisle == "9"


class TestLoadTaxonomy:
    def test_no_path_returns_default(self):
        assert load_taxonomy(None) is DEFAULT_TAXONOMY

    def test_loads_json_file(self, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps([
            {"name": "Drinks", "aisle": "A1", "keywords": ["juice"]},
            {"name": "Everything Else", "aisle": "A2"},
        ]))

        taxonomy = load_taxonomy(str(path))

        assert taxonomy.names == ["Drinks", "Everything Else"]
        assert taxonomy.fallback.name == "Everything Else"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(TaxonomyError):
            load_taxonomy(str(tmp_path / "missing.json"))

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(TaxonomyError):
            load_taxonomy(str(path))

    def test_app_uses_configured_taxonomy(self, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text(json.dumps([
            {"name": "Drinks", "aisle": "A1", "keywords": ["juice"]},
            {"name": "Other", "aisle": "A2"},
        ]))

        class CustomTaxonomyConfig(config["testing"]):
            TAXONOMY_FILE = str(path)

        client = create_app(CustomTaxonomyConfig).test_client()

        response = client.get("/api/v1/categories")
        data = response.get_json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Drinks", "Other"]
        assert data["fallback"] == "Other"

        response = client.post("/api/v1/categorize", json={
            "items": [{"id": "1", "text": "Orange juice"}, {"id": "2", "text": "Milk"}],
        })
        categories = [i["category"] for i in response.get_json()["data"]["items"]]
        assert categories == ["Drinks", "Other"]
