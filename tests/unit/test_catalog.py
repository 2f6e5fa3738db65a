"""Tests for the pattern and model catalogs."""

import logging

import pytest
from fabricui.catalog import Catalog, Filesystem, Static


class TestFilesystem:
    def test_lists_directories_only(self, patterns_dir):
        catalog = Filesystem(patterns_dir)
        assert catalog.list_patterns() == ["analyze_claims", "extract_wisdom", "summarize"]

    def test_empty_directory(self, tmp_path):
        assert Filesystem(tmp_path).list_patterns() == []

    def test_missing_directory_degrades_to_empty(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR, logger="fabricui.catalog"):
            assert Filesystem(tmp_path / "nope").list_patterns() == []
        assert "Error fetching patterns" in caplog.text

    def test_models_are_a_copy(self):
        models = ["gpt-4o", "llama3.1"]
        catalog = Filesystem("/unused", models)
        listed = catalog.list_models()
        listed.append("extra")
        assert catalog.list_models() == models

    def test_no_models(self):
        assert Filesystem("/unused").list_models() == []

    def test_new_patterns_are_picked_up(self, patterns_dir):
        catalog = Filesystem(patterns_dir)
        (patterns_dir / "create_quiz").mkdir()
        assert "create_quiz" in catalog.list_patterns()


class TestStatic:
    def test_lists(self):
        catalog = Static(["a", "b"], ["m"])
        assert isinstance(catalog, Catalog)
        assert catalog.list_patterns() == ["a", "b"]
        assert catalog.list_models() == ["m"]


def test_catalog_is_abstract():
    with pytest.raises(TypeError):
        Catalog()
