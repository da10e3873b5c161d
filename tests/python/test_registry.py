"""Tests for model registries."""

from __future__ import annotations

import dataclasses

import pytest

from voxfx_export.registry import FileModelRegistry, InMemoryModelRegistry


@pytest.fixture(params=["memory", "file"])
def registry(request, tmp_path):
    if request.param == "memory":
        return InMemoryModelRegistry()
    return FileModelRegistry(tmp_path / "models")


class TestRegistry:
    def test_create_get(self, registry, custom_model):
        registry.create(custom_model)
        assert registry.get("my_voice") == custom_model

    def test_get_missing(self, registry):
        assert registry.get("nobody") is None

    def test_list_in_creation_order(self, registry, custom_model):
        second = dataclasses.replace(custom_model, id="b_voice", created_at=custom_model.created_at + 1)
        registry.create(custom_model)
        registry.create(second)
        assert [m.id for m in registry.list()] == ["my_voice", "b_voice"]

    def test_create_replaces(self, registry, custom_model):
        registry.create(custom_model)
        registry.create(dataclasses.replace(custom_model, training_sample_count=9))
        models = registry.list()
        assert len(models) == 1
        assert models[0].training_sample_count == 9

    def test_delete(self, registry, custom_model):
        registry.create(custom_model)
        assert registry.delete("my_voice") is True
        assert registry.delete("my_voice") is False
        assert registry.list() == []


class TestFileRegistry:
    def test_one_file_per_model(self, tmp_path, custom_model):
        registry = FileModelRegistry(tmp_path)
        registry.create(custom_model)
        assert (tmp_path / "my_voice.voxmodel").exists()

    def test_reopen(self, tmp_path, custom_model):
        FileModelRegistry(tmp_path).create(custom_model)
        assert FileModelRegistry(tmp_path).get("my_voice") == custom_model

    def test_skips_unreadable(self, tmp_path, custom_model):
        registry = FileModelRegistry(tmp_path)
        registry.create(custom_model)
        (tmp_path / "junk.voxmodel").write_bytes(b"not a model")
        assert [m.id for m in registry.list()] == ["my_voice"]

    @pytest.mark.parametrize("bad_id", ["", "../escape", "a/b", ".."])
    def test_rejects_path_ids(self, tmp_path, bad_id):
        with pytest.raises(ValueError):
            FileModelRegistry(tmp_path).get(bad_id)
