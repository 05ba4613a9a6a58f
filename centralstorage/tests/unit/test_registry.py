"""
Tests for the consumer registry.
"""
import pytest
import yaml

from centralstorage.core.signing.registry import Consumer, ConsumerRegistry


def _write_config(tmp_path, data):
    path = tmp_path / "consumers.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestConsumerRegistry:
    """Tests for YAML loading and lookup."""

    def test_load_from_yaml(self, tmp_path):
        path = _write_config(tmp_path, {
            "consumers": {
                "abcdef": {"secret": "bcdefhijklmn", "description": "Website"},
                "disabled": {"secret": "x", "enabled": False},
            }
        })

        registry = ConsumerRegistry()
        registry.load_from_yaml(path)

        assert registry.is_loaded
        assert sorted(registry.list_consumers()) == ["abcdef", "disabled"]
        assert registry.get_secret("abcdef") == "bcdefhijklmn"
        assert registry.get_consumer("abcdef").description == "Website"

    def test_disabled_consumer_has_no_secret(self, tmp_path):
        path = _write_config(tmp_path, {"consumers": {"disabled": {"secret": "x", "enabled": False}}})

        registry = ConsumerRegistry()
        registry.load_from_yaml(path)

        assert registry.get_consumer("disabled") is None
        assert registry.get_secret("disabled") is None

    def test_unknown_and_empty_keys(self):
        registry = ConsumerRegistry()
        registry.register(Consumer(key="abcdef", secret="s"))

        assert registry.get_secret("unknown") is None
        assert registry.get_secret("") is None
        assert registry.get_secret(None) is None

    def test_missing_file_gives_empty_registry(self, tmp_path):
        registry = ConsumerRegistry()
        registry.load_from_yaml(tmp_path / "missing.yaml")

        assert registry.is_loaded
        assert registry.list_consumers() == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "consumers.yaml"
        path.write_text("")

        registry = ConsumerRegistry()
        registry.load_from_yaml(path)
        assert registry.list_consumers() == []

    def test_missing_secret_is_rejected(self, tmp_path):
        path = _write_config(tmp_path, {"consumers": {"abcdef": {"description": "no secret"}}})

        with pytest.raises(ValueError, match="abcdef"):
            ConsumerRegistry().load_from_yaml(path)

    def test_list_under_consumers_is_rejected(self, tmp_path):
        path = tmp_path / "consumers.yaml"
        path.write_text("consumers:\n  - abcdef\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            ConsumerRegistry().load_from_yaml(path)

    def test_scalar_entry_is_rejected(self, tmp_path):
        path = tmp_path / "consumers.yaml"
        path.write_text("consumers:\n  abcdef: bcdefhijklmn\n")

        with pytest.raises(ValueError, match="abcdef"):
            ConsumerRegistry().load_from_yaml(path)

    def test_top_level_list_is_rejected(self, tmp_path):
        path = tmp_path / "consumers.yaml"
        path.write_text("- abcdef\n")

        with pytest.raises(ValueError):
            ConsumerRegistry().load_from_yaml(path)

    def test_quoted_enabled_is_rejected(self, tmp_path):
        path = tmp_path / "consumers.yaml"
        path.write_text('consumers:\n  abcdef:\n    secret: x\n    enabled: "false"\n')

        registry = ConsumerRegistry()
        with pytest.raises(ValueError, match="enabled must be true or false"):
            registry.load_from_yaml(path)
        assert registry.get_secret("abcdef") is None

    def test_secret_not_in_repr(self):
        assert "s3cret" not in repr(Consumer(key="abcdef", secret="s3cret"))

    def test_clear(self):
        registry = ConsumerRegistry()
        registry.register(Consumer(key="abcdef", secret="s"))
        registry.clear()

        assert registry.list_consumers() == []
        assert not registry.is_loaded
