"""Tests for configuration management."""

import pytest
import tomli

from wire_evolve import JsonCodec, TomlCodec
from wire_evolve.config import (
    CONFIG_VERSIONS,
    EvolveConfig,
    find_config_path,
    load_config,
    resolve_chain,
)
from wire_evolve.migrations import ConfigV1, get_changes_description
from wire_evolve.migrations.versions import v1_to_v2
from helpers.chains import PRODUCT_VERSIONS, USER_VERSIONS


def test_config_from_dict():
    """Test creating config from a current-format dictionary."""
    config = EvolveConfig.from_dict({
        "_version": "2",
        "codec": "toml",
        "targets": {"user": "helpers.chains:USER_VERSIONS"}
    })

    assert config.codec == "toml"
    assert config.indent is None
    assert config.targets == {"user": "helpers.chains:USER_VERSIONS"}


def test_config_without_version_is_v1():
    """Test that untagged configs are read as format version 1."""
    config = EvolveConfig.from_dict({
        "targets": ["helpers.chains:USER_VERSIONS", "helpers.chains:Product"]
    })

    assert config.codec == "json"
    assert config.targets == {
        "user_versions": "helpers.chains:USER_VERSIONS",
        "product": "helpers.chains:Product",
    }


def test_v1_target_names_are_unique():
    v2 = v1_to_v2(ConfigV1(targets=["a.models:User", "b.models:User", "c:Outer.User"]))

    assert v2.targets == {
        "user": "a.models:User",
        "user_2": "b.models:User",
        "user_3": "c:Outer.User",
    }


def test_defaults():
    config = EvolveConfig.from_dict({"_version": "2"})

    assert config.codec == "json"
    assert config.targets == {}


def test_load_from_file(tmp_path):
    """Test loading config from a TOML file."""
    config_file = tmp_path / "wire_evolve.toml"
    config_file.write_text(
        '_version = "2"\n'
        'codec = "json"\n'
        'indent = 2\n'
        '\n'
        '[targets]\n'
        'user = "helpers.chains:USER_VERSIONS"\n'
    )

    config = EvolveConfig.from_file(str(config_file))

    assert config.indent == 2
    assert config.get_target_names() == ["user"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EvolveConfig.from_file(str(tmp_path / "missing.toml"))


def test_env_var_override(monkeypatch):
    """Test codec override from environment."""
    monkeypatch.setenv("WIRE_EVOLVE_CODEC", "toml")

    config = EvolveConfig.from_dict({"_version": "2", "codec": "json"})

    assert config.codec == "toml"
    assert isinstance(config.get_codec(), TomlCodec)


def test_get_codec_uses_indent():
    config = EvolveConfig.from_dict({"_version": "2", "indent": 4})

    codec = config.get_codec()
    assert isinstance(codec, JsonCodec)
    assert codec.indent == 4


def test_config_encodes_at_current_version():
    """Test that the config model writes itself as the latest format."""
    config = EvolveConfig(codec="json", targets={"user": "helpers.chains:USER_VERSIONS"})

    assert tomli.loads(config.encode()) == {
        "_version": "2",
        "codec": "json",
        "targets": {"user": "helpers.chains:USER_VERSIONS"},
    }
    assert EvolveConfig.CURRENT == CONFIG_VERSIONS.current_tag == "2"


class TestLoadConfig:
    def test_explicit_path(self, workdir):
        path = workdir / "custom.toml"
        path.write_text('targets = ["helpers.chains:USER_VERSIONS"]\n')

        config = load_config(str(path))

        assert config.targets == {"user_versions": "helpers.chains:USER_VERSIONS"}

    def test_default_locations(self, workdir):
        (workdir / "config").mkdir()
        (workdir / "config" / "wire_evolve.toml").write_text('_version = "2"\ncodec = "toml"\n')

        assert load_config().codec == "toml"
        assert str(find_config_path()) == "config/wire_evolve.toml"

    def test_first_default_location_wins(self, workdir):
        (workdir / "wire_evolve.toml").write_text('_version = "2"\ncodec = "json"\n')
        (workdir / ".wire_evolve.toml").write_text('_version = "2"\ncodec = "toml"\n')

        assert load_config().codec == "json"

    def test_no_config(self, workdir):
        assert find_config_path() is None
        with pytest.raises(FileNotFoundError):
            load_config()


class TestResolveChain:
    def test_import_path(self):
        assert resolve_chain("helpers.chains:USER_VERSIONS") is USER_VERSIONS

    def test_domain_type(self):
        """Test that a domain type bound to a chain resolves to that chain."""
        assert resolve_chain("helpers.chains:Product") is PRODUCT_VERSIONS

    def test_configured_name(self):
        config = EvolveConfig(targets={"user": "helpers.chains:USER_VERSIONS"})

        assert resolve_chain("user", config) is USER_VERSIONS

    def test_malformed_target(self):
        with pytest.raises(ValueError, match="Invalid target"):
            resolve_chain("helpers.chains")

    def test_missing_attribute(self):
        with pytest.raises(ValueError, match="no attribute"):
            resolve_chain("helpers.chains:NOPE")

    def test_not_a_chain(self):
        with pytest.raises(ValueError, match="neither a Chain"):
            resolve_chain("helpers.chains:make_sku")

    def test_unbound_type(self):
        with pytest.raises(ValueError):
            resolve_chain("helpers.chains:UserV1")

    def test_missing_module(self):
        with pytest.raises(ImportError):
            resolve_chain("helpers.no_such_module:CHAIN")


def test_changes_description():
    assert "targets table" in get_changes_description("1", "2")
    assert get_changes_description("2", "2") == "No description available"
