# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the layered configuration."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from pyfactory.core.config import Config, config_properties
from pyfactory.factory.memoizer import WaitStrategy
from pyfactory.factory.properties import FinderProperties
from pyfactory.kernel.exceptions import ConfigurationException


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"app": {"name": "resolver", "workers": 4}})
        assert config.get("app.name") == "resolver"
        assert config.get("app.workers") == 4

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_get_section(self):
        config = Config({"pyfactory": {"finder": {"defaults": "full"}}})
        assert config.get_section("pyfactory.finder") == {"defaults": "full"}
        assert config.get_section("pyfactory.nothing") == {}

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("PYFACTORY_FINDER_DEFAULTS", "minimal")
        config = Config({"pyfactory": {"finder": {"defaults": "full"}}})
        assert config.get("pyfactory.finder.defaults") == "minimal"

    def test_placeholder_from_config(self):
        config = Config({"base": "pyfactory", "name": "${base}-engine"})
        assert config.get("name") == "pyfactory-engine"

    def test_placeholder_default(self):
        config = Config({"name": "${PYFACTORY_TEST_UNSET_VARIABLE:fallback}"})
        assert config.get("name") == "fallback"

    def test_unresolvable_placeholder_raises(self):
        config = Config({"name": "${definitely.not.there}"})
        with pytest.raises(ConfigurationException):
            config.get("name")

    def test_circular_placeholder_raises(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ConfigurationException):
            config.get("a")


class TestConfigFiles:
    def test_framework_defaults_loaded(self, tmp_path: Path):
        config = Config.from_sources(tmp_path)
        assert config.get("pyfactory.finder.defaults") == "instantiator"
        assert config.get("pyfactory.logging.level.root") == "INFO"
        assert config.loaded_sources == ["pyfactory-defaults.yaml (framework defaults)"]

    def test_yaml_file_overrides_defaults(self, tmp_path: Path):
        (tmp_path / "pyfactory.yaml").write_text("pyfactory:\n  finder:\n    defaults: full\n")
        config = Config.from_sources(tmp_path)
        assert config.get("pyfactory.finder.defaults") == "full"
        assert config.get("pyfactory.finder.memoizer.wait_strategy") == "park"

    def test_toml_file(self, tmp_path: Path):
        path = tmp_path / "pyfactory.toml"
        path.write_text('[pyfactory.finder]\ndefaults = "minimal"\n')
        config = Config.from_file(path)
        assert config.get("pyfactory.finder.defaults") == "minimal"

    def test_profile_overlay(self, tmp_path: Path):
        (tmp_path / "pyfactory.yaml").write_text("pyfactory:\n  finder:\n    defaults: minimal\n")
        (tmp_path / "pyfactory-test.yaml").write_text("pyfactory:\n  finder:\n    hooks:\n      enabled: false\n")
        config = Config.from_sources(tmp_path, active_profiles=["test"])
        assert config.get("pyfactory.finder.defaults") == "minimal"
        assert config.get("pyfactory.finder.hooks.enabled") is False

    def test_without_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "missing.yaml", load_defaults=False)
        assert config.to_dict() == {}


class TestBind:
    def test_bind_dataclass(self):
        @config_properties(prefix="engine")
        @dataclass
        class EngineConfig:
            name: str = "default"
            retries: int = 1

        config = Config({"engine": {"name": "custom", "retries": "3"}})
        bound = config.bind(EngineConfig)
        assert bound.name == "custom"
        assert bound.retries == 3

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            name: str = "x"

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)

    def test_bind_finder_properties_defaults(self):
        properties = Config({}).bind(FinderProperties)
        assert properties.defaults == "instantiator"
        assert properties.memoizer.wait_strategy is WaitStrategy.PARK
        assert properties.hooks.enabled is True

    def test_bind_finder_properties_nested(self):
        config = Config(
            {"pyfactory": {"finder": {"defaults": "full", "memoizer": {"wait_strategy": "spin", "spin_interval": 0.01}}}}
        )
        properties = config.bind(FinderProperties)
        assert properties.defaults == "full"
        assert properties.memoizer.wait_strategy is WaitStrategy.SPIN
        assert properties.memoizer.spin_interval == 0.01

    def test_bind_applies_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PYFACTORY_FINDER_HOOKS_ENABLED", "false")
        properties = Config({"pyfactory": {"finder": {"hooks": {"enabled": True}}}}).bind(FinderProperties)
        assert properties.hooks.enabled is False

    def test_invalid_value_raises_configuration_exception(self):
        config = Config({"pyfactory": {"finder": {"defaults": "everything"}}})
        with pytest.raises(ConfigurationException) as exc_info:
            config.bind(FinderProperties)
        assert exc_info.value.code == "CONFIG_INVALID"

    def test_negative_spin_interval_rejected(self):
        config = Config({"pyfactory": {"finder": {"memoizer": {"spin_interval": -1}}}})
        with pytest.raises(ConfigurationException):
            config.bind(FinderProperties)
