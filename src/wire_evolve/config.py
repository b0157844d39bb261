# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Configuration management for the wire-evolve command line tool.

The config file is itself a versioned document: older formats are migrated
in memory on load, and ``wire-evolve update-config`` rewrites the file at the
current format.
"""

import importlib
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .chain import Chain
from .codecs import Codec, TomlCodec, get_codec
from .migrations import ConfigV1, ConfigV2, registry
from .overlay import CHAIN_ATTRIBUTE

DEFAULT_CONFIG_PATHS = [
    "wire_evolve.toml",
    ".wire_evolve.toml",
    "config/wire_evolve.toml"
]

CODEC_ENV_VAR = "WIRE_EVOLVE_CODEC"


class EvolveConfig(BaseModel):
    """Main configuration model."""
    codec: str = Field(default="json", description="Codec for files rewritten by 'upgrade' (json or toml)")
    indent: Optional[int] = Field(default=None, description="Indentation for JSON output (compact if unset)")
    targets: Dict[str, str] = Field(
        default_factory=dict,
        description="Short names for chains, mapped to 'package.module:ATTRIBUTE'"
    )

    @classmethod
    def from_file(cls, config_path: str) -> "EvolveConfig":
        """Load configuration from a TOML file, migrating older formats.

        Args:
            config_path: Path to the config file

        Returns:
            EvolveConfig object
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        data = CONFIG_VERSIONS.codec.loads(path.read_bytes())
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolveConfig":
        """Load configuration from a dictionary.

        Documents without a version tag are treated as format version 1.
        """
        data = dict(data)
        data.setdefault(CONFIG_VERSIONS.tag_field, "1")
        config = CONFIG_VERSIONS.load_document(data)

        # Override codec from environment if present
        codec = os.getenv(CODEC_ENV_VAR)
        if codec:
            config = config.model_copy(update={'codec': codec})
        return config

    def get_codec(self) -> Codec:
        """Create the configured codec."""
        if self.codec.lower() == "json":
            return get_codec(self.codec, indent=self.indent)
        return get_codec(self.codec)

    def get_target_names(self) -> List[str]:
        return sorted(self.targets)


@registry.register
def v2_to_config(v2: ConfigV2) -> EvolveConfig:
    return EvolveConfig(codec=v2.codec, indent=v2.indent, targets=dict(v2.targets))


@registry.register
def config_to_v2(config: EvolveConfig) -> ConfigV2:
    return ConfigV2(codec=config.codec, indent=config.indent, targets=dict(config.targets))


CONFIG_VERSIONS = Chain.define(
    [ConfigV1, ConfigV2],
    EvolveConfig,
    mode="infallible",
    conversions=registry,
    name="ConfigVersions",
    transparent=True,
    codec=TomlCodec()
)


def load_config(config_path: Optional[str] = None) -> EvolveConfig:
    """Load configuration from file, searching the default locations.

    Args:
        config_path: Path to config file (optional, will search default locations if not provided)

    Returns:
        EvolveConfig object
    """
    if config_path:
        return EvolveConfig.from_file(config_path)

    for default_path in DEFAULT_CONFIG_PATHS:
        if Path(default_path).exists():
            return EvolveConfig.from_file(default_path)

    raise FileNotFoundError(
        "No configuration file found. Create wire_evolve.toml or pass --config."
    )


def find_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """Return the config file that load_config would read, if any."""
    if config_path:
        return Path(config_path)
    for default_path in DEFAULT_CONFIG_PATHS:
        if Path(default_path).exists():
            return Path(default_path)
    return None


def resolve_chain(target: str, config: Optional[EvolveConfig] = None) -> Chain:
    """Find a chain from a configured name or a "package.module:ATTRIBUTE" path.

    Importing the module runs its chain definitions, so definition errors
    surface here as ChainDefinitionError.

    Raises:
        ValueError: If the target is malformed or does not name a chain
        ImportError: If the module cannot be imported
    """
    if config is not None and target in config.targets:
        target = config.targets[target]

    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(
            f"Invalid target {target!r}: expected 'package.module:ATTRIBUTE' or a configured target name"
        )

    obj: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"{module_name} has no attribute {attribute!r}") from None

    if isinstance(obj, Chain):
        return obj
    chain = getattr(obj, CHAIN_ATTRIBUTE, None) if isinstance(obj, type) else None
    if isinstance(chain, Chain):
        return chain
    raise ValueError(f"{target!r} is neither a Chain nor a domain type bound to one")
