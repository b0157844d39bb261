# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Config file formats.

Version 1:
- ``targets`` is a list of "package.module:ATTRIBUTE" strings

Version 2:
- ``targets`` becomes a table mapping a short name to the import path
- New ``codec`` (default "json") and optional ``indent`` settings used by
  ``wire-evolve upgrade``
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..registry import ConversionRegistry

registry = ConversionRegistry()

CHANGES = {
    ("1", "2"): (
        "Version 2 adds:\n"
        "  • targets table: each chain gets a short name usable on the command line\n"
        "  • codec setting (json/toml) for files rewritten by 'upgrade'\n"
        "  • optional indent setting for JSON output"
    ),
}


class ConfigV1(BaseModel):
    """Config format version 1."""
    targets: List[str] = Field(default_factory=list)


class ConfigV2(BaseModel):
    """Config format version 2."""
    codec: str = "json"
    indent: Optional[int] = None
    targets: Dict[str, str] = Field(default_factory=dict)


def _target_name(path: str) -> str:
    return path.rpartition(":")[2].rpartition(".")[2].lower()


@registry.register
def v1_to_v2(v1: ConfigV1) -> ConfigV2:
    """Name every target after its attribute, lower-cased."""
    targets: Dict[str, str] = {}
    for path in v1.targets:
        name = _target_name(path)
        candidate, suffix = name, 2
        while candidate in targets:
            candidate = f"{name}_{suffix}"
            suffix += 1
        targets[candidate] = path
    return ConfigV2(targets=targets)
