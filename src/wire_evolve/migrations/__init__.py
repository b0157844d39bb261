# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Versions of the wire_evolve.toml config file format.

Each historical format is a model in this package and each step between two
formats is a conversion registered in ``registry``. The chain itself is
declared in ``wire_evolve.config`` next to the current config model.
"""

from .versions import ConfigV1, ConfigV2, registry, CHANGES

__all__ = ['ConfigV1', 'ConfigV2', 'registry', 'CHANGES', 'get_changes_description']


def get_changes_description(from_version: str, to_version: str) -> str:
    """Get human-readable description of changes between two config versions."""
    lines = []
    for (source, target), description in CHANGES.items():
        if int(from_version) <= int(source) and int(target) <= int(to_version):
            lines.append(description)
    return "\n".join(lines) if lines else "No description available"
