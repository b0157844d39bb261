# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Migration executor and reverse projector."""

import logging
from typing import TYPE_CHECKING, Any

from .errors import type_name
from .representation import TaggedRepresentation

if TYPE_CHECKING:
    from .chain import Chain

logger = logging.getLogger(__name__)


def migrate(chain: "Chain", rep: TaggedRepresentation) -> Any:
    """Fold a representation through the chain up to the domain type.

    Conversions run strictly in ascending version order, starting at the
    representation's own version. In fallible mode the first conversion that
    raises stops the fold and its exception propagates unchanged; later
    conversions are never called.

    Args:
        chain: Chain the representation was decoded with
        rep: Representation to migrate

    Returns:
        Domain instance

    Raises:
        ValueError: If the representation belongs to another chain
    """
    if rep.chain is not chain:
        raise ValueError(
            f"Representation belongs to {rep.chain.name}, not {chain.name}"
        )

    start = rep.version
    value = rep.payload
    # edges[i] converts version i + 1 into the next element, the last one into the domain
    for edge in chain.edges[start - 1:]:
        value = edge.apply(value)

    if start < chain.current_version:
        logger.debug(
            f"Migrated {type_name(chain.domain_type)} from v{start} to v{chain.current_version}"
        )
    return value


def project(chain: "Chain", domain: Any) -> TaggedRepresentation:
    """Convert a domain value into the latest version of the chain.

    Raises:
        TypeError: If ``domain`` is not an instance of the chain's domain type
    """
    if not isinstance(domain, chain.domain_type):
        raise TypeError(
            f"{chain.name} projects {type_name(chain.domain_type)}, got {type_name(type(domain))}"
        )
    payload = chain.projection.apply(domain)
    return TaggedRepresentation(chain.current, payload, chain)


def upgrade(chain: "Chain", rep: TaggedRepresentation) -> TaggedRepresentation:
    """Migrate a representation and re-project it at the latest version."""
    return project(chain, migrate(chain, rep))
