# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Tagged representation: one active version variant of a chain."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Tuple

from .errors import PayloadInvalidError, type_name

if TYPE_CHECKING:
    from .chain import Chain, VersionEntry


@dataclass(frozen=True)
class TaggedRepresentation:
    """A payload of exactly one chain version, together with its entry.

    Instances are created by decoding wire data, by ``Chain.wrap`` or by the
    reverse projector. The payload is always an instance of the entry's type
    and the entry always belongs to ``chain``.
    """
    entry: "VersionEntry"
    payload: Any
    chain: "Chain" = field(repr=False, compare=False)

    def __post_init__(self):
        if self.entry not in self.chain.entries:
            raise ValueError(
                f"Version {self.entry.tag} ({type_name(self.entry.type_id)}) "
                f"is not part of chain {self.chain.name}"
            )
        if not isinstance(self.payload, self.entry.type_id):
            raise TypeError(
                f"Version {self.entry.tag} of {self.chain.name} holds {type_name(self.entry.type_id)}, "
                f"got {type_name(type(self.payload))}"
            )

    @property
    def tag(self) -> str:
        return self.entry.tag

    @property
    def version(self) -> int:
        """Ordinal of the active variant."""
        return self.entry.ordinal

    def is_current(self) -> bool:
        """Check if this is the latest version of the chain."""
        return self.entry == self.chain.current

    @classmethod
    def decode(cls, chain: "Chain", tag: str, payload: Mapping[str, Any]) -> "TaggedRepresentation":
        """Select the variant for ``tag`` and decode its payload.

        Args:
            chain: Chain that defines the variants
            tag: Wire tag, matched exactly against the chain's tags
            payload: Payload fields, without the tag field

        Returns:
            TaggedRepresentation for the matching version

        Raises:
            UnknownVersionError: If no version has this tag (payload untouched)
            PayloadInvalidError: If the codec rejects the payload
        """
        entry = chain.entry_for_tag(tag)
        try:
            value = chain.codec.decode_payload(entry.type_id, payload)
        except Exception as e:
            raise PayloadInvalidError(tag, e) from e
        return cls(entry, value, chain)

    def encode(self) -> Tuple[str, Dict[str, Any]]:
        """Return (tag, payload fields) for this variant."""
        return self.tag, self.chain.codec.encode_payload(self.payload)
