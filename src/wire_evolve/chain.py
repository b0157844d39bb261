# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Version chains: ordered wire versions leading to one domain type.

A chain is declared once, usually at module level, and is validated on the
spot: every version needs a conversion to the next one, the newest version
needs a conversion to the domain type, and the domain type needs a conversion
back to the newest version. A module declaring an incomplete chain fails to
import, so old data can never hit a missing migration step at runtime.

Example:

    USER_VERSIONS = Chain.define(
        [UserV1, UserV2],
        User,
        mode="infallible",
        conversions=registry,
        transparent=True,
    )

    user = USER_VERSIONS.decode_transparent('{"_version":"1","name":"Alice"}')
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Type, Union

from . import executor, overlay
from .codecs import Codec, JsonCodec
from .errors import (
    ChainDefinitionError,
    DecodeError,
    DuplicateTagError,
    DuplicateTypeError,
    EmptyChainError,
    FallibleEdgeInInfallibleChainError,
    FallibleProjectionError,
    InvalidModeError,
    NonContiguousOrdinalsError,
    PayloadInvalidError,
    UnknownVersionError,
    type_name,
)
from .registry import ConversionEdge, ConversionRegistry
from .representation import TaggedRepresentation

logger = logging.getLogger(__name__)

DEFAULT_TAG_FIELD = "_version"


@dataclass(frozen=True)
class VersionEntry:
    """One version of a chain. The tag defaults to the ordinal as a string."""
    ordinal: int
    type_id: type
    tag: Optional[str] = None

    def __post_init__(self):
        if self.tag is None:
            object.__setattr__(self, 'tag', str(self.ordinal))
        if not isinstance(self.tag, str) or not self.tag:
            raise ChainDefinitionError(
                f"Tag of version {self.ordinal} must be a non-empty string, got {self.tag!r}"
            )
        if not isinstance(self.type_id, type):
            raise ChainDefinitionError(
                f"Version {self.ordinal} must be a class, got {self.type_id!r}"
            )


@dataclass(frozen=True)
class MigrationMode:
    """Error policy of a chain.

    Infallible chains only accept conversions that cannot fail. Fallible
    chains declare the error type their conversions raise.
    """
    error_type: Optional[Type[BaseException]] = None

    @property
    def is_fallible(self) -> bool:
        return self.error_type is not None

    @classmethod
    def infallible(cls) -> "MigrationMode":
        return cls()

    @classmethod
    def fallible(cls, error_type: Type[BaseException]) -> "MigrationMode":
        if not (isinstance(error_type, type) and issubclass(error_type, Exception)):
            raise InvalidModeError(
                f"Error type of a fallible chain must be an Exception subclass, got {error_type!r}"
            )
        return cls(error_type)

    @classmethod
    def parse(
        cls,
        mode: Union["MigrationMode", str],
        error: Optional[Type[BaseException]] = None
    ) -> "MigrationMode":
        """Build a mode from ``"infallible"``/``"fallible"`` plus error type.

        Raises:
            InvalidModeError: If the mode is unknown or fallible without error type
        """
        if isinstance(mode, MigrationMode):
            return mode
        if mode == "infallible":
            return cls.infallible()
        if mode == "fallible":
            if error is None:
                raise InvalidModeError("fallible mode requires an error type")
            return cls.fallible(error)
        raise InvalidModeError(f"invalid mode {mode!r}, expected 'infallible' or 'fallible'")

    def __str__(self) -> str:
        if self.is_fallible:
            return f"fallible({type_name(self.error_type)})"
        return "infallible"


EntryLike = Union[type, Tuple[type, str], VersionEntry]


def _build_entries(items: Iterable[EntryLike]) -> Tuple[VersionEntry, ...]:
    entries = []
    for position, item in enumerate(items, start=1):
        if isinstance(item, VersionEntry):
            entries.append(item)
        elif isinstance(item, tuple):
            type_id, tag = item
            entries.append(VersionEntry(position, type_id, tag))
        else:
            entries.append(VersionEntry(position, item))
    return tuple(entries)


def _validate_entries(entries: Sequence[VersionEntry]) -> None:
    ordinals = [entry.ordinal for entry in entries]
    if ordinals != list(range(1, len(entries) + 1)):
        raise NonContiguousOrdinalsError(ordinals)

    seen_types = set()
    seen_tags = set()
    for entry in entries:
        if entry.type_id in seen_types:
            raise DuplicateTypeError(entry.type_id)
        if entry.tag in seen_tags:
            raise DuplicateTagError(entry.tag)
        seen_types.add(entry.type_id)
        seen_tags.add(entry.tag)


def _resolve_edges(
    entries: Sequence[VersionEntry],
    domain_type: type,
    mode: MigrationMode,
    conversions: ConversionRegistry
) -> Tuple[ConversionEdge, ...]:
    steps = [entry.type_id for entry in entries] + [domain_type]
    edges = []
    for source, target in zip(steps, steps[1:]):
        edge = conversions.resolve(source, target)
        if edge.fallible and not mode.is_fallible:
            raise FallibleEdgeInInfallibleChainError(source, target)
        edges.append(edge)
    return tuple(edges)


@dataclass(frozen=True, eq=False)
class Chain:
    """A validated version chain. Build it with ``Chain.define``."""
    entries: Tuple[VersionEntry, ...]
    domain_type: type
    mode: MigrationMode
    # edges[i] converts entries[i] into entries[i + 1]; the last edge produces the domain
    edges: Tuple[ConversionEdge, ...]
    projection: ConversionEdge
    name: str
    tag_field: str = DEFAULT_TAG_FIELD
    transparent: bool = False
    codec: Codec = field(default_factory=JsonCodec)
    _by_tag: Dict[str, VersionEntry] = field(init=False, repr=False)
    _by_type: Dict[type, VersionEntry] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, '_by_tag', {entry.tag: entry for entry in self.entries})
        object.__setattr__(self, '_by_type', {entry.type_id: entry for entry in self.entries})

    @classmethod
    def define(
        cls,
        entries: Iterable[EntryLike],
        domain_type: type,
        mode: Union[MigrationMode, str] = "fallible",
        *,
        conversions: ConversionRegistry,
        error: Optional[Type[BaseException]] = None,
        tag_field: str = DEFAULT_TAG_FIELD,
        name: Optional[str] = None,
        transparent: bool = False,
        codec: Optional[Codec] = None,
        bind: bool = True
    ) -> "Chain":
        """Declare and validate a chain.

        Args:
            entries: Version types oldest first, each a type, a (type, tag) pair
                or a VersionEntry
            domain_type: Current in-memory type
            mode: MigrationMode, or "infallible"/"fallible" (default, needs ``error``)
            conversions: Registry holding every conversion of the chain
            error: Error type raised by conversions of a fallible chain. It is
                not enforced when migrating: whatever a conversion raises
                propagates unchanged, so ``except error`` does not catch every
                migration failure
            tag_field: Name of the version discriminant in wire documents
            name: Representation name used in messages (default "<Domain>Versions")
            transparent: Install ``decode``/``encode`` on the domain type
            codec: Wire codec (default JsonCodec)
            bind: Install helpers (CURRENT, version, is_current) on the domain type

        Returns:
            Validated Chain

        Raises:
            ChainDefinitionError: If the chain is empty, misnumbered, reuses a
                type or tag, has an invalid mode, or lacks a conversion
        """
        version_entries = _build_entries(entries)
        if not version_entries:
            raise EmptyChainError(domain_type)
        if not isinstance(domain_type, type):
            raise ChainDefinitionError(f"Domain type must be a class, got {domain_type!r}")
        _validate_entries(version_entries)

        migration_mode = MigrationMode.parse(mode, error)
        edges = _resolve_edges(version_entries, domain_type, migration_mode, conversions)

        latest = version_entries[-1].type_id
        projection = conversions.resolve(domain_type, latest)
        if projection.fallible:
            raise FallibleProjectionError(domain_type, latest)

        chain = cls(
            entries=version_entries,
            domain_type=domain_type,
            mode=migration_mode,
            edges=edges,
            projection=projection,
            name=name or f"{domain_type.__name__}Versions",
            tag_field=tag_field,
            transparent=transparent,
            codec=codec if codec is not None else JsonCodec()
        )
        logger.debug(f"Defined chain {chain!r}")

        if bind:
            overlay.bind_domain(chain)
        return chain

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        versions = ", ".join(f"{e.tag}={type_name(e.type_id)}" for e in self.entries)
        return f"<Chain {self.name} [{versions}] -> {type_name(self.domain_type)} ({self.mode})>"

    @property
    def current(self) -> VersionEntry:
        """Latest version entry."""
        return self.entries[-1]

    @property
    def current_tag(self) -> str:
        return self.current.tag

    @property
    def current_version(self) -> int:
        return self.current.ordinal

    def is_current(self, tag: str) -> bool:
        """Check if ``tag`` is the tag of the latest version."""
        return tag == self.current_tag

    def entry_for_tag(self, tag: str) -> VersionEntry:
        """Look up a version by its wire tag.

        Raises:
            UnknownVersionError: If no version has this tag
        """
        if not isinstance(tag, str):
            raise UnknownVersionError(tag)
        try:
            return self._by_tag[tag]
        except KeyError:
            raise UnknownVersionError(tag) from None

    def entry_for_type(self, type_id: type) -> VersionEntry:
        """Look up a version by its payload type.

        Raises:
            TypeError: If the type is not part of the chain
        """
        try:
            return self._by_type[type_id]
        except KeyError:
            raise TypeError(f"{type_name(type_id)} is not a version of {self.name}") from None

    def wrap(self, payload: Any) -> TaggedRepresentation:
        """Tag a version object with its own version."""
        return TaggedRepresentation(self.entry_for_type(type(payload)), payload, self)

    def decode_document(self, document: Mapping[str, Any]) -> TaggedRepresentation:
        """Decode an already parsed document into a representation.

        Raises:
            MissingVersionTagError: If the tag field is absent
            UnknownVersionError: If the tag is not part of the chain
            PayloadInvalidError: If the payload does not match its version type
        """
        tag = self.codec.read_tag(document, self.tag_field)
        if not isinstance(tag, str):
            raise UnknownVersionError(tag)
        payload = {key: value for key, value in document.items() if key != self.tag_field}
        return TaggedRepresentation.decode(self, tag, payload)

    def decode(self, data: Union[str, bytes]) -> TaggedRepresentation:
        """Parse wire text and decode it into a representation.

        Raises:
            DecodeError: See ``decode_document``; unparsable text raises
                PayloadInvalidError with ``tag`` None
        """
        try:
            document = self.codec.loads(data)
        except DecodeError:
            raise
        except Exception as e:
            raise PayloadInvalidError(None, e) from e
        return self.decode_document(document)

    def encode_document(self, rep: TaggedRepresentation) -> Dict[str, Any]:
        """Encode a representation into a tagged document."""
        if rep.chain is not self:
            raise ValueError(f"Representation belongs to {rep.chain.name}, not {self.name}")
        tag, payload = rep.encode()
        return self.codec.write_tag(payload, self.tag_field, tag)

    def encode(self, rep: TaggedRepresentation) -> str:
        """Encode a representation into wire text."""
        return self.codec.dumps(self.encode_document(rep))

    def migrate(self, rep: TaggedRepresentation) -> Any:
        """Migrate a representation to the domain type (see executor.migrate)."""
        return executor.migrate(self, rep)

    def project(self, domain: Any) -> TaggedRepresentation:
        """Convert a domain value into the latest version (see executor.project)."""
        return executor.project(self, domain)

    def upgrade(self, rep: TaggedRepresentation) -> TaggedRepresentation:
        """Migrate a representation and re-tag it at the latest version."""
        return executor.upgrade(self, rep)

    def decode_transparent(self, data: Union[str, bytes]) -> Any:
        return overlay.decode_transparent(self, data)

    def encode_transparent(self, domain: Any) -> str:
        return overlay.encode_transparent(self, domain)

    def load_document(self, document: Mapping[str, Any]) -> Any:
        return overlay.load_document(self, document)

    def dump_document(self, domain: Any) -> Dict[str, Any]:
        return overlay.dump_document(self, domain)
