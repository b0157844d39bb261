# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Exceptions raised by wire-evolve.

Definition-time problems derive from ChainDefinitionError and are raised while
a chain is being declared, normally at import time. Runtime decoding problems
derive from DecodeError. Errors raised by user conversions are never wrapped.
"""

from typing import Any, Optional, Sequence


def type_name(type_id: Any) -> str:
    """Readable name for a type used in messages."""
    return getattr(type_id, '__qualname__', None) or getattr(type_id, '__name__', None) or repr(type_id)


class WireEvolveError(Exception):
    """Base class for all wire-evolve errors."""
    pass


class ChainDefinitionError(WireEvolveError):
    """Raised when a version chain cannot be defined."""
    pass


class EmptyChainError(ChainDefinitionError):
    """Raised when a chain has no versions."""

    def __init__(self, domain_type: Any):
        self.domain_type = domain_type
        super().__init__(
            f"Chain for {type_name(domain_type)} must contain at least one version type"
        )


class NonContiguousOrdinalsError(ChainDefinitionError):
    """Raised when version ordinals are not exactly 1, 2, ..., N."""

    def __init__(self, ordinals: Sequence[int]):
        self.ordinals = tuple(ordinals)
        expected = tuple(range(1, len(self.ordinals) + 1))
        super().__init__(
            f"Version ordinals must be contiguous and start at 1: got {self.ordinals}, expected {expected}"
        )


class DuplicateTypeError(ChainDefinitionError):
    """Raised when the same type appears twice in a chain."""

    def __init__(self, type_id: Any):
        self.type_id = type_id
        super().__init__(f"Type {type_name(type_id)} is used by more than one version")


class DuplicateTagError(ChainDefinitionError):
    """Raised when two versions share a wire tag."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"Tag {tag!r} is used by more than one version")


class InvalidModeError(ChainDefinitionError):
    """Raised for an unknown migration mode or a fallible mode without error type."""
    pass


class MissingConversionError(ChainDefinitionError):
    """Raised when no conversion is registered between two adjacent chain elements."""

    def __init__(self, source: Any, target: Any):
        self.source = source
        self.target = target
        super().__init__(
            f"Missing conversion from {type_name(source)} to {type_name(target)}"
        )


class FallibleEdgeInInfallibleChainError(ChainDefinitionError):
    """Raised when an infallible chain contains a fallible conversion."""

    def __init__(self, source: Any, target: Any):
        self.source = source
        self.target = target
        super().__init__(
            f"Conversion from {type_name(source)} to {type_name(target)} is fallible, "
            f"but the chain is infallible"
        )


class FallibleProjectionError(ChainDefinitionError):
    """Raised when the domain to latest-version conversion is declared fallible."""

    def __init__(self, source: Any, target: Any):
        self.source = source
        self.target = target
        super().__init__(
            f"Projection from {type_name(source)} to {type_name(target)} must be infallible"
        )


class DuplicateConversionError(ChainDefinitionError):
    """Raised when a second conversion is registered for the same pair."""

    def __init__(self, source: Any, target: Any):
        self.source = source
        self.target = target
        super().__init__(
            f"A conversion from {type_name(source)} to {type_name(target)} is already registered"
        )


class ConversionSignatureError(ChainDefinitionError):
    """Raised when source/target types cannot be read from a conversion function."""
    pass


class BindingConflictError(ChainDefinitionError):
    """Raised when binding helpers would overwrite a domain attribute or field."""

    def __init__(self, domain_type: Any, attribute: str):
        self.domain_type = domain_type
        self.attribute = attribute
        super().__init__(
            f"Cannot bind chain helpers to {type_name(domain_type)}: "
            f"attribute {attribute!r} is already defined"
        )


class DecodeError(WireEvolveError):
    """Raised when wire data cannot be decoded into a tagged representation."""
    pass


class UnknownVersionError(DecodeError):
    """Raised when a version tag is not part of the chain.

    ``tag`` holds the value exactly as read, which may not be a string.
    """

    def __init__(self, tag: Any):
        self.tag = tag
        if isinstance(tag, str):
            super().__init__(f"Unknown version tag: {tag}")
        else:
            super().__init__(
                f"Unknown version tag: {tag!r} ({type(tag).__name__}), tags must be strings"
            )


class MissingVersionTagError(DecodeError):
    """Raised when a document has no version tag field."""

    def __init__(self, tag_field: str):
        self.tag_field = tag_field
        super().__init__(f"Missing version tag field {tag_field!r}")


class PayloadInvalidError(DecodeError):
    """Raised when the codec rejects a payload.

    The codec's own exception is kept on ``error`` and as ``__cause__``.
    """

    def __init__(self, tag: Optional[str], error: BaseException):
        self.tag = tag
        self.error = error
        where = f"version {tag}" if tag is not None else "document"
        super().__init__(f"Invalid payload for {where}: {error}")
