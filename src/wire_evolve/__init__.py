# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Versioned wire formats with definition-time checked migration chains."""

__version__ = "0.1.0"

from .chain import Chain, MigrationMode, VersionEntry, DEFAULT_TAG_FIELD
from .codecs import Codec, JsonCodec, TomlCodec, get_codec
from .errors import (
    WireEvolveError,
    ChainDefinitionError,
    EmptyChainError,
    NonContiguousOrdinalsError,
    DuplicateTypeError,
    DuplicateTagError,
    InvalidModeError,
    MissingConversionError,
    FallibleEdgeInInfallibleChainError,
    FallibleProjectionError,
    DuplicateConversionError,
    ConversionSignatureError,
    BindingConflictError,
    DecodeError,
    UnknownVersionError,
    MissingVersionTagError,
    PayloadInvalidError,
)
from .executor import migrate, project, upgrade
from .overlay import decode_transparent, encode_transparent
from .registry import ConversionEdge, ConversionRegistry, Fallible
from .representation import TaggedRepresentation

__all__ = [
    'Chain', 'MigrationMode', 'VersionEntry', 'DEFAULT_TAG_FIELD',
    'Codec', 'JsonCodec', 'TomlCodec', 'get_codec',
    'ConversionEdge', 'ConversionRegistry', 'Fallible',
    'TaggedRepresentation',
    'migrate', 'project', 'upgrade',
    'decode_transparent', 'encode_transparent',
    'WireEvolveError', 'ChainDefinitionError', 'EmptyChainError',
    'NonContiguousOrdinalsError', 'DuplicateTypeError', 'DuplicateTagError',
    'InvalidModeError', 'MissingConversionError',
    'FallibleEdgeInInfallibleChainError', 'FallibleProjectionError',
    'DuplicateConversionError', 'ConversionSignatureError', 'BindingConflictError',
    'DecodeError', 'UnknownVersionError', 'MissingVersionTagError', 'PayloadInvalidError',
]
