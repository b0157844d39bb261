# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Transparent overlay and domain helpers.

Every chain binds a few read-only helpers to its domain class:

* ``CURRENT``: tag of the latest version
* ``version()``: ordinal of the latest version (a domain value is always current)
* ``is_current(tag)``: whether a wire tag is the latest one

Transparent chains additionally install ``Domain.decode(data)`` and
``domain.encode()``, which go through the chain so callers never handle
tagged representations themselves.
"""

import dataclasses
import inspect
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, Set, Union

from .errors import BindingConflictError, type_name

if TYPE_CHECKING:
    from .chain import Chain

logger = logging.getLogger(__name__)

CHAIN_ATTRIBUTE = "__wire_chain__"
HELPER_ATTRIBUTES = ("CURRENT", "version", "is_current")
TRANSPARENT_ATTRIBUTES = ("decode", "encode")


def decode_transparent(chain: "Chain", data: Union[str, bytes]) -> Any:
    """Decode wire text straight into the domain type.

    Raises:
        DecodeError: If the text cannot be decoded
        Exception: The chain's error type, if a fallible conversion fails
    """
    return chain.migrate(chain.decode(data))


def encode_transparent(chain: "Chain", domain: Any) -> str:
    """Encode a domain value as wire text at the latest version."""
    return chain.encode(chain.project(domain))


def load_document(chain: "Chain", document: Mapping[str, Any]) -> Any:
    """Like decode_transparent, for an already parsed document."""
    return chain.migrate(chain.decode_document(document))


def dump_document(chain: "Chain", domain: Any) -> Dict[str, Any]:
    """Like encode_transparent, returning the tagged document."""
    return chain.encode_document(chain.project(domain))


def _mark(func):
    func.__wire_evolve__ = True
    return func


@_mark
def _version(self) -> int:
    """Version of this value's wire format: always the latest one."""
    return getattr(type(self), CHAIN_ATTRIBUTE).current_version


@_mark
def _is_current(cls, tag: str) -> bool:
    """Check if a wire tag is the latest version."""
    return getattr(cls, CHAIN_ATTRIBUTE).is_current(tag)


@_mark
def _decode(cls, data: Union[str, bytes]):
    """Decode wire text of any known version into this type."""
    return decode_transparent(getattr(cls, CHAIN_ATTRIBUTE), data)


@_mark
def _encode(self) -> str:
    """Encode this value as wire text at the latest version."""
    return encode_transparent(getattr(type(self), CHAIN_ATTRIBUTE), self)


def _field_names(domain_type: type) -> Set[str]:
    names = set(getattr(domain_type, 'model_fields', None) or {})
    if dataclasses.is_dataclass(domain_type):
        names.update(f.name for f in dataclasses.fields(domain_type))
    return names


def _is_ours(domain_type: type, attribute: str) -> bool:
    value = inspect.getattr_static(domain_type, attribute)
    if isinstance(value, classmethod):
        value = value.__func__
    if attribute == "CURRENT":
        return hasattr(domain_type, CHAIN_ATTRIBUTE)
    return getattr(value, '__wire_evolve__', False)


def _unbind(domain_type: type) -> None:
    for attribute in HELPER_ATTRIBUTES + TRANSPARENT_ATTRIBUTES + (CHAIN_ATTRIBUTE,):
        if attribute in vars(domain_type):
            delattr(domain_type, attribute)


def bind_domain(chain: "Chain") -> None:
    """Install the chain's helpers (and transparent entry points) on its domain type.

    Raises:
        BindingConflictError: If the domain already defines one of the names
    """
    domain_type = chain.domain_type
    attributes = HELPER_ATTRIBUTES + (TRANSPARENT_ATTRIBUTES if chain.transparent else ())

    previous = vars(domain_type).get(CHAIN_ATTRIBUTE)
    fields = _field_names(domain_type)
    for attribute in attributes:
        if attribute in fields:
            raise BindingConflictError(domain_type, attribute)
        if hasattr(domain_type, attribute) and not _is_ours(domain_type, attribute):
            raise BindingConflictError(domain_type, attribute)

    if previous is not None and previous is not chain:
        logger.warning(
            f"Rebinding {type_name(domain_type)} from {previous.name} to {chain.name}"
        )
        _unbind(domain_type)

    setattr(domain_type, CHAIN_ATTRIBUTE, chain)
    setattr(domain_type, "CURRENT", chain.current_tag)
    setattr(domain_type, "version", _version)
    setattr(domain_type, "is_current", classmethod(_is_current))
    if chain.transparent:
        setattr(domain_type, "decode", classmethod(_decode))
        setattr(domain_type, "encode", _encode)
