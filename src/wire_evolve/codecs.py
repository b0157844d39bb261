# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Codecs turning wire text into tagged documents and payload objects.

A codec does four things for the engine: parse text into a document (a dict),
read and write the version tag field, validate a payload dict into a version
type and dump a version object back into a payload dict. Payload handling is
done by pydantic, so version types may be pydantic models, dataclasses or
anything else a TypeAdapter accepts.
"""

import json
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

import tomli
import tomlkit
from pydantic import TypeAdapter

from .errors import MissingVersionTagError


@lru_cache(maxsize=None)
def _adapter(type_id: Any) -> TypeAdapter:
    return TypeAdapter(type_id)


class Codec(ABC):
    """Base class for wire codecs."""

    name: ClassVar[str] = ""
    # TOML has no null, so some codecs leave unset optional fields out
    exclude_none: ClassVar[bool] = False

    @abstractmethod
    def loads(self, data: Union[str, bytes]) -> Dict[str, Any]:
        """Parse wire text into a document.

        Raises:
            Exception: The underlying parser's error for malformed input
        """
        pass

    @abstractmethod
    def dumps(self, document: Mapping[str, Any]) -> str:
        """Serialize a document to wire text."""
        pass

    def read_tag(self, document: Mapping[str, Any], tag_field: str) -> Any:
        """Return the raw value of the tag field.

        Raises:
            MissingVersionTagError: If the document has no tag field
        """
        if tag_field not in document:
            raise MissingVersionTagError(tag_field)
        return document[tag_field]

    def write_tag(self, document: Mapping[str, Any], tag_field: str, tag: str) -> Dict[str, Any]:
        """Return a copy of the document with the tag field first."""
        tagged = {tag_field: tag}
        tagged.update((k, v) for k, v in document.items() if k != tag_field)
        return tagged

    def decode_payload(self, type_id: Any, payload: Mapping[str, Any]) -> Any:
        """Validate a payload into an instance of ``type_id``.

        Raises:
            pydantic.ValidationError: If the payload does not match the type
        """
        return _adapter(type_id).validate_python(dict(payload))

    def encode_payload(self, value: Any) -> Dict[str, Any]:
        """Dump a version object into a JSON-compatible payload dict."""
        return _adapter(type(value)).dump_python(value, mode='json', exclude_none=self.exclude_none)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class JsonCodec(Codec):
    """JSON codec. Output is compact unless ``indent`` is set."""

    name = "json"

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent

    def loads(self, data: Union[str, bytes]) -> Dict[str, Any]:
        document = json.loads(data)
        if not isinstance(document, dict):
            raise ValueError(f"Expected a JSON object, got {type(document).__name__}")
        return document

    def dumps(self, document: Mapping[str, Any]) -> str:
        if self.indent is None:
            return json.dumps(document, separators=(',', ':'), ensure_ascii=False)
        return json.dumps(document, indent=self.indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"JsonCodec(indent={self.indent!r})"


class TomlCodec(Codec):
    """TOML codec: tomli for reading, tomlkit for writing."""

    name = "toml"
    exclude_none = True

    def loads(self, data: Union[str, bytes]) -> Dict[str, Any]:
        if isinstance(data, bytes):
            data = data.decode('utf-8')
        return tomli.loads(data)

    def dumps(self, document: Mapping[str, Any]) -> str:
        return tomlkit.dumps(_drop_none(document))


def _drop_none(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value if v is not None]
    return value


CODECS = {
    JsonCodec.name: JsonCodec,
    TomlCodec.name: TomlCodec,
}


def get_codec(name: str, **options: Any) -> Codec:
    """Create a codec by name ("json" or "toml").

    Raises:
        ValueError: If the codec name is unknown
    """
    try:
        codec_class = CODECS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown codec {name!r}. Available: {', '.join(sorted(CODECS))}"
        ) from None
    return codec_class(**options)
