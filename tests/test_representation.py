"""Tests for decoding wire data into tagged representations."""

import pytest
from pydantic import ValidationError

from wire_evolve import (
    Chain,
    JsonCodec,
    MissingVersionTagError,
    PayloadInvalidError,
    TaggedRepresentation,
    UnknownVersionError,
)
from helpers.chains import (
    PROFILE_VERSIONS,
    USER_VERSIONS,
    ProfileV1,
    ProfileV2,
    User,
    UserV1,
    UserV2,
    user_registry,
)


class CountingCodec(JsonCodec):
    """JSON codec recording every payload it is asked to decode."""

    def __init__(self):
        super().__init__()
        self.decoded = []

    def decode_payload(self, type_id, payload):
        self.decoded.append(type_id)
        return super().decode_payload(type_id, payload)


class TestDecode:
    def test_decode_selects_variant_by_tag(self):
        """Test decoding each version of the user chain."""
        rep = USER_VERSIONS.decode('{"_version":"1","name":"Alice"}')
        assert rep.tag == "1"
        assert rep.version == 1
        assert rep.payload == UserV1(name="Alice")
        assert not rep.is_current()

        rep = USER_VERSIONS.decode('{"_version":"2","full_name":"Bob","email":"bob@example.org"}')
        assert rep.tag == "2"
        assert rep.payload == UserV2(full_name="Bob", email="bob@example.org")
        assert rep.is_current()

    def test_decode_bytes(self):
        rep = USER_VERSIONS.decode(b'{"_version":"1","name":"Alice"}')
        assert rep.payload == UserV1(name="Alice")

    def test_tag_may_appear_anywhere(self):
        rep = USER_VERSIONS.decode('{"name":"Alice","_version":"1"}')
        assert rep.payload == UserV1(name="Alice")

    def test_custom_tag_field_and_tags(self):
        """Test a chain with its own tag field and date-like tags."""
        rep = PROFILE_VERSIONS.decode('{"schema":"2020-01","handle":"alice@example.org"}')
        assert rep.entry.ordinal == 1
        assert rep.payload == ProfileV1(handle="alice@example.org")

    def test_default_tag_field_is_not_used_by_custom_chain(self):
        with pytest.raises(MissingVersionTagError) as excinfo:
            PROFILE_VERSIONS.decode('{"_version":"1","handle":"alice@example.org"}')

        assert excinfo.value.tag_field == "schema"

    def test_unknown_tag(self):
        with pytest.raises(UnknownVersionError) as excinfo:
            USER_VERSIONS.decode('{"_version":"99","name":"Alice"}')

        assert excinfo.value.tag == "99"

    def test_unknown_tag_leaves_payload_untouched(self):
        """Test that no payload decoding is attempted for an unknown tag."""
        codec = CountingCodec()
        chain = Chain.define(
            [UserV1, UserV2], User, mode="infallible",
            conversions=user_registry, codec=codec, bind=False
        )

        with pytest.raises(UnknownVersionError):
            chain.decode('{"_version":"3","name":"Alice"}')
        assert codec.decoded == []

        chain.decode('{"_version":"1","name":"Alice"}')
        assert codec.decoded == [UserV1]

    def test_tags_match_exactly(self):
        for tag in ("V1", "01", " 1"):
            with pytest.raises(UnknownVersionError):
                USER_VERSIONS.decode(f'{{"_version":"{tag}","name":"Alice"}}')

    def test_non_string_tag(self):
        """Test that a numeric tag does not match the string tag "1"."""
        with pytest.raises(UnknownVersionError) as excinfo:
            USER_VERSIONS.decode('{"_version":1,"name":"Alice"}')

        assert excinfo.value.tag == 1
        assert "tags must be strings" in str(excinfo.value)

    def test_missing_tag(self):
        with pytest.raises(MissingVersionTagError):
            USER_VERSIONS.decode('{"name":"Alice"}')

    def test_invalid_payload(self):
        """Test that codec errors are reported with the tag and kept as cause."""
        with pytest.raises(PayloadInvalidError) as excinfo:
            USER_VERSIONS.decode('{"_version":"1","full_name":"Alice"}')

        assert excinfo.value.tag == "1"
        assert isinstance(excinfo.value.error, ValidationError)
        assert excinfo.value.__cause__ is excinfo.value.error

    def test_unparsable_text(self):
        with pytest.raises(PayloadInvalidError) as excinfo:
            USER_VERSIONS.decode('{"_version": "1", "name": ')

        assert excinfo.value.tag is None

    def test_document_must_be_an_object(self):
        with pytest.raises(PayloadInvalidError):
            USER_VERSIONS.decode('["1", "Alice"]')

    def test_decode_document(self):
        rep = USER_VERSIONS.decode_document({"_version": "1", "name": "Alice"})
        assert rep.payload == UserV1(name="Alice")


class TestEncode:
    def test_encode_is_tagged_with_own_version(self):
        """Test that encoding keeps the variant's own tag, without migrating."""
        rep = USER_VERSIONS.wrap(UserV1(name="Alice"))

        assert USER_VERSIONS.encode(rep) == '{"_version":"1","name":"Alice"}'

    def test_encode_returns_tag_and_payload(self):
        rep = USER_VERSIONS.wrap(UserV2(full_name="Alice"))

        assert rep.encode() == ("2", {"full_name": "Alice", "email": None})

    def test_encode_document(self):
        rep = PROFILE_VERSIONS.wrap(ProfileV2(username="alice", domain="example.org"))

        assert PROFILE_VERSIONS.encode_document(rep) == {
            "schema": "2021-06", "username": "alice", "domain": "example.org"
        }

    def test_decode_encode_keeps_document(self):
        text = '{"_version":"2","full_name":"Alice","email":"alice@example.org"}'
        assert USER_VERSIONS.encode(USER_VERSIONS.decode(text)) == text

    def test_encode_foreign_representation(self):
        rep = PROFILE_VERSIONS.wrap(ProfileV1(handle="a@b"))

        with pytest.raises(ValueError):
            USER_VERSIONS.encode(rep)


class TestConstruction:
    def test_wrap_unknown_type(self):
        with pytest.raises(TypeError):
            USER_VERSIONS.wrap(ProfileV1(handle="a@b"))

    def test_payload_must_match_entry(self):
        """Test that a representation cannot hold another version's payload."""
        with pytest.raises(TypeError):
            TaggedRepresentation(USER_VERSIONS.entries[0], UserV2(full_name="Alice"), USER_VERSIONS)

    def test_entry_must_belong_to_chain(self):
        with pytest.raises(ValueError):
            TaggedRepresentation(PROFILE_VERSIONS.entries[0], ProfileV1(handle="a@b"), USER_VERSIONS)

    def test_equality_ignores_chain_object(self):
        first = USER_VERSIONS.wrap(UserV1(name="Alice"))
        second = USER_VERSIONS.decode('{"_version":"1","name":"Alice"}')
        assert first == second
