"""
Tests for result serialization, and for agreement between serialized
results and the schemas synthesized for them.
"""

from dataclasses import dataclass, field
from datetime import datetime

import jsonschema
import pytest

from models import SchemaGenerationError
from results import (
    AttachmentInfo,
    AttachmentListResult,
    BodyFormat,
    BodyResult,
    EmailAddress,
    FileAttachmentInfo,
    MessageAttachmentInfo,
    RecipientsResult,
)
from schemagen import OutputSchemaGenerator, serialize_result


@dataclass
class Stamped:
    at: datetime
    note: str | None = None
    counts: dict[str, int] = field(default_factory=dict)
    tags: tuple[str, ...] = ()


class TestSerializeResult:

    def test_none_members_omitted(self):
        assert serialize_result(EmailAddress(address="a@example.com")) == {"address": "a@example.com"}

    def test_enum_becomes_value(self):
        result = serialize_result(BodyResult(body="hi", format=BodyFormat.HTML))
        assert result == {"body": "hi", "format": "html"}

    def test_datetime_and_containers(self):
        result = serialize_result(Stamped(at=datetime(2024, 5, 1, 12, 30), counts={"a": 1}, tags=("x", "y")))
        assert result == {"at": "2024-05-01T12:30:00", "counts": {"a": 1}, "tags": ["x", "y"]}

    def test_variant_carries_discriminator(self):
        info = MessageAttachmentInfo(index=1, content_type="message/rfc822", size=10, subject="Fwd")
        assert serialize_result(info) == {
            "kind": "message",
            "index": 1,
            "content_type": "message/rfc822",
            "size": 10,
            "subject": "Fwd",
        }

    def test_nested_variants(self):
        result = serialize_result(AttachmentListResult(
            attachments=[FileAttachmentInfo(index=0, content_type="text/csv", size=3, filename="a.csv")],
            count=1,
        ))
        assert result["attachments"][0]["kind"] == "file"

    def test_polymorphic_base_rejected(self):
        with pytest.raises(SchemaGenerationError, match="polymorphic base"):
            serialize_result(AttachmentInfo(index=0, content_type="text/plain", size=0))

    def test_unknown_value_rejected(self):
        with pytest.raises(SchemaGenerationError):
            serialize_result(object())


class TestSchemaSoundness:
    """Serialized instances validate against the schema of their declared type."""

    @pytest.fixture
    def generator(self) -> OutputSchemaGenerator:
        return OutputSchemaGenerator()

    @pytest.mark.parametrize("declared,instance", [
        (BodyResult, BodyResult(body="x", format=BodyFormat.PLAIN, charset="utf-8")),
        (BodyResult, BodyResult(body="", format=BodyFormat.HTML)),
        (RecipientsResult, RecipientsResult(to=[EmailAddress("a@example.com", "A")])),
        (AttachmentInfo, FileAttachmentInfo(index=0, content_type="application/pdf", size=5)),
        (AttachmentInfo, MessageAttachmentInfo(index=1, content_type="message/rfc822", size=9, sender="b@example.com")),
        (AttachmentListResult, AttachmentListResult(attachments=[], count=0)),
        (Stamped, Stamped(at=datetime(2024, 1, 1), note="n", tags=("a",))),
    ])
    def test_instance_matches_declared_schema(self, generator, declared, instance):
        envelope = {"data": serialize_result(instance), "output": {"isSession": False, "path": "m.eml"}}
        jsonschema.validate(envelope, generator.generate_for_type(declared))

    def test_variant_rejected_by_wrong_tag(self, generator):
        data = serialize_result(FileAttachmentInfo(index=0, content_type="text/plain", size=1))
        data["kind"] = "message"
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(data, generator.node_for(AttachmentInfo))

    def test_unknown_member_rejected(self, generator):
        data = serialize_result(BodyResult(body="x", format=BodyFormat.PLAIN))
        data["extra"] = 1
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate(data, generator.node_for(BodyResult))

    def test_missing_output_rejected(self, generator):
        with pytest.raises(jsonschema.ValidationError):
            jsonschema.validate({"data": {"body": "x", "format": "plain"}}, generator.generate_for_type(BodyResult))
