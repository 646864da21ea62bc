"""
Tests for the email_content tool.

Every successful envelope is also validated against the group schema and
the operation schema the server publishes.
"""

from pathlib import Path

import jsonschema
import pytest

from operations import HANDLER_GROUPS
from schemagen import get_schema_generator
from tools import REGISTRIES, do_email_content
from tests.helpers import read_message


def run(operation: str, path: str, output_path: str | None = None, **params) -> dict:
    """Call the tool and check the result against its published schemas."""
    result = do_email_content(operation, path, output_path, **params)
    if not result.get("error"):
        generator = get_schema_generator()
        jsonschema.validate(result, generator.generate_for_group("email_content", HANDLER_GROUPS))
        handler = REGISTRIES["email_content"].get_handler(operation)
        jsonschema.validate(result, generator.generate_for_handler(handler))
    return result


class TestBody:

    def test_get_plain_body(self, plain_eml):
        result = run("get_body", plain_eml)
        assert result["data"] == {
            "body": "Hello Charles,\n\nNotes below.\n",
            "format": "plain",
            "charset": "utf-8",
        }
        assert result["output"] == {"isSession": False, "path": plain_eml}

    def test_get_html_body_when_preferred(self, multipart_eml):
        result = run("get_body", multipart_eml, format="HTML")
        assert result["data"]["format"] == "html"
        assert "<p>Hello Charles,</p>" in result["data"]["body"]

    def test_falls_back_to_other_format(self, plain_eml):
        result = run("get_body", plain_eml, format="html")
        assert result["data"]["format"] == "plain"

    def test_set_body_single_part(self, plain_eml):
        result = run("set_body", plain_eml, body="Replaced.\n")
        assert "Body replaced" in result["data"]["message"]
        assert read_message(plain_eml).get_content() == "Replaced.\n"

    def test_set_body_keeps_attachments(self, multipart_eml):
        run("set_body", multipart_eml, body="<p>New</p>", format="html")
        message = read_message(multipart_eml)
        assert "<p>New</p>" in message.get_body(preferencelist=("html",)).get_content()
        assert "Hello Charles" in message.get_body(preferencelist=("plain",)).get_content()
        assert len(list(message.iter_attachments())) == 2

    def test_set_body_requires_body(self, plain_eml):
        result = run("set_body", plain_eml)
        assert result["error"] is True
        assert result["kind"] == "invalid_input"
        assert result["parameter"] == "body"

    def test_invalid_format(self, plain_eml):
        result = run("get_body", plain_eml, format="rtf")
        assert result["kind"] == "invalid_input"
        assert result["parameter"] == "format"


class TestHeaders:

    def test_all_headers(self, plain_eml):
        result = run("get_headers", plain_eml)
        names = [h["name"] for h in result["data"]["headers"]]
        assert names[:5] == ["From", "To", "Cc", "Subject", "X-Project"]
        assert result["data"]["count"] == len(names)

    def test_one_header(self, plain_eml):
        result = run("get_headers", plain_eml, name="x-project")
        assert result["data"] == {"name": "x-project", "values": ["analytical-engine"]}

    def test_missing_header_is_empty(self, plain_eml):
        result = run("get_headers", plain_eml, name="X-Missing")
        assert result["data"]["values"] == []

    def test_set_header_replaces(self, plain_eml):
        result = run("set_header", plain_eml, name="X-Project", value="difference-engine")
        assert result["data"]["message"] == "Header 'X-Project' replaced"
        assert read_message(plain_eml).get_all("X-Project") == ["difference-engine"]

    def test_set_header_adds(self, plain_eml):
        result = run("set_header", plain_eml, name="X-New", value="1")
        assert result["data"]["message"] == "Header 'X-New' added"

    def test_structural_header_refused(self, plain_eml):
        result = run("set_header", plain_eml, name="Content-Type", value="text/html")
        assert result["kind"] == "invalid_input"
        assert "managed by the message structure" in result["message"]

    def test_remove_header(self, plain_eml):
        run("remove_header", plain_eml, name="X-Project")
        assert "X-Project" not in read_message(plain_eml)

    def test_remove_absent_header_does_not_write(self, plain_eml, tmp_path: Path):
        target = tmp_path / "out.eml"
        result = run("remove_header", plain_eml, str(target), name="X-Missing")
        assert "nothing removed" in result["data"]["message"]
        assert not target.exists()
        assert result["output"]["path"] == plain_eml


class TestSubjectAndRecipients:

    def test_get_subject(self, plain_eml):
        assert run("get_subject", plain_eml)["data"] == {"subject": "Engine notes"}

    def test_set_subject_to_output_path(self, plain_eml, tmp_path: Path):
        target = str(tmp_path / "copy" / "renamed.eml")
        result = run("set_subject", plain_eml, target, subject="Revised notes")
        assert result["output"]["path"] == target
        assert read_message(target)["Subject"] == "Revised notes"
        assert read_message(plain_eml)["Subject"] == "Engine notes"

    def test_get_recipients(self, plain_eml):
        data = run("get_recipients", plain_eml)["data"]
        assert data["to"] == [
            {"address": "charles@example.com", "display_name": "Charles Babbage"},
            {"address": "grace@example.com"},
        ]
        assert data["cc"] == [{"address": "team@example.com"}]
        assert data["bcc"] == []

    def test_set_recipients_touches_only_given_fields(self, plain_eml):
        run("set_recipients", plain_eml, to=["Alan Turing <alan@example.com>"], cc=[])
        message = read_message(plain_eml)
        assert message["To"].addresses[0].addr_spec == "alan@example.com"
        assert "Cc" not in message
        assert message["From"].addresses[0].addr_spec == "ada@example.com"

    def test_set_recipients_needs_a_field(self, plain_eml):
        result = run("set_recipients", plain_eml)
        assert result["kind"] == "invalid_input"

    def test_recipients_must_be_list(self, plain_eml):
        result = run("set_recipients", plain_eml, to="alan@example.com")
        assert result["parameter"] == "to"


class TestToolErrors:

    def test_unknown_operation(self, plain_eml):
        result = run("translate", plain_eml)
        assert result["kind"] == "not_found"
        assert "get_body" in result["available"]

    def test_operation_name_case_insensitive(self, plain_eml):
        assert run("GET_SUBJECT", plain_eml)["data"]["subject"] == "Engine notes"

    def test_missing_file(self, tmp_path: Path):
        result = run("get_body", str(tmp_path / "nope.eml"))
        assert result["kind"] == "invalid_input"
        assert result["parameter"] == "path"

    @pytest.mark.parametrize("path", [None, ""])
    def test_path_required(self, path):
        result = do_email_content("get_body", path)
        assert result["parameter"] == "path"
