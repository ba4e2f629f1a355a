import json
from pathlib import Path

import pytest

from schema_ir.exceptions import IRDecodeError
from schema_ir.ir import SchemaItem, SchemaKind, dumps_root, item_from_dict, item_to_dict, load_root, root_from_dict

TEST_DATA = Path(__file__).parent / "test_data"


class TestDecode:
    def test_load_person(self):
        root = load_root(TEST_DATA / "person.json")
        names = [f.name for f in root.fields]
        assert names == ["name", "age", "born", "tags", "address", "contact"]

        age = root.fields[1]
        assert age.kind == SchemaKind.NUMBER
        assert not age.required
        assert age.has_default and age.default_value == 0

        address = root.fields[4]
        assert address.description == "Postal address"
        assert address.fields[1].literal_value == "FR"

        contact = root.fields[5]
        assert [o.kind for o in contact.options] == [SchemaKind.STRING, SchemaKind.NUMBER]

    def test_missing_default_key_is_not_a_default(self):
        item = item_from_dict({"name": "x", "type": "string"})
        assert not item.has_default
        assert item.required and not item.is_array

    def test_null_default_is_a_default(self):
        item = item_from_dict({"name": "x", "type": "string", "default": None})
        assert item.has_default and item.default_value is None

    def test_lazy_reference(self):
        item = item_from_dict({"name": "x", "type": "object", "lazy": {"refId": "item_1"}})
        assert item.lazy_ref == "item_1"

    def test_unknown_kind_is_kept(self):
        item = item_from_dict({"name": "x", "type": "bytes"})
        assert item.kind == "bytes"
        assert item_to_dict(item)["type"] == "bytes"

    @pytest.mark.parametrize(
        "document, path",
        [
            ([], "$"),
            ({"fields": {}}, "$"),
            ({"fields": [1]}, "$.fields[0]"),
            ({"fields": [{"type": "union", "options": [{"lazy": "x"}]}]}, "$.fields[0].options[0]"),
        ],
    )
    def test_decode_errors_carry_path(self, document, path):
        with pytest.raises(IRDecodeError) as excinfo:
            root_from_dict(document)
        assert excinfo.value.path == path

    def test_invalid_json_file(self, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{", encoding="utf-8")
        with pytest.raises(IRDecodeError):
            load_root(broken)


class TestEncode:
    def test_camel_case_keys(self):
        item = SchemaItem(id="a", name="tags", is_array=True, lazy_ref="b", literal_value="x")
        d = item_to_dict(item)
        assert d["isArray"] is True
        assert d["lazy"] == {"refId": "b"}
        assert d["literalValue"] == "x"
        assert "default" not in d

    def test_document_survives_a_round_trip(self):
        document = json.loads((TEST_DATA / "person.json").read_text(encoding="utf-8"))
        assert json.loads(dumps_root(root_from_dict(document))) == document
