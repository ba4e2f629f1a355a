import json
from pathlib import Path

import pytest

from schema_ir.config import EmitterConfig
from schema_ir.emitter import CodeEmitter, emit
from schema_ir.ir import RootSchema, SchemaItem, SchemaKind, load_root, root_from_dict

TEST_DATA = Path(__file__).parent / "test_data"


def load_test_data():
    """Load emission cases from JSON file"""
    with open(TEST_DATA / "zod_emitter_tests.json") as f:
        return json.load(f)


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda tc: tc["name"])
def test_emission_cases(test_case):
    output = emit(root_from_dict({"fields": test_case["fields"]}))

    for expected in test_case["expected_contains"]:
        assert expected in output, f"Expected '{expected}' not found in output:\n{output}"


class TestModuleLayout:
    def test_two_field_object(self):
        root = RootSchema(
            fields=[
                SchemaItem(name="name", kind=SchemaKind.STRING),
                SchemaItem(name="age", kind=SchemaKind.NUMBER, required=False, has_default=True, default_value=0),
            ]
        )
        assert emit(root) == (
            'import { z } from "zod";\n'
            "\n"
            "export const schema = z.object({\n"
            "  name: z.string(),\n"
            "  age: z.number().optional().default(0),\n"
            "});\n"
            "\n"
            "export type Schema = z.infer<typeof schema>;"
        )

    def test_empty_root(self):
        output = emit(RootSchema())
        assert "export const schema = z.object({\n});" in output

    def test_names_are_configurable(self):
        config = EmitterConfig(export_name="userSchema", type_name="User")
        output = CodeEmitter(config).emit(RootSchema())
        assert "export const userSchema = z.object({" in output
        assert "export type User = z.infer<typeof userSchema>;" in output

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            CodeEmitter(EmitterConfig(language="cobol"))


class TestNesting:
    def setup_method(self):
        self.output = emit(load_root(TEST_DATA / "person.json"))

    def test_nested_object_is_indented(self):
        assert (
            "  address: z.object({\n"
            "    street: z.string(),\n"
            '    country: z.literal("FR")\n'
            '  }).describe("Postal address").optional(),\n'
        ) in self.output

    def test_description_precedes_wrappers(self):
        assert '  name: z.string().describe("Full name"),' in self.output
        assert "  tags: z.array(z.string()).optional()," in self.output

    def test_deeper_indentation(self):
        inner = SchemaItem(name="inner", kind=SchemaKind.OBJECT, fields=[SchemaItem(name="leaf")])
        outer = SchemaItem(name="outer", kind=SchemaKind.OBJECT, fields=[inner])
        output = emit(RootSchema(fields=[outer]))
        assert (
            "  outer: z.object({\n"
            "    inner: z.object({\n"
            "      leaf: z.string()\n"
            "    })\n"
            "  }),\n"
        ) in output

    def test_object_union_options_are_described(self):
        option = SchemaItem(name="a", kind=SchemaKind.OBJECT, fields=[], description="A")
        union = SchemaItem(name="u", kind=SchemaKind.UNION, options=[option, SchemaItem(name="b")])
        output = emit(RootSchema(fields=[union]))
        assert '  u: z.union([z.object({}).describe("A"), z.string()]),' in output


class TestLazy:
    def test_reference_uses_target_name(self):
        node = SchemaItem(id="node", name="node", kind=SchemaKind.OBJECT, fields=[])
        node.fields.append(SchemaItem(name="next", required=False, lazy_ref="node"))
        output = emit(RootSchema(fields=[node]))
        assert "    next: z.lazy(() => node).optional()\n" in output

    def test_reference_name_is_made_bindable(self):
        target = SchemaItem(id="t", name="first-entry", kind=SchemaKind.OBJECT, fields=[])
        output = emit(RootSchema(fields=[target, SchemaItem(name="ref", lazy_ref="t")]))
        assert "  ref: z.lazy(() => firstEntry)," in output

    def test_dangling_reference(self):
        output = emit(RootSchema(fields=[SchemaItem(name="ghost", lazy_ref="nowhere", is_array=True)]))
        assert "  ghost: z.array(z.lazy(() => z.unknown()))," in output

    def test_reference_cycle_does_not_hang(self):
        a = SchemaItem(id="a", name="a", lazy_ref="b")
        b = SchemaItem(id="b", name="b", lazy_ref="a")
        output = emit(RootSchema(fields=[a, b]))
        assert "  a: z.lazy(() => z.unknown())," in output
