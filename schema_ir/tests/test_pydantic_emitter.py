import ast
from pathlib import Path
from unittest import TestCase

from pydantic import BaseModel, ValidationError

from schema_ir.config import EmitterConfig, FormatterConfig
from schema_ir.emitter import CodeEmitter
from schema_ir.ir import RootSchema, SchemaItem, SchemaKind, load_root

TEST_DATA = Path(__file__).parent / "test_data"


def emit_python(root: RootSchema, **config) -> str:
    return CodeEmitter(EmitterConfig(language="pydantic", **config)).emit(root)


def load_generated(code: str) -> dict:
    namespace = {"__name__": "generated_schema"}
    exec(compile(code, "<generated>", "exec"), namespace)
    return namespace


class TestPydanticEmitter(TestCase):
    """Python output mirrors the models the builder creates at runtime"""

    def setUp(self):
        self.root = load_root(TEST_DATA / "person.json")
        self.code = emit_python(self.root)

    def test_output_parses(self):
        ast.parse(self.code)

    def test_imports_are_grouped(self):
        lines = self.code.splitlines()
        self.assertEqual(lines[0], "import re")
        self.assertEqual(lines[1], "from datetime import datetime")
        self.assertEqual(lines[2], "from typing import Annotated, Literal, Optional, Union")
        self.assertEqual(lines[3], "")
        self.assertEqual(lines[4], "from pydantic import BaseModel, BeforeValidator, Field, StrictFloat, StrictStr")

    def test_nested_class_comes_first(self):
        self.assertLess(self.code.index("class Address(BaseModel):"), self.code.index("class Schema(BaseModel):"))

    def test_field_lines(self):
        for expected in [
            '    name: Annotated[StrictStr, Field(description="Full name")]',
            "    age: Optional[FiniteFloat] = 0",
            "    born: Optional[IsoDatetime] = None",
            "    tags: Optional[list[StrictStr]] = None",
            "    address: Optional[Address] = None",
            "    contact: Union[StrictStr, FiniteFloat]",
            '    country: Literal["FR"]',
        ]:
            self.assertIn(expected, self.code)

    def test_object_description_is_docstring(self):
        self.assertIn('class Address(BaseModel):\n    """Postal address"""\n\n    street: StrictStr', self.code)

    def test_generated_models_validate(self):
        namespace = load_generated(self.code)
        schema = namespace["Schema"]
        self.assertTrue(issubclass(schema, BaseModel))

        result = schema.model_validate({"name": "Ada", "contact": "ada@example.com", "address": {"street": "Rue", "country": "FR"}})
        self.assertEqual(result.age, 0)
        self.assertEqual(result.address.street, "Rue")

        with self.assertRaises(ValidationError):
            schema.model_validate({"name": 1, "contact": "x"})

    def test_helpers_precede_classes(self):
        self.assertLess(self.code.index("FiniteFloat = Annotated[StrictFloat, Field(allow_inf_nan=False)]"), self.code.index("class Address"))
        self.assertLess(self.code.index("IsoDatetime = Annotated[datetime, BeforeValidator(_iso_datetime)]"), self.code.index("class Address"))
        self.assertNotIn("_exact_literal", self.code)

    def test_generated_scalars_match_builder(self):
        schema = load_generated(self.code)["Schema"]
        result = schema.model_validate({"name": "Ada", "contact": 1, "born": "1815-12-10T00:00:00Z"})
        self.assertEqual(result.born.year, 1815)

        for invalid in [
            {"name": "Ada", "contact": "x", "age": float("inf")},
            {"name": "Ada", "contact": "x", "age": float("nan")},
            {"name": "Ada", "contact": "x", "born": "1815-12-10"},
            {"name": "Ada", "contact": "x", "born": 0},
        ]:
            with self.assertRaises(ValidationError):
                schema.model_validate(invalid)

    def test_root_class_name(self):
        code = emit_python(RootSchema(), type_name="user_form")
        self.assertIn("class UserForm(BaseModel):\n    pass", code)
        self.assertIn("UserForm.model_rebuild()", code)
        self.assertIn("from pydantic import BaseModel\n", code)

    def test_formatter_disabled_by_default(self):
        config = EmitterConfig(language="pydantic")
        self.assertFalse(config.formatter.enabled)
        self.assertEqual(CodeEmitter(config).file_extension, "py")


class TestPydanticEmitterEdgeCases(TestCase):
    def test_aliases_and_defaults(self):
        root = RootSchema(
            fields=[
                SchemaItem(name="first-name"),
                SchemaItem(name="class", kind=SchemaKind.NUMBER, required=False, has_default=True, default_value=3),
                SchemaItem(name="flags", kind=SchemaKind.BOOLEAN, is_array=True, has_default=True, default_value=[True]),
            ]
        )
        code = emit_python(root)
        self.assertIn('    field_0: StrictStr = Field(alias="first-name")', code)
        self.assertIn('    field_1: Optional[FiniteFloat] = Field(default=3, alias="class")', code)
        self.assertIn("    flags: list[StrictBool] = [True]", code)

        schema = load_generated(code)["Schema"]
        result = schema.model_validate({"first-name": "Ada"})
        self.assertEqual(result.model_dump(by_alias=True), {"first-name": "Ada", "class": 3, "flags": [True]})

    def test_class_names_are_unique(self):
        first = SchemaItem(name="item", kind=SchemaKind.OBJECT, fields=[])
        second = SchemaItem(name="Item", kind=SchemaKind.OBJECT, fields=[])
        code = emit_python(RootSchema(fields=[first, SchemaItem(name="box", kind=SchemaKind.OBJECT, fields=[second])]))
        self.assertIn("class Item(BaseModel):", code)
        self.assertIn("class Item2(BaseModel):", code)
        ast.parse(code)

    def test_escaping(self):
        root = RootSchema(
            fields=[
                SchemaItem(name="quote", description='He said "hi"\nand left'),
                SchemaItem(name="doc", kind=SchemaKind.OBJECT, fields=[], description='Ends with a quote "'),
                SchemaItem(name="lit", kind=SchemaKind.LITERAL, literal_value='a"b'),
            ]
        )
        code = emit_python(root)
        namespace = load_generated(code)
        self.assertEqual(namespace["Schema"].model_fields["quote"].description, 'He said "hi"\nand left')
        self.assertEqual(namespace["Doc"].__doc__, 'Ends with a quote "')

    def test_self_reference(self):
        node = SchemaItem(id="node", name="node", kind=SchemaKind.OBJECT, fields=[SchemaItem(name="label")])
        node.fields.append(SchemaItem(name="next", required=False, lazy_ref="node"))
        code = emit_python(RootSchema(fields=[node]))
        self.assertIn('    next: Optional["Node"] = None', code)

        schema = load_generated(code)["Schema"]
        result = schema.model_validate({"node": {"label": "a", "next": {"label": "b"}}})
        self.assertEqual(result.node.next.label, "b")

    def test_reference_to_union_uses_alias(self):
        union = SchemaItem(
            id="u",
            name="choice",
            kind=SchemaKind.UNION,
            options=[SchemaItem(name="s"), SchemaItem(name="n", kind=SchemaKind.NUMBER)],
        )
        code = emit_python(RootSchema(fields=[union, SchemaItem(name="again", lazy_ref="u")]))
        self.assertIn("Choice = Union[StrictStr, FiniteFloat]", code)
        self.assertIn("    choice: Choice", code)
        self.assertIn('    again: "Choice"', code)
        ast.parse(code)

    def test_dangling_reference_and_degenerate_union(self):
        root = RootSchema(
            fields=[
                SchemaItem(name="ghost", lazy_ref="nowhere"),
                SchemaItem(name="single", kind=SchemaKind.UNION, options=[SchemaItem(name="s")]),
                SchemaItem(name="blob", kind="bytes"),
                SchemaItem(name="bad", kind=SchemaKind.LITERAL, literal_value=[1]),
            ]
        )
        code = emit_python(root)
        self.assertIn("    ghost: Any", code)
        self.assertIn("    single: Any", code)
        self.assertIn("    blob: Any", code)
        self.assertIn('    bad: Literal[""]', code)
        ast.parse(code)

    def test_non_string_literals_are_type_exact(self):
        root = RootSchema(
            fields=[
                SchemaItem(name="one", kind=SchemaKind.LITERAL, literal_value=1),
                SchemaItem(name="yes", kind=SchemaKind.LITERAL, literal_value=True),
            ]
        )
        code = emit_python(root)
        self.assertIn("    one: Annotated[Literal[1], BeforeValidator(_exact_literal(1))]", code)
        self.assertIn("    yes: Annotated[Literal[True], BeforeValidator(_exact_literal(True))]", code)
        self.assertIn("def _exact_literal(expected):", code)

        schema = load_generated(code)["Schema"]
        self.assertEqual(schema.model_validate({"one": 1, "yes": True}).one, 1)
        for invalid in [{"one": True, "yes": True}, {"one": 1, "yes": 1}]:
            with self.assertRaises(ValidationError):
                schema.model_validate(invalid)

    def test_unavailable_formatter_leaves_code(self):
        config = {"formatter": FormatterConfig(enabled=True, tool="ruff")}
        code = emit_python(RootSchema(fields=[SchemaItem(name="x")]), **config)
        ast.parse(code)
