import pytest

from schema_ir.ir import (
    ROOT_ID,
    RootSchema,
    SchemaItem,
    SchemaKind,
    clone_item,
    create_default_item,
    create_root_schema,
    find_item_by_id,
    get_ref_targets,
    index_items,
    is_container_type,
    is_leaf_type,
    iter_items,
)


def make_tree():
    street = SchemaItem(id="street", name="street")
    address = SchemaItem(id="address", name="address", kind=SchemaKind.OBJECT, fields=[street])
    text = SchemaItem(id="text", name="text")
    number = SchemaItem(id="number", name="number", kind=SchemaKind.NUMBER)
    contact = SchemaItem(id="contact", name="contact", kind=SchemaKind.UNION, options=[text, number])
    back = SchemaItem(id="back", name="back", lazy_ref="address")
    return RootSchema(fields=[address, contact, back])


class TestFactories:
    def test_default_item_shapes(self):
        obj = create_default_item(SchemaKind.OBJECT, "thing")
        assert obj.fields == [] and obj.options is None
        assert obj.name == "thing" and obj.required and not obj.is_array
        assert obj.description == ""

        union = create_default_item(SchemaKind.UNION)
        assert union.options == [] and union.fields is None

        literal = create_default_item(SchemaKind.LITERAL)
        assert literal.literal_value == ""

        string = create_default_item(SchemaKind.STRING)
        assert string.fields is None and string.options is None and string.literal_value is None

    def test_ids_are_unique(self):
        ids = {create_default_item(SchemaKind.STRING).id for _ in range(50)}
        assert len(ids) == 50
        assert all(i.startswith("item_") for i in ids)

    def test_root_schema(self):
        root = create_root_schema()
        assert root.id == ROOT_ID
        assert root.kind == SchemaKind.OBJECT
        assert root.fields == []

    def test_kind_predicates(self):
        assert is_container_type(create_default_item(SchemaKind.OBJECT))
        assert is_container_type(create_default_item(SchemaKind.UNION))
        assert is_leaf_type(create_default_item(SchemaKind.DATETIME))


class TestTraversal:
    def test_iter_items_is_preorder(self):
        assert [item.id for item in iter_items(make_tree())] == ["address", "street", "contact", "text", "number", "back"]

    def test_find_item_by_id(self):
        root = make_tree()
        assert find_item_by_id(root, "number").kind == SchemaKind.NUMBER
        assert find_item_by_id(root, "missing") is None

    def test_root_never_matches(self):
        root = make_tree()
        assert find_item_by_id(root, ROOT_ID) is None
        root.fields.append(SchemaItem(id=ROOT_ID, name="impostor"))
        assert find_item_by_id(root, ROOT_ID) is None

    def test_ref_targets_are_containers(self):
        assert [item.id for item in get_ref_targets(make_tree())] == ["address", "contact"]

    def test_index_first_duplicate_wins(self):
        root = make_tree()
        root.fields.append(SchemaItem(id="street", name="other"))
        assert index_items(root)["street"].name == "street"
        assert find_item_by_id(root, "street").name == "street"


class TestClone:
    def test_clone_gets_fresh_ids(self):
        root = make_tree()
        original = root.fields[0]
        copy = clone_item(original)

        assert copy.id != original.id
        assert copy.fields[0].id != original.fields[0].id
        assert copy.name == original.name and copy.kind == original.kind
        assert copy.fields[0].name == "street"

    def test_clone_is_deep(self):
        item = SchemaItem(name="tags", is_array=True, has_default=True, default_value=["a"])
        copy = clone_item(item)
        copy.default_value.append("b")
        assert item.default_value == ["a"]

    def test_clone_keeps_lazy_reference(self):
        lazy = make_tree().fields[2]
        assert clone_item(lazy).lazy_ref == "address"

    @pytest.mark.parametrize("index", [0, 1, 2])
    def test_clone_is_idempotent(self, index):
        item = make_tree().fields[index]
        once = clone_item(item)
        twice = clone_item(once)

        def strip(node):
            return (
                node.name,
                node.kind,
                node.required,
                node.is_array,
                node.lazy_ref,
                [strip(child) for child in node.children()],
            )

        assert strip(once) == strip(twice) == strip(item)
