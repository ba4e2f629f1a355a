"""
Schema builder: turns an IR tree into pydantic models.

Phase 1 walks the tree depth-first and builds an annotation per node
(post-order), registering each under its id. Lazy nodes become plain
validators that look the target up in the build's registry when data is
validated, which is what makes self and mutual references work.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

import structlog
from pydantic import BaseModel, BeforeValidator, Field, PlainValidator, StrictBool, StrictStr, create_model

from ..config import BuilderConfig
from ..ir.nodes import RootSchema, SchemaItem, SchemaKind
from ..utils import field_key, snake_to_pascal_case
from .context import BuildContext, LazyReference
from .validators import ExactLiteral, FiniteNumber, IsoDatetime, UnionBranch

logger = structlog.get_logger(__name__)

SCALAR_TYPES: dict[SchemaKind, Any] = {
    SchemaKind.STRING: StrictStr,
    SchemaKind.NUMBER: FiniteNumber,
    SchemaKind.BOOLEAN: StrictBool,
    SchemaKind.DATETIME: IsoDatetime,
}

LITERAL_VALUE_TYPES = (str, bool, int, float)


class SchemaBuilder:
    """Builds pydantic models from schema IR."""

    def __init__(self, config: BuilderConfig | None = None):
        self.config = config or BuilderConfig()

    def build(self, root: RootSchema) -> type[BaseModel]:
        """
        Build the top-level model for ``root``.

        Every call uses a fresh :class:`BuildContext`, so models from
        different builds never see each other's lazy reference targets.

        Args:
            root: The schema tree

        Returns:
            A pydantic model class validating the root's fields
        """
        context = BuildContext()
        return self._build_model(self.config.root_model_name, root.fields, None, context)

    def build_item(self, item: SchemaItem, context: BuildContext) -> Any:
        """
        Build the annotation for one node and register it under the node's id.

        Wrapping for ``is_array``, ``required`` and defaults is applied by the
        enclosing object (or union), not here.
        """
        if item.lazy_ref:
            annotation = Annotated[Any, PlainValidator(LazyReference(context, item.lazy_ref).validate)]
        else:
            annotation = self._build_shape(item, context)
        context.register(item.id, annotation, lazy_ref=item.lazy_ref)
        return annotation

    def _build_shape(self, item: SchemaItem, context: BuildContext) -> Any:
        kind = item.kind

        if kind in SCALAR_TYPES:
            return self._describe(SCALAR_TYPES[kind], item.description)

        if kind == SchemaKind.LITERAL:
            value = item.literal_value
            if isinstance(value, str):
                annotation = Literal[value]
            elif isinstance(value, LITERAL_VALUE_TYPES):
                annotation = Annotated[Literal[value], BeforeValidator(ExactLiteral(value).validate)]
            else:
                logger.debug("unsupported literal value, using empty string", item_id=item.id, value_type=type(value).__name__)
                annotation = Literal[""]
            return self._describe(annotation, item.description)

        if kind == SchemaKind.OBJECT:
            model_name = snake_to_pascal_case(item.name) or self.config.anonymous_model_name
            return self._build_model(model_name, item.fields or [], item.description, context)

        if kind == SchemaKind.UNION:
            branches = []
            for index, option in enumerate(item.options or []):
                branch = self.build_item(option, context)
                if option.is_array:
                    branch = list[branch]
                branches.append(Annotated[branch, UnionBranch(index)])
            if len(branches) >= 2:
                annotation = Union[tuple(branches)]
            else:
                logger.debug("union needs at least two options, accepting anything", item_id=item.id, options=len(branches))
                annotation = Any
            return self._describe(annotation, item.description)

        logger.debug("unknown schema kind, accepting anything", item_id=item.id, kind=str(kind))
        return self._describe(Any, item.description)

    def _build_field(self, item: SchemaItem, context: BuildContext) -> tuple[Any, bool, Any]:
        """Build a field annotation with array, optional and default applied in that order."""
        annotation = self.build_item(item, context)
        has_default = False
        default = None

        if item.is_array:
            annotation = list[annotation]

        if not item.required:
            annotation = Optional[annotation]
            has_default = True

        if item.has_default:
            has_default = True
            default = item.default_value

        return annotation, has_default, default

    def _build_model(
        self,
        model_name: str,
        fields: list[SchemaItem],
        description: str | None,
        context: BuildContext,
    ) -> type[BaseModel]:
        # Later duplicates replace earlier ones but keep the first position
        shape: dict[str, tuple[Any, bool, Any]] = {}
        for item in fields:
            shape[item.name] = self._build_field(item, context)

        definitions: dict[str, Any] = {}
        for index, (name, (annotation, has_default, default)) in enumerate(shape.items()):
            key = field_key(name, index)
            while key in definitions:
                key = f"{key}_"
            kwargs: dict[str, Any] = {}
            if key != name:
                kwargs["alias"] = name
            if has_default:
                kwargs["default"] = default
            definitions[key] = (annotation, Field(**kwargs))

        return create_model(model_name, __doc__=description or None, **definitions)

    @staticmethod
    def _describe(annotation: Any, description: str | None) -> Any:
        if description:
            return Annotated[annotation, Field(description=description)]
        return annotation


def build(root: RootSchema, config: BuilderConfig | None = None) -> type[BaseModel]:
    """Build a pydantic model for ``root``; see :meth:`SchemaBuilder.build`."""
    return SchemaBuilder(config).build(root)


def validate(model: type[BaseModel], value: Any) -> BaseModel:
    """
    Validate ``value`` against a built model.

    Raises:
        pydantic.ValidationError: Passed through unchanged when ``value`` does not match
    """
    return model.model_validate(value)
