"""JSON Schema management."""

from functools import cache
from json import dumps
from typing import TYPE_CHECKING

from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue

from k8sinit.schema import Configuration

if TYPE_CHECKING:
    from pydantic_core import core_schema as core


class SchemaGenerator(GenerateJsonSchema):
    """Custom JSON Schema generator for configuration documents.

    Nullable argument values are documented as argument removals, since
    `null` has its own meaning in extra argument mappings.
    """

    @classmethod
    @cache
    def make_schema(cls, indent: int | str | None = 4) -> str:
        """Generate the JSON Schema for configuration documents.

        Args:
            indent: Indentation level used for JSON formatting.

        Returns:
            Serialized JSON Schema string.
        """
        schema = {
            **Configuration.model_json_schema(
                by_alias=True,
                schema_generator=cls,
            ),
            'title': 'k8sinit',
            'description': 'JSON Schema for k8sinit configuration documents',
            '$schema': cls.schema_dialect,
        }

        return dumps(
            schema,
            ensure_ascii=False,
            sort_keys=True,
            indent=indent,
        )

    def nullable_schema(self, schema: 'core.NullableSchema') -> JsonSchemaValue:
        """Generate JSON Schema for nullable values.

        Args:
            schema: Pydantic core schema describing a nullable value.

        Returns:
            The default nullable schema with a description of `null`.
        """
        json_schema = super().nullable_schema(schema)
        json_schema.setdefault('description', 'Set to null to remove the argument')

        return json_schema
