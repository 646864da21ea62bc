"""
Schemagen: output schemas derived from result types.

- shapes: polymorphic result declarations
- generator: type -> JSON Schema compilation, envelope assembly
- serializer: result instance -> JSON-ready dict
"""

from .generator import OUTPUT_SCHEMA, OutputSchemaGenerator, get_schema_generator
from .serializer import serialize_result
from .shapes import VariantTable, declare_variants, variant_table_for, variants_of

__all__ = [
    "OUTPUT_SCHEMA",
    "OutputSchemaGenerator",
    "get_schema_generator",
    "serialize_result",
    "VariantTable",
    "declare_variants",
    "variant_table_for",
    "variants_of",
]
