# schemagen/__init__.py
from schemagen.core.document import Document, generate
from schemagen.core.errors import InvalidTagError, RecursiveTypeError, SchemaGenError
from schemagen.core.schema.kind import SchemaKind
from schemagen.core.schema.node import SchemaNode
from schemagen.core.schema.tags import Tags
from schemagen.core.schema.walker import TypeWalker, derive

__all__ = [
    "Document",
    "generate",
    "derive",
    "TypeWalker",
    "SchemaNode",
    "SchemaKind",
    "Tags",
    "SchemaGenError",
    "InvalidTagError",
    "RecursiveTypeError",
]
