"""
Stencil - compiled ``${keyword:default}`` placeholder templates.

Templates are tokenized once into an immutable structure of literal and
placeholder segments and rendered repeatedly against keyword mappings.
"""

from stencil.core.exceptions import BuilderConsumedError, StencilError
from stencil.core.template import (
    UNSET_TEXT,
    LiteralToken,
    PlaceholderToken,
    Template,
    TemplateBuilder,
    compile,
    tokenize,
)

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "Template",
    "TemplateBuilder",
    "compile",
    "tokenize",
    "LiteralToken",
    "PlaceholderToken",
    "UNSET_TEXT",
    "StencilError",
    "BuilderConsumedError",
]
