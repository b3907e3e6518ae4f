"""Models for the state table extractor.

All models are Pydantic models and support JSON serialization, so an
extraction result can be handed to any renderer.

Model Hierarchy:
- SourceDocument → ExtractionResult → Tables → Entries
- Entry → StateType → QuantityTerms → Quantity
"""

from .base import (
    BaseStateModel,
    Condition,
    Variant,
)
from .document import (
    ExtractionResult,
    SourceDocument,
)
from .table import (
    MAX_FOOTNOTES,
    Entry,
    Table,
)
from .value_type import (
    BASIC_TYPE_TITLES,
    BasicType,
    NamedLimit,
    Quantity,
    QuantityTerm,
    StateType,
)

__all__ = [
    # Base types
    "BaseStateModel",
    "Condition",
    "Variant",
    # Document
    "ExtractionResult",
    "SourceDocument",
    # Table
    "MAX_FOOTNOTES",
    "Entry",
    "Table",
    # Types
    "BASIC_TYPE_TITLES",
    "BasicType",
    "NamedLimit",
    "Quantity",
    "QuantityTerm",
    "StateType",
]
