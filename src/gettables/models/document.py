"""Document-level models: the raw source regions and the extraction result."""

from typing import Optional

from pydantic import Field

from .base import BaseStateModel, Variant
from .table import Table


class SourceDocument(BaseStateModel):
    """
    A table source after comment stripping.

    The three regions are separated by divider lines in the file. Only the
    defs and body regions take part in extraction.
    """

    header: str = Field(default="", description="Attribution header")
    defs: str = Field(default="", description="Macro definitions region")
    body: str = Field(..., description="Table and entry macros")
    source_path: Optional[str] = None


class ExtractionResult(BaseStateModel):
    """All tables extracted from one document variant."""

    variant: Variant
    tables: list[Table] = Field(default_factory=list)
    diagnostics: list[str] = Field(
        default_factory=list, description="Non-fatal problems, e.g. unparsed types"
    )
    source_path: Optional[str] = None

    @property
    def entry_count(self) -> int:
        return sum(len(t.entries) for t in self.tables)

    def get_table(self, label: str) -> Optional[Table]:
        """Find a table by its label."""
        for table in self.tables:
            if table.label == label:
                return table
        return None
