"""Orchestrator - Run the extraction stages over one or more documents.

Flow per document:
1. Build constants from the defs region
2. Scan the body for tables, conditionals and entries
3. Expand each raw row into concrete rows
4. Normalize each concrete row into an Entry
5. Insert it into the current table, merging profile twins

Documents are independent of each other, so several can be extracted in
parallel.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from gettables.config import Settings, settings as default_settings
from gettables.errors import ParseError
from gettables.models import ExtractionResult, SourceDocument, Table, Variant
from gettables.pipeline.conditions import ConditionTracker
from gettables.pipeline.constants import build_constants
from gettables.pipeline.dedup import insert_entry
from gettables.pipeline.directory import OpenedTable
from gettables.pipeline.dispatch import RawRow, scan_body
from gettables.pipeline.expand import expand_row
from gettables.pipeline.normalize import normalize_row, take_footnote_definition
from gettables.pipeline.stage_read import read_document

logger = logging.getLogger(__name__)


@dataclass
class ScanContext:
    """State threaded through the scan of one document body."""

    variant: Variant
    constants: dict[str, str]
    tracker: ConditionTracker = field(default_factory=ConditionTracker)
    tables: list[Table] = field(default_factory=list)
    table: Optional[Table] = None
    caption_footnotes: bool = False
    diagnostics: list[str] = field(default_factory=list)

    def open_table(self, opened: OpenedTable) -> None:
        self.table = opened.table
        self.caption_footnotes = opened.caption_footnotes
        self.tables.append(opened.table)

    def add_row(self, row: RawRow) -> None:
        """Expand, normalize and insert one raw row into the current table."""
        if self.table is None:
            raise ParseError(f"Entry {row.get_value!r} appears before any table")
        row, footnote = take_footnote_definition(row, self.table, self.caption_footnotes)
        for concrete in expand_row(row, self.variant):
            entry = normalize_row(
                concrete,
                self.variant,
                self.table,
                self.constants,
                caption_footnotes=self.caption_footnotes,
                diagnostics=self.diagnostics,
                footnote=footnote,
            )
            insert_entry(self.table, entry)


def extract_tables(source: SourceDocument, variant: Variant) -> ExtractionResult:
    """Extract all tables of one document.

    Args:
        source: Document split into regions.
        variant: Which document variant this is.

    Returns:
        ExtractionResult with tables in document order.

    Raises:
        GetTablesError: On any malformed construct; there is no partial result.
    """
    variant = Variant(variant)
    context = ScanContext(variant=variant, constants=build_constants(source.defs))

    for event in scan_body(source.body, variant, context.tracker):
        if isinstance(event, OpenedTable):
            context.open_table(event)
        else:
            context.add_row(event)

    result = ExtractionResult(
        variant=variant,
        tables=context.tables,
        diagnostics=context.diagnostics,
        source_path=source.source_path,
    )
    logger.info(
        "Extracted %d tables with %d entries from %s (%d diagnostics)",
        len(result.tables),
        result.entry_count,
        source.source_path or variant.value,
        len(result.diagnostics),
    )
    return result


def extract_file(path: Path, variant: Variant) -> ExtractionResult:
    """Read and extract one table source file."""
    return extract_tables(read_document(path), variant)


def _extract_worker(args: tuple) -> ExtractionResult:
    """Worker function for parallel extraction.

    Args:
        args: Tuple of (source path, variant value)
    """
    path, variant = args
    return extract_file(Path(path), Variant(variant))


def extract_variant(variant: Variant, settings: Settings = None) -> ExtractionResult:
    """Extract the configured source file of one variant."""
    settings = settings or default_settings
    variant = Variant(variant)
    return extract_file(settings.source_path(variant.value), variant)


def extract_all(
    variants: Optional[list[str]] = None,
    settings: Settings = None,
    parallel: bool = False,
) -> list[ExtractionResult]:
    """Extract several variants, returning results in the requested order.

    Args:
        variants: Variant names (default from settings).
        settings: Source location settings (default: global settings).
        parallel: Extract documents in worker processes.
    """
    settings = settings or default_settings
    variants = [Variant(v) for v in (variants or settings.variants)]

    if parallel and len(variants) > 1:
        work_items = [(str(settings.source_path(v.value)), v.value) for v in variants]
        with ProcessPoolExecutor(max_workers=settings.max_workers) as executor:
            return list(executor.map(_extract_worker, work_items))

    return [extract_variant(v, settings) for v in variants]
