"""Pipeline stages for state table extraction.

Stages, in the order a document flows through them:
1. stage_read - Split the source into header, defs and body
2. constants - Constant table from the defs region
3. dispatch - Scan the body for tables, conditionals and entries
4. expand - Expand parameterised rows
5. normalize - Clean cells into Entries (type_grammar parses types)
6. dedup - Merge Core/Compatibility twins
7. stage_render - HTML output

The orchestrator runs stages 1-6 per document.
"""

from .cells import read_cell
from .conditions import ConditionTracker
from .constants import build_constants, substitute_constants
from .dedup import deduplicate, find_merge_target, insert_entry
from .dispatch import RawRow, scan_body
from .expand import expand_row
from .normalize import normalize_row, take_footnote_definition
from .orchestrator import extract_all, extract_file, extract_tables, extract_variant
from .stage_read import read_document, split_document
from .stage_render import HTMLRenderer
from .type_grammar import parse_type

__all__ = [
    # Reading
    "read_document",
    "split_document",
    "read_cell",
    "build_constants",
    "substitute_constants",
    # Scanning
    "ConditionTracker",
    "RawRow",
    "scan_body",
    # Rows
    "expand_row",
    "normalize_row",
    "take_footnote_definition",
    "parse_type",
    "deduplicate",
    "find_merge_target",
    "insert_entry",
    # Orchestration
    "extract_all",
    "extract_file",
    "extract_tables",
    "extract_variant",
    # Output
    "HTMLRenderer",
]
