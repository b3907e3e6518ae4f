"""Render Stage - Turn extraction results into an HTML page.

One section per document variant, one table per state table. Conditional
rows are coloured by profile, absent fields show as an em dash.
"""

import html
import logging
from pathlib import Path
from typing import Optional, Union

from gettables.models import BasicType, Condition, Entry, ExtractionResult, StateType, Table

logger = logging.getLogger(__name__)

ABSENT = "—"
FOOTNOTE_SYMBOLS = ("†", "‡")
CONDITION_COLORS = {
    Condition.CORE: "lightgreen",
    Condition.COMPATIBILITY: "pink",
    Condition.IMAGING: "lightblue",
}
COLUMNS = (
    "Get value",
    "Type",
    "Get command",
    "Initial value",
    "Description",
    "Attribute",
)

_BASIC_MARKUP = {
    BasicType.NON_NEGATIVE_INTEGER: "Z<sup>+</sup>",
    BasicType.NON_NEGATIVE_FLOAT: "R<sup>+</sup>",
    BasicType.ZERO_ONE_FLOAT: "R<sup>[0,1]</sup>",
    BasicType.MATRIX: "M<sup>4</sup>",
}


def render_basic_type(state_type: StateType) -> str:
    """Basic-type code as an abbreviation with its full name as title."""
    basic = state_type.basic
    if basic == BasicType.CHAR:
        return "<code>char</code>"
    if basic == BasicType.K_VALUED_INTEGER:
        markup = f"Z<sub>{state_type.k}{'*' if state_type.k_minimum else ''}</sub>"
    elif basic == BasicType.FLOAT_TUPLE:
        markup = f"R<sup>{state_type.k}</sup>"
    elif basic == BasicType.K_VALUED_FLOAT:
        markup = f"R<sub>{state_type.k}</sub>"
    else:
        markup = _BASIC_MARKUP.get(basic, basic.value)
    return f'<abbr title="{html.escape(state_type.basic_title)}">{markup}</abbr>'


def render_type(value_type: Optional[Union[StateType, str]]) -> str:
    """Type as "<code>n</code> × code", or escaped raw text."""
    if value_type is None:
        return ABSENT
    if isinstance(value_type, str):
        return html.escape(value_type)
    parts = [f"<code>{html.escape(str(term))}</code>" for term in value_type.quantities]
    parts.append(render_basic_type(value_type))
    return " × ".join(parts)


class HTMLRenderer:
    """Renders extraction results as a single HTML document."""

    def __init__(self, title: str = "OpenGL state table entries"):
        self.title = title

    def _footnote_ref(self, table: Table, index: Optional[int]) -> str:
        if index is None:
            return ""
        return (
            f'<sup><a href="#{html.escape(table.label)}-fn{index}">'
            f"{FOOTNOTE_SYMBOLS[index]}</a></sup>"
        )

    def _cell(self, text: Optional[str]) -> str:
        return ABSENT if text is None else html.escape(text)

    def render_get_value(self, entry: Entry) -> str:
        text = self._cell(entry.get_value)
        if entry.alternate_get_value:
            text += f" ({html.escape(entry.alternate_get_value)})"
        if entry.series is not None:
            text += f" + <i>i</i>, <i>i</i> &lt; {html.escape(str(entry.series))}"
        return text

    def render_entry(self, table: Table, entry: Entry) -> list[str]:
        color = CONDITION_COLORS.get(entry.condition)
        lines = [f'<tr style="background-color:{color}">' if color else "<tr>"]
        cells = [
            self.render_get_value(entry),
            render_type(entry.value_type) + self._footnote_ref(table, entry.type_footnote),
            self._cell(entry.get_command),
            self._cell(entry.initial_value)
            + self._footnote_ref(table, entry.initial_value_footnote),
            html.escape(entry.description)
            + self._footnote_ref(table, entry.description_footnote),
            self._cell(entry.attribute),
        ]
        lines.extend(f"<td>{cell}</td>" for cell in cells)
        lines.append("</tr>")
        return lines

    def render_table(self, table: Table) -> str:
        """Render one state table with its footnotes."""
        lines = [f'<h2 id="{html.escape(table.label)}">{html.escape(table.title)}</h2>']
        if table.caption:
            lines.append(f"<p>{html.escape(table.caption)}</p>")
        lines.append("<table>")
        lines.append("<thead>")
        lines.extend(f"<th>{column}</th>" for column in COLUMNS)
        lines.append("</thead>")
        lines.append("<tbody>")
        for entry in table.entries:
            lines.extend(self.render_entry(table, entry))
        lines.append("</tbody>")
        lines.append("</table>")
        for index, footnote in enumerate(table.footnotes):
            lines.append(
                f'<p id="{html.escape(table.label)}-fn{index}">'
                f"{FOOTNOTE_SYMBOLS[index]} {html.escape(footnote)}</p>"
            )
        return "\n".join(lines)

    def render(self, results: list[ExtractionResult]) -> str:
        """Render all variants into one page."""
        lines = [
            "<!DOCTYPE html>",
            "<html>",
            f"<head><meta charset=\"utf-8\"><title>{html.escape(self.title)}</title></head>",
            "<body>",
        ]
        for result in results:
            lines.append(f"<h1><tt>{result.variant.value}</tt> state table entries</h1>")
            for table in result.tables:
                lines.append(self.render_table(table))
        lines.append("</body>")
        lines.append("</html>")
        return "\n".join(lines) + "\n"

    def write(self, results: list[ExtractionResult], output_path: Path) -> Path:
        """Render to a file, creating parent directories as needed."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(results), encoding="utf-8")
        logger.info("Wrote %s", output_path)
        return output_path
