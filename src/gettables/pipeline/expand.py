"""Row Expander - Turn compactly parameterised rows into concrete rows.

The sources fold families of near-identical rows into a single templated
row (``TEXTURE_$x$D``, ``MAP1_$x$``, deprecation-conditional descriptions,
...). Each rule below recognises one such shape and returns the concrete
rows it stands for. Rules are tried in order and the first match wins;
its output rows go back through all rules, because one row can combine
several shapes.
"""

import logging
import re
from collections import deque
from dataclasses import replace
from typing import Callable, Optional

from gettables.errors import ParseError, UnsupportedConditionError
from gettables.models import Condition, Variant
from gettables.pipeline.dispatch import RawRow
from gettables.pipeline.footnotes import split_reference
from gettables.pipeline.type_grammar import divide_leading_term

logger = logging.getLogger(__name__)

PLACEHOLDER = "$x$"

DEPRECATION_SPAN = re.compile(
    r"\\ifnum\s*\\specdep\s*=\s*1(?![0-9])(?P<compat>.*?)"
    r"(?:\\else(?![A-Za-z])(?P<core>.*?))?\\fi(?![A-Za-z])",
    re.DOTALL,
)
# "; $x$ is 1, 2, or 3" and similar explanations of the placeholder
PLACEHOLDER_CLAUSE = re.compile(r"\s*[;:,]?\s*\$x\$ is\b.*$", re.DOTALL)
ONE_OF_CLAUSE = re.compile(
    r"\s*[;:,]?\s*\$x\$ is one of\s*(?P<choices>.+?)\s*\.?\s*$", re.DOTALL
)
CHOICE_SEPARATOR = re.compile(r"\s*,\s*(?:(?:or|and)\s+)?|\s+(?:or|and)\s+")
CHOICE_WRAPPER = re.compile(r"^\\gl[rc]\s*\{(.*)\}$")
BIAS_SCALE_PATTERN = re.compile(r"^\$x\$\\?_(SCALE|BIAS)$")
EVALUATOR_PATTERN = re.compile(r"^MAP([12])\\?_\$x\$$")

DIMENSIONS = {
    Variant.GL: ("1", "2", "3"),
    Variant.ES: ("2", "3"),
    Variant.ES11: ("2", "3"),
}
PIXEL_TRANSFER_SECTION = "pixeltransfer"
COLOR_COMPONENTS = ("RED", "GREEN", "BLUE", "ALPHA")
RGBA_PIXEL_MAPS = (
    "PIXEL_MAP_I_TO_R",
    "PIXEL_MAP_I_TO_G",
    "PIXEL_MAP_I_TO_B",
    "PIXEL_MAP_I_TO_A",
    "PIXEL_MAP_R_TO_R",
    "PIXEL_MAP_G_TO_G",
    "PIXEL_MAP_B_TO_B",
    "PIXEL_MAP_A_TO_A",
)
INDEX_PIXEL_MAPS = (
    "PIXEL_MAP_I_TO_I",
    "PIXEL_MAP_S_TO_S",
)
EVALUATOR_TARGETS = (
    "VERTEX_3",
    "VERTEX_4",
    "INDEX",
    "COLOR_4",
    "NORMAL",
    "TEXTURE_COORD_1",
    "TEXTURE_COORD_2",
    "TEXTURE_COORD_3",
    "TEXTURE_COORD_4",
)

ExpansionRule = Callable[[RawRow, Variant], Optional[list[RawRow]]]


def _trim_clause(description: str) -> str:
    """Drop the placeholder explanation, keeping a trailing footnote reference."""
    body, reference = split_reference(description)
    return PLACEHOLDER_CLAUSE.sub("", body) + reference


def _substitute(row: RawRow, value: str, **changes) -> RawRow:
    """Replace the placeholder in get value and description."""
    description = _trim_clause(row.description).replace(PLACEHOLDER, value)
    return replace(
        row,
        get_value=row.get_value.replace(PLACEHOLDER, value),
        description=description,
        **changes,
    )


def expand_deprecation(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """Split a description with an inline compatibility-only span."""
    if not DEPRECATION_SPAN.search(row.description):
        return None

    def branch(condition: Condition) -> RawRow:
        group = "compat" if condition == Condition.COMPATIBILITY else "core"
        description = DEPRECATION_SPAN.sub(
            lambda m: m.group(group) or "", row.description
        )
        return replace(row, condition=condition, description=description)

    if row.condition is None:
        return [branch(Condition.COMPATIBILITY), branch(Condition.CORE)]
    if row.condition == Condition.IMAGING:
        raise UnsupportedConditionError(
            f"Imaging-subset entry {row.get_value!r} has a deprecation-conditional description"
        )
    return [branch(row.condition)]


def expand_dimensions(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """TEXTURE_$x$D and friends: one row per texture dimensionality."""
    if f"{PLACEHOLDER}D" not in row.get_value:
        return None
    dimensions = DIMENSIONS[variant]
    value_type = divide_leading_term(row.value_type, len(dimensions))
    return [_substitute(row, dimension, value_type=value_type) for dimension in dimensions]


def expand_bias_scale(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """$x$_SCALE / $x$_BIAS pixel transfer parameters, one row per component."""
    if not BIAS_SCALE_PATTERN.match(row.get_value):
        return None
    if PIXEL_TRANSFER_SECTION not in row.section:
        return None
    return [_substitute(row, component) for component in COLOR_COMPONENTS]


def expand_pixel_maps(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """GetPixelMap tables, one row per map of the indicated kind."""
    if row.get_value.strip() != PLACEHOLDER or "GetPixelMap" not in row.get_command:
        return None
    if re.search(r"\bRGBA\b", row.description, re.IGNORECASE):
        maps = RGBA_PIXEL_MAPS
    else:
        maps = INDEX_PIXEL_MAPS
    return [_substitute(row, name) for name in maps]


def expand_evaluators(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """MAP1_$x$ / MAP2_$x$ evaluator enables, one row per target."""
    if not EVALUATOR_PATTERN.match(row.get_value):
        return None
    return [_substitute(row, target) for target in EVALUATOR_TARGETS]


def parse_choices(choices: str) -> list[str]:
    """Split "{A, B, or C}" into clean alternatives."""
    choices = choices.strip()
    if choices.startswith("\\{") and choices.endswith("\\}"):
        choices = choices[2:-2]
    elif choices.startswith("{") and choices.endswith("}"):
        choices = choices[1:-1]
    alternatives = []
    for choice in CHOICE_SEPARATOR.split(choices):
        choice = choice.strip()
        if choice.startswith(("or ", "and ")):
            choice = choice.split(" ", 1)[1].strip()
        wrapped = CHOICE_WRAPPER.match(choice)
        if wrapped:
            choice = wrapped.group(1)
        choice = choice.replace("\\_", "_").strip()
        if choice:
            alternatives.append(choice)
    return alternatives


def expand_one_of(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """Any other placeholder explained by "$x$ is one of A, B, or C"."""
    if PLACEHOLDER not in row.get_value:
        return None
    body, reference = split_reference(row.description)
    match = ONE_OF_CLAUSE.search(body)
    if match is None:
        return None
    alternatives = parse_choices(match.group("choices"))
    if not alternatives:
        return None
    description = body[:match.start()] + reference
    return [
        replace(
            row,
            get_value=row.get_value.replace(PLACEHOLDER, alternative),
            description=description.replace(PLACEHOLDER, alternative),
        )
        for alternative in alternatives
    ]


EXPANSION_RULES: list[ExpansionRule] = [
    expand_deprecation,
    expand_dimensions,
    expand_bias_scale,
    expand_pixel_maps,
    expand_evaluators,
    expand_one_of,
]


def apply_first_rule(row: RawRow, variant: Variant) -> Optional[list[RawRow]]:
    """Expand with the first matching rule, or None if no rule matches."""
    for rule in EXPANSION_RULES:
        replacements = rule(row, variant)
        if replacements is not None:
            logger.debug(
                "%s expanded %r into %d rows",
                rule.__name__,
                row.get_value,
                len(replacements),
            )
            return replacements
    return None


def expand_row(row: RawRow, variant: Variant) -> list[RawRow]:
    """Fully expand one raw row into concrete rows, preserving order.

    Raises:
        ParseError: If a rule reproduces its own input.
    """
    pending = deque([row])
    done = []
    while pending:
        current = pending.popleft()
        replacements = apply_first_rule(current, variant)
        if replacements is None:
            done.append(current)
            continue
        if current in replacements:
            raise ParseError(f"Expansion of {current.get_value!r} does not make progress")
        pending.extendleft(reversed(replacements))
    return done
