"""Constant table built from the macro definitions region.

Only argument-less definitions are constants; they are substituted into
initial values later (e.g. ``\\maxlights`` → ``8``).
"""

import logging
import re

from gettables.pipeline.cells import read_cell

logger = logging.getLogger(__name__)

DEFINITION_PATTERN = re.compile(
    r"\\(?:(?:re)?newcommand\*?\s*(?:\{(?P<braced>\\[A-Za-z]+)\}|(?P<bare>\\[A-Za-z]+))"
    r"|def\s*(?P<def>\\[A-Za-z]+))"
)
ARGUMENT_COUNT_PATTERN = re.compile(r"\s*\[\d+\]")
BODY_PATTERN = re.compile(r"\s*\{")


def build_constants(defs: str) -> dict[str, str]:
    """Parse constant definitions into a name → replacement mapping.

    Args:
        defs: Cleaned defs region.

    Returns:
        Mapping from macro spelling (with backslash) to replacement text.
    """
    constants: dict[str, str] = {}
    for match in DEFINITION_PATTERN.finditer(defs):
        name = match.group("braced") or match.group("bare") or match.group("def")
        pos = match.end()
        if ARGUMENT_COUNT_PATTERN.match(defs, pos):
            logger.debug("Skipping parameterised macro %s", name)
            continue
        if not BODY_PATTERN.match(defs, pos):
            logger.debug("Skipping %s without a braced body", name)
            continue
        value, _ = read_cell(defs, pos)
        constants[name] = value
    logger.debug("Built %d constants", len(constants))
    return constants


def substitute_constants(text: str, constants: dict[str, str]) -> str:
    """Replace every constant name in ``text`` once with its value.

    Longer names go first so that a name which prefixes another one
    never clobbers it.
    """
    for name in sorted(constants, key=len, reverse=True):
        if name in text:
            text = text.replace(name, constants[name])
    return text
