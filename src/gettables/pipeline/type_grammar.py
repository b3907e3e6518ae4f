"""Type Grammar - Parse ``$a \\times b \\times code$`` type expressions.

    type     := (term "\\times")* basic
    term     := quantity ["*"]
    quantity := integer | named limit

A term that is neither an integer nor a known limit is kept as raw text. An
unknown basic-type code makes the whole type unparseable; the caller keeps
the raw text and a diagnostic is reported.
"""

import logging
import re
from typing import Optional

from gettables.models import BasicType, NamedLimit, Quantity, QuantityTerm, StateType

logger = logging.getLogger(__name__)

TIMES_PATTERN = re.compile(r"\s*\\times(?![A-Za-z])\s*")
INTEGER_PATTERN = re.compile(r"^\{?(\d+)\}?$")
LIMIT_REFERENCE_PATTERN = re.compile(r"^(?:\\gl[rc]\s*\{([A-Z0-9_]+)\}|([A-Z][A-Z0-9_]+))$")

K_VALUED_INTEGER_PATTERN = re.compile(r"^Z_\{?(\d+)(\*?)\}?(\*?)$")
K_VALUED_FLOAT_PATTERN = re.compile(r"^R_\{?(\d+)\}?$")
FLOAT_TUPLE_PATTERN = re.compile(r"^R\^\{?(\d+)\}?$")

# Short macros some documents define for limits
LIMIT_MACROS = {
    "\\maxlights": NamedLimit.MAX_LIGHTS,
    "\\maxclipplanes": NamedLimit.MAX_CLIP_PLANES,
    "\\maxtexunits": NamedLimit.MAX_TEXTURE_UNITS,
    "\\maxtexcoords": NamedLimit.MAX_TEXTURE_COORDS,
    "\\maxattribs": NamedLimit.MAX_VERTEX_ATTRIBS,
    "\\maxdrawbuffers": NamedLimit.MAX_DRAW_BUFFERS,
    "\\maxviewports": NamedLimit.MAX_VIEWPORTS,
}

BASIC_TYPE_CODES = {
    "B": BasicType.BOOLEAN,
    "BMU": BasicType.BMU,
    "C": BasicType.COLOR,
    "\\Enum": BasicType.ENUM,
    "E": BasicType.ENUM,
    "CI": BasicType.COLOR_INDEX,
    "T": BasicType.TEX_COORDS,
    "N": BasicType.NORMAL_COORDS,
    "V": BasicType.VERTEX,
    "Z": BasicType.INTEGER,
    "Z+": BasicType.NON_NEGATIVE_INTEGER,
    "Z^+": BasicType.NON_NEGATIVE_INTEGER,
    "Z^{+}": BasicType.NON_NEGATIVE_INTEGER,
    "\\Zplus": BasicType.NON_NEGATIVE_INTEGER,
    "R": BasicType.FLOAT,
    "R^+": BasicType.NON_NEGATIVE_FLOAT,
    "R^{+}": BasicType.NON_NEGATIVE_FLOAT,
    "R^{[0,1]}": BasicType.ZERO_ONE_FLOAT,
    "P": BasicType.POSITION,
    "D": BasicType.DIRECTION,
    "M^4": BasicType.MATRIX,
    "M^{4}": BasicType.MATRIX,
    "S": BasicType.STRING,
    "I": BasicType.IMAGE,
    "A": BasicType.ATTRIBUTE_STACK_ENTRY,
    "Y": BasicType.POINTER,
    "\\glt{char}": BasicType.CHAR,
}


def unwrap_math(raw: str) -> tuple[str, bool]:
    """Strip ``$...$`` delimiters, reporting whether they were present."""
    raw = raw.strip()
    if len(raw) >= 2 and raw.startswith("$") and raw.endswith("$"):
        return raw[1:-1].strip(), True
    return raw, False


def split_type(raw: str) -> tuple[list[str], str, bool]:
    """Split a type into its term texts and basic-type code text.

    Returns:
        Tuple of (terms, basic code, whether math delimiters were present).
    """
    inner, wrapped = unwrap_math(raw)
    parts = TIMES_PATTERN.split(inner)
    return parts[:-1], parts[-1], wrapped


def join_type(terms: list[str], basic: str, wrapped: bool = True) -> str:
    """Inverse of split_type."""
    inner = " \\times ".join(terms + [basic])
    return f"${inner}$" if wrapped else inner


def pop_leading_term(raw: str) -> tuple[Optional[str], str]:
    """Remove the first quantity term of a raw type.

    Returns:
        Tuple of (term text or None if there is none, remaining raw type).
    """
    terms, basic, wrapped = split_type(raw)
    if not terms:
        return None, raw
    return terms[0], join_type(terms[1:], basic, wrapped)


def divide_leading_term(raw: str, divisor: int) -> str:
    """Divide a literal leading quantity by ``divisor``.

    A quotient of 1 drops the term. Types whose leading term is not a
    literal multiple of the divisor are returned unchanged.
    """
    terms, basic, wrapped = split_type(raw)
    if not terms:
        return raw
    match = INTEGER_PATTERN.match(terms[0].strip())
    if match is None or int(match.group(1)) % divisor != 0:
        logger.debug("Leading term of %r is not divisible by %d", raw, divisor)
        return raw
    quotient = int(match.group(1)) // divisor
    rest = terms[1:] if quotient == 1 else [str(quotient)] + terms[1:]
    return join_type(rest, basic, wrapped)


def parse_quantity(text: str) -> Optional[Quantity]:
    """Parse a literal integer or a known named limit."""
    text = text.strip()
    if text in LIMIT_MACROS:
        return Quantity.named(LIMIT_MACROS[text])
    match = LIMIT_REFERENCE_PATTERN.match(text)
    if match:
        name = match.group(1) or match.group(2)
        try:
            return Quantity.named(NamedLimit(name))
        except ValueError:
            return None
    match = INTEGER_PATTERN.match(text)
    if match:
        return Quantity.literal(int(match.group(1)))
    return None


def parse_quantity_term(text: str) -> QuantityTerm:
    """Parse one term, keeping the raw text if the quantity is unknown."""
    text = text.strip()
    minimum = text.endswith("*")
    if minimum:
        text = text[:-1].rstrip()
    quantity = parse_quantity(text)
    if quantity is None:
        logger.debug("Keeping unparsed quantity term %r", text)
        return QuantityTerm(quantity=text, minimum=minimum)
    return QuantityTerm(quantity=quantity, minimum=minimum)


def parse_basic_type(code: str) -> Optional[StateType]:
    """Parse a basic-type code into a StateType without quantity terms."""
    code = re.sub(r"\s+", "", code)
    if code in BASIC_TYPE_CODES:
        return StateType(basic=BASIC_TYPE_CODES[code])

    match = K_VALUED_INTEGER_PATTERN.match(code)
    if match:
        minimum = bool(match.group(2) or match.group(3))
        return StateType(
            basic=BasicType.K_VALUED_INTEGER,
            k=int(match.group(1)),
            k_minimum=minimum,
        )
    match = K_VALUED_FLOAT_PATTERN.match(code)
    if match:
        return StateType(basic=BasicType.K_VALUED_FLOAT, k=int(match.group(1)))
    match = FLOAT_TUPLE_PATTERN.match(code)
    if match:
        return StateType(basic=BasicType.FLOAT_TUPLE, k=int(match.group(1)))
    return None


def parse_type(raw: str, diagnostics: Optional[list[str]] = None) -> Optional[StateType]:
    """Parse a full type expression.

    Args:
        raw: Type cell text, normally wrapped in ``$...$``.
        diagnostics: Collects a message if the basic type is unknown.

    Returns:
        StateType, or None if the basic-type code is not recognised.
    """
    terms, code, _ = split_type(raw)
    state_type = parse_basic_type(code)
    if state_type is None:
        message = f"Couldn't parse basic type {code!r} in {raw!r}"
        logger.warning(message)
        if diagnostics is not None:
            diagnostics.append(message)
        return None
    state_type.quantities = [parse_quantity_term(term) for term in terms]
    return state_type
