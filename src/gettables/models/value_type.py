"""Structured value types of state variables.

A type is written in the tables as ``$a \\times b \\times code$``: zero or more
quantity terms followed by a basic-type code, read right to left as nested
multiplications (``a`` copies of ``b`` copies of ``code``).
"""

from enum import Enum
from typing import Optional, Union

from pydantic import Field, model_validator

from .base import BaseStateModel


class NamedLimit(str, Enum):
    """Implementation-dependent limits used as quantities."""

    MAX_LIGHTS = "MAX_LIGHTS"
    MAX_CLIP_PLANES = "MAX_CLIP_PLANES"
    MAX_CLIP_DISTANCES = "MAX_CLIP_DISTANCES"
    MAX_TEXTURE_UNITS = "MAX_TEXTURE_UNITS"
    MAX_TEXTURE_COORDS = "MAX_TEXTURE_COORDS"
    MAX_COMBINED_TEXTURE_IMAGE_UNITS = "MAX_COMBINED_TEXTURE_IMAGE_UNITS"
    MAX_VERTEX_ATTRIBS = "MAX_VERTEX_ATTRIBS"
    MAX_VERTEX_ATTRIB_BINDINGS = "MAX_VERTEX_ATTRIB_BINDINGS"
    MAX_DRAW_BUFFERS = "MAX_DRAW_BUFFERS"
    MAX_COLOR_ATTACHMENTS = "MAX_COLOR_ATTACHMENTS"
    MAX_VIEWPORTS = "MAX_VIEWPORTS"
    MAX_SAMPLE_MASK_WORDS = "MAX_SAMPLE_MASK_WORDS"
    MAX_UNIFORM_BUFFER_BINDINGS = "MAX_UNIFORM_BUFFER_BINDINGS"
    MAX_ATOMIC_COUNTER_BUFFER_BINDINGS = "MAX_ATOMIC_COUNTER_BUFFER_BINDINGS"
    MAX_SHADER_STORAGE_BUFFER_BINDINGS = "MAX_SHADER_STORAGE_BUFFER_BINDINGS"
    MAX_TRANSFORM_FEEDBACK_BUFFERS = "MAX_TRANSFORM_FEEDBACK_BUFFERS"
    MAX_IMAGE_UNITS = "MAX_IMAGE_UNITS"


class Quantity(BaseStateModel):
    """A count: either a literal number or a named limit."""

    count: Optional[int] = Field(None, ge=0)
    limit: Optional[NamedLimit] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Quantity":
        if (self.count is None) == (self.limit is None):
            raise ValueError("Quantity needs exactly one of count or limit")
        return self

    @classmethod
    def literal(cls, count: int) -> "Quantity":
        return cls(count=count)

    @classmethod
    def named(cls, limit: NamedLimit) -> "Quantity":
        return cls(limit=limit)

    def to_compact(self) -> str:
        """Quantity in table source notation."""
        if self.count is not None:
            return str(self.count)
        return f"\\glr{{{self.limit.value}}}"

    def __str__(self) -> str:
        if self.count is not None:
            return str(self.count)
        return self.limit.value


class QuantityTerm(BaseStateModel):
    """One ``n ×`` factor of a type, possibly left unparsed."""

    quantity: Union[Quantity, str]
    minimum: bool = Field(default=False, description="Quantity is 'at least' (starred)")

    @property
    def is_parsed(self) -> bool:
        return isinstance(self.quantity, Quantity)

    def to_compact(self) -> str:
        if isinstance(self.quantity, Quantity):
            text = self.quantity.to_compact()
        else:
            text = self.quantity
        return text + ("*" if self.minimum else "")

    def __str__(self) -> str:
        return str(self.quantity) + ("*" if self.minimum else "")


class BasicType(str, Enum):
    """Basic-type codes from the state table conventions."""

    BOOLEAN = "B"
    BMU = "BMU"  # Basic machine units
    COLOR = "C"
    ENUM = "E"  # Not in OpenGL ES 1.1, which uses variations on Z
    COLOR_INDEX = "CI"
    TEX_COORDS = "T"
    NORMAL_COORDS = "N"
    VERTEX = "V"
    INTEGER = "Z"
    NON_NEGATIVE_INTEGER = "Z+"
    K_VALUED_INTEGER = "Zk"
    FLOAT = "R"
    NON_NEGATIVE_FLOAT = "R+"
    ZERO_ONE_FLOAT = "R[0,1]"
    FLOAT_TUPLE = "Rk"  # k-tuple, superscript k
    K_VALUED_FLOAT = "R_k"  # ES 1.1 only, subscript k
    POSITION = "P"
    DIRECTION = "D"
    MATRIX = "M4"
    STRING = "S"
    IMAGE = "I"
    ATTRIBUTE_STACK_ENTRY = "A"
    POINTER = "Y"
    CHAR = "char"  # Not in the table of type codes at all

    @property
    def takes_k(self) -> bool:
        return self in (
            BasicType.K_VALUED_INTEGER,
            BasicType.FLOAT_TUPLE,
            BasicType.K_VALUED_FLOAT,
        )


BASIC_TYPE_TITLES = {
    BasicType.BOOLEAN: "Boolean",
    BasicType.BMU: "Basic machine units",
    BasicType.COLOR: "Color",
    BasicType.ENUM: "Enumerated value",
    BasicType.COLOR_INDEX: "Color index",
    BasicType.TEX_COORDS: "Texture coordinates",
    BasicType.NORMAL_COORDS: "Normal coordinates",
    BasicType.VERTEX: "Vertex",
    BasicType.INTEGER: "Integer",
    BasicType.NON_NEGATIVE_INTEGER: "Non-negative integer",
    BasicType.K_VALUED_INTEGER: "{k}-valued integer",
    BasicType.FLOAT: "Floating-point number",
    BasicType.NON_NEGATIVE_FLOAT: "Non-negative floating-point number",
    BasicType.ZERO_ONE_FLOAT: "Floating-point number in the range [0,1]",
    BasicType.FLOAT_TUPLE: "{k}-tuple of floating-point numbers",
    BasicType.K_VALUED_FLOAT: "{k}-valued floating-point number",
    BasicType.POSITION: "Position",
    BasicType.DIRECTION: "Direction",
    BasicType.MATRIX: "4 × 4 floating-point matrix",
    BasicType.STRING: "Null-terminated string",
    BasicType.IMAGE: "Image",
    BasicType.ATTRIBUTE_STACK_ENTRY: "Attribute stack entry",
    BasicType.POINTER: "Pointer",
    BasicType.CHAR: "char",
}

_COMPACT_CODES = {
    BasicType.ENUM: "\\Enum",
    BasicType.NON_NEGATIVE_INTEGER: "Z^{+}",
    BasicType.NON_NEGATIVE_FLOAT: "R^{+}",
    BasicType.ZERO_ONE_FLOAT: "R^{[0,1]}",
    BasicType.MATRIX: "M^{4}",
    BasicType.CHAR: "\\glt{char}",
}


class StateType(BaseStateModel):
    """
    Parsed type of a state variable.

    ``k`` is only set for the basic types that carry their own embedded
    quantity (k-valued integers and floats, float tuples).
    """

    basic: BasicType
    k: Optional[int] = Field(None, ge=0)
    k_minimum: bool = Field(default=False, description="k is a minimum (Z_{k*})")
    quantities: list[QuantityTerm] = Field(default_factory=list)

    @model_validator(mode="after")
    def _k_matches_basic(self) -> "StateType":
        if self.basic.takes_k != (self.k is not None):
            raise ValueError(f"Basic type {self.basic.value} and k={self.k} disagree")
        if self.k_minimum and self.basic != BasicType.K_VALUED_INTEGER:
            raise ValueError("Only k-valued integers carry a minimum flag")
        return self

    @property
    def basic_title(self) -> str:
        """Human-readable name of the basic type."""
        title = BASIC_TYPE_TITLES[self.basic].format(k=self.k)
        if self.k_minimum:
            title += f" ({self.k} is a minimum)"
        return title

    def basic_code(self) -> str:
        """Basic-type code in table source notation."""
        if self.basic == BasicType.K_VALUED_INTEGER:
            return f"Z_{{{self.k}{'*' if self.k_minimum else ''}}}"
        if self.basic == BasicType.FLOAT_TUPLE:
            return f"R^{{{self.k}}}"
        if self.basic == BasicType.K_VALUED_FLOAT:
            return f"R_{{{self.k}}}"
        return _COMPACT_CODES.get(self.basic, self.basic.value)

    def to_compact(self) -> str:
        """Render back to ``$a \\times b \\times code$``."""
        parts = [term.to_compact() for term in self.quantities]
        parts.append(self.basic_code())
        return "$" + " \\times ".join(parts) + "$"

    def __str__(self) -> str:
        parts = [str(term) for term in self.quantities]
        parts.append(self.basic_code())
        return " × ".join(parts)
