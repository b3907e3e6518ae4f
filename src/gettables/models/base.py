"""Base models and common types for the state table extractor."""

from enum import Enum

from pydantic import BaseModel


class Variant(str, Enum):
    """Document variants sharing the table macro dialect."""

    GL = "gl"  # OpenGL (core and compatibility profiles)
    ES = "es"  # OpenGL ES 2.0 and later
    ES11 = "es11"  # OpenGL ES 1.1


class Condition(str, Enum):
    """Profile an entry is restricted to. Absence means unconditional."""

    CORE = "core"
    COMPATIBILITY = "compatibility"
    IMAGING = "imaging"  # Imaging subset, itself compatibility-only


class BaseStateModel(BaseModel):
    """Base class for all extraction models."""

    class Config:
        extra = "forbid"
        validate_assignment = True
