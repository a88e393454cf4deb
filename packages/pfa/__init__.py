"""Translate ESTree JavaScript programs into PFA documents."""

from .errors import ErrorKind, TranslationError
from .locations import has_locations, strip_locations
from .translator import translate, translate_program

__all__ = [
    "ErrorKind",
    "TranslationError",
    "has_locations",
    "strip_locations",
    "translate",
    "translate_program",
]
