"""Error taxonomy for the JavaScript to PFA translator."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Every way a translation can fail.

    Each recursion point of the translator maps an unexpected AST shape to one
    of these kinds, so callers can tell an unsupported operator apart from a
    malformed top-level field without parsing messages.
    """

    MALFORMED_AST = "MalformedAst"
    UNSUPPORTED_LITERAL_KIND = "UnsupportedLiteralKind"
    INVALID_OBJECT_KEY = "InvalidObjectKey"
    INVALID_FUNCTION_NAME = "InvalidFunctionName"
    UNRECOGNIZED_MEMBER_EXPRESSION = "UnrecognizedMemberExpression"
    UNSUPPORTED_OPERATOR = "UnsupportedOperator"
    ARITY_ERROR = "ArityError"
    INVALID_STATE_ACCESS = "InvalidStateAccess"
    INVALID_CONSTRUCTOR_FORM = "InvalidConstructorForm"
    INVALID_DECLARATION_TARGET = "InvalidDeclarationTarget"
    UNSUPPORTED_UPDATE_TARGET = "UnsupportedUpdateTarget"
    INVALID_COMPOUND_ASSIGNMENT = "InvalidCompoundAssignment"
    INVALID_ASSIGNMENT_FORM = "InvalidAssignmentForm"
    INVALID_FUNCTION_DEFINITION = "InvalidFunctionDefinition"
    UNSUPPORTED_CONSTRUCT = "UnsupportedConstruct"
    INVALID_FOR_INIT = "InvalidForInit"
    INVALID_FOR_STEP = "InvalidForStep"
    INVALID_FOR_IN_TARGET = "InvalidForInTarget"
    INVALID_THROW_FORM = "InvalidThrowForm"
    UNRECOGNIZED_STATEMENT = "UnrecognizedStatement"
    INVALID_SLOT_DECLARATION = "InvalidSlotDeclaration"
    INVALID_TOP_LEVEL_STATEMENT = "InvalidTopLevelStatement"
    UNRECOGNIZED_FIELD = "UnrecognizedField"
    INVALID_FIELD_VALUE = "InvalidFieldValue"
    DUPLICATE_FIELD = "DuplicateField"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"


class TranslationError(RuntimeError):
    """Structured translation error that includes source location information."""

    def __init__(self, kind: ErrorKind, message: str, location: Optional[str] = None):
        text = f"{kind.value}: {message}"
        if location:
            text += f" ({location})"
        super().__init__(text)
        self.kind = kind
        self.message = message
        self.location = location

    def to_dict(self) -> dict[str, Optional[str]]:
        return {"kind": self.kind.value, "message": self.message, "location": self.location}


__all__ = ["ErrorKind", "TranslationError"]
