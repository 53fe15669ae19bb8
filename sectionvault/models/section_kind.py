"""Closed enumeration of section kinds."""

from enum import Enum

from ..exceptions import InvalidKindError


class SectionKind(str, Enum):
    """Named content slots a project can hold one section of."""

    CONTEXT = "CONTEXT"
    SCOPE = "SCOPE"
    ROLES = "ROLES"
    ARCHITECTURE = "ARCHITECTURE"
    BACKEND_MODELING = "BACKEND_MODELING"
    BACKEND_DIAGRAMS = "BACKEND_DIAGRAMS"
    BACKEND_ARCHITECTURE = "BACKEND_ARCHITECTURE"
    FRONTEND_FLOW = "FRONTEND_FLOW"
    FRONTEND_UI_DESIGN = "FRONTEND_UI_DESIGN"
    FRONTEND_PROTOTYPE = "FRONTEND_PROTOTYPE"


def parse_kind(value) -> SectionKind:
    """Resolve a kind from an enum member or its name (case-insensitive).

    Raises InvalidKindError for anything outside the enumeration.
    """
    if isinstance(value, SectionKind):
        return value
    try:
        return SectionKind(str(value).strip().upper())
    except ValueError:
        raise InvalidKindError(str(value)) from None
