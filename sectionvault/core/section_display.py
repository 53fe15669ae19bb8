"""Display metadata for section kinds.

The store treats a kind as an opaque key; titles and activity phrases live
here so presentation wording can change without touching the write path.
"""

from dataclasses import dataclass

from ..models.section_kind import SectionKind


@dataclass(frozen=True)
class SectionDisplay:
    title: str
    label: str  # noun phrase used in activity messages


SECTION_DISPLAY: dict[SectionKind, SectionDisplay] = {
    SectionKind.CONTEXT: SectionDisplay("Context", "the context"),
    SectionKind.SCOPE: SectionDisplay("Scope", "the scope"),
    SectionKind.ROLES: SectionDisplay("Roles", "the roles"),
    SectionKind.ARCHITECTURE: SectionDisplay("Architecture", "the architecture"),
    SectionKind.BACKEND_MODELING: SectionDisplay("Database Modeling", "the database modeling"),
    SectionKind.BACKEND_DIAGRAMS: SectionDisplay("Diagrams", "the diagrams"),
    SectionKind.BACKEND_ARCHITECTURE: SectionDisplay("Backend Architecture", "the backend architecture"),
    SectionKind.FRONTEND_FLOW: SectionDisplay("User Flow", "the user flow"),
    SectionKind.FRONTEND_UI_DESIGN: SectionDisplay("UI Design", "the UI design"),
    SectionKind.FRONTEND_PROTOTYPE: SectionDisplay("Prototype", "the prototype"),
}

_FALLBACK = SectionDisplay("Section", "a section")


def section_title(kind: SectionKind) -> str:
    return SECTION_DISPLAY.get(kind, _FALLBACK).title


def section_label(kind: SectionKind) -> str:
    return SECTION_DISPLAY.get(kind, _FALLBACK).label
