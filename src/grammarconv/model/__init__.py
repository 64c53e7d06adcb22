"""Grammar and catalog data model.

Exports the frozen node types and the ``ModelSerializer``.
"""
from __future__ import annotations

from grammarconv.model.nodes import (
    OBJECTIVE_PRONOUNS,
    ROOT_NON_TERMINAL,
    SUBJECTIVE_PRONOUNS,
    CatalogObject,
    Catalogs,
    Category,
    DifficultyTier,
    Gender,
    Gesture,
    Grammar,
    Location,
    ObjectType,
    PersonName,
    PredefinedQuestion,
    ProductionRule,
    Room,
)
from grammarconv.model.serializer import ModelSerializer

__all__ = [
    "ROOT_NON_TERMINAL",
    "OBJECTIVE_PRONOUNS",
    "SUBJECTIVE_PRONOUNS",
    "DifficultyTier",
    "Gender",
    "ObjectType",
    "ProductionRule",
    "Grammar",
    "Gesture",
    "PersonName",
    "Location",
    "Room",
    "CatalogObject",
    "Category",
    "PredefinedQuestion",
    "Catalogs",
    "ModelSerializer",
]
