"""Serialization of grammars and catalogs to and from JSON and YAML.

The serialized form is a plain dict/list structure that maps naturally
to both formats.  Grammars carry a ``"kind": "Grammar"`` discriminator
so a single file type can be recognised by the CLI.

Usage
-----
::

    from grammarconv.model.serializer import ModelSerializer

    serializer = ModelSerializer()
    text = serializer.grammar_to_yaml(grammar)
    grammar2 = serializer.grammar_from_yaml(text)
    assert grammar == grammar2

    catalogs = serializer.catalogs_from_yaml(Path("catalogs.yaml").read_text())
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, TypeVar

import yaml

from grammarconv.model.nodes import (
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

E = TypeVar("E", bound=Enum)


def _enum_from_name(enum_cls: type[E], value: object) -> E:
    """Look up an enum member by (case-insensitive) name."""
    try:
        return enum_cls[str(value).strip().upper()]
    except KeyError:
        choices = ", ".join(m.name for m in enum_cls)
        raise ValueError(
            f"Unknown {enum_cls.__name__} {value!r}. Expected one of: {choices}"
        ) from None


def _safe_load(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML: {exc}") from exc


class ModelSerializer:
    """Converts between model objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def grammar_to_dict(self, grammar: Grammar) -> dict[str, object]:
        """Serialize a ``Grammar`` to a JSON-compatible dict."""
        return {
            "kind": "Grammar",
            "name": grammar.name,
            "tier": grammar.tier.name,
            "rules": {
                rule.non_terminal: list(rule.replacements) for rule in grammar
            },
        }

    def grammar_from_dict(self, data: dict[str, Any]) -> Grammar:
        """Deserialize a ``Grammar`` from a plain dict.

        Raises
        ------
        ValueError
            If a required field is missing or has the wrong shape.
        """
        try:
            rules = data.get("rules") or {}
            return Grammar(
                name=data["name"],
                tier=_enum_from_name(DifficultyTier, data.get("tier", "UNKNOWN")),
                rules={
                    nt: ProductionRule(non_terminal=nt, replacements=tuple(alts or ()))
                    for nt, alts in rules.items()
                },
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed grammar data: {exc!r}") from exc

    # ------------------------------------------------------------------
    # Catalogs
    # ------------------------------------------------------------------

    def catalogs_to_dict(self, catalogs: Catalogs) -> dict[str, object]:
        """Serialize ``Catalogs`` to a JSON-compatible dict."""
        return {
            "gestures": [g.name for g in catalogs.gestures],
            "names": [{"name": n.name, "gender": n.gender.name} for n in catalogs.names],
            "rooms": [
                {
                    "name": room.name,
                    "locations": [self._location_to_dict(loc) for loc in room.locations],
                }
                for room in catalogs.rooms
            ],
            "categories": [self._category_to_dict(c) for c in catalogs.categories],
            "questions": [
                {"question": q.question, "answer": q.answer} for q in catalogs.questions
            ],
        }

    def _location_to_dict(self, loc: Location) -> dict[str, object]:
        return {
            "name": loc.name,
            "is_beacon": loc.is_beacon,
            "is_placement": loc.is_placement,
        }

    def _category_to_dict(self, category: Category) -> dict[str, object]:
        return {
            "name": category.name,
            "default_location": self._location_to_dict(category.default_location),
            "room_string": category.room_string,
            "objects": [
                {"name": o.name, "type": o.type.name} for o in category.objects
            ],
        }

    def catalogs_from_dict(self, data: dict[str, Any]) -> Catalogs:
        """Deserialize ``Catalogs`` from a plain dict.

        Every section is optional; missing sections become empty.
        Gestures may be given as bare strings or ``{"name": ...}`` dicts.
        """
        try:
            return self._catalogs_from_dict(data)
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed catalogs data: {exc!r}") from exc

    def _catalogs_from_dict(self, data: dict[str, Any]) -> Catalogs:
        return Catalogs(
            gestures=tuple(self._gesture_from(g) for g in data.get("gestures") or []),
            names=tuple(
                PersonName(name=n["name"], gender=_enum_from_name(Gender, n["gender"]))
                for n in data.get("names") or []
            ),
            rooms=tuple(
                Room(
                    name=r["name"],
                    locations=tuple(self._location_from_dict(loc) for loc in r.get("locations") or []),
                )
                for r in data.get("rooms") or []
            ),
            categories=tuple(self._category_from_dict(c) for c in data.get("categories") or []),
            questions=tuple(
                PredefinedQuestion(question=q["question"], answer=q.get("answer", ""))
                for q in data.get("questions") or []
            ),
        )

    def _gesture_from(self, value: object) -> Gesture:
        if isinstance(value, dict):
            return Gesture(name=value["name"])
        return Gesture(name=str(value))

    def _location_from_dict(self, d: dict[str, Any]) -> Location:
        return Location(
            name=d["name"],
            is_beacon=bool(d.get("is_beacon", False)),
            is_placement=bool(d.get("is_placement", False)),
        )

    def _category_from_dict(self, d: dict[str, Any]) -> Category:
        return Category(
            name=d["name"],
            default_location=self._location_from_dict(d["default_location"]),
            room_string=d.get("room_string", ""),
            objects=tuple(
                CatalogObject(
                    name=o["name"],
                    type=_enum_from_name(ObjectType, o.get("type", "KNOWN")),
                )
                for o in d.get("objects") or []
            ),
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def grammar_to_json(self, grammar: Grammar, indent: int = 2) -> str:
        """Serialize a ``Grammar`` to a JSON string."""
        return json.dumps(self.grammar_to_dict(grammar), indent=indent, ensure_ascii=False)

    def grammar_from_json(self, text: str) -> Grammar:
        """Deserialize a ``Grammar`` from a JSON string."""
        return self.grammar_from_dict(json.loads(text))

    def catalogs_to_json(self, catalogs: Catalogs, indent: int = 2) -> str:
        """Serialize ``Catalogs`` to a JSON string."""
        return json.dumps(self.catalogs_to_dict(catalogs), indent=indent, ensure_ascii=False)

    def catalogs_from_json(self, text: str) -> Catalogs:
        """Deserialize ``Catalogs`` from a JSON string."""
        return self.catalogs_from_dict(json.loads(text))

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def grammar_to_yaml(self, grammar: Grammar) -> str:
        """Serialize a ``Grammar`` to a YAML string."""
        return yaml.dump(
            self.grammar_to_dict(grammar),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def grammar_from_yaml(self, text: str) -> Grammar:
        """Deserialize a ``Grammar`` from a YAML string."""
        return self.grammar_from_dict(_safe_load(text))

    def catalogs_to_yaml(self, catalogs: Catalogs) -> str:
        """Serialize ``Catalogs`` to a YAML string."""
        return yaml.dump(
            self.catalogs_to_dict(catalogs),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def catalogs_from_yaml(self, text: str) -> Catalogs:
        """Deserialize ``Catalogs`` from a YAML string.

        An empty document yields empty catalogs.
        """
        return self.catalogs_from_dict(_safe_load(text) or {})
