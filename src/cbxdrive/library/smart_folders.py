"""Smart folder definitions and the rule evaluator."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence

from ..config import SMART_FOLDER_PREFIX
from ..domain.models import (
    Asset,
    AssetMeta,
    Rule,
    RuleField,
    RuleOperator,
    SmartFolderDefinition,
)
from ..errors import FolderNameError, SmartFolderNotFoundError
from ..settings import PersistedState
from ..utils.logging import get_logger
from .catalog import AssetMetadataProvider, NullMetadataProvider
from .folder_tree import random_suffix

LOGGER = get_logger(__name__)


def generate_smart_folder_id() -> str:
    return f"{SMART_FOLDER_PREFIX}{random_suffix()}"


def _candidates(asset: Asset, rule_field: str, meta: Optional[AssetMeta]) -> Optional[tuple[str, ...]]:
    if rule_field == RuleField.RATIO:
        return (asset.ratio,)
    if rule_field == RuleField.NAME:
        return (asset.title,)
    if rule_field == RuleField.KEYWORDS:
        return meta.tags if meta is not None else ()
    return None


def evaluate_rule(asset: Asset, rule: Rule, meta: Optional[AssetMeta] = None) -> bool:
    """Return whether *asset* satisfies *rule*.

    ``is`` compares exactly (case-sensitive); ``contains`` is a
    case-insensitive substring test.  Unknown fields or operators never match.
    """

    candidates = _candidates(asset, rule.field, meta)
    if candidates is None:
        return False
    if rule.operator == RuleOperator.IS:
        return any(candidate == rule.value for candidate in candidates)
    if rule.operator == RuleOperator.CONTAINS:
        needle = rule.value.casefold()
        return any(needle in candidate.casefold() for candidate in candidates)
    return False


def matches(asset: Asset, definition: SmartFolderDefinition, meta: Optional[AssetMeta] = None) -> bool:
    return all(evaluate_rule(asset, rule, meta) for rule in definition.rules)


def definition_from_dict(payload: dict[str, Any]) -> SmartFolderDefinition:
    return SmartFolderDefinition(
        id=payload["id"],
        name=payload["name"],
        rules=tuple(Rule(r["field"], r["op"], r["value"]) for r in payload.get("rules", ())),
    )


class SmartFolderEngine:
    """Own the saved smart folder definitions and evaluate membership.

    Definitions are written through to the store after every change.  New and
    duplicated definitions are placed first.
    """

    def __init__(
        self,
        state: PersistedState,
        metadata: Optional[AssetMetadataProvider] = None,
        *,
        id_factory: Callable[[], str] = generate_smart_folder_id,
    ) -> None:
        self._state = state
        self._metadata = metadata or NullMetadataProvider()
        self._id_factory = id_factory
        self._definitions: list[SmartFolderDefinition] = [
            definition_from_dict(raw) for raw in state.smart_folders()
        ]

    @property
    def definitions(self) -> tuple[SmartFolderDefinition, ...]:
        return tuple(self._definitions)

    def get(self, definition_id: str) -> Optional[SmartFolderDefinition]:
        for definition in self._definitions:
            if definition.id == definition_id:
                return definition
        return None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def matches(self, asset: Asset, definition: SmartFolderDefinition) -> bool:
        meta = self._metadata.metadata_for(asset.id) if _needs_meta(definition) else None
        return matches(asset, definition, meta)

    def filter_assets(
        self, assets: Iterable[Asset], definition: SmartFolderDefinition
    ) -> list[Asset]:
        return [asset for asset in assets if self.matches(asset, definition)]

    # ------------------------------------------------------------------
    # Definition management
    # ------------------------------------------------------------------
    def create(self, name: str, rules: Sequence[Rule]) -> SmartFolderDefinition:
        clean_name = _clean_name(name)
        clean_rules = tuple(
            Rule(rule.field, rule.operator, rule.value.strip())
            for rule in rules
            if rule.value.strip()
        )
        definition = SmartFolderDefinition(self._new_id(), clean_name, clean_rules)
        self._definitions.insert(0, definition)
        self._persist()
        LOGGER.info("Created smart folder %s (%s)", definition.id, definition.name)
        return definition

    def rename(self, definition_id: str, name: str) -> SmartFolderDefinition:
        clean_name = _clean_name(name)
        index = self._index_of(definition_id)
        renamed = SmartFolderDefinition(definition_id, clean_name, self._definitions[index].rules)
        self._definitions[index] = renamed
        self._persist()
        return renamed

    def duplicate(self, definition_id: str) -> SmartFolderDefinition:
        source = self._definitions[self._index_of(definition_id)]
        copy = SmartFolderDefinition(self._new_id(), f"{source.name} (copy)", source.rules)
        self._definitions.insert(0, copy)
        self._persist()
        return copy

    def delete(self, definition_id: str) -> None:
        del self._definitions[self._index_of(definition_id)]
        self._persist()

    def _index_of(self, definition_id: str) -> int:
        for index, definition in enumerate(self._definitions):
            if definition.id == definition_id:
                return index
        raise SmartFolderNotFoundError(f"Smart folder not found: {definition_id}")

    def _new_id(self) -> str:
        taken = {definition.id for definition in self._definitions}
        new_id = self._id_factory()
        while new_id in taken:
            new_id = self._id_factory()
        return new_id

    def _persist(self) -> None:
        self._state.set_smart_folders([d.to_dict() for d in self._definitions])


def _needs_meta(definition: SmartFolderDefinition) -> bool:
    return any(rule.field == RuleField.KEYWORDS for rule in definition.rules)


def _clean_name(name: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise FolderNameError("Smart folder name must not be empty")
    return clean


__all__ = [
    "SmartFolderEngine",
    "definition_from_dict",
    "evaluate_rule",
    "generate_smart_folder_id",
    "matches",
]
