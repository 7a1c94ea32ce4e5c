"""
Game Database.

Handles loading and validation of game data records (skills, items,
actors, ...) and building their annotation table.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Optional

import jsonschema
from pydantic import AliasChoices, BaseModel, ValidationError

from battle_mechanics.components.records import DamageSpec, DataRecord, RecordKind, UsableRecord
from battle_mechanics.resources.annotations import AnnotationTable

RECORD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": ["integer", "string"]},
        "name": {"type": "string"},
        "note": {"type": "string"},
        "damage": {
            "type": "object",
            "properties": {
                "type": {"type": "integer", "minimum": 0, "maximum": 6},
                "formula": {"type": "string"},
                "element_id": {"type": "integer"},
                "elementId": {"type": "integer"},
                "critical": {"type": "boolean"},
                "variance": {"type": "integer"},
            },
        },
        "success_rate": {"type": "number", "minimum": 0, "maximum": 100},
        "successRate": {"type": "number", "minimum": 0, "maximum": 100},
        "hit_type": {"type": "integer", "minimum": 0, "maximum": 2},
        "hitType": {"type": "integer", "minimum": 0, "maximum": 2},
    },
}


def _field_keys(model: type[BaseModel]) -> frozenset[str]:
    """Field names of a model plus the host names it accepts for them."""
    keys = set()
    for name, info in model.model_fields.items():
        keys.add(name)
        if isinstance(info.validation_alias, AliasChoices):
            keys.update(c for c in info.validation_alias.choices if isinstance(c, str))
    return frozenset(keys)


def _known_fields(model: type[BaseModel], entry: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in entry.items() if k in _field_keys(model)}


# Folder name under database/ for each record kind
CATEGORY_FOLDERS: dict[RecordKind, str] = {
    RecordKind.ACTOR: "actors",
    RecordKind.CLASS: "classes",
    RecordKind.SKILL: "skills",
    RecordKind.ITEM: "items",
    RecordKind.WEAPON: "weapons",
    RecordKind.ARMOR: "armors",
    RecordKind.ENEMY: "enemies",
    RecordKind.STATE: "states",
}


class GameDatabase:
    """
    Central storage for game data records.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schema: dict[str, Any] = RECORD_SCHEMA

        # Data stores, one per record kind
        self.records: dict[RecordKind, dict[Any, DataRecord]] = {
            kind: {} for kind in RecordKind
        }
        self.annotations = AnnotationTable()

        self.logger = logging.getLogger(__name__)

    @property
    def skills(self) -> dict[Any, DataRecord]:
        return self.records[RecordKind.SKILL]

    @property
    def items(self) -> dict[Any, DataRecord]:
        return self.records[RecordKind.ITEM]

    def load_all(self) -> None:
        """
        Load all data from disk, then parse annotations.

        Raises:
            UnrecognizedStatError: A record names an unknown stat
        """
        self._load_schema()

        for kind in RecordKind:
            self.records[kind] = self._load_category(kind)

        self.logger.info(
            "Loaded " + ", ".join(
                f"{len(self.records[kind])} {CATEGORY_FOLDERS[kind]}" for kind in RecordKind
            ) + "."
        )
        self.build_annotations()

    def build_annotations(self) -> AnnotationTable:
        """Parse annotations of every loaded record into a fresh table."""
        self.annotations.rebuild(self.record_sets())
        return self.annotations

    def record_sets(self) -> Iterator[list[DataRecord]]:
        """Loaded records, one list per kind."""
        for kind in RecordKind:
            yield list(self.records[kind].values())

    def _load_schema(self) -> None:
        """Load the record schema, if the data folder overrides it."""
        schema_file = self._data_path / "schemas" / "record.schema.json"
        if not schema_file.exists():
            self.logger.info(f"No record schema at {schema_file}, using built-in schema")
            return

        try:
            with open(schema_file, 'r', encoding='utf-8') as f:
                self._schema = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, kind: RecordKind) -> dict[Any, DataRecord]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / CATEGORY_FOLDERS[kind]
        data_store: dict[Any, DataRecord] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            # A file holds either one record or a list of them
            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                # Unused database slots are stored as null
                if entry is None:
                    continue
                record = self._parse_record(kind, entry, file_path)
                if record is not None:
                    data_store[record.id] = record

        return data_store

    def _parse_record(self, kind: RecordKind, entry: Any, file_path: Path) -> Optional[DataRecord]:
        """Validate one entry and build its record."""
        try:
            jsonschema.validate(instance=entry, schema=self._schema)
        except jsonschema.ValidationError as e:
            self.logger.error(f"Validation error in {file_path}: {e.message}")
            return None

        model = UsableRecord if kind.is_usable else DataRecord
        # Host exports carry many fields this engine has no use for
        fields = _known_fields(model, entry)
        if isinstance(fields.get("damage"), dict):
            fields["damage"] = _known_fields(DamageSpec, fields["damage"])
        fields["kind"] = kind
        try:
            return model.model_validate(fields)
        except ValidationError as e:
            self.logger.error(f"Invalid {kind.value} record in {file_path}: {e}")
            return None

    def get(self, kind: RecordKind, record_id: Any) -> Optional[DataRecord]:
        return self.records[kind].get(record_id)

    def get_skill(self, skill_id: Any) -> Optional[DataRecord]:
        return self.get(RecordKind.SKILL, skill_id)

    def get_item(self, item_id: Any) -> Optional[DataRecord]:
        return self.get(RecordKind.ITEM, item_id)
