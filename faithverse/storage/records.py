"""
Serialization of engine records into the key-value store.

Values are JSON with camelCase keys. A value that fails to parse is logged and
treated as absent; inside a list, a single bad item is skipped so one corrupted
entry never hides the rest.
"""
import json
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from faithverse.core.logging import get_logger
from faithverse.storage.adapter import KeyValueStore

logger = get_logger(__name__)


class Record(BaseModel):
    """Base for every stored shape: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="after")
    @classmethod
    def _aware_datetimes(cls, value: Any) -> Any:
        # Stored timestamps must compare with Clock.now(); naive ones are read as UTC
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


R = TypeVar("R", bound=BaseModel)


def load_record(store: KeyValueStore, key: str, model: Type[R]) -> Optional[R]:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning(f"[STORE] Discarding corrupted value at '{key}' ({exc.error_count()} errors)")
        return None


def save_record(store: KeyValueStore, key: str, record: BaseModel) -> None:
    store.set(key, record.model_dump_json(by_alias=True))


def load_records(store: KeyValueStore, key: str, model: Type[R]) -> list[R]:
    raw = store.get(key)
    if raw is None:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        logger.warning(f"[STORE] Discarding unparsable list at '{key}'")
        return []
    if not isinstance(items, list):
        logger.warning(f"[STORE] Expected a list at '{key}', got {type(items).__name__}")
        return []

    records = []
    for index, item in enumerate(items):
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.warning(f"[STORE] Skipping bad item {index} at '{key}' ({exc.error_count()} errors)")
    return records


def save_records(store: KeyValueStore, key: str, records: Sequence[BaseModel]) -> None:
    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    store.set(key, json.dumps(payload))
