"""
Health profile storage and editing.

The profile is the only durable input of the engine. Storage sits behind a
small repository Protocol so the engine can be driven from memory in tests
or from a JSON document on disk.
"""

import json
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import TypeAdapter, ValidationError

from healthbot.domain.errors import ProfileDecodeError
from healthbot.domain.models import HealthCondition, Severity
from healthbot.domain.triggers import TriggerMatcher

logger = structlog.get_logger(__name__)

DEFAULT_STORAGE_KEY = "healthProfile"

_conditions_adapter = TypeAdapter(list[HealthCondition])


class ProfileRepository(Protocol):
    """
    Protocol for loading and saving the condition profile.

    Why Protocol over ABC: Structural typing, easier mocking, less coupling.
    """

    def load(self) -> list[HealthCondition]:
        """
        Load the stored profile.

        Raises:
            ProfileDecodeError: the stored data is not a valid condition list.
        """
        ...

    def save(self, conditions: Sequence[HealthCondition]) -> None: ...


class InMemoryProfileRepository:
    """Process-local profile store."""

    def __init__(self, conditions: Sequence[HealthCondition] = ()) -> None:
        self._conditions = list(conditions)

    def load(self) -> list[HealthCondition]:
        return list(self._conditions)

    def save(self, conditions: Sequence[HealthCondition]) -> None:
        self._conditions = list(conditions)


def decode_conditions(
    payload: object, matcher: TriggerMatcher | None = None
) -> list[HealthCondition]:
    """Validate a decoded JSON array into conditions, re-deriving condition codes."""
    try:
        return _conditions_adapter.validate_python(payload, context={"matcher": matcher})
    except ValidationError as e:
        raise ProfileDecodeError(f"Stored profile is not a valid condition list: {e}") from e


class JsonFileProfileRepository:
    """
    Profile stored in a JSON document under a fixed key.

    The document is an object so that other keys (session data and the like)
    can live in the same file untouched.
    """

    def __init__(
        self,
        path: str | Path,
        storage_key: str = DEFAULT_STORAGE_KEY,
        matcher: TriggerMatcher | None = None,
    ) -> None:
        self.path = Path(path)
        self.storage_key = storage_key
        self.matcher = matcher
        self.logger = logger.bind(path=str(self.path), storage_key=storage_key)

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProfileDecodeError(f"Profile file {self.path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise ProfileDecodeError(f"Profile file {self.path} must hold a JSON object")
        return document

    def load(self) -> list[HealthCondition]:
        document = self._read_document()
        if self.storage_key not in document:
            return []
        return decode_conditions(document[self.storage_key], self.matcher)

    def save(self, conditions: Sequence[HealthCondition]) -> None:
        try:
            document = self._read_document()
        except ProfileDecodeError:
            self.logger.warning("profile_document_replaced")
            document = {}
        document[self.storage_key] = [condition.to_storage() for condition in conditions]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        self.logger.info("profile_saved", conditions=len(conditions))


def split_entries(value: str | Sequence[str]) -> list[str]:
    """Accept a comma-separated string or a list and return trimmed, non-empty entries."""
    entries = value.split(",") if isinstance(value, str) else value
    return [entry.strip() for entry in entries if entry.strip()]


class HealthProfileService:
    """
    Add, remove and load the user's conditions.

    Design principles:
    - Condition codes are derived once, when a condition is added
    - A corrupt store never leaks partial data: it reads as an empty profile
    - Every edit is persisted immediately
    """

    def __init__(
        self, repository: ProfileRepository, matcher: TriggerMatcher | None = None
    ) -> None:
        self.repository = repository
        self.matcher = matcher
        self.logger = logger.bind(component="health_profile")
        self._conditions: list[HealthCondition] = self.load_conditions()

    def load_conditions(self) -> list[HealthCondition]:
        """Reload from storage, substituting an empty profile if it cannot be decoded."""
        try:
            self._conditions = self.repository.load()
        except ProfileDecodeError as e:
            self.logger.warning("profile_decode_failed", error=str(e))
            self._conditions = []
        self.logger.info("profile_loaded", conditions=len(self._conditions))
        return list(self._conditions)

    @property
    def conditions(self) -> list[HealthCondition]:
        return list(self._conditions)

    @property
    def is_profile_setup(self) -> bool:
        return bool(self._conditions)

    def _new_id(self) -> str:
        # Millisecond timestamps, bumped past any existing id to stay unique
        candidate = int(time.time() * 1000)
        existing = {condition.id for condition in self._conditions}
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def add_condition(
        self,
        name: str,
        severity: Severity | str = Severity.MEDIUM,
        medications: str | Sequence[str] = (),
        dietary_restrictions: str | Sequence[str] = (),
    ) -> HealthCondition:
        if not name.strip():
            raise ValueError("Condition name cannot be blank")

        condition = HealthCondition.model_validate(
            {
                "id": self._new_id(),
                "name": name.strip(),
                "severity": Severity(severity),
                "medications": split_entries(medications),
                "dietary_restrictions": split_entries(dietary_restrictions),
            },
            context={"matcher": self.matcher},
        )
        self._conditions = [*self._conditions, condition]
        self.repository.save(self._conditions)
        self.logger.info(
            "condition_added",
            condition_id=condition.id,
            codes=sorted(code.value for code in condition.codes),
        )
        return condition

    def remove_condition(self, condition_id: str) -> bool:
        """Remove a condition by id. Returns False when no such condition exists."""
        remaining = [c for c in self._conditions if c.id != condition_id]
        if len(remaining) == len(self._conditions):
            return False
        self._conditions = remaining
        self.repository.save(self._conditions)
        self.logger.info("condition_removed", condition_id=condition_id)
        return True
