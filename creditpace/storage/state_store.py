"""JSON file storage for the current period state.

The stored document carries a schema_version. On load, documents from an
older schema are upgraded one version at a time through MIGRATIONS before
validation; documents from a newer schema are rejected.
"""

import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from creditpace.core.exceptions import StateLoadError, StateSaveError
from creditpace.core.models import SCHEMA_VERSION, PeriodState

logger = logging.getLogger(__name__)

# Upgrade functions keyed by the version they upgrade FROM.
# A missing entry means the step needs no data changes.
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {}


def migrate_state(raw: dict[str, Any]) -> dict[str, Any]:
    """Upgrade a raw state document to SCHEMA_VERSION.

    Documents without a schema_version are treated as version 0.

    Raises:
        StateLoadError: If the document is from a newer schema.
    """
    version = raw.get("schema_version", 0)
    if not isinstance(version, int):
        raise StateLoadError(f"Invalid schema_version: {version!r}")
    if version > SCHEMA_VERSION:
        raise StateLoadError(
            f"State schema version {version} is newer than supported ({SCHEMA_VERSION})"
        )

    data = dict(raw)
    while version < SCHEMA_VERSION:
        upgrade = MIGRATIONS.get(version)
        if upgrade is not None:
            data = upgrade(data)
        version += 1
        data["schema_version"] = version
        logger.info("Migrated state to schema version %d", version)
    return data


class JsonStateStore:
    """Loads and saves PeriodState as a JSON file."""

    def __init__(self, path: Path):
        """Initialize store.

        Args:
            path: Location of the state file. Parent directories are
                created on first save.
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> PeriodState | None:
        """Load stored state.

        Returns:
            PeriodState, or None if nothing has been saved yet.

        Raises:
            StateLoadError: If the file is unreadable or invalid.
        """
        if not self.exists():
            return None

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StateLoadError(f"Could not read {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise StateLoadError(f"Unexpected state document in {self.path}")

        try:
            state = PeriodState.model_validate(migrate_state(raw))
        except ValidationError as e:
            raise StateLoadError(f"Invalid state in {self.path}: {e}") from e

        logger.debug("Loaded %d expenses from %s", len(state.expenses), self.path)
        return state

    def load_or_default(
        self,
        on_error: Callable[[StateLoadError], None] | None = None,
    ) -> PeriodState:
        """Load stored state, falling back to an empty state.

        A corrupt file is logged and treated as empty; it is not removed.

        Args:
            on_error: Called with the load error before falling back.
        """
        try:
            state = self.load()
        except StateLoadError as e:
            logger.warning("Could not load saved data, starting fresh: %s", e)
            if on_error is not None:
                on_error(e)
            return PeriodState()
        return state if state is not None else PeriodState()

    def save(self, state: PeriodState) -> None:
        """Write state atomically (temp file, then replace).

        Raises:
            StateSaveError: If the file cannot be written.
        """
        payload = state.model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".state-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateSaveError(f"Could not save {self.path}: {e}") from e

        logger.debug("Saved %d expenses to %s", len(state.expenses), self.path)

    def clear(self) -> None:
        """Delete the state file if present."""
        self.path.unlink(missing_ok=True)
        logger.info("Cleared state at %s", self.path)
