"""Backup document import/export.

A backup is a JSON object with the profile and expense list of one period.
Restoring it yields a PeriodState structurally equal to the exported one.
"""

import json
import logging
from datetime import date, datetime, timezone

from pydantic import ValidationError

from creditpace.core.exceptions import ImportFormatError, StateLoadError
from creditpace.core.models import PeriodState
from creditpace.storage.state_store import migrate_state

logger = logging.getLogger(__name__)


def default_export_name(today: date) -> str:
    """File name for a backup taken on `today`."""
    return f"creditpace_backup_{today.isoformat()}.json"


def export_state(state: PeriodState, exported_at: datetime | None = None) -> str:
    """Serialize state to a backup document.

    Args:
        state: State to export.
        exported_at: Export timestamp (now, UTC, if None).

    Returns:
        Indented JSON text.
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    document = state.model_dump(mode="json")
    document["exported_at"] = exported_at.isoformat()
    logger.info("Exported %d expenses", len(state.expenses))
    return json.dumps(document, indent=2, ensure_ascii=False)


def import_state(text: str) -> PeriodState:
    """Restore state from a backup document.

    Raises:
        ImportFormatError: If the text is not JSON, lacks profile or
            expenses, or contains invalid records.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Could not read backup file: {e}") from e

    if not isinstance(document, dict) or not document.get("profile") or "expenses" not in document:
        raise ImportFormatError("Invalid backup file format: profile and expenses are required")

    document.pop("exported_at", None)
    try:
        state = PeriodState.model_validate(migrate_state(document))
    except (StateLoadError, ValidationError) as e:
        raise ImportFormatError(f"Invalid backup contents: {e}") from e

    logger.info("Imported %d expenses", len(state.expenses))
    return state
