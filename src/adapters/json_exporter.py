"""JSON export of verification results.

Why JSON:
- Interoperability with other tools and pipelines (moderation bots, audits).
- Persists the verdicts without depending on the terminal rendering.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from core.domain.models import CheckOutcome


def outcome_to_dict(outcome: CheckOutcome) -> dict[str, object]:
    payload: dict[str, object] = {"name": outcome.name, "ok": outcome.ok}
    if outcome.result is not None:
        payload["result"] = outcome.result.model_dump(mode="json")
    if outcome.error is not None:
        payload["error"] = {
            "type": type(outcome.error).__name__,
            "message": str(outcome.error),
        }
    return payload


def export_outcomes_json(*, outcomes: Sequence[CheckOutcome], output_path: Path) -> Path:
    """Export outcomes as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"checks": [outcome_to_dict(o) for o in outcomes]}
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
