from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List


def parse_event_file(path: Path) -> List[List[Dict[str, Any]]]:
    """Return the trust event batches captured in ``path``.

    One batch per line: a JSON array of subscription records, or a single
    record object for a one-event batch. Blank lines and lines starting with
    ``#`` are skipped. Large integers may be written as strings.
    """

    batches: List[List[Dict[str, Any]]] = []

    for line_number, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}:{line_number}: invalid JSON: {exc.msg}") from exc

        if isinstance(parsed, dict):
            batches.append([parsed])
        elif isinstance(parsed, list) and all(isinstance(item, dict) for item in parsed):
            batches.append(parsed)
        else:
            raise ValueError(f"{path}:{line_number}: expected an event object or a list of events")

    return batches
