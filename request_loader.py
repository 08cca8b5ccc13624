from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


def load_request_from_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a JSON object")

    logger.info("Loaded plan request with %d subjects from %s", len(payload.get("subjects") or []), path)
    return payload


def load_requests_from_directory(directory: Path) -> Dict[str, Dict[str, Any]]:
    requests: Dict[str, Dict[str, Any]] = {}
    for json_path in sorted(directory.glob("*.json")):
        try:
            requests[json_path.stem] = load_request_from_json(json_path)
        except (OSError, ValueError) as exc:
            logger.exception("Failed to load %s: %s", json_path, exc)
    return requests
