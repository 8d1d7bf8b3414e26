"""
JSON export of stored leads.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


def lead_json_filename(payload: Dict[str, Any]) -> str:
    """<company-slug>-lead.json, falling back to lead-lead.json."""
    company = (payload.get("company_name") or "").strip().lower()
    slug = re.sub(r"\s+", "-", company)
    slug = re.sub(r"[^a-z0-9-]", "", slug).strip("-")
    return f"{slug or 'lead'}-lead.json"


def export_lead_json(payload: Dict[str, Any], directory: Union[str, Path]) -> Path:
    """
    Write a stored lead payload to a pretty-printed JSON file.

    Args:
        payload: Stored lead payload (see LeadStore.save)
        directory: Target directory, created if missing

    Returns:
        Path of the written file
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / lead_json_filename(payload)
    path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info(f"Exported lead to {path}")
    return path
