"""
Lead Concierge admin CLI.

Usage:
    python -m lead_admin.main list --limit 5
    python -m lead_admin.main export --dir data/exports
    python -m lead_admin.main clear
"""

import argparse
import logging
import sys
from typing import List, Optional

from config.settings import get_settings
from database.export import export_lead_json
from database.lead_store import LeadStore

logger = logging.getLogger(__name__)


def _open_store() -> LeadStore:
    settings = get_settings()
    return LeadStore(settings.database_url, history_limit=settings.lead_history_limit)


def list_leads(store: LeadStore, limit: Optional[int]) -> int:
    leads = store.recent(limit)
    if not leads:
        print("No captured leads yet")
        return 0
    for lead in leads:
        company = lead.get("company_name") or "Unnamed lead"
        goal = lead.get("primary_goal") or "Goal not captured yet"
        print(f"{lead['score']:>3}  {company}  |  {goal}  |  {lead['stored_at']}")
    return 0


def export_latest(store: LeadStore, directory: str) -> int:
    latest = store.latest()
    if latest is None:
        logger.error("Nothing to export: no captured leads yet")
        return 1
    path = export_lead_json(latest, directory)
    print(path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Lead Concierge admin")
    parser.add_argument("--log-level", default=settings.log_level.upper(), choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show recently captured leads")
    list_parser.add_argument("--limit", type=int, default=None)

    export_parser = subparsers.add_parser("export", help="Write the latest lead to a JSON file")
    export_parser.add_argument("--dir", default=settings.export_directory, help="Export directory")

    subparsers.add_parser("clear", help="Delete all captured leads")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    store = _open_store()
    try:
        if args.command == "list":
            return list_leads(store, args.limit)
        elif args.command == "export":
            return export_latest(store, args.dir)
        elif args.command == "clear":
            deleted = store.clear()
            print(f"Deleted {deleted} leads")
            return 0
    finally:
        store.close()
    return 1


if __name__ == "__main__":
    sys.exit(main())
