"""
Fix Relationships Script
Re-points places.created_by, list_places.added_by and lists.owner_id from a
wrong user id to the correct one, and optionally prunes orphaned memberships.

Usage:
    python -m app.scripts.fix_relationships WRONG_ID CORRECT_ID
    python -m app.scripts.fix_relationships --prune-orphans
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from app.modules.maintenance.schemas import RepairReport
from app.modules.maintenance.service import RepairService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def log_report(report: RepairReport):
    logger.info(report.message)
    for update in report.updates:
        if update.error:
            logger.error(f"  {update.table}.{update.column}: failed ({update.error})")
        else:
            logger.info(f"  {update.table}.{update.column}: {update.updated} rows")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Repair user references across places, lists and list_places")
    parser.add_argument("wrong_id", nargs="?", help="User id currently stored by mistake")
    parser.add_argument("correct_id", nargs="?", help="User id the rows should point at")
    parser.add_argument("--prune-orphans", action="store_true", help="Delete memberships whose list or place is gone")
    args = parser.parse_args(argv)

    if not args.prune_orphans and not (args.wrong_id and args.correct_id):
        parser.error("WRONG_ID and CORRECT_ID are required unless --prune-orphans is given")

    service = RepairService(SupabaseClient.get_service_client())
    ok = True
    if args.wrong_id and args.correct_id:
        report = service.fix_relationships(args.wrong_id, args.correct_id)
        log_report(report)
        ok = ok and report.success
    if args.prune_orphans:
        report = service.prune_orphaned_memberships()
        log_report(report)
        ok = ok and report.success
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
