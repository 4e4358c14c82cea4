import logging
from typing import List, Tuple

from supabase import Client

from app.core.exceptions import ValidationError
from app.modules.maintenance.schemas import RepairReport, TableRepairResult

logger = logging.getLogger(__name__)

# (table, column) pairs that point at a user
USER_REFERENCES: List[Tuple[str, str]] = [
    ("places", "created_by"),
    ("list_places", "added_by"),
    ("lists", "owner_id"),
]


class RepairService:
    """
    Administrative fix-ups for attribution and join rows.

    Each table is updated independently: a failure on one table is recorded
    in the report and the remaining tables are still processed. Nothing here
    is atomic across tables; rerunning a repair is safe.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def fix_relationships(self, wrong_id: str, correct_id: str) -> RepairReport:
        """Re-point every user reference equal to wrong_id at correct_id"""
        if not wrong_id or not correct_id:
            raise ValidationError("wrongId and correctId are required")
        if wrong_id == correct_id:
            raise ValidationError("wrongId and correctId must differ")

        logger.info("Fixing relationships: %s -> %s", wrong_id, correct_id)
        updates = []
        for table, column in USER_REFERENCES:
            outcome = TableRepairResult(table=table, column=column)
            try:
                result = self.supabase.table(table)\
                    .update({column: correct_id})\
                    .eq(column, wrong_id)\
                    .execute()
                outcome.updated = len(result.data or [])
            except Exception as e:
                logger.error("Error updating %s.%s: %s", table, column, e)
                outcome.error = str(e)
            updates.append(outcome)

        failed = [u.table for u in updates if u.error]
        if failed:
            message = f"Updated relationships from {wrong_id} to {correct_id} with errors in: {', '.join(failed)}"
        else:
            message = f"Updated relationships from {wrong_id} to {correct_id}"
        return RepairReport(success=not failed, message=message, updates=updates)

    def prune_orphaned_memberships(self) -> RepairReport:
        """Delete list_places rows whose list or place no longer exists"""
        outcome = TableRepairResult(table="list_places", column="id")
        try:
            memberships = self.supabase.table("list_places")\
                .select("id, list_id, place_id")\
                .execute().data or []
            list_ids = list({m["list_id"] for m in memberships})
            place_ids = list({m["place_id"] for m in memberships})
            existing_lists = self._existing_ids("lists", list_ids)
            existing_places = self._existing_ids("places", place_ids)
            orphan_ids = [
                m["id"] for m in memberships
                if m["list_id"] not in existing_lists or m["place_id"] not in existing_places
            ]
            if orphan_ids:
                result = self.supabase.table("list_places")\
                    .delete()\
                    .in_("id", orphan_ids)\
                    .execute()
                outcome.updated = len(result.data or [])
        except Exception as e:
            logger.error("Error pruning orphaned list_places: %s", e)
            outcome.error = str(e)

        logger.info("Pruned %d orphaned list_places rows", outcome.updated)
        return RepairReport(
            success=outcome.error is None,
            message=f"Removed {outcome.updated} orphaned memberships",
            updates=[outcome],
        )

    def _existing_ids(self, table: str, ids: List[str]) -> set:
        if not ids:
            return set()
        result = self.supabase.table(table)\
            .select("id")\
            .in_("id", ids)\
            .execute()
        return {str(row["id"]) for row in result.data or []}
