from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.maintenance.schemas import FixRelationshipsRequest, RepairReport
from app.modules.maintenance.service import RepairService
from app.core.dependencies import require_admin_key
from supabase import Client

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_key)])


def get_repair_service(supabase: Client = Depends(get_service_supabase)) -> RepairService:
    return RepairService(supabase)


@router.post("/fix-relationships", response_model=RepairReport)
async def fix_relationships(
    request: FixRelationshipsRequest,
    service: RepairService = Depends(get_repair_service)
):
    """Re-point places, list memberships and lists from one user id to another"""
    return service.fix_relationships(request.wrong_id, request.correct_id)


@router.post("/prune-orphans", response_model=RepairReport)
async def prune_orphans(service: RepairService = Depends(get_repair_service)):
    """Delete memberships that reference a missing list or place"""
    return service.prune_orphaned_memberships()
