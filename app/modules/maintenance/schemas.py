from pydantic import BaseModel, Field
from typing import Optional, List


class FixRelationshipsRequest(BaseModel):
    wrong_id: str = Field(alias="wrongId")
    correct_id: str = Field(alias="correctId")

    class Config:
        populate_by_name = True


class TableRepairResult(BaseModel):
    table: str
    column: str
    updated: int = 0
    error: Optional[str] = None


class RepairReport(BaseModel):
    success: bool
    message: str
    updates: List[TableRepairResult]
