"""Operation log API endpoints"""
from fastapi import APIRouter, Query
from typing import Optional, List
from pydantic import BaseModel

from kea_config.logger import operation_logger

router = APIRouter(prefix="/api/logs", tags=["logs"])


class LogEntry(BaseModel):
    timestamp: str
    level: str
    operator: str
    action: str
    object: str
    details: str


@router.get("", response_model=List[LogEntry])
def get_logs(
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of entries"),
    operator: Optional[str] = Query(None, description="Server tag filter"),
):
    """Get configuration change log, newest first."""
    logs = operation_logger.get_logs(limit=limit, filter_operator=operator)

    return [
        LogEntry(
            timestamp=log["timestamp"],
            level=log["level"],
            operator=log["operator"],
            action=log["action"],
            object=log["object"],
            details=log["details"],
        )
        for log in logs
    ]
