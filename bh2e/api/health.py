"""Health check endpoint."""

from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bh2e.core.logging import get_logger
from bh2e.db.database import get_db
from bh2e.db.models import ActorModel

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> dict[str, Union[str, int]]:
    """Report service status, database reachability and the stored actor count."""
    try:
        actors = db.execute(select(func.count()).select_from(ActorModel)).scalar_one()
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return {"status": "error", "database": "disconnected"}
    return {"status": "ok", "database": "connected", "actors": actors}
