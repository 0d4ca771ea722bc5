"""Health check for load balancers and uptime probes."""
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from api.database import get_engine
from config import API_VERSION
from db.database import check_db

router = APIRouter()


@router.get("/health")
def health_check(engine: Engine = Depends(get_engine)):
    return {"status": "ok", "db": check_db(engine), "version": API_VERSION}
