"""Department endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Engine

from api.database import get_engine
from api.models import Department, DepartmentCreate, DepartmentDetail
from db.database import transaction
from directory import departments as service

router = APIRouter()


@router.get("", response_model=list[DepartmentDetail])
def list_departments(engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.list_departments(con)


@router.post("", response_model=Department, status_code=status.HTTP_201_CREATED)
def create_department(body: DepartmentCreate, engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.create_department(con, body.name, body.manager_id)
