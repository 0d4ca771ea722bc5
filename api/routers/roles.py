"""Role endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Engine

from api.database import get_engine
from api.models import Role, RoleCreate
from db.database import transaction
from directory import roles as service

router = APIRouter()


@router.get("", response_model=list[Role])
def list_roles(engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.list_roles(con)


@router.post("", response_model=Role, status_code=status.HTTP_201_CREATED)
def create_role(body: RoleCreate, engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.create_role(con, body.name, body.permissions)
