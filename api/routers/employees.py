"""Employee CRUD endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.engine import Engine

from api.database import get_engine
from api.models import (
    DeactivateResponse,
    Employee,
    EmployeeCreate,
    EmployeeDetail,
    EmployeeUpdate,
)
from config import DEFAULT_PAGE_LIMIT
from db.database import transaction
from directory import employees as service

router = APIRouter()


@router.get("", response_model=list[EmployeeDetail])
def list_employees(
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=0),
    offset: int = Query(0, ge=0),
    department: int | None = Query(None),
    role: int | None = Query(None),
    active: bool | None = Query(None),
    engine: Engine = Depends(get_engine),
):
    filters = service.EmployeeFilters(
        department_id=department,
        role_id=role,
        is_active=active,
        limit=limit,
        offset=offset,
    )
    with transaction(engine) as con:
        return service.list_employees(con, filters)


@router.get("/{employee_id}", response_model=EmployeeDetail)
def get_employee(employee_id: int, engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.get_employee(con, employee_id)


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
def create_employee(body: EmployeeCreate, engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        return service.create_employee(con, body.model_dump())


@router.put("/{employee_id}", response_model=Employee)
def update_employee(employee_id: int, body: EmployeeUpdate, engine: Engine = Depends(get_engine)):
    # exclude_unset: a key sent as null still counts as present
    updates = body.model_dump(exclude_unset=True)
    with transaction(engine) as con:
        return service.update_employee(con, employee_id, updates)


@router.delete("/{employee_id}", response_model=DeactivateResponse)
def deactivate_employee(employee_id: int, engine: Engine = Depends(get_engine)):
    with transaction(engine) as con:
        employee = service.deactivate_employee(con, employee_id)
    return {"message": "Employee deactivated", "employee": employee}
