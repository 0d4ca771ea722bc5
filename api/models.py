"""Pydantic schemas for the directory API."""
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


class EmployeeCreate(BaseModel):
    """Presence of the required fields is checked by the service, not here."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    hire_date: date | None = None
    salary: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None
    department_name: str | None = None
    role_name: str | None = None


class EmployeeUpdate(BaseModel):
    """All fields optional; only keys sent by the client are applied (PUT is partial)."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    hire_date: date | None = None
    salary: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None
    department_name: str | None = None
    role_name: str | None = None


class Employee(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    hire_date: date
    department_id: int | None = None
    role_id: int | None = None
    salary: Decimal
    is_active: bool


class EmployeeDetail(Employee):
    department_name: str | None = None
    role_name: str | None = None


class DeactivateResponse(BaseModel):
    message: str
    employee: Employee


# ---------------------------------------------------------------------------
# Departments & roles
# ---------------------------------------------------------------------------


class DepartmentCreate(BaseModel):
    name: str | None = None
    manager_id: int | None = None


class Department(BaseModel):
    id: int
    name: str
    manager_id: int | None = None


class DepartmentDetail(Department):
    manager_name: str | None = None


class RoleCreate(BaseModel):
    name: str | None = None
    permissions: dict[str, Any] | None = None


class Role(BaseModel):
    id: int
    name: str
    permissions: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
