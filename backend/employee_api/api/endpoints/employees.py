from __future__ import annotations

import logging
import re

from fastapi import APIRouter, HTTPException, status

from employee_api.core.errors import EMPLOYEE_NOT_FOUND, INTERNAL_ERROR
from employee_api.models.employee import (
    Employee,
    EmployeeCreate,
    EmployeeDetail,
    EmployeePage,
    EmployeeUpdate,
)
from employee_api.services.employee_service import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def parse_positive_int(value: str | None, default: int) -> int:
    """Read the integer prefix of ``value`` ("3abc" -> 3).

    Missing and non-numeric values fall back to ``default``. Zero and negative
    values do too, so ``skip`` never goes negative and ``totalPages`` stays
    non-negative.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    number = int(match.group(1))
    return number if number > 0 else default


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_ERROR,
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=EMPLOYEE_NOT_FOUND)


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(payload: EmployeeCreate | None = None):
    try:
        return await employee_service.create_employee(payload or EmployeeCreate())
    except Exception as err:
        logger.exception("Failed to create employee")
        raise _internal_error() from err


@router.put("/{employee_id}", response_model=EmployeeDetail)
async def update_employee(employee_id: str, payload: EmployeeUpdate | None = None):
    try:
        employee = await employee_service.update_employee(employee_id, payload or EmployeeUpdate())
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise _internal_error() from err

    if employee is None:
        raise _not_found()

    return employee


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    try:
        deleted = await employee_service.delete_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise _internal_error() from err

    if not deleted:
        raise _not_found()

    return {"message": "Employee deleted successfully"}


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(employee_id: str):
    try:
        employee = await employee_service.get_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise _internal_error() from err

    if employee is None:
        raise _not_found()

    return employee


@router.get("", response_model=EmployeePage)
async def list_employees(page: str | None = None, limit: str | None = None):
    current_page = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, DEFAULT_LIMIT)
    try:
        return await employee_service.list_employees(page=current_page, limit=page_size)
    except Exception as err:
        logger.exception("Failed to list employees")
        raise _internal_error() from err
