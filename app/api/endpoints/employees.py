"""
Legacy employee API.

Returns bare records, lists and plain message strings. Errors use FastAPI's
`{"detail": ...}` body (see app.core.errors).
"""

import logging
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Body, Depends, Response

from app.core.deps import get_employee_service
from app.schemas.employee import (
    BulkUpdateDepartmentRequest,
    DepartmentCount,
    EmailExistsResponse,
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeSearchRequest,
    EmployeeStatistics,
    EmployeeUpdateRequest,
    PaginatedEmployees,
)
from app.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["Employees"])
logger = logging.getLogger(__name__)


@router.post("/add", response_model=EmployeeResponse)
def add_employee(
    request: EmployeeCreateRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    """Create an employee. Returns 409 if the email is already used."""
    return service.create(request)


@router.get("/list", response_model=List[EmployeeResponse])
def list_employees(service: EmployeeService = Depends(get_employee_service)):
    return service.list_all()


@router.put("/update/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: int,
    request: EmployeeUpdateRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    """Replace every field of an employee."""
    return service.update(employee_id, request)


@router.delete("/delete/{employee_id}", response_model=str)
def delete_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    service.delete(employee_id)
    return f"Employee with ID {employee_id} deleted successfully."


@router.get("/get/{employee_id}", response_model=EmployeeResponse)
def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    return service.get(employee_id)


@router.get("/search", response_model=List[EmployeeResponse])
def search_employees(
    name: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    """Case-insensitive substring search on the employee name."""
    return service.search_by_name(name)


@router.get("/filter/department", response_model=List[EmployeeResponse])
def filter_by_department(
    department: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    return service.list_by_department(department)


@router.get("/filter/state", response_model=List[EmployeeResponse])
def filter_by_state(
    state: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    return service.list_by_state(state)


@router.get("/paginated", response_model=PaginatedEmployees)
def list_employees_paginated(
    page: int = 1,
    page_size: int = 10,
    service: EmployeeService = Depends(get_employee_service)
):
    """
    List employees one page at a time.

    Args:
        page: 1-based page number (values below 1 become 1; pages past the end are empty)
        page_size: Results per page (outside 1-100 falls back to 10)
    """
    return PaginatedEmployees.from_page(service.list_paginated(page, page_size))


@router.get("/statistics", response_model=EmployeeStatistics)
def get_statistics(service: EmployeeService = Depends(get_employee_service)):
    return EmployeeStatistics.from_statistics(service.statistics())


@router.get("/departments", response_model=List[str])
def list_departments(service: EmployeeService = Depends(get_employee_service)):
    return service.departments()


@router.get("/states", response_model=List[str])
def list_states(service: EmployeeService = Depends(get_employee_service)):
    return service.states()


@router.delete("/bulk-delete", response_model=str)
def bulk_delete_employees(
    employee_ids: Optional[List[int]] = Body(None),
    service: EmployeeService = Depends(get_employee_service)
):
    """Delete several employees. Ids that don't exist are skipped."""
    deleted = service.bulk_delete(employee_ids)
    return f"Successfully deleted {deleted} employees."


@router.put("/bulk-update-department", response_model=str)
def bulk_update_department(
    request: BulkUpdateDepartmentRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    updated = service.bulk_update_department(request.employee_ids, request.new_department)
    return f"Successfully updated department for {updated} employees."


@router.get("/advanced-search", response_model=List[EmployeeResponse])
def advanced_search(
    name: Optional[str] = None,
    department: Optional[str] = None,
    state: Optional[str] = None,
    min_salary: Optional[Decimal] = None,
    max_salary: Optional[Decimal] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    """Combine any of the name/department/state/salary filters."""
    search = EmployeeSearchRequest(
        name=name,
        department=department,
        state=state,
        min_salary=min_salary,
        max_salary=max_salary,
    )
    return service.advanced_search(search)


@router.get("/salary-range", response_model=List[EmployeeResponse])
def salary_range(
    min_salary: Decimal,
    max_salary: Decimal,
    service: EmployeeService = Depends(get_employee_service)
):
    """Employees earning between min_salary and max_salary inclusive, lowest first."""
    return service.salary_range(min_salary, max_salary)


@router.get("/top-earners", response_model=List[EmployeeResponse])
def top_earners(count: int = 10, service: EmployeeService = Depends(get_employee_service)):
    """Highest-paid employees. `count` is clamped into 1-100."""
    return service.top_earners(count)


@router.get("/email-exists", response_model=EmailExistsResponse)
def email_exists(
    email: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    return EmailExistsResponse(email_exists=service.email_exists(email))


@router.get("/count-by-department", response_model=List[DepartmentCount])
def count_by_department(service: EmployeeService = Depends(get_employee_service)):
    """Headcount per department, largest first."""
    return DepartmentCount.from_pairs(service.count_by_department())


@router.get("/export-csv")
def export_csv(service: EmployeeService = Depends(get_employee_service)):
    csv_data = service.export_csv()
    logger.info("Exported employees to CSV")
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=employees.csv"},
    )
