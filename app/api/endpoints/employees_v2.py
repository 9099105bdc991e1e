"""
Employee API v2.

Same operations as the legacy API, but every JSON response is wrapped in
`{"success", "message", "data", "count"}` and failures use the same envelope
with `success: false`.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Response, status

from app.core.config import settings
from app.core.deps import get_employee_service
from app.schemas.employee import (
    ApiResponse,
    BulkUpdateDepartmentRequest,
    DepartmentCount,
    EmailExistsResponse,
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeSearchRequest,
    EmployeeStatistics,
    EmployeeUpdateRequest,
    PaginatedEmployees,
    to_responses,
)
from app.services.employee_service import EmployeeService, EmployeeValidationError

router = APIRouter(prefix="/employees", tags=["Employees v2"])
logger = logging.getLogger(__name__)


def _listing(employees) -> ApiResponse[List[EmployeeResponse]]:
    data = to_responses(employees)
    return ApiResponse[List[EmployeeResponse]](data=data, count=len(data))


@router.get("/get/{employee_id}", response_model=ApiResponse[EmployeeResponse])
def get_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    employee = service.get(employee_id)
    return ApiResponse[EmployeeResponse](data=EmployeeResponse.model_validate(employee))


@router.get("/list", response_model=ApiResponse[List[EmployeeResponse]])
def list_employees(
    department: Optional[str] = None,
    state: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    """
    List employees, optionally filtered.

    Only one filter applies: department wins over state when both are given.
    """
    if department and department.strip():
        return _listing(service.list_by_department(department))
    if state and state.strip():
        return _listing(service.list_by_state(state))
    return _listing(service.list_all())


@router.get("/paginated", response_model=ApiResponse[PaginatedEmployees])
def list_employees_paginated(
    page: int = 1,
    page_size: int = 10,
    service: EmployeeService = Depends(get_employee_service)
):
    result = PaginatedEmployees.from_page(service.list_paginated(page, page_size))
    return ApiResponse[PaginatedEmployees](data=result)


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[EmployeeResponse])
def create_employee(
    request: EmployeeCreateRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    """
    Create an employee.

    Returns 400 with field errors for invalid input and 409 if the email is
    already used.
    """
    employee = service.create(request)
    return ApiResponse[EmployeeResponse](
        message="Employee created successfully",
        data=EmployeeResponse.model_validate(employee),
    )


@router.put("/update/{employee_id}", response_model=ApiResponse[EmployeeResponse])
def update_employee(
    employee_id: int,
    request: EmployeeUpdateRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    employee = service.update(employee_id, request)
    return ApiResponse[EmployeeResponse](
        message="Employee updated successfully",
        data=EmployeeResponse.model_validate(employee),
    )


@router.delete("/delete/{employee_id}", response_model=ApiResponse)
def delete_employee(employee_id: int, service: EmployeeService = Depends(get_employee_service)):
    service.delete(employee_id)
    return ApiResponse(message="Employee deleted successfully")


@router.get("/search", response_model=ApiResponse[List[EmployeeResponse]])
def search_employees(
    name: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    return _listing(service.search_by_name(name))


@router.post("/advanced-search", response_model=ApiResponse[List[EmployeeResponse]])
def advanced_search(
    search: EmployeeSearchRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    """Multi-filter search. Paging fields in the body are ignored here."""
    return _listing(service.advanced_search(search))


@router.post("/advanced-search-paginated", response_model=ApiResponse[PaginatedEmployees])
def advanced_search_paginated(
    search: EmployeeSearchRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    result = PaginatedEmployees.from_page(service.advanced_search_paginated(search))
    return ApiResponse[PaginatedEmployees](data=result)


@router.get("/salary-range", response_model=ApiResponse[List[EmployeeResponse]])
def salary_range(
    min_salary: Decimal,
    max_salary: Decimal,
    service: EmployeeService = Depends(get_employee_service)
):
    return _listing(service.salary_range(min_salary, max_salary))


@router.get("/top-earners", response_model=ApiResponse[List[EmployeeResponse]])
def top_earners(count: int = 10, service: EmployeeService = Depends(get_employee_service)):
    """Highest-paid employees. Unlike the legacy API, `count` outside 1-100 is rejected."""
    if count < 1 or count > settings.MAX_PAGE_SIZE:
        raise EmployeeValidationError(
            f"Count must be between 1 and {settings.MAX_PAGE_SIZE}", field="count"
        )
    return _listing(service.top_earners(count))


@router.get("/statistics", response_model=ApiResponse[EmployeeStatistics])
def get_statistics(service: EmployeeService = Depends(get_employee_service)):
    stats = EmployeeStatistics.from_statistics(service.statistics())
    return ApiResponse[EmployeeStatistics](data=stats)


@router.get("/departments", response_model=ApiResponse[List[str]])
def list_departments(service: EmployeeService = Depends(get_employee_service)):
    departments = service.departments()
    return ApiResponse[List[str]](data=departments, count=len(departments))


@router.get("/states", response_model=ApiResponse[List[str]])
def list_states(service: EmployeeService = Depends(get_employee_service)):
    states = service.states()
    return ApiResponse[List[str]](data=states, count=len(states))


@router.get("/email-exists", response_model=ApiResponse[EmailExistsResponse])
def email_exists(
    email: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    exists = service.email_exists(email)
    return ApiResponse[EmailExistsResponse](data=EmailExistsResponse(email_exists=exists))


@router.delete("/bulk-delete", response_model=ApiResponse)
def bulk_delete_employees(
    employee_ids: Optional[List[int]] = Body(None),
    service: EmployeeService = Depends(get_employee_service)
):
    deleted = service.bulk_delete(employee_ids)
    return ApiResponse(message=f"Successfully deleted {deleted} employees", count=deleted)


@router.put("/bulk-update-department", response_model=ApiResponse)
def bulk_update_department(
    request: BulkUpdateDepartmentRequest,
    service: EmployeeService = Depends(get_employee_service)
):
    updated = service.bulk_update_department(request.employee_ids, request.new_department)
    return ApiResponse(
        message=f"Successfully updated department for {updated} employees",
        count=updated,
    )


@router.get("/export-csv")
def export_csv(service: EmployeeService = Depends(get_employee_service)):
    """CSV download. This is the one v2 endpoint without the JSON envelope."""
    csv_data = service.export_csv()
    logger.info("Exported employees to CSV")
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=employees.csv"},
    )


@router.get("/count-by-department", response_model=ApiResponse[List[DepartmentCount]])
def count_by_department(service: EmployeeService = Depends(get_employee_service)):
    counts = DepartmentCount.from_pairs(service.count_by_department())
    return ApiResponse[List[DepartmentCount]](data=counts, count=len(counts))


@router.get("/health", response_model=ApiResponse[Dict[str, Any]])
def health_check():
    return ApiResponse[Dict[str, Any]](
        message="Employee API v2 is running",
        data={"timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")},
    )
