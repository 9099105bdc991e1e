"""
Pydantic schemas for Employee API requests/responses.
"""

from decimal import Decimal
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, EmailStr

from app.models.employee import (
    NAME_MAX_LENGTH,
    DEPARTMENT_MAX_LENGTH,
    ADDRESS_MAX_LENGTH,
    STATE_MAX_LENGTH,
    DISTRICT_MAX_LENGTH,
    PINCODE_MAX_LENGTH,
    SALARY_MAX_DIGITS,
    SALARY_DECIMAL_PLACES,
)

T = TypeVar("T")


class EmployeeBase(BaseModel):
    """Writable employee fields. Create and update both send the full record."""
    employee_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH, description="Employee name")
    email: EmailStr = Field(..., description="Work email, unique across employees")
    department: str = Field(..., min_length=1, max_length=DEPARTMENT_MAX_LENGTH)
    salary: Decimal = Field(
        Decimal("0"),
        ge=0,
        max_digits=SALARY_MAX_DIGITS,
        decimal_places=SALARY_DECIMAL_PLACES,
        description="Salary must be a non-negative number with at most 2 decimal places",
    )
    address1: str = Field("", max_length=ADDRESS_MAX_LENGTH)
    address2: str = Field("", max_length=ADDRESS_MAX_LENGTH)
    address3: str = Field("", max_length=ADDRESS_MAX_LENGTH)
    state: str = Field(..., min_length=1, max_length=STATE_MAX_LENGTH)
    district: str = Field("", max_length=DISTRICT_MAX_LENGTH)
    pincode: str = Field("", max_length=PINCODE_MAX_LENGTH)

    class Config:
        str_strip_whitespace = True


class EmployeeCreateRequest(EmployeeBase):
    """Schema for creating a new employee"""
    pass


class EmployeeUpdateRequest(EmployeeBase):
    """Schema for updating an employee (full overwrite, not a partial patch)"""
    pass


class EmployeeResponse(BaseModel):
    """Schema for employee response"""
    id: int
    employee_name: str
    email: str
    department: str
    salary: Decimal
    address1: str
    address2: str
    address3: str
    state: str
    district: str
    pincode: str

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models


class EmployeeSearchRequest(BaseModel):
    """
    Multi-filter search. Every filter is optional; blank strings are ignored.

    `page` and `page_size` are only used by the paginated variant and are
    clamped server-side rather than rejected.
    """
    name: Optional[str] = None
    department: Optional[str] = None
    state: Optional[str] = None
    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None
    page: int = 1
    page_size: int = 10


class BulkUpdateDepartmentRequest(BaseModel):
    """Move several employees to one department"""
    employee_ids: List[int] = Field(default_factory=list)
    new_department: str = ""


class PaginatedEmployees(BaseModel):
    """One page of employees plus the totals needed to walk the rest"""
    data: List[EmployeeResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, page) -> "PaginatedEmployees":
        """Build from a query-layer Page holding ORM rows."""
        return cls(
            data=[EmployeeResponse.model_validate(item) for item in page.items],
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        )


class DepartmentCount(BaseModel):
    department: str
    count: int

    @classmethod
    def from_pairs(cls, pairs) -> List["DepartmentCount"]:
        return [cls(department=department, count=count) for department, count in pairs]


class StateCount(BaseModel):
    state: str
    count: int

    @classmethod
    def from_pairs(cls, pairs) -> List["StateCount"]:
        return [cls(state=state, count=count) for state, count in pairs]


class EmployeeStatistics(BaseModel):
    """
    Aggregate salary figures plus department/state breakdowns.

    Salary aggregates are null when there are no employees.
    """
    total_employees: int
    average_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None
    min_salary: Optional[Decimal] = None
    department_breakdown: List[DepartmentCount]
    state_breakdown: List[StateCount]

    @classmethod
    def from_statistics(cls, stats) -> "EmployeeStatistics":
        return cls(
            total_employees=stats.total_employees,
            average_salary=stats.average_salary,
            max_salary=stats.max_salary,
            min_salary=stats.min_salary,
            department_breakdown=DepartmentCount.from_pairs(stats.department_breakdown),
            state_breakdown=StateCount.from_pairs(stats.state_breakdown),
        )


def to_responses(employees) -> List[EmployeeResponse]:
    """Convert ORM rows to response schemas."""
    return [EmployeeResponse.model_validate(employee) for employee in employees]


class EmailExistsResponse(BaseModel):
    email_exists: bool


class FieldError(BaseModel):
    """A single field-level validation message"""
    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope returned by every v2 endpoint"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    count: Optional[int] = None


class ErrorResponse(ApiResponse[Any]):
    """Envelope for failed v2 requests: the same keys as ApiResponse plus field errors"""
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None
