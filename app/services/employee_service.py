"""
Employee service.

Typed operations over the record store and query layer: validation that the
request schemas cannot express, duplicate-email handling, bulk mutations and
CSV export. The HTTP layers (legacy, v2 and views) all go through this class.
"""

import csv
import io
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud import employee as employee_crud
from app.models.employee import DEPARTMENT_MAX_LENGTH, Employee
from app.schemas.employee import EmployeeBase, EmployeeSearchRequest
from app.services import employee_query
from app.services.employee_query import EmployeeFilter, Page, Statistics

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Id",
    "EmployeeName",
    "Email",
    "Department",
    "Salary",
    "Address1",
    "Address2",
    "Address3",
    "State",
    "District",
    "Pincode",
]


class EmployeeServiceError(Exception):
    """Base class for errors the HTTP layer turns into 4xx responses."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmployeeNotFoundError(EmployeeServiceError):
    """No employee matched the given id (or any of the given ids)."""


class DuplicateEmailError(EmployeeServiceError):
    """Another employee already uses this email address."""

    def __init__(self, email: str):
        super().__init__("Email already exists")
        self.email = email


class EmployeeValidationError(EmployeeServiceError):
    """Input rejected before touching the database."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def _require(value: Optional[str], message: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise EmployeeValidationError(message, field=field)
    return value


_email_adapter = TypeAdapter(EmailStr)


def _normalize_email(email: str) -> str:
    """Normalize an address the same way EmailStr does on create and update."""
    try:
        return _email_adapter.validate_python(email)
    except ValidationError:
        raise EmployeeValidationError("Invalid email format", field="email") from None


class EmployeeService:
    """
    Service facade for employee records.

    The database session is passed in explicitly; one service instance is
    meant to live for a single request.
    """

    def __init__(self, db: Session):
        self.db = db

    # Reads

    def get(self, employee_id: int) -> Employee:
        employee = employee_crud.get_by_id(self.db, employee_id)
        if not employee:
            raise EmployeeNotFoundError("Employee not found")
        return employee

    def list_all(self) -> List[Employee]:
        return employee_crud.get_all(self.db)

    def list_by_department(self, department: Optional[str]) -> List[Employee]:
        department = _require(department, "Department is required", "department")
        return employee_query.search(self.db, EmployeeFilter(department=department))

    def list_by_state(self, state: Optional[str]) -> List[Employee]:
        state = _require(state, "State is required", "state")
        return employee_query.search(self.db, EmployeeFilter(state=state))

    def list_paginated(self, page: int, page_size: int) -> Page:
        return employee_query.search_paginated(self.db, EmployeeFilter(), page, page_size)

    def search_by_name(self, name: Optional[str]) -> List[Employee]:
        name = _require(name, "Search name is required", "name")
        return employee_query.search(self.db, EmployeeFilter(name=name))

    def advanced_search(self, search: EmployeeSearchRequest) -> List[Employee]:
        return employee_query.search(self.db, self._filter_for(search))

    def advanced_search_paginated(self, search: EmployeeSearchRequest) -> Page:
        return employee_query.search_paginated(
            self.db, self._filter_for(search), search.page, search.page_size
        )

    def salary_range(self, min_salary: Decimal, max_salary: Decimal) -> List[Employee]:
        if min_salary > max_salary:
            raise EmployeeValidationError(
                "Min salary cannot be greater than max salary", field="min_salary"
            )
        return employee_query.salary_range(self.db, min_salary, max_salary)

    def top_earners(self, count: int) -> List[Employee]:
        return employee_query.top_earners(self.db, count)

    def statistics(self) -> Statistics:
        return employee_query.statistics(self.db)

    def departments(self) -> List[str]:
        return employee_query.distinct_departments(self.db)

    def states(self) -> List[str]:
        return employee_query.distinct_states(self.db)

    def count_by_department(self) -> List[Tuple[str, int]]:
        return employee_query.count_by_department(self.db, order_by_count=True)

    def email_exists(self, email: Optional[str]) -> bool:
        email = _require(email, "Email is required", "email")
        return employee_crud.email_exists(self.db, _normalize_email(email))

    # Writes

    def create(self, employee_data: EmployeeBase) -> Employee:
        """
        Create an employee.

        The existence check gives a clean conflict in the common case; the
        unique index on `email` catches the race where two creates pass the
        check together.

        Raises:
            DuplicateEmailError: If the email is already in use
        """
        if employee_crud.email_exists(self.db, employee_data.email):
            logger.warning(f"Rejected employee create: email {employee_data.email} already exists")
            raise DuplicateEmailError(employee_data.email)

        try:
            employee = employee_crud.create(self.db, employee_data)
        except IntegrityError as e:
            logger.warning(f"Rejected employee create: unique index violation for {employee_data.email}")
            raise DuplicateEmailError(employee_data.email) from e

        logger.info(f"Created employee {employee.id}: {employee.employee_name}")
        return employee

    def update(self, employee_id: int, employee_data: EmployeeBase) -> Employee:
        """
        Overwrite every field of an existing employee.

        Raises:
            EmployeeNotFoundError: If no employee has this id
            DuplicateEmailError: If the new email belongs to another employee
        """
        if not employee_crud.get_by_id(self.db, employee_id):
            raise EmployeeNotFoundError("Employee not found")

        if employee_crud.email_exists(self.db, employee_data.email, exclude_id=employee_id):
            logger.warning(f"Rejected update of employee {employee_id}: email {employee_data.email} in use")
            raise DuplicateEmailError(employee_data.email)

        try:
            employee = employee_crud.update(self.db, employee_id, employee_data)
        except IntegrityError as e:
            raise DuplicateEmailError(employee_data.email) from e

        logger.info(f"Updated employee {employee_id}")
        return employee

    def delete(self, employee_id: int) -> None:
        if not employee_crud.delete(self.db, employee_id):
            raise EmployeeNotFoundError("Employee not found")
        logger.info(f"Deleted employee {employee_id}")

    def bulk_delete(self, employee_ids: Sequence[int]) -> int:
        """
        Delete every listed employee that exists. Unknown ids are ignored.

        Returns:
            Number of employees deleted

        Raises:
            EmployeeValidationError: If no ids were given
            EmployeeNotFoundError: If none of the ids exist
        """
        if not employee_ids:
            raise EmployeeValidationError("Employee IDs are required", field="employee_ids")

        deleted = employee_crud.delete_many(self.db, employee_ids)
        if not deleted:
            raise EmployeeNotFoundError("No employees found with the provided IDs")

        logger.info(f"Bulk deleted {deleted} of {len(employee_ids)} requested employees")
        return deleted

    def bulk_update_department(self, employee_ids: Sequence[int], new_department: Optional[str]) -> int:
        """
        Move every listed employee that exists to `new_department`.

        Returns:
            Number of employees updated
        """
        if not employee_ids:
            raise EmployeeValidationError("Employee IDs are required", field="employee_ids")
        new_department = _require(new_department, "New department is required", "new_department")
        if len(new_department) > DEPARTMENT_MAX_LENGTH:
            raise EmployeeValidationError(
                f"Department cannot exceed {DEPARTMENT_MAX_LENGTH} characters", field="new_department"
            )

        updated = employee_crud.update_department_many(self.db, employee_ids, new_department)
        if not updated:
            raise EmployeeNotFoundError("No employees found with the provided IDs")

        logger.info(f"Moved {updated} employees to department '{new_department}'")
        return updated

    # Export

    def export_csv(self) -> str:
        """
        Render every employee as CSV, one row per employee ordered by id.

        Values containing commas, quotes or line breaks are quoted, everything
        else is written as-is.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for emp in employee_crud.get_all(self.db):
            writer.writerow([
                emp.id,
                emp.employee_name,
                emp.email,
                emp.department,
                emp.salary,
                emp.address1,
                emp.address2,
                emp.address3,
                emp.state,
                emp.district,
                emp.pincode,
            ])
        return buffer.getvalue()

    @staticmethod
    def _filter_for(search: EmployeeSearchRequest) -> EmployeeFilter:
        return EmployeeFilter(
            name=search.name,
            department=search.department,
            state=search.state,
            min_salary=search.min_salary,
            max_salary=search.max_salary,
        )
