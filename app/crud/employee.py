"""
CRUD operations for Employee model.

Implements the Repository pattern to encapsulate all database operations
for employees, providing a clean interface for the query and service layers.
Every function takes the session explicitly; nothing here holds state.
"""

from typing import Iterable, List, Optional, Sequence
from sqlalchemy.orm import Session
from app.models.employee import Employee
from app.schemas.employee import EmployeeBase

# Fields copied from a request schema onto the row on create/update
WRITABLE_FIELDS = (
    "employee_name",
    "email",
    "department",
    "salary",
    "address1",
    "address2",
    "address3",
    "state",
    "district",
    "pincode",
)


def _commit(db: Session) -> None:
    """Commit, rolling the session back if the database rejects the change."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def create(db: Session, employee_data: EmployeeBase) -> Employee:
    """
    Create a new employee in the database.

    Args:
        db: Database session
        employee_data: Validated employee data

    Returns:
        Created Employee instance with id

    Raises:
        sqlalchemy.exc.IntegrityError: If the email is already taken
    """
    db_employee = Employee(**{field: getattr(employee_data, field) for field in WRITABLE_FIELDS})

    db.add(db_employee)
    _commit(db)
    db.refresh(db_employee)

    return db_employee


def get_by_id(db: Session, employee_id: int) -> Optional[Employee]:
    """
    Retrieve an employee by ID.

    Returns:
        Employee instance if found, None otherwise
    """
    return db.query(Employee).filter(Employee.id == employee_id).first()


def get_all(db: Session) -> List[Employee]:
    """Retrieve every employee, ordered by id."""
    return db.query(Employee).order_by(Employee.id).all()


def get_many(db: Session, employee_ids: Iterable[int]) -> List[Employee]:
    """Retrieve the employees whose id is in `employee_ids`. Unknown ids are ignored."""
    ids = set(employee_ids)
    if not ids:
        return []
    return db.query(Employee).filter(Employee.id.in_(ids)).order_by(Employee.id).all()


def find(db: Session, criteria: Sequence) -> List[Employee]:
    """
    Scan the table with a predicate.

    Args:
        db: Database session
        criteria: SQLAlchemy boolean expressions, AND-ed together

    Returns:
        Matching employees ordered by id
    """
    return db.query(Employee).filter(*criteria).order_by(Employee.id).all()


def update(db: Session, employee_id: int, employee_data: EmployeeBase) -> Optional[Employee]:
    """
    Overwrite every writable field of an employee.

    Args:
        db: Database session
        employee_id: Employee ID to update
        employee_data: Validated replacement data

    Returns:
        Updated Employee instance if found, None otherwise
    """
    employee = get_by_id(db, employee_id)
    if not employee:
        return None

    for field in WRITABLE_FIELDS:
        setattr(employee, field, getattr(employee_data, field))

    _commit(db)
    db.refresh(employee)

    return employee


def delete(db: Session, employee_id: int) -> bool:
    """
    Delete an employee by ID.

    Returns:
        True if deleted, False if not found
    """
    employee = get_by_id(db, employee_id)
    if not employee:
        return False

    db.delete(employee)
    _commit(db)

    return True


def delete_many(db: Session, employee_ids: Iterable[int]) -> int:
    """
    Delete every employee whose id is in `employee_ids` in a single transaction.

    Returns:
        Number of employees deleted (0 if none matched)
    """
    employees = get_many(db, employee_ids)
    if not employees:
        return 0

    for employee in employees:
        db.delete(employee)
    _commit(db)

    return len(employees)


def update_department_many(db: Session, employee_ids: Iterable[int], department: str) -> int:
    """
    Move every matching employee to `department` in a single transaction.

    Returns:
        Number of employees updated (0 if none matched)
    """
    employees = get_many(db, employee_ids)
    if not employees:
        return 0

    for employee in employees:
        employee.department = department
    _commit(db)

    return len(employees)


def email_exists(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    """
    Check whether any employee uses `email`.

    Args:
        db: Database session
        email: Address to look for (exact match)
        exclude_id: Ignore this employee, so an update can keep its own address
    """
    query = db.query(Employee.id).filter(Employee.email == email)
    if exclude_id is not None:
        query = query.filter(Employee.id != exclude_id)
    return bool(db.query(query.exists()).scalar())
