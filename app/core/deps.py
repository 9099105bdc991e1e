"""
FastAPI dependencies shared by the API and view routers.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.employee_service import EmployeeService


def get_employee_service(db: Session = Depends(get_db)) -> EmployeeService:
    """
    Build an EmployeeService bound to the request's database session.

    The session comes from get_db, so tests can swap the database by
    overriding that single dependency.
    """
    return EmployeeService(db)
