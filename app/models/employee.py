"""
Employee database model.

A single flat table of employee records. There are no relationships to other
entities; every API operation reads or writes rows of this table.
"""

from sqlalchemy import Column, Integer, String, Numeric
from app.core.database import Base


# Column length limits, shared with the request schemas
NAME_MAX_LENGTH = 100
DEPARTMENT_MAX_LENGTH = 50
ADDRESS_MAX_LENGTH = 200
STATE_MAX_LENGTH = 50
DISTRICT_MAX_LENGTH = 50
PINCODE_MAX_LENGTH = 10
SALARY_MAX_DIGITS = 18
SALARY_DECIMAL_PLACES = 2


class Employee(Base):
    """
    Employee record.

    `id` is assigned by the database on insert and never changes afterwards.
    `email` carries a unique index so concurrent creates with the same address
    cannot both succeed.
    """
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    email = Column(String(254), nullable=False, unique=True, index=True)
    department = Column(String(DEPARTMENT_MAX_LENGTH), nullable=False, index=True)
    salary = Column(Numeric(SALARY_MAX_DIGITS, SALARY_DECIMAL_PLACES), nullable=False, default=0)

    # Address
    address1 = Column(String(ADDRESS_MAX_LENGTH), nullable=False, default="")
    address2 = Column(String(ADDRESS_MAX_LENGTH), nullable=False, default="")
    address3 = Column(String(ADDRESS_MAX_LENGTH), nullable=False, default="")
    state = Column(String(STATE_MAX_LENGTH), nullable=False, index=True)
    district = Column(String(DISTRICT_MAX_LENGTH), nullable=False, default="")
    pincode = Column(String(PINCODE_MAX_LENGTH), nullable=False, default="")

    def __repr__(self):
        return f"<Employee(id={self.id}, name='{self.employee_name}', department='{self.department}')>"
