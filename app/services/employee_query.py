"""
Query and aggregation layer over the employee table.

Builds filtered, sorted, paginated and grouped views of the record store.
Filters are plain data (`EmployeeFilter`) that turn into SQLAlchemy criteria,
so callers can combine several of them and the store evaluates the result.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.core.config import settings
from app.crud import employee as employee_crud
from app.models.employee import Employee

TWO_PLACES = Decimal("0.01")


@dataclass
class EmployeeFilter:
    """
    Optional employee filters, AND-ed together.

    - name: case-insensitive substring of the employee name
    - department / state: exact match
    - min_salary / max_salary: inclusive bounds
    Blank strings and None are treated as "no filter".
    """
    name: Optional[str] = None
    department: Optional[str] = None
    state: Optional[str] = None
    min_salary: Optional[Decimal] = None
    max_salary: Optional[Decimal] = None

    def criteria(self) -> list:
        clauses = []
        if self.name:
            clauses.append(Employee.employee_name.icontains(self.name, autoescape=True))
        if self.department:
            clauses.append(Employee.department == self.department)
        if self.state:
            clauses.append(Employee.state == self.state)
        if self.min_salary is not None:
            clauses.append(Employee.salary >= self.min_salary)
        if self.max_salary is not None:
            clauses.append(Employee.salary <= self.max_salary)
        return clauses


def combine(*filters: EmployeeFilter) -> list:
    """Criteria for all `filters` together."""
    clauses = []
    for flt in filters:
        clauses.extend(flt.criteria())
    return clauses


@dataclass
class Page:
    """A slice of results plus the totals needed to walk the remaining pages."""
    items: List[Employee]
    total_count: int
    page: int
    page_size: int
    total_pages: int


@dataclass
class Statistics:
    total_employees: int
    average_salary: Optional[Decimal]
    max_salary: Optional[Decimal]
    min_salary: Optional[Decimal]
    department_breakdown: List[Tuple[str, int]] = field(default_factory=list)
    state_breakdown: List[Tuple[str, int]] = field(default_factory=list)


def clamp_page(page: int) -> int:
    """Pages are 1-based; anything lower becomes the first page."""
    return page if page >= 1 else 1


def clamp_page_size(page_size: int) -> int:
    """Out-of-range page sizes fall back to the default size."""
    if page_size < 1 or page_size > settings.MAX_PAGE_SIZE:
        return settings.DEFAULT_PAGE_SIZE
    return page_size


def clamp_count(count: int) -> int:
    """Clamp a result count into [1, MAX_PAGE_SIZE]."""
    return max(1, min(count, settings.MAX_PAGE_SIZE))


def _to_decimal(value) -> Optional[Decimal]:
    # SQLite hands back floats for aggregates, PostgreSQL hands back Decimals
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def paginate(query: Query, page: int, page_size: int) -> Page:
    """
    Slice an ordered query into one page.

    `page` and `page_size` are clamped first, so callers can pass raw
    query-string values. A page past the last one is empty; its offset is
    never sent to the database, where it may not fit a 64-bit integer.
    """
    page = clamp_page(page)
    page_size = clamp_page_size(page_size)

    total_count = query.order_by(None).count()
    offset = (page - 1) * page_size
    if offset >= total_count:
        items = []
    else:
        items = query.offset(offset).limit(page_size).all()

    return Page(
        items=items,
        total_count=total_count,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total_count / page_size),
    )


def search(db: Session, *filters: EmployeeFilter) -> List[Employee]:
    """All employees matching every filter, ordered by id."""
    return employee_crud.find(db, combine(*filters))


def search_paginated(db: Session, flt: EmployeeFilter, page: int, page_size: int) -> Page:
    """One page of employees matching `flt`, ordered by id."""
    query = db.query(Employee).filter(*flt.criteria()).order_by(Employee.id)
    return paginate(query, page, page_size)


def salary_range(db: Session, min_salary: Decimal, max_salary: Decimal) -> List[Employee]:
    """Employees with min_salary <= salary <= max_salary, lowest salary first."""
    flt = EmployeeFilter(min_salary=min_salary, max_salary=max_salary)
    return (
        db.query(Employee)
        .filter(*flt.criteria())
        .order_by(Employee.salary, Employee.id)
        .all()
    )


def top_earners(db: Session, count: int) -> List[Employee]:
    """The `count` best-paid employees, highest salary first."""
    return (
        db.query(Employee)
        .order_by(Employee.salary.desc(), Employee.id)
        .limit(clamp_count(count))
        .all()
    )


def _count_by(db: Session, column, order_by_count: bool) -> List[Tuple[str, int]]:
    total = func.count(Employee.id)
    query = db.query(column, total).group_by(column)
    if order_by_count:
        query = query.order_by(total.desc(), column)
    else:
        query = query.order_by(column)
    return [(value, count) for value, count in query.all()]


def count_by_department(db: Session, order_by_count: bool = False) -> List[Tuple[str, int]]:
    """(department, employee count) pairs, by name or by count descending."""
    return _count_by(db, Employee.department, order_by_count)


def count_by_state(db: Session) -> List[Tuple[str, int]]:
    """(state, employee count) pairs ordered by state."""
    return _count_by(db, Employee.state, order_by_count=False)


def distinct_departments(db: Session) -> List[str]:
    rows = db.query(Employee.department).distinct().order_by(Employee.department).all()
    return [row[0] for row in rows]


def distinct_states(db: Session) -> List[str]:
    rows = db.query(Employee.state).distinct().order_by(Employee.state).all()
    return [row[0] for row in rows]


def statistics(db: Session) -> Statistics:
    """
    Headcount, salary aggregates and department/state breakdowns.

    The average is sum / count rounded half-up to two places. With no
    employees the salary aggregates are None.
    """
    total, salary_sum, max_salary, min_salary = db.query(
        func.count(Employee.id),
        func.sum(Employee.salary),
        func.max(Employee.salary),
        func.min(Employee.salary),
    ).one()

    average = None
    if total:
        average = (_to_decimal(salary_sum) / total).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    return Statistics(
        total_employees=total,
        average_salary=average,
        max_salary=_to_decimal(max_salary),
        min_salary=_to_decimal(min_salary),
        department_breakdown=count_by_department(db),
        state_breakdown=count_by_state(db),
    )
