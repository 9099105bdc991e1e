"""
Server-rendered pages.

A landing page and a read-only employee table, rendered from the same
service facade the JSON APIs use.
"""

from html import escape
from typing import List, Optional
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from app.core.config import settings
from app.core.deps import get_employee_service
from app.models.employee import Employee
from app.services.employee_service import EmployeeService

router = APIRouter(tags=["Views"], include_in_schema=False)


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
</head>
<body style="font-family: Arial, sans-serif; margin: 40px;">
    <h1>{escape(title)}</h1>
{body}
</body>
</html>
"""


def _employee_rows(employees: List[Employee]) -> str:
    rows = []
    for emp in employees:
        cells = (
            emp.id,
            emp.employee_name,
            emp.email,
            emp.department,
            emp.salary,
            emp.state,
            emp.district,
        )
        rows.append("        <tr>" + "".join(f"<td>{escape(str(c))}</td>" for c in cells) + "</tr>")
    return "\n".join(rows)


@router.get("/", response_class=HTMLResponse)
def index():
    body = f"""    <p>Employee records service.</p>
    <ul>
        <li><a href="/employees">Employee list</a></li>
        <li><a href="/docs">API documentation</a></li>
        <li><a href="{settings.API_V1_STR}/employees/export-csv">Download CSV</a></li>
    </ul>"""
    return _page(settings.PROJECT_NAME, body)


@router.get("/employees", response_class=HTMLResponse)
def employee_list(
    department: Optional[str] = None,
    service: EmployeeService = Depends(get_employee_service)
):
    """Employee table, optionally narrowed to one department."""
    if department and department.strip():
        employees = service.list_by_department(department)
        title = f"Employees in {department.strip()}"
    else:
        employees = service.list_all()
        title = "Employees"

    body = f"""    <p>{len(employees)} employee(s)</p>
    <table border="1" cellpadding="6" style="border-collapse: collapse;">
        <tr><th>Id</th><th>Name</th><th>Email</th><th>Department</th><th>Salary</th><th>State</th><th>District</th></tr>
{_employee_rows(employees)}
    </table>"""
    return _page(title, body)
