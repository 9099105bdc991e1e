"""
Test suite for the legacy employee API (/api/employees).

Tests cover:
- Employee creation and validation
- Retrieval, update and deletion
- Search, filters and pagination
- Bulk operations
- Statistics, distinct values and CSV export
"""

import pytest
from decimal import Decimal

BASE = "/api/employees"


class TestEmployeeCreation:
    """Tests for the add endpoint"""

    def test_add_employee_success(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json=sample_employee_data)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] > 0
        assert data["employee_name"] == "Alice Johnson"
        assert Decimal(data["salary"]) == Decimal("50000")

    def test_add_employee_missing_fields(self, client):
        """Missing required fields are reported per field with 400"""
        response = client.post(f"{BASE}/add", json={"employee_name": "Test"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["detail"]}
        assert {"email", "department", "state"} <= fields

    def test_add_employee_invalid_email(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "email": "not-an-email"})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "email"

    def test_add_employee_negative_salary(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "salary": -1})
        assert response.status_code == 400

    def test_add_employee_name_too_long(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "employee_name": "x" * 101})
        assert response.status_code == 400

    def test_add_employee_blank_required_field(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "state": "   "})
        assert response.status_code == 400

    def test_add_duplicate_email(self, client, sample_employee_data):
        client.post(f"{BASE}/add", json=sample_employee_data)
        response = client.post(f"{BASE}/add", json=sample_employee_data)

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"].lower()

    @pytest.mark.parametrize("salary", ["10.005", "1234567890123456789"])
    def test_add_employee_salary_out_of_precision(self, client, sample_employee_data, salary):
        """Salaries beyond 18 digits or 2 decimal places are rejected, not rounded"""
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "salary": salary})

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "salary"

    def test_add_employee_salary_is_exact(self, client, sample_employee_data):
        response = client.post(f"{BASE}/add", json={**sample_employee_data, "salary": "1234567.89"})

        assert response.status_code == 200
        assert response.json()["salary"] == "1234567.89"


class TestEmployeeRetrieval:
    def test_get_employee(self, client, sample_employee_data):
        employee_id = client.post(f"{BASE}/add", json=sample_employee_data).json()["id"]

        response = client.get(f"{BASE}/get/{employee_id}")

        assert response.status_code == 200
        assert response.json()["email"] == "alice@company.com"

    def test_get_nonexistent_employee(self, client):
        response = client.get(f"{BASE}/get/99999")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_list_employees(self, client, make_employee):
        for i in range(3):
            make_employee(f"Emp {i}")

        response = client.get(f"{BASE}/list")

        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_paginated(self, client, make_employee):
        for i in range(12):
            make_employee(f"Emp {i}")

        response = client.get(f"{BASE}/paginated?page=2&page_size=5")

        assert response.status_code == 200
        data = response.json()
        assert len(data["data"]) == 5
        assert data["total_count"] == 12
        assert data["page"] == 2
        assert data["page_size"] == 5
        assert data["total_pages"] == 3

    def test_paginated_clamps_parameters(self, client, make_employee):
        make_employee()

        data = client.get(f"{BASE}/paginated?page=-1&page_size=1000").json()

        assert data["page"] == 1
        assert data["page_size"] == 10

    def test_paginated_page_beyond_integer_range(self, client, make_employee):
        make_employee()

        response = client.get(f"{BASE}/paginated?page=100000000000000000000")

        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["total_count"] == 1


class TestEmployeeUpdateDelete:
    def test_update_employee(self, client, sample_employee_data):
        employee_id = client.post(f"{BASE}/add", json=sample_employee_data).json()["id"]
        payload = {**sample_employee_data, "department": "Finance", "salary": 75000.5}

        response = client.put(f"{BASE}/update/{employee_id}", json=payload)

        assert response.status_code == 200
        assert response.json()["department"] == "Finance"
        assert Decimal(response.json()["salary"]) == Decimal("75000.50")

    def test_update_nonexistent(self, client, sample_employee_data):
        response = client.put(f"{BASE}/update/99999", json=sample_employee_data)
        assert response.status_code == 404

    def test_delete_employee(self, client, sample_employee_data):
        employee_id = client.post(f"{BASE}/add", json=sample_employee_data).json()["id"]

        response = client.delete(f"{BASE}/delete/{employee_id}")

        assert response.status_code == 200
        assert response.json() == f"Employee with ID {employee_id} deleted successfully."
        assert client.get(f"{BASE}/get/{employee_id}").status_code == 404

    def test_delete_nonexistent(self, client):
        assert client.delete(f"{BASE}/delete/99999").status_code == 404


class TestSearchAndFilters:
    @pytest.fixture(autouse=True)
    def staff(self, make_employee):
        make_employee("Alice Smith", department="Engineering", state="CA", salary=90000)
        make_employee("Bob Stone", department="Engineering", state="NY", salary=70000)
        make_employee("Carol Smithers", department="Sales", state="CA", salary=50000)

    def test_search_by_name(self, client):
        response = client.get(f"{BASE}/search?name=SMITH")

        assert response.status_code == 200
        assert [e["employee_name"] for e in response.json()] == ["Alice Smith", "Carol Smithers"]

    def test_search_requires_name(self, client):
        response = client.get(f"{BASE}/search")
        assert response.status_code == 400

    def test_filter_by_department(self, client):
        response = client.get(f"{BASE}/filter/department?department=Engineering")
        assert len(response.json()) == 2

    def test_filter_by_state_requires_value(self, client):
        assert client.get(f"{BASE}/filter/state?state=").status_code == 400

    def test_advanced_search(self, client):
        response = client.get(f"{BASE}/advanced-search?state=CA&min_salary=60000")
        assert [e["employee_name"] for e in response.json()] == ["Alice Smith"]

    def test_salary_range(self, client):
        response = client.get(f"{BASE}/salary-range?min_salary=50000&max_salary=70000")
        assert [Decimal(e["salary"]) for e in response.json()] == [Decimal("50000"), Decimal("70000")]

    def test_salary_range_inverted(self, client):
        response = client.get(f"{BASE}/salary-range?min_salary=70000&max_salary=50000")
        assert response.status_code == 400

    def test_top_earners(self, client):
        response = client.get(f"{BASE}/top-earners?count=1")
        assert [e["employee_name"] for e in response.json()] == ["Alice Smith"]

    def test_top_earners_count_clamped(self, client):
        response = client.get(f"{BASE}/top-earners?count=0")
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_email_exists(self, client):
        response = client.get(f"{BASE}/email-exists?email=employee1@company.com")
        assert response.json() == {"email_exists": True}

        response = client.get(f"{BASE}/email-exists?email=nobody@company.com")
        assert response.json() == {"email_exists": False}

    def test_email_exists_requires_email(self, client):
        assert client.get(f"{BASE}/email-exists").status_code == 400

    def test_email_exists_matches_stored_normalized_email(self, client, sample_employee_data):
        """Mixed-case domains are found, consistent with the duplicate check on add"""
        payload = {**sample_employee_data, "email": "alice@Company.COM"}
        assert client.post(f"{BASE}/add", json=payload).status_code == 200

        response = client.get(f"{BASE}/email-exists?email=alice@Company.COM")
        assert response.json() == {"email_exists": True}
        assert client.post(f"{BASE}/add", json=payload).status_code == 409

    def test_email_exists_malformed(self, client):
        response = client.get(f"{BASE}/email-exists?email=not-an-email")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid email format"


class TestBulkOperations:
    def test_bulk_update_department(self, client, make_employee):
        """Unknown ids are skipped and the message reports the matched count"""
        one = make_employee("One", department="Sales")
        two = make_employee("Two", department="Sales")

        response = client.put(
            f"{BASE}/bulk-update-department",
            json={"employee_ids": [one.id, two.id, 999], "new_department": "Eng"},
        )

        assert response.status_code == 200
        assert response.json() == "Successfully updated department for 2 employees."
        assert client.get(f"{BASE}/get/{one.id}").json()["department"] == "Eng"

    def test_bulk_update_department_validation(self, client):
        response = client.put(
            f"{BASE}/bulk-update-department",
            json={"employee_ids": [], "new_department": "Eng"},
        )
        assert response.status_code == 400

    def test_bulk_update_department_no_match(self, client):
        response = client.put(
            f"{BASE}/bulk-update-department",
            json={"employee_ids": [999], "new_department": "Eng"},
        )
        assert response.status_code == 404

    def test_bulk_delete(self, client, make_employee):
        a = make_employee("A")
        b = make_employee("B")
        make_employee("C")

        response = client.request("DELETE", f"{BASE}/bulk-delete", json=[a.id, b.id])

        assert response.status_code == 200
        assert response.json() == "Successfully deleted 2 employees."
        assert len(client.get(f"{BASE}/list").json()) == 1

    def test_bulk_delete_requires_ids(self, client):
        assert client.request("DELETE", f"{BASE}/bulk-delete", json=[]).status_code == 400

    def test_bulk_delete_no_match(self, client):
        assert client.request("DELETE", f"{BASE}/bulk-delete", json=[999]).status_code == 404


class TestReporting:
    def test_statistics(self, client, make_employee):
        make_employee(department="Eng", state="CA", salary=50000)
        make_employee(department="Eng", state="NY", salary=60000)
        make_employee(department="Ops", state="CA", salary=70001)

        data = client.get(f"{BASE}/statistics").json()

        assert data["total_employees"] == 3
        assert data["average_salary"] == "60000.33"
        assert Decimal(data["min_salary"]) == Decimal("50000")
        assert Decimal(data["max_salary"]) == Decimal("70001")
        assert data["department_breakdown"] == [
            {"department": "Eng", "count": 2},
            {"department": "Ops", "count": 1},
        ]
        assert data["state_breakdown"] == [
            {"state": "CA", "count": 2},
            {"state": "NY", "count": 1},
        ]

    def test_statistics_empty(self, client):
        data = client.get(f"{BASE}/statistics").json()

        assert data["total_employees"] == 0
        assert data["average_salary"] is None
        assert data["department_breakdown"] == []

    def test_departments_and_states(self, client, make_employee):
        make_employee(department="Sales", state="TX")
        make_employee(department="Eng", state="CA")
        make_employee(department="Sales", state="CA")

        assert client.get(f"{BASE}/departments").json() == ["Eng", "Sales"]
        assert client.get(f"{BASE}/states").json() == ["CA", "TX"]

    def test_count_by_department(self, client, make_employee):
        make_employee(department="Eng")
        make_employee(department="Sales")
        make_employee(department="Sales")

        assert client.get(f"{BASE}/count-by-department").json() == [
            {"department": "Sales", "count": 2},
            {"department": "Eng", "count": 1},
        ]

    def test_export_csv(self, client, make_employee):
        make_employee("Doe, John")

        response = client.get(f"{BASE}/export-csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0].startswith("Id,EmployeeName,Email")
        assert '"Doe, John"' in lines[1]
