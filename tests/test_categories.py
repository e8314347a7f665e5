"""
Category management endpoint tests
Creation validation and atomicity, listing, basic fields, per-category fields
"""

import pytest

from services.categories_service import (
    INSERT_CATEGORY,
    INSERT_DYNAMIC_FIELD,
    SELECT_CATEGORIES,
    SELECT_BASIC_FIELDS,
    SELECT_CATEGORY_FIELDS,
)

VENDOR = {
    "name": "Vendor",
    "fields": [
        {"name": "TaxID", "field_type": "text", "is_required": True},
        {"name": "Founded", "field_type": "date", "is_required": False},
    ]
}


class TestCreateCategory:
    """POST /api/categories"""

    @pytest.mark.asyncio
    async def test_creates_category_and_fields_in_one_transaction(self, client, fake_db):
        response = await client.post("/api/categories", json=VENDOR)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Category created successfully"
        assert body["category_id"] == 1

        assert len(fake_db.committed) == 1
        assert fake_db.rolled_back == []

        statements = fake_db.committed[0].statements
        assert statements[0] == (INSERT_CATEGORY, ("Vendor",))
        assert statements[1] == (
            INSERT_DYNAMIC_FIELD,
            [("TaxID", 1, "text", True), ("Founded", 1, "date", False)]
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload,expected_message", [
        ({"fields": VENDOR["fields"]}, "Missing or invalid category name"),
        ({"name": "   ", "fields": VENDOR["fields"]}, "Missing or invalid category name"),
        ({"name": 42, "fields": VENDOR["fields"]}, "Missing or invalid category name"),
        ({"name": "Vendor"}, "Missing or invalid fields array"),
        ({"name": "Vendor", "fields": []}, "Missing or invalid fields array"),
        ({"name": "Vendor", "fields": {"name": "TaxID"}}, "Missing or invalid fields array"),
        ({"name": "Vendor", "fields": [{"name": " ", "field_type": "text", "is_required": True}]}, "Invalid field name"),
        ({"name": "Vendor", "fields": [{"field_type": "text", "is_required": True}]}, "Invalid field name"),
        ({"name": "Vendor", "fields": [{"name": "TaxID", "field_type": "boolean", "is_required": True}]}, "Invalid field type"),
        ({"name": "Vendor", "fields": [{"name": "TaxID", "field_type": "text", "is_required": "true"}]}, "Invalid is_required flag"),
        ({"name": "Vendor", "fields": [{"name": "TaxID", "field_type": "text", "is_required": 1}]}, "Invalid is_required flag"),
        ({"name": "Vendor", "fields": ["TaxID"]}, "Invalid field name"),
    ])
    async def test_rejects_invalid_payload_without_writing(self, client, fake_db, payload, expected_message):
        response = await client.post("/api/categories", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == expected_message
        assert fake_db.committed == []
        assert fake_db.rolled_back == []

    @pytest.mark.asyncio
    async def test_first_violation_wins(self, client, fake_db):
        payload = {
            "name": "Vendor",
            "fields": [
                {"name": "TaxID", "field_type": "currency", "is_required": True},
                {"name": "", "field_type": "text", "is_required": True},
            ]
        }

        response = await client.post("/api/categories", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid field type"

    @pytest.mark.asyncio
    async def test_non_object_body_is_a_missing_name(self, client, fake_db):
        response = await client.post("/api/categories", json=["Vendor"])

        assert response.status_code == 400
        assert response.json()["message"] == "Missing or invalid category name"

    @pytest.mark.asyncio
    async def test_field_insert_failure_rolls_back(self, client, fake_db):
        fake_db.fail_on = "INSERT INTO DynamicFields"

        response = await client.post("/api/categories", json=VENDOR)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal server error"
        assert "simulated" not in response.text
        assert fake_db.committed == []
        assert len(fake_db.rolled_back) == 1


class TestListCategories:
    """GET /api/categories"""

    @pytest.mark.asyncio
    async def test_returns_every_category(self, client, fake_db):
        fake_db.add_result(SELECT_CATEGORIES, [
            {"id": 1, "name": "Customer"},
            {"id": 2, "name": "Vendor"},
        ])

        response = await client.get("/api/categories")

        assert response.status_code == 200
        assert response.json() == {"categories": [
            {"id": 1, "name": "Customer"},
            {"id": 2, "name": "Vendor"},
        ]}

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(self, client, fake_db):
        fake_db.add_result(SELECT_CATEGORIES, [{"id": 3, "name": "Vendor"}])

        first = await client.get("/api/categories")
        second = await client.get("/api/categories")

        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, client, fake_db):
        fake_db.fail_on = "FROM Categories"

        response = await client.get("/api/categories")

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"


class TestBasicFields:
    """GET /api/basicfields"""

    @pytest.mark.asyncio
    async def test_reads_users_columns_from_schema_metadata(self, client, fake_db):
        fake_db.add_result("information_schema.columns", [
            {"column_name": "id", "data_type": "integer"},
            {"column_name": "name", "data_type": "text"},
            {"column_name": "age", "data_type": "integer"},
        ])

        response = await client.get("/api/basicfields")

        assert response.status_code == 200
        assert response.json()["fields"][2] == {"column_name": "age", "data_type": "integer"}
        assert fake_db.queries == [(SELECT_BASIC_FIELDS, [])]


class TestCategoryFields:
    """GET /api/categories/{categoryId}/fields"""

    @pytest.mark.asyncio
    async def test_returns_fields_of_category(self, client, fake_db):
        fake_db.add_result("FROM DynamicFields", [
            {"id": 5, "name": "TaxID", "category_id": 12, "field_type": "text", "is_required": True},
        ])

        response = await client.get("/api/categories/12/fields")

        assert response.status_code == 200
        assert response.json() == {"fields": [
            {"id": 5, "name": "TaxID", "category_id": 12, "field_type": "text", "is_required": True},
        ]}
        assert fake_db.queries == [(SELECT_CATEGORY_FIELDS, [12])]

    @pytest.mark.asyncio
    async def test_unknown_category_has_no_fields(self, client, fake_db):
        response = await client.get("/api/categories/999/fields")

        assert response.status_code == 200
        assert response.json() == {"fields": []}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category_id", ["-3", "+4"])
    async def test_signed_id_is_looked_up(self, client, fake_db, category_id):
        response = await client.get(f"/api/categories/{category_id}/fields")

        assert response.status_code == 200
        assert response.json() == {"fields": []}
        assert fake_db.queries == [(SELECT_CATEGORY_FIELDS, [int(category_id)])]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category_id", ["abc", "1.5", "-", "--3", "99999999999", "-2147483649"])
    async def test_rejects_non_numeric_id(self, client, fake_db, category_id):
        response = await client.get(f"/api/categories/{category_id}/fields")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid category ID"
        assert fake_db.queries == []

    @pytest.mark.asyncio
    async def test_database_failure_is_generic_500(self, client, fake_db):
        fake_db.fail_on = "FROM DynamicFields"

        response = await client.get("/api/categories/4/fields")

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"
