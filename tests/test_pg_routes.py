"""
DualStore API - Relational Route Tests
=======================================

What:  HTTP-level tests for /api/pg/resources.
How:   HTTPX AsyncClient against the ASGI app, backed by the real
       PostgresResourceStore on SQLite.
"""

import pytest


class TestPgResourceLifecycle:

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, test_client):
        """POST → GET → PUT → DELETE → GET 404."""
        response = await test_client.post(
            "/api/pg/resources", json={"name": "A", "description": "d"}
        )
        assert response.status_code == 201
        created = response.json()
        assert isinstance(created["id"], int)
        assert created == {"id": created["id"], "name": "A", "description": "d"}
        url = f"/api/pg/resources/{created['id']}"

        response = await test_client.get(url)
        assert response.status_code == 200
        assert response.json() == created

        response = await test_client.put(url, json={"name": "B", "description": "d2"})
        assert response.status_code == 200
        assert response.json() == {"id": created["id"], "name": "B", "description": "d2"}

        response = await test_client.delete(url)
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get(url)
        assert response.status_code == 404
        assert response.json() == {"error": "Resource not found"}

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/api/pg/resources")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_includes_created(self, test_client):
        ids = []
        for i in range(3):
            response = await test_client.post(
                "/api/pg/resources", json={"name": f"n{i}", "description": ""}
            )
            ids.append(response.json()["id"])

        response = await test_client.get("/api/pg/resources")

        assert response.status_code == 200
        assert {r["id"] for r in response.json()} >= set(ids)

    @pytest.mark.asyncio
    async def test_update_missing_is_404_and_creates_nothing(self, test_client):
        response = await test_client.put(
            "/api/pg/resources/12345", json={"name": "B", "description": "d2"}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Resource not found"}

        assert (await test_client.get("/api/pg/resources")).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, test_client):
        response = await test_client.delete("/api/pg/resources/12345")
        assert response.status_code == 404
        assert response.json() == {"error": "Resource not found"}

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get(
            "/api/pg/resources", headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"


class TestPgValidation:

    @pytest.mark.asyncio
    async def test_missing_description_is_400_and_creates_nothing(self, test_client):
        response = await test_client.post("/api/pg/resources", json={"name": "A"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert any(d["loc"][-1] == "description" for d in body["details"])
        assert (await test_client.get("/api/pg/resources")).json() == []

    @pytest.mark.asyncio
    async def test_wrong_type_is_400(self, test_client):
        response = await test_client.post(
            "/api/pg/resources", json={"name": 123, "description": "d"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_empty_name_is_400(self, test_client):
        response = await test_client.post(
            "/api/pg/resources", json={"name": "", "description": "d"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/pg/resources",
            content=b'{"name": "A", ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_extra_fields_ignored(self, test_client):
        response = await test_client.post(
            "/api/pg/resources",
            json={"name": "A", "description": "d", "colour": "red", "id": 999},
        )
        assert response.status_code == 201
        body = response.json()
        assert "colour" not in body
        assert body["name"] == "A"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["abc", "1.5", "99999999999"])
    async def test_non_integer_id_is_400(self, test_client, bad_id):
        response = await test_client.get(f"/api/pg/resources/{bad_id}")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_put_with_missing_field_is_400(self, test_client):
        created = (
            await test_client.post("/api/pg/resources", json={"name": "A", "description": "d"})
        ).json()

        response = await test_client.put(
            f"/api/pg/resources/{created['id']}", json={"description": "d2"}
        )

        assert response.status_code == 400
        unchanged = (await test_client.get(f"/api/pg/resources/{created['id']}")).json()
        assert unchanged == created
