"""API tests for order endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient


@pytest.fixture
async def stocked(services, standard_materials):
    for material in standard_materials.values():
        await services.ledger.receive(material.id, 10, "Opening stock")
    return standard_materials


def _order_body(size_id: str, **kwargs) -> dict:
    body = {
        "customer_name": "Anna Petrova",
        "pictures": [
            {
                "type": "CUSTOM_PHOTO",
                "name": "Family portrait",
                "picture_size_id": size_id,
                "price": 120,
                "photo_url": "https://example.com/family.jpg",
            }
        ],
    }
    body.update(kwargs)
    return body


class TestOrdersAPI:
    async def test_create_order(self, api_client: AsyncClient, stocked, size_30x40):
        response = await api_client.post("/api/orders", json=_order_body(size_30x40.id))

        assert response.status_code == 201
        data = response.json()
        assert data["order"]["status"] == "PENDING"
        assert data["order"]["order_number"].startswith("ART-")
        assert data["order"]["total_price"] == 120
        assert data["pictures"][0]["type"] == "CUSTOM_PHOTO"
        assert data["warnings"] == []

    async def test_custom_prefix(self, api_client: AsyncClient, size_30x40):
        response = await api_client.post(
            "/api/orders", json=_order_body(size_30x40.id, prefix="GIFT")
        )
        assert response.json()["order"]["order_number"].startswith("GIFT-")

    async def test_status_flow_and_details(self, api_client: AsyncClient, stocked, size_30x40):
        created = await api_client.post("/api/orders", json=_order_body(size_30x40.id))
        order_id = created.json()["order"]["id"]

        started = await api_client.post(
            f"/api/orders/{order_id}/status", json={"status": "IN_PROGRESS"}
        )
        assert started.status_code == 200
        assert started.json()["previous_status"] == "PENDING"
        assert len(started.json()["consumed_pictures"]) == 1

        details = await api_client.get(f"/api/orders/{order_id}")
        assert details.json()["order"]["materials_consumed_at"] is not None
        assert len(details.json()["consumptions"]) == 4

        cancelled = await api_client.post(
            f"/api/orders/{order_id}/status", json={"status": "CANCELLED"}
        )
        assert cancelled.json()["returned_pictures"] == started.json()["consumed_pictures"]

    async def test_next_number(self, api_client: AsyncClient):
        first = await api_client.get("/api/orders/next-number")
        second = await api_client.get("/api/orders/next-number")

        assert first.status_code == 200
        assert first.json()["order_number"] != second.json()["order_number"]

    async def test_numbering_stats(self, api_client: AsyncClient, size_30x40):
        await api_client.post("/api/orders", json=_order_body(size_30x40.id))
        await api_client.post("/api/orders", json=_order_body(size_30x40.id, prefix="GIFT"))
        now = datetime.now(UTC)

        response = await api_client.get(
            "/api/orders/numbering-stats",
            params={
                "start": (now - timedelta(hours=1)).isoformat(),
                "end": (now + timedelta(hours=1)).isoformat(),
            },
        )

        assert response.json() == {"ART": 1, "GIFT": 1}


class TestOrderErrors:
    async def test_unknown_order_is_404(self, api_client: AsyncClient):
        response = await api_client.get("/api/orders/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER_NOT_FOUND"

    async def test_invalid_transition_is_400(self, api_client: AsyncClient, size_30x40):
        created = await api_client.post("/api/orders", json=_order_body(size_30x40.id))
        order_id = created.json()["order"]["id"]
        await api_client.post(f"/api/orders/{order_id}/status", json={"status": "CANCELLED"})

        response = await api_client.post(
            f"/api/orders/{order_id}/status", json={"status": "IN_PROGRESS"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_STATUS_TRANSITION"

    async def test_unknown_size_is_404(self, api_client: AsyncClient):
        response = await api_client.post("/api/orders", json=_order_body("missing"))
        assert response.status_code == 404
        assert response.json()["error_code"] == "PICTURE_SIZE_NOT_FOUND"

    async def test_empty_pictures_is_422(self, api_client: AsyncClient):
        response = await api_client.post(
            "/api/orders", json={"customer_name": "Ada", "pictures": []}
        )
        assert response.status_code == 422

    async def test_custom_photo_without_photo_url_is_422(self, api_client: AsyncClient, size_30x40):
        body = _order_body(size_30x40.id)
        del body["pictures"][0]["photo_url"]

        response = await api_client.post("/api/orders", json=body)

        assert response.status_code == 422

    async def test_unknown_status_is_422(self, api_client: AsyncClient):
        response = await api_client.post("/api/orders/any/status", json={"status": "SHIPPED"})
        assert response.status_code == 422

    async def test_bad_prefix_is_400(self, api_client: AsyncClient):
        response = await api_client.get("/api/orders/next-number", params={"prefix": "A-B"})
        assert response.status_code == 400

    async def test_reversed_stats_range_is_400(self, api_client: AsyncClient):
        response = await api_client.get(
            "/api/orders/numbering-stats",
            params={"start": "2024-02-01T00:00:00+00:00", "end": "2024-01-01T00:00:00+00:00"},
        )
        assert response.status_code == 400


class TestOrderContract:
    async def test_status_route_documents_conflict(self, api_client: AsyncClient):
        schema = (await api_client.get("/openapi.json")).json()

        responses = schema["paths"]["/api/orders/{order_id}/status"]["post"]["responses"]
        assert {"400", "404", "409"} <= set(responses)

    async def test_write_routes_document_conflict(self, api_client: AsyncClient):
        paths = (await api_client.get("/openapi.json")).json()["paths"]

        assert "409" in paths["/api/orders"]["post"]["responses"]
        assert "409" in paths["/api/stock/{material_id}/consume"]["post"]["responses"]
        assert "409" in paths["/api/pictures/{picture_id}/materials/rebuild"]["post"]["responses"]
