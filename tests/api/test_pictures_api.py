"""API tests for picture costing and pricing endpoints."""

import pytest
from httpx import AsyncClient

from artstock.core.entities.material import MaterialCategory
from artstock.core.entities.picture import PictureMaterial, PictureSize, ReadyMadePicture


@pytest.fixture
async def costed_picture(services, standard_materials, size_30x40):
    """Catalog picture using 2 canvas bought at 20.0 each."""
    canvas = standard_materials[MaterialCategory.CANVAS]
    picture = await services.picture_store.create_picture(
        ReadyMadePicture(name="Sunset", picture_size_id=size_30x40.id, price=99)
    )
    await services.picture_store.replace_bill_of_materials(
        picture.id,
        [PictureMaterial(picture_id=picture.id, material_id=canvas.id, quantity=2)],
    )
    await services.purchasing.record_purchase(canvas.id, 10, 20.0)
    return picture


class TestPicturesAPI:
    async def test_cost(self, api_client: AsyncClient, costed_picture):
        response = await api_client.get(f"/api/pictures/{costed_picture.id}/cost")

        assert response.status_code == 200
        assert response.json()["unit_cost"] == 40.0
        assert len(response.json()["lines"]) == 1

    async def test_recommended_price_without_body(self, api_client: AsyncClient, costed_picture):
        response = await api_client.post(f"/api/pictures/{costed_picture.id}/recommended-price")

        assert response.status_code == 200
        assert response.json()["price"] == 120.0
        assert response.json()["breakdown"]["clamped"] is False

    async def test_apply_recommended_price(self, api_client: AsyncClient, services, costed_picture):
        response = await api_client.post(
            f"/api/pictures/{costed_picture.id}/recommended-price",
            json={"markup_percentage": 100, "apply": True},
        )

        assert response.json()["price"] == 80.0
        assert (await services.picture_store.get_picture(costed_picture.id)).price == 80.0

    async def test_recalculate_keeps_prices_by_default(
        self, api_client: AsyncClient, services, costed_picture
    ):
        response = await api_client.post("/api/pictures/recalculate", json={})

        assert response.status_code == 200
        assert response.json()["updated"] == 1
        picture = await services.picture_store.get_picture(costed_picture.id)
        assert picture.price == 99
        assert picture.cost_price == 40.0

    async def test_recalculate_with_prices(self, api_client: AsyncClient, services, costed_picture):
        response = await api_client.post(
            "/api/pictures/recalculate",
            json={"update_prices": True, "pricing": {"markup_percentage": 50}},
        )

        assert response.json()["items"][0]["new_price"] == 60.0
        assert (await services.picture_store.get_picture(costed_picture.id)).price == 60.0

    async def test_quote_by_size(self, api_client: AsyncClient, size_30x40):
        response = await api_client.get(f"/api/pictures/sizes/{size_30x40.id}/quote")
        assert response.json() == {"price": 600.0}

    async def test_delete_picture(self, api_client: AsyncClient, services, costed_picture):
        response = await api_client.delete(f"/api/pictures/{costed_picture.id}")

        assert response.status_code == 200
        assert response.json() == []
        assert await services.picture_store.get_picture(costed_picture.id) is None

    async def test_pricing_stats(self, api_client: AsyncClient, costed_picture):
        response = await api_client.get("/api/pictures/pricing-stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["average_cost"] == 40.0
        assert data["by_size"]["30x40"]["count"] == 1
        assert data["price_ranges"]["50_100"] == 1

    async def test_recommended_pricing_settings(self, api_client: AsyncClient, costed_picture):
        response = await api_client.get("/api/pictures/pricing-settings/recommended")

        assert response.status_code == 200
        assert response.json()["advice"] == "RAISE"
        assert response.json()["factors"]["markup_percentage"] == 200.0

    async def test_recalculation_stats(self, api_client: AsyncClient, costed_picture):
        response = await api_client.get("/api/pictures/recalculation-stats")

        assert response.status_code == 200
        assert response.json()["with_cost_price"] == 1
        assert response.json()["by_type"]["CUSTOM_PHOTO"]["count"] == 0

    async def test_rebuild_materials_with_new_size(
        self, api_client: AsyncClient, services, costed_picture
    ):
        large = await services.picture_store.create_size(
            PictureSize(name="100x150", width_cm=100, height_cm=150)
        )

        response = await api_client.post(
            f"/api/pictures/{costed_picture.id}/materials/rebuild",
            json={"picture_size_id": large.id},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["picture_size_id"] == large.id
        assert len(data["lines"]) == 4
        # 2 canvas at 20.0, nothing else purchased
        assert data["cost_price"] == 40.0

    async def test_rebuild_materials_without_body(self, api_client: AsyncClient, costed_picture):
        response = await api_client.post(f"/api/pictures/{costed_picture.id}/materials/rebuild")

        assert response.status_code == 200
        assert response.json()["picture_size_id"] == costed_picture.picture_size_id
        # 30x40 needs one canvas
        assert response.json()["cost_price"] == 20.0

class TestPictureErrors:
    async def test_unknown_picture_is_404(self, api_client: AsyncClient):
        response = await api_client.get("/api/pictures/missing/cost")
        assert response.status_code == 404
        assert response.json()["error_code"] == "PICTURE_NOT_FOUND"

    async def test_bad_pricing_override_is_400(self, api_client: AsyncClient, costed_picture):
        response = await api_client.post(
            f"/api/pictures/{costed_picture.id}/recommended-price",
            json={"complexity_multiplier": 0},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_bad_recalculation_pricing_is_400(self, api_client: AsyncClient):
        response = await api_client.post(
            "/api/pictures/recalculate",
            json={"update_prices": True, "pricing": {"min_price": 5000}},
        )
        assert response.status_code == 400

    async def test_unknown_size_quote_is_404(self, api_client: AsyncClient):
        response = await api_client.get("/api/pictures/sizes/missing/quote")
        assert response.status_code == 404

    async def test_rebuild_unknown_size_is_404(self, api_client: AsyncClient, costed_picture):
        response = await api_client.post(
            f"/api/pictures/{costed_picture.id}/materials/rebuild",
            json={"picture_size_id": "missing"},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "PICTURE_SIZE_NOT_FOUND"

    async def test_rebuild_unknown_picture_is_404(self, api_client: AsyncClient):
        response = await api_client.post("/api/pictures/missing/materials/rebuild")
        assert response.status_code == 404
