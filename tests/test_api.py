"""
HTTP API tests: venues, locations, favorites, visited and status
"""

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY

VILLA_BORGHESE = {
    "venueId": "2430951",
    "venueName": "Villa Borghese",
    "venueType": "park",
    "venueLat": 41.91,
    "venueLng": 12.49,
}


class TestVenueSearch:

    @pytest.mark.asyncio
    async def test_park_search_scenario(self, client: AsyncClient, overpass_stub, overpass_node):
        overpass_stub.json_body = {
            "elements": [overpass_node(2430951, 41.91, 12.49, leisure="park", name="Villa Borghese")]
        }

        response = await client.post(
            "/api/venues/search",
            json={"bounds": {"north": 42, "south": 41.8, "east": 12.6, "west": 12.3}, "venueTypes": ["park"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        venue = data[0]
        assert venue["id"] == "2430951"
        assert venue["name"] == "Villa Borghese"
        assert venue["type"] == "park"
        assert venue["lat"] == 41.91
        assert venue["lng"] == 12.49
        assert "address" not in venue

    @pytest.mark.asyncio
    async def test_empty_venue_types_returns_empty_list_without_upstream_call(self, client: AsyncClient, overpass_stub):
        response = await client.post(
            "/api/venues/search",
            json={"bounds": {"north": 42, "south": 41.8, "east": 12.6, "west": 12.3}, "venueTypes": []}
        )

        assert response.status_code == 200
        assert response.json() == []
        assert overpass_stub.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"venueTypes": ["park"]},
        {"bounds": {"north": 42, "south": 41.8, "east": 12.6, "west": 12.3}, "venueTypes": ["zoo"]},
        {"bounds": {"north": 41.8, "south": 42, "east": 12.6, "west": 12.3}, "venueTypes": ["park"]},
        {"bounds": {"north": "north", "south": 41.8, "east": 12.6, "west": 12.3}, "venueTypes": ["park"]},
    ])
    async def test_invalid_request_rejected_before_upstream(self, client: AsyncClient, overpass_stub, body):
        response = await client.post("/api/venues/search", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert overpass_stub.requests == []

    @pytest.mark.asyncio
    async def test_upstream_failure_is_opaque_500(self, client: AsyncClient, overpass_stub):
        overpass_stub.status_code = 504
        overpass_stub.json_body = {"remark": "internal details"}

        response = await client.post(
            "/api/venues/search",
            json={"bounds": {"north": 42, "south": 41.8, "east": 12.6, "west": 12.3}, "venueTypes": ["museum"]}
        )

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "UPSTREAM_ERROR"
        assert "internal details" not in response.text

    @pytest.mark.asyncio
    async def test_nearby_builds_box_around_point(self, client: AsyncClient, overpass_stub):
        response = await client.get(
            "/api/venues/nearby",
            params={"lat": 41.9028, "lng": 12.4964, "types": ["museum"]}
        )

        assert response.status_code == 200
        assert len(overpass_stub.requests) == 1
        query = overpass_stub.requests[0].content.decode()
        assert "museum" in query
        assert "playground" not in query

    @pytest.mark.asyncio
    async def test_nearby_rejects_huge_radius(self, client: AsyncClient, overpass_stub):
        response = await client.get(
            "/api/venues/nearby",
            params={"lat": 41.9, "lng": 12.5, "radius_km": 500, "types": ["park"]}
        )

        assert response.status_code == 400
        assert overpass_stub.requests == []

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient):
        response = await client.get("/api/venues/categories")

        assert response.status_code == 200
        data = response.json()
        assert [c["type"] for c in data][:2] == ["playground", "park"]
        science = next(c for c in data if c["type"] == "science_center")
        assert science["tag"] == "amenity=science_centre"
        assert science["name"] == "Science Centers"


class TestLocationSearch:

    @pytest.mark.asyncio
    async def test_search(self, client: AsyncClient, nominatim_stub):
        nominatim_stub.json_body = [{"display_name": "Roma, Lazio, Italia", "lat": "41.89", "lon": "12.48"}]

        response = await client.post("/api/locations/search", json={"query": "Rome"})

        assert response.status_code == 200
        assert response.json() == [
            {"query": "Rome", "lat": 41.89, "lng": 12.48, "displayName": "Roma, Lazio, Italia"}
        ]

    @pytest.mark.asyncio
    async def test_query_is_echoed_as_submitted(self, client: AsyncClient, nominatim_stub):
        nominatim_stub.json_body = [{"display_name": "Milano, Lombardia, Italia", "lat": "45.46", "lon": "9.19"}]

        response = await client.post("/api/locations/search", json={"query": " Milan "})

        assert response.json()[0]["query"] == " Milan "
        assert nominatim_stub.requests[0].url.params["q"] == "Milan"

    @pytest.mark.asyncio
    async def test_no_results_is_empty_200(self, client: AsyncClient):
        response = await client.post("/api/locations/search", json={"query": "zzzz"})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}])
    async def test_blank_query_rejected(self, client: AsyncClient, nominatim_stub, body):
        response = await client.post("/api/locations/search", json=body)

        assert response.status_code == 422
        assert nominatim_stub.requests == []

    @pytest.mark.asyncio
    async def test_upstream_failure(self, client: AsyncClient, nominatim_stub):
        nominatim_stub.status_code = 500

        response = await client.post("/api/locations/search", json={"query": "Rome"})

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "UPSTREAM_ERROR"


class TestFavoritesAndVisited:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/favorites"),
        ("POST", "/api/favorites"),
        ("DELETE", "/api/favorites/1"),
        ("GET", "/api/visited"),
        ("POST", "/api/visited"),
        ("DELETE", "/api/visited/1"),
        ("GET", "/api/venue/1/status"),
        ("GET", "/api/auth/user"),
    ])
    async def test_requires_authentication(self, client: AsyncClient, method, path):
        response = await client.request(method, path, json=VILLA_BORGHESE if method == "POST" else None)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.get("/api/favorites", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_favorite_toggle_flow(self, client: AsyncClient, auth_headers):
        created = await client.post("/api/favorites", json=VILLA_BORGHESE, headers=auth_headers)
        assert created.status_code == 200
        body = created.json()
        assert body["userId"] == "user-1"
        assert body["venueId"] == "2430951"
        assert body["venueType"] == "park"
        assert body["createdAt"]

        again = await client.post("/api/favorites", json=VILLA_BORGHESE, headers=auth_headers)
        assert again.status_code == 200
        assert again.json()["id"] == body["id"]

        listed = await client.get("/api/favorites", headers=auth_headers)
        assert [f["venueId"] for f in listed.json()] == ["2430951"]

        status = await client.get("/api/venue/2430951/status", headers=auth_headers)
        assert status.json() == {"isFavorite": True, "isVisited": False}

        removed = await client.delete("/api/favorites/2430951", headers=auth_headers)
        assert removed.status_code == 200
        assert removed.json() == {"success": True}

        removed_again = await client.delete("/api/favorites/2430951", headers=auth_headers)
        assert removed_again.status_code == 200

        status = await client.get("/api/venue/2430951/status", headers=auth_headers)
        assert status.json() == {"isFavorite": False, "isVisited": False}

    @pytest.mark.asyncio
    async def test_visited_flow(self, client: AsyncClient, auth_headers):
        created = await client.post("/api/visited", json=VILLA_BORGHESE, headers=auth_headers)
        assert created.status_code == 200
        assert created.json()["visitedAt"]

        status = await client.get("/api/venue/2430951/status", headers=auth_headers)
        assert status.json() == {"isFavorite": False, "isVisited": True}

        await client.delete("/api/visited/2430951", headers=auth_headers)
        listed = await client.get("/api/visited", headers=auth_headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_user_id_in_body_is_ignored(self, client: AsyncClient, auth_headers, other_auth_headers):
        response = await client.post(
            "/api/favorites",
            json={**VILLA_BORGHESE, "userId": "user-2"},
            headers=auth_headers
        )
        assert response.json()["userId"] == "user-1"

        theirs = await client.get("/api/favorites", headers=other_auth_headers)
        assert theirs.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("override", [
        {"venueType": "zoo"},
        {"venueLat": 120},
        {"venueLng": -200},
        {"venueId": ""},
    ])
    async def test_invalid_snapshot_rejected(self, client: AsyncClient, auth_headers, override):
        response = await client.post("/api/favorites", json={**VILLA_BORGHESE, **override}, headers=auth_headers)
        assert response.status_code == 422


class TestHealth:

    @pytest.mark.asyncio
    async def test_live(self, client: AsyncClient):
        response = await client.get("/api/health/live")
        assert response.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_ready(self, client: AsyncClient):
        response = await client.get("/api/health/ready")

        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"database": True, "redis": True}


class TestRequestMetrics:

    @pytest.mark.asyncio
    async def test_unknown_paths_share_one_label(self, client: AsyncClient):
        labels = {"method": "GET", "endpoint": "unmatched", "status": "404"}
        before = REGISTRY.get_sample_value("kidmap_requests_total", labels) or 0

        for path in ("/wp-login.php", "/api/.env"):
            response = await client.get(path)
            assert response.status_code == 404
            assert response.json()["error"]["code"] == "NOT_FOUND"

        assert REGISTRY.get_sample_value("kidmap_requests_total", labels) == before + 2
        assert REGISTRY.get_sample_value(
            "kidmap_requests_total", {**labels, "endpoint": "/wp-login.php"}
        ) is None

    @pytest.mark.asyncio
    async def test_matched_paths_use_route_template(self, client: AsyncClient, auth_headers):
        labels = {"method": "GET", "endpoint": "/api/venue/{venue_id}/status", "status": "200"}
        before = REGISTRY.get_sample_value("kidmap_requests_total", labels) or 0

        await client.get("/api/venue/123/status", headers=auth_headers)

        assert REGISTRY.get_sample_value("kidmap_requests_total", labels) == before + 1
