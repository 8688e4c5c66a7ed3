from src.routers.healthz.router import API_VERSION


async def test_health_check(client):
    response = await client.get("/healthz/")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": API_VERSION}


async def test_root_endpoint(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to the Wedding Guest API"


async def test_openapi_lists_guest_and_event_routes(client):
    response = await client.get("/openapi.json")

    paths = response.json()["paths"]
    assert "/rsvp/party" in paths
    assert "/events/rsvp/submit" in paths
    assert "/admin/events/{event_id}/invites" in paths
