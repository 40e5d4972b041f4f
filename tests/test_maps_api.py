import pytest

from civicpulse.models import UserRole
from tests.utils import report_form

pytestmark = pytest.mark.anyio


async def test_facilities_are_created_by_admin_and_listed(client_for, citizens, admin):
    alice, _, _ = citizens
    facility = {"name": "Ward 4 bin", "type": "public_bin", "latitude": 28.61, "longitude": 77.21}

    async with client_for(alice) as client:
        assert (await client.post("/maps/facilities", json=facility)).status_code == 403

    async with client_for(admin) as client:
        resp = await client.post("/maps/facilities", json=facility)
        assert resp.status_code == 201

    async with client_for(alice) as client:
        listed = (await client.get("/maps/facilities")).json()
    assert [f["name"] for f in listed] == ["Ward 4 bin"]


async def test_worker_location_is_upserted(client_for, citizens, make_user):
    alice, _, _ = citizens
    worker = make_user("driver@example.com", role=UserRole.WORKER)

    async with client_for(worker) as client:
        first = await client.put("/maps/worker-locations/me", json={"latitude": 28.6, "longitude": 77.2})
        second = await client.put("/maps/worker-locations/me", json={"latitude": 28.7, "longitude": 77.3})
        assert first.status_code == 200
        assert second.json()["id"] == first.json()["id"]

    async with client_for(alice) as client:
        assert (await client.put("/maps/worker-locations/me", json={"latitude": 1, "longitude": 1})).status_code == 403
        locations = (await client.get("/maps/worker-locations")).json()

    assert len(locations) == 1
    assert locations[0]["workerId"] == worker.id
    assert locations[0]["latitude"] == 28.7


async def test_civic_layer_shows_other_reports(client_for, citizens):
    alice, bob, _ = citizens

    async with client_for(alice) as client:
        await client.post("/civic-report", data=report_form())

    async with client_for(bob) as client:
        resp = await client.get("/maps/civic-layer", params={"lat": 28.6, "lng": 77.2})
        assert resp.status_code == 200
        layer = resp.json()

        assert layer["type"] == "FeatureCollection"
        assert layer["center"]["zoom"] == 13
        kinds = [f["properties"]["marker"]["kind"] for f in layer["features"]]
        assert kinds == ["user", "warning"]
        assert layer["features"][1]["properties"]["canVote"] is True

        mine = (await client.get("/maps/civic-layer", params={"scope": "mine"})).json()
        assert mine["features"] == []
        assert mine["center"]["zoom"] == 5

        assert (await client.get("/maps/civic-layer", params={"scope": "everyone"})).status_code == 400
        assert (await client.get("/maps/civic-layer", params={"lat": 28.6})).status_code == 400


async def test_layer_vote_urls_reach_the_vote_routes(client_for, citizens):
    alice, bob, _ = citizens

    async with client_for(alice) as client:
        await client.post("/civic-report", data=report_form())

    async with client_for(bob) as client:
        layer = (await client.get("/maps/civic-layer")).json()
        vote_urls = layer["features"][0]["properties"]["voteUrls"]

        resp = await client.post(f"http://test{vote_urls['oppose']}")
        assert resp.status_code == 200
        assert resp.json()["oppositionCount"] == 1
