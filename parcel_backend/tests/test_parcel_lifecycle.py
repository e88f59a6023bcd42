"""
Parcel lifecycle tests.

Booking, assignment, pickup, delivery, cashout and deletion, including the
rider work_status that moves with each transition.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select, update

from parcel_backend.app.models.parcel import Parcel, utcnow
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.rider_enums import WorkStatus
from parcel_backend.app.models.tracking_event import TrackingEvent
from parcel_backend.app.services import lifecycle
from parcel_backend.tests.conftest import RIDER_EMAIL


async def get_rider(client, admin_headers, rider_id):
    response = await client.get("/v1/riders/active", headers=admin_headers)
    return next(r for r in response.json() if r["id"] == rider_id)


async def assign(client, parcel_id, rider):
    return await client.patch(f"/v1/parcels/{parcel_id}/assign", json={
        "riderId": rider["id"],
        "riderName": rider["name"],
        "riderEmail": rider["email"],
    })


@pytest.mark.asyncio
async def test_book_parcel(client, parcel_payload):
    response = await client.post("/v1/parcels", json=parcel_payload)

    assert response.status_code == 201
    data = response.json()
    assert data["created"] is True
    parcel = data["parcel"]
    assert parcel["delivery_status"] == "pending"
    assert parcel["payment_status"] == "unpaid"
    assert parcel["cashout_status"] == "none"
    assert parcel["tracking_id"].startswith("TRK-")
    assert len(parcel["tracking_id"]) == 14
    assert parcel["assigned_rider_id"] is None


@pytest.mark.asyncio
async def test_book_parcel_with_known_tracking_id_returns_existing(client, parcel_payload):
    payload = {**parcel_payload, "tracking_id": "TRK-CLIENT0001"}
    first = await client.post("/v1/parcels", json=payload)
    second = await client.post("/v1/parcels", json=payload)

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["created"] is False
    assert second.json()["parcel"]["id"] == first.json()["parcel"]["id"]


@pytest.mark.asyncio
async def test_list_parcels_filters_by_creator(client, parcel_payload):
    await client.post("/v1/parcels", json=parcel_payload)
    await client.post("/v1/parcels", json={**parcel_payload, "created_by": "other@parcel.test"})

    response = await client.get("/v1/parcels", params={"email": parcel_payload["created_by"]})

    assert response.status_code == 200
    assert len(response.json()) == 1
    assert response.json()[0]["created_by"] == parcel_payload["created_by"]


@pytest.mark.asyncio
async def test_list_parcels_newest_first(client, db_session, parcel_payload):
    ids = []
    for _ in range(3):
        response = await client.post("/v1/parcels", json=parcel_payload)
        ids.append(response.json()["parcel"]["id"])

    # Backdate the last booking so it is the oldest
    await db_session.execute(
        update(Parcel).where(Parcel.id == ids[2]).values(created_at=utcnow() - timedelta(days=1))
    )
    await db_session.commit()

    response = await client.get("/v1/parcels")

    assert [p["id"] for p in response.json()] == [ids[1], ids[0], ids[2]]


@pytest.mark.asyncio
async def test_generated_tracking_id_collision_is_retried(client, parcel_payload, monkeypatch):
    taken = await client.post("/v1/parcels", json={**parcel_payload, "tracking_id": "TRK-TAKEN00001"})
    generated = iter(["TRK-TAKEN00001", "TRK-FRESH00001"])
    monkeypatch.setattr(lifecycle, "generate_tracking_id", lambda: next(generated))

    response = await client.post("/v1/parcels", json=parcel_payload)

    assert response.status_code == 201
    assert response.json()["created"] is True
    assert response.json()["parcel"]["tracking_id"] == "TRK-FRESH00001"
    assert response.json()["parcel"]["id"] != taken.json()["parcel"]["id"]


@pytest.mark.asyncio
async def test_full_delivery_scenario(client, admin_headers, parcel, active_rider):
    """pending -> in_transit -> picked_up -> delivered, rider in_delivery -> busy -> free."""
    response = await assign(client, parcel["id"], active_rider)
    assert response.status_code == 200
    data = response.json()
    assert data["parcel_updated"] == 1
    assert data["rider_updated"] == 1
    assert data["parcel"]["delivery_status"] == "in_transit"
    assert data["parcel"]["assigned_rider_email"] == RIDER_EMAIL
    rider = await get_rider(client, admin_headers, active_rider["id"])
    assert rider["work_status"] == "in_delivery"

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": active_rider["id"]}
    )
    assert response.status_code == 200
    assert response.json()["parcel_updated"] == 1
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["delivery_status"] == "picked_up"
    rider = await get_rider(client, admin_headers, active_rider["id"])
    assert rider["work_status"] == "busy"

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/deliver",
        json={"riderId": str(active_rider["id"]), "message": "Left with the receptionist"}
    )
    assert response.status_code == 200
    assert response.json()["parcel_updated"] == 1
    delivered = (await client.get(f"/v1/parcels/{parcel['id']}")).json()
    assert delivered["delivery_status"] == "delivered"
    assert delivered["version"] == 4
    rider = await get_rider(client, admin_headers, active_rider["id"])
    assert rider["work_status"] == "free"

    history = (await client.get(f"/v1/trackings/{parcel['tracking_id']}")).json()
    assert [e["status"] for e in history] == ["delivered"]
    assert history[0]["note"] == "Left with the receptionist"


@pytest.mark.asyncio
async def test_assign_non_pending_parcel_conflicts(client, admin_headers, parcel, active_rider):
    await assign(client, parcel["id"], active_rider)

    response = await assign(client, parcel["id"], active_rider)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["version"] == 2


@pytest.mark.asyncio
async def test_assign_missing_rider_not_found(client, parcel):
    response = await client.patch(f"/v1/parcels/{parcel['id']}/assign", json={
        "riderId": 999,
        "riderName": "Ghost",
        "riderEmail": "ghost@parcel.test",
    })

    assert response.status_code == 404
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["delivery_status"] == "pending"


@pytest.mark.asyncio
async def test_pickup_and_deliver_missing_parcel_is_noop(client, active_rider):
    for action in ("pickup", "deliver"):
        response = await client.patch(f"/v1/parcels/9999/{action}", json={"riderId": active_rider["id"]})

        assert response.status_code == 200
        assert response.json()["parcel_updated"] == 0
        assert response.json()["rider_updated"] == 0


@pytest.mark.asyncio
async def test_deliver_before_pickup_is_noop(client, admin_headers, parcel, active_rider):
    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/deliver", json={"riderId": active_rider["id"]}
    )

    assert response.json()["parcel_updated"] == 0
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["delivery_status"] == "pending"


@pytest.mark.asyncio
async def test_pickup_by_other_rider_is_noop(client, parcel, active_rider):
    await assign(client, parcel["id"], active_rider)

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": active_rider["id"] + 1}
    )

    assert response.json()["parcel_updated"] == 0
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["delivery_status"] == "in_transit"


@pytest.mark.asyncio
async def test_retried_pickup_repairs_lost_rider_write(client, db_session, admin_headers, parcel, active_rider):
    await assign(client, parcel["id"], active_rider)
    await client.patch(f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": active_rider["id"]})

    # Simulate the rider write of the pickup never landing
    await db_session.execute(
        update(Rider).where(Rider.id == active_rider["id"]).values(work_status=WorkStatus.IN_DELIVERY)
    )
    await db_session.commit()

    response = await client.patch(
        f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": active_rider["id"]}
    )

    assert response.json()["parcel_updated"] == 0
    assert response.json()["rider_updated"] == 1
    rider = await get_rider(client, admin_headers, active_rider["id"])
    assert rider["work_status"] == "busy"


@pytest.mark.asyncio
async def test_cashout_is_idempotent(client, parcel):
    first = await client.patch(f"/v1/parcels/{parcel['id']}/cashout")
    second = await client.patch(f"/v1/parcels/{parcel['id']}/cashout")

    assert first.json() == {"matched_count": 1, "modified_count": 1}
    assert second.status_code == 200
    assert second.json() == {"matched_count": 1, "modified_count": 0}
    data = (await client.get(f"/v1/parcels/{parcel['id']}")).json()
    assert data["cashout_status"] == "cashed_out"
    assert data["cashed_out_at"] is not None


@pytest.mark.asyncio
async def test_cashout_missing_parcel(client):
    response = await client.patch("/v1/parcels/4242/cashout")

    assert response.status_code == 200
    assert response.json() == {"matched_count": 0, "modified_count": 0}


@pytest.mark.asyncio
async def test_delete_parcel_keeps_tracking(client, db_session, parcel):
    db_session.add(TrackingEvent(tracking_id=parcel["tracking_id"], status="booked", timestamp=utcnow()))
    await db_session.commit()

    response = await client.delete(f"/v1/parcels/{parcel['id']}")
    assert response.json() == {"deleted_count": 1}

    assert (await client.get(f"/v1/parcels/{parcel['id']}")).status_code == 404
    assert (await client.delete(f"/v1/parcels/{parcel['id']}")).json() == {"deleted_count": 0}

    result = await db_session.execute(
        select(TrackingEvent).where(TrackingEvent.tracking_id == parcel["tracking_id"])
    )
    assert len(result.scalars().all()) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("path", [
    "/v1/parcels/abc",
    "/v1/parcels/0",
    "/v1/parcels/-3",
    "/v1/parcels/\u00b2",
    "/v1/parcels/2147483648",
    "/v1/parcels/99999999999999999999",
])
async def test_invalid_identifier_is_rejected(client, path):
    response = await client.get(path)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_001"


@pytest.mark.asyncio
async def test_invalid_rider_identifier_is_rejected(client, parcel):
    response = await client.patch(f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": "not-a-rider"})

    assert response.status_code == 400
