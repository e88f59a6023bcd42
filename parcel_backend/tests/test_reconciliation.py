"""
Rider work_status reconciliation tests.
"""

import pytest
from sqlalchemy import update

from parcel_backend.app.models.parcel_enums import DeliveryStatus
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.rider_enums import WorkStatus
from parcel_backend.app.services.reconciliation import expected_work_status
from parcel_backend.tests.conftest import RIDER_EMAIL


@pytest.mark.parametrize("statuses, expected", [
    (set(), WorkStatus.FREE),
    ({DeliveryStatus.IN_TRANSIT}, WorkStatus.IN_DELIVERY),
    ({DeliveryStatus.PICKED_UP}, WorkStatus.BUSY),
    ({DeliveryStatus.IN_TRANSIT, DeliveryStatus.PICKED_UP}, WorkStatus.BUSY),
])
def test_expected_work_status(statuses, expected):
    assert expected_work_status(statuses) == expected


@pytest.mark.asyncio
async def test_sweep_frees_stranded_rider(client, db_session, admin_headers, active_rider):
    await db_session.execute(
        update(Rider).where(Rider.id == active_rider["id"]).values(work_status=WorkStatus.IN_DELIVERY)
    )
    await db_session.commit()

    response = await client.post("/v1/admin/reconcile", headers=admin_headers)

    assert response.status_code == 200
    report = response.json()
    assert report["riders_checked"] == 1
    assert report["repairs"] == [
        {"rider_id": active_rider["id"], "previous": "in_delivery", "corrected": "free"}
    ]

    again = await client.post("/v1/admin/reconcile", headers=admin_headers)
    assert again.json()["repairs"] == []

    audit = await client.get("/v1/admin/audit", params={"action": "RIDER_RECONCILED"}, headers=admin_headers)
    assert len(audit.json()) == 1


@pytest.mark.asyncio
async def test_sweep_restores_busy_rider(client, db_session, admin_headers, parcel, active_rider):
    await client.patch(f"/v1/parcels/{parcel['id']}/assign", json={
        "riderId": active_rider["id"],
        "riderName": active_rider["name"],
        "riderEmail": RIDER_EMAIL,
    })
    await client.patch(f"/v1/parcels/{parcel['id']}/pickup", json={"riderId": active_rider["id"]})
    await db_session.execute(
        update(Rider).where(Rider.id == active_rider["id"]).values(work_status=WorkStatus.FREE)
    )
    await db_session.commit()

    response = await client.post("/v1/admin/reconcile", headers=admin_headers)

    assert response.json()["repairs"][0]["corrected"] == "busy"


@pytest.mark.asyncio
async def test_sweep_restores_rider_with_remaining_parcels(client, admin_headers, parcel_payload, active_rider):
    """Delivering one of several parcels frees the rider; the sweep puts them back on duty."""
    first = (await client.post("/v1/parcels", json=parcel_payload)).json()["parcel"]
    second = (await client.post("/v1/parcels", json=parcel_payload)).json()["parcel"]
    for p in (first, second):
        response = await client.patch(f"/v1/parcels/{p['id']}/assign", json={
            "riderId": active_rider["id"],
            "riderName": active_rider["name"],
            "riderEmail": RIDER_EMAIL,
        })
        assert response.status_code == 200
    await client.patch(f"/v1/parcels/{first['id']}/pickup", json={"riderId": active_rider["id"]})
    await client.patch(f"/v1/parcels/{first['id']}/deliver", json={"riderId": active_rider["id"]})

    available = await client.get("/v1/riders/available", params={"district": "Dhaka"})
    assert [r["id"] for r in available.json()] == [active_rider["id"]]

    response = await client.post("/v1/admin/reconcile", headers=admin_headers)

    assert response.json()["repairs"] == [
        {"rider_id": active_rider["id"], "previous": "free", "corrected": "in_delivery"}
    ]


@pytest.mark.asyncio
async def test_sweep_leaves_consistent_riders_alone(client, admin_headers, active_rider):
    response = await client.post("/v1/admin/reconcile", headers=admin_headers)

    assert response.json() == {"riders_checked": 1, "repairs": []}


@pytest.mark.asyncio
async def test_sweep_requires_admin(client, customer_headers):
    response = await client.post("/v1/admin/reconcile", headers=customer_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("entity_id", ["abc", "2147483648"])
async def test_audit_trail_rejects_invalid_entity_id(client, admin_headers, entity_id):
    response = await client.get("/v1/admin/audit", params={"entity_id": entity_id}, headers=admin_headers)

    assert response.status_code == 400
