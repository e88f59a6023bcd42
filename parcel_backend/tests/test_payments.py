"""
Payment recording tests.

A payment is stored only when it flips its parcel from unpaid to paid.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select, update

from parcel_backend.app.models.audit_log import AuditLog
from parcel_backend.app.models.parcel import utcnow
from parcel_backend.app.models.payment import Payment
from parcel_backend.app.repositories.payment import PaymentRepository
from parcel_backend.app.services.audit import AuditAction
from parcel_backend.tests.conftest import CUSTOMER_EMAIL, auth_headers


def payment_body(parcel_id, transaction_id="pi_001"):
    return {
        "parcelId": parcel_id,
        "email": CUSTOMER_EMAIL,
        "amount": 120.0,
        "paymentMethod": "card",
        "transactionId": transaction_id,
    }


async def payment_count(db_session, parcel_id=None):
    payments = PaymentRepository(db_session)
    if parcel_id is not None:
        return await payments.count_for_parcel(parcel_id)
    return len(await payments.list())


@pytest.mark.asyncio
async def test_first_payment_marks_parcel_paid(client, db_session, parcel):
    response = await client.post("/v1/payments", json=payment_body(parcel["id"]))

    assert response.status_code == 201
    assert response.json()["inserted_id"] > 0
    assert (await client.get(f"/v1/parcels/{parcel['id']}")).json()["payment_status"] == "paid"
    assert await payment_count(db_session, parcel["id"]) == 1


@pytest.mark.asyncio
async def test_second_payment_conflicts_without_new_row(client, db_session, parcel):
    await client.post("/v1/payments", json=payment_body(parcel["id"]))

    response = await client.post("/v1/payments", json=payment_body(parcel["id"], "pi_002"))

    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_CONFLICT_001"
    assert await payment_count(db_session, parcel["id"]) == 1


@pytest.mark.asyncio
async def test_rejected_payment_is_audited(client, db_session, parcel):
    await client.post("/v1/payments", json=payment_body(parcel["id"]))
    await client.post("/v1/payments", json=payment_body(parcel["id"], "pi_002"))

    result = await db_session.execute(
        select(AuditLog).where(AuditLog.action == AuditAction.PAYMENT_REJECTED)
    )
    entries = result.scalars().all()
    assert len(entries) == 1
    assert entries[0].entity_id == parcel["id"]
    assert entries[0].meta_data["reason"] == "already_paid"
    assert entries[0].meta_data["transaction_id"] == "pi_002"


@pytest.mark.asyncio
async def test_payment_for_missing_parcel(client, db_session):
    response = await client.post("/v1/payments", json=payment_body(777))

    assert response.status_code == 404
    assert await payment_count(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("parcel_id", ["xyz", "¹", "2147483648", 2**31])
async def test_payment_with_invalid_parcel_id(client, db_session, parcel_id):
    response = await client.post("/v1/payments", json=payment_body(parcel_id))

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_VALIDATION_001"
    assert await payment_count(db_session) == 0


@pytest.mark.asyncio
async def test_payment_requires_fields(client, parcel):
    body = payment_body(parcel["id"])
    del body["transactionId"]

    response = await client.post("/v1/payments", json=body)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_list_payments_requires_token(client):
    response = await client.get("/v1/payments", params={"email": CUSTOMER_EMAIL})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_payments_rejects_bad_token(client):
    response = await client.get(
        "/v1/payments",
        params={"email": CUSTOMER_EMAIL},
        headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_list_own_payments(client, parcel, customer_headers):
    await client.post("/v1/payments", json=payment_body(parcel["id"]))

    response = await client.get("/v1/payments", params={"email": CUSTOMER_EMAIL}, headers=customer_headers)

    assert response.status_code == 200
    payments = response.json()
    assert len(payments) == 1
    assert payments[0]["parcel_id"] == parcel["id"]
    assert payments[0]["transaction_id"] == "pi_001"
    assert payments[0]["paid_at_string"]


@pytest.mark.asyncio
async def test_list_other_users_payments_forbidden(client):
    response = await client.get(
        "/v1/payments",
        params={"email": CUSTOMER_EMAIL},
        headers=auth_headers("intruder@parcel.test")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_without_email_forbidden_for_customer(client, customer_headers):
    response = await client.get("/v1/payments", headers=customer_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_lists_all_payments(client, parcel_payload, admin_headers):
    for n in range(2):
        created = (await client.post("/v1/parcels", json=parcel_payload)).json()["parcel"]
        await client.post("/v1/payments", json=payment_body(created["id"], f"pi_{n}"))

    response = await client.get("/v1/payments", headers=admin_headers)

    assert response.status_code == 200
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_payments_listed_newest_first(client, db_session, parcel_payload, customer_headers):
    for n in range(3):
        created = (await client.post("/v1/parcels", json=parcel_payload)).json()["parcel"]
        await client.post("/v1/payments", json=payment_body(created["id"], f"pi_{n}"))

    # The first payment is the most recent one
    await db_session.execute(
        update(Payment)
        .where(Payment.transaction_id == "pi_0")
        .values(paid_at=utcnow() + timedelta(hours=1))
    )
    await db_session.commit()

    response = await client.get("/v1/payments", params={"email": CUSTOMER_EMAIL}, headers=customer_headers)

    assert [p["transaction_id"] for p in response.json()] == ["pi_0", "pi_2", "pi_1"]
