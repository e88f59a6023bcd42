"""
Health check and request observability tests.
"""

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_correlation_id_is_propagated(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-123"})

    assert response.headers["X-Correlation-ID"] == "req-123"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    response = await client.get("/v1/trackings/TRK-NONE")

    assert response.headers["X-Correlation-ID"]
