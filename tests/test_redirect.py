"""Redirect endpoint behavior tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_redirect_valid_code(client: AsyncClient) -> None:
    create_resp = await client.post("/api/links", json={"destination_url": "https://www.google.com/search/"})
    code = create_resp.json()["code"]

    # httpx won't follow by default
    response = await client.get(f"/{code}", follow_redirects=False)
    assert response.status_code == 301
    assert response.headers["location"] == "https://www.google.com/search"


@pytest.mark.asyncio
async def test_redirect_invalid_code(client: AsyncClient) -> None:
    response = await client.get("/nonexistent", follow_redirects=False)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_redirect_increments_access_count(client: AsyncClient) -> None:
    create_resp = await client.post("/api/links", json={"destination_url": "https://www.python.org"})
    code = create_resp.json()["code"]

    for _ in range(3):
        await client.get(f"/{code}", follow_redirects=False)

    stats_resp = await client.get(f"/api/links/{code}")
    assert stats_resp.status_code == 200
    assert stats_resp.json()["access_count"] == 3


@pytest.mark.asyncio
async def test_redirect_with_alias(client: AsyncClient) -> None:
    await client.post(
        "/api/links",
        json={"destination_url": "https://www.github.com", "alias": "brev.ly/ghub"},
    )
    response = await client.get("/ghub", follow_redirects=False)
    assert response.status_code == 301
    assert response.headers["location"] == "https://www.github.com/"
