async def test_root_and_liveness(client):
    assert (await client.get("/")).json()["status"] == "ok"
    assert (await client.get("/health")).json() == {"status": "ok"}


async def test_readiness_checks_database(client):
    resp = await client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "connected"}
