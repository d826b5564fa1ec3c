from itertools import combinations

import pytest
from fastapi.testclient import TestClient

from dshare import server
from dshare.config import Settings


@pytest.fixture
def client():
    return TestClient(server.app)


def _h(x):
    return hex(x)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "prime": _h(server.settings.prime)}


def test_vandermonde(client):
    r = client.post("/vandermonde", json={"point": "0x5", "threshold": 3})
    assert r.status_code == 200
    assert r.json()["powers"] == ["0x1", "0x5", "0x19"]


def test_vandermonde_bad_threshold(client):
    r = client.post("/vandermonde", json={"point": "0x5", "threshold": 0})
    assert r.status_code == 422


def test_lagrange_rejects_duplicates(client):
    r = client.post("/lagrange", json={"points": ["0x5", "0x5"]})
    assert r.status_code == 400


def test_lagrange_bad_hex(client):
    r = client.post("/lagrange", json={"points": ["0x5", "zz"]})
    assert r.status_code == 400


def test_reconstruct_two_point_line(client):
    r = client.post("/reconstruct", json={
        "threshold": 2,
        "shares": [{"x": _h(5), "y": _h(62)}, {"x": _h(11), "y": _h(116)}],
    })
    assert r.status_code == 200
    assert r.json() == {"secret": _h(17)}


def test_session_then_reconstruct_any_subset(client):
    r = client.post("/session", json={"parties": 5, "threshold": 3, "seed": "api"})
    assert r.status_code == 200
    body = r.json()
    assert body["threshold"] == 3
    assert len(body["points"]) == len(body["shares"]) == 5

    secrets_seen = set()
    for subset in combinations(range(5), 3):
        shares = [{"x": body["points"][i], "y": body["shares"][i]} for i in subset]
        rr = client.post("/reconstruct", json={"threshold": 3, "shares": shares})
        assert rr.status_code == 200
        secrets_seen.add(rr.json()["secret"])
    assert len(secrets_seen) == 1


def test_session_seed_is_reproducible(client):
    a = client.post("/session", json={"parties": 3, "threshold": 2, "seed": "same"}).json()
    b = client.post("/session", json={"parties": 3, "threshold": 2, "seed": "same"}).json()
    assert a == b


def test_session_threshold_above_parties(client):
    r = client.post("/session", json={"parties": 2, "threshold": 3})
    assert r.status_code == 400


def test_reconstruct_wrong_share_count(client):
    r = client.post("/reconstruct", json={
        "threshold": 3,
        "shares": [{"x": "0x5", "y": "0x3e"}, {"x": "0xb", "y": "0x74"}],
    })
    assert r.status_code == 400


def test_lagrange_weights_recover_constant_term(client):
    r = client.post("/lagrange", json={"points": ["0x5", "0xb"]})
    assert r.status_code == 200
    w5, w11 = (int(w, 16) for w in r.json()["weights"])
    p = server.settings.prime
    # f(x) = 17 + 9x: f(5) = 62, f(11) = 116
    assert (w5 * 62 + w11 * 116) % p == 17


def test_composite_prime_is_a_client_error(client, monkeypatch):
    monkeypatch.setattr(server, "settings", Settings(prime=15))
    r = client.post("/lagrange", json={"points": ["0x1", "0x4"]})
    assert r.status_code == 400
    assert "not prime" in r.json()["detail"]
    r = client.post("/session", json={"parties": 3, "threshold": 2})
    assert r.status_code == 400


@pytest.mark.parametrize("path,body", [
    ("/vandermonde", {"point": "0x5", "threshold": 10 ** 8}),
    ("/session", {"parties": 10 ** 6, "threshold": 2}),
    ("/session", {"parties": 3, "threshold": 10 ** 6}),
    ("/reconstruct", {"threshold": 10 ** 6, "shares": []}),
    ("/lagrange", {"points": []}),
    ("/lagrange", {"points": [hex(i) for i in range(1, server.MAX_PARTIES + 2)]}),
])
def test_oversized_requests_rejected(client, path, body):
    assert client.post(path, json=body).status_code == 422
