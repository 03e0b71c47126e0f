import httpx
import pytest
from fastapi.testclient import TestClient

from wpsuggest.api import app as app_module
from wpsuggest.models import Site
from wpsuggest.reachability import StaticReachability
from wpsuggest.service import SuggestionService


def route(request):
    if request.url.path.endswith("/xposts"):
        return httpx.Response(200, json=[
            {"subdomain": "news", "title": "Company News", "blavatar": "https://example.com/news.png"},
            {"subdomain": "design", "title": "Design Team"},
        ])
    return httpx.Response(200, json={"suggestions": [
        {"user_login": "ann", "display_name": "Ann Lee"},
        {"user_login": "bob", "display_name": "Robert Smith"},
    ]})


@pytest.fixture
def api(fake_api):
    return fake_api(route)


@pytest.fixture
def reachability():
    return StaticReachability(True)


@pytest.fixture
def client(monkeypatch, redis_client, cache, api, reachability):
    wpcom = api.client()
    monkeypatch.setattr(app_module, "_redis", redis_client)
    monkeypatch.setattr(app_module, "_service", SuggestionService(cache, reachability=reachability))
    monkeypatch.setattr(app_module, "_sites", {
        1: Site(1, "one.wordpress.com", wpcom),
        2: Site(2, None, wpcom),
        3: Site(3, "three.example.org", None),
    })
    return TestClient(app_module.app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_ready(client):
    assert client.get("/ready").json() == {"status": "ready"}


def test_suggest_xposts_filters_by_query(client, api):
    r = client.get("/suggest", params={"site_id": 1, "q": "+des"})
    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "xposts"
    assert body["trigger"] == "+"
    assert body["suggestions"] == [{
        "key": "design",
        "label": "Design Team",
        "avatar_url": None,
        "title": "+design",
        "insertion_text": "Design Team",
    }]
    assert len(api.requests) == 1


def test_suggest_second_call_served_from_cache(client, api):
    client.get("/suggest", params={"site_id": 1})
    r = client.get("/suggest", params={"site_id": 1, "q": "news"})
    assert [s["key"] for s in r.json()["suggestions"]] == ["news"]
    assert len(api.requests) == 1


def test_suggest_mentions(client):
    r = client.get("/suggest", params={"site_id": 2, "type": "mentions", "q": "@SMITH"})
    assert r.status_code == 200
    assert r.json()["suggestions"] == [{
        "key": "bob",
        "label": "Robert Smith",
        "avatar_url": None,
        "title": "@bob",
        "insertion_text": "bob",
    }]


def test_suggest_limit(client):
    r = client.get("/suggest", params={"site_id": 1, "limit": 1})
    assert len(r.json()["suggestions"]) == 1


def test_unknown_site(client):
    assert client.get("/suggest", params={"site_id": 99}).status_code == 404


def test_offline_without_cache(client, reachability):
    reachability.reachable = False
    r = client.get("/suggest", params={"site_id": 1})
    assert r.status_code == 503
    assert r.json()["detail"]["code"] == "no_results_available"


def test_site_without_client(client):
    r = client.get("/suggest", params={"site_id": 3})
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "missing_client"


def test_xposts_without_hostname(client):
    r = client.get("/suggest", params={"site_id": 2})
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "hostname_unavailable"


def test_refresh_bypasses_cache(client, api):
    client.get("/suggest", params={"site_id": 1})
    r = client.post("/sites/1/suggestions/xposts/refresh")
    assert r.json() == {"site_id": 1, "type": "xposts", "count": 2}
    assert len(api.requests) == 2


def test_metrics(client):
    client.get("/suggest", params={"site_id": 1})
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "wpsuggest_requests_total" in r.text
    assert "wpsuggest_fetches_total" in r.text


def test_unknown_type_rejected(client):
    assert client.get("/suggest", params={"site_id": 1, "type": "tags"}).status_code == 422


def test_refresh_mentions(client):
    r = client.post("/sites/2/suggestions/mentions/refresh")
    assert r.json() == {"site_id": 2, "type": "mentions", "count": 2}


def test_shutdown_closes_wordpress_client(monkeypatch, client, api):
    wpcom = api.client()
    monkeypatch.setattr(app_module, "_client", wpcom)
    with TestClient(app_module.app) as running:
        assert running.get("/health").status_code == 200
        assert not wpcom._http.is_closed
    assert wpcom._http.is_closed
