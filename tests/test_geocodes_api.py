"""API tests for the versioned geocode routes.

- GET /rest/geocodes/v{version}/city
- GET /rest/geocodes/v{version}/city/code
- GET /rest/geocodes/v{version}/country
- GET /rest/geocodes/v{version}/country/code
"""

from datetime import date

import pytest

from app.geocodes.constants import ERROR_FORMAT_DATE_RESOURCE, ERROR_NOT_FOUND_VERSION

BASE = "/rest/geocodes"
DATE = "2023-05-01"

ROUTES = [
    ("city", {"search": "Par"}),
    ("city/code", {"code": "75056"}),
    ("country", {"search": "France"}),
    ("country/code", {"code": "99100"}),
]


def test_city_search_composes_display_value(client, directory):
    r = client.get(f"{BASE}/v1/city", params={"search": "Par", "date": DATE})

    assert r.status_code == 200
    assert r.json() == {
        "cities": [
            {
                "code": "75056",
                "value": "Paris",
                "codeZone": "75",
                "validityStart": None,
                "validityEnd": None,
                "displayValue": "Paris (75)",
            }
        ]
    }
    assert directory.calls == [("find_cities_by_name_and_date", "Par", date(2023, 5, 1))]


def test_city_search_overrides_upstream_display_value(client):
    r = client.get(f"{BASE}/v1/city", params={"search": "Mar", "date": DATE})

    cities = r.json()["cities"]
    assert [c["displayValue"] for c in cities] == ["Marseille (13)"]
    for city in cities:
        assert city["displayValue"] == f"{city['value']} ({city['codeZone']})"


def test_city_by_code(client):
    r = client.get(f"{BASE}/v1/city/code", params={"code": "69123", "date": DATE})

    assert r.status_code == 200
    city = r.json()["city"]
    assert city["value"] == "Lyon"
    assert city["displayValue"] == "Lyon (69)"


def test_city_by_unknown_code_returns_placeholder(client):
    r = client.get(f"{BASE}/v1/city/code", params={"code": "00000", "date": DATE})

    assert r.status_code == 200
    assert r.json() == {
        "city": {
            "code": None,
            "value": None,
            "codeZone": None,
            "validityStart": None,
            "validityEnd": None,
            "displayValue": None,
        }
    }


def test_country_search_passes_records_through(client):
    r = client.get(f"{BASE}/v1/country", params={"search": "Fran", "date": DATE})

    assert r.status_code == 200
    assert r.json() == {
        "countries": [
            {"code": "99100", "value": "France", "validityStart": "1943-01-01", "validityEnd": None}
        ]
    }
    assert "displayValue" not in r.json()["countries"][0]


def test_country_by_code(client):
    r = client.get(f"{BASE}/v1/country/code", params={"code": "99109", "date": DATE})

    assert r.status_code == 200
    assert r.json()["country"]["value"] == "Allemagne"


@pytest.mark.parametrize("path,params", ROUTES)
@pytest.mark.parametrize("version", ["2", "0", "abc"])
def test_unsupported_version_is_404(client, directory, path, params, version):
    r = client.get(f"{BASE}/v{version}/{path}", params={**params, "date": "not-a-date"})

    assert r.status_code == 404
    assert r.json() == {"error": {"status": "NOT_FOUND", "message": ERROR_NOT_FOUND_VERSION}}
    assert directory.calls == []


@pytest.mark.parametrize("path,params", ROUTES)
@pytest.mark.parametrize("raw_date", ["not-a-date", "01/05/2023", "2023-13-01", ""])
def test_bad_date_is_404_and_skips_directory(client, directory, path, params, raw_date):
    r = client.get(f"{BASE}/v1/{path}", params={**params, "date": raw_date})

    assert r.status_code == 404
    assert r.json() == {"error": {"status": "NOT_FOUND", "message": ERROR_FORMAT_DATE_RESOURCE}}
    assert directory.calls == []


@pytest.mark.parametrize("path,params", ROUTES)
def test_missing_date_is_404(client, directory, path, params):
    r = client.get(f"{BASE}/v1/{path}", params=params)

    assert r.status_code == 404
    assert r.json()["error"]["message"] == ERROR_FORMAT_DATE_RESOURCE
    assert directory.calls == []


@pytest.mark.parametrize(
    "path,params,expected",
    [
        ("city", {"search": "Par"}, {"cities": []}),
        ("country", {"search": "France"}, {"countries": []}),
    ],
)
def test_directory_failure_degrades_to_empty_list(client, directory, path, params, expected):
    directory.error = RuntimeError("backend down")

    r = client.get(f"{BASE}/v1/{path}", params={**params, "date": DATE})

    assert r.status_code == 200
    assert r.json() == expected
    assert len(directory.calls) == 1


def test_directory_failure_degrades_to_placeholder_city(client, directory):
    directory.error = RuntimeError("backend down")

    r = client.get(f"{BASE}/v1/city/code", params={"code": "75056", "date": DATE})

    assert r.status_code == 200
    assert all(v is None for v in r.json()["city"].values())


def test_directory_failure_degrades_to_placeholder_country(client, directory):
    directory.error = RuntimeError("backend down")

    r = client.get(f"{BASE}/v1/country/code", params={"code": "99100", "date": DATE})

    assert r.status_code == 200
    assert r.json() == {
        "country": {"code": None, "value": None, "validityStart": None, "validityEnd": None}
    }


@pytest.mark.parametrize("search,searched", [("Pa", False), ("Par", True), ("Pari", True)])
def test_city_search_threshold(client, directory, search, searched):
    r = client.get(f"{BASE}/v1/city", params={"search": search, "date": DATE})

    assert r.status_code == 200
    assert bool(directory.calls) is searched
    if not searched:
        assert r.json() == {"cities": []}


@pytest.mark.parametrize("search,searched", [("Fra", False), ("Fran", True), ("France", True)])
def test_country_search_threshold(client, directory, search, searched):
    r = client.get(f"{BASE}/v1/country", params={"search": search, "date": DATE})

    assert r.status_code == 200
    assert bool(directory.calls) is searched


@pytest.mark.parametrize("path", ["city", "country"])
def test_missing_search_returns_empty_list(client, directory, path):
    r = client.get(f"{BASE}/v1/{path}", params={"date": DATE})

    assert r.status_code == 200
    assert directory.calls == []


def test_identical_requests_give_identical_bodies(client):
    params = {"search": "Par", "date": DATE}

    first = client.get(f"{BASE}/v1/city", params=params)
    second = client.get(f"{BASE}/v1/city", params=params)

    assert first.content == second.content


def test_health(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


@pytest.mark.parametrize("path,params", ROUTES)
def test_empty_version_segment_is_404_envelope(client, directory, path, params):
    r = client.get(f"{BASE}/v/{path}", params={**params, "date": DATE})

    assert r.status_code == 404
    assert r.json() == {"error": {"status": "NOT_FOUND", "message": ERROR_NOT_FOUND_VERSION}}
    assert directory.calls == []


@pytest.mark.parametrize("search", ["   ", "  P"])
def test_blank_or_padded_short_search_skips_directory(client, directory, search):
    r = client.get(f"{BASE}/v1/city", params={"search": search, "date": DATE})

    assert r.status_code == 200
    assert r.json() == {"cities": []}
    assert directory.calls == []


def test_non_canonical_date_is_404(client, directory):
    r = client.get(f"{BASE}/v1/city", params={"search": "Par", "date": "2023-5-1"})

    assert r.status_code == 404
    assert r.json()["error"]["message"] == ERROR_FORMAT_DATE_RESOURCE
    assert directory.calls == []
