#!/usr/bin/env python3
"""
Smoke check for a running Geocodes API.
Exercises every route once in positive and negative flow.

Usage: python scripts/smoke_api.py [BASE_URL] [SEARCH] [DATE]
"""

import sys

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
API_BASE = f"{BASE_URL}/rest/geocodes"
SEARCH = sys.argv[2] if len(sys.argv) > 2 else "Paris"
DATE = sys.argv[3] if len(sys.argv) > 3 else "2023-05-01"


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    END = '\033[0m'

def print_step(name: str):
    print(f"\n{Colors.BLUE}=== {name} ==={Colors.END}")

def print_success(msg: str):
    print(f"{Colors.GREEN}✓ {msg}{Colors.END}")

def print_error(msg: str):
    print(f"{Colors.RED}✗ {msg}{Colors.END}")

def print_info(msg: str):
    print(f"{Colors.YELLOW}ℹ {msg}{Colors.END}")

def check_health() -> bool:
    """Check health endpoints."""
    print_step("Health Checks")

    try:
        r = requests.get(f"{BASE_URL}/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        print_success("GET /health - Detailed health check")
        print_info(f"Backend: {data.get('backend', 'unknown')}")
    except Exception as e:
        print_error(f"GET /health - {str(e)}")
        return False

    return True

def check_cities() -> bool:
    """Check city search and city by code."""
    print_step("Cities")

    code = None
    try:
        r = requests.get(f"{API_BASE}/v1/city", params={"search": SEARCH, "date": DATE})
        assert r.status_code == 200
        cities = r.json()["cities"]
        for city in cities:
            assert city["displayValue"] == f"{city['value']} ({city['codeZone']})"
        print_success(f"GET /v1/city - Found {len(cities)} city(ies)")
        if cities:
            code = cities[0]["code"]
    except Exception as e:
        print_error(f"GET /v1/city - {str(e)}")
        return False

    if code:
        try:
            r = requests.get(f"{API_BASE}/v1/city/code", params={"code": code, "date": DATE})
            assert r.status_code == 200
            assert r.json()["city"]["code"] == code
            print_success(f"GET /v1/city/code - City {code} retrieved")
        except Exception as e:
            print_error(f"GET /v1/city/code - {str(e)}")
            return False
    else:
        print_info("No city matched, skipping lookup by code")

    return True

def check_countries() -> bool:
    """Check country search and country by code."""
    print_step("Countries")

    try:
        r = requests.get(f"{API_BASE}/v1/country", params={"search": "France", "date": DATE})
        assert r.status_code == 200
        countries = r.json()["countries"]
        print_success(f"GET /v1/country - Found {len(countries)} country(ies)")
        if countries:
            code = countries[0]["code"]
            r = requests.get(f"{API_BASE}/v1/country/code", params={"code": code, "date": DATE})
            assert r.status_code == 200
            print_success(f"GET /v1/country/code - Country {code} retrieved")
    except Exception as e:
        print_error(f"GET /v1/country - {str(e)}")
        return False

    return True

def check_errors() -> bool:
    """Check that bad versions and dates are rejected."""
    print_step("Error Envelopes")

    try:
        r = requests.get(f"{API_BASE}/v2/city", params={"search": SEARCH, "date": DATE})
        assert r.status_code == 404
        assert r.json()["error"]["status"] == "NOT_FOUND"
        print_success("GET /v2/city - Unsupported version rejected")

        r = requests.get(f"{API_BASE}/v1/city", params={"search": SEARCH, "date": "not-a-date"})
        assert r.status_code == 404
        assert "date" in r.json()["error"]["message"].lower()
        print_success("GET /v1/city?date=not-a-date - Bad date rejected")
    except Exception as e:
        print_error(f"Error envelopes - {str(e)}")
        return False

    return True

def main():
    """Run all checks."""
    print(f"\n{Colors.BLUE}{'='*60}")
    print("Geocodes API - Smoke Check")
    print(f"{'='*60}{Colors.END}\n")

    print_info(f"Checking against: {BASE_URL}")
    print_info("Make sure the API is running before starting\n")

    if not check_health():
        print_error("\nHealth check failed. Is the API running?")
        sys.exit(1)

    results = [check_cities(), check_countries(), check_errors()]

    if all(results):
        print(f"\n{Colors.GREEN}{'='*60}")
        print("All checks passed!")
        print(f"{'='*60}{Colors.END}\n")
    else:
        print_error("\nSome checks failed.")
        sys.exit(1)

if __name__ == "__main__":
    main()
