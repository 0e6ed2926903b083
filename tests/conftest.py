"""Shared fixtures: a counting fake directory wired into the FastAPI app."""

from datetime import date
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from app.geocodes.directory import get_geocode_directory
from app.geocodes.schemas import City, Country
from app.main import app


class FakeGeocodeDirectory:
    """In-memory directory that records every call and can be told to fail."""

    backend = "fake"

    def __init__(self, cities: Optional[List[City]] = None, countries: Optional[List[Country]] = None):
        self.cities = cities or []
        self.countries = countries or []
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if self.error is not None:
            raise self.error

    async def find_cities_by_name_and_date(self, term: str, reference_date: date) -> List[City]:
        self._record("find_cities_by_name_and_date", term, reference_date)
        return [c for c in self.cities if c.value and c.value.lower().startswith(term.lower())]

    async def find_city_by_code_and_date(self, code: str, reference_date: date) -> Optional[City]:
        self._record("find_city_by_code_and_date", code, reference_date)
        return next((c for c in self.cities if c.code == code), None)

    async def find_countries_by_name_and_date(self, term: str, reference_date: date) -> List[Country]:
        self._record("find_countries_by_name_and_date", term, reference_date)
        return [c for c in self.countries if c.value and c.value.lower().startswith(term.lower())]

    async def find_country_by_code_and_date(self, code: str, reference_date: date) -> Optional[Country]:
        self._record("find_country_by_code_and_date", code, reference_date)
        return next((c for c in self.countries if c.code == code), None)


@pytest.fixture
def directory():
    return FakeGeocodeDirectory(
        cities=[
            City(code="75056", value="Paris", code_zone="75", display_value="stale label"),
            City(code="69123", value="Lyon", code_zone="69"),
            City(code="13055", value="Marseille", code_zone="13"),
        ],
        countries=[
            Country(code="99100", value="France", validity_start=date(1943, 1, 1)),
            Country(code="99109", value="Allemagne"),
        ],
    )


@pytest.fixture
def client(directory):
    app.dependency_overrides[get_geocode_directory] = lambda: directory
    yield TestClient(app)
    app.dependency_overrides.clear()
