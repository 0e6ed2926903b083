"""Geocode directory backends (remote geocodes service or MongoDB)."""

from __future__ import annotations

import logging
import re
import threading
from datetime import date, datetime, time
from typing import Any, List, Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from app.core.config import Settings, get_settings
from app.core.database import CITIES_COLLECTION, COUNTRIES_COLLECTION, Database
from app.core.exceptions import DirectoryLookupError
from app.geocodes.schemas import City, Country

logger = logging.getLogger(__name__)


class GeocodeDirectory(Protocol):
    """Resolves cities and countries valid at a reference date."""

    async def find_cities_by_name_and_date(self, term: str, reference_date: date) -> List[City]:
        ...

    async def find_city_by_code_and_date(self, code: str, reference_date: date) -> Optional[City]:
        ...

    async def find_countries_by_name_and_date(self, term: str, reference_date: date) -> List[Country]:
        ...

    async def find_country_by_code_and_date(self, code: str, reference_date: date) -> Optional[Country]:
        ...


class RemoteGeocodeDirectory:
    """Directory backed by the geocodes web service over HTTP."""

    backend = "remote"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: dict, allow_missing: bool = False) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(path, params=params)

                if allow_missing and response.status_code == 404:
                    return None

                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            raise DirectoryLookupError(
                f"Geocodes service answered {e.response.status_code} for {path}", backend=self.backend
            ) from e
        except httpx.HTTPError as e:
            raise DirectoryLookupError(f"Geocodes service unreachable: {e}", backend=self.backend) from e
        except ValueError as e:
            raise DirectoryLookupError(f"Invalid JSON from geocodes service: {e}", backend=self.backend) from e

    def _parse_list(self, payload: Any, model):
        if not isinstance(payload, list):
            raise DirectoryLookupError(
                f"Expected a list, got {type(payload).__name__}", backend=self.backend
            )
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as e:
            raise DirectoryLookupError(f"Malformed record: {e}", backend=self.backend) from e

    def _parse_one(self, payload: Any, model):
        if payload is None:
            return None
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise DirectoryLookupError(f"Malformed record: {e}", backend=self.backend) from e

    async def find_cities_by_name_and_date(self, term: str, reference_date: date) -> List[City]:
        payload = await self._get("/cities", {"search": term, "date": reference_date.isoformat()})
        return self._parse_list(payload, City)

    async def find_city_by_code_and_date(self, code: str, reference_date: date) -> Optional[City]:
        payload = await self._get(
            f"/cities/{quote(code, safe='')}", {"date": reference_date.isoformat()}, allow_missing=True
        )
        return self._parse_one(payload, City)

    async def find_countries_by_name_and_date(self, term: str, reference_date: date) -> List[Country]:
        payload = await self._get("/countries", {"search": term, "date": reference_date.isoformat()})
        return self._parse_list(payload, Country)

    async def find_country_by_code_and_date(self, code: str, reference_date: date) -> Optional[Country]:
        payload = await self._get(
            f"/countries/{quote(code, safe='')}", {"date": reference_date.isoformat()}, allow_missing=True
        )
        return self._parse_one(payload, Country)


def validity_filter(reference_date: date) -> dict:
    """Records whose validity period contains the reference date (open ends allowed)."""
    moment = datetime.combine(reference_date, time.min)
    return {
        "$and": [
            {"$or": [{"validity_start": None}, {"validity_start": {"$lte": moment}}]},
            {"$or": [{"validity_end": None}, {"validity_end": {"$gte": moment}}]},
        ]
    }


def name_prefix_filter(term: str, reference_date: date) -> dict:
    safe = re.escape(term.strip().lower())
    return {"value_lower": {"$regex": f"^{safe}"}, **validity_filter(reference_date)}


def code_filter(code: str, reference_date: date) -> dict:
    return {"code": code, **validity_filter(reference_date)}


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def city_from_document(doc: dict) -> City:
    return City(
        code=doc.get("code"),
        value=doc.get("value"),
        code_zone=doc.get("code_zone"),
        validity_start=_as_date(doc.get("validity_start")),
        validity_end=_as_date(doc.get("validity_end")),
    )


def country_from_document(doc: dict) -> Country:
    return Country(
        code=doc.get("code"),
        value=doc.get("value"),
        validity_start=_as_date(doc.get("validity_start")),
        validity_end=_as_date(doc.get("validity_end")),
    )


class MongoGeocodeDirectory:
    """Directory backed by the geocode_cities / geocode_countries collections."""

    backend = "mongo"

    def __init__(self, max_results: int = 100):
        self.max_results = max_results

    def _collection(self, name: str):
        if Database.db is None:
            raise DirectoryLookupError("MongoDB is not connected", backend=self.backend)
        return Database.get_collection(name)

    async def _find_many(self, name: str, query: dict) -> List[dict]:
        collection = self._collection(name)
        try:
            cursor = (
                collection.find(query, {"_id": 0})
                .sort("value_lower", 1)
                .limit(self.max_results)
            )
            return await cursor.to_list(length=self.max_results)
        except PyMongoError as e:
            raise DirectoryLookupError(f"Query on {name} failed: {e}", backend=self.backend) from e

    async def _find_one(self, name: str, query: dict) -> Optional[dict]:
        collection = self._collection(name)
        try:
            return await collection.find_one(query, {"_id": 0})
        except PyMongoError as e:
            raise DirectoryLookupError(f"Query on {name} failed: {e}", backend=self.backend) from e

    async def find_cities_by_name_and_date(self, term: str, reference_date: date) -> List[City]:
        docs = await self._find_many(CITIES_COLLECTION, name_prefix_filter(term, reference_date))
        return [city_from_document(doc) for doc in docs]

    async def find_city_by_code_and_date(self, code: str, reference_date: date) -> Optional[City]:
        doc = await self._find_one(CITIES_COLLECTION, code_filter(code, reference_date))
        return city_from_document(doc) if doc else None

    async def find_countries_by_name_and_date(self, term: str, reference_date: date) -> List[Country]:
        docs = await self._find_many(COUNTRIES_COLLECTION, name_prefix_filter(term, reference_date))
        return [country_from_document(doc) for doc in docs]

    async def find_country_by_code_and_date(self, code: str, reference_date: date) -> Optional[Country]:
        doc = await self._find_one(COUNTRIES_COLLECTION, code_filter(code, reference_date))
        return country_from_document(doc) if doc else None


def build_geocode_directory(settings: Settings) -> GeocodeDirectory:
    """Create the directory selected by GEOCODE_BACKEND."""
    backend = settings.GEOCODE_BACKEND.strip().lower()
    if backend == "mongo":
        return MongoGeocodeDirectory(max_results=settings.DIRECTORY_MAX_RESULTS)
    if backend == "remote":
        return RemoteGeocodeDirectory(
            settings.GEOCODES_SERVICE_URL, timeout=settings.GEOCODES_SERVICE_TIMEOUT
        )
    raise ValueError(f"Unknown GEOCODE_BACKEND: {settings.GEOCODE_BACKEND!r}")


_directory: Optional[GeocodeDirectory] = None
_directory_lock = threading.Lock()


def get_geocode_directory() -> GeocodeDirectory:
    """Shared directory handle, created on first use."""
    global _directory
    if _directory is None:
        with _directory_lock:
            if _directory is None:
                _directory = build_geocode_directory(get_settings())
                logger.info(f"Geocode directory initialized: {_directory.backend}")
    return _directory


def reset_geocode_directory() -> None:
    global _directory
    with _directory_lock:
        _directory = None
