"""Versioned lookup service for cities and countries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Awaitable, Callable, List, Optional

from fastapi import status
from pydantic import BaseModel

from app.core.config import Settings, get_settings
from app.geocodes.constants import STATUS_NOT_FOUND
from app.geocodes.directory import GeocodeDirectory
from app.geocodes.result import Failure, LookupErrorKind, Result, Success
from app.geocodes.schemas import (
    City,
    CityListResponse,
    CityResponse,
    Country,
    CountryListResponse,
    CountryResponse,
    ErrorDetail,
    ErrorResponse,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupRequest:
    """Validated parameters of a single lookup call."""
    api_version: int
    term: Optional[str]
    reference_date: date


@dataclass(frozen=True)
class LookupResponse:
    """Envelope body plus the HTTP status it is sent with."""
    status_code: int
    body: BaseModel


def error_response(kind: LookupErrorKind) -> LookupResponse:
    body = ErrorResponse(error=ErrorDetail(status=STATUS_NOT_FOUND, message=kind.message))
    return LookupResponse(status_code=status.HTTP_404_NOT_FOUND, body=body)


def ok_response(body: BaseModel) -> LookupResponse:
    return LookupResponse(status_code=status.HTTP_200_OK, body=body)


def with_display_value(city: City) -> City:
    """Return a copy of the city with its label recomputed as "value (codeZone)"."""
    return city.model_copy(update={"display_value": f"{city.value} ({city.code_zone})"})


def should_search(term: Optional[str], min_length: int) -> bool:
    return term is not None and len(term.strip()) >= min_length


class GeocodeLookupService:
    """
    Validates version and reference date, then queries the geocode directory.

    Version and date errors are returned as 404 envelopes before the directory
    is touched. Directory failures are logged and answered with an empty list
    or a placeholder record, so callers always get a 200 once the request
    itself is valid.
    """

    def __init__(self, directory: GeocodeDirectory, settings: Optional[Settings] = None):
        self.directory = directory
        self.settings = settings or get_settings()

    def parse_version(self, raw: Any) -> Result[int, LookupErrorKind]:
        try:
            version = int(str(raw).strip())
        except (TypeError, ValueError):
            return Failure(error=LookupErrorKind.UNSUPPORTED_VERSION)

        if version != self.settings.SUPPORTED_API_VERSION:
            return Failure(error=LookupErrorKind.UNSUPPORTED_VERSION)
        return Success(value=version)

    def parse_reference_date(self, raw: Optional[str]) -> Result[date, LookupErrorKind]:
        if raw is None:
            return Failure(error=LookupErrorKind.DATE_FORMAT_ERROR)
        fmt = self.settings.REFERENCE_DATE_FORMAT
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            return Failure(error=LookupErrorKind.DATE_FORMAT_ERROR)

        # strptime accepts unpadded fields; only the canonical rendering is valid
        if parsed.strftime(fmt) != raw:
            return Failure(error=LookupErrorKind.DATE_FORMAT_ERROR)
        return Success(value=parsed.date())

    def prepare(
        self, api_version: Any, term: Optional[str], reference_date_raw: Optional[str]
    ) -> Result[LookupRequest, LookupErrorKind]:
        """Version gate first, then the reference date. The term is stripped."""
        version = self.parse_version(api_version)
        if isinstance(version, Failure):
            logger.error(f"Unsupported API version requested: {api_version!r}")
            return version

        reference_date = self.parse_reference_date(reference_date_raw)
        if isinstance(reference_date, Failure):
            logger.error(f"Invalid reference date: {reference_date_raw!r}")
            return reference_date

        return Success(
            value=LookupRequest(
                api_version=version.value,
                term=term.strip() if term is not None else None,
                reference_date=reference_date.value,
            )
        )

    async def _call_directory(
        self, label: str, lookup: Callable[..., Awaitable[Any]], *args: Any
    ) -> Result[Any, Exception]:
        try:
            return Success(value=await lookup(*args))
        except Exception as e:
            logger.exception(f"Geocode directory lookup {label} failed: {e}")
            return Failure(error=e)

    async def list_cities(
        self, api_version: Any, search_term: Optional[str], reference_date_raw: Optional[str]
    ) -> LookupResponse:
        prepared = self.prepare(api_version, search_term, reference_date_raw)
        if isinstance(prepared, Failure):
            return error_response(prepared.error)
        request = prepared.value

        cities: List[City] = []
        if should_search(request.term, self.settings.CITY_SEARCH_MIN_LENGTH):
            found = await self._call_directory(
                "find_cities_by_name_and_date",
                self.directory.find_cities_by_name_and_date,
                request.term,
                request.reference_date,
            )
            if isinstance(found, Success):
                cities = [with_display_value(city) for city in found.value or []]
                logger.debug(f"{len(cities)} cities for {request.term!r} at {request.reference_date}")

        return ok_response(CityListResponse(cities=cities))

    async def get_city(
        self, api_version: Any, code: Optional[str], reference_date_raw: Optional[str]
    ) -> LookupResponse:
        prepared = self.prepare(api_version, code, reference_date_raw)
        if isinstance(prepared, Failure):
            return error_response(prepared.error)
        request = prepared.value

        city = City()
        if request.term:
            found = await self._call_directory(
                "find_city_by_code_and_date",
                self.directory.find_city_by_code_and_date,
                request.term,
                request.reference_date,
            )
            if isinstance(found, Success) and found.value is not None:
                city = with_display_value(found.value)

        return ok_response(CityResponse(city=city))

    async def list_countries(
        self, api_version: Any, search_term: Optional[str], reference_date_raw: Optional[str]
    ) -> LookupResponse:
        prepared = self.prepare(api_version, search_term, reference_date_raw)
        if isinstance(prepared, Failure):
            return error_response(prepared.error)
        request = prepared.value

        countries: List[Country] = []
        if should_search(request.term, self.settings.COUNTRY_SEARCH_MIN_LENGTH):
            found = await self._call_directory(
                "find_countries_by_name_and_date",
                self.directory.find_countries_by_name_and_date,
                request.term,
                request.reference_date,
            )
            if isinstance(found, Success):
                countries = list(found.value or [])

        return ok_response(CountryListResponse(countries=countries))

    async def get_country(
        self, api_version: Any, code: Optional[str], reference_date_raw: Optional[str]
    ) -> LookupResponse:
        prepared = self.prepare(api_version, code, reference_date_raw)
        if isinstance(prepared, Failure):
            return error_response(prepared.error)
        request = prepared.value

        country = Country()
        if request.term:
            found = await self._call_directory(
                "find_country_by_code_and_date",
                self.directory.find_country_by_code_and_date,
                request.term,
                request.reference_date,
            )
            if isinstance(found, Success) and found.value is not None:
                country = found.value

        return ok_response(CountryResponse(country=country))
