"""Schemas for geocode lookups and their JSON envelopes."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GeocodeModel(BaseModel):
    """Base for geocode records; serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class City(GeocodeModel):
    """City valid over a period; an empty City() is the not-found placeholder."""
    code: Optional[str] = None
    value: Optional[str] = None
    code_zone: Optional[str] = None
    validity_start: Optional[date] = None
    validity_end: Optional[date] = None
    display_value: Optional[str] = None


class Country(GeocodeModel):
    """Country valid over a period."""
    code: Optional[str] = None
    value: Optional[str] = None
    validity_start: Optional[date] = None
    validity_end: Optional[date] = None


class CityListResponse(BaseModel):
    cities: List[City]


class CityResponse(BaseModel):
    city: City


class CountryListResponse(BaseModel):
    countries: List[Country]


class CountryResponse(BaseModel):
    country: Country


class ErrorDetail(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned with a 404 status."""
    error: ErrorDetail
