"""API routes for versioned city and country lookups."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.geocodes import constants
from app.geocodes.directory import GeocodeDirectory, get_geocode_directory
from app.geocodes.result import LookupErrorKind
from app.geocodes.schemas import (
    CityListResponse,
    CityResponse,
    CountryListResponse,
    CountryResponse,
    ErrorResponse,
)
from app.geocodes.service import GeocodeLookupService, LookupResponse, error_response

router = APIRouter(tags=["Geocodes"])

ERROR_RESPONSES = {404: {"model": ErrorResponse, "description": "Unsupported version or bad date"}}


def get_lookup_service(
    directory: GeocodeDirectory = Depends(get_geocode_directory),
) -> GeocodeLookupService:
    return GeocodeLookupService(directory)


def to_json_response(result: LookupResponse) -> JSONResponse:
    return JSONResponse(
        status_code=result.status_code,
        content=result.body.model_dump(mode="json", by_alias=True),
    )


@router.get(constants.CITY_PATH, response_model=CityListResponse, responses=ERROR_RESPONSES)
async def get_city_list_by_date(
    version: str,
    search: Optional[str] = Query(None, alias=constants.SEARCHED_STRING, description="Beginning of the city name"),
    date: Optional[str] = Query(None, alias=constants.DATE, description="Reference date, yyyy-MM-dd"),
    service: GeocodeLookupService = Depends(get_lookup_service),
):
    """
    Cities whose name starts with `search`, valid at `date`.

    Each city carries a `displayValue` of the form "Name (zone)".
    """
    return to_json_response(await service.list_cities(version, search, date))


@router.get(constants.CITY_CODE_PATH, response_model=CityResponse, responses=ERROR_RESPONSES)
async def get_city_by_code_and_date(
    version: str,
    code: Optional[str] = Query(None, alias=constants.CODE, description="City code"),
    date: Optional[str] = Query(None, alias=constants.DATE, description="Reference date, yyyy-MM-dd"),
    service: GeocodeLookupService = Depends(get_lookup_service),
):
    """City with the given code, valid at `date`. Empty city when nothing matches."""
    return to_json_response(await service.get_city(version, code, date))


@router.get(constants.COUNTRY_PATH, response_model=CountryListResponse, responses=ERROR_RESPONSES)
async def get_country_list_by_name_and_date(
    version: str,
    search: Optional[str] = Query(None, alias=constants.SEARCHED_STRING, description="Beginning of the country name"),
    date: Optional[str] = Query(None, alias=constants.DATE, description="Reference date, yyyy-MM-dd"),
    service: GeocodeLookupService = Depends(get_lookup_service),
):
    """Countries whose name starts with `search`, valid at `date`."""
    return to_json_response(await service.list_countries(version, search, date))


@router.get(constants.COUNTRY_CODE_PATH, response_model=CountryResponse, responses=ERROR_RESPONSES)
async def get_country_by_code_and_date(
    version: str,
    code: Optional[str] = Query(None, alias=constants.CODE, description="Country code"),
    date: Optional[str] = Query(None, alias=constants.DATE, description="Reference date, yyyy-MM-dd"),
    service: GeocodeLookupService = Depends(get_lookup_service),
):
    """Country with the given code, valid at `date`. Empty country when nothing matches."""
    return to_json_response(await service.get_country(version, code, date))


async def empty_version_segment():
    """`/v/...` carries no version at all."""
    return to_json_response(error_response(LookupErrorKind.UNSUPPORTED_VERSION))


for _path in (constants.CITY_PATH, constants.CITY_CODE_PATH, constants.COUNTRY_PATH, constants.COUNTRY_CODE_PATH):
    router.add_api_route(
        _path.replace("{version}", ""), empty_version_segment, methods=["GET"], include_in_schema=False
    )
