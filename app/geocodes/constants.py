"""Constants shared by the geocodes routes and service."""

SEARCHED_STRING = "search"
CODE = "code"
DATE = "date"

CITY_PATH = "/v{version}/city"
CITY_CODE_PATH = "/v{version}/city/code"
COUNTRY_PATH = "/v{version}/country"
COUNTRY_CODE_PATH = "/v{version}/country/code"

STATUS_NOT_FOUND = "NOT_FOUND"
ERROR_NOT_FOUND_VERSION = "Version not found"
ERROR_FORMAT_DATE_RESOURCE = "Date format error, expected format is yyyy-MM-dd"
