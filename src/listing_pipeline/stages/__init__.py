"""Built-in pipeline stages."""

from listing_pipeline.stages.authentication import AllowAnonymous, BearerAuthentication
from listing_pipeline.stages.geocoding import (
    GeocodeAddress,
    GeocodingError,
    GeocodingProvider,
    GoogleGeocoder,
    compose_address,
)
from listing_pipeline.stages.validation import FieldRule, ValidateBody, validate_fields

__all__ = [
    "AllowAnonymous",
    "BearerAuthentication",
    "FieldRule",
    "GeocodeAddress",
    "GeocodingError",
    "GeocodingProvider",
    "GoogleGeocoder",
    "ValidateBody",
    "compose_address",
    "validate_fields",
]
