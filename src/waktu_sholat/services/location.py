from __future__ import annotations

import logging
import math

from ..errors import ConfigurationError
from ..models import Coordinates
from .cities import CityDirectory

LOGGER = logging.getLogger(__name__)


def parse_coordinates(value: str) -> Coordinates:
    parts = value.split(",")
    if len(parts) != 2:
        raise ConfigurationError("Invalid coordinate format. Use `lat,lon`")
    try:
        latitude = float(parts[0].strip())
        longitude = float(parts[1].strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid coordinate format. Use `lat,lon`: {exc}") from exc
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ConfigurationError(f"Coordinates must be finite numbers: {value}")
    if not -90.0 <= latitude <= 90.0:
        raise ConfigurationError(f"Latitude {latitude} is outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise ConfigurationError(f"Longitude {longitude} is outside [-180, 180]")
    return Coordinates(latitude=latitude, longitude=longitude)


class LocationResolver:
    """Turn either a city name or a literal ``lat,lon`` pair into coordinates."""

    def __init__(self, cities: CityDirectory | None = None) -> None:
        self._cities = cities

    @property
    def cities(self) -> CityDirectory:
        if self._cities is None:
            self._cities = CityDirectory.bundled()
            LOGGER.debug("Loaded %d bundled cities", len(self._cities))
        return self._cities

    def resolve(self, *, city: str | None = None, coordinate: str | None = None) -> Coordinates:
        if city is not None and coordinate is not None:
            raise ConfigurationError("Use either --city or --coordinate, not both")
        if city is not None:
            coordinates = self.cities.lookup(city)
            LOGGER.info("Resolved city %s to %.4f,%.4f", city, *coordinates.as_tuple())
            return coordinates
        if coordinate is not None:
            return parse_coordinates(coordinate)
        raise ConfigurationError("Please provide either --city or --coordinate")
