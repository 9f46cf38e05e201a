from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
import json
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..errors import CityNotFoundError, ConfigurationError
from ..models import Coordinates

DATASET_PACKAGE = "waktu_sholat.data"
DATASET_NAME = "cities.json"


@dataclass(frozen=True, slots=True)
class City:
    name: str
    coordinates: Coordinates


def _as_float(value: Any, field_name: str, row: Mapping[str, Any]) -> float:
    # the dataset mixes JSON numbers and numeric strings
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigurationError(f"City row {row!r} has a non-numeric {field_name}")
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"City row {row!r} has a non-numeric {field_name}") from exc


class CityDirectory:
    """Immutable name -> coordinates table, built once and shared by reference."""

    def __init__(self, cities: Iterable[City]) -> None:
        index: dict[str, City] = {}
        for city in cities:
            index.setdefault(city.name.casefold(), city)
        self._index = MappingProxyType(index)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "CityDirectory":
        cities = []
        for row in rows:
            name = row.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(f"City row {row!r} has no name")
            cities.append(
                City(
                    name=name.strip(),
                    coordinates=Coordinates(
                        latitude=_as_float(row.get("lat"), "lat", row),
                        longitude=_as_float(row.get("lon"), "lon", row),
                    ),
                )
            )
        return cls(cities)

    @classmethod
    def bundled(cls) -> "CityDirectory":
        payload = resources.files(DATASET_PACKAGE).joinpath(DATASET_NAME).read_text(encoding="utf-8")
        try:
            rows = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Bundled {DATASET_NAME} is not valid JSON: {exc}") from exc
        if not isinstance(rows, list):
            raise ConfigurationError(f"Bundled {DATASET_NAME} must hold a list of cities")
        return cls.from_rows(rows)

    def __len__(self) -> int:
        return len(self._index)

    def lookup(self, name: str) -> Coordinates:
        city = self._index.get(name.casefold())
        if city is None:
            raise CityNotFoundError(name)
        return city.coordinates
