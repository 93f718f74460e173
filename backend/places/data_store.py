from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import NotFoundError
from .config import DEFAULT_PLACE_STORE_CONFIG, PlaceStoreConfig

logger = logging.getLogger(__name__)

PLACE_COLUMNS: list[str] = [
    "id",
    "external_id",
    "name",
    "city",
    "address",
    "latitude",
    "longitude",
    "price_level",
    "rating",
    "user_ratings_total",
    "categories",
    "is_open_now",
    "image",
    "maps_url",
    "is_active",
]

_NUMERIC_COLUMNS = ("latitude", "longitude", "price_level", "rating", "user_ratings_total")


def _split_categories(value: Any) -> list[str]:
    if isinstance(value, (list, tuple, set, frozenset)):
        items = value
    elif value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    else:
        items = str(value).split(",")
    return [str(c).strip() for c in items if str(c).strip()]


def _to_bool(series: pd.Series, default: bool) -> pd.Series:
    def convert(value: Any) -> bool:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return default
        return str(value).strip().lower() in {"true", "1", "yes"}

    return series.map(convert).astype(bool)


def prepare_places(raw: pd.DataFrame) -> pd.DataFrame:
    """Coerce a raw place table into the canonical column set.

    Missing columns are added, numerics coerced to floats (NaN when absent
    or malformed), booleans defaulted to True and lower-cased lookup columns
    precomputed for case-insensitive matching.
    """
    df = raw.copy()
    for col in PLACE_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["id"] = df["id"].astype(str)
    df["name"] = df["name"].fillna("").astype(str)
    df["city"] = df["city"].fillna("").astype(str)

    for col in _NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    df["user_ratings_total"] = df["user_ratings_total"].fillna(0.0).clip(lower=0.0)
    # Out-of-range values are treated as unknown
    df["rating"] = df["rating"].where(df["rating"].between(0.0, 5.0))
    df["price_level"] = df["price_level"].where(df["price_level"].between(0.0, 4.0)).round()
    df["latitude"] = df["latitude"].where(df["latitude"].between(-90.0, 90.0))
    df["longitude"] = df["longitude"].where(df["longitude"].between(-180.0, 180.0))

    df["categories"] = df["categories"].apply(_split_categories).astype(object)
    df["is_open_now"] = _to_bool(df["is_open_now"], default=True)
    df["is_active"] = _to_bool(df["is_active"], default=True)

    # Lowercase city, name and categories for case-insensitive lookup
    df["city_lower"] = df["city"].str.strip().str.lower()
    df["name_lower"] = df["name"].str.strip().str.lower()
    df["categories_lower"] = df["categories"].apply(
        lambda cats: [c.lower() for c in cats]
    ).astype(object)

    return df.reset_index(drop=True)


def _none_if_nan(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def row_to_place(row: pd.Series | dict[str, Any]) -> dict[str, Any]:
    """Return the public fields of a place row with NaN mapped to None."""
    price = _none_if_nan(row.get("price_level"))
    return {
        "id": str(row["id"]),
        "external_id": _none_if_nan(row.get("external_id")),
        "name": row["name"],
        "city": row["city"],
        "address": _none_if_nan(row.get("address")),
        "latitude": _none_if_nan(row.get("latitude")),
        "longitude": _none_if_nan(row.get("longitude")),
        "price_level": int(price) if price is not None else None,
        "rating": _none_if_nan(row.get("rating")),
        "user_ratings_total": int(_none_if_nan(row.get("user_ratings_total")) or 0),
        "categories": list(row.get("categories") or []),
        "is_open_now": bool(row.get("is_open_now", True)),
        "image": _none_if_nan(row.get("image")),
        "maps_url": _none_if_nan(row.get("maps_url")),
        "is_active": bool(row.get("is_active", True)),
    }


class PlaceStore:
    """Read-mostly place catalogue backed by a pandas DataFrame."""

    def __init__(self, frame: pd.DataFrame | None = None) -> None:
        self._df = prepare_places(frame if frame is not None else pd.DataFrame(columns=PLACE_COLUMNS))
        self._lock = threading.Lock()

    @classmethod
    def from_csv(cls, path: Path) -> PlaceStore:
        df = pd.read_csv(path, dtype={"id": str, "external_id": str})
        store = cls(df)
        logger.info("Loaded %d places from %s", len(store.frame), path)
        return store

    @classmethod
    def from_config(cls, config: PlaceStoreConfig = DEFAULT_PLACE_STORE_CONFIG) -> PlaceStore:
        if config.places_csv.is_file():
            return cls.from_csv(config.places_csv)
        logger.warning("Places file %s not found, starting with an empty catalogue", config.places_csv)
        return cls()

    @property
    def frame(self) -> pd.DataFrame:
        return self._df

    def get(self, place_id: str) -> dict[str, Any]:
        matches = self._df.loc[self._df["id"] == str(place_id)]
        if matches.empty:
            raise NotFoundError("Place not found")
        return matches.iloc[0].to_dict()

    def set_active(self, place_id: str, active: bool) -> None:
        with self._lock:
            mask = self._df["id"] == str(place_id)
            if not mask.any():
                raise NotFoundError("Place not found")
            df = self._df.copy()
            df.loc[mask, "is_active"] = bool(active)
            self._df = df

    def cities(self) -> list[str]:
        return sorted(c for c in self._df["city"].dropna().unique().tolist() if c)

    def categories(self) -> list[str]:
        found: set[str] = set()
        for cats in self._df["categories"]:
            found.update(cats)
        return sorted(found)
