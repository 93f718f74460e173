from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "places.csv"


@dataclass(frozen=True)
class PlaceStoreConfig:
    places_csv: Path = field(
        default_factory=lambda: Path(os.getenv("PLACES_CSV", str(_DEFAULT_CSV)))
    )
    browse_limit: int = 200


DEFAULT_PLACE_STORE_CONFIG = PlaceStoreConfig()
