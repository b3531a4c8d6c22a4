from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_SEED_DIR = Path(__file__).resolve().parent.parent / "data" / "seed"


@dataclass(frozen=True)
class StoreConfig:
    seed_dir: Path = Path(os.getenv("SEED_DATA_DIR", str(_DEFAULT_SEED_DIR)))
    products_filename: str = "products.csv"
    outlets_filename: str = "outlets.csv"
    symptoms_filename: str = "symptoms.csv"

    @property
    def products_path(self) -> Path:
        return self.seed_dir / self.products_filename

    @property
    def outlets_path(self) -> Path:
        return self.seed_dir / self.outlets_filename

    @property
    def symptoms_path(self) -> Path:
        return self.seed_dir / self.symptoms_filename


DEFAULT_STORE_CONFIG = StoreConfig()
