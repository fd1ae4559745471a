from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd


TABLE_SUFFIXES = (".csv", ".parquet")


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_json(path: Union[str, Path]) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def write_json(obj: Any, path: Path) -> None:
    ensure_dir(path.parent)

    if is_dataclass(obj):
        payload = asdict(obj)
    else:
        payload = obj

    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def read_df(path: Union[str, Path]) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suf = path.suffix.lower()
    if suf == ".csv":
        return pd.read_csv(path)
    if suf == ".parquet":
        return pd.read_parquet(path)
    raise ValueError(f"Unsupported dataframe format: {suf}")


def find_table(directory: Path, stem: str) -> Optional[Path]:
    """Locate <stem>.csv or <stem>.parquet in directory. Prefer parquet."""
    for suf in reversed(TABLE_SUFFIXES):
        candidate = directory / f"{stem}{suf}"
        if candidate.exists():
            return candidate
    return None
