from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

import pandas as pd
import requests

from constants import BASE_TEMPERATURE, DATA_URL
from utils.http import create_session
from utils.time import month_name

logger = logging.getLogger("heatmap.loader")

RECORD_FIELDS = ("year", "month", "variance")


class DataLoadError(ValueError):
    """The payload arrived but is not a usable monthly-variance document."""


class LoadPhase(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    READY = "ready"


def fetch_payload(url: str, session: requests.Session) -> Any:
    resp = session.get(url)
    resp.raise_for_status()
    return resp.json()


def parse_records(payload: Any) -> pd.DataFrame:
    """
    Extract the ``monthlyVariance`` array into a frame with columns
    year (int), month (int) and variance (float), in payload order.
    """
    if not isinstance(payload, dict) or "monthlyVariance" not in payload:
        raise DataLoadError("Payload has no 'monthlyVariance' field.")
    raw = payload["monthlyVariance"]
    if not isinstance(raw, list):
        raise DataLoadError("'monthlyVariance' is not a list.")
    if not raw:
        raise DataLoadError("'monthlyVariance' is empty.")

    for i, row in enumerate(raw):
        if not isinstance(row, dict) or any(k not in row for k in RECORD_FIELDS):
            raise DataLoadError(f"Record {i} is missing one of {RECORD_FIELDS}.")

    df = pd.DataFrame(raw, columns=list(RECORD_FIELDS))
    try:
        df = df.astype("float64")
    except (TypeError, ValueError) as exc:
        raise DataLoadError(f"Non-numeric record field: {exc}") from exc

    for col in RECORD_FIELDS:
        if df[col].isna().any():
            raise DataLoadError(f"Null {col} in record {int(df[col].isna().idxmax())}.")
    for col in ("year", "month"):
        fractional = df[col] % 1 != 0
        if fractional.any():
            raise DataLoadError(f"Non-integral {col}: {df.loc[fractional, col].iloc[0]}")
    df = df.astype({"year": "int64", "month": "int64"})

    bad_months = df.loc[~df["month"].between(1, 12), "month"]
    if not bad_months.empty:
        raise DataLoadError(f"Month out of range: {int(bad_months.iloc[0])}")
    return df


def derive_records(df: pd.DataFrame) -> pd.DataFrame:
    """Add ``month_name`` and ``temp`` (variance + base temperature)."""
    out = df.copy()
    out["month_name"] = out["month"].map(month_name)
    out["temp"] = out["variance"] + BASE_TEMPERATURE
    return out


class DataLoader:
    """
    Owns the one fetch of the dataset.

    ``load()`` moves NOT_LOADED -> LOADING -> READY. A failed attempt leaves
    the loader in LOADING and later calls do not try again, so the display
    keeps showing its placeholder.
    """

    def __init__(self, url: str = DATA_URL, session: Optional[requests.Session] = None) -> None:
        self.url = url
        self._session = session
        self.phase = LoadPhase.NOT_LOADED
        self._records: Optional[pd.DataFrame] = None

    @property
    def records(self) -> Optional[pd.DataFrame]:
        return self._records if self.phase is LoadPhase.READY else None

    def load(self) -> Optional[pd.DataFrame]:
        if self.phase is not LoadPhase.NOT_LOADED:
            return self.records

        self.phase = LoadPhase.LOADING
        session = self._session or create_session()
        logger.info("Fetching monthly variance data from %s", self.url)
        try:
            payload = fetch_payload(self.url, session)
            records = derive_records(parse_records(payload))
        except (requests.RequestException, ValueError) as exc:
            # requests' JSONDecodeError and DataLoadError are both ValueErrors
            logger.warning("Loading %s failed: %s", self.url, exc)
            return None

        self._records = records
        self.phase = LoadPhase.READY
        logger.info("Loaded %d monthly records", len(records))
        return self.records
