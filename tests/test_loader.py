import logging
from unittest.mock import Mock

import pandas as pd
import pytest
import requests

from constants import BASE_TEMPERATURE, DATA_URL
from loader import (
    DataLoader,
    DataLoadError,
    LoadPhase,
    derive_records,
    fetch_payload,
    parse_records,
)


def make_payload():
    return {
        "baseTemperature": 8.66,
        "monthlyVariance": [
            {"year": 1753, "month": 1, "variance": -1.366},
            {"year": 1753, "month": 2, "variance": -2.223},
            {"year": 1754, "month": 1, "variance": 0.5},
        ],
    }


def make_session(payload=None, *, error=None):
    session = Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        resp = Mock()
        resp.json.return_value = payload
        session.get.return_value = resp
    return session


def test_fetch_payload_gets_url_and_checks_status():
    session = make_session(make_payload())
    payload = fetch_payload(DATA_URL, session)
    session.get.assert_called_once_with(DATA_URL)
    session.get.return_value.raise_for_status.assert_called_once()
    assert payload["monthlyVariance"][0]["year"] == 1753


def test_parse_records_types_and_order():
    df = parse_records(make_payload())
    assert list(df.columns) == ["year", "month", "variance"]
    assert df["year"].tolist() == [1753, 1753, 1754]
    assert df["month"].tolist() == [1, 2, 1]
    assert str(df["year"].dtype) == "int64"
    assert str(df["variance"].dtype) == "float64"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"data": []},
        {"monthlyVariance": "nope"},
        {"monthlyVariance": []},
        {"monthlyVariance": [{"year": 1753, "month": 1}]},
        {"monthlyVariance": [{"year": 1753, "month": 13, "variance": 0.1}]},
        {"monthlyVariance": [{"year": 1753, "month": 1, "variance": "warm"}]},
        {"monthlyVariance": [{"year": 1753.5, "month": 1, "variance": 0.1}]},
        {"monthlyVariance": [{"year": 1753, "month": 1.5, "variance": 0.1}]},
        {"monthlyVariance": [{"year": 1753, "month": 1, "variance": None}]},
        {"monthlyVariance": [{"year": None, "month": 1, "variance": 0.1}]},
    ],
)
def test_parse_records_rejects_malformed_payloads(payload):
    with pytest.raises(DataLoadError):
        parse_records(payload)


def test_derive_records_adds_month_name_and_temp():
    raw = parse_records(make_payload())
    df = derive_records(raw)
    assert df["month_name"].tolist() == ["January", "February", "January"]
    for _, row in df.iterrows():
        assert row["temp"] == pytest.approx(row["variance"] + BASE_TEMPERATURE)
    # input frame is left alone
    assert "temp" not in raw.columns


def test_single_record_scenario():
    df = derive_records(parse_records({"monthlyVariance": [{"year": 1753, "month": 1, "variance": -1.5}]}))
    assert df.iloc[0]["temp"] == pytest.approx(7.16)
    assert df.iloc[0]["month_name"] == "January"


def test_loader_reaches_ready_and_does_not_refetch():
    session = make_session(make_payload())
    loader = DataLoader(session=session)
    assert loader.phase is LoadPhase.NOT_LOADED
    assert loader.records is None

    records = loader.load()
    assert loader.phase is LoadPhase.READY
    assert isinstance(records, pd.DataFrame)
    assert len(records) == 3

    again = loader.load()
    assert again is records
    assert session.get.call_count == 1


def test_loader_failure_stays_loading_without_retry(caplog, monkeypatch):
    # app.py stops "heatmap" propagating to root, where caplog listens
    monkeypatch.setattr(logging.getLogger("heatmap"), "propagate", True)
    session = make_session(error=requests.ConnectionError("offline"))
    loader = DataLoader(session=session)

    with caplog.at_level("WARNING", logger="heatmap.loader"):
        assert loader.load() is None
    assert loader.phase is LoadPhase.LOADING
    assert loader.records is None
    assert "offline" in caplog.text

    assert loader.load() is None
    assert session.get.call_count == 1


def test_loader_http_error_status():
    session = make_session(make_payload())
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
    loader = DataLoader(session=session)
    assert loader.load() is None
    assert loader.phase is LoadPhase.LOADING


def test_loader_invalid_json():
    session = make_session()
    session.get.return_value.json.side_effect = ValueError("Expecting value")
    loader = DataLoader(session=session)
    assert loader.load() is None
    assert loader.phase is LoadPhase.LOADING


def test_loader_malformed_payload():
    loader = DataLoader(session=make_session({"monthlyVariance": None}))
    assert loader.load() is None
    assert loader.phase is LoadPhase.LOADING
