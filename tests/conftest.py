"""Pytest configuration and fixtures."""

import sqlite3
from typing import Any, Callable

import numpy as np
import pandas as pd
import pytest

from supermarket_etl.etl import stage_raw
from supermarket_etl.sample import RAW_COLUMNS

TABLE_COLUMNS = ['Date' if c == 'Dt_Customer' else c for c in RAW_COLUMNS]


def _record(**overrides: Any) -> dict:
    record = {c: 0 for c in TABLE_COLUMNS}
    record.update({
        'ID': 1,
        'Year_Birth': 1975,
        'Education': 'Graduation',
        'Marital_Status': 'Married',
        'Income': 50000.0,
        'Date': '2013-01-01',
        'Recency': 10,
        'MntWines': 100,
        'MntFruits': 10,
        'MntMeatProducts': 80,
        'MntFishProducts': 20,
        'MntSweetProducts': 15,
        'MntGoldProds': 30,
        'Z_CostContact': 3,
        'Z_Revenue': 11,
    })
    record.update(overrides)
    return record


@pytest.fixture
def make_record() -> Callable[..., dict]:
    """Build one marketing row in table layout with sensible defaults."""
    return _record


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    """Marketing rows covering every cleaning rule plus ranking ties."""
    rows = [
        _record(ID=5, Income=np.nan, Marital_Status='Married', Education='Basic', Date='2013-01-01'),
        _record(ID=6, Income=9000.0),
        _record(ID=7, Income=50000.0, Marital_Status='Absurd'),
        _record(ID=8, Income=50000.0, Education='Basic', Marital_Status='Single', Date='2012-05-01'),
        _record(ID=0, Income=50000.0),
        _record(ID=9, Date='1900-03-15'),
        _record(ID=10, Education='Graduation', Recency=30, Year_Birth=1960, Marital_Status='Together'),
        _record(ID=11, Education='Graduation', Recency=30, Year_Birth=1985, Marital_Status='Together'),
        _record(ID=12, Education='PhD', Recency=5, Year_Birth=1970, Marital_Status='Married'),
        _record(ID=13, Education='PhD', Recency=50, Year_Birth=1970, Marital_Status='Married'),
        _record(ID=14, Education='Master', Recency=70, Year_Birth=1980, Marital_Status='Married'),
        _record(ID=15, Education='2n Cycle', Recency=1, Year_Birth=1990, Marital_Status='Divorced', Income=10000.0),
    ]
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


@pytest.fixture
def conn():
    """In-memory SQLite connection."""
    connection = sqlite3.connect(':memory:')
    yield connection
    connection.close()


@pytest.fixture
def staged_conn(conn: sqlite3.Connection, raw_frame: pd.DataFrame) -> sqlite3.Connection:
    """Connection with ``raw_frame`` loaded as an unconstrained ``marketing`` table."""
    stage_raw(conn, raw_frame, 'marketing')
    return conn
