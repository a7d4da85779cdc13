from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd


# ------------------------
# Raw layout of marketing_campaign.csv
# ------------------------
RAW_COLUMNS: List[str] = [
    'ID', 'Year_Birth', 'Education', 'Marital_Status', 'Income', 'Kidhome', 'Teenhome',
    'Dt_Customer', 'Recency', 'MntWines', 'MntFruits', 'MntMeatProducts', 'MntFishProducts',
    'MntSweetProducts', 'MntGoldProds', 'NumDealsPurchases', 'NumWebPurchases',
    'NumCatalogPurchases', 'NumStorePurchases', 'NumWebVisitsMonth', 'AcceptedCmp3',
    'AcceptedCmp4', 'AcceptedCmp5', 'AcceptedCmp1', 'AcceptedCmp2', 'Complain',
    'Z_CostContact', 'Z_Revenue', 'Response',
]

EDUCATION_LEVELS = ['Graduation', 'PhD', 'Master', '2n Cycle', 'Basic']
EDUCATION_WEIGHTS = [0.50, 0.22, 0.16, 0.09, 0.03]
MARITAL_STATUSES = ['Married', 'Together', 'Single', 'Divorced', 'Widow', 'Alone', 'Absurd', 'YOLO']
MARITAL_WEIGHTS = [0.386, 0.258, 0.214, 0.104, 0.034, 0.002, 0.001, 0.001]
SPEND_SPECS = [
    ('MntWines', 300), ('MntFruits', 26), ('MntMeatProducts', 166),
    ('MntFishProducts', 37), ('MntSweetProducts', 27), ('MntGoldProds', 44),
]

# Every dirty-data rule gets at least one hit
DEFECTS = [
    'null_income', 'low_income', 'absurd_marital', 'yolo_marital', 'basic_education', 'year_1900', 'zero_id',
]


def generate_marketing_frame(n_rows: int = 200, seed: int = 42) -> pd.DataFrame:
    """Synthetic customers shaped like the raw marketing campaign export.

    Dates are written day-first (``dd-mm-yyyy``) under ``Dt_Customer`` as in the
    original file. When ``n_rows`` allows it, one row per entry in ``DEFECTS`` is
    corrupted so each cleaning rule has something to remove or rewrite.
    """
    rng = np.random.default_rng(seed)
    ids = rng.choice(np.arange(1, max(n_rows * 5, 10)), size=n_rows, replace=False)
    enrolled = pd.Timestamp('2012-07-30') + pd.to_timedelta(rng.integers(0, 700, n_rows), unit='D')

    df = pd.DataFrame({
        'ID': ids,
        'Year_Birth': rng.integers(1940, 1997, n_rows),
        'Education': rng.choice(EDUCATION_LEVELS, size=n_rows, p=EDUCATION_WEIGHTS),
        'Marital_Status': rng.choice(MARITAL_STATUSES, size=n_rows, p=MARITAL_WEIGHTS),
        'Income': np.round(np.clip(rng.normal(52000, 21000, n_rows), 12000, 160000)),
        'Kidhome': rng.integers(0, 3, n_rows),
        'Teenhome': rng.integers(0, 3, n_rows),
        'Dt_Customer': enrolled.strftime('%d-%m-%Y'),
        'Recency': rng.integers(0, 100, n_rows),
    })
    for col, mean in SPEND_SPECS:
        df[col] = rng.poisson(mean, n_rows)
    for col, high in [('NumDealsPurchases', 16), ('NumWebPurchases', 28), ('NumCatalogPurchases', 29),
                      ('NumStorePurchases', 14), ('NumWebVisitsMonth', 21)]:
        df[col] = rng.integers(0, high, n_rows)
    for col in ['AcceptedCmp3', 'AcceptedCmp4', 'AcceptedCmp5', 'AcceptedCmp1', 'AcceptedCmp2',
                'Complain', 'Response']:
        df[col] = (rng.random(n_rows) < 0.07).astype(int)
    df['Z_CostContact'] = 3
    df['Z_Revenue'] = 11

    if n_rows >= len(DEFECTS):
        rows = rng.choice(n_rows, size=len(DEFECTS), replace=False)
        for defect, row in zip(DEFECTS, rows):
            _inject_defect(df, int(row), defect)
    return df[RAW_COLUMNS]


def _inject_defect(df: pd.DataFrame, row: int, defect: str) -> None:
    if defect == 'null_income':
        df.loc[row, 'Income'] = np.nan
    elif defect == 'low_income':
        df.loc[row, 'Income'] = 1730.0
    elif defect == 'absurd_marital':
        df.loc[row, 'Marital_Status'] = 'Absurd'
    elif defect == 'yolo_marital':
        df.loc[row, 'Marital_Status'] = 'YOLO'
    elif defect == 'basic_education':
        df.loc[row, 'Education'] = 'Basic'
    elif defect == 'year_1900':
        df.loc[row, 'Dt_Customer'] = '01-01-1900'
    elif defect == 'zero_id':
        df.loc[row, 'ID'] = 0
    else:
        raise ValueError(f"Unknown defect {defect!r}")


def write_marketing_csv(df: pd.DataFrame, path: Path, sep: str = '\t') -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, sep=sep, index=False)
    return path
