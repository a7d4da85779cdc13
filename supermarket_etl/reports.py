"""
Verification queries run against the cleaned marketing table in SQLite.

Covers the final-analysis step: distinct education levels, a small sample,
chronological ordering by birth year, and two windowed rankings
(row number per education level by recency, rank per marital status by birth year).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict
import sqlite3
import pandas as pd

logger = logging.getLogger("supermarket_etl.reports")


def quote_identifier(name: str) -> str:
    """Double-quote a table or column name for SQLite."""
    return '"' + str(name).replace('"', '""') + '"'


def distinct_education(conn: sqlite3.Connection, table: str = 'marketing') -> pd.DataFrame:
    """Distinct Education values left after standardization."""
    sql = f'SELECT DISTINCT Education FROM {quote_identifier(table)};'
    return pd.read_sql(sql, conn)


def sample_rows(conn: sqlite3.Connection, table: str = 'marketing', n: int = 5) -> pd.DataFrame:
    """First ``n`` rows, a quick look at the result."""
    sql = f'SELECT * FROM {quote_identifier(table)} LIMIT ?;'
    return pd.read_sql(sql, conn, params=[n])


def order_by_birth_year(conn: sqlite3.Connection, table: str = 'marketing') -> pd.DataFrame:
    """All customers sorted by Year_Birth, oldest first."""
    sql = f'''
    SELECT *
    FROM {quote_identifier(table)}
    ORDER BY Year_Birth ASC;
    '''
    return pd.read_sql(sql, conn)


def most_recent_by_education(conn: sqlite3.Connection, table: str = 'marketing') -> pd.DataFrame:
    """Row number within each Education level ordered by Recency.

    ROW_NUMBER never repeats inside a partition, so customers with equal Recency
    still get distinct consecutive numbers; which of them comes first is up to SQLite.
    """
    sql = f'''
    SELECT *,
           ROW_NUMBER() OVER (PARTITION BY Education ORDER BY Recency) AS "The Most Recent"
    FROM {quote_identifier(table)};
    '''
    return pd.read_sql(sql, conn)


def birth_year_rank_by_marital_status(conn: sqlite3.Connection, table: str = 'marketing') -> pd.DataFrame:
    """RANK of Year_Birth within each Marital_Status group; ties share a rank and leave a gap."""
    sql = f'''
    SELECT *,
           RANK() OVER (PARTITION BY Marital_Status ORDER BY Year_Birth) AS "BirthYr Order"
    FROM {quote_identifier(table)};
    '''
    return pd.read_sql(sql, conn)


def final_check(conn: sqlite3.Connection, table: str = 'marketing') -> pd.DataFrame:
    return pd.read_sql(f'SELECT * FROM {quote_identifier(table)};', conn)


def export_csv(df: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info("Exported %d rows to %s", len(df), path)
    return path


def build_report(conn: sqlite3.Connection, table: str = 'marketing', sample_size: int = 5) -> Dict[str, pd.DataFrame]:
    report = {
        'distinct_education': distinct_education(conn, table),
        'sample': sample_rows(conn, table, sample_size),
        'by_birth_year': order_by_birth_year(conn, table),
        'most_recent_by_education': most_recent_by_education(conn, table),
        'birth_year_rank': birth_year_rank_by_marital_status(conn, table),
        'final_check': final_check(conn, table),
    }
    logger.info("Education levels after cleaning: %s", report['distinct_education']['Education'].tolist())
    logger.info("Final table: %d rows x %d columns", *report['final_check'].shape)
    return report
