from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from supermarket_etl.config import CleaningRules, PipelineConfig
from supermarket_etl.reports import build_report, export_csv, quote_identifier

logger = logging.getLogger("supermarket_etl.etl")


# ------------------------
# Parameters and constants
# ------------------------
DEFAULT_CSV_FILENAME = "marketing_campaign.csv"
RAW_DATE_COLUMN = 'Dt_Customer'

ID_COLUMN = 'ID'
INCOME_COLUMN = 'Income'
MARITAL_COLUMN = 'Marital_Status'
EDUCATION_COLUMN = 'Education'
DATE_COLUMN = 'Date'

PRIMARY_KEY_NAME = 'Customer_ID'


# ------------------------
# Extract
# ------------------------
def load_marketing_csv(csv_path: Path, sep: str = '\t') -> pd.DataFrame:
    path = Path(csv_path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"Expected marketing CSV at {path}")
    try:
        df = pd.read_csv(path, sep=sep)
    except Exception as e:
        raise RuntimeError(f"Failed to read CSV: {e}")

    df.columns = [str(c).strip() for c in df.columns]
    if RAW_DATE_COLUMN in df.columns and DATE_COLUMN not in df.columns:
        df = df.rename(columns={RAW_DATE_COLUMN: DATE_COLUMN})
    if DATE_COLUMN in df.columns:
        df[DATE_COLUMN] = normalize_dates(df[DATE_COLUMN])
    return df


def normalize_dates(values: pd.Series) -> pd.Series:
    """Parse day-first or ISO dates into ``YYYY-MM-DD`` text; unparseable values become null."""
    raw = values.astype(str).str.strip()
    parsed = pd.to_datetime(raw, format='%d-%m-%Y', errors='coerce')
    parsed = parsed.fillna(pd.to_datetime(raw, format='ISO8601', errors='coerce'))
    return parsed.dt.strftime('%Y-%m-%d')


def stage_raw(conn: sqlite3.Connection, df_raw: pd.DataFrame, table: str) -> None:
    df_raw.to_sql(table, conn, if_exists='replace', index=False)
    conn.commit()
    logger.info("Staged %d raw rows into %s", len(df_raw), table)


# ------------------------
# Inspector (read-only)
# ------------------------
def scan_table(conn: sqlite3.Connection, table: str) -> pd.DataFrame:
    return pd.read_sql(f'SELECT * FROM {quote_identifier(table)};', conn)


def describe_schema(conn: sqlite3.Connection, table: str) -> pd.DataFrame:
    sql = 'SELECT name, type, "notnull" FROM pragma_table_info(?) ORDER BY cid;'
    info = pd.read_sql(sql, conn, params=[table])
    if info.empty:
        raise LookupError(f"Table {table!r} does not exist")
    return pd.DataFrame({
        'COLUMN_NAME': info['name'],
        'DATA_TYPE': info['type'],
        'IS_NULLABLE': info['notnull'].map(lambda notnull: 'NO' if notnull else 'YES'),
    })


def find_duplicate_ids(conn: sqlite3.Connection, table: str, id_column: str = ID_COLUMN) -> pd.DataFrame:
    col = quote_identifier(id_column)
    sql = f'''
    SELECT {col}, COUNT(*) AS duplicate_count
    FROM {quote_identifier(table)}
    GROUP BY {col}
    HAVING COUNT(*) > 1;
    '''
    return pd.read_sql(sql, conn)


def rows_with_null_income(conn: sqlite3.Connection, table: str, income_column: str = INCOME_COLUMN) -> pd.DataFrame:
    sql = f'SELECT * FROM {quote_identifier(table)} WHERE {quote_identifier(income_column)} IS NULL;'
    return pd.read_sql(sql, conn)


def distinct_values(conn: sqlite3.Connection, table: str, column: str) -> pd.DataFrame:
    sql = f'SELECT DISTINCT {quote_identifier(column)} FROM {quote_identifier(table)};'
    return pd.read_sql(sql, conn)


def rows_with_enrollment_year(conn: sqlite3.Connection, table: str, year: int,
                              date_column: str = DATE_COLUMN) -> pd.DataFrame:
    sql = f'''
    SELECT *
    FROM {quote_identifier(table)}
    WHERE CAST(strftime('%Y', {quote_identifier(date_column)}) AS INTEGER) = ?;
    '''
    return pd.read_sql(sql, conn, params=[year])


@dataclass
class InspectionReport:
    row_count: int
    schema: pd.DataFrame
    duplicate_ids: pd.DataFrame
    null_income_rows: pd.DataFrame
    marital_values: pd.DataFrame
    invalid_year_rows: pd.DataFrame


def inspect_table(conn: sqlite3.Connection, table: str, rules: Optional[CleaningRules] = None) -> InspectionReport:
    rules = rules or CleaningRules()
    schema = describe_schema(conn, table)
    report = InspectionReport(
        row_count=len(scan_table(conn, table)),
        schema=schema,
        duplicate_ids=find_duplicate_ids(conn, table),
        null_income_rows=rows_with_null_income(conn, table),
        marital_values=distinct_values(conn, table, MARITAL_COLUMN),
        invalid_year_rows=rows_with_enrollment_year(conn, table, rules.invalid_year),
    )
    logger.info(
        "Inspected %s: %d rows, %d columns, %d duplicate ids, %d null incomes, %d rows dated %d",
        table, report.row_count, len(report.schema), len(report.duplicate_ids),
        len(report.null_income_rows), len(report.invalid_year_rows), rules.invalid_year,
    )
    return report


# ------------------------
# Cleaner
# ------------------------
def drop_null_income(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    # SQLite columns are dynamically typed, so text like '' or 'n/a' counts as missing
    income = pd.to_numeric(df[INCOME_COLUMN], errors='coerce')
    return df.loc[income.notna()]


def drop_low_income(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    # NaN compares False, so missing incomes are left to drop_null_income
    income = pd.to_numeric(df[INCOME_COLUMN], errors='coerce')
    return df.loc[~(income < rules.income_floor)]


def drop_invalid_marital_status(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    return df.loc[~df[MARITAL_COLUMN].isin(list(rules.invalid_marital_values))]


def remap_education(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    out = df.copy()
    out[EDUCATION_COLUMN] = out[EDUCATION_COLUMN].replace(rules.education_remap)
    return out


def drop_invalid_enrollment_year(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    years = pd.to_datetime(df[DATE_COLUMN], format='ISO8601', errors='coerce').dt.year
    return df.loc[years != rules.invalid_year]


def drop_invalid_id(df: pd.DataFrame, rules: CleaningRules) -> pd.DataFrame:
    return df.loc[df[ID_COLUMN] != rules.invalid_id]


@dataclass(frozen=True)
class CleaningStep:
    name: str
    apply: Callable[[pd.DataFrame, CleaningRules], pd.DataFrame]


CLEANING_STEPS: List[CleaningStep] = [
    CleaningStep('null_income', drop_null_income),
    CleaningStep('low_income', drop_low_income),
    CleaningStep('invalid_marital_status', drop_invalid_marital_status),
    CleaningStep('education_remap', remap_education),
    CleaningStep('invalid_enrollment_year', drop_invalid_enrollment_year),
    CleaningStep('invalid_id', drop_invalid_id),
]


def clean_records(
    df: pd.DataFrame,
    rules: Optional[CleaningRules] = None,
    steps: Iterable[CleaningStep] = CLEANING_STEPS,
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Run each cleaning step in order and count the rows it removed.

    The input frame is left untouched; a new frame with a fresh index is returned.
    """
    rules = rules or CleaningRules()
    removed: Dict[str, int] = {}
    current = df
    for step in steps:
        before = len(current)
        current = step.apply(current, rules)
        removed[step.name] = before - len(current)
        logger.info("Cleaning step %-24s removed %d rows", step.name, removed[step.name])
    return current.reset_index(drop=True), removed


# ------------------------
# Schema normalizer
# ------------------------
def _column_lookup(df: pd.DataFrame) -> Dict[str, str]:
    return {str(c).lower(): c for c in df.columns}


def drop_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    lookup = _column_lookup(df)
    columns = list(columns)
    missing = [c for c in columns if c.lower() not in lookup]
    if missing:
        raise KeyError(f"Cannot drop missing column(s): {missing}")
    return df.drop(columns=[lookup[c.lower()] for c in columns])


def rename_columns(df: pd.DataFrame, mapping: Mapping[str, str]) -> pd.DataFrame:
    lookup = _column_lookup(df)
    resolved: Dict[str, str] = {}
    for old, new in mapping.items():
        if old.lower() not in lookup:
            raise KeyError(f"Cannot rename missing column {old!r}")
        resolved[lookup[old.lower()]] = new

    kept = {str(c).lower() for c in df.columns if c not in resolved}
    seen: set = set()
    for new in resolved.values():
        if new.lower() in kept or new.lower() in seen:
            raise ValueError(f"Rename target {new!r} collides with an existing column")
        seen.add(new.lower())
    return df.rename(columns=resolved)


def _sqlite_type(series: pd.Series) -> str:
    if pd.api.types.is_bool_dtype(series) or pd.api.types.is_integer_dtype(series):
        return 'INTEGER'
    if pd.api.types.is_float_dtype(series):
        return 'REAL'
    return 'TEXT'


def build_constrained_ddl(table: str, df: pd.DataFrame, id_column: str = ID_COLUMN,
                          constraint_name: str = PRIMARY_KEY_NAME) -> str:
    if id_column not in df.columns:
        raise KeyError(f"Identifier column {id_column!r} not in frame")
    lines = []
    for col in df.columns:
        if col == id_column:
            # INT rather than INTEGER keeps the key from becoming a rowid alias that fills in NULLs
            lines.append(f'{quote_identifier(col)} INT NOT NULL')
        else:
            lines.append(f'{quote_identifier(col)} {_sqlite_type(df[col])}')
    lines.append(f'CONSTRAINT {quote_identifier(constraint_name)} PRIMARY KEY ({quote_identifier(id_column)})')
    body = ',\n        '.join(lines)
    return f'CREATE TABLE {quote_identifier(table)} (\n        {body}\n    );'


def enforce_integrity(conn: sqlite3.Connection, table: str, df: pd.DataFrame,
                      id_column: str = ID_COLUMN) -> None:
    """Rebuild ``table`` from ``df`` with a NOT NULL primary key on ``id_column``.

    Rows go into a constrained copy first; the engine raises ``sqlite3.IntegrityError``
    on null or duplicate identifiers, the copy is dropped, and the original table is left as it was.
    """
    rebuilt = f'{table}__constrained'
    cur = conn.cursor()
    cur.execute(f'DROP TABLE IF EXISTS {quote_identifier(rebuilt)};')
    cur.execute(build_constrained_ddl(rebuilt, df, id_column))
    conn.commit()

    columns = ', '.join(quote_identifier(c) for c in df.columns)
    placeholders = ', '.join('?' for _ in df.columns)
    # object dtype turns numpy scalars into Python ones sqlite3 can bind; NaN becomes NULL
    rows = df.astype(object).where(df.notna(), None).values.tolist()
    try:
        cur.executemany(f'INSERT INTO {quote_identifier(rebuilt)} ({columns}) VALUES ({placeholders});', rows)
    except sqlite3.Error:
        conn.rollback()
        cur.execute(f'DROP TABLE IF EXISTS {quote_identifier(rebuilt)};')
        conn.commit()
        raise

    cur.execute(f'DROP TABLE IF EXISTS {quote_identifier(table)};')
    cur.execute(f'ALTER TABLE {quote_identifier(rebuilt)} RENAME TO {quote_identifier(table)};')
    conn.commit()
    logger.info("Enforced NOT NULL primary key on %s.%s (%d rows)", table, id_column, len(df))


# ------------------------
# Orchestrator
# ------------------------

def run_etl(config: PipelineConfig) -> Dict[str, int]:
    rules = config.rules
    db_path = Path(config.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        if config.csv_path is not None:
            stage_raw(conn, load_marketing_csv(config.csv_path), config.table)

        inspection = inspect_table(conn, config.table, rules)
        df_raw = scan_table(conn, config.table)

        df = drop_columns(df_raw, rules.dropped_columns)
        df_clean, removed = clean_records(df, rules)
        df_clean = rename_columns(df_clean, rules.column_renames)

        enforce_integrity(conn, config.table, df_clean)
        schema = describe_schema(conn, config.table)
        logger.info("Verified schema:\n%s", schema.to_string(index=False))

        report = build_report(conn, config.table, config.sample_size)
        if config.export_path is not None:
            export_csv(report['final_check'], config.export_path)
    finally:
        conn.close()

    counts = {
        'raw': len(df_raw),
        'cleaned': len(df_clean),
        'columns': len(schema),
        'duplicate_ids': len(inspection.duplicate_ids),
    }
    counts.update({f'removed_{name}': n for name, n in removed.items()})
    logger.info("ETL complete: %s", counts)
    return counts
