"""
Supermarket marketing ETL

Usage:
  python scripts/etl_marketing.py [--csv raw_data/marketing_campaign.csv] [--db data_warehouse/marketing.db]

Stages the raw CSV (if given) into SQLite, cleans the marketing table in place,
enforces the ID primary key, and prints the resulting counts.
"""
from pathlib import Path
import argparse
import sys
import logging


def find_project_root() -> Path:
    cwd = Path.cwd().resolve()
    markers = ["supermarket_etl", "raw_data", ".git", "data_warehouse"]
    p = cwd
    for _ in range(10):
        if any((p / m).exists() for m in markers):
            return p
        if p.parent == p:
            break
        p = p.parent
    return cwd


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clean the supermarket marketing table")
    parser.add_argument("--db", type=Path, help="SQLite database holding the table")
    parser.add_argument("--table", help="Table name (default: marketing)")
    parser.add_argument("--csv", type=Path, help="Raw tab-separated CSV to stage before cleaning")
    parser.add_argument("--export", type=Path, help="Write the cleaned table to this CSV")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    root = find_project_root()
    # Ensure project root is on sys.path for the supermarket_etl package
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    from supermarket_etl.config import PipelineConfig  # import after sys.path update
    from supermarket_etl.etl import DEFAULT_CSV_FILENAME, run_etl

    config = PipelineConfig.from_env()
    if args.db:
        config.db_path = args.db
    elif not config.db_path.is_absolute():
        config.db_path = root / config.db_path
    if args.table:
        config.table = args.table
    if args.csv:
        config.csv_path = args.csv
    elif config.csv_path is None and not config.db_path.exists():
        config.csv_path = root / 'raw_data' / DEFAULT_CSV_FILENAME
    if args.export:
        config.export_path = args.export
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO),
                        format='[%(levelname)s] %(message)s')

    print('ROOT:', root)
    print('CSV:', config.csv_path)
    print('DB:', config.db_path)

    counts = run_etl(config)
    print('ETL complete. Counts:', counts)


if __name__ == '__main__':
    main()
