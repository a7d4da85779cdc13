"""
Synthetic marketing campaign data

Usage:
  python scripts/generate_marketing_sample.py --rows 500 --seed 42 --out raw_data/marketing_campaign.csv

Writes a tab-separated CSV in the raw export layout, including the dirty rows
the ETL is expected to remove or rewrite.
"""
from pathlib import Path
import argparse
import sys


def _ensure_root_on_path():
    cwd = Path.cwd().resolve()
    p = cwd
    for _ in range(10):
        if (p / 'supermarket_etl' / 'sample.py').exists():
            if str(p) not in sys.path:
                sys.path.insert(0, str(p))
            return p
        if p.parent == p:
            break
        p = p.parent
    return cwd

ROOT = _ensure_root_on_path()
from supermarket_etl import sample


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a synthetic marketing_campaign.csv")
    parser.add_argument("--rows", type=int, default=500)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out", type=Path, default=ROOT / 'raw_data' / 'marketing_campaign.csv')
    args = parser.parse_args(argv)

    df = sample.generate_marketing_frame(args.rows, seed=args.seed)
    path = sample.write_marketing_csv(df, args.out)
    print(f'Wrote {len(df)} rows to {path}')


if __name__ == '__main__':
    main()
