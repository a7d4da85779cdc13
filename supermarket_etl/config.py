"""Data-quality rules and run settings for the marketing ETL."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple


DEFAULT_DROPPED_COLUMNS: Tuple[str, ...] = (
    'AcceptedCmp1', 'AcceptedCmp2', 'AcceptedCmp3', 'AcceptedCmp4', 'AcceptedCmp5',
    'Complain', 'Z_CostContact', 'Z_Revenue', 'Response',
)

DEFAULT_COLUMN_RENAMES: Dict[str, str] = {
    'MntWines': 'Wines_Spent',
    'MntFruits': 'Fruits_Spent',
    'MntMeatProducts': 'Meatproducts_spent',
    'MntFishProducts': 'Fishproducts_spent',
    'MntSweetProducts': 'Sweetproducts_spent',
    'MntGoldProds': 'Goldproducts_spent',
}


@dataclass
class CleaningRules:
    """Thresholds and sentinels that decide which records survive cleaning."""

    income_floor: float = 10000
    invalid_year: int = 1900
    invalid_marital_values: Tuple[str, ...] = ('Absurd',)
    education_remap: Dict[str, str] = field(default_factory=lambda: {'Basic': 'Bachelors'})
    invalid_id: int = 0
    dropped_columns: Tuple[str, ...] = DEFAULT_DROPPED_COLUMNS
    column_renames: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLUMN_RENAMES))


@dataclass
class PipelineConfig:
    """Where the table lives and what to do around the cleaning pass."""

    db_path: Path = field(default_factory=lambda: Path('data_warehouse') / 'marketing.db')
    table: str = 'marketing'
    csv_path: Optional[Path] = None
    export_path: Optional[Path] = None
    sample_size: int = 5
    log_level: str = 'INFO'
    rules: CleaningRules = field(default_factory=CleaningRules)

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Create config from environment variables."""
        rules = CleaningRules(
            income_floor=float(os.getenv('INCOME_FLOOR', '10000')),
            invalid_year=int(os.getenv('INVALID_YEAR', '1900')),
        )
        csv_path = os.getenv('MARKETING_CSV')
        export_path = os.getenv('MARKETING_EXPORT')
        return cls(
            db_path=Path(os.getenv('MARKETING_DB', str(Path('data_warehouse') / 'marketing.db'))),
            table=os.getenv('MARKETING_TABLE', 'marketing'),
            csv_path=Path(csv_path) if csv_path else None,
            export_path=Path(export_path) if export_path else None,
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            rules=rules,
        )
