"""Tests for cleaning rules and pipeline configuration."""

from pathlib import Path

import pytest

from supermarket_etl.config import (
    DEFAULT_COLUMN_RENAMES,
    DEFAULT_DROPPED_COLUMNS,
    CleaningRules,
    PipelineConfig,
)


class TestCleaningRules:
    """Tests for CleaningRules."""

    def test_default_values(self) -> None:
        rules = CleaningRules()

        assert rules.income_floor == 10000
        assert rules.invalid_year == 1900
        assert rules.invalid_marital_values == ('Absurd',)
        assert rules.education_remap == {'Basic': 'Bachelors'}
        assert rules.invalid_id == 0
        assert rules.dropped_columns == DEFAULT_DROPPED_COLUMNS
        assert rules.column_renames == DEFAULT_COLUMN_RENAMES

    def test_renames_are_independent_copies(self) -> None:
        first = CleaningRules()
        first.column_renames['MntWines'] = 'Wine'
        assert CleaningRules().column_renames['MntWines'] == 'Wines_Spent'

    def test_six_renames_nine_drops(self) -> None:
        assert len(DEFAULT_COLUMN_RENAMES) == 6
        assert len(DEFAULT_DROPPED_COLUMNS) == 9


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_default_values(self) -> None:
        config = PipelineConfig()

        assert config.db_path == Path('data_warehouse') / 'marketing.db'
        assert config.table == 'marketing'
        assert config.csv_path is None
        assert config.export_path is None
        assert config.sample_size == 5
        assert config.log_level == 'INFO'
        assert isinstance(config.rules, CleaningRules)

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ['MARKETING_DB', 'MARKETING_TABLE', 'MARKETING_CSV', 'MARKETING_EXPORT',
                    'INCOME_FLOOR', 'INVALID_YEAR', 'LOG_LEVEL']:
            monkeypatch.delenv(var, raising=False)

        config = PipelineConfig.from_env()

        assert config.table == 'marketing'
        assert config.csv_path is None
        assert config.rules.income_floor == 10000
        assert config.rules.invalid_year == 1900

    def test_from_env_custom(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('MARKETING_DB', '/tmp/m.db')
        monkeypatch.setenv('MARKETING_TABLE', 'customers')
        monkeypatch.setenv('MARKETING_CSV', '/tmp/raw.csv')
        monkeypatch.setenv('MARKETING_EXPORT', '/tmp/clean.csv')
        monkeypatch.setenv('INCOME_FLOOR', '15000')
        monkeypatch.setenv('INVALID_YEAR', '1899')
        monkeypatch.setenv('LOG_LEVEL', 'DEBUG')

        config = PipelineConfig.from_env()

        assert config.db_path == Path('/tmp/m.db')
        assert config.table == 'customers'
        assert config.csv_path == Path('/tmp/raw.csv')
        assert config.export_path == Path('/tmp/clean.csv')
        assert config.rules.income_floor == 15000.0
        assert config.rules.invalid_year == 1899
        assert config.log_level == 'DEBUG'
