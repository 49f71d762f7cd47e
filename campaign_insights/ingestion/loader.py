"""Mapping of raw store records onto MetricRow models."""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import polars as pl
import yaml

from ..exceptions import ColumnMappingError, SchemaLoadError
from ..models.metric_row import MetricRow
from .cleaner import apply_cleaning

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent.parent / "config" / "schema_registry.yaml"


class RecordLoader:
    """Convert raw records (dicts or a Polars DataFrame) into MetricRows.

    Usage:
        loader = RecordLoader()
        rows = loader.load(records)
    """

    def __init__(self, schema_path: Path | None = None):
        self.schema_path = schema_path or DEFAULT_SCHEMA_PATH
        self.schema = self._load_schema(self.schema_path)

    def _load_schema(self, path: Path) -> dict[str, Any]:
        """Load schema configuration from YAML."""
        try:
            with open(path) as f:
                return yaml.safe_load(f)
        except Exception as e:
            raise SchemaLoadError(f"Failed to load schema from {path}: {e}") from e

    def load(
        self,
        records: Iterable[Mapping[str, Any]] | pl.DataFrame,
        schema_name: str = "campaign_rows",
    ) -> list[MetricRow]:
        """Map raw records to MetricRows.

        Args:
            records: Raw records from the record store, or a DataFrame of them
            schema_name: Key in schema registry (default: campaign_rows)

        Returns:
            One MetricRow per mapping record; non-mapping entries are skipped.

        Raises:
            SchemaLoadError: If schema_name is not in the registry
            ColumnMappingError: If a DataFrame lacks a required column
            TypeError: If records is not iterable
        """
        schema = self.schema.get(schema_name) if isinstance(self.schema, dict) else None
        if schema is None:
            raise SchemaLoadError(f"Unknown schema: {schema_name}")

        if isinstance(records, pl.DataFrame):
            records = self._clean_frame(records, schema).to_dicts()

        rows: list[MetricRow] = []
        skipped = 0
        for record in records:
            if not isinstance(record, Mapping):
                skipped += 1
                continue
            rows.append(self._to_row(record, schema))

        if skipped:
            logger.warning("Skipped %d non-mapping records", skipped)
        return rows

    def _clean_frame(self, df: pl.DataFrame, schema: dict[str, Any]) -> pl.DataFrame:
        """Check required columns, then clean numeric columns in place."""
        column_map: dict[str, str] = schema["column_map"]
        available = set(df.columns)

        missing = [
            column_map.get(name, name)
            for name in schema.get("required_columns", [])
            if column_map.get(name, name) not in available and name not in available
        ]
        if missing:
            raise ColumnMappingError(missing, list(df.columns))

        numeric_raw = [column_map.get(name, name) for name in schema.get("numeric_columns", [])]
        return apply_cleaning(df, numeric_raw)

    def _to_row(self, record: Mapping[str, Any], schema: dict[str, Any]) -> MetricRow:
        """Rename raw fields to internal names and build the row.

        The internal name is accepted as well as the raw name, so already
        normalized records load unchanged.
        """
        values: dict[str, Any] = {}
        for internal, raw in schema["column_map"].items():
            if raw in record:
                values[internal] = record[raw]
            elif internal in record:
                values[internal] = record[internal]

        tags: dict[str, Any] = {}
        for tag_key, raw in schema.get("tag_columns", {}).items():
            if raw in record:
                tags[tag_key] = record[raw]
            elif tag_key in record:
                tags[tag_key] = record[tag_key]
        if isinstance(record.get("dimension_tags"), Mapping):
            tags.update(record["dimension_tags"])

        return MetricRow(**values, dimension_tags=tags)
