"""
Data Sinks — write generated tables to local files.

CSV files always carry a header row. JSON files hold an object keyed by
table name whose value is the array of row objects, with numbers and
booleans kept native.
"""

import json
import logging
import os
from abc import ABC, abstractmethod

import polars as pl

from fakeforge.errors import OutputError


logger = logging.getLogger(__name__)


class DataSink(ABC):
    """Abstract base class for data sinks."""

    extension = ""

    @abstractmethod
    def _write(self, path: str, df: pl.DataFrame, table_name: str):
        pass

    def write(self, path: str, df: pl.DataFrame, table_name: str = "data") -> str:
        """
        Write a DataFrame to `path`, creating parent directories.

        Returns the absolute path written.
        """
        path = os.path.abspath(os.path.expanduser(path))
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            self._write(path, df, table_name)
        except OSError as e:
            raise OutputError(f"error writing {path}: {e}") from e

        logger.debug("Wrote %d rows to %s", len(df), path)
        return path


class CsvSink(DataSink):
    """Header row plus one line per generated row."""

    extension = ".csv"

    def _write(self, path: str, df: pl.DataFrame, table_name: str):
        df.write_csv(path, include_header=True)


class JsonSink(DataSink):
    """`{table_name: [row, ...]}` with 2-space indentation."""

    extension = ".json"

    def _write(self, path: str, df: pl.DataFrame, table_name: str):
        with open(path, "w", encoding="utf-8") as f:
            json.dump({table_name: df.to_dicts()}, f, indent=2)
            f.write("\n")


def get_sink(file_format: str) -> DataSink:
    """Factory function to create a sink by format name."""
    if file_format == "csv":
        return CsvSink()
    elif file_format == "json":
        return JsonSink()
    else:
        raise ValueError(f"Unknown output format: {file_format}")
