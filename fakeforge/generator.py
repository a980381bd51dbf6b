"""
Core Synthetic Data Generation Engine.

Drives table and row iteration for a parsed Schema, picks CSV or JSON
output, and writes one file per table (or a single file for flat,
single-table schemas).
"""

import logging
import os

import polars as pl
from faker import Faker

from fakeforge.classifier import FieldClassifier, NullClassifier, get_classifier
from fakeforge.config import GenerationConfig
from fakeforge.errors import ConfigError, SchemaError
from fakeforge.inference import FieldTypeInference
from fakeforge.log import timed
from fakeforge.relational import RelationalEngine
from fakeforge.schema import Schema, Table
from fakeforge.sinks import get_sink


logger = logging.getLogger(__name__)

SINGLE_TABLE_NAME = "data"
DEFAULT_OUTPUT = "output"


class ForgeEngine:
    """
    Generation orchestrator.

    Owns the Faker instance, the inference engine (with its cache) and
    the relational engine for one run. A classifier can be injected;
    otherwise one is built from the config's AI settings.
    """

    def __init__(self, config: GenerationConfig = None, classifier: FieldClassifier = None):
        self.config = (config or GenerationConfig()).validate()
        self.fake = Faker()
        if self.config.seed is not None:
            self.fake.seed_instance(self.config.seed)

        if classifier is None:
            classifier = get_classifier(self.config.use_ai, self.config.ai_model, self.config.ai_url)
        self.classifier = classifier

        self.inference_cache = {} if self.config.cache_inference else None
        self.inference = FieldTypeInference(
            fake=self.fake,
            cache=self.inference_cache,
            classifier=None if isinstance(classifier, NullClassifier) else classifier,
            confidence_threshold=self.config.ai_confidence_threshold,
        )
        self.relational = RelationalEngine(self.inference, self.config)

    def generate_records(self, fields: list, count: int, table_name: str = SINGLE_TABLE_NAME) -> pl.DataFrame:
        """Generate a DataFrame with `count` rows, columns in field order."""
        return self.relational.generate_table(Table(table_name, list(fields)), count)

    def generate_tables(self, schema: Schema, num_rows: int) -> dict:
        """Generate every table of `schema`; flat schemas yield {"data": df}."""
        if schema.is_multi_table:
            return self.relational.generate_all(schema.tables, num_rows)
        if schema.fields:
            return {SINGLE_TABLE_NAME: self.generate_records(schema.fields, num_rows)}
        raise SchemaError("schema contains no tables or fields")

    def resolve_format(self, schema: Schema, file_format: str = None) -> str:
        """Explicit format wins; otherwise JSON schemas give json, SQL gives csv."""
        fmt = file_format or self.config.output_format
        if fmt:
            fmt = fmt.lower()
            if fmt not in ("csv", "json"):
                raise ConfigError(f"unsupported output format '{fmt}' (use csv or json)")
            return fmt
        return "json" if schema.source_format == "json" else "csv"

    def generate_files(self, schema: Schema, num_rows: int = None, output: str = "",
                       file_format: str = None) -> list:
        """
        Generate data for `schema` and write it out.

        Multi-table schemas write `<table>.<ext>` into the directory `output`.
        Single-table schemas write one file at `output`, with its extension
        adjusted to the chosen format.

        Returns the list of written paths.
        """
        num_rows = self.config.num_rows if num_rows is None else num_rows
        fmt = self.resolve_format(schema, file_format)
        sink = get_sink(fmt)

        with timed(f"generating {num_rows} rows per table"):
            tables = self.generate_tables(schema, num_rows)

        written = []
        if schema.is_multi_table:
            out_dir = output_directory(output)
            for name, df in tables.items():
                written.append(sink.write(os.path.join(out_dir, f"{name}{sink.extension}"), df, name))
        else:
            path = single_output_path(output, sink.extension)
            written.append(sink.write(path, tables[SINGLE_TABLE_NAME], SINGLE_TABLE_NAME))

        logger.info("Wrote %d file(s) as %s", len(written), fmt)
        return written


def output_directory(output: str) -> str:
    """Directory for per-table files; a path with an extension loses it."""
    if not output:
        return DEFAULT_OUTPUT
    root, ext = os.path.splitext(output)
    return root if ext else output


def single_output_path(output: str, extension: str) -> str:
    """File path for a single-table schema, extension matched to the format."""
    if not output:
        return DEFAULT_OUTPUT + extension
    root, ext = os.path.splitext(output)
    if ext.lower() == extension:
        return output
    if ext.lower() in (".csv", ".json"):
        return root + extension
    return output + extension
