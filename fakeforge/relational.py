"""
Multi-Table Relational Integrity Engine.

Orders table generation with a DAG (referenced tables before the tables
that reference them) and fills foreign-key columns by sampling values
already generated for the referenced `table.field`.

Tables caught in a reference cycle are generated last; any reference
that still has no values falls back to ordinary type-based generation.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import polars as pl

from fakeforge.config import GenerationConfig
from fakeforge.inference import FieldTypeInference
from fakeforge.log import timed


logger = logging.getLogger(__name__)

# Attempts per requested distinct value before giving up on UniqueCount
UNIQUE_RETRY_FACTOR = 100


def pool_key(table: str, field: str) -> str:
    return f"{table}.{field}".lower()


class RelationalEngine:
    """
    Generates row sets for a list of tables with FK integrity.

    Usage:
        engine = RelationalEngine(FieldTypeInference())
        results = engine.generate_all(schema.tables, 100)
    """

    def __init__(self, inference: FieldTypeInference, config: GenerationConfig = None):
        self.inference = inference
        self.config = config or GenerationConfig()
        self.fk_pools = {}  # "table.field" (lowercased) -> list of generated values
        self._lock = threading.Lock()

    def build_dag(self, tables: list) -> list:
        """
        Group tables into generation levels (parents first).

        A table lands in the first level after every table it references.
        References to unknown tables and self-references do not affect
        ordering. Tables left in a cycle form the final level, in listed order.
        """
        known = {t.name.lower() for t in tables}
        deps = {}
        for table in tables:
            deps[table.name] = {
                f.reference.table.lower()
                for f in table.fields
                if f.reference is not None
                and f.reference.table.lower() in known
                and f.reference.table.lower() != table.name.lower()
            }

        levels = []
        done = set()
        remaining = list(tables)

        while remaining:
            level = [t for t in remaining if deps[t.name] <= done]
            if not level:
                names = ", ".join(t.name for t in remaining)
                logger.warning(
                    "Circular references between tables: %s. "
                    "Unresolved foreign keys will use generated values.", names,
                )
                levels.append(remaining)
                break
            levels.append(level)
            done |= {t.name.lower() for t in level}
            remaining = [t for t in remaining if t.name.lower() not in done]

        return levels

    def reference_values(self, table: str, field: str) -> list:
        """Snapshot of recorded values for `table.field` (empty if none)."""
        with self._lock:
            return list(self.fk_pools.get(pool_key(table, field), []))

    def record(self, table_name: str, df: pl.DataFrame):
        """Register every column of a generated table as a reference pool."""
        with self._lock:
            for col in df.columns:
                self.fk_pools[pool_key(table_name, col)] = df[col].to_list()

    def _unique_values(self, tag: str, field, count: int) -> list:
        values = []
        seen = set()
        budget = count * UNIQUE_RETRY_FACTOR
        attempts = 0
        while len(values) < count and attempts < budget:
            attempts += 1
            value = self.inference.generate(tag, field)
            if value in seen:
                continue
            seen.add(value)
            values.append(value)

        if len(values) < count:
            logger.warning(
                "Field '%s' produced only %d of %d requested distinct values",
                field.name, len(values), count,
            )
        return values

    def _value_source(self, table_name: str, field, num_rows: int):
        """
        Return a callable mapping row index -> value for one field.

        Foreign keys win over UniqueCount; both win over plain generation.
        """
        ref = field.reference
        if ref is not None:
            pool = self.reference_values(ref.table, ref.field)
            if pool:
                fake = self.inference.fake
                return lambda i: fake.random_element(pool)
            logger.debug(
                "No values recorded for %s; generating %s.%s from its type",
                ref.key, table_name, field.name,
            )

        tag = self.inference.infer(field, table_name)
        logger.debug("%s.%s -> %s", table_name, field.name, tag)

        unique_count = field.unique_count
        if unique_count is not None and unique_count > 0:
            values = self._unique_values(tag, field, unique_count)
            return lambda i: values[i % len(values)]

        return lambda i: self.inference.generate(tag, field)

    def generate_table(self, table, num_rows: int) -> pl.DataFrame:
        """Generate one table's rows and record them for later references."""
        with timed(f"table {table.name}"):
            sources = [(f.name, self._value_source(table.name, f, num_rows)) for f in table.fields]
            columns = {name: [] for name, _ in sources}

            batch_size = max(1, self.config.batch_size)
            for start in range(0, num_rows, batch_size):
                end = min(start + batch_size, num_rows)
                for i in range(start, end):
                    for name, source in sources:
                        columns[name].append(source(i))
                logger.debug("%s: %d/%d rows", table.name, end, num_rows)

            df = pl.DataFrame(columns, strict=False)

        self.record(table.name, df)
        return df

    def generate_all(self, tables: list, num_rows: int) -> dict:
        """
        Generate all tables in DAG order with FK integrity.

        Returns:
            dict mapping table name -> pl.DataFrame, in listed table order
        """
        results = {}
        for depth, level in enumerate(self.build_dag(tables)):
            logger.debug("Generating level %d: %s", depth, ", ".join(t.name for t in level))
            if self.config.parallel and len(level) > 1:
                with ThreadPoolExecutor(max_workers=self.config.worker_count) as executor:
                    futures = [(t.name, executor.submit(self.generate_table, t, num_rows)) for t in level]
                    for name, future in futures:
                        results[name] = future.result()
            else:
                for table in level:
                    results[table.name] = self.generate_table(table, num_rows)

        return {t.name: results[t.name] for t in tables}
