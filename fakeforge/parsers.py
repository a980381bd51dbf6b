"""
Schema parsers for JSON field lists and SQL CREATE TABLE scripts.

The SQL reader is line oriented: one field definition per line, a table
closes on the first line containing `);`. Lines it cannot interpret are
skipped rather than treated as errors.
"""

import json
import logging
import os
import re

from fakeforge.errors import ConfigError, SchemaParseError
from fakeforge.schema import Constraint, Field, Reference, Relationship, Schema, Table, validate_schema


logger = logging.getLogger(__name__)

CREATE_TABLE_RE = re.compile(
    r"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?[`\"\[]?(\w+)[`\"\]]?",
    re.IGNORECASE,
)
CHECK_RE = re.compile(
    r"CHECK\s*\(\s*(\w+)\s*>=\s*(-?\d+)\s*AND\s*(\w+)\s*<=\s*(-?\d+)\s*\)",
    re.IGNORECASE,
)
REFERENCES_RE = re.compile(r"REFERENCES\s+[`\"]?(\w+)[`\"]?\s*\(\s*[`\"]?(\w+)[`\"]?\s*\)", re.IGNORECASE)

# Table-level clauses that are not column definitions
TABLE_CLAUSE_RE = re.compile(
    r"^(PRIMARY\s+KEY|FOREIGN\s+KEY|CONSTRAINT\s|CHECK\s*\(|(UNIQUE|INDEX|KEY)\s*(\w+\s*)?\()",
    re.IGNORECASE,
)


def map_sql_type(sql_type: str) -> str:
    """Normalize a SQL column type to the internal type vocabulary."""
    sql_type = sql_type.upper()

    if "SERIAL" in sql_type or "INT" in sql_type:
        return "int"
    if "VARCHAR" in sql_type or "TEXT" in sql_type or "CHAR" in sql_type:
        return "string"
    if any(t in sql_type for t in ("DECIMAL", "NUMERIC", "FLOAT", "DOUBLE", "REAL")):
        return "float"
    if "BOOL" in sql_type:
        return "boolean"
    if "TIMESTAMP" in sql_type or "DATETIME" in sql_type:
        return "datetime"
    if "DATE" in sql_type:
        return "date"
    if "UUID" in sql_type:
        return "uuid"
    return "string"


def parse_json_schema(path: str) -> Schema:
    """Read a JSON schema document."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"error parsing JSON schema '{path}': {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read schema file '{path}': {e}") from e

    schema = Schema.from_dict(data)
    schema.source_format = "json"
    return schema


def parse_field_definition(line: str, table_name: str, relationships: list):
    """
    Parse one column definition line. Returns None for lines that are
    not column definitions.
    """
    line = line.strip().rstrip(",").strip()
    if not line or TABLE_CLAUSE_RE.match(line):
        return None
    upper = line.upper()

    parts = line.split()
    if len(parts) < 2:
        return None

    name = parts[0].strip('`"[]')
    field = Field(name=name, type=map_sql_type(parts[1]))
    constraints = Constraint()

    if "NOT NULL" in upper:
        field.required = True

    match = CHECK_RE.search(line)
    if match:
        constraints.min_value = int(match.group(2))
        constraints.max_value = int(match.group(4))

    match = REFERENCES_RE.search(line)
    if match:
        ref_table, ref_field = match.group(1), match.group(2)
        constraints.references = Reference(ref_table, ref_field)
        relationships.append(Relationship(
            type="foreign_key",
            from_table=table_name,
            from_field=name,
            to_table=ref_table,
            to_field=ref_field,
            cardinality="many:1",
        ))

    if not constraints.is_empty():
        field.constraints = constraints
    return field


def parse_sql_schema(path: str) -> Schema:
    """Read CREATE TABLE blocks from a SQL script."""
    schema = Schema(source_format="sql")
    current = None

    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as e:
        raise ConfigError(f"cannot read schema file '{path}': {e}") from e
    except UnicodeDecodeError as e:
        raise SchemaParseError(f"schema file '{path}' is not valid UTF-8 text") from e

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("--"):
            continue

        if line.upper().startswith("CREATE TABLE"):
            match = CREATE_TABLE_RE.match(line)
            if match:
                current = Table(name=match.group(1))
            else:
                logger.debug("Line %d: unrecognized CREATE TABLE statement skipped", lineno)
            continue

        if ");" in line:
            if current is not None:
                schema.tables.append(current)
                current = None
            continue

        if current is not None:
            field = parse_field_definition(line, current.name, schema.relationships)
            if field is not None:
                current.fields.append(field)
            else:
                logger.debug("Line %d: skipped '%s'", lineno, line)

    if current is not None:
        logger.warning("Table '%s' is missing its closing ');' and was ignored", current.name)

    return schema


def parse_schema(path: str) -> Schema:
    """Parse and validate a JSON or SQL schema file, chosen by extension."""
    if not path:
        raise ConfigError("schema file is required")
    if not os.path.exists(path):
        raise ConfigError(f"schema file '{path}' does not exist")

    if path.lower().endswith(".json"):
        schema = parse_json_schema(path)
    else:
        schema = parse_sql_schema(path)

    validate_schema(schema)
    logger.debug(
        "Parsed %s: %d table(s), %d flat field(s), %d relationship(s)",
        path, len(schema.tables), len(schema.fields), len(schema.relationships),
    )
    return schema
