"""
Schema Model — tables, fields, constraints and FK relationships.

A Schema is built once by a parser and treated as read-only afterwards.
It holds either a flat field list (single-table mode) or a list of tables.
"""

from dataclasses import dataclass, field as dc_field
from typing import Optional

from fakeforge.errors import SchemaError


def _mapping(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise SchemaError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _list(data, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise SchemaError(f"{what} must be a list, got {type(data).__name__}")
    return data


def _text(value, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SchemaError(f"{what} must be a string, got {value!r}")
    return value


def _int_or_none(value, what: str):
    # bool is an int subclass but never a valid bound
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"{what} must be an integer, got {value!r}")
    return value


@dataclass
class Reference:
    """Foreign-key target: `table.field`."""
    table: str
    field: str

    @property
    def key(self) -> str:
        return f"{self.table}.{self.field}"


@dataclass
class Constraint:
    """Optional per-field refinement."""
    references: Optional[Reference] = None
    depends_on: str = ""
    pattern: str = ""
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    unique_count: Optional[int] = None

    @property
    def has_bounds(self) -> bool:
        return self.min_value is not None or self.max_value is not None

    def is_empty(self) -> bool:
        return (
            self.references is None
            and not self.depends_on
            and not self.pattern
            and not self.has_bounds
            and self.unique_count is None
        )

    @classmethod
    def from_dict(cls, data: dict, owner: str = "field") -> "Constraint":
        data = _mapping(data, f"constraints of '{owner}'")
        ref = data.get("references")
        if ref:
            ref = _mapping(ref, f"references of '{owner}'")
            ref = Reference(
                _text(ref.get("table"), f"referenced table of '{owner}'"),
                _text(ref.get("field"), f"referenced field of '{owner}'"),
            )
        return cls(
            references=ref or None,
            depends_on=_text(data.get("depends_on"), f"depends_on of '{owner}'"),
            pattern=_text(data.get("pattern"), f"pattern of '{owner}'"),
            min_value=_int_or_none(data.get("min_value"), f"min_value of '{owner}'"),
            max_value=_int_or_none(data.get("max_value"), f"max_value of '{owner}'"),
            unique_count=_int_or_none(data.get("unique_count"), f"unique_count of '{owner}'"),
        )

    def to_dict(self) -> dict:
        out = {}
        if self.references:
            out["references"] = {"table": self.references.table, "field": self.references.field}
        if self.depends_on:
            out["depends_on"] = self.depends_on
        if self.pattern:
            out["pattern"] = self.pattern
        for key in ("min_value", "max_value", "unique_count"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass
class Field:
    """A single column: name, declared type, required flag, constraints."""
    name: str
    type: str
    required: bool = False
    constraints: Optional[Constraint] = None

    @property
    def reference(self) -> Optional[Reference]:
        return self.constraints.references if self.constraints else None

    @property
    def unique_count(self) -> Optional[int]:
        return self.constraints.unique_count if self.constraints else None

    @classmethod
    def from_dict(cls, data: dict) -> "Field":
        data = _mapping(data, "field definition")
        name = _text(data.get("name"), "field name")
        constraints = data.get("constraints")
        return cls(
            name=name,
            type=_text(data.get("type"), f"type of field '{name}'"),
            required=bool(data.get("required", False)),
            constraints=Constraint.from_dict(constraints, name) if constraints else None,
        )

    def to_dict(self) -> dict:
        out = {"name": self.name, "type": self.type, "required": self.required}
        if self.constraints and not self.constraints.is_empty():
            out["constraints"] = self.constraints.to_dict()
        return out


@dataclass
class Table:
    """A named, ordered sequence of fields. Field order is column order."""
    name: str
    fields: list = dc_field(default_factory=list)

    def has_references(self) -> bool:
        return any(f.reference is not None for f in self.fields)

    @classmethod
    def from_dict(cls, data: dict) -> "Table":
        data = _mapping(data, "table definition")
        name = _text(data.get("name"), "table name")
        return cls(
            name=name,
            fields=[Field.from_dict(f) for f in _list(data.get("fields"), f"fields of table '{name}'")],
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}


@dataclass
class Relationship:
    """Informational FK edge. Generation keys off Field.reference instead."""
    type: str
    from_table: str
    from_field: str
    to_table: str
    to_field: str
    cardinality: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Relationship":
        data = _mapping(data, "relationship")
        return cls(
            type=data.get("type", ""),
            from_table=data.get("from_table", ""),
            from_field=data.get("from_field", ""),
            to_table=data.get("to_table", ""),
            to_field=data.get("to_field", ""),
            cardinality=data.get("cardinality", "") or "",
        )

    def to_dict(self) -> dict:
        out = {
            "type": self.type,
            "from_table": self.from_table,
            "from_field": self.from_field,
            "to_table": self.to_table,
            "to_field": self.to_field,
        }
        if self.cardinality:
            out["cardinality"] = self.cardinality
        return out


@dataclass
class Schema:
    """Root container for a parsed schema file."""
    tables: list = dc_field(default_factory=list)
    fields: list = dc_field(default_factory=list)
    relationships: list = dc_field(default_factory=list)
    # "json" or "sql"; drives the default output format
    source_format: str = ""

    @property
    def is_multi_table(self) -> bool:
        return len(self.tables) > 0

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "Schema":
        if not isinstance(data, dict):
            raise SchemaError("Schema document must be a JSON object")
        return cls(
            tables=[Table.from_dict(t) for t in _list(data.get("tables"), "tables")],
            fields=[Field.from_dict(f) for f in _list(data.get("fields"), "fields")],
            relationships=[Relationship.from_dict(r) for r in _list(data.get("relationships"), "relationships")],
        )

    def to_dict(self) -> dict:
        out = {}
        if self.tables:
            out["tables"] = [t.to_dict() for t in self.tables]
        if self.fields:
            out["fields"] = [f.to_dict() for f in self.fields]
        if self.relationships:
            out["relationships"] = [r.to_dict() for r in self.relationships]
        return out


def validate_schema(schema: Schema) -> None:
    """Raise SchemaError if the schema cannot drive generation."""
    if not schema.tables and not schema.fields:
        raise SchemaError("schema must have at least one table or field")

    seen_tables = set()
    for table in schema.tables:
        if not table.name:
            raise SchemaError("table name cannot be empty")
        if table.name in seen_tables:
            raise SchemaError(f"duplicate table name: {table.name}")
        seen_tables.add(table.name)
        if not table.fields:
            raise SchemaError(f"table '{table.name}' must have at least one field")
        _validate_fields(table.fields, table.name)

    if schema.fields:
        _validate_fields(schema.fields, "data")


def _validate_fields(fields: list, owner: str) -> None:
    names = set()
    for f in fields:
        if not f.name:
            raise SchemaError(f"field name cannot be empty (table '{owner}')")
        if f.name in names:
            raise SchemaError(f"field names must be unique: '{f.name}' repeats in '{owner}'")
        names.add(f.name)
        if not f.type:
            raise SchemaError(f"field type cannot be empty: '{owner}.{f.name}'")
