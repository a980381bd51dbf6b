import unittest
import json
import sys
import os
import tempfile

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fakeforge.errors import ConfigError, SchemaError, SchemaParseError
from fakeforge.parsers import map_sql_type, parse_field_definition, parse_schema
from fakeforge.schema import Schema


SQL_SCHEMA = """-- shop schema
CREATE TABLE users (
    id SERIAL PRIMARY KEY,
    name VARCHAR(100) NOT NULL,
    email VARCHAR(100),
    age INTEGER CHECK (age >= 18 AND age <= 65)
);

CREATE TABLE IF NOT EXISTS orders (
    id SERIAL,
    user_id INTEGER REFERENCES users(id),
    total DECIMAL(10,2),
    created_at TIMESTAMP,
    PRIMARY KEY (id)
);
"""


class TestSchemaParsing(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_sql_tables_and_columns(self):
        schema = parse_schema(self.write("shop.sql", SQL_SCHEMA))

        self.assertEqual(schema.source_format, "sql")
        self.assertEqual([t.name for t in schema.tables], ["users", "orders"])

        users = schema.get_table("users")
        self.assertEqual([f.name for f in users.fields], ["id", "name", "email", "age"])
        self.assertEqual([f.type for f in users.fields], ["int", "string", "string", "int"])
        self.assertTrue(users.fields[1].required)
        self.assertFalse(users.fields[2].required)
        self.assertIsNone(users.fields[2].constraints)

        age = users.fields[3]
        self.assertEqual((age.constraints.min_value, age.constraints.max_value), (18, 65))

        orders = schema.get_table("orders")
        self.assertEqual([f.name for f in orders.fields], ["id", "user_id", "total", "created_at"])
        self.assertEqual([f.type for f in orders.fields], ["int", "int", "float", "datetime"])

    def test_sql_references_become_relationships(self):
        schema = parse_schema(self.write("shop.sql", SQL_SCHEMA))

        user_id = schema.get_table("orders").fields[1]
        self.assertEqual(user_id.reference.key, "users.id")

        self.assertEqual(len(schema.relationships), 1)
        rel = schema.relationships[0]
        self.assertEqual(
            (rel.type, rel.from_table, rel.from_field, rel.to_table, rel.to_field, rel.cardinality),
            ("foreign_key", "orders", "user_id", "users", "id", "many:1"),
        )

    def test_unclosed_table_is_ignored(self):
        sql = SQL_SCHEMA + "CREATE TABLE broken (\n    id INT,\n"
        with self.assertLogs("fakeforge.parsers", level="WARNING"):
            schema = parse_schema(self.write("shop.sql", sql))
        self.assertEqual([t.name for t in schema.tables], ["users", "orders"])

    def test_json_schema(self):
        doc = {
            "fields": [
                {"name": "id", "type": "int", "required": True},
                {"name": "code", "type": "string", "constraints": {"unique_count": 3}},
            ]
        }
        schema = parse_schema(self.write("flat.json", json.dumps(doc)))

        self.assertEqual(schema.source_format, "json")
        self.assertFalse(schema.is_multi_table)
        self.assertEqual([f.name for f in schema.fields], ["id", "code"])
        self.assertEqual(schema.fields[1].unique_count, 3)

    def test_json_multi_table_references(self):
        doc = {
            "tables": [
                {"name": "users", "fields": [{"name": "id", "type": "uuid"}]},
                {"name": "posts", "fields": [
                    {"name": "author_id", "type": "uuid",
                     "constraints": {"references": {"table": "users", "field": "id"}}},
                ]},
            ]
        }
        schema = parse_schema(self.write("multi.json", json.dumps(doc)))
        self.assertTrue(schema.is_multi_table)
        self.assertEqual(schema.get_table("posts").fields[0].reference.key, "users.id")

    def test_schema_dict_round_trip(self):
        schema = parse_schema(self.write("shop.sql", SQL_SCHEMA))
        again = Schema.from_dict(schema.to_dict())
        self.assertEqual(again.tables, schema.tables)
        self.assertEqual(again.relationships, schema.relationships)

    def test_malformed_json(self):
        with self.assertRaises(SchemaParseError):
            parse_schema(self.write("bad.json", "{not json"))

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            parse_schema(os.path.join(self.tmp.name, "nope.json"))
        with self.assertRaises(ConfigError):
            parse_schema("")

    def test_empty_schema(self):
        with self.assertRaises(SchemaError):
            parse_schema(self.write("empty.json", "{}"))
        with self.assertRaises(SchemaError):
            parse_schema(self.write("empty.sql", "-- nothing here\n"))

    def test_duplicate_fields(self):
        doc = {"fields": [{"name": "id", "type": "int"}, {"name": "id", "type": "int"}]}
        with self.assertRaises(SchemaError):
            parse_schema(self.write("dup.json", json.dumps(doc)))

    def test_non_object_document(self):
        with self.assertRaises(SchemaError):
            parse_schema(self.write("list.json", "[1, 2]"))

    def test_malformed_definitions(self):
        docs = [
            {"fields": ["id", "name"]},
            {"tables": [["users"]]},
            {"tables": [{"name": "users", "fields": {"id": "int"}}]},
            {"fields": [{"name": "id", "type": 5}]},
            {"fields": [{"name": "id", "type": "int", "constraints": ["unique"]}]},
            {"fields": [{"name": "id", "type": "int", "constraints": {"references": "users.id"}}]},
            {"relationships": ["users->orders"], "fields": [{"name": "id", "type": "int"}]},
        ]
        for i, doc in enumerate(docs):
            with self.assertRaises(SchemaError, msg=str(doc)):
                parse_schema(self.write(f"bad{i}.json", json.dumps(doc)))

    def test_bounds_must_be_integers(self):
        for key, value in (("min_value", 1.5), ("max_value", "10"), ("unique_count", True)):
            doc = {"fields": [{"name": "age", "type": "int", "constraints": {key: value}}]}
            with self.assertRaises(SchemaError, msg=key):
                parse_schema(self.write(f"{key}.json", json.dumps(doc)))


class TestSqlHelpers(unittest.TestCase):

    def test_map_sql_type(self):
        cases = {
            "SERIAL": "int",
            "bigint": "int",
            "VARCHAR(50)": "string",
            "TEXT": "string",
            "NUMERIC(8,2)": "float",
            "REAL": "float",
            "BOOLEAN": "boolean",
            "TIMESTAMP": "datetime",
            "DATE": "date",
            "UUID": "uuid",
            "JSONB": "string",
        }
        for sql_type, expected in cases.items():
            self.assertEqual(map_sql_type(sql_type), expected, sql_type)

    def test_table_clauses_are_skipped(self):
        rels = []
        for line in ("PRIMARY KEY (id),", "FOREIGN KEY (a) REFERENCES b(c)",
                     "UNIQUE (email)", "CONSTRAINT pk PRIMARY KEY (id)", "id"):
            self.assertIsNone(parse_field_definition(line, "t", rels), line)
        self.assertEqual(rels, [])

    def test_columns_named_like_keywords(self):
        rels = []
        field = parse_field_definition("unique_code VARCHAR(10),", "t", rels)
        self.assertEqual((field.name, field.type), ("unique_code", "string"))
        field = parse_field_definition("index INTEGER NOT NULL", "t", rels)
        self.assertEqual((field.name, field.type, field.required), ("index", "int", True))


if __name__ == '__main__':
    unittest.main()
