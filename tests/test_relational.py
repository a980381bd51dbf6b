import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import polars as pl
from faker import Faker

from fakeforge.config import GenerationConfig
from fakeforge.inference import FieldTypeInference
from fakeforge.relational import RelationalEngine
from fakeforge.schema import Constraint, Field, Reference, Table


def fk(name, table, column, type_="int"):
    return Field(name, type_, constraints=Constraint(references=Reference(table, column)))


class TestRelationalEngine(unittest.TestCase):

    def setUp(self):
        fake = Faker()
        fake.seed_instance(7)
        self.inference = FieldTypeInference(fake)
        self.engine = RelationalEngine(self.inference)

        self.users = Table("users", [Field("id", "int"), Field("name", "string")])
        self.orders = Table("orders", [
            Field("id", "int"),
            fk("user_id", "users", "id"),
            Field("total", "float"),
        ])

    def test_build_dag_orders_parents_first(self):
        levels = self.engine.build_dag([self.orders, self.users])
        self.assertEqual([[t.name for t in level] for level in levels], [["users"], ["orders"]])

    def test_foreign_keys_sample_parent_values(self):
        results = self.engine.generate_all([self.orders, self.users], 50)

        self.assertEqual(list(results.keys()), ["orders", "users"])
        user_ids = set(results["users"]["id"].to_list())
        self.assertTrue(set(results["orders"]["user_id"].to_list()) <= user_ids)

    def test_foreign_keys_with_five_parent_rows(self):
        results = self.engine.generate_all([self.users, self.orders], 5)
        self.assertEqual(len(results["orders"]), 5)

        more = self.engine.generate_table(self.orders, 200)
        user_ids = set(results["users"]["id"].to_list())
        self.assertTrue(set(more["user_id"].to_list()) <= user_ids)

    def test_three_level_chain(self):
        regions = Table("regions", [Field("code", "uuid")])
        stores = Table("stores", [Field("id", "uuid"), fk("region_code", "regions", "code", "uuid")])
        sales = Table("sales", [Field("id", "uuid"), fk("store_id", "stores", "id", "uuid")])

        levels = self.engine.build_dag([sales, stores, regions])
        self.assertEqual([[t.name for t in level] for level in levels], [["regions"], ["stores"], ["sales"]])

        results = self.engine.generate_all([sales, stores, regions], 30)
        self.assertTrue(set(results["stores"]["region_code"].to_list()) <= set(results["regions"]["code"].to_list()))
        self.assertTrue(set(results["sales"]["store_id"].to_list()) <= set(results["stores"]["id"].to_list()))

    def test_missing_reference_falls_back(self):
        orphans = Table("orphans", [fk("parent_id", "nowhere", "id")])
        results = self.engine.generate_all([orphans], 10)
        values = results["orphans"]["parent_id"].to_list()
        self.assertEqual(len(values), 10)
        self.assertTrue(all(1 <= v <= 1000 for v in values))

    def test_cycles_degrade_without_error(self):
        a = Table("a", [Field("id", "int"), fk("b_id", "b", "id")])
        b = Table("b", [Field("id", "int"), fk("a_id", "a", "id")])

        with self.assertLogs("fakeforge.relational", level="WARNING"):
            levels = self.engine.build_dag([a, b])
        self.assertEqual([[t.name for t in level] for level in levels], [["a", "b"]])

        results = self.engine.generate_all([a, b], 10)
        # b is generated after a, so its reference to a resolves
        self.assertTrue(set(results["b"]["a_id"].to_list()) <= set(results["a"]["id"].to_list()))
        self.assertEqual(len(results["a"]), 10)

    def test_unique_count_cycles_round_robin(self):
        table = Table("t", [Field("code", "int", constraints=Constraint(unique_count=5))])
        values = self.engine.generate_table(table, 20)["code"].to_list()

        self.assertEqual(len(set(values)), 5)
        for v in set(values):
            self.assertEqual(values.count(v), 4)
        for i, v in enumerate(values):
            self.assertEqual(v, values[i % 5])

    def test_unique_count_exhausted_value_space(self):
        table = Table("t", [Field("flag", "boolean", constraints=Constraint(unique_count=5))])
        with self.assertLogs("fakeforge.relational", level="WARNING"):
            values = self.engine.generate_table(table, 10)["flag"].to_list()
        self.assertEqual(len(set(values)), 2)
        for i, v in enumerate(values):
            self.assertEqual(v, values[i % 2])

    def test_reference_values_recorded(self):
        self.engine.generate_table(self.users, 3)
        self.assertEqual(len(self.engine.reference_values("users", "id")), 3)
        self.assertEqual(len(self.engine.reference_values("USERS", "ID")), 3)
        self.assertEqual(self.engine.reference_values("users", "missing"), [])

    def test_batches_keep_row_order_and_count(self):
        engine = RelationalEngine(self.inference, GenerationConfig(batch_size=3))
        table = Table("t", [Field("code", "int", constraints=Constraint(unique_count=4))])
        values = engine.generate_table(table, 10)["code"].to_list()
        self.assertEqual(len(values), 10)
        self.assertEqual(values[:4], values[4:8])

    def test_zero_rows_keeps_columns(self):
        df = self.engine.generate_table(self.users, 0)
        self.assertIsInstance(df, pl.DataFrame)
        self.assertEqual(df.columns, ["id", "name"])
        self.assertEqual(len(df), 0)


class TestParallelGeneration(unittest.TestCase):

    def test_parallel_matches_invariants(self):
        config = GenerationConfig(parallel=True, workers=2, batch_size=7)
        engine = RelationalEngine(FieldTypeInference(Faker(), cache={}), config)

        users = Table("users", [Field("id", "uuid"), Field("email", "string")])
        products = Table("products", [Field("sku", "uuid"), Field("price", "float")])
        orders = Table("orders", [
            fk("user_id", "users", "id", "uuid"),
            fk("product_sku", "products", "sku", "uuid"),
            Field("quantity", "int", constraints=Constraint(min_value=1, max_value=5)),
        ])

        results = engine.generate_all([orders, users, products], 40)

        self.assertEqual(list(results.keys()), ["orders", "users", "products"])
        for df in results.values():
            self.assertEqual(len(df), 40)
        self.assertTrue(set(results["orders"]["user_id"].to_list()) <= set(results["users"]["id"].to_list()))
        self.assertTrue(set(results["orders"]["product_sku"].to_list()) <= set(results["products"]["sku"].to_list()))
        self.assertTrue(all(1 <= q <= 5 for q in results["orders"]["quantity"].to_list()))


if __name__ == '__main__':
    unittest.main()
