from __future__ import annotations

import unittest

from securedb.core.engine import EngineConfig, QueryTemplateEngine
from securedb.core.errors import EmptyDataError
from securedb.core.query_builder import (
    compile_where,
    count_template,
    delete_template,
    insert_template,
    update_template,
)
from securedb.ports.db_api.dialects import MySQLDialect, PostgresDialect


class CompileWhereTests(unittest.TestCase):
    def test_operators_follow_value_type(self) -> None:
        sql, params = compile_where({"id": 1, "deleted_at": None, "status": ("a", "b")})
        self.assertEqual(sql, "?# = ? AND ?# IS NULL AND ?# IN (?a)")
        self.assertEqual(params, ["id", 1, "deleted_at", "status", ["a", "b"]])

    def test_empty_collection_matches_nothing(self) -> None:
        sql, params = compile_where({"id": [], "name": "x"})
        self.assertEqual(sql, "1=0 AND ?# = ?")
        self.assertEqual(params, ["name", "x"])


class TemplateBuilderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = QueryTemplateEngine(EngineConfig(dialect="mysql"))

    def test_insert(self) -> None:
        template, params = insert_template("users", {"name": "a", "age": 3}, MySQLDialect())
        self.assertEqual(template, "INSERT INTO ?# (?#, ?#) VALUES (?a)")
        self.assertEqual(params, ["users", "name", "age", ["a", 3]])
        self.assertEqual(
            self.engine.process(template, params),
            ("INSERT INTO `users` (`name`, `age`) VALUES (?, ?)", ["a", 3]),
        )

    def test_insert_returning(self) -> None:
        template, _ = insert_template("users", {"name": "a"}, PostgresDialect(), returning="id")
        self.assertEqual(template, 'INSERT INTO ?# (?#) VALUES (?a) RETURNING "id"')

    def test_update(self) -> None:
        template, params = update_template("users", {"name": "a", "age": None}, {"id": 7})
        self.assertEqual(template, "UPDATE ?# SET ?# = ?, ?# = ? WHERE ?# = ?")
        self.assertEqual(
            self.engine.process(template, params),
            ("UPDATE `users` SET `name` = ?, `age` = ? WHERE `id` = ?", ["a", None, 7]),
        )

    def test_delete(self) -> None:
        template, params = delete_template("app.users", {"id": [1, 2]})
        self.assertEqual(
            self.engine.process(template, params),
            ("DELETE FROM `app`.`users` WHERE `id` IN (?, ?)", [1, 2]),
        )

    def test_hostile_names_stay_quoted(self) -> None:
        template, params = update_template("users", {"a` = 1; --": "x"}, {"id": 1})
        sql, _ = self.engine.process(template, params)
        self.assertEqual(sql, "UPDATE `users` SET `a`` = 1; --` = ? WHERE `id` = ?")

    def test_empty_input_raises(self) -> None:
        with self.assertRaisesRegex(EmptyDataError, "Insert data cannot be empty"):
            insert_template("users", {}, MySQLDialect())
        with self.assertRaisesRegex(EmptyDataError, "Update data cannot be empty"):
            update_template("users", {}, {"id": 1})
        with self.assertRaisesRegex(EmptyDataError, "Update WHERE clause cannot be empty"):
            update_template("users", {"a": 1}, {})
        with self.assertRaisesRegex(EmptyDataError, "Delete WHERE clause cannot be empty"):
            delete_template("users", {})

    def test_count_template(self) -> None:
        self.assertEqual(
            count_template("SELECT * FROM t { WHERE a = ? }"),
            "SELECT COUNT(*) FROM (SELECT * FROM t { WHERE a = ? }) count_query",
        )


if __name__ == "__main__":
    unittest.main()
