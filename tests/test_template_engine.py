from __future__ import annotations

import threading
import unittest
from dataclasses import FrozenInstanceError, dataclass

from securedb import SKIP, EngineConfig, QueryTemplateEngine, TypedValue
from securedb.core.errors import (
    ArrayParamError,
    IdentifierTypeError,
    MissingParameterError,
    ParameterCountError,
    TemplateError,
)
from securedb.core.lexer import count_placeholders


def _squash(sql: str) -> str:
    return " ".join(sql.split())


@dataclass
class UserId(TypedValue):
    value: int

    def to_native(self) -> int:
        return self.value


class QueryTemplateEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = QueryTemplateEngine(EngineConfig(dialect="mysql"))

    def test_default_config(self) -> None:
        engine = QueryTemplateEngine()
        self.assertEqual(engine.config, EngineConfig(dialect="sqlite", identifier_prefix=""))
        self.assertEqual(engine.quote_identifier("t"), "`t`")

    def test_config_is_immutable(self) -> None:
        with self.assertRaises(FrozenInstanceError):
            self.engine.config.identifier_prefix = "x_"  # type: ignore[misc]

    def test_with_prefix_returns_new_engine(self) -> None:
        prefixed = self.engine.with_prefix("app_")
        self.assertEqual(self.engine.identifier_prefix, "")
        self.assertEqual(prefixed.identifier_prefix, "app_")
        self.assertEqual(prefixed.config.dialect, "mysql")
        self.assertEqual(prefixed.process("FROM ?_t", []), ("FROM `app_t`", []))
        self.assertEqual(self.engine.process("FROM ?_t", []), ("FROM `t`", []))

    def test_macro_inclusion(self) -> None:
        sql, params = self.engine.process("WHERE id = ? { AND active = ? }", [1, 1])
        self.assertEqual(_squash(sql), "WHERE id = ? AND active = ?")
        self.assertEqual(params, [1, 1])

    def test_macro_exclusion(self) -> None:
        sql, params = self.engine.process("WHERE id = ? { AND active = ? }", [1, SKIP])
        self.assertEqual(_squash(sql), "WHERE id = ?")
        self.assertEqual(params, [1])

    def test_full_template(self) -> None:
        engine = QueryTemplateEngine(EngineConfig(dialect="mysql", identifier_prefix="t_"))
        template = "SELECT * FROM ?_users WHERE active = ? { AND id IN(?a) } { AND ?# = ? }"

        sql, params = engine.process(template, [1, [1, 2], "name", "x"])
        self.assertEqual(
            _squash(sql),
            "SELECT * FROM `t_users` WHERE active = ? AND id IN(?, ?) AND `name` = ?",
        )
        self.assertEqual(params, [1, 1, 2, "x"])

        sql, params = engine.process(template, [1, SKIP, "name", "x"])
        self.assertEqual(_squash(sql), "SELECT * FROM `t_users` WHERE active = ? AND `name` = ?")
        self.assertEqual(params, [1, "x"])

        sql, params = engine.process(template, [1, [3], "name", SKIP])
        self.assertEqual(_squash(sql), "SELECT * FROM `t_users` WHERE active = ? AND id IN(?)")
        self.assertEqual(params, [1, 3])

    def test_skipped_block_hides_its_invalid_params(self) -> None:
        sql, params = self.engine.process("SELECT 1 { WHERE ?# IN (?a) }", [SKIP, []])
        self.assertEqual(_squash(sql), "SELECT 1")
        self.assertEqual(params, [])

    def test_dialect_controls_quoting(self) -> None:
        engine = QueryTemplateEngine(EngineConfig(dialect="sqlsrv"))
        sql, params = engine.process("UPDATE ?# SET ?a", ["dbo.users", {"name": "x"}])
        self.assertEqual(sql, "UPDATE [dbo].[users] SET [name] = ?")
        self.assertEqual(params, ["x"])

    def test_surplus_parameters_raise(self) -> None:
        with self.assertRaises(ParameterCountError):
            self.engine.process("SELECT ?", [1, 2])
        with self.assertRaises(ParameterCountError):
            self.engine.process("SELECT 1", [None])

    def test_trailing_skip_is_ignored(self) -> None:
        self.assertEqual(self.engine.process("SELECT ?", [1, SKIP]), ("SELECT ?", [1]))

    def test_errors_share_a_base_class(self) -> None:
        cases = [
            ("IN (?a)", [[]], ArrayParamError),
            ("SELECT ?#", [1], IdentifierTypeError),
            ("SELECT ? + ?", [1], MissingParameterError),
        ]
        for template, params, error in cases:
            with self.subTest(template=template):
                with self.assertRaises(error) as ctx:
                    self.engine.process(template, params)
                self.assertIsInstance(ctx.exception, TemplateError)
                self.assertIsInstance(ctx.exception, ValueError)

    def test_typed_values_are_transparent(self) -> None:
        sql, params = self.engine.process(
            "a = ? AND b IN (?a) { AND c = ? } SET ?a",
            [UserId(1), [UserId(2), 3], UserId(4), {"d": UserId(5)}],
        )
        self.assertEqual(_squash(sql), "a = ? AND b IN (?, ?) AND c = ? SET `d` = ?")
        self.assertEqual(params, [1, 2, 3, 4, 5])

        sql, params = self.engine.process("a = ?", [7])
        self.assertEqual(params, [7])

    def test_bound_params_match_placeholders_after_expansion(self) -> None:
        cases = [
            ("a = ? { AND b = ? } { AND c IN (?a) }", [1, SKIP, [1, 2]]),
            ("?_t { ?# = ? } x = ?", ["col", SKIP, 9]),
            ("{ a = ? AND b = ? } c = ?", [1, 2, 3]),
            ("UPDATE t SET ?a WHERE id = ?", [{"a": 1, "b": 2}, 3]),
        ]
        for template, params in cases:
            with self.subTest(template=template):
                sql, bound = self.engine.process(template, params)
                self.assertEqual(count_placeholders(sql), len(bound))

    def test_kept_block_text_does_not_merge_with_preceding_placeholder(self) -> None:
        self.assertEqual(
            self.engine.process("SELECT ?{a} AS x", [1]),
            ("SELECT ?a AS x", [1]),
        )
        self.assertEqual(
            self.engine.process("SELECT ?{#} FROM ?{_t}", [1, 2]),
            ("SELECT ?# FROM ?_t", [1, 2]),
        )
        self.assertEqual(self.engine.compile("SELECT ?{a} AS x", [1]).markers, (7,))

    def test_compile_reports_marker_offsets(self) -> None:
        engine = QueryTemplateEngine(EngineConfig(dialect="postgres", identifier_prefix="p?_"))
        statement = engine.compile(
            "SELECT ?# FROM ?_t WHERE id IN (?a) { AND ?a }",
            ["what?", [1, 2], {"k?": 3}],
        )
        self.assertEqual(
            statement.sql,
            'SELECT "what?" FROM "p?_t" WHERE id IN (?, ?)  AND "k?" = ? ',
        )
        self.assertEqual(statement.params, [1, 2, 3])
        self.assertEqual(len(statement.markers), len(statement.params))
        self.assertTrue(all(statement.sql[i] == "?" for i in statement.markers))
        self.assertNotIn(statement.sql.index("what?") + 4, statement.markers)
        self.assertEqual(engine.process("SELECT ?#", ["a?"]), ('SELECT "a?"', []))

    def test_concurrent_use_of_one_engine(self) -> None:
        errors: list[BaseException] = []

        def _worker(n: int) -> None:
            try:
                for _ in range(200):
                    sql, params = self.engine.process(
                        "SELECT ?# FROM t WHERE id IN (?a) { AND x = ? }",
                        ["c", list(range(n + 1)), SKIP if n % 2 else n],
                    )
                    assert len(params) == n + 1 + (0 if n % 2 else 1)
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=_worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(errors, [])


if __name__ == "__main__":
    unittest.main()
