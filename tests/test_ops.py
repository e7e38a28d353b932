""" Behaviour of the individual operators, applied at the cursor level. """
import unittest

from weft import (
    Cursor, SKIP, GrammarFault,
    token, end, any_, each, many, list_, optional,
    between, pair, process, ignore, lazy, regexp,
)


def at(text, pos=0):
    return Cursor(text, pos)


def flatten(value):
    if isinstance(value, list):
        return "".join(flatten(v) for v in value)
    return value


class TestToken(unittest.TestCase):
    def test_00_literal_consumes_exactly_itself(self):
        for lit, text in [("a", "abc"), ("abc", "abc"), ("->", "->x"), ("", "xyz")]:
            with self.subTest(lit=lit):
                out = token(lit).apply(at(text))
                self.assertTrue(out.ok)
                self.assertEqual(lit, out.value)
                self.assertEqual(len(lit), out.rest.pos)

    def test_01_literal_mismatch_keeps_position(self):
        out = token("b").apply(at("abc"))
        self.assertFalse(out.ok)
        self.assertEqual(0, out.at.pos)
        self.assertEqual(("'b'",), out.expected)

    def test_02_pattern_is_anchored_at_cursor(self):
        digits = token(regexp(r"[0-9]+"))
        self.assertFalse(digits.apply(at("x12")).ok)
        out = digits.apply(at("x12y", 1))
        self.assertEqual("12", out.value)
        self.assertEqual(3, out.rest.pos)

    def test_03_pattern_expectation(self):
        out = token(regexp(r"[0-9]+")).apply(at("x"))
        self.assertEqual(("/[0-9]+/",), out.expected)

    def test_04_rejects_other_types(self):
        with self.assertRaises(TypeError):
            token(42)


class TestAny(unittest.TestCase):
    def test_00_left_biased(self):
        rule = any_(token("a"), token("ab"))
        out = rule.apply(at("ab"))
        self.assertEqual("a", out.value)
        self.assertEqual(1, out.rest.pos)

    def test_01_later_alternative(self):
        out = any_("x", "y", "z").apply(at("z"))
        self.assertEqual("z", out.value)

    def test_02_failure_merges_expectations(self):
        out = any_("x", "y").apply(at("z"))
        self.assertFalse(out.ok)
        self.assertEqual(0, out.at.pos)
        self.assertEqual(("'x'", "'y'"), out.expected)

    def test_03_failure_stays_at_start(self):
        out = any_(each("a", "b"), "c").apply(at("ax"))
        self.assertEqual(0, out.at.pos)
        self.assertEqual(("'b'", "'c'"), out.expected)
        # the deepest attempt is still available for error messages
        self.assertEqual(1, out.report().at.pos)
        self.assertEqual(("'b'",), out.report().expected)

    def test_04_alternatives_restart_from_same_cursor(self):
        out = any_(each("a", "b"), each("a", "c")).apply(at("ac"))
        self.assertEqual(["a", "c"], out.value)

    def test_05_needs_alternatives(self):
        with self.assertRaises(GrammarFault):
            any_()


class TestEach(unittest.TestCase):
    def test_00_collects_in_order(self):
        out = each("a", "b", "c").apply(at("abcd"))
        self.assertEqual(["a", "b", "c"], out.value)
        self.assertEqual("d", out.rest.rest)

    def test_01_partial_match_consumes_nothing(self):
        start = at("ax")
        out = each("a", "b").apply(start)
        self.assertFalse(out.ok)
        self.assertEqual(1, out.at.pos)
        # the caller's cursor is untouched and can be retried
        self.assertEqual(0, start.pos)
        self.assertTrue(each("a", "x").apply(start).ok)

    def test_02_drops_ignored_values(self):
        out = each("a", ignore(" "), "b").apply(at("a b"))
        self.assertEqual(["a", "b"], out.value)

    def test_03_returns_failing_element_as_is(self):
        out = each(many(each("a", "b")), "c").apply(at("ax"))
        self.assertEqual(0, out.at.pos)
        self.assertEqual(("'c'",), out.expected)
        report = out.report()
        self.assertEqual(1, report.at.pos)
        self.assertEqual(("'b'",), report.expected)


class TestMany(unittest.TestCase):
    def test_00_greedy(self):
        out = many("a").apply(at("aaab"))
        self.assertEqual(["a", "a", "a"], out.value)
        self.assertEqual(3, out.rest.pos)

    def test_01_zero_matches_is_success(self):
        out = many("a").apply(at("bbb"))
        self.assertTrue(out.ok)
        self.assertEqual([], out.value)
        self.assertEqual(0, out.rest.pos)

    def test_02_zero_width_rule_terminates(self):
        out = many(token("")).apply(at("abc"))
        self.assertEqual([], out.value)
        self.assertEqual(0, out.rest.pos)

    def test_03_zero_width_pattern_terminates(self):
        out = many(token(regexp(r"a*"))).apply(at("aab"))
        self.assertEqual(["aa"], out.value)
        self.assertEqual(2, out.rest.pos)


class TestList(unittest.TestCase):
    x = token("x")

    def test_00_plain(self):
        out = list_(self.x, ",").apply(at("x,x,x"))
        self.assertEqual(["x", "x", "x"], out.value)
        self.assertEqual("", out.rest.rest)

    def test_01_dangling_delimiter_left_in_input(self):
        out = list_(self.x, ",", False).apply(at("x,x,"))
        self.assertEqual(["x", "x"], out.value)
        self.assertEqual(",", out.rest.rest)

    def test_02_trailing_delimiter_consumed(self):
        out = list_(self.x, ",", trailing=True).apply(at("x,x,;"))
        self.assertEqual(["x", "x"], out.value)
        self.assertEqual(";", out.rest.rest)

    def test_03_single_element(self):
        out = list_(self.x).apply(at("x;"))
        self.assertEqual(["x"], out.value)
        self.assertEqual(1, out.rest.pos)

    def test_04_fails_only_on_first_element(self):
        out = list_(self.x).apply(at(",x"))
        self.assertFalse(out.ok)
        self.assertEqual(0, out.at.pos)

    def test_05_rule_delimiter(self):
        out = list_(self.x, token(regexp(r"\s*;\s*"))).apply(at("x ; x;x"))
        self.assertEqual(["x", "x", "x"], out.value)

    def test_06_zero_width_round_stops(self):
        out = list_(optional("x", default="-"), "").apply(at("xy"))
        self.assertEqual(["x"], out.value)
        self.assertEqual(1, out.rest.pos)


class TestShaping(unittest.TestCase):
    def test_00_between(self):
        rule = between(token("{"), token("a"), token("}"))
        out = rule.apply(at("{a}"))
        self.assertEqual("a", out.value)
        self.assertEqual("", out.rest.rest)

    def test_01_between_missing_right(self):
        start = at("{a")
        out = between("{", "a", "}").apply(start)
        self.assertFalse(out.ok)
        self.assertEqual(2, out.at.pos)
        self.assertEqual(("'}'",), out.expected)
        self.assertEqual("{a", start.rest)

    def test_02_pair(self):
        out = pair("a", "b").apply(at("a,b!"))
        self.assertEqual(["a", "b"], out.value)
        self.assertEqual("!", out.rest.rest)

    def test_03_pair_custom_delimiter(self):
        out = pair("a", "b", "=").apply(at("a=b"))
        self.assertEqual(["a", "b"], out.value)
        self.assertFalse(pair("a", "b", "=").apply(at("a,b")).ok)

    def test_04_process(self):
        out = process(token("1"), int).apply(at("1+"))
        self.assertEqual(1, out.value)
        self.assertEqual(1, out.rest.pos)

    def test_05_process_skipped_on_failure(self):
        calls = []
        out = process("1", calls.append).apply(at("2"))
        self.assertFalse(out.ok)
        self.assertEqual([], calls)

    def test_06_ignore(self):
        out = ignore(token("//comment")).apply(at("//comment\nrest"))
        self.assertIs(SKIP, out.value)
        self.assertEqual("\nrest", out.rest.rest)

    def test_07_ignore_dropped_by_many(self):
        out = many(any_(ignore(" "), "a")).apply(at("a a  a"))
        self.assertEqual(["a", "a", "a"], out.value)

    def test_08_optional(self):
        self.assertEqual("a", optional("a").apply(at("a")).value)
        out = optional("a", default=0).apply(at("b"))
        self.assertEqual(0, out.value)
        self.assertEqual(0, out.rest.pos)

    def test_09_end(self):
        self.assertTrue(end().apply(at("ab", 2)).ok)
        out = end().apply(at("ab", 1))
        self.assertEqual(("end of input",), out.expected)


class TestGrammarFault(unittest.TestCase):
    def test_00_transform_crash_is_not_a_mismatch(self):
        broken = process("1", lambda v: 1 // 0)
        with self.assertRaises(GrammarFault) as ctx:
            any_(broken, "1").apply(at("1"))
        self.assertIsInstance(ctx.exception.__cause__, ZeroDivisionError)

    def test_01_fault_escapes_repetition(self):
        broken = process("a", int)
        with self.assertRaises(GrammarFault):
            many(broken).apply(at("aa"))


class TestRecursion(unittest.TestCase):
    def test_00_lazy_self_reference(self):
        value = lazy(lambda: any_(token("x"), between("[", list_(value), "]")))
        out = value.apply(at("[x,[x,x],[[x]]]"))
        self.assertEqual(["x", ["x", "x"], [["x"]]], out.value)
        self.assertTrue(out.rest.at_end)


class TestRoundTrip(unittest.TestCase):
    def test_00_concatenated_values_rebuild_input(self):
        digit = token(regexp(r"[0-9]"))
        op = any_("+", "-", "*")
        expr = each(digit, many(each(op, digit)))
        for text in ["1", "1+2", "3*4-5+6"]:
            with self.subTest(text=text):
                out = expr.apply(at(text))
                self.assertEqual(text, flatten(out.value))


if __name__ == '__main__':
    unittest.main()
