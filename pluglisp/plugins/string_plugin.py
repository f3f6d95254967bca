"""String functions. Strings are immutable; every function returns a new value."""

from __future__ import annotations

import re

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    to_int,
    to_number,
    to_sequence,
    to_string,
)
from pluglisp.reader.parser import NUMBER_RE, parse_atom
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.expr import BigNumberExpr
from pluglisp.types.nil import NIL
from pluglisp.types.values import BigNumber, ListValue, Number, String, boolean


def _strings(name: str, evaluator, args: list[Expression]) -> list[str]:
    return [to_string(name, v) for v in eval_args(evaluator, args)]


def str_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(str a b ...) concatenates the display form of every argument."""
    return String("".join(str(v) for v in eval_args(evaluator, args)))


def is_string(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string?", args, 1)
    return boolean(isinstance(evaluator.eval(args[0]), String))


def string_length(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-length", args, 1)
    (s,) = _strings("string-length", evaluator, args)
    return Number(len(s))


def string_upper(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-upper", args, 1)
    (s,) = _strings("string-upper", evaluator, args)
    return String(s.upper())


def string_lower(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-lower", args, 1)
    (s,) = _strings("string-lower", evaluator, args)
    return String(s.lower())


def string_trim(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-trim", args, 1)
    (s,) = _strings("string-trim", evaluator, args)
    return String(s.strip())


def string_split(evaluator, args: list[Expression]) -> LispValue:
    """(string-split s sep); an empty separator splits into characters."""
    expect_args("string-split", args, 2)
    s, sep = _strings("string-split", evaluator, args)
    parts = list(s) if sep == "" else s.split(sep)
    return ListValue(tuple(String(p) for p in parts))


def string_join(evaluator, args: list[Expression]) -> LispValue:
    """(string-join coll sep)"""
    expect_args("string-join", args, 2)
    coll, sep = eval_args(evaluator, args)
    separator = to_string("string-join", sep)
    return String(separator.join(str(v) for v in to_sequence("string-join", coll)))


def string_contains(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-contains?", args, 2)
    s, sub = _strings("string-contains?", evaluator, args)
    return boolean(sub in s)


def string_starts_with(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-starts-with?", args, 2)
    s, prefix = _strings("string-starts-with?", evaluator, args)
    return boolean(s.startswith(prefix))


def string_ends_with(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-ends-with?", args, 2)
    s, suffix = _strings("string-ends-with?", evaluator, args)
    return boolean(s.endswith(suffix))


def string_replace(evaluator, args: list[Expression]) -> LispValue:
    """(string-replace s old new) replaces every occurrence."""
    expect_args("string-replace", args, 3)
    s, old, new = _strings("string-replace", evaluator, args)
    return String(s.replace(old, new))


def string_index_of(evaluator, args: list[Expression]) -> LispValue:
    """(string-index-of s sub) is -1 when absent."""
    expect_args("string-index-of", args, 2)
    s, sub = _strings("string-index-of", evaluator, args)
    return Number(s.find(sub))


def substring(evaluator, args: list[Expression]) -> LispValue:
    """(substring s start [end])"""
    expect_args_range("substring", args, 2, 3)
    values = eval_args(evaluator, args)
    s = to_string("substring", values[0])
    start = to_int("substring", values[1])
    end = to_int("substring", values[2]) if len(values) == 3 else len(s)
    if not 0 <= start <= end <= len(s):
        raise PlugLispError(f"substring: range [{start}, {end}) out of bounds for length {len(s)}")
    return String(s[start:end])


def string_repeat(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-repeat", args, 2)
    s, n = eval_args(evaluator, args)
    return String(to_string("string-repeat", s) * max(to_int("string-repeat", n), 0))


def string_to_number(evaluator, args: list[Expression]) -> LispValue:
    """(string->number s) is nil when s is not numeric."""
    expect_args("string->number", args, 1)
    (s,) = _strings("string->number", evaluator, args)
    text = s.strip()
    if not NUMBER_RE.fullmatch(text):
        return NIL
    literal = parse_atom(text)
    if isinstance(literal, BigNumberExpr):
        return BigNumber(int(literal.text))
    return Number(float(text))


def number_to_string(evaluator, args: list[Expression]) -> LispValue:
    expect_args("number->string", args, 1)
    value = evaluator.eval(args[0])
    to_number("number->string", value)
    return String(str(value))


def string_char_at(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-char-at", args, 2)
    s, index = eval_args(evaluator, args)
    text = to_string("string-char-at", s)
    i = to_int("string-char-at", index)
    if not 0 <= i < len(text):
        raise PlugLispError(f"string-char-at: index {i} out of bounds for length {len(text)}")
    return String(text[i])


def string_is_empty(evaluator, args: list[Expression]) -> LispValue:
    expect_args("string-empty?", args, 1)
    (s,) = _strings("string-empty?", evaluator, args)
    return boolean(s == "")


def _compile(name: str, pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as err:
        raise PlugLispError(f"{name}: invalid regex {pattern!r}: {err}") from None


def string_regex_match(evaluator, args: list[Expression]) -> LispValue:
    """(string-regex-match? s pattern) is true when pattern matches anywhere in s."""
    expect_args("string-regex-match?", args, 2)
    s, pattern = _strings("string-regex-match?", evaluator, args)
    return boolean(_compile("string-regex-match?", pattern).search(s) is not None)


def string_regex_find_all(evaluator, args: list[Expression]) -> LispValue:
    """(string-regex-find-all s pattern) lists every whole match, left to right."""
    expect_args("string-regex-find-all", args, 2)
    s, pattern = _strings("string-regex-find-all", evaluator, args)
    matches = _compile("string-regex-find-all", pattern).finditer(s)
    return ListValue(tuple(String(m.group(0)) for m in matches))


class StringPlugin(Plugin):
    name = "string"
    description = "String manipulation"
    category = Category.STRING

    def functions(self):
        return [
            ("str", VARIADIC, "Concatenate display forms: (str a b ...)", str_builtin),
            ("string?", 1, "True for strings: (string? x)", is_string),
            ("string-length", 1, "Length of a string: (string-length s)", string_length),
            ("string-upper", 1, "Upper-case: (string-upper s)", string_upper),
            ("string-lower", 1, "Lower-case: (string-lower s)", string_lower),
            ("string-trim", 1, "Strip surrounding whitespace: (string-trim s)", string_trim),
            ("string-split", 2, "Split on a separator: (string-split s sep)", string_split),
            ("string-join", 2, "Join with a separator: (string-join coll sep)", string_join),
            ("string-contains?", 2, "Substring test: (string-contains? s sub)", string_contains),
            ("string-starts-with?", 2, "Prefix test: (string-starts-with? s p)", string_starts_with),
            ("string-ends-with?", 2, "Suffix test: (string-ends-with? s p)", string_ends_with),
            ("string-replace", 3, "Replace all: (string-replace s old new)", string_replace),
            ("string-index-of", 2, "Index of substring or -1: (string-index-of s sub)", string_index_of),
            ("substring", VARIADIC, "Slice: (substring s start end)", substring),
            ("string-repeat", 2, "Repeat n times: (string-repeat s n)", string_repeat),
            ("string->number", 1, "Parse a number or nil: (string->number s)", string_to_number),
            ("number->string", 1, "Render a number: (number->string n)", number_to_string),
            ("string-char-at", 2, "Character at index: (string-char-at s i)", string_char_at),
            ("string-empty?", 1, "True for the empty string: (string-empty? s)", string_is_empty),
            ("string-regex-match?", 2, "Regex search: (string-regex-match? s pattern)", string_regex_match),
            ("string-regex-find-all", 2, "All regex matches: (string-regex-find-all s pattern)",
             string_regex_find_all),
            # Clojure-style aliases share the handlers above
            ("subs", VARIADIC, "Alias of substring: (subs s start end)", substring),
            ("split", 2, "Alias of string-split: (split s sep)", string_split),
            ("join", 2, "Alias of string-join: (join coll sep)", string_join),
            ("replace", 3, "Alias of string-replace: (replace s old new)", string_replace),
            ("trim", 1, "Alias of string-trim: (trim s)", string_trim),
            ("upper-case", 1, "Alias of string-upper: (upper-case s)", string_upper),
            ("lower-case", 1, "Alias of string-lower: (lower-case s)", string_lower),
        ]
