# Copyright (c) 2024 laxurl authors
#
# This file is a part of `laxurl` project.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program. If not, see <http://www.gnu.org/licenses/>.

"""Parsing and un-parsing of URL query strings."""

import math as _math
import typing as _t

from kisstdlib.exceptions import *

from .encoding import *

QueryScalar = str | int | float | bool | None
QueryValue = _t.Union[QueryScalar, list[QueryScalar], dict[str, "QueryValue"]]
QueryObject = dict[str, QueryValue]

# these would clobber object internals in JavaScript-land, and consumers of
# our outputs might live there
reserved_query_keys = frozenset(["__proto__", "constructor"])

def parse_query(search : str = "") -> QueryObject:
    """Parse a query string into a `dict`.

       Keys that appear more than once get a `list` of all their values, in
       order. Bracket notation is not interpreted, i.e. `a[b]=c` produces a
       key named `a[b]`.
    """
    if search.startswith("?"):
        search = search[1:]

    res : QueryObject = {}
    for param in search.split("&"):
        raw_key, _, raw_value = param.partition("=")
        if raw_key == "":
            continue
        key = decode(raw_key)
        if key in reserved_query_keys:
            continue
        value = decode_query_value(raw_value)
        try:
            old = res[key]
        except KeyError:
            res[key] = value
        else:
            if isinstance(old, list):
                old.append(value)
            else:
                res[key] = [_t.cast(str, old), value]
    return res

# how many levels of `dict`s `encode_query_item` turns into `[key]`s
max_query_depth = 2

def query_scalar_falsy(value : QueryScalar) -> bool:
    return not value or isinstance(value, float) and _math.isnan(value)

def query_scalar_str(value : QueryScalar) -> str:
    """Render `value` the way JavaScript's `String()` would."""
    if value is None:
        return ""
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float):
        if _math.isnan(value):
            return "NaN"
        elif _math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        elif value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)

def query_pairs(key : str, value : QueryValue, depth : int) -> list[str]:
    if isinstance(value, dict):
        res : list[str] = []
        for k, v in value.items():
            # deeper `dict`s get flattened into the deepest allowed key
            subkey = key if depth >= max_query_depth else f"{key}[{k}]"
            res += query_pairs(subkey, v, depth + 1)
        return res
    elif isinstance(value, list):
        ekey = encode_query_key(key)
        return [f"{ekey}={encode_query_value(query_scalar_str(e))}" for e in value]
    elif query_scalar_falsy(value):
        return [encode_query_key(key)]
    return [f"{encode_query_key(key)}={encode_query_value(query_scalar_str(value))}"]

def encode_query_item(key : str, value : QueryValue) -> str:
    """Encode a single `key`, `value` pair of a query.

       - Falsy scalars produce a bare `key`.
       - `list`s produce a `key=value` pair for each element.
       - `dict`s produce `key[inner]=value` pairs, `dict`s inside of those
         produce `key[inner][inner2]=value`; `dict`s nested deeper than that
         are not represented in the keys.
    """
    return "&".join(query_pairs(key, value, 0))

def stringify_query(query : QueryObject) -> str:
    return "&".join([e for e in (encode_query_item(k, v) for k, v in query.items()) if e != ""])

def test_parse_query() -> None:
    def check(search : str, expected : QueryObject) -> None:
        res = parse_query(search)
        scheck(search, "parse_query", res, expected)
        scheck(search, "parse_query keys", list(res.keys()), list(expected.keys()))

    check("", {})
    check("?", {})
    check("&&", {})
    check("a=1", {"a": "1"})
    check("?a=1&b=2", {"a": "1", "b": "2"})
    check("a", {"a": ""})
    check("a=", {"a": ""})
    check("a==b", {"a": "=b"})
    check("=x&y=1", {"y": "1"})
    check("a=1&a=2&a=3", {"a": ["1", "2", "3"]})
    check("a=&a=1", {"a": ["", "1"]})
    check("b=1&a=2&b=3", {"b": ["1", "3"], "a": "2"})
    check("a[b]=1", {"a[b]": "1"})
    check("a+b=c+d", {"a+b": "c d"})
    check("a%20b=c%2Bd", {"a b": "c+d"})
    check("a=%zz&b%=1", {"a": "%zz", "b%": "1"})

    # reserved keys
    check("__proto__=x&b=2", {"b": "2"})
    check("constructor=1&__proto__[a]=b", {"__proto__[a]": "b"})
    check("__proto__&__proto__=1&constructor", {})

def test_encode_query_item() -> None:
    def check(key : str, value : QueryValue, expected : str) -> None:
        scheck((key, value), "encode_query_item", encode_query_item(key, value), expected)

    check("a", "1", "a=1")
    check("a", "", "a")
    check("a", None, "a")
    check("a", 0, "a")
    check("a", False, "a")
    check("a", True, "a=true")
    check("a", 1, "a=1")
    check("a", 1.5, "a=1.5")
    check("a", 1.0, "a=1")
    check("a", -2.0, "a=-2")
    check("a", 0.0, "a")
    check("a", float("nan"), "a")
    check("a", float("inf"), "a=Infinity")
    check("a", [1.0, float("nan"), float("-inf")], "a=1&a=NaN&a=-Infinity")
    check("a b", "c d", "a+b=c+d")
    check("a=", "&#", "a%3D=%26%23")
    check("a", "x+y", "a=x%2By")

    check("a", ["1", "2"], "a=1&a=2")
    check("a", ["", 2, None], "a=&a=2&a=")
    check("a", [], "")

    check("q", {"a": "1", "b": ["2", "3"]}, "q[a]=1&q[b]=2&q[b]=3")
    check("q", {"a": ""}, "q[a]")
    check("q", {"a": {"b": "c", "d": ["e", "f"]}}, "q[a][b]=c&q[a][d]=e&q[a][d]=f")
    check("q", {"a": {"b": {"c": "d"}}}, "q[a][b]=d")
    check("q", {"a b": "c d"}, "q[a+b]=c+d")
    check("q", {}, "")

def test_stringify_query() -> None:
    def check(query : QueryObject, expected : str) -> None:
        scheck(query, "stringify_query", stringify_query(query), expected)

    check({}, "")
    check({"a": ["1", "2", "3"]}, "a=1&a=2&a=3")
    check({"a": "1", "b": None, "c": [], "d": "x y"}, "a=1&b&d=x+y")
    check({"filter": {"tag": ["x", "y"], "page": 2}}, "filter[tag]=x&filter[tag]=y&filter[page]=2")

    for search in [
        "a=1&b=2",
        "a=1&a=2&b",
        "x=a+b&y=a%2Bb",
        "k%3D=v%26",
    ]:
        scheck(search, "stringify_query . parse_query", stringify_query(parse_query(search)), search)
