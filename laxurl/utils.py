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

"""Small helpers for manipulating URLs as strings."""

import typing as _t

from kisstdlib.exceptions import *

from .url import *

def is_relative(url : str) -> bool:
    return url.startswith("./") or url.startswith("../")

def has_trailing_slash(url : str = "", respect_query_and_fragment : bool = False) -> bool:
    if respect_query_and_fragment:
        url = parse_path(url).pathname
    return url.endswith("/")

def with_trailing_slash(url : str = "", respect_query_and_fragment : bool = False) -> str:
    if not respect_query_and_fragment:
        return url if url.endswith("/") else url + "/"
    res = parse_path(url)
    if not res.pathname.endswith("/"):
        res.pathname += "/"
    return stringify_parsed_url(res)

def without_trailing_slash(url : str = "", respect_query_and_fragment : bool = False) -> str:
    if not respect_query_and_fragment:
        return (url[:-1] or "/") if url.endswith("/") else url
    res = parse_path(url)
    if res.pathname.endswith("/"):
        res.pathname = res.pathname[:-1] or "/"
    return stringify_parsed_url(res)

def has_leading_slash(url : str = "") -> bool:
    return url.startswith("/")

def with_leading_slash(url : str = "") -> str:
    return url if url.startswith("/") else "/" + url

def without_leading_slash(url : str = "") -> str:
    return (url[1:] or "/") if url.startswith("/") else url

def join_url(base : str | None = None, *inputs : str | None) -> str:
    res = base or ""
    for e in inputs:
        if not e or e == "/":
            continue
        res = with_trailing_slash(res) + without_leading_slash(e) if res else e
    return res

def get_query(url : str) -> QueryObject:
    return parse_url(url).query

def with_query(url : str, query : QueryObject) -> str:
    """Merge `query` into `url`'s query. Keys with `None` values get removed."""
    res = parse_url(url)
    merged = res.query
    for k, v in query.items():
        if v is None:
            merged.pop(k, None)
        else:
            merged[k] = v
    res.search = stringify_query(merged)
    return stringify_parsed_url(res)

def test_join_url() -> None:
    tests : list[tuple[list[str | None], str]] = [
        ([], ""),
        (["/"], "/"),
        ([None, "./"], "./"),
        (["/a"], "/a"),
        (["a", "b"], "a/b"),
        (["/", "/b"], "/b"),
        (["a", "b/", "c"], "a/b/c"),
        (["a", "b/", "/c"], "a/b/c"),
        (["https://example.com", "/a", "b/"], "https://example.com/a/b/"),
        (["https://example.com/", "/", "", None, "a"], "https://example.com/a"),
    ]

    for inputs, expected in tests:
        scheck(inputs, "join_url", join_url(*inputs), expected)

def test_slashes() -> None:
    def check(func : _t.Callable[..., _t.Any], value : str, expected : _t.Any, *args : _t.Any) -> None:
        scheck(value, func.__name__, func(value, *args), expected)

    check(is_relative, "./a", True)
    check(is_relative, "../a", True)
    check(is_relative, "/a", False)
    check(is_relative, ".a", False)

    check(has_trailing_slash, "/a/", True)
    check(has_trailing_slash, "/a/?b#c", False)
    check(has_trailing_slash, "/a/?b#c", True, True)

    check(with_trailing_slash, "", "/")
    check(with_trailing_slash, "/a", "/a/")
    check(with_trailing_slash, "/a/", "/a/")
    check(with_trailing_slash, "/a?b/#c", "/a?b/#c/")
    check(with_trailing_slash, "/a?b/#c", "/a/?b/#c", True)
    check(with_trailing_slash, "/a/?b", "/a/?b", True)

    check(without_trailing_slash, "/a/", "/a")
    check(without_trailing_slash, "/", "/")
    check(without_trailing_slash, "/a", "/a")
    check(without_trailing_slash, "/a/?b", "/a/?b")
    check(without_trailing_slash, "/a/?b", "/a?b", True)
    check(without_trailing_slash, "/?b#c", "/?b#c", True)

    check(has_leading_slash, "/a", True)
    check(has_leading_slash, "a", False)
    check(with_leading_slash, "a", "/a")
    check(with_leading_slash, "/a", "/a")
    check(without_leading_slash, "/a", "a")
    check(without_leading_slash, "/", "/")
    check(without_leading_slash, "a", "a")

def test_get_query() -> None:
    scheck("get_query", "get_query", get_query("https://example.com/?a=1&a=2&b=x+y#c"), {"a": ["1", "2"], "b": "x y"})
    scheck("get_query", "get_query", get_query("https://example.com/"), {})

def test_with_query() -> None:
    def check(url : str, query : QueryObject, expected : str) -> None:
        scheck((url, query), "with_query", with_query(url, query), expected)

    check("https://example.com/a", {"b": "c"}, "https://example.com/a?b=c")
    check("https://example.com/a?x=1#h", {"y": ["2", "3"]}, "https://example.com/a?x=1&y=2&y=3#h")
    check("https://example.com/a?x=1&y=2", {"x": None}, "https://example.com/a?y=2")
    check("https://example.com/a?x=1", {"x": "a b"}, "https://example.com/a?x=a+b")
    check("//example.com?x=1", {"x": None}, "//example.com")
    check("/a", {"f": {"k": "v"}}, "/a?f[k]=v")
