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

"""Escaping and un-escaping of URL components.

Every function here works like its counterpart in browser routers: the
encoders escape everything `encodeURI` would escape, and then un-escape
(or additionally escape) a handful of characters depending on which part
of the URL the result is going to end up in.
"""

import idna as _idna
import logging as _logging
import re as _re
import typing as _t
import urllib.parse as _up

from kisstdlib.exceptions import *

def scheck(v : _t.Any, what : str, value : _t.Any, expected : _t.Any) -> None:
    if value != expected:
        raise CatastrophicFailure("while evaluating %s of %s, expected %s, got %s", what, repr(v), repr(expected), repr(value))

### Encoding

# what `encodeURI` leaves alone, in addition to `urllib.parse.quote`'s own `_.-~`
encode_uri_safe_str = ";,/?:@&=+$!*'()#"

Encodable = str | int | float

def common_encode(text : Encodable) -> str:
    """Encode characters that need to be encoded in the path, search, and
       hash sections of the URL.
    """
    return _up.quote(str(text), safe=encode_uri_safe_str) \
              .replace("%7C", "|") \
              .replace("%5B", "[") \
              .replace("%5D", "]")

def encode_hash(text : Encodable) -> str:
    """Encode characters that need to be encoded in the hash section of the URL."""
    return common_encode(text) \
              .replace("%7B", "{") \
              .replace("%7D", "}") \
              .replace("%5E", "^")

def encode_query_value(text : Encodable) -> str:
    """Encode a query value.

       Spaces become `+`, while literal `+` characters get escaped to keep
       the two distinguishable.
    """
    return common_encode(text) \
              .replace("+", "%2B") \
              .replace("%20", "+") \
              .replace("#", "%23") \
              .replace("&", "%26") \
              .replace("%60", "`") \
              .replace("%7B", "{") \
              .replace("%7D", "}") \
              .replace("%5E", "^")

def encode_query_key(text : Encodable) -> str:
    """Like `encode_query_value`, but also encodes `=`."""
    return encode_query_value(text).replace("=", "%3D")

def encode_path(text : Encodable) -> str:
    return common_encode(text).replace("#", "%23").replace("?", "%3F")

def encode_param(text : Encodable) -> str:
    """Like `encode_path`, but also encodes `/`, so that the result can be
       used as a single path component.
    """
    return encode_path(text).replace("/", "%2F")

def encode_search_param(key : str, value : str | list[str] | None) -> str:
    if not value:
        return key
    elif isinstance(value, list):
        return "&".join([f"{key}={encode_param(v)}" for v in value])
    return f"{key}={encode_param(value)}"

def test_encode() -> None:
    def check(func : _t.Callable[[Encodable], str], cases : list[tuple[Encodable, str]]) -> None:
        for value, expected in cases:
            scheck(value, func.__name__, func(value), expected)

    check(common_encode, [
        ("abc", "abc"),
        ("a b", "a%20b"),
        ("[a|b]", "[a|b]"),
        ("/a?b=c&d#e", "/a?b=c&d#e"),
        ("100%", "100%25"),
        ("ü", "%C3%BC"),
        (42, "42"),
    ])

    check(encode_hash, [
        ("{a^b}", "{a^b}"),
        ("a b", "a%20b"),
        ("`", "%60"),
    ])

    check(encode_query_value, [
        ("a b", "a+b"),
        ("a+b", "a%2Bb"),
        ("a#b", "a%23b"),
        ("a&b", "a%26b"),
        ("a=b", "a=b"),
        ("`{^}`", "`{^}`"),
        ("[]", "[]"),
        (1.5, "1.5"),
    ])

    check(encode_query_key, [
        ("a=b", "a%3Db"),
        ("a b&c", "a+b%26c"),
    ])

    check(encode_path, [
        ("/a b/c", "/a%20b/c"),
        ("a#b?c", "a%23b%3Fc"),
        ("{x}", "%7Bx%7D"),
    ])

    check(encode_param, [
        ("a/b", "a%2Fb"),
        ("a#/?", "a%23%2F%3F"),
    ])

def test_encode_search_param() -> None:
    scheck("empty", "encode_search_param", encode_search_param("a", ""), "a")
    scheck("none", "encode_search_param", encode_search_param("a", None), "a")
    scheck("str", "encode_search_param", encode_search_param("a", "b/c"), "a=b%2Fc")
    scheck("list", "encode_search_param", encode_search_param("a", ["1", "2 3"]), "a=1&a=2%203")

### Decoding

# `decodeURIComponent` refuses these
malformed_escape_re = _re.compile(r"%(?![0-9A-Fa-f]{2})")

def decode(text : Encodable) -> str:
    """Percent-decode `text`. Returns the original text when it contains
       malformed escapes or when the escapes do not form valid UTF-8.
    """
    text = str(text)
    if malformed_escape_re.search(text) is not None:
        return text
    try:
        return _up.unquote(text, errors="strict")
    except UnicodeDecodeError:
        return text

def decode_query_value(text : str) -> str:
    """Like `decode`, but treats `+` as a space first."""
    return decode(text.replace("+", " "))

def test_decode() -> None:
    def check(value : str, expected : str) -> None:
        scheck(value, "decode", decode(value), expected)

    check("", "")
    check("abc", "abc")
    check("a%20b", "a b")
    check("a%2Fb%3F", "a/b?")
    check("%C3%BC", "ü")
    check("a+b", "a+b")
    # malformed, returned as-is
    check("%", "%")
    check("100%", "100%")
    check("%zz", "%zz")
    check("%C3%BC%", "%C3%BC%")
    # not UTF-8
    check("%FF", "%FF")
    check("%C3", "%C3")

    scheck(42, "decode", decode(42), "42")

def test_decode_query_value() -> None:
    def check(value : str, expected : str) -> None:
        scheck(value, "decode_query_value", decode_query_value(value), expected)

    check("a+b", "a b")
    check("a%2Bb", "a+b")
    check("a%20b+c", "a b c")
    check("%zz+", "%zz ")

    for value in ["a b", "a+b", "a & b = c", "#1 `{^}`", "ü+ü"]:
        scheck(value, "decode_query_value . encode_query_value", decode_query_value(encode_query_value(value)), value)

### Hostnames

def punycode_labels(name : str) -> str:
    res : list[str] = []
    for e in name.lower().split("."):
        res.append(e if e.isascii() else "xn--" + e.encode("punycode").decode("ascii"))
    return ".".join(res)

def encode_host(name : str = "") -> str:
    """Turn a possibly-unicode hostname into its ASCII (IDNA) form."""
    if name.isascii():
        return name

    try:
        return _idna.encode(name, uts46=True).decode("ascii")
    except _idna.IDNAError as err:
        _logging.warning("`encode_host` punycoded labels of `%s` as-is because `idna` module failed to encode it: %s", name, repr(err))
        return punycode_labels(name)

def test_encode_host() -> None:
    def check(value : str, expected : str) -> None:
        scheck(value, "encode_host", encode_host(value), expected)

    check("", "")
    check("example.org", "example.org")
    check("Example.ORG", "Example.ORG")
    check("localhost_1", "localhost_1")
    check("münchen.de", "xn--mnchen-3ya.de")
    check("MÜNCHEN.de", "xn--mnchen-3ya.de")
    check("例え.テスト", "xn--r8jz45g.xn--zckzah")

    # `idna` rejects `_`, so labels get punycoded directly
    res = encode_host("ex_ü.example.org")
    if not res.isascii() or not res.startswith("xn--ex_-") or not res.endswith(".example.org"):
        raise CatastrophicFailure("while evaluating encode_host of %s, got %s", repr("ex_ü.example.org"), repr(res))
    scheck("EX_Ü.Example.ORG", "encode_host", encode_host("EX_Ü.Example.ORG"), res)
