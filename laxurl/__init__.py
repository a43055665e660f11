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

"""Permissive URL and URL query string parsing and un-parsing."""

from .encoding import common_encode, encode_hash, encode_query_value, encode_query_key, \
    encode_path, encode_param, encode_search_param, decode, decode_query_value, encode_host
from .query import QueryScalar, QueryValue, QueryObject, \
    parse_query, encode_query_item, stringify_query
from .url import ParsedURL, ParsedAuth, ParsedHost, \
    has_protocol, parse_url, parse_path, parse_auth, parse_host, stringify_parsed_url, parse_filename
from .utils import is_relative, \
    has_trailing_slash, with_trailing_slash, without_trailing_slash, \
    has_leading_slash, with_leading_slash, without_leading_slash, \
    join_url, get_query, with_query
