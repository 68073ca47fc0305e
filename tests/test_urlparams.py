"""Tests for the settings <-> query string codec."""

from __future__ import annotations

import logging

import pytest

from passlink.errors import Diagnostic
from passlink.security.passwords import PasswordSettings
from passlink.urlparams import (
    DEFAULTS,
    PARAM_KEYS,
    build_query_string,
    decode,
    decode_with_diagnostics,
    encode,
    parse_query_string,
    share_url,
)

ALL_FLAGS = dict(
    exclude_lowercase=True,
    exclude_uppercase=True,
    exclude_numbers=True,
    exclude_symbols=True,
    rule_no_leading_special=True,
)


class TestConstants:
    def test_defaults(self):
        assert DEFAULTS == PasswordSettings(
            length=20,
            exclude_lowercase=False,
            exclude_uppercase=False,
            exclude_numbers=False,
            exclude_symbols=False,
            excluded_chars="",
            rule_no_leading_special=False,
        )

    def test_key_names(self):
        assert dict(PARAM_KEYS) == {
            "length": "len",
            "exclude_lowercase": "exLower",
            "exclude_uppercase": "exUpper",
            "exclude_numbers": "exNum",
            "exclude_symbols": "exSym",
            "rule_no_leading_special": "ruleNoLead",
            "excluded_chars": "exc",
        }

    def test_tables_are_immutable(self):
        with pytest.raises(TypeError):
            PARAM_KEYS["length"] = "l"  # type: ignore[index]
        with pytest.raises(AttributeError):
            DEFAULTS.length = 10  # type: ignore[misc]


class TestDecode:
    def test_empty_query_gives_defaults(self):
        assert decode("") == DEFAULTS
        assert decode([]) == DEFAULTS
        assert decode("http://localhost:8080/") == DEFAULTS

    def test_length(self):
        assert decode("?len=24").length == 24

    @pytest.mark.parametrize("raw", ["0", "129", "-5", "abc", "99999999999"])
    def test_bad_length_keeps_default(self, raw):
        settings, diagnostics = decode_with_diagnostics([("len", raw)])
        assert settings.length == 20
        assert [d.key for d in diagnostics] == ["len"]

    def test_empty_length_is_silent(self):
        settings, diagnostics = decode_with_diagnostics("len=")
        assert settings.length == 20
        assert diagnostics == []

    def test_length_parses_leading_digits(self):
        assert decode("len=24abc").length == 24
        assert decode("len=%2012").length == 12

    def test_length_bounds(self):
        assert decode("len=1").length == 1
        assert decode("len=128").length == 128

    def test_excluded_classes(self):
        settings = decode("http://localhost:8080/?exLower&exNum")
        assert settings.exclude_lowercase is True
        assert settings.exclude_numbers is True
        assert settings.exclude_uppercase is False
        assert settings.exclude_symbols is False

    @pytest.mark.parametrize("value", ["", "0", "false", "no"])
    def test_flag_presence_means_true(self, value):
        assert decode([("exSym", value)]).exclude_symbols is True

    def test_rule(self):
        assert decode("?ruleNoLead").rule_no_leading_special is True

    def test_excluded_chars(self):
        assert decode("?exc=abc123").excluded_chars == "abc123"

    def test_excluded_chars_percent_decoded(self):
        assert decode("?exc=%40%23%24").excluded_chars == "@#$"
        assert decode([("exc", "%40%23%24")]).excluded_chars == "@#$"

    def test_excluded_chars_plus_is_literal_in_pair(self):
        assert decode([("exc", "a+b")]).excluded_chars == "a+b"

    @pytest.mark.parametrize("raw", ["%", "abc%zz", "%E0%A4%A", "%FF"])
    def test_bad_excluded_chars_keeps_default(self, raw):
        settings, diagnostics = decode_with_diagnostics([("exc", raw), ("len", "18")])
        assert settings.excluded_chars == ""
        assert settings.length == 18
        assert diagnostics and diagnostics[0].key == "exc"
        assert isinstance(diagnostics[0], Diagnostic)

    def test_decode_logs_diagnostics(self, caplog):
        with caplog.at_level(logging.WARNING, logger="passlink"):
            settings = decode([("exc", "%zz"), ("len", "500")])
        assert settings == DEFAULTS
        assert "exc" in caplog.text
        assert "len" in caplog.text

    def test_combined(self):
        settings = decode("http://localhost:8080/?len=18&exUpper&exSym&ruleNoLead&exc=xyz789")
        assert settings == PasswordSettings(
            length=18,
            exclude_uppercase=True,
            exclude_symbols=True,
            rule_no_leading_special=True,
            excluded_chars="xyz789",
        )

    def test_unknown_keys_ignored(self):
        assert decode("foo=1&bar&utm_source=x") == DEFAULTS

    def test_first_repeated_key_wins(self):
        assert decode("len=10&len=30").length == 10

    def test_mapping_input(self):
        assert decode({"len": ["12"], "exNum": [""]}) == PasswordSettings(length=12, exclude_numbers=True)
        assert decode({"exLower": None}).exclude_lowercase is True


class TestEncode:
    def test_defaults_encode_to_nothing(self):
        assert encode(DEFAULTS) == []
        assert build_query_string(encode(DEFAULTS)) == ""

    def test_key_order(self):
        settings = PasswordSettings(length=12, excluded_chars="ab", **ALL_FLAGS)
        assert [k for k, _ in encode(settings)] == [
            "len", "exLower", "exUpper", "exNum", "exSym", "ruleNoLead", "exc",
        ]

    def test_flags_have_empty_values(self):
        assert encode(PasswordSettings(exclude_numbers=True)) == [("exNum", "")]

    def test_excluded_chars_percent_encoded(self):
        assert encode(PasswordSettings(excluded_chars="@#$")) == [("exc", "%40%23%24")]
        assert encode(PasswordSettings(excluded_chars="a b&")) == [("exc", "a%20b%26")]

    def test_uri_component_safe_characters(self):
        assert encode(PasswordSettings(excluded_chars="-_.!~*'()")) == [("exc", "-_.!~*'()")]

    def test_query_string(self):
        settings = PasswordSettings(length=24, exclude_lowercase=True, excluded_chars="@")
        assert build_query_string(encode(settings)) == "len=24&exLower=&exc=%2540"


ROUND_TRIP = [
    DEFAULTS,
    PasswordSettings(length=1),
    PasswordSettings(length=128),
    PasswordSettings(length=20, excluded_chars=""),
    PasswordSettings(length=7, **ALL_FLAGS),
    PasswordSettings(length=33, exclude_symbols=True, excluded_chars="O0Il1"),
    PasswordSettings(excluded_chars="!@#$%^&*()_+~`|}{[]:;?><,./-=\\"),
    PasswordSettings(excluded_chars="%25 + & = ? #"),
    PasswordSettings(excluded_chars="äöü€"),
]


class TestRoundTrip:
    @pytest.mark.parametrize("settings", ROUND_TRIP)
    def test_pairs(self, settings):
        assert decode(encode(settings)) == settings

    @pytest.mark.parametrize("settings", ROUND_TRIP)
    def test_query_string(self, settings):
        qs = build_query_string(encode(settings))
        settings_back, diagnostics = decode_with_diagnostics(qs)
        assert settings_back == settings
        assert diagnostics == []


class TestQueryStringHelpers:
    def test_parse_bare_and_url(self):
        assert parse_query_string("len=24&exLower") == [("len", "24"), ("exLower", "")]
        assert parse_query_string("?exNum") == [("exNum", "")]
        assert parse_query_string("https://x.test/app?len=9#frag") == [("len", "9")]
        assert parse_query_string("https://x.test/app") == []
        assert parse_query_string("/gen?len=9") == [("len", "9")]

    def test_bare_query_keeps_question_mark_and_colon(self):
        assert parse_query_string("len=12&exc=a?b:c") == [("len", "12"), ("exc", "a?b:c")]
        assert parse_query_string("?exc=x://y?z") == [("exc", "x://y?z")]

    def test_decode_bare_query_with_literal_question_mark(self):
        settings, diagnostics = decode_with_diagnostics("len=12&exc=a?b")
        assert settings.length == 12
        assert settings.excluded_chars == "a?b"
        assert diagnostics == []
        assert decode("exSym&exc=:?").excluded_chars == ":?"


class TestShareUrl:
    def test_defaults_give_bare_path(self):
        assert share_url("http://localhost:5173/", DEFAULTS) == "http://localhost:5173/"
        assert share_url("https://pw.example.com", DEFAULTS) == "https://pw.example.com/"

    def test_replaces_existing_query(self):
        url = share_url("https://pw.example.com/gen?len=99&old=1#top", PasswordSettings(length=24, exclude_numbers=True))
        assert url == "https://pw.example.com/gen?len=24&exNum="

    def test_url_decodes_back(self):
        settings = PasswordSettings(length=16, rule_no_leading_special=True, excluded_chars="O0")
        assert decode(share_url("http://localhost:5173/", settings)) == settings
