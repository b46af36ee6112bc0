"""Tests for JNLP detection and http_ticket rewriting."""

import pytest
from jnlp_ticket_filter.jnlp import (
    decode_credential,
    find_ticket_spans,
    is_jnlp,
    rewrite_jnlp,
)

JNLP_DOCUMENT = """<?xml version="1.0" encoding="utf-8"?>
<jnlp spec="1.0+" codebase="https://apps.example.com/">
  <application-desc main-class="com.example.Console">
    <param name="host" value="apps.example.com"/>
    <param name="http_ticket" value="ABCDEF"/>
  </application-desc>
</jnlp>
"""


class TestIsJnlp:
    """Tests for is_jnlp function."""

    def test_jnlp_with_ticket(self):
        assert is_jnlp(JNLP_DOCUMENT) is True

    def test_missing_root_marker(self):
        """No <jnlp tag means not eligible."""
        assert is_jnlp('<html><param name="http_ticket" value="x"></html>') is False

    def test_missing_ticket_param(self):
        """No http_ticket means not eligible."""
        assert is_jnlp('<jnlp><param name="host" value="x"/></jnlp>') is False

    def test_empty(self):
        assert is_jnlp("") is False


class TestFindTicketSpans:
    """Tests for find_ticket_spans function."""

    def test_single_span(self):
        """Span splits into prefix, value and closing quote."""
        spans = find_ticket_spans(JNLP_DOCUMENT)
        assert len(spans) == 1
        span = spans[0]
        assert span.prefix == '<param name="http_ticket" value="'
        assert span.value == "ABCDEF"
        assert span.suffix == '"'
        assert JNLP_DOCUMENT[span.start:span.end] == span.prefix + span.value + span.suffix

    def test_value_first_order(self):
        """Value-first attribute order is located too."""
        body = '<jnlp><param value="V1" name="http_ticket"/></jnlp>'
        spans = find_ticket_spans(body)
        assert len(spans) == 1
        assert spans[0].prefix == '<param value="'
        assert spans[0].value == "V1"
        assert spans[0].suffix == '" name="http_ticket"'

    def test_multiple_in_document_order(self):
        body = (
            '<param value="B" name="http_ticket"/>'
            '<param name="http_ticket" value="A"/>'
        )
        spans = find_ticket_spans(body)
        assert [span.value for span in spans] == ["B", "A"]

    def test_other_params_ignored(self):
        body = '<param name="http_ticket_old" value="x"/><param name="host" value="y"/>'
        assert find_ticket_spans(body) == []

    def test_empty_value_not_matched(self):
        assert find_ticket_spans('<param name="http_ticket" value=""/>') == []


class TestDecodeCredential:
    """Tests for decode_credential function."""

    def test_percent_decoding(self):
        assert decode_credential("a%3Db") == "a=b"

    def test_newlines_stripped(self):
        assert decode_credential("ab%0Acd\n") == "abcd"

    def test_trimmed(self):
        assert decode_credential("%20%20token%20") == "token"

    def test_plus_is_literal(self):
        assert decode_credential("a+b") == "a+b"

    def test_invalid_utf8_falls_back_to_empty(self):
        assert decode_credential("abc%FF") == ""

    def test_malformed_escape_left_as_is(self):
        assert decode_credential("100%") == "100%"


class TestRewriteJnlp:
    """Tests for rewrite_jnlp function."""

    def test_scenario_basic(self):
        """Value gets the token and credential appended."""
        body = '<jnlp><param name="http_ticket" value="T1"></jnlp>'
        result = rewrite_jnlp(body, "1000.0-ABC=", "sess1")
        assert result == '<jnlp><param name="http_ticket" value="T1++1000.0-ABC=++sess1"></jnlp>'

    def test_only_value_changes(self):
        """Prefix through value=" and closing quote are byte-identical."""
        result = rewrite_jnlp(JNLP_DOCUMENT, "1.0-S=", "c")
        before, _, after = JNLP_DOCUMENT.partition("ABCDEF")
        assert result == before + "ABCDEF++1.0-S=++c" + after

    def test_credential_decoded(self):
        body = '<jnlp><param name="http_ticket" value="T1"></jnlp>'
        result = rewrite_jnlp(body, "1.0-S=", "a%3Db%0A")
        assert 'value="T1++1.0-S=++a=b"' in result

    def test_undecodable_credential(self):
        """Credential portion becomes empty, the rewrite still happens."""
        body = '<jnlp><param name="http_ticket" value="T1"></jnlp>'
        result = rewrite_jnlp(body, "1.0-S=", "%C3%28")
        assert 'value="T1++1.0-S=++"' in result

    def test_replace_all(self):
        """Every occurrence is rewritten identically."""
        body = (
            '<jnlp><param name="http_ticket" value="A"/>'
            '<param  name="http_ticket"\n value="B"/></jnlp>'
        )
        result = rewrite_jnlp(body, "1.0-S=", "c")
        assert 'value="A++1.0-S=++c"' in result
        assert '<param  name="http_ticket"\n value="B++1.0-S=++c"' in result

    def test_value_first_rewritten(self):
        body = '<jnlp><param value="V" name="http_ticket"/></jnlp>'
        result = rewrite_jnlp(body, "1.0-S=", "c")
        assert result == '<jnlp><param value="V++1.0-S=++c" name="http_ticket"/></jnlp>'

    @pytest.mark.parametrize("body", [
        "",
        "<jnlp></jnlp>",
        '<jnlp><param name="http_ticket"/></jnlp>',
        '<jnlp>http_ticket value="x"</jnlp>',
    ])
    def test_no_match_unchanged(self, body):
        """Bodies without a matching param are returned unchanged."""
        assert rewrite_jnlp(body, "1.0-S=", "c") == body
