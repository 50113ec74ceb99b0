import pytest

from api_docs_reader.services.extractors.formats import (
    TRUNCATION_MARKER,
    detect_format,
    normalize,
    truncate,
)


class TestTruncate:

    def test_content_within_budget_is_unchanged(self):
        content = "line one\nline two"
        assert truncate(content, 100) == content
        assert truncate(content, len(content)) == content

    @pytest.mark.parametrize("length,limit", [(1000, 100), (250, 249), (5000, 4096)])
    def test_result_length_is_bounded(self, length, limit):
        result = truncate("a" * length, limit)
        assert len(result) <= limit + len(TRUNCATION_MARKER)
        assert result.endswith(TRUNCATION_MARKER)

    def test_cuts_at_late_line_boundary(self):
        content = "x" * 90 + "\n" + "y" * 50
        assert truncate(content, 100) == "x" * 90 + TRUNCATION_MARKER

    def test_ignores_early_line_boundary(self):
        content = "x" * 50 + "\n" + "y" * 100
        assert truncate(content, 100) == content[:100] + TRUNCATION_MARKER

    def test_hard_cut_without_smart_truncation(self):
        content = "x" * 90 + "\n" + "y" * 50
        assert truncate(content, 100, smart=False) == content[:100] + TRUNCATION_MARKER

    @pytest.mark.parametrize("content", [
        "a" * 500,
        "\n".join(["row"] * 200),
        "x" * 90 + "\n" + "y" * 50,
    ])
    def test_idempotent(self, content):
        once = truncate(content, 100)
        assert truncate(once, 100) == once


class TestDetectFormat:

    def test_json_content_type(self):
        assert detect_format("{}", "application/json; charset=utf-8") == "json"
        assert detect_format("{}", "application/vnd.oai.openapi+json") == "json"

    def test_html_content_type(self):
        assert detect_format("<p>hi</p>", "text/html") == "html"

    def test_sniffs_json_without_content_type(self):
        assert detect_format('  {"a": 1}', "text/plain") == "json"

    def test_sniffs_html_without_content_type(self):
        assert detect_format("<!DOCTYPE html><html><body>x</body></html>", "") == "html"

    def test_plain_text(self):
        assert detect_format("just words", "text/plain") == "text"


class TestNormalize:

    def test_pretty_prints_json(self):
        assert normalize('{"a":1,"b":[1,2]}', "application/json") == '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}'

    def test_malformed_json_is_returned_unchanged(self):
        broken = '{"a": 1,'
        assert normalize(broken, "application/json") == broken

    def test_non_json_is_untouched(self):
        assert normalize("<p>x</p>", "text/html") == "<p>x</p>"
