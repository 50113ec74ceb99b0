import pytest

from api_docs_reader.services.extractors.spa import extract_fallback, is_spa
from helpers import PLAIN_PROSE, SPA_HTML, STATIC_HTML


class TestIsSpa:

    def test_empty_mount_point_with_single_script(self):
        assert is_spa(SPA_HTML) is True

    @pytest.mark.parametrize("body", [
        '<html><body><noscript>You need to enable JavaScript to run this app.</noscript><div id="app">x</div></body></html>',
        '<html><body><div id="__next" data-reactroot="">loading</div></body></html>',
        '<html><body><script id="__NEXT_DATA__" type="application/json">{}</script></body></html>',
        '<html><head><script src="/bundle.js"></script></head><body></body></html>',
    ])
    def test_signature_patterns(self, body):
        assert is_spa(body) is True

    def test_prose_is_static(self):
        assert len(PLAIN_PROSE) >= 100
        assert is_spa(PLAIN_PROSE) is False

    def test_documentation_page_is_static(self):
        assert is_spa(STATIC_HTML) is False

    def test_single_script_with_real_content_is_static(self):
        body = "<html><body><script src='/analytics.js'></script><p>" + "Real documentation text. " * 10 + "</p></body></html>"
        assert is_spa(body) is False

    def test_empty_body(self):
        assert is_spa("") is False


class TestExtractFallback:

    def test_extracts_title_description_and_scripts(self):
        info = extract_fallback(SPA_HTML, "https://portal.example.com/guide")

        assert "Page title: Developer Portal" in info
        assert "Description: Docs for the Acme API" in info
        assert "- /static/js/main.4f2a.js" in info
        assert "https://portal.example.com/openapi.json" in info
        assert "Suggestions:" in info

    def test_url_keywords_add_guidance(self):
        info = extract_fallback(SPA_HTML, "https://example.com/oauth/docs/api")

        assert "OAuth flow (inferred from URL):" in info
        assert "Authentication (inferred from URL):" in info
        assert "API reference (inferred from URL):" in info

    def test_no_signals_yields_only_troubleshooting(self):
        info = extract_fallback("<html><body></body></html>", "https://example.com/guide")

        assert info.startswith("Suggestions:")
        assert "Page title" not in info
        assert "inferred from URL" not in info

    def test_partial_content_extraction_can_be_disabled(self):
        info = extract_fallback(SPA_HTML, "https://example.com/guide", from_partial_content=False)

        assert "Page title" not in info
        assert "Suggestions:" in info

    def test_never_fails_on_garbage(self):
        info = extract_fallback("<<<>>>\x00\x01 not html", "")
        assert "Suggestions:" in info
