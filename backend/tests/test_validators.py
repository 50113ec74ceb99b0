import pytest

from api_docs_reader.validators import InvalidDocUrlError, validate_doc_url


def test_valid_url_is_stripped():
    assert validate_doc_url("  https://docs.example.com/api  ") == "https://docs.example.com/api"


@pytest.mark.parametrize("url, code", [
    ("", "EMPTY_URL"),
    ("   ", "EMPTY_URL"),
    (None, "EMPTY_URL"),
    ("ftp://docs.example.com/file", "INVALID_URL_SCHEME"),
    ("docs.example.com/api", "INVALID_URL_SCHEME"),
    ("https:///only-a-path", "INVALID_URL_FORMAT"),
    ("https://docs.example.com:abc/x", "INVALID_URL_FORMAT"),
    ("http://169.254.169.254/latest/meta-data/", "METADATA_SERVICE_BLOCKED"),
    ("http://metadata.google.internal/computeMetadata/v1/", "METADATA_SERVICE_BLOCKED"),
    ("https://example.com/" + "a" * 2048, "INVALID_URL_LENGTH"),
])
def test_invalid_urls(url, code):
    with pytest.raises(InvalidDocUrlError) as exc_info:
        validate_doc_url(url)

    assert exc_info.value.code == code


def test_error_is_a_value_error():
    with pytest.raises(ValueError, match="Only http and https"):
        validate_doc_url("file:///etc/passwd")
