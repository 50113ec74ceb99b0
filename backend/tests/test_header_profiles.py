from dataclasses import replace

from api_docs_reader.services.fetchers.header_profiles import DEFAULT_ACCEPT, build_header_profiles


def test_rotation_yields_three_distinct_identities(settings):
    profiles = build_header_profiles(settings)

    assert [p.name for p in profiles] == ["chrome-desktop", "firefox-desktop", "safari-macos"]
    assert len({p.headers["User-Agent"] for p in profiles}) == 3
    assert profiles[0].headers["User-Agent"] == settings.user_agent
    assert all(p.headers["Accept"] == DEFAULT_ACCEPT for p in profiles)


def test_single_profile_without_rotation(settings):
    settings = replace(settings, retry_with_different_headers=False, user_agent="docs-bot/1.0")

    profiles = build_header_profiles(settings, {"Authorization": "Bearer abc"})

    assert len(profiles) == 1
    assert profiles[0].name == "default"
    assert profiles[0].headers["User-Agent"] == "docs-bot/1.0"
    assert profiles[0].headers["Authorization"] == "Bearer abc"


def test_caller_headers_override_profile_headers(settings):
    profiles = build_header_profiles(settings, {"Accept": "application/json", "X-Token": "t"})

    for profile in profiles:
        assert profile.headers["Accept"] == "application/json"
        assert profile.headers["X-Token"] == "t"
