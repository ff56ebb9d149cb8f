"""Unit tests for omnibox URL normalisation and tab titles."""

from __future__ import annotations

import pytest

from pulse_shell.workspace.urls import FALLBACK_TAB_TITLE, SEARCH_ROOT, normalize_url, title_from_url


def test_bare_host_gets_https() -> None:
    assert normalize_url("example.com") == "https://example.com"


def test_phrase_becomes_search_query() -> None:
    assert normalize_url("how to cook rice") == "https://duckduckgo.com/?q=how%20to%20cook%20rice"


@pytest.mark.parametrize("value", ["", "   ", "\t\n"])
def test_blank_maps_to_search_root(value: str) -> None:
    assert normalize_url(value) == SEARCH_ROOT


def test_input_with_scheme_passes_through_trimmed() -> None:
    assert normalize_url("https://github.com/tauri-apps/cef-rs") == "https://github.com/tauri-apps/cef-rs"
    assert normalize_url("  ftp://files.example/a b  ") == "ftp://files.example/a b"


def test_word_without_dot_is_a_search() -> None:
    assert normalize_url("localhost") == "https://duckduckgo.com/?q=localhost"


def test_query_is_percent_encoded_like_encode_uri_component() -> None:
    assert normalize_url("c++ & rust") == "https://duckduckgo.com/?q=c%2B%2B%20%26%20rust"
    assert normalize_url("it's (fine)!") == "https://duckduckgo.com/?q=it's%20(fine)!"


def test_already_normalised_url_is_stable() -> None:
    once = normalize_url("how to cook rice")
    assert normalize_url(once) == once


def test_title_strips_leading_www() -> None:
    assert title_from_url("https://www.microsoft.com/edge") == "microsoft.com"
    assert title_from_url("https://ui.shadcn.com/docs") == "ui.shadcn.com"


def test_title_only_strips_www_prefix() -> None:
    assert title_from_url("https://docs.www.example.com") == "docs.www.example.com"


def test_title_falls_back_when_unparseable() -> None:
    assert title_from_url("not a url") == FALLBACK_TAB_TITLE
    assert title_from_url("http://[::1") == FALLBACK_TAB_TITLE
