"""Tests for eups listing line parsers."""

from stacktools.core.listing import (
    DependencyEdge,
    TagEntry,
    parse_dependency_line,
    parse_dependency_listing,
    parse_tag_line,
    parse_tag_listing,
    parse_version_line,
)

# ============================================================================
# Tag listings
# ============================================================================


def test_parse_tag_line_captures_product_version_and_remainder() -> None:
    entry = parse_tag_line("afw                   16.0+1     w_latest current")

    assert entry == TagEntry(product="afw", version="16.0+1", remainder="w_latest current")


def test_parse_tag_line_without_remainder() -> None:
    assert parse_tag_line("base 1.0") == TagEntry(product="base", version="1.0", remainder="")


def test_parse_tag_line_rejects_blank_and_single_token_lines() -> None:
    assert parse_tag_line("") is None
    assert parse_tag_line("   ") is None
    assert parse_tag_line("lonely") is None


def test_parse_tag_listing_skips_trailing_empty_line() -> None:
    text = "afw 1.0 w_latest\nbase 2.0 w_latest\n"

    entries = parse_tag_listing(text)

    assert [(e.product, e.version) for e in entries] == [("afw", "1.0"), ("base", "2.0")]


# ============================================================================
# Dependency listings
# ============================================================================


def test_parse_dependency_line_plain() -> None:
    assert parse_dependency_line("pkgB 2.0") == DependencyEdge(product="pkgB", version="2.0")


def test_parse_dependency_line_strips_tree_markers() -> None:
    assert parse_dependency_line("|  |utils  12.1") == DependencyEdge("utils", "12.1")
    assert parse_dependency_line("   boost 1.66+2") == DependencyEdge("boost", "1.66+2")


def test_parse_dependency_line_rejects_incomplete_lines() -> None:
    assert parse_dependency_line("") is None
    assert parse_dependency_line("||| ") is None
    assert parse_dependency_line("onlyproduct") is None


def test_parse_dependency_listing_collects_edges_in_order() -> None:
    lines = ["pkgB 2.0", "", "|pkgC 3.0", "garbage"]

    edges = parse_dependency_listing(lines)

    assert edges == [DependencyEdge("pkgB", "2.0"), DependencyEdge("pkgC", "3.0")]


# ============================================================================
# Version listings
# ============================================================================


def test_parse_version_line_takes_first_token() -> None:
    assert parse_version_line("   16.0+1 \tcurrent w_latest setup") == "16.0+1"
    assert parse_version_line("tag:w_latest") == "tag:w_latest"


def test_parse_version_line_blank_is_none() -> None:
    assert parse_version_line("") is None
    assert parse_version_line("   ") is None
