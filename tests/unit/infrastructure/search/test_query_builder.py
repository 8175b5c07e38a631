"""Unit tests for provider query construction."""

from src.infrastructure.search.query_builder import build_search_query


def test_query_mentions_degree_and_limit():
    query = build_search_query("Mechanical Engineering", limit=30)

    assert "top 30 universities" in query
    assert "Mechanical Engineering degree" in query


def test_query_asks_for_every_result_section():
    query = build_search_query("MBA")

    for section in (
        "Post-Study Work",
        "employability",
        "Hidden costs",
        "Scholarship",
        "Accreditation",
    ):
        assert section in query
