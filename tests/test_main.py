"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from src.main import build_parser, main
from src.memory.models import RetrievalResult, RetrievedMemory
from src.search.models import WebSearchOutcome


def test_parser_recall_defaults():
    args = build_parser().parse_args(["recall", "trip"])
    assert args.command == "recall"
    assert args.query == "trip"
    assert args.channel == "cli"
    assert args.min_score is None


def test_parser_search_count():
    args = build_parser().parse_args(["search", "python", "--count", "3"])
    assert args.command == "search"
    assert args.count == 3


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_recall_prints_context(capsys: pytest.CaptureFixture[str]):
    result = RetrievalResult(
        qdrant_memories=[
            RetrievedMemory(
                content="Trip to Lyon in May",
                score=0.8,
                channel=None,
                timestamp="2026-03-01T10:00:00+00:00",
                time_ago="1 day ago",
                type="summary",
            )
        ]
    )
    with patch("src.memory.retriever.auto_retrieve", new_callable=AsyncMock, return_value=result) as mock_retrieve:
        code = main(["recall", "trip", "--min-score", "0.35"])

    assert code == 0
    mock_retrieve.assert_awaited_once_with("trip", "cli", min_score=0.35)
    assert "Trip to Lyon in May" in capsys.readouterr().out


def test_recall_without_context(capsys: pytest.CaptureFixture[str]):
    with patch("src.memory.retriever.auto_retrieve", new_callable=AsyncMock, return_value=RetrievalResult()):
        code = main(["recall", "nothing"])

    assert code == 0
    assert "(no relevant context)" in capsys.readouterr().out


def test_search_exit_code_reflects_outcome(capsys: pytest.CaptureFixture[str]):
    failed = WebSearchOutcome(success=False, text="No web search engine configured")
    with patch("src.search.coordinator.web_search", new_callable=AsyncMock, return_value=failed):
        assert main(["search", "x"]) == 1
    assert "No web search engine configured" in capsys.readouterr().out

    ok = WebSearchOutcome(success=True, text='SearXNG results for "x":')
    with patch("src.search.coordinator.web_search", new_callable=AsyncMock, return_value=ok) as mock_search:
        assert main(["search", "x", "--count", "2"]) == 0
    mock_search.assert_awaited_once_with("x", max_results=2)
