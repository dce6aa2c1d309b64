"""Command-line entry point for checking retrieval and web search.

Usage examples:
    # Show the context block that would be injected for a message
    context-retrieval recall "what did I decide about the trip?"

    # Lower the similarity threshold
    context-retrieval recall "trip" --min-score 0.35

    # Web search through the configured engines
    context-retrieval search "python 3.13 release notes" --count 3
"""

import argparse
import asyncio
import logging
import sys

from src.config import settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


async def _recall(query: str, channel: str, min_score: float | None) -> int:
    from src.llm.prompt import build_retrieval_prompt
    from src.memory.retriever import auto_retrieve

    result = await auto_retrieve(query, channel, min_score=min_score)
    prompt = build_retrieval_prompt(result)
    print(prompt or "(no relevant context)")
    return 0


async def _search(query: str, count: int) -> int:
    from src.search.coordinator import web_search

    outcome = await web_search(query, max_results=count)
    print(outcome.text)
    return 0 if outcome.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-retrieval",
        description="Query semantic memory and web search from the command line.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    recall = sub.add_parser("recall", help="Retrieve memories and notes for a message")
    recall.add_argument("query")
    recall.add_argument("--channel", default="cli")
    recall.add_argument("--min-score", type=float, default=None)

    search = sub.add_parser("search", help="Search the web")
    search.add_argument("query")
    search.add_argument("--count", type=int, default=5)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "recall":
        return asyncio.run(_recall(args.query, args.channel, args.min_score))
    return asyncio.run(_search(args.query, args.count))


if __name__ == "__main__":
    sys.exit(main())
