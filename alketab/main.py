"""Command-line demo client for the AlKetab search API."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Optional, Sequence

import httpx

from alketab.config import get_settings
from alketab.logging import configure_logging, logger
from alketab.services.search import SearchClient
from alketab.services.session import Phase, SearchSession, SessionState


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for a search run."""
    parser = argparse.ArgumentParser(
        description="Ask the AlKetab API a natural-language question about the Quran."
    )
    parser.add_argument("query", help="Free-text search query.")
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Maximum number of result pages to fetch (default: 1).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the accumulated verses as JSON instead of text rows.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override ALKETAB_LOG_LEVEL (default: WARNING).",
    )
    return parser.parse_args(argv)


async def run_search(
    session: SearchSession,
    query: str,
    *,
    pages: int = 1,
) -> SessionState:
    await session.start_search(query)

    while (
        session.state.phase is Phase.success
        and session.state.has_more_pages
        and session.state.current_page < pages
    ):
        previous_page = session.state.current_page
        await session.load_more()
        if session.state.last_error is not None or session.state.current_page <= previous_page:
            break
    return session.state


def render_state(state: SessionState, *, as_json: bool = False) -> str:
    if as_json:
        payload = {
            "query": state.query,
            "sort_order": state.sort_order.value,
            "current_page": state.current_page,
            "total_pages": state.total_pages,
            "total_results": state.total_results,
            "ai_explanation": state.ai_explanation,
            "error": state.last_error_message,
            "verses": [verse.model_dump(mode="json") for verse in state.verses],
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)

    if state.phase is Phase.error:
        return state.last_error_message or "Search failed"

    lines = []
    if state.ai_explanation:
        lines.extend([state.ai_explanation, ""])
    for verse in state.verses:
        lines.append(
            f"[{verse.surah_name_alt or verse.surah_id}:{verse.verse_number}] {verse.text_plain}"
        )
    lines.append("")
    lines.append(
        f"Page {state.current_page}/{state.total_pages}, {state.total_results} results, "
        f"sorted by {state.sort_order.display_name}"
    )
    if state.last_error_message:
        lines.append(f"Warning: {state.last_error_message}")
    return "\n".join(lines)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    logger.info("cli_search_starting", environment=settings.environment, query=args.query)
    async with httpx.AsyncClient() as http_client:
        session = SearchSession(SearchClient(http_client, settings=settings.api))
        state = await run_search(session, args.query, pages=args.pages)

    logger.info("cli_search_finished", phase=state.phase.value, verses=len(state.verses))
    print(render_state(state, as_json=args.json))
    return 1 if state.phase is Phase.error else 0


def cli() -> None:
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
