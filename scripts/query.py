#!/usr/bin/env python3
"""
Condominium Act RAG: Query Script

Retrieves ranked sections for a question and prints the grounding context.

Usage:
    python scripts/query.py "What are the board's financial duties?"
    python scripts/query.py -k 3 --json "reserve fund study"
    python scripts/query.py --interactive
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from condo_rag.generation.chat_service import FALLBACK_MESSAGE
from condo_rag.observability.logging import configure_logging
from condo_rag.providers.base import ProviderError
from condo_rag.runtime.config_loader import load_settings
from condo_rag.schemas.search import EmptyContext
from condo_rag.service import CondoActRAG


def format_result(result, index: int) -> str:
    """Format a single retrieval result for display."""
    sep = '-' * 60
    lines = [
        f"\n{sep}",
        f"Result {index + 1} | Score: {result.score:.4f} | {result.chunk_id}",
        f"{sep}",
        str(result.citation) or "(no citation)",
        "",
    ]
    text = result.text
    if len(text) > 500:
        text = text[:500] + "..."
    lines.append(text)
    return '\n'.join(lines)


def run_query(rag: CondoActRAG, query: str, k: int, as_json: bool) -> None:
    try:
        outcome = rag.retrieve(query, k)
    except ProviderError as e:
        print(f"ERROR: {e}")
        print(FALLBACK_MESSAGE)
        return

    if isinstance(outcome, EmptyContext):
        if as_json:
            print(json.dumps({"query": query, "empty": True, "best_score": outcome.best_score}))
        else:
            print(FALLBACK_MESSAGE)
        return

    if as_json:
        print(json.dumps({
            "query": query,
            "results": [
                {"id": r.chunk_id, "score": r.score, "citation": str(r.citation), "text": r.text}
                for r in outcome
            ],
        }, indent=2))
        return

    for i, result in enumerate(outcome):
        print(format_result(result, i))
    print("\n" + "=" * 60 + "\nContext\n" + "=" * 60)
    print(rag.build_context(outcome).text)


def main():
    parser = argparse.ArgumentParser(description="Condominium Act RAG: Query")
    parser.add_argument("query", nargs="?", default=None, help="Query text")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("-k", "--final-count", type=int, default=None, help="Results to return")
    parser.add_argument("--interactive", action="store_true", help="Run in interactive mode")
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    args = parser.parse_args()

    if not args.query and not args.interactive:
        parser.error("a query is required unless --interactive is given")

    settings = load_settings(args.config)
    configure_logging("WARNING" if args.json else settings.log_level)
    k = args.final_count or settings.retrieval.final_count

    with CondoActRAG.from_settings(settings) as rag:
        if args.query:
            run_query(rag, args.query, k, args.json)
        if args.interactive:
            while True:
                try:
                    query = input("\nquery> ").strip()
                except (EOFError, KeyboardInterrupt):
                    print()
                    break
                if query in ("exit", "quit"):
                    break
                if query:
                    run_query(rag, query, k, args.json)


if __name__ == "__main__":
    main()
