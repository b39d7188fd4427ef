#!/usr/bin/env python3
"""
Condominium Act RAG: Ingestion Script

Segments the Act, assembles chunks and upserts them into the vector index.

Usage:
    python scripts/ingest.py data/condo-act.pdf
    python scripts/ingest.py data/condo-act.txt --reset
    python scripts/ingest.py data/condo-act.pdf --dry-run
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from condo_rag.ingestion.pdf_loader import load_pdf_pages
from condo_rag.ingestion.validator import ValidationError
from condo_rag.observability.logging import configure_logging
from condo_rag.runtime.config_loader import load_settings
from condo_rag.service import CondoActRAG


def main():
    parser = argparse.ArgumentParser(description="Condominium Act RAG: Ingestion")
    parser.add_argument("source", help="Path to the Act (.pdf or .txt)")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("--reset", action="store_true", help="Delete all records before ingesting")
    parser.add_argument("--dry-run", action="store_true", help="Chunk only; do not embed or upsert")
    parser.add_argument("--expand-context", action="store_true", help="Widen chunks with neighbours")
    args = parser.parse_args()

    settings = load_settings(args.config)
    configure_logging(settings.log_level)
    if args.expand_context:
        settings.chunking.expand_context = True

    source = Path(args.source)
    if not source.exists():
        print(f"ERROR: File not found: {source}")
        sys.exit(1)

    print("=" * 60)
    print("Condominium Act RAG: Ingestion")
    print("=" * 60)

    rag = CondoActRAG.from_settings(settings)

    try:
        if args.dry_run:
            if source.suffix.lower() == ".pdf":
                from condo_rag.ingestion.cleaner import join_pages
                text, page_breaks = join_pages(load_pdf_pages(str(source)))
                chunks, report = rag.chunk_document(text, page_breaks=page_breaks)
            else:
                chunks, report = rag.chunk_document(source.read_text(encoding="utf-8"))
            print(json.dumps({
                "chunk_count": len(chunks),
                "units": len(report.units),
                "skipped_units": len(report.misses),
                "sample_ids": [c.id for c in chunks[:10]],
            }, indent=2))
            return

        with rag:
            if args.reset:
                rag.reset_index()

            if source.suffix.lower() == ".pdf":
                report = rag.ingest_pdf(str(source))
            else:
                report = rag.ingest_document(source.read_text(encoding="utf-8"))

            print(json.dumps({**report.to_dict(), "skipped_units": report.skipped_units}, indent=2))
            print(json.dumps(rag.stats(), indent=2, default=str))

    except ValidationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if report.failed:
        sys.exit(2)


if __name__ == "__main__":
    main()
