#!/usr/bin/env python3
"""
Condominium Act RAG: Reset Index

Deletes every record from the configured collection.

Usage:
    python scripts/reset_index.py --yes
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from condo_rag.observability.logging import configure_logging
from condo_rag.runtime.config_loader import load_settings
from condo_rag.stores.chroma_store import ChromaVectorIndex


def main():
    parser = argparse.ArgumentParser(description="Condominium Act RAG: Reset Index")
    parser.add_argument("--config", default=None, help="Path to configuration file")
    parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    args = parser.parse_args()

    settings = load_settings(args.config)
    configure_logging(settings.log_level)

    if not args.yes:
        answer = input(f"Delete all records in '{settings.store.collection_name}'? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            sys.exit(1)

    # Only the index is needed; skip loading the embedding model.
    index = ChromaVectorIndex(settings.store.collection_name, settings.store.persist_dir)
    index.initialize()
    try:
        index.delete_all()
        print(json.dumps(index.describe_stats(), indent=2, default=str))
    finally:
        index.close()


if __name__ == "__main__":
    main()
