import os
import asyncio
import pandas as pd
import csv
from typing import Dict, List, Optional
import sys
from loguru import logger

from edogrula.models import Record
from edogrula.query_classifier import classify
from edogrula.registry import InMemoryBusinessRegistry, InMemoryDenylistRegistry
from edogrula.search_service import SearchService, cap_query
from edogrula.config import INPUT_CSV, OUTPUT_CSV, BUSINESSES_CSV, BLACKLIST_CSV, BATCH_SIZE, LOG_LEVEL

# Columns that hold several values separated by ";"
LIST_COLUMNS = ("phones",)


def load_records_from_csv(file_path: str, nrows: int = None) -> List[Record]:
    """Load registry records from CSV as lean documents, dropping empty cells."""
    df = pd.read_csv(file_path, nrows=nrows, dtype=str)
    records = []
    for _, row in df.iterrows():
        record: Record = {}
        for col in df.columns:
            val = row[col]
            if pd.isna(val) or not str(val).strip():
                continue
            if col in LIST_COLUMNS:
                record[col] = [p.strip() for p in str(val).split(";") if p.strip()]
            else:
                record[col] = str(val).strip()
        records.append(record)
    return records


def load_queries_from_csv(file_path: str, nrows: int = None) -> List[Dict[str, Optional[str]]]:
    """Load the `query` column (and optional `type` hint column) from CSV."""
    df = pd.read_csv(file_path, nrows=nrows, dtype=str)
    queries = []
    for _, row in df.iterrows():
        query = row["query"] if pd.notna(row["query"]) else ""
        hint = None
        if "type" in row.index and pd.notna(row["type"]):
            hint = row["type"]
        queries.append({"query": query, "type": hint})
    return queries


def batch_iter(items: List[dict], batch_size: int):
    """
    Yield index and slices of size `batch_size` for batched processing.
    """
    n = len(items)
    for i in range(0, n, batch_size):
        yield i, items[i:i+batch_size]


async def process_query(service: SearchService, item: Dict[str, Optional[str]]) -> List[str]:
    """
    Run a single query through classification and resolution.

    Returns:
        List[str]: Output row: query, kind, status, slug, name.
    """
    # Same capped text the service searches with
    classified = classify(cap_query(item["query"]), item["type"])
    kind = classified.kind.value if classified.ok else ""
    payload = await service.search(item["query"], item["type"])
    business = payload.get("business") or {}
    return [
        item["query"],
        kind,
        payload["status"],
        business.get("slug") or business.get("businessSlug") or "",
        business.get("name") or business.get("businessName") or "",
    ]


async def main():
    """
    Verify a CSV of search queries against registry CSV snapshots.

    - Loads the verified and blacklist registries into memory.
    - Processes queries in batches, concurrently within each batch.
    - Writes results incrementally to an output CSV.
    """
    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    registry = InMemoryBusinessRegistry(load_records_from_csv(BUSINESSES_CSV))
    denylist = InMemoryDenylistRegistry(load_records_from_csv(BLACKLIST_CSV))
    service = SearchService(registry, denylist)
    queries = load_queries_from_csv(INPUT_CSV)
    logger.info(f"Loaded {len(registry.records)} businesses, {len(denylist.records)} blacklist entries, {len(queries)} queries")

    # Initialize output file
    output_path = OUTPUT_CSV
    if os.path.exists(output_path):
        os.remove(output_path)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["query", "kind", "status", "slug", "name"])

    for start_idx, batch in batch_iter(queries, BATCH_SIZE):
        print(f"Processing rows {start_idx}..{start_idx + len(batch) - 1}")

        rows = await asyncio.gather(*[process_query(service, item) for item in batch])

        with open(output_path, "a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerows(rows)

if __name__ == "__main__":
    asyncio.run(main())
