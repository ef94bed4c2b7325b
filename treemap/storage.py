import csv
import math
import os
from datetime import datetime
from typing import Any, Optional

from treemap.tree_map import TreeMap


# ------------------ Key parsing ------------------
def _finite(value):
    # NaN compares equal to every key under natural_order
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Key must be a finite number")
    return value


def parse_key(raw: Any) -> Any:
    """
    Convert a raw key (from CSV or a URL) into an orderable value.

    Tries int, then float, then an ISO or 'YYYY-MM-DD HH:MM:SS' timestamp
    (converted to epoch seconds); anything else is kept as a stripped string.
    """
    if raw is None:
        raise ValueError("Missing key")
    if isinstance(raw, (int, float)):
        return _finite(raw)
    raw_str = str(raw).strip()
    if not raw_str:
        raise ValueError("Empty key")
    try:
        return int(raw_str)
    except ValueError:
        pass
    try:
        value = float(raw_str)
    except ValueError:
        pass
    else:
        return _finite(value)
    try:
        return int(datetime.fromisoformat(raw_str).timestamp())
    except ValueError:
        pass
    try:
        return int(datetime.strptime(raw_str, "%Y-%m-%d %H:%M:%S").timestamp())
    except ValueError:
        return raw_str


# ------------------ Data ingestion ------------------
def ingest_csv(tree_map: TreeMap, file_path: str, key_column: str = 'key',
               value_column: Optional[str] = None) -> int:
    """
    Reads rows from a CSV file into tree_map, keyed by key_column.

    The value is the cell in value_column, or the whole row when no value
    column is given. A repeated key replaces the earlier value.
    Returns the number of rows ingested.
    """
    if not os.path.exists(file_path):
        print(f"Error: File not found at {file_path}.")
        return 0

    print(f"Ingesting data from: {file_path}")
    total_records = 0
    replaced = 0
    skipped = 0

    with open(file_path, mode='r', newline='', encoding='utf-8') as csvfile:
        reader = csv.DictReader(csvfile)

        fieldnames = reader.fieldnames or []
        if key_column not in fieldnames:
            print(f"Warning: key column '{key_column}' not found; available columns: {fieldnames}")
        if value_column is not None and value_column not in fieldnames:
            print(f"Warning: value column '{value_column}' not found; available columns: {fieldnames}")

        for row in reader:
            try:
                key = parse_key(row.get(key_column))
            except ValueError:
                skipped += 1
                continue

            value = row.get(value_column) if value_column is not None else dict(row)
            try:
                _, existed = tree_map.insert(key, value)
            except TypeError:
                # key type does not order against the keys already loaded
                skipped += 1
                continue
            if existed:
                replaced += 1
            total_records += 1

            if total_records % 100000 == 0:
                print(f"Progress: {total_records:,} records ingested...")

    print("--- Ingestion Summary ---")
    print(f"Total records ingested: {total_records:,}")
    print(f"Duplicate keys replaced: {replaced:,}")
    print(f"Rows skipped: {skipped:,}")
    print(f"Map size: {len(tree_map):,}")
    return total_records
