import os
import sys
import time

from treemap.storage import ingest_csv
from treemap.tree_map import TreeMap

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CSV_FILE_PATH = os.path.join(BASE_DIR, 'data', 'dataset.csv')


def run_ingest_and_smoke_test(csv_path: str = CSV_FILE_PATH, key_column: str = 'key') -> TreeMap:
    print("--- TreeMap ingest + smoke test ---")
    tree_map = TreeMap()

    start_time = time.time()
    ingest_csv(tree_map, csv_path, key_column=key_column)
    end_time = time.time()

    print(f"Ingested {len(tree_map)} keys in {end_time - start_time:.2f}s")

    if tree_map.is_empty():
        print("No records loaded.")
        return tree_map

    keys = list(tree_map.key_set())
    first, last = tree_map.first_key(), tree_map.last_key()
    print(f"First key: {first}, last key: {last}")

    mid = keys[len(keys) // 2]
    print(f"Sample GET at {mid}: {tree_map.get(mid)}")
    print(f"Lower/higher around {mid}: {tree_map.lower_key(mid)} / {tree_map.higher_key(mid)}")

    range_end = keys[min(len(keys) - 1, 3)]
    window = tree_map.sub_map(first, range_end)
    print(f"Range [{first}, {range_end}) -> {len(window)} keys")
    for i, (k, v) in enumerate(window.items()):
        if i >= 3:
            print("  ...")
            break
        print(f"  - {k}: {v}")
    return tree_map


if __name__ == "__main__":
    if len(sys.argv) > 2:
        run_ingest_and_smoke_test(sys.argv[1], sys.argv[2])
    elif len(sys.argv) > 1:
        run_ingest_and_smoke_test(sys.argv[1])
    else:
        run_ingest_and_smoke_test()
