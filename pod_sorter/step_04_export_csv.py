import sys
import pathlib
from pathlib import Path

import pandas as pd

# Add project root to sys.path to allow running as script
root_dir = str(pathlib.Path(__file__).parent.parent)
if root_dir not in sys.path:
    sys.path.append(root_dir)

from pod_sorter.sorter.config import load_config, load_json, role_names
from pod_sorter.store import CandidateStore


def export_csv(config_path=None):
    base_dir = Path(".")
    data_dir = base_dir / "data"
    raw_path = data_dir / "raw" / "responses.csv"
    results_dir = data_dir / "results"

    if not raw_path.exists():
        print(f"Error: Raw CSV not found at {raw_path}")
        return None

    assignments_path = results_dir / "assignments.json"
    if not assignments_path.exists():
        print(f"Error: Assignments file not found at {assignments_path}. Run sorter first.")
        return None

    roles = role_names(load_config(config_path))
    results = load_json(assignments_path)

    store = CandidateStore(raw_path)
    store.load()
    store.write_results(results, roles)
    print(f"Filled results for {len(results)} candidates.")

    # Remove newlines that break simple parsers
    print("Sanitizing output (removing newlines)...")
    df = store.df
    for col in df.columns:
        if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
            df[col] = df[col].replace(r'[\r\n]+', ' ', regex=True)

    output_path = results_dir / "responses_filled.csv"
    df.to_csv(output_path, index=False, encoding='utf-8-sig')
    print(f"Exported filled CSV to {output_path}")
    return output_path


if __name__ == "__main__":
    export_csv()
