import sys
import pathlib
from pathlib import Path

# Add project root to sys.path to allow running as script
root_dir = str(pathlib.Path(__file__).parent.parent)
if root_dir not in sys.path:
    sys.path.append(root_dir)

from pod_sorter.sorter.config import save_json
from pod_sorter.store import CandidateStore


def convert_data(raw_path=None):
    base_dir = Path(".")
    raw_dir = base_dir / "data" / "raw"
    processed_dir = base_dir / "data" / "processed"
    processed_dir.mkdir(parents=True, exist_ok=True)

    raw_path = Path(raw_path) if raw_path else raw_dir / "responses.csv"
    if not raw_path.exists():
        print(f"[ERROR] Input file not found: {raw_path}")
        found = list(raw_dir.glob("*.csv")) if raw_dir.exists() else []
        if found:
            print(f"Found similar files: {[f.name for f in found]}")
        return None

    print(f"Processing responses from {raw_path}...")
    store = CandidateStore(raw_path)
    df = store.load()
    candidates = store.candidates()

    duplicates = len(df) - len(candidates)
    if duplicates > 0:
        print(f"Merged {duplicates} duplicate or empty rows by email")

    output_path = processed_dir / "candidates.json"
    save_json(candidates, output_path)
    print(f"Saved {len(candidates)} candidates to {output_path}")
    return candidates


if __name__ == "__main__":
    convert_data(sys.argv[1] if len(sys.argv) > 1 else None)
