import sys
import pathlib
from pathlib import Path

import pandas as pd

# Add project root to sys.path to allow running as script
root_dir = str(pathlib.Path(__file__).parent.parent)
if root_dir not in sys.path:
    sys.path.append(root_dir)

from pod_sorter.sorter.config import load_config


def sheet_url(sheet_id):
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=xlsx"


def download_data(sheet_id=None, sheet_name=None):
    source = load_config().get("source", {})
    if sheet_id is None:
        sheet_id = sys.argv[1] if len(sys.argv) > 1 else source.get("sheet_id")
    if sheet_name is None:
        sheet_name = source.get("sheet_name", "Form Responses 1")

    if not sheet_id:
        print("[ERROR] No sheet id given (argument or source.sheet_id in config)")
        return None

    url = sheet_url(sheet_id)
    print(f"Target Sheet: {sheet_name}")
    print(f"Downloading data from {url}...")

    df = pd.read_excel(url, sheet_name=sheet_name, engine='openpyxl')
    print(f"Shape: {df.shape}")

    output_dir = Path("data") / "raw"
    output_dir.mkdir(parents=True, exist_ok=True)
    filename = output_dir / "responses.csv"
    df.to_csv(filename, index=False, encoding='utf-8')
    print(f"Saved to {filename}")

    # --- Chain Step 2: Convert Data ---
    print("\n--- Running Step 2: Convert Data ---")
    from pod_sorter.step_02_convert_data import convert_data
    convert_data()
    print("Step 2 Completed Successfully")
    return filename


if __name__ == "__main__":
    download_data()
