from unittest.mock import patch

import pandas as pd
from pod_sorter.step_01_download_data import download_data, sheet_url

def test_sheet_url():
    assert sheet_url("abc123") == "https://docs.google.com/spreadsheets/d/abc123/export?format=xlsx"

def test_download_saves_raw_and_converts(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sheet = pd.DataFrame([
        {"Email": "ana@example.edu", "Name": "Ana", "Trait": "Creative", "Preference": "Media",
         "Tags": "Film", "Aspiration": ""},
    ])

    with patch("pod_sorter.step_01_download_data.pd.read_excel", return_value=sheet) as mock_read:
        path = download_data(sheet_id="abc123", sheet_name="Form Responses 1")

    mock_read.assert_called_once()
    assert mock_read.call_args.kwargs["sheet_name"] == "Form Responses 1"
    assert path.exists()
    assert (tmp_path / "data" / "processed" / "candidates.json").exists()

def test_download_without_sheet_id(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", ["step_01_download_data.py"])

    assert download_data() is None
    assert "No sheet id" in capsys.readouterr().out
