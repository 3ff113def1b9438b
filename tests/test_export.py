"""
Tests for CSV, JSON and Excel export.
"""

import json
from datetime import datetime

import pandas as pd
import pytest

from resultgen.config import EXCEL_SHEET_NAME
from resultgen.export import (
    build_json_document,
    save_excel,
    save_json,
    to_json,
    write_results_csv,
)
from resultgen.ingestion.codec import decode, encode
from resultgen.scoring.engine import compute_all
from resultgen.scoring.ranking import rank


@pytest.fixture
def sample_result(sample_csv):
    dataset = decode(sample_csv)
    return dataset.subjects, rank(compute_all(dataset, 40, 2))


class TestCsvExport:
    """Tests for write_results_csv."""

    def test_file_matches_encode(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = write_results_csv(ranked, subjects, tmp_path / "out.csv")
        assert path.is_absolute()
        assert path.read_text(encoding="utf-8") == encode(ranked, subjects)

    def test_creates_parent_folder(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = write_results_csv(ranked, subjects, tmp_path / "nested" / "dir" / "out.csv")
        assert path.exists()

    def test_overwrites_existing(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        target = tmp_path / "out.csv"
        target.write_text("stale", encoding="utf-8")
        write_results_csv(ranked, subjects, target)
        assert target.read_text(encoding="utf-8").startswith("ID,Name,")


class TestJsonExport:
    """Tests for the JSON archive document."""

    SAVED_AT = datetime(2024, 5, 1, 9, 30, 15)

    def test_document_structure(self, sample_result):
        subjects, ranked = sample_result
        doc = build_json_document(ranked, subjects, saved_at=self.SAVED_AT)
        assert doc['subjects'] == list(subjects)
        assert doc['totalStudents'] == 4
        assert doc['savedAt'] == "2024-05-01 09:30:15"
        assert [r['id'] for r in doc['results']] == ["S2", "S4", "S1", "S3"]

    def test_result_entry(self, sample_result):
        subjects, ranked = sample_result
        entry = build_json_document(ranked, subjects, saved_at=self.SAVED_AT)['results'][2]
        assert entry == {
            'id': "S1",
            'name': "John Doe",
            'marks': {"Math": 85, "Science": 78, "English": 92, "History": 66, "Geography": 81},
            'total': 402,
            'average': 80.4,
            'grade': "A",
            'status': "PASS",
            'rank': 3,
        }

    def test_to_json_parses_back(self, sample_result):
        subjects, ranked = sample_result
        text = to_json(ranked, subjects, saved_at=self.SAVED_AT)
        assert json.loads(text) == build_json_document(ranked, subjects, saved_at=self.SAVED_AT)

    def test_non_ascii_kept(self):
        dataset = decode("ID,Name,Math\nS1,Zoë,50\n")
        ranked = rank(compute_all(dataset, 40, 1))
        assert "Zoë" in to_json(ranked, dataset.subjects)

    def test_save_json(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = save_json(ranked, subjects, tmp_path / "results.json")
        doc = json.loads(path.read_text(encoding="utf-8"))
        assert doc['totalStudents'] == 4


class TestExcelExport:
    """Tests for the XLSX workbook."""

    def test_appends_extension(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = save_excel(ranked, subjects, file_name="report", folder=tmp_path)
        assert path.name == "report.xlsx"
        assert path.exists()

    def test_default_name(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = save_excel(ranked, subjects, file_name="  ", folder=tmp_path)
        assert path.name == "result.xlsx"

    def test_sheet_contents(self, sample_result, tmp_path):
        subjects, ranked = sample_result
        path = save_excel(ranked, subjects, file_name="result.xlsx", folder=tmp_path)
        df = pd.read_excel(path, sheet_name=EXCEL_SHEET_NAME)
        assert list(df.columns) == [
            "ID", "Name", *subjects, "Total", "Average", "Grade", "Status", "Rank",
        ]
        assert df["ID"].tolist() == ["S2", "S4", "S1", "S3"]
        assert df["Total"].tolist() == [430, 430, 402, 322]
        assert df["Rank"].tolist() == [1, 1, 3, 4]
