"""
Tests for the command line interface and interactive prompts.
"""

import json

import pytest

from resultgen import cli
from resultgen.ingestion.interactive import prompt_dataset, prompt_int, prompt_yes_no


def _answers(*values):
    """input() replacement that replays the given answers in order."""
    remaining = iter(values)
    return lambda prompt: next(remaining)


@pytest.fixture
def roster_file(tmp_path, sample_csv):
    path = tmp_path / "students.csv"
    path.write_text(sample_csv, encoding="utf-8")
    return path


class TestFileMode:
    """Tests for main() with an input file."""

    def test_writes_results(self, roster_file, tmp_path, capsys):
        output = tmp_path / "results.csv"
        code = cli.main(["-i", str(roster_file), "-o", str(output), "-t", "2"])
        assert code == 0

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[1].startswith("S2,Jane Smith,")
        assert len(lines) == 5

        out = capsys.readouterr().out
        assert "Using threads: 2" in out
        assert "Pass mark per subject: 40" in out
        assert "Topper: Jane Smith (S2)" in out
        assert "Results written to:" in out

    def test_pass_mark_option(self, roster_file, tmp_path, capsys):
        output = tmp_path / "results.csv"
        assert cli.main(["-i", str(roster_file), "-o", str(output), "-p", "30"]) == 0
        assert "Passed: 4" in capsys.readouterr().out

    def test_json_and_excel(self, roster_file, tmp_path):
        json_path = tmp_path / "out" / "results.json"
        excel_path = tmp_path / "out" / "report"
        code = cli.main([
            "-i", str(roster_file),
            "-o", str(tmp_path / "results.csv"),
            "--json", str(json_path),
            "--excel", str(excel_path),
        ])
        assert code == 0
        assert json.loads(json_path.read_text(encoding="utf-8"))['totalStudents'] == 4
        assert (tmp_path / "out" / "report.xlsx").exists()

    def test_bad_header_exits_with_error(self, tmp_path, capsys):
        bad = tmp_path / "bad.csv"
        bad.write_text("Name,ID,Math\nJohn,S1,50\n", encoding="utf-8")
        output = tmp_path / "results.csv"

        assert cli.main(["-i", str(bad), "-o", str(output)]) == 1
        assert "Error" in capsys.readouterr().err
        assert not output.exists()

    def test_unwritable_output(self, roster_file, tmp_path, capsys):
        # Parent "directory" is a regular file
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        code = cli.main(["-i", str(roster_file), "-o", str(blocker / "results.csv")])
        assert code == 1
        assert "Failed to write results" in capsys.readouterr().err

    @pytest.mark.parametrize("threads", ["0", "-3", "many"])
    def test_invalid_threads_rejected(self, roster_file, threads):
        with pytest.raises(SystemExit):
            cli.main(["-i", str(roster_file), "-t", threads])

    @pytest.mark.parametrize("mark", ["-1", "101", "x"])
    def test_invalid_pass_mark_rejected(self, roster_file, mark):
        with pytest.raises(SystemExit):
            cli.main(["-i", str(roster_file), "-p", mark])


class TestModeSelection:
    """Tests for falling back to interactive mode."""

    def test_no_input_uses_interactive(self, monkeypatch, capsys):
        calls = []
        monkeypatch.setattr(cli, "run_interactive", lambda threshold: calls.append(threshold) or 0)
        assert cli.main([]) == 0
        assert calls == [40]
        assert "interactive mode" in capsys.readouterr().out

    def test_missing_file_uses_interactive(self, monkeypatch, tmp_path, capsys):
        calls = []
        monkeypatch.setattr(cli, "run_interactive", lambda threshold: calls.append(threshold) or 0)
        assert cli.main(["-i", str(tmp_path / "nope.csv"), "-p", "55"]) == 0
        assert calls == [55]
        assert "Input file not found" in capsys.readouterr().out


class TestInteractiveMode:
    """Tests for run_interactive and the prompt helpers."""

    ROSTER_ANSWERS = (
        "2", "Math", "Sci",
        "2",
        "S1", "Ann", "50", "60",
        "S2", "Bob", "30", "90",
    )

    def test_run_without_saving(self, capsys):
        input_fn = _answers("", *self.ROSTER_ANSWERS, "n")
        assert cli.run_interactive(40, input_fn=input_fn) == 0
        out = capsys.readouterr().out
        assert "Topper: Bob (S2) - Total: 120, Average: 60.00" in out
        assert "Passed: 1" in out
        assert "Results written to" not in out

    def test_run_and_save(self, tmp_path, capsys):
        output = tmp_path / "interactive.csv"
        input_fn = _answers("3", *self.ROSTER_ANSWERS, "y", str(output))
        assert cli.run_interactive(40, input_fn=input_fn) == 0
        assert "Using threads: 3" in capsys.readouterr().out
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "ID,Name,Math,Sci,Total,Average,Grade,Status,Rank"
        assert lines[1] == "S2,Bob,30,90,120,60.00,F,FAIL,1"
        assert lines[2] == "S1,Ann,50,60,110,55.00,C,PASS,2"

    def test_duplicate_subject_reasked(self, capsys):
        input_fn = _answers("2", "Math", "Math", "Art", "1", "S1", "Ann", "10", "20")
        dataset = prompt_dataset(input_fn=input_fn)
        assert dataset.subjects == ("Math", "Art")
        assert "already entered" in capsys.readouterr().out

    def test_empty_answers_reasked(self):
        input_fn = _answers("1", "", "Math", "1", "", "S1", "  ", "Ann", "70")
        dataset = prompt_dataset(input_fn=input_fn)
        assert dataset.records[0].record_id == "S1"
        assert dataset.records[0].name == "Ann"

    def test_prompt_int_reasks_until_valid(self, capsys):
        value = prompt_int("n: ", 0, 100, input_fn=_answers("abc", "101", "-1", "42"))
        assert value == 42
        out = capsys.readouterr().out
        assert "Invalid number" in out
        assert "between 0 and 100" in out

    def test_prompt_int_default(self):
        assert prompt_int("n: ", 1, 10, input_fn=_answers(""), default=7) == 7

    @pytest.mark.parametrize("answer,expected", [
        ("", True), ("y", True), ("YES", True), ("n", False), ("No", False),
    ])
    def test_prompt_yes_no(self, answer, expected):
        assert prompt_yes_no("? ", True, input_fn=_answers(answer)) is expected

    def test_prompt_yes_no_reasks(self):
        assert prompt_yes_no("? ", True, input_fn=_answers("maybe", "n")) is False
