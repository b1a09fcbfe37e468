"""End-to-end tests for the InternMatch CLI.

Covers the full listing flow (snapshot files -> annotate -> filter -> output)
through the typer commands.
"""

import json

from typer.testing import CliRunner

from internmatch.main import app
from tests.conftest import SAMPLE_POSTINGS

runner = CliRunner()


def _match_args(snapshot_files, *extra):
    return [
        "match",
        "--student",
        str(snapshot_files["student"]),
        "--postings",
        str(snapshot_files["postings"]),
        *extra,
    ]


class TestMatchCommand:
    def test_json_output(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--json"))

        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert [item["id"] for item in output] == ["p-3", "p-1", "p-2"]
        assert [item["matchScore"] for item in output] == [100, 75, 0]
        assert [item["matchTier"] for item in output] == ["Perfecta", "Alta", "Baja"]

    def test_json_keeps_posting_fields(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--json"))

        front = next(item for item in json.loads(result.stdout) if item["id"] == "p-1")
        assert front["title"] == "Desarrollador Frontend Jr."
        assert front["minYear"] == 3
        assert front["requiredTechnicalSkills"] == ["nodejs", "react"]

    def test_pretty_output(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files))

        assert result.exit_code == 0
        assert "Perfecta" in result.stdout
        assert "Alta" in result.stdout
        assert "2 of 3 postings open for application" in result.stdout

    def test_tier_filter(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--tier", "alta", "--json"))

        assert result.exit_code == 0
        assert [item["id"] for item in json.loads(result.stdout)] == ["p-1"]

    def test_unknown_tier(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--tier", "excelente"))

        assert result.exit_code == 1
        assert "unknown tier" in result.stdout.lower()

    def test_top_n(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--top-n", "1", "--json"))

        assert [item["id"] for item in json.loads(result.stdout)] == ["p-3"]

    def test_negative_top_n_is_usage_error(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--top-n", "-1", "--json"))

        assert result.exit_code == 2

    def test_duration_filter(self, snapshot_files):
        result = runner.invoke(
            app, _match_args(snapshot_files, "--duration", "1-3 meses", "--json")
        )

        assert result.exit_code == 0
        assert [item["id"] for item in json.loads(result.stdout)] == ["p-2"]

    def test_unknown_duration(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--duration", "2 años"))

        assert result.exit_code == 1
        assert "unknown duration" in result.stdout.lower()

    def test_postings_path_is_directory(self, student_file, tmp_path):
        result = runner.invoke(
            app, ["match", "--student", str(student_file), "--postings", str(tmp_path)]
        )

        assert result.exit_code == 1
        assert "cannot read" in result.stdout.lower()

    def test_postings_not_utf8(self, student_file, tmp_path):
        postings_file = tmp_path / "internships.json"
        postings_file.write_bytes(b'[{"id": "\xff"}]')

        result = runner.invoke(
            app,
            ["match", "--student", str(student_file), "--postings", str(postings_file)],
        )

        assert result.exit_code == 1
        assert "utf-8" in result.stdout.lower()

    def test_no_results(self, snapshot_files):
        result = runner.invoke(app, _match_args(snapshot_files, "--language", "aleman"))

        assert result.exit_code == 0
        assert "no postings match" in result.stdout.lower()

    def test_student_file_not_found(self, postings_file, tmp_path):
        result = runner.invoke(
            app,
            [
                "match",
                "--student",
                str(tmp_path / "missing.json"),
                "--postings",
                str(postings_file),
            ],
        )

        assert result.exit_code == 1
        assert "not found" in result.stdout.lower()

    def test_invalid_student(self, postings_file, tmp_path):
        student_file = tmp_path / "student.json"
        student_file.write_text(json.dumps({"career": "sistemas"}))

        result = runner.invoke(
            app,
            ["match", "--student", str(student_file), "--postings", str(postings_file)],
        )

        assert result.exit_code == 1
        assert "invalid student profile" in result.stdout.lower()

    def test_reports_skipped_postings(self, student_file, tmp_path):
        postings_file = tmp_path / "internships.json"
        postings_file.write_text(json.dumps(SAMPLE_POSTINGS + [{"id": "broken"}]))

        result = runner.invoke(
            app,
            ["match", "--student", str(student_file), "--postings", str(postings_file)],
        )

        assert result.exit_code == 0
        assert "skipped 1 malformed" in result.stdout.lower()


class TestScoreCommand:
    def test_explains_posting(self, snapshot_files):
        result = runner.invoke(
            app,
            [
                "score",
                "p-1",
                "--student",
                str(snapshot_files["student"]),
                "--postings",
                str(snapshot_files["postings"]),
            ],
        )

        assert result.exit_code == 0
        assert "75% - Alta" in result.stdout
        assert "nodejs" in result.stdout
        assert "You can apply" in result.stdout

    def test_low_match_cannot_apply(self, snapshot_files):
        result = runner.invoke(
            app,
            [
                "score",
                "p-2",
                "--student",
                str(snapshot_files["student"]),
                "--postings",
                str(snapshot_files["postings"]),
            ],
        )

        assert result.exit_code == 0
        assert "0% - Baja" in result.stdout
        assert "too low to apply" in result.stdout

    def test_unknown_posting(self, snapshot_files):
        result = runner.invoke(
            app,
            [
                "score",
                "nope",
                "--student",
                str(snapshot_files["student"]),
                "--postings",
                str(snapshot_files["postings"]),
            ],
        )

        assert result.exit_code == 1
        assert "posting not found" in result.stdout.lower()


class TestValidateCommand:
    def test_all_valid(self, postings_file):
        result = runner.invoke(app, ["validate", "--postings", str(postings_file)])

        assert result.exit_code == 0
        assert "All 3 postings are valid" in result.stdout

    def test_reports_skipped(self, tmp_path):
        postings_file = tmp_path / "internships.json"
        postings_file.write_text(
            json.dumps([SAMPLE_POSTINGS[0], {"id": "broken", "careers": ["sistemas"]}])
        )

        result = runner.invoke(app, ["validate", "--postings", str(postings_file)])

        assert result.exit_code == 1
        assert "broken" in result.stdout
        assert "1 valid, 1 skipped" in result.stdout

    def test_file_not_found(self, tmp_path):
        result = runner.invoke(app, ["validate", "--postings", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "not found" in result.stdout.lower()


class TestInfoCommand:
    def test_shows_thresholds(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Perfecta" in result.stdout
        assert ">= 80" in result.stdout
        assert "Alta" in result.stdout
