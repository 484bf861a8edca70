"""
Tests for the calibration framework.

Tests cover:
  - Corpus parser (format parsing, label validation, edge cases)
  - Benchmark runner (confusion matrix, report generation)
  - CLI runner exit codes
"""

import json
import textwrap
from pathlib import Path

import pytest

from calibration.corpus_parser import parse_all_corpora, parse_corpus
from calibration.benchmark import (
    evaluate_sample,
    format_report,
    run_benchmark,
    save_report,
)

# Absolute path to the seed corpus (works regardless of CWD)
REPO_ROOT = Path(__file__).resolve().parent.parent
SEED_CORPUS = REPO_ROOT / "calibration" / "corpus"

CANCELLED = "Sehr geehrter Herr Muster, die Zwangsvollstreckung gegen Sie wurde aufgehoben."


def _write(path, content):
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


# ============================================================
# Corpus Parser Tests
# ============================================================

class TestCorpusParser:

    def test_parse_single_sample(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            urgency: red
            category: enforcement
            deadline_days: 7
            source: Stadtkasse
            notes: Kontopfändung

            Wir kündigen die Kontopfändung an.

            ---
        """)
        samples = parse_corpus(corpus)
        assert len(samples) == 1
        s = samples[0]
        assert s.text == "Wir kündigen die Kontopfändung an."
        assert s.urgency == "red"
        assert s.category == "enforcement"
        assert s.deadline_days == 7
        assert s.source == "Stadtkasse"
        assert s.notes == "Kontopfändung"
        assert s.engine_result is None

    def test_default_values(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            urgency: GREEN

            Ihre Zahlung ist eingegangen.
            ---
        """)
        s = parse_corpus(corpus)[0]
        assert s.urgency == "green"
        assert s.category is None
        assert s.deadline_days is None
        assert s.source == "unknown"
        assert s.notes == ""

    def test_multiline_text(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            urgency: yellow

            Sehr geehrte Damen und Herren,

            dies ist eine Mahnung.
            ---
        """)
        text = parse_corpus(corpus)[0].text
        assert text == "Sehr geehrte Damen und Herren,\n\ndies ist eine Mahnung."

    def test_sample_without_urgency_is_skipped(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            source: unlabelled

            Ein Brief ohne Label.
            ---
            urgency: green

            Ein Brief mit Label.
            ---
        """)
        samples = parse_corpus(corpus)
        assert [s.text for s in samples] == ["Ein Brief mit Label."]

    def test_skip_comments(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            # Kalibrierungskorpus
            ---
            urgency: green
            # noch nicht gelabelt

            Ihre Zahlung ist eingegangen.
            ---
        """)
        assert len(parse_corpus(corpus)) == 1

    def test_unknown_urgency_raises(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            urgency: purple

            Ein Brief.
            ---
        """)
        with pytest.raises(ValueError, match="urgency"):
            parse_corpus(corpus)

    def test_unknown_category_raises(self, tmp_path):
        corpus = _write(tmp_path / "test.txt", """\
            ---
            urgency: red
            category: tax

            Ein Brief.
            ---
        """)
        with pytest.raises(ValueError, match="category"):
            parse_corpus(corpus)

    def test_empty_file(self, tmp_path):
        corpus = _write(tmp_path / "empty.txt", "")
        assert parse_corpus(corpus) == []

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            parse_corpus("/nonexistent/corpus.txt")

    def test_parse_all_corpora(self, tmp_path):
        for name in ("a.txt", "b.txt"):
            _write(tmp_path / name, """\
                ---
                urgency: green

                Ihre Zahlung ist eingegangen.
                ---
            """)
        (tmp_path / "ignored.md").write_text("urgency: red\n\nText", encoding="utf-8")
        assert len(parse_all_corpora(tmp_path)) == 2


# ============================================================
# Benchmark Runner Tests
# ============================================================

class TestBenchmark:

    def test_seed_corpus_accuracy(self):
        result = run_benchmark(corpus_dir=SEED_CORPUS)
        assert result.total_samples >= 12
        assert result.tier_accuracy >= 0.8
        assert result.false_greens == 0

    def test_seed_corpus_tier_separation(self):
        result = run_benchmark(corpus_dir=SEED_CORPUS)
        avg = result.avg_score_by_tier
        assert avg["red"] > avg["yellow"] > avg["green"]

    def test_confusion_counts_every_sample(self):
        result = run_benchmark(corpus_dir=SEED_CORPUS)
        total = sum(sum(row.values()) for row in result.confusion.values())
        assert total == result.total_samples

    def test_false_green_is_reported(self, tmp_path):
        _write(tmp_path / "test.txt", f"""\
            ---
            urgency: red
            category: enforcement

            {CANCELLED}
            ---
        """)
        result = run_benchmark(corpus_dir=tmp_path)
        assert result.false_greens == 1
        assert result.tier_accuracy == 0.0
        assert result.category_accuracy == 0.0
        miss = result.misclassified[0]
        assert miss["expected_urgency"] == "red"
        assert miss["result"]["urgency"] == "green"
        assert miss["result"]["neutralized"] == ["zwangsvollstreckung", "vollstreckung"]

    def test_evaluate_sample_records_invalid_text(self, tmp_path):
        _write(tmp_path / "test.txt", """\
            ---
            urgency: yellow

            Mahnung.
            ---
        """)
        sample = parse_corpus(tmp_path / "test.txt")[0]
        result = evaluate_sample(sample)
        assert "error" in result
        assert sample.engine_result is result

    def test_report_format(self):
        report = format_report(run_benchmark(corpus_dir=SEED_CORPUS))
        assert "KLARTEXT CALIBRATION REPORT" in report
        assert "OVERALL METRICS" in report
        assert "CONFUSION MATRIX" in report

    def test_save_report(self, tmp_path):
        result = run_benchmark(corpus_dir=SEED_CORPUS)
        txt_path, json_path = save_report(result, tmp_path / "reports")
        assert txt_path.exists()
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["total_samples"] == result.total_samples
        assert data["false_greens"] == 0
        assert set(data["confusion"]) == {"red", "yellow", "green"}

    def test_empty_corpus_raises(self, tmp_path):
        (tmp_path / "empty.txt").write_text("# empty\n", encoding="utf-8")
        with pytest.raises(ValueError, match="No samples found"):
            run_benchmark(corpus_dir=tmp_path)


# ============================================================
# CLI Runner Tests
# ============================================================

class TestRunner:

    def test_missing_corpus_exits_1(self, tmp_path):
        from run_calibration import main
        with pytest.raises(SystemExit) as exc:
            main(["--corpus-dir", str(tmp_path / "missing")])
        assert exc.value.code == 1

    def test_empty_corpus_exits_1(self, tmp_path):
        from run_calibration import main
        with pytest.raises(SystemExit) as exc:
            main(["--corpus-dir", str(tmp_path)])
        assert exc.value.code == 1

    def test_seed_corpus_exits_0(self, tmp_path):
        from run_calibration import main
        with pytest.raises(SystemExit) as exc:
            main([
                "--corpus-dir", str(SEED_CORPUS),
                "--output-dir", str(tmp_path),
                "--json",
            ])
        assert exc.value.code == 0
        assert (tmp_path / "calibration_report.json").exists()

    def test_failing_corpus_exits_2(self, tmp_path):
        from run_calibration import main
        corpus = tmp_path / "corpus"
        corpus.mkdir()
        _write(corpus / "test.txt", f"""\
            ---
            urgency: red

            {CANCELLED}
            ---
        """)
        with pytest.raises(SystemExit) as exc:
            main(["--corpus-dir", str(corpus), "--output-dir", str(tmp_path / "out")])
        assert exc.value.code == 2
