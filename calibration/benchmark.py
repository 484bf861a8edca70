"""
Benchmark Runner — Tier and Category Accuracy

Runs the calibration corpus through the analyzer and compares the
verdict against human labels. Produces:

  1. Tier accuracy (red / yellow / green)
  2. Category accuracy (over samples with a category label)
  3. Tier confusion matrix (expected -> predicted)
  4. Average score per expected tier
  5. Misclassified samples for manual review

A false green on a real enforcement letter is the expensive mistake;
the confusion matrix shows where it happens.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from calibration.corpus_parser import CalibrationSample, parse_all_corpora
from klartext.analyzer import InvalidLetterError, analyze_letter
from klartext.config import settings
from klartext.keywords import URGENCY_LEVELS


@dataclass
class BenchmarkResult:
    """Full benchmark output."""
    total_samples: int
    tier_correct: int
    category_labelled: int
    category_correct: int
    # confusion[expected][predicted] -> count
    confusion: dict[str, dict[str, int]]
    avg_score_by_tier: dict[str, float]
    misclassified: list[dict] = field(default_factory=list)
    engine_version: str = settings.ENGINE_VERSION

    @property
    def tier_accuracy(self) -> float:
        return self.tier_correct / self.total_samples if self.total_samples else 0.0

    @property
    def category_accuracy(self) -> float:
        if not self.category_labelled:
            return 0.0
        return self.category_correct / self.category_labelled

    @property
    def false_greens(self) -> int:
        """Red letters the engine called green."""
        return self.confusion["red"]["green"]


def evaluate_sample(sample: CalibrationSample) -> dict:
    """Run one sample through the analyzer and store the verdict on it."""
    try:
        analysis = analyze_letter(sample.text, deadline_days=sample.deadline_days)
    except InvalidLetterError as e:
        sample.engine_result = {"error": e.message}
        return sample.engine_result

    scoring = analysis.scoring
    sample.engine_result = {
        "urgency": scoring.urgency,
        "score": scoring.score,
        "category": scoring.category,
        "active": [m.keyword for m in scoring.active_matches],
        "neutralized": [m.keyword for m in scoring.neutralized_matches],
    }
    return sample.engine_result


def run_benchmark(corpus_dir: str | Path = "calibration/corpus") -> BenchmarkResult:
    """
    Run the full calibration benchmark.

    Raises:
        ValueError: the corpus directory holds no samples.
    """
    samples = parse_all_corpora(corpus_dir)
    if not samples:
        raise ValueError(f"No samples found in {corpus_dir}")

    confusion = {e: {p: 0 for p in URGENCY_LEVELS} for e in URGENCY_LEVELS}
    scores: dict[str, list[int]] = {tier: [] for tier in URGENCY_LEVELS}
    tier_correct = 0
    category_labelled = 0
    category_correct = 0
    misclassified = []

    for sample in samples:
        result = evaluate_sample(sample)
        predicted = result.get("urgency", "green")
        predicted_category = result.get("category")
        score = result.get("score", 0)

        confusion[sample.urgency][predicted] += 1
        scores[sample.urgency].append(score)

        tier_ok = predicted == sample.urgency
        category_ok = sample.category is None or predicted_category == sample.category
        if tier_ok:
            tier_correct += 1
        if sample.category is not None:
            category_labelled += 1
            if category_ok:
                category_correct += 1

        if not (tier_ok and category_ok):
            misclassified.append({
                "text": sample.text[:200],
                "source": sample.source,
                "notes": sample.notes,
                "expected_urgency": sample.urgency,
                "expected_category": sample.category,
                "result": result,
            })

    avg_score_by_tier = {
        tier: round(sum(values) / len(values), 1) if values else 0.0
        for tier, values in scores.items()
    }

    return BenchmarkResult(
        total_samples=len(samples),
        tier_correct=tier_correct,
        category_labelled=category_labelled,
        category_correct=category_correct,
        confusion=confusion,
        avg_score_by_tier=avg_score_by_tier,
        misclassified=misclassified,
    )


def format_report(result: BenchmarkResult) -> str:
    """Format benchmark results as a human-readable report."""
    lines = [
        "=" * 60,
        "KLARTEXT CALIBRATION REPORT",
        "=" * 60,
        "",
        f"Engine version: {result.engine_version}",
        f"Samples: {result.total_samples}",
        "",
        "--- OVERALL METRICS ---",
        f"Tier accuracy:     {result.tier_accuracy:.1%}",
        f"Category accuracy: {result.category_accuracy:.1%}"
        f" ({result.category_labelled} labelled)",
        f"False greens:      {result.false_greens}",
        "",
        "--- CONFUSION MATRIX (expected -> predicted) ---",
        f"{'':<10}" + "".join(f"{tier:>8}" for tier in URGENCY_LEVELS),
    ]
    for expected in URGENCY_LEVELS:
        row = result.confusion[expected]
        lines.append(f"{expected:<10}" + "".join(f"{row[p]:>8}" for p in URGENCY_LEVELS))

    lines.extend(["", "--- AVERAGE SCORE PER EXPECTED TIER ---"])
    for tier in URGENCY_LEVELS:
        lines.append(f"{tier:<10} {result.avg_score_by_tier[tier]:>6}")

    if result.misclassified:
        lines.extend(["", "--- MISCLASSIFIED ---"])
        for miss in result.misclassified[:10]:
            got = miss["result"]
            lines.append(
                f"  [{miss['expected_urgency']} -> {got.get('urgency', 'error')}] "
                f"{miss['text'][:80]}..."
            )
            if miss.get("notes"):
                lines.append(f"    Notes: {miss['notes']}")

    lines.extend(["", "=" * 60])
    return "\n".join(lines)


def save_report(result: BenchmarkResult, output_dir: str | Path = "calibration/reports"):
    """Save benchmark results as both human-readable report and JSON."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / "calibration_report.txt"
    report_path.write_text(format_report(result), encoding="utf-8")

    json_data = {
        "engine_version": result.engine_version,
        "total_samples": result.total_samples,
        "tier_accuracy": round(result.tier_accuracy, 4),
        "category_accuracy": round(result.category_accuracy, 4),
        "false_greens": result.false_greens,
        "confusion": result.confusion,
        "avg_score_by_tier": result.avg_score_by_tier,
        "misclassified": result.misclassified,
    }
    json_path = output_dir / "calibration_report.json"
    json_path.write_text(json.dumps(json_data, indent=2, ensure_ascii=False), encoding="utf-8")

    return report_path, json_path
