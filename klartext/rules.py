"""
Scoring rules: urgency thresholds, deadline multipliers, and the German
recommendation and summary texts shown with every verdict.
"""

from __future__ import annotations

from typing import Optional

URGENCY_THRESHOLDS: dict[str, int] = {
    "red": 80,      # score >= 80
    "yellow": 40,   # score >= 40
    "green": 0,
}

# (max days remaining, multiplier), checked in order
DEADLINE_MULTIPLIERS: tuple[tuple[int, float], ...] = (
    (3, 1.5),
    (7, 1.25),
    (14, 1.1),
)

# Score caps per keyword tier; a yellow letter never reaches red on its own
TIER_SCORE_CAPS: dict[str, int] = {
    "red": 100,
    "yellow": 79,
    "green": 39,
}

CATEGORY_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "enforcement": (
        "Suchen Sie sofort rechtliche Beratung (z.B. Schuldnerberatung, Rechtsanwalt).",
        "Prüfen Sie die genannte Forderung auf Richtigkeit.",
        "Zahlen Sie keine Barzahlungen an Unbekannte.",
        "Bewahren Sie alle Unterlagen sorgfältig auf.",
        "Reagieren Sie innerhalb der angegebenen Frist.",
    ),
    "final_notice": (
        "Begleichen Sie die Forderung vor Ablauf der Frist.",
        "Kontaktieren Sie den Absender für eine Ratenzahlung, falls nötig.",
        "Prüfen Sie, ob die Forderung berechtigt ist.",
        "Ignorieren Sie das Schreiben nicht - es drohen weitere Kosten.",
    ),
    "payment_reminder": (
        "Überprüfen Sie die genannte Rechnung in Ihren Unterlagen.",
        "Begleichen Sie den offenen Betrag zeitnah.",
        "Bei Unklarheiten: Kontaktieren Sie den Absender.",
        "Bewahren Sie den Zahlungsnachweis auf.",
    ),
    "informational": (
        "Keine sofortigen Maßnahmen erforderlich.",
        "Lesen Sie das Schreiben zur Information.",
        "Heften Sie das Dokument zu Ihren Unterlagen.",
    ),
    "unknown": (
        "Lesen Sie das Schreiben sorgfältig durch.",
        "Bei Unklarheiten: Kontaktieren Sie den Absender.",
        "Prüfen Sie, ob eine Reaktion erforderlich ist.",
    ),
}

SUMMARY_TEMPLATES: dict[str, str] = {
    "red": (
        "Dies ist ein {label} mit höchster Dringlichkeit. Es drohen unmittelbare "
        "rechtliche Konsequenzen wie Pfändung oder Zwangsvollstreckung."
    ),
    "yellow": (
        "Dies ist ein {label}. Sie sollten innerhalb der angegebenen Frist reagieren, "
        "um weitere Kosten oder rechtliche Schritte zu vermeiden."
    ),
    "green": (
        "Dies ist ein {label}. Es handelt sich um eine Information - "
        "keine dringende Reaktion erforderlich."
    ),
}

# Category "unknown" means no keyword matched at all
UNKNOWN_SUMMARY = (
    "Das Schreiben konnte keiner Kategorie zugeordnet werden. Es wurden keine "
    "typischen Begriffe für Mahnungen oder Vollstreckungen gefunden."
)


def get_urgency_from_score(score: int) -> str:
    if score >= URGENCY_THRESHOLDS["red"]:
        return "red"
    if score >= URGENCY_THRESHOLDS["yellow"]:
        return "yellow"
    return "green"


def get_deadline_multiplier(days: Optional[int]) -> float:
    """Scale factor for red/yellow scores based on days until the deadline."""
    if days is None:
        return 1.0
    for max_days, multiplier in DEADLINE_MULTIPLIERS:
        if days <= max_days:
            return multiplier
    return 1.0


def build_summary(urgency: str, category: str, category_label: str) -> str:
    if category == "unknown":
        return UNKNOWN_SUMMARY
    return SUMMARY_TEMPLATES[urgency].format(label=category_label)


def get_recommendations(category: str) -> list[str]:
    return list(CATEGORY_RECOMMENDATIONS.get(category, CATEGORY_RECOMMENDATIONS["unknown"]))
