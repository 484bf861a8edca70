"""
Keyword Dictionary — Static Urgency Vocabulary

German keywords found in official letters, grouped by urgency tier.
Each keyword carries a letter category and a base weight (0-100).
Within a tier, a higher weight means a more severe action
("zwangsräumung" outranks "pfändung").

The tables are immutable module constants. They are read by the
context evaluator, the match collector, the scorer and the highlighter,
and are never modified at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# ============================================================
# ENUMERATIONS (plain strings, fixed order matters)
# ============================================================

# Category order doubles as the tie-break order in category scoring
CATEGORIES: tuple[str, ...] = (
    "enforcement",
    "final_notice",
    "payment_reminder",
    "informational",
    "unknown",
)

URGENCY_LEVELS: tuple[str, ...] = ("red", "yellow", "green")


@dataclass(frozen=True)
class KeywordDefinition:
    """A single dictionary entry."""
    keyword: str        # Lowercase phrase, matched as a substring
    category: str       # One of CATEGORIES
    urgency: str        # "red", "yellow" or "green"
    weight: int         # Base urgency weight, 0-100


# ============================================================
# RED: legal enforcement
# ============================================================

RED_KEYWORDS: tuple[KeywordDefinition, ...] = (
    KeywordDefinition("zwangsvollstreckung", "enforcement", "red", 100),
    KeywordDefinition("vollstreckung", "enforcement", "red", 90),
    KeywordDefinition("erzwingungshaft", "enforcement", "red", 100),
    KeywordDefinition("haftbefehl", "enforcement", "red", 100),
    KeywordDefinition("pfändung", "enforcement", "red", 90),
    KeywordDefinition("gerichtsvollzieher", "enforcement", "red", 85),
    KeywordDefinition("vollstreckungsbehörde", "enforcement", "red", 95),
    KeywordDefinition("zwangsmaßnahme", "enforcement", "red", 90),
    KeywordDefinition("kontopfändung", "enforcement", "red", 90),
    KeywordDefinition("lohnpfändung", "enforcement", "red", 90),
    KeywordDefinition("räumungsklage", "enforcement", "red", 95),
    KeywordDefinition("zwangsräumung", "enforcement", "red", 100),
)

# ============================================================
# YELLOW: action required within a deadline
# ============================================================

YELLOW_KEYWORDS: tuple[KeywordDefinition, ...] = (
    KeywordDefinition("letzte mahnung", "final_notice", "yellow", 80),
    KeywordDefinition("letzte zahlungsaufforderung", "final_notice", "yellow", 80),
    KeywordDefinition("zahlungserinnerung", "payment_reminder", "yellow", 60),
    KeywordDefinition("mahnung", "payment_reminder", "yellow", 65),
    KeywordDefinition("mahngebühren", "payment_reminder", "yellow", 55),
    KeywordDefinition("verzugszinsen", "payment_reminder", "yellow", 55),
    KeywordDefinition("inkasso", "final_notice", "yellow", 75),
    KeywordDefinition("rechtliche schritte", "final_notice", "yellow", 70),
    KeywordDefinition("gerichtliche schritte", "final_notice", "yellow", 75),
    KeywordDefinition("frist", "payment_reminder", "yellow", 50),
    KeywordDefinition("fristablauf", "payment_reminder", "yellow", 60),
    KeywordDefinition("säumniszuschlag", "payment_reminder", "yellow", 55),
    KeywordDefinition("zahlungspflichtig", "payment_reminder", "yellow", 50),
    KeywordDefinition("offene forderung", "payment_reminder", "yellow", 55),
    KeywordDefinition("ausstehende zahlung", "payment_reminder", "yellow", 55),
    KeywordDefinition("bitte überweisen", "payment_reminder", "yellow", 40),
    KeywordDefinition("bitte begleichen", "payment_reminder", "yellow", 45),
)

# ============================================================
# GREEN: informational, no immediate action
# ============================================================

GREEN_KEYWORDS: tuple[KeywordDefinition, ...] = (
    KeywordDefinition("informieren", "informational", "green", 30),
    KeywordDefinition("zur information", "informational", "green", 35),
    KeywordDefinition("zu ihrer information", "informational", "green", 35),
    KeywordDefinition("erfolgreich", "informational", "green", 40),
    KeywordDefinition("bestätigung", "informational", "green", 35),
    KeywordDefinition("bestätigt", "informational", "green", 35),
    KeywordDefinition("keine weiteren schritte", "informational", "green", 50),
    KeywordDefinition("kein handlungsbedarf", "informational", "green", 50),
    KeywordDefinition("abgeschlossen", "informational", "green", 35),
    KeywordDefinition("erledigt", "informational", "green", 40),
    KeywordDefinition("eingetragen", "informational", "green", 30),
    KeywordDefinition("aktualisiert", "informational", "green", 30),
)

# All keywords combined, red first. Iteration order is the match order.
ALL_KEYWORDS: tuple[KeywordDefinition, ...] = (
    RED_KEYWORDS + YELLOW_KEYWORDS + GREEN_KEYWORDS
)

_KEYWORD_INDEX: dict[str, KeywordDefinition] = {
    definition.keyword: definition for definition in ALL_KEYWORDS
}


# ============================================================
# LABELS
# ============================================================

CATEGORY_LABELS: dict[str, str] = {
    "enforcement": "Vollstreckungsbescheid",
    "final_notice": "Letzte Mahnung",
    "payment_reminder": "Zahlungserinnerung",
    "informational": "Informationsschreiben",
    "unknown": "Unbekannt",
}

URGENCY_DESCRIPTIONS: dict[str, str] = {
    "red": "Dringend! Sofortiges Handeln erforderlich.",
    "yellow": "Achtung! Handlungsbedarf innerhalb der angegebenen Frist.",
    "green": "Zur Kenntnisnahme. Kein sofortiger Handlungsbedarf.",
}


def get_definition(keyword: str) -> Optional[KeywordDefinition]:
    """Look up a dictionary entry by its (lowercase) keyword."""
    return _KEYWORD_INDEX.get(keyword.lower())


def get_keyword_urgency(keyword: str) -> str:
    """Urgency tier of a keyword. Unknown keywords fall back to green."""
    definition = get_definition(keyword)
    return definition.urgency if definition else "green"


def get_keywords(urgency: Optional[str] = None) -> list[dict]:
    """
    Return the dictionary as plain dicts, optionally for one tier.

    Used by the GET /keywords endpoint.
    """
    return [
        {
            "keyword": d.keyword,
            "category": d.category,
            "urgency": d.urgency,
            "weight": d.weight,
        }
        for d in ALL_KEYWORDS
        if urgency is None or d.urgency == urgency
    ]
