"""
Pattern Dictionary — Context Modifiers

Regular-expression patterns that change how much a keyword counts:

  1. Negation patterns zero a keyword (strong negators, cancellation
     verbs, rejection phrases).
  2. Mitigation patterns discount a keyword by a fixed fraction
     (informational and conditional markers, and exclusion patterns
     that only apply to subject-line keywords).

Every table is an ordered tuple. Evaluation walks the tuples in order
and stops at the first hit, so the position of a pattern inside its
table decides which reason is reported and which reduction is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_FLAGS = re.IGNORECASE


@dataclass(frozen=True)
class NegationPattern:
    """A marker that fully neutralizes a keyword."""
    pattern: re.Pattern
    kind: str           # "strong", "cancellation" or "rejection"
    name: str


@dataclass(frozen=True)
class MitigationPattern:
    """A marker that reduces a keyword's weight without zeroing it."""
    pattern: re.Pattern
    kind: str           # "informational", "conditional" or "exclusion"
    reduction: float    # 0.0 <= reduction < 1.0
    name: str


def _negation(regex: str, kind: str, name: str) -> NegationPattern:
    return NegationPattern(pattern=re.compile(regex, _FLAGS), kind=kind, name=name)


def _mitigation(regex: str, kind: str, reduction: float, name: str) -> MitigationPattern:
    return MitigationPattern(
        pattern=re.compile(regex, _FLAGS), kind=kind, reduction=reduction, name=name,
    )


# ============================================================
# NEGATION PATTERNS (weight -> 0)
# ============================================================

# Checked inside the ±5 token window around the keyword.
# "Eine Pfändung wird NICHT eingeleitet."
STRONG_NEGATORS: tuple[NegationPattern, ...] = (
    _negation(r"\bnicht\b", "strong", "nicht"),
    _negation(r"\bkeine[nmrs]?\b", "strong", "keine"),
    _negation(r"\bkeinerlei\b", "strong", "keinerlei"),
    _negation(r"\bniemals\b", "strong", "niemals"),
    _negation(r"\bweder\b", "strong", "weder"),
    _negation(r"\bohne\b", "strong", "ohne"),
    _negation(r"\bnicht\s+mehr\b", "strong", "nicht mehr"),
)

# Checked against the whole sentence; these verbs usually close the
# sentence, far away from the keyword.
# "Das Vollstreckungsverfahren wurde AUFGEHOBEN."
CANCELLATION_VERBS: tuple[NegationPattern, ...] = (
    _negation(r"\baufgehoben\b", "cancellation", "aufgehoben"),
    _negation(r"\bwiderrufen\b", "cancellation", "widerrufen"),
    _negation(r"\bzur[üu]ckgenommen\b", "cancellation", "zurückgenommen"),
    _negation(r"\beingestellt\b", "cancellation", "eingestellt"),
    _negation(r"\berledigt\b", "cancellation", "erledigt"),
    _negation(r"\bbeendet\b", "cancellation", "beendet"),
    _negation(r"\babgeschlossen\b", "cancellation", "abgeschlossen"),
)

# Checked inside the token window.
# "Ein Antrag auf Erzwingungshaft wurde ABGELEHNT."
REJECTION_PATTERNS: tuple[NegationPattern, ...] = (
    _negation(r"\babgelehnt\b", "rejection", "abgelehnt"),
    _negation(r"\bnicht\s+erteilt\b", "rejection", "nicht erteilt"),
    _negation(r"\bwird\s+nicht\b", "rejection", "wird nicht"),
    _negation(r"\bnicht\s+vorgesehen\b", "rejection", "nicht vorgesehen"),
    _negation(r"\bentf[äa]llt\b", "rejection", "entfällt"),
    _negation(r"\bnicht\s+erforderlich\b", "rejection", "nicht erforderlich"),
)


# ============================================================
# MITIGATION PATTERNS (weight reduced, never zeroed)
# ============================================================

# "ZUR KENNTNIS: Ein Vollstreckungsverfahren läuft gegen Herrn X."
INFORMATIONAL_MARKERS: tuple[MitigationPattern, ...] = (
    _mitigation(r"\bzur\s+Kenntnis\b", "informational", 0.5, "zur Kenntnis"),
    _mitigation(r"\bzur\s+Information\b", "informational", 0.5, "zur Information"),
    _mitigation(r"\bHinweis\b", "informational", 0.3, "Hinweis"),
    _mitigation(r"\bMitteilung\b", "informational", 0.3, "Mitteilung"),
    _mitigation(r"\bkein\s+Handlungsbedarf\b", "informational", 0.9, "kein Handlungsbedarf"),
    _mitigation(r"\bkeine\s+weiteren\s+Schritte\b", "informational", 0.9, "keine weiteren Schritte"),
    _mitigation(r"\bohne\s+weitere\s+Ma(?:ß|ss)nahmen\b", "informational", 0.7, "ohne weitere Maßnahmen"),
)

# "FALLS keine Zahlung erfolgt, wird eine Pfändung eingeleitet."
CONDITIONAL_MARKERS: tuple[MitigationPattern, ...] = (
    _mitigation(r"\bfalls\b", "conditional", 0.4, "falls"),
    _mitigation(r"\bsofern\b", "conditional", 0.4, "sofern"),
    _mitigation(r"\bwenn\s+nicht\b", "conditional", 0.3, "wenn nicht"),
    _mitigation(r"\bw[üu]rde\b", "conditional", 0.5, "würde"),
    _mitigation(r"\bk[öo]nnte\b", "conditional", 0.5, "könnte"),
)

# Administrative or procedural framing in the letter body. Only used for
# subject-line keywords. Ordered strongest reduction first.
# "Betreff: Haftbefehl" + body "Aktennotiz zur Verfahrenskoordination"
EXCLUSION_PATTERNS: tuple[MitigationPattern, ...] = (
    _mitigation(r"\bAktennotiz\b", "exclusion", 0.7, "Aktennotiz"),
    _mitigation(r"\bBeschluss\b", "exclusion", 0.6, "Beschluss"),
    _mitigation(r"\bAnordnung\b", "exclusion", 0.6, "Anordnung"),
    _mitigation(r"\bWeisungen?\b", "exclusion", 0.6, "Weisung"),
    _mitigation(r"\bVerfahrenskoordination\b", "exclusion", 0.6, "Verfahrenskoordination"),
    _mitigation(r"\bVerwaltungsakt\b", "exclusion", 0.5, "Verwaltungsakt"),
)


# ============================================================
# SUBJECT-LINE ADJACENCY TERMS
# ============================================================

# Used to build directional "keyword ... negator" regexes against the body
SUBJECT_NEGATION_TERMS = r"nicht|keine[nmrs]?|niemals"
SUBJECT_REJECTION_TERMS = (
    r"wird\s+nicht|nicht\s+erteilt|nicht\s+vorgesehen|entf[äa]llt|abgelehnt"
)


# ============================================================
# CONTRASTIVE CONJUNCTIONS (sentence segmentation)
# ============================================================

# "Die Pfändung wurde aufgehoben, ABER eine neue wird eingeleitet."
CONTRASTIVE_CONJUNCTIONS = re.compile(
    r"\b(?:aber|jedoch|allerdings|dennoch|trotzdem)\b", _FLAGS,
)

SENTENCE_DELIMITERS = re.compile(r"[.!?;]\s+|\n\n+")


def get_patterns() -> list[dict]:
    """
    Return every modifier table as plain dicts.

    Used by the GET /patterns endpoint to expose the rule surface.
    """
    tables: list[tuple[str, tuple]] = [
        ("strong_negation", STRONG_NEGATORS),
        ("cancellation", CANCELLATION_VERBS),
        ("rejection", REJECTION_PATTERNS),
        ("informational", INFORMATIONAL_MARKERS),
        ("conditional", CONDITIONAL_MARKERS),
        ("exclusion", EXCLUSION_PATTERNS),
    ]
    result = []
    for table, patterns in tables:
        for p in patterns:
            result.append({
                "table": table,
                "name": p.name,
                "kind": p.kind,
                "regex": p.pattern.pattern,
                "reduction": getattr(p, "reduction", 1.0),
                "neutralizes": isinstance(p, NegationPattern),
            })
    return result
