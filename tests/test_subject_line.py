"""
Tests for subject-line ("Betreff") detection and evaluation.

Subject keywords have no surrounding prose, so they are judged against
the whole letter body.
"""

from klartext.subject import evaluate_subject_keyword, extract_subject_and_body


class TestExtraction:

    def test_betreff_line(self):
        extraction = extract_subject_and_body(
            "Betreff: Haftbefehl\n\nDies ist eine Aktennotiz."
        )
        assert extraction is not None
        assert extraction.subject == "Haftbefehl"
        assert extraction.body == "Dies ist eine Aktennotiz."
        assert extraction.subject_start == 9
        assert extraction.subject_end == 19

    def test_betr_abbreviation(self):
        extraction = extract_subject_and_body("Betr.: Vollstreckung\nText folgt hier.")
        assert extraction.subject == "Vollstreckung"
        assert extraction.body == "Text folgt hier."

    def test_case_insensitive_with_leading_blanks(self):
        extraction = extract_subject_and_body("Stadtkasse\n   BETREFF:  Mahnung  \nText")
        assert extraction.subject == "Mahnung"

    def test_betreff_wins_over_earlier_bezug(self):
        extraction = extract_subject_and_body(
            "Bezug: Ihr Schreiben\nBetreff: Mahnung\n\nText"
        )
        assert extraction.subject == "Mahnung"
        assert extraction.body == "Bezug: Ihr Schreiben\n\nText"

    def test_no_subject(self):
        assert extract_subject_and_body("Sehr geehrte Damen und Herren") is None

    def test_label_must_start_the_line(self):
        assert extract_subject_and_body("Im Betreff: steht nichts") is None

    def test_body_offsets_map_back_to_source(self):
        text = "Betreff: Haftbefehl\n\nDer Haftbefehl bleibt bestehen."
        extraction = extract_subject_and_body(text)
        body_pos = extraction.body.index("Haftbefehl")
        source_pos = extraction.to_source_offset(body_pos)
        assert text[source_pos:source_pos + len("Haftbefehl")] == "Haftbefehl"
        assert source_pos == 25

    def test_offsets_before_subject_line_are_unchanged(self):
        text = "Stadtkasse\nBetreff: Mahnung\nText"
        extraction = extract_subject_and_body(text)
        assert extraction.body == "Stadtkasse\nText"
        assert extraction.to_source_offset(0) == 0
        assert text[extraction.to_source_offset(11):] == "Text"


class TestSubjectEvaluation:

    def test_exclusion_reduces_not_neutralizes(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Dies ist eine Aktennotiz zur Verfahrenskoordination, kein Handlungsbedarf.",
        )
        assert result.effective_weight == 30
        assert result.is_neutralized is False
        assert result.rule == "exclusion"
        assert result.reason == 'Betreff in Verwaltungskontext: "Aktennotiz" (-70%)'

    def test_exclusion_checked_before_informational(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Mitteilung über den Beschluss des Gerichts.",
        )
        assert result.rule == "exclusion"
        assert result.effective_weight == 40

    def test_adjacent_negation_in_body(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Der Haftbefehl wird nicht vollstreckt.",
        )
        assert result.is_neutralized is True
        assert result.effective_weight == 0
        assert result.rule == "subject_negation"
        assert result.reason == "Betreff-Keyword im Body negiert"

    def test_negation_does_not_cross_sentence(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Der Haftbefehl ist erlassen. Eine Anhörung findet nicht statt.",
        )
        assert result.is_neutralized is False
        assert result.effective_weight == 100

    def test_cancellation_in_body_sentence(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Der Haftbefehl wurde aufgehoben.",
        )
        assert result.is_neutralized is True
        assert result.rule == "cancellation"
        assert result.reason == 'Betreff-Keyword im Body aufgehoben: "aufgehoben"'

    def test_strong_negator_in_body_sentence(self):
        # "ohne" is not one of the adjacency negators, only the sentence rule sees it
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Ohne Haftbefehl geschieht nichts.",
        )
        assert result.is_neutralized is True
        assert result.effective_weight == 0
        assert result.rule == "strong_negation"
        assert result.reason == 'Betreff-Keyword negiert: "ohne"'

    def test_rejection_in_body_sentence(self):
        # The period in "Az.5/24" stops the adjacency regex but does not end the sentence
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Der Haftbefehl (Az.5/24) entfällt.",
        )
        assert result.is_neutralized is True
        assert result.effective_weight == 0
        assert result.rule == "rejection"
        assert result.reason == 'Betreff-Keyword abgelehnt: "entfällt"'

    def test_informational_body(self):
        result = evaluate_subject_keyword(
            "vollstreckung", "enforcement", 90, "Vollstreckung",
            "Zur Kenntnis: Das Verfahren läuft weiter.",
        )
        assert result.effective_weight == 45
        assert result.reason == 'Betreff zur Information: "zur Kenntnis" (-50%)'

    def test_no_neutralizing_context(self):
        result = evaluate_subject_keyword(
            "haftbefehl", "enforcement", 100, "Haftbefehl",
            "Bitte melden Sie sich umgehend.",
        )
        assert result.effective_weight == 100
        assert result.reason == "Betreff: Kein neutralisierender Kontext im Body"
        assert result.context == "Betreff: Haftbefehl..."
