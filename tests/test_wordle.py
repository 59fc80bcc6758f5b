from collections import Counter

import pytest

import wordle
from wordle import (
    ALL_EXACT,
    EmptyPoolError,
    EmptyUniverseError,
    Outcome,
    Recommendation,
    SolverError,
    classify,
    expected_pool_size,
    filter_possible_words,
    format_feedback,
    parse_feedback,
    score_guesses,
    select_best_guess,
)
from wordlist import load_default_word_list

UNIVERSE = ["CRANE", "SLATE", "TRACE", "PLACE", "GRACE"]


def code(guess, solution):
    return format_feedback(classify(guess, solution))


# --- classify golden tests (duplicates + placements) ---
@pytest.mark.parametrize("guess,solution,expected", [
    ("CRANE", "CRANE", "GGGGG"),
    ("CRANE", "SLATE", "XXGXG"),
    ("CRANE", "TRACE", "YGGXG"),
    ("CRANE", "PLACE", "YXGXG"),
    ("SKILL", "SLATE", "GXXYX"),
    ("BELLE", "LEVEL", "XGYYY"),
    ("LEMON", "LEVEL", "GGXXX"),
    ("COOLS", "SCOOP", "YYGXY"),
    ("RAISE", "CRANE", "YYXXG"),
    ("STARE", "CRANE", "XXGYG"),
])
def test_classify_golden(guess, solution, expected):
    assert code(guess, solution) == expected


def test_classify_repeated_letter_claims_single_occurrence():
    feedback = classify("SKILL", "SLATE")
    l_marks = [feedback[i] for i in (3, 4)]
    assert l_marks.count(Outcome.PRESENT) + l_marks.count(Outcome.EXACT) == 1
    assert l_marks.count(Outcome.ABSENT) == 1


def test_classify_exact_takes_priority_over_earlier_present():
    # The second L is exact, so the first L finds nothing left to claim
    assert code("LLXXX", "ALXXX") == "XGGGG"


def test_classify_same_word_is_all_exact():
    for word in load_default_word_list()[:100]:
        assert classify(word, word) == ALL_EXACT


def test_classify_never_claims_more_than_solution_has():
    words = load_default_word_list()[:60]
    for guess in words:
        for solution in words:
            feedback = classify(guess, solution)
            claimed = Counter(
                letter for letter, outcome in zip(guess, feedback)
                if outcome is not Outcome.ABSENT)
            available = Counter(solution)
            for letter, count in claimed.items():
                assert count <= available[letter]


# --- filtering ---
def test_filter_keeps_exactly_matching_words():
    feedback = classify("CRANE", "SLATE")
    assert filter_possible_words("CRANE", feedback, UNIVERSE) == ["SLATE"]


def test_filter_excludes_the_guess_unless_all_exact():
    feedback = parse_feedback("XXGXG")
    assert "CRANE" not in filter_possible_words("CRANE", feedback, UNIVERSE)
    assert filter_possible_words("CRANE", ALL_EXACT, UNIVERSE) == ["CRANE"]


def test_filter_is_subset_order_preserving_and_idempotent():
    words = load_default_word_list()
    feedback = classify("SLATE", "TRACE")
    once = filter_possible_words("SLATE", feedback, words)
    twice = filter_possible_words("SLATE", feedback, once)

    assert once == twice
    assert set(once) <= set(words)
    positions = [words.index(w) for w in once]
    assert positions == sorted(positions)
    assert "TRACE" in once


def test_filter_does_not_mutate_input():
    pool = list(UNIVERSE)
    filter_possible_words("CRANE", parse_feedback("XXXXX"), pool)
    assert pool == UNIVERSE


def test_filter_can_return_empty_pool():
    assert filter_possible_words("CRANE", parse_feedback("XXXXX"), ["CRANE", "SLATE"]) == []


def test_filter_narrows_towards_solution():
    words = ["CRANE", "BRAIN", "TRAIN", "GRAIN", "STAIN"]
    first = filter_possible_words("CRANE", classify("CRANE", "BRAIN"), words)
    assert "CRANE" not in first and "BRAIN" in first

    second = filter_possible_words("TRAIN", classify("TRAIN", "BRAIN"), first)
    assert len(second) < len(first)
    assert "BRAIN" in second


# --- ranking ---
def test_expected_pool_size_of_partition():
    # CRANE splits UNIVERSE into groups of sizes 1, 1, 2, 1
    assert expected_pool_size("CRANE", UNIVERSE) == pytest.approx(7 / 5)


def test_single_candidate_scores_one_for_every_guess():
    scores = score_guesses(load_default_word_list()[:50], ["CRANE"], processes=1)
    assert all(score == 1.0 for score in scores)


def test_single_candidate_recommends_first_universe_word():
    assert select_best_guess(UNIVERSE, ["CRANE"], processes=1) == Recommendation("CRANE", 1.0, True)


def test_ties_go_to_first_word_in_universe():
    # TRACE and GRACE both split UNIVERSE completely
    recommendation = select_best_guess(UNIVERSE, UNIVERSE, processes=1)
    assert recommendation.word == "TRACE"
    assert recommendation.score == 1.0
    assert recommendation.is_candidate is True


def test_information_probe_is_flagged_as_non_candidate():
    pool = ["BILLS", "FILLS", "HILLS", "MILLS"]
    universe = ["BILLS", "FILLS", "BFHMZ", "HILLS", "MILLS"]
    recommendation = select_best_guess(universe, pool, processes=1)
    assert recommendation == Recommendation("BFHMZ", 1.0, False)
    assert expected_pool_size("BILLS", pool) == pytest.approx(2.5)


def test_empty_pool_is_rejected():
    with pytest.raises(EmptyPoolError):
        select_best_guess(UNIVERSE, [])


def test_empty_universe_is_rejected():
    with pytest.raises(EmptyUniverseError):
        select_best_guess([], UNIVERSE)


def test_solver_errors_are_value_errors():
    assert issubclass(EmptyPoolError, SolverError)
    assert issubclass(EmptyUniverseError, ValueError)


def test_parallel_scores_match_serial(monkeypatch):
    words = load_default_word_list()[:40]
    pool = words[10:30]
    serial = score_guesses(words, pool, processes=1)

    monkeypatch.setattr(wordle, "PARALLEL_THRESHOLD", 0)
    parallel = score_guesses(words, pool, processes=2)

    assert parallel == serial


# --- feedback parsing ---
@pytest.mark.parametrize("text", [
    "GYXXG",
    "gyxxg",
    " gybbg ",
    "g y b b g",
    "g, y, x, x, g",
    "green yellow gray grey green",
])
def test_parse_feedback_formats(text):
    assert parse_feedback(text) == (
        Outcome.EXACT, Outcome.PRESENT, Outcome.ABSENT, Outcome.ABSENT, Outcome.EXACT)


@pytest.mark.parametrize("text", ["", "GGG", "GYXXQ", "GGGGGG", "g y b b", "green"])
def test_parse_feedback_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_feedback(text)


def test_format_feedback():
    assert format_feedback(ALL_EXACT) == "GGGGG"
    assert format_feedback(parse_feedback("x y g x y")) == "XYGXY"
