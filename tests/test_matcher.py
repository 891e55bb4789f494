"""
Test Question Matcher
Filtering and ranking of bank questions against a slot.
"""
from papergen.services.matcher import find_candidates, is_eligible, score_candidate


def test_exact_match_is_selected(make_slot, make_candidate):
    """Medium 5-mark slot picks the Process Management question from the bank."""
    slot = make_slot()
    candidate = make_candidate()

    ranked = find_candidates(slot, [candidate], "Unit 1")

    assert ranked == [candidate]


def test_difficulty_is_case_insensitive(make_slot, make_candidate):
    """Bank casing ('MEDIUM') does not prevent a match."""
    slot = make_slot()
    assert is_eligible(make_candidate(difficulty="MEDIUM"), slot)
    assert not is_eligible(make_candidate(difficulty="Hard"), slot)


def test_marks_tolerance(make_slot, make_candidate):
    """Predicted marks must be within the configured tolerance."""
    slot = make_slot(marks_target=5)
    candidate = make_candidate(predicted_marks=7)

    assert is_eligible(candidate, slot, tolerance=2)
    assert not is_eligible(candidate, slot, tolerance=1)


def test_topic_filter_required_without_hint(make_slot, make_candidate):
    """Without a unit hint the topic must be contained in the matched topic."""
    slot = make_slot(topic_filter="process management")
    assert is_eligible(make_candidate(matched_topic="Process Management and Scheduling"), slot)
    assert not is_eligible(make_candidate(matched_topic="Memory Management"), slot)


def test_empty_topic_filter_accepts_any_topic(make_slot, make_candidate):
    """An empty topic filter places no topic constraint."""
    slot = make_slot(topic_filter="")
    assert is_eligible(make_candidate(matched_topic="Anything at all"), slot)


def test_unit_hint_can_replace_topic_match(make_slot, make_candidate):
    """With a hint, a unit match is enough even if the topic differs."""
    slot = make_slot(topic_filter="Process Management")
    candidate = make_candidate(matched_topic="Memory Management", matched_unit="Unit 2")

    assert is_eligible(candidate, slot, "Unit 2")
    assert not is_eligible(candidate, slot, "Unit 3")


def test_score_components(make_slot, make_candidate):
    """Score adds similarity, exact marks bonus and unit bonus."""
    slot = make_slot(marks_target=5)
    candidate = make_candidate(predicted_marks=5, topic_similarity=0.5, matched_unit="Unit 1")

    assert score_candidate(candidate, slot) == 100
    assert score_candidate(candidate, slot, "Unit 1") == 125
    assert score_candidate(candidate, slot, "unit 1") == 125
    assert score_candidate(make_candidate(predicted_marks=6, topic_similarity=0.5), slot) == 50


def test_exact_marks_outranks_similarity(make_slot, make_candidate):
    """An exact marks match beats a modestly higher similarity."""
    slot = make_slot(marks_target=5)
    close = make_candidate(id="close", predicted_marks=6, topic_similarity=0.9)
    exact = make_candidate(id="exact", predicted_marks=5, topic_similarity=0.5)

    ranked = find_candidates(slot, [close, exact], "Unit 1")

    assert [c.id for c in ranked] == ["exact", "close"]


def test_higher_similarity_ranks_no_lower(make_slot, make_candidate):
    """Between otherwise identical candidates, higher similarity comes first."""
    slot = make_slot()
    low = make_candidate(id="low", topic_similarity=0.4)
    high = make_candidate(id="high", topic_similarity=0.8)

    assert [c.id for c in find_candidates(slot, [low, high])] == ["high", "low"]
    assert [c.id for c in find_candidates(slot, [high, low])] == ["high", "low"]


def test_ties_keep_pool_order(make_slot, make_candidate):
    """Equal scores are returned in their pool order."""
    slot = make_slot()
    first = make_candidate(id="first")
    second = make_candidate(id="second")

    assert [c.id for c in find_candidates(slot, [first, second])] == ["first", "second"]
    assert [c.id for c in find_candidates(slot, [second, first])] == ["second", "first"]


def test_no_match_returns_empty_list(make_slot, make_candidate):
    """No eligible candidate is not an error."""
    slot = make_slot(difficulty_target="easy")
    assert find_candidates(slot, [make_candidate()]) == []
    assert find_candidates(slot, []) == []


def test_pool_is_not_modified(make_slot, make_candidate):
    """Matching leaves the pool untouched for reuse across slots."""
    pool = [make_candidate(id=1), make_candidate(id=2, difficulty="Hard")]
    find_candidates(make_slot(), pool)
    assert [c.id for c in pool] == [1, 2]
