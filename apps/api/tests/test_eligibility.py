import sys
import os
from itertools import product

import pytest

# ensure local app package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from eligibility import (
    QUESTIONS,
    QUESTION_IDS,
    NEXT_STEPS,
    PATHWAY_RULES,
    EligibilityAnswer,
    EligibilityPathway,
    EligibilitySession,
    PathwayRule,
    SessionState,
    evaluate,
    recommended_first,
)


PROPERTY = "10-Year Golden Visa (Property)"
INVESTOR = "10-Year Golden Visa (Investor)"
ENTREPRENEUR = "10-Year Golden Visa (Entrepreneur)"
TALENT = "10-Year Golden Visa (Exceptional Talent)"
EXECUTIVE = "10-Year Golden Visa (Executive)"
FREELANCE = "Freelance Visa"
COMPANY = "Company Formation Visa"


def as_answers(**values):
    return [EligibilityAnswer(question_id=k, value=v) for k, v in values.items()]


def names(result):
    return [p.name for p in result.pathways]


def options(question_id):
    return next(q for q in QUESTIONS if q.id == question_id).options


def test_question_sequence():
    assert QUESTION_IDS == ["purpose", "investment", "profession", "timeline", "family"]


def test_investment_family_profile_gets_property_then_investor():
    result = evaluate(as_answers(
        purpose="investment",
        investment="2m-5m",
        profession="executive",
        timeline="immediate",
        family="family",
    ))

    assert result.is_eligible
    assert names(result) == [PROPERTY, INVESTOR]
    assert result.pathways[0].is_recommended is True
    assert result.pathways[1].is_recommended is False
    assert result.next_steps == NEXT_STEPS


def test_over_5m_business_owner_gets_three_pathways_recommended_first():
    result = evaluate({
        "purpose": "business",
        "investment": "over5m",
        "profession": "entrepreneur",
    })

    assert names(result) == [PROPERTY, INVESTOR, ENTREPRENEUR]
    assert [p.is_recommended for p in result.pathways] == [True, True, False]


def test_specialist_with_small_budget():
    result = evaluate(as_answers(purpose="lifestyle", investment="under500k", profession="scientist"))
    assert names(result) == [TALENT, FREELANCE, COMPANY]
    assert not any(p.is_recommended for p in result.pathways)


def test_executive_employment():
    result = evaluate({"purpose": "employment", "profession": "executive", "investment": "1m-2m"})
    assert names(result) == [PROPERTY, EXECUTIVE]


def test_empty_profile_is_a_valid_ineligible_result():
    result = evaluate([])
    assert result.is_eligible is False
    assert result.pathways == []
    assert result.next_steps == NEXT_STEPS


def test_partial_profile_only_matches_rules_it_can_satisfy():
    result = evaluate({"profession": "creative"})
    assert names(result) == [TALENT]


def test_unknown_values_match_nothing():
    result = evaluate({"purpose": "tourism", "investment": "lots", "profession": "pirate"})
    assert not result.is_eligible


def test_first_answer_to_a_question_wins():
    answers = as_answers(investment="over5m") + as_answers(investment="under500k")
    result = evaluate(answers)
    assert names(result) == [PROPERTY]
    assert result.pathways[0].is_recommended is True
    assert FREELANCE not in names(result)


def test_blank_answer_does_not_shadow_a_later_one():
    answers = as_answers(investment="") + as_answers(investment="over5m")
    assert PROPERTY in names(evaluate(answers))


@pytest.mark.parametrize("rule", PATHWAY_RULES, ids=lambda r: r.key)
def test_each_rule_survives_any_unrelated_answers(rule):
    # Satisfy the rule with the first allowed value of each keyed question
    base = {qid: sorted(allowed)[0] for qid, allowed in rule.requires.items()}
    free = [q for q in QUESTION_IDS if q not in base]

    for combo in product(*[[o.value for o in options(q)] for q in free]):
        profile = dict(base, **dict(zip(free, combo)))
        assert rule.template.name in names(evaluate(profile)), profile


def test_pathways_are_fresh_copies():
    first = evaluate({"investment": "over5m"})
    first.pathways[0].requirements.append("mutated")
    second = evaluate({"investment": "over5m"})
    assert "mutated" not in second.pathways[0].requirements
    assert "mutated" not in PATHWAY_RULES[0].template.requirements


def _pathway(name, recommended):
    return EligibilityPathway(
        name=name,
        duration_label="1 Year",
        description="",
        processing_time_label="1 week",
        is_recommended=recommended,
    )


def test_recommended_first_is_a_stable_partition():
    flags = [False, True, False, True, True, False]
    pathways = [_pathway(f"p{i}", f) for i, f in enumerate(flags)]
    ordered = [p.name for p in recommended_first(pathways)]
    assert ordered == ["p1", "p3", "p4", "p0", "p2", "p5"]


def test_later_recommended_rule_moves_ahead_of_earlier_match():
    rules = [
        PathwayRule(key="a", template=_pathway("A", False), requires={"purpose": frozenset({"business"})}),
        PathwayRule(
            key="b",
            template=_pathway("B", False),
            requires={"purpose": frozenset({"business"})},
            recommended_when={"family": frozenset({"solo"})},
        ),
    ]
    assert names(evaluate({"purpose": "business", "family": "solo"}, rules)) == ["B", "A"]
    assert names(evaluate({"purpose": "business", "family": "spouse"}, rules)) == ["A", "B"]


# ─────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────

FULL_RUN = ["investment", "2m-5m", "executive", "immediate", "family"]


def test_session_walks_questions_then_shows_result():
    session = EligibilitySession()
    assert session.state is SessionState.COLLECTING
    assert session.current_question.id == "purpose"
    assert session.progress == pytest.approx(20.0)

    for value in FULL_RUN[:-1]:
        session.answer(value)
    assert session.step == 4
    assert session.current_question.id == "family"
    assert session.progress == pytest.approx(100.0)

    session.answer(FULL_RUN[-1])
    assert session.state is SessionState.SHOWING_RESULT
    assert session.current_question is None
    assert [p.name for p in session.result.pathways] == [PROPERTY, INVESTOR]


def test_session_ignores_answers_after_result():
    session = EligibilitySession()
    for value in FULL_RUN:
        session.answer(value)
    session.answer("extra")
    assert len(session.answers) == 5


def test_session_back_pops_last_answer():
    session = EligibilitySession()
    session.answer("business").answer("over5m")
    session.back()
    assert session.step == 1
    assert [a.value for a in session.answers] == ["business"]


def test_session_back_at_first_question_is_noop():
    session = EligibilitySession().back()
    assert session.step == 0
    assert session.answers == []


def test_session_back_from_result_returns_to_last_question():
    session = EligibilitySession()
    for value in FULL_RUN:
        session.answer(value)
    session.back()
    assert session.state is SessionState.COLLECTING
    assert session.step == 4
    assert len(session.answers) == 4


def test_session_restart_clears_everything():
    session = EligibilitySession()
    for value in FULL_RUN:
        session.answer(value)
    session.restart()
    assert session.state is SessionState.COLLECTING
    assert session.step == 0
    assert session.answers == []
    assert session.result is None


def test_session_round_trips_through_dict():
    session = EligibilitySession()
    for value in FULL_RUN:
        session.answer(value)
    restored = EligibilitySession.from_dict(session.to_dict())
    assert restored.state is SessionState.SHOWING_RESULT
    assert restored.result == session.result


@pytest.mark.parametrize("data", [None, "junk", {"answers": "junk"}, {"answers": [["purpose"]]}])
def test_session_from_malformed_dict_is_fresh(data):
    session = EligibilitySession.from_dict(data)
    assert session.step == 0
    assert session.answers == []


def test_session_snapshot_shape():
    snap = EligibilitySession().answer("business").snapshot()
    assert snap["state"] == "collecting"
    assert snap["step"] == 1
    assert snap["total_steps"] == 5
    assert snap["question"]["id"] == "investment"
    assert snap["result"] is None
