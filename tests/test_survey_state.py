from survey_api.models.survey_models import QualificationLevel
from survey_api.services.survey_state import (
    CONTACT_STEP,
    NextStep,
    PreviousStep,
    SelectOption,
    SetContact,
    SurveyState,
    can_advance,
    reduce,
    to_submission_payload,
)
from survey_api.services.validation import validate_submission

CHOICES = [
    SelectOption(value="rcm-director", text="RCM Director", qualify="high"),
    SelectOption(value="large", text="Large", qualify="high"),
    SelectOption(value="nphies-compliance", text="NPHIES", qualify="high"),
    SelectOption(value="critical-impact", text="Critical", qualify="high", sar=800000),
    SelectOption(value="ai-pioneer", text="Pioneer", qualify="high"),
]


def _run(state, *events):
    for event in events:
        state = reduce(state, event)
    return state


def _answer_all(state=None):
    state = state or SurveyState()
    for choice in CHOICES:
        state = _run(state, choice, NextStep())
    return state


def test_initial_state():
    state = SurveyState()
    assert state.current_step == 1
    assert state.score == 0
    assert not can_advance(state)


def test_label_follows_tier():
    assert SurveyState().qualification_label == "Thank you for your interest"
    assert SurveyState(score=16).qualification_label == "Highly Qualified"


def test_next_is_blocked_until_answered():
    state = reduce(SurveyState(), NextStep())
    assert state.current_step == 1

    state = _run(state, CHOICES[0], NextStep())
    assert state.current_step == 2
    assert state.score == 5


def test_reducer_does_not_mutate_input():
    original = SurveyState()
    updated = reduce(original, CHOICES[0])

    assert original.answers == {}
    assert original.score == 0
    assert updated.score == 5


def test_reselecting_replaces_score():
    state = _run(SurveyState(), CHOICES[0], CHOICES[0])
    assert state.score == 5

    state = reduce(state, SelectOption(value="it-manager", text="IT"))
    assert state.score == 3
    assert state.answers["q1"].value == "it-manager"


def test_previous_keeps_answers():
    state = _run(SurveyState(), CHOICES[0], NextStep(), CHOICES[1], PreviousStep())

    assert state.current_step == 1
    assert state.score == 9
    assert can_advance(state)


def test_previous_on_first_step_is_noop():
    state = SurveyState()
    assert reduce(state, PreviousStep()) is state


def test_contact_step_requires_fields():
    state = _answer_all()
    assert state.current_step == CONTACT_STEP
    assert state.score == 24
    assert not can_advance(state)

    state = reduce(state, NextStep())
    assert not state.completed
    assert state.error


def test_contact_step_rejects_bad_email():
    state = _answer_all()
    state = _run(state, SetContact(name="A", email="nope", organization="Org"), NextStep())

    assert not state.completed
    assert "email" in state.error


def test_completion_generates_recommendations():
    state = _answer_all()
    state = _run(state, SetContact(name="A", email="a@b.com", organization="Org"), NextStep())

    assert state.completed
    assert state.progress == 1.0
    assert state.qualification_level == QualificationLevel.CRITICAL
    assert state.qualification_label == "Exceptionally Qualified"
    assert state.recommendations[0] == "Strategic RCM transformation with executive dashboard"
    assert not can_advance(state)


def test_options_ignored_on_contact_step():
    state = _answer_all()
    assert reduce(state, CHOICES[0]) is state


def test_payload_round_trips_through_validator():
    state = _answer_all()
    state = _run(state, SetContact(name="A", email="a@b.com", organization="Org"), NextStep())

    submission = validate_submission(to_submission_payload(state, timestamp="t"))

    assert submission.score == 24
    assert submission.qualificationLevel == QualificationLevel.CRITICAL
    assert submission.answers.q4.sar == 800000
    assert submission.timestamp == "t"
