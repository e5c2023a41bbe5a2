"""
Survey step navigation as an immutable state and a pure reducer.

Steps 1-5 are the scored questions, step 6 collects contact details.
``reduce(state, event)`` never mutates its input, which keeps the flow
testable without any UI.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from survey_api.models.survey_models import (
    Answer,
    Contact,
    QualificationLevel,
    QuestionId,
)
from survey_api.services import scoring_engine

TOTAL_STEPS = 6
CONTACT_STEP = TOTAL_STEPS
STEP_QUESTIONS: Dict[int, QuestionId] = {
    index + 1: question for index, question in enumerate(QuestionId)
}


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class SelectOption(_Event):
    """The respondent picked an option on the current question step."""
    value: str
    text: str
    qualify: Optional[str] = None
    sar: Optional[float] = None


class SetContact(_Event):
    """Contact form fields as currently typed."""
    name: str = ""
    email: str = ""
    organization: str = ""
    phone: Optional[str] = None
    location: Optional[str] = None
    jobTitle: Optional[str] = None


class NextStep(_Event):
    """Advance, or complete the survey from the contact step."""


class PreviousStep(_Event):
    """Go back one step."""


SurveyEvent = Union[SelectOption, SetContact, NextStep, PreviousStep]


class SurveyState(BaseModel):
    """Snapshot of one respondent's progress through the survey."""
    model_config = ConfigDict(frozen=True)

    current_step: int = Field(default=1, ge=1, le=TOTAL_STEPS)
    answers: Dict[str, Answer] = Field(default_factory=dict)
    score: int = 0
    contact_form: SetContact = Field(default_factory=SetContact)
    contact: Optional[Contact] = None
    completed: bool = False
    recommendations: List[str] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def qualification_level(self) -> QualificationLevel:
        return scoring_engine.qualification_level(self.score)

    @property
    def qualification_label(self) -> str:
        """Headline shown on the results screen."""
        return scoring_engine.TIER_LABELS[self.qualification_level]

    @property
    def progress(self) -> float:
        """Fraction of steps reached, 1.0 once completed."""
        if self.completed:
            return 1.0
        return self.current_step / TOTAL_STEPS


def _contact_fields_filled(form: SetContact) -> bool:
    return all(v.strip() for v in (form.name, form.email, form.organization))


def can_advance(state: SurveyState) -> bool:
    """Whether the "next" action is enabled for the current step."""
    if state.completed:
        return False
    if state.current_step == CONTACT_STEP:
        return _contact_fields_filled(state.contact_form)
    return STEP_QUESTIONS[state.current_step].value in state.answers


def _rescore(answers: Dict[str, Answer]) -> int:
    return scoring_engine.total_score(
        {question: answers.get(question.value) for question in QuestionId}
    )


def _select(state: SurveyState, event: SelectOption) -> SurveyState:
    if state.completed or state.current_step == CONTACT_STEP:
        return state
    question = STEP_QUESTIONS[state.current_step]
    points = scoring_engine.score(question, event.value, event.qualify)
    answers = dict(state.answers)
    # Replaces any earlier choice for this slot
    answers[question.value] = Answer(
        value=event.value,
        text=event.text,
        qualify=event.qualify,
        sar=event.sar,
        aiScore=points,
    )
    return state.model_copy(
        update={"answers": answers, "score": _rescore(answers), "error": None}
    )


def _complete(state: SurveyState) -> SurveyState:
    form = state.contact_form
    if not _contact_fields_filled(form):
        return state.model_copy(
            update={"error": "Please fill in Name, Work Email, and Organization."}
        )
    try:
        contact = Contact(**form.model_dump())
    except ValidationError:
        return state.model_copy(update={"error": "Please enter a valid work email."})

    def value(question: QuestionId) -> Optional[str]:
        answer = state.answers.get(question.value)
        return answer.value if answer else None

    recommendations = scoring_engine.generate_recommendations(
        role=value(QuestionId.ROLE),
        challenge=value(QuestionId.PRIMARY_CHALLENGE),
        financial_impact=value(QuestionId.FINANCIAL_IMPACT),
    )
    return state.model_copy(
        update={
            "contact": contact,
            "completed": True,
            "recommendations": recommendations,
            "error": None,
        }
    )


def reduce(state: SurveyState, event: SurveyEvent) -> SurveyState:
    """Return the state that follows ``event``; ``state`` is left untouched."""
    if isinstance(event, SelectOption):
        return _select(state, event)
    if isinstance(event, SetContact):
        if state.completed:
            return state
        return state.model_copy(update={"contact_form": event, "error": None})
    if isinstance(event, PreviousStep):
        if state.completed or state.current_step == 1:
            return state
        return state.model_copy(update={"current_step": state.current_step - 1, "error": None})
    if isinstance(event, NextStep):
        if state.completed:
            return state
        if state.current_step == CONTACT_STEP:
            return _complete(state)
        if not can_advance(state):
            return state
        return state.model_copy(update={"current_step": state.current_step + 1, "error": None})
    raise TypeError(f"Unsupported survey event: {type(event).__name__}")


def to_submission_payload(state: SurveyState, timestamp: Optional[str] = None) -> dict:
    """JSON body for POST /api/submit built from a completed state."""
    if not state.completed or state.contact is None:
        raise ValueError("Survey is not complete")
    answers = {slot: a.model_dump(mode="json", exclude_none=True) for slot, a in state.answers.items()}
    answers["contact"] = state.contact.model_dump(mode="json", exclude_none=True)
    payload = {
        "answers": answers,
        "score": state.score,
        "aiRecommendations": list(state.recommendations),
        "qualificationLevel": state.qualification_level.value,
        "version": "2.0",
    }
    if timestamp:
        payload["timestamp"] = timestamp
    return payload
