import pytest
from pydantic import ValidationError
from survey_api.models.survey_models import Answer, Contact, QualificationLevel, QuestionId, SurveyRecord, SurveySubmission
from survey_api.models.response_models import InsightSet, SubmissionResult
from survey_api.models.audit_models import AuditEntry

def test_answer_model():
    """Test Answer model validation"""
    answer = Answer(value="critical-impact", text="More than SAR 500K", qualify="high", sar=800000)

    assert answer.value == "critical-impact"
    assert answer.qualify == "high"
    assert answer.sar == 800000
    assert answer.aiScore is None

def test_contact_model_strips_fields():
    """Test Contact model trims required fields"""
    contact = Contact(name="  Sara  ", email=" sara@hospital.sa ", organization=" KFMC ")

    assert contact.name == "Sara"
    assert contact.email == "sara@hospital.sa"
    assert contact.organization == "KFMC"

def test_contact_model_rejects_blank_name():
    """Test Contact model rejects whitespace-only values"""
    with pytest.raises(ValidationError):
        Contact(name="   ", email="a@b.com", organization="Org")

def test_submission_accepts_flat_answers():
    """Test SurveySubmission lifts top-level answers"""
    submission = SurveySubmission.model_validate({
        "q1": {"value": "rcm-director", "text": "RCM Director"},
        "contact": {"name": "A", "email": "a@b.com", "organization": "Org"},
        "score": 5,
    })

    assert submission.answers.slot(QuestionId.ROLE).value == "rcm-director"
    assert submission.answers.q2 is None
    assert submission.score == 5
    assert submission.version == "2.0"

def test_submission_rejects_negative_and_nan_score():
    """Test SurveySubmission score bounds"""
    contact = {"name": "A", "email": "a@b.com", "organization": "Org"}
    with pytest.raises(ValidationError):
        SurveySubmission(answers={"contact": contact}, score=-1)
    with pytest.raises(ValidationError):
        SurveySubmission(answers={"contact": contact}, score=float("nan"))

def test_survey_record_helpers():
    """Test SurveyRecord answer accessors"""
    record = SurveyRecord(
        id="r-1",
        timestamp="2026-10-19T09:30:00+00:00",
        createdMonth="2026-10",
        contact=Contact(name="A", email="a@b.com", organization="Org"),
        answers={"q3": Answer(value="nphies-compliance", text="NPHIES"), "q4": Answer(value="high-impact", text="High", sar=300000)},
        totalScore=9,
        qualificationLevel=QualificationLevel.MEDIUM,
        priorityScore=9,
    )

    assert record.answer_value(QuestionId.PRIMARY_CHALLENGE) == "nphies-compliance"
    assert record.answer_value(QuestionId.ROLE) is None
    assert record.financial_impact_sar == 300000
    assert record.processingStatus == "processed"

def test_submission_result_model():
    """Test SubmissionResult model validation"""
    result = SubmissionResult(
        id="r-1",
        qualificationLevel="critical",
        score=24,
        insights=InsightSet(),
        timestamp="2026-10-19T09:30:00+00:00",
    )

    assert result.success is True
    assert result.insights.trends == []

    with pytest.raises(ValidationError):
        SubmissionResult(id="r-1", qualificationLevel="critical", score=-1, insights=InsightSet(), timestamp="t")

def test_audit_entry_defaults():
    """Test AuditEntry default id and compliance flags"""
    first = AuditEntry(eventType="data_access", action="analytics_view")
    second = AuditEntry(eventType="data_access", action="analytics_view")

    assert first.id != second.id
    assert first.complianceFlags == ["GDPR", "HIPAA", "NPHIES"]
    first.complianceFlags.append("X")
    assert second.complianceFlags == ["GDPR", "HIPAA", "NPHIES"]
