import pytest
from pydantic import ValidationError

from itda.schemas.analysis_schemas import AnalysisResult, RelationshipMode
from itda.schemas.person_schemas import PersonRecord, StoredAnalysis
from tests.fakes.fake_gateways import sample_analysis


class TestAnalysisResult:
    def test_valid_payload(self):
        result = AnalysisResult.model_validate(sample_analysis())

        assert result.intimacyScore == 72
        assert len(result.responseHeatmap) == 24
        assert result.avgResponseTime.speaker2.time is None

    @pytest.mark.parametrize("hours", [23, 25, 0])
    def test_heatmap_must_have_24_entries(self, hours):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(sample_analysis(responseHeatmap=[1.0] * hours))

    def test_heatmap_rejects_negative_values(self):
        heatmap = [1.0] * 24
        heatmap[3] = -0.5
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(sample_analysis(responseHeatmap=heatmap))

    def test_sentiment_flow_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(sample_analysis(sentimentFlow=[]))

    @pytest.mark.parametrize("field,value", [
        ("intimacyScore", 101),
        ("intimacyScore", -1),
    ])
    def test_intimacy_range(self, field, value):
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(sample_analysis(**{field: value}))

    def test_sentiment_score_range(self):
        flow = [{"time_percentage": 10, "sentiment_score": 1.5}]
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(sample_analysis(sentimentFlow=flow))

    def test_list_fields_default_to_empty(self):
        data = sample_analysis()
        for key in ("suggestedReplies", "attentionPoints", "suggestedTopics"):
            data.pop(key)

        result = AnalysisResult.model_validate(data)

        assert result.suggestedReplies == []
        assert result.attentionPoints == []
        assert result.suggestedTopics == []

    def test_heatmap_survives_json_dump(self):
        result = AnalysisResult.model_validate(sample_analysis())
        restored = AnalysisResult.model_validate(result.model_dump(mode="json"))

        assert restored.responseHeatmap == result.responseHeatmap


def test_stored_analysis_uses_person_name_as_speaker2():
    record = PersonRecord(
        owner_id="user-1",
        name="Jordan",
        mode=RelationshipMode.ROMANCE,
        history=["A: hi"],
        analysis=AnalysisResult.model_validate(sample_analysis()),
    )

    stored = StoredAnalysis.from_record(record)

    assert stored.id == "user-1_Jordan"
    assert stored.speaker1Name == "Me"
    assert stored.speaker2Name == "Jordan"
    assert stored.mode == RelationshipMode.ROMANCE
