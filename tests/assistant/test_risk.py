from unittest.mock import MagicMock

from vitalguard.analysis.vitals import VitalsSnapshot
from vitalguard.assistant.client import AIResponseError, AIServiceError
from vitalguard.assistant.risk import (
    FALLBACK_SUMMARY,
    RiskAssessor,
    RiskLabel,
    build_risk_prompt,
    parse_risk_response,
)


class TestParseRiskResponse:
    def test_low(self):
        result = parse_risk_response("Your vitals look stable.\nRISK:LOW")
        assert result.label == RiskLabel.LOW
        assert result.summary == "Your vitals look stable."

    def test_moderate(self):
        assert parse_risk_response("Watch your BP.\nRISK:MODERATE").label == RiskLabel.MODERATE

    def test_high_wins_over_others(self):
        result = parse_risk_response("RISK:LOW ... actually RISK:HIGH")
        assert result.label == RiskLabel.HIGH
        assert "RISK:" not in result.summary

    def test_missing_label_is_unknown(self):
        result = parse_risk_response("  No label here.  ")
        assert result.label == RiskLabel.UNKNOWN
        assert result.summary == "No label here."

    def test_lowercase_token_not_matched(self):
        assert parse_risk_response("risk:high").label == RiskLabel.UNKNOWN

    def test_to_dict(self):
        assert parse_risk_response("ok RISK:LOW").to_dict() == {
            "label": "LOW",
            "summary": "ok",
            "failed": False,
        }


class TestRiskPrompt:
    def test_prompt_lists_vitals(self):
        snapshot = VitalsSnapshot(
            heart_rate=88, steps=4200, systolic_text="130", diastolic_text="85"
        )
        prompt = build_risk_prompt(snapshot)

        assert "- Heart Rate: 88 BPM" in prompt
        assert "- Blood Pressure: 130/85 mmHg" in prompt
        assert "- Blood Glucose: not entered" in prompt
        assert "- Steps Today: 4200" in prompt
        assert "- Oxygen Saturation: unavailable" in prompt
        assert "RISK:LOW, RISK:MODERATE, or RISK:HIGH" in prompt


class TestRiskAssessor:
    def test_assess(self):
        client = MagicMock()
        client.generate.return_value = "Elevated heart rate.\nRISK:MODERATE"
        assessor = RiskAssessor(client)

        result = assessor.assess(VitalsSnapshot(heart_rate=105))

        assert result.label == RiskLabel.MODERATE
        assert result.summary == "Elevated heart rate."
        assert result.failed is False
        assessor.shutdown()

    def test_network_failure_falls_back(self):
        client = MagicMock()
        client.generate.side_effect = AIServiceError("timeout")
        assessor = RiskAssessor(client)

        result = assessor.assess(VitalsSnapshot())

        assert result.label == RiskLabel.UNKNOWN
        assert result.summary == FALLBACK_SUMMARY
        assert result.failed is True
        assessor.shutdown()

    def test_parse_failure_falls_back(self):
        client = MagicMock()
        client.generate.side_effect = AIResponseError("missing choices")
        assessor = RiskAssessor(client)

        assert assessor.assess(VitalsSnapshot()).failed is True
        assessor.shutdown()

    def test_assess_async(self):
        client = MagicMock()
        client.generate.return_value = "Fine.\nRISK:LOW"
        assessor = RiskAssessor(client)

        future = assessor.assess_async(VitalsSnapshot(heart_rate=70))

        assert future.result(timeout=5).label == RiskLabel.LOW
        assessor.shutdown()
