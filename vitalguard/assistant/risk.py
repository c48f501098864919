"""
Risk assessment

Asks the language model for a short risk summary of the current vitals and
parses the trailing RISK:<LEVEL> label out of the generated text.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

from vitalguard.analysis.vitals import VitalsSnapshot
from vitalguard.assistant.client import AIServiceError, ChatCompletionClient

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = (
    "Unable to reach the AI service right now. For urgent medical concerns, "
    "please contact your healthcare provider or call emergency services."
)


class RiskLabel(Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"

    @property
    def token(self) -> str:
        return f"RISK:{self.value}"


# Checked in this order when several labels appear in one response
_LABEL_PRECEDENCE = (RiskLabel.HIGH, RiskLabel.MODERATE, RiskLabel.LOW)


@dataclass(frozen=True)
class RiskAssessment:
    label: RiskLabel
    summary: str
    failed: bool = False

    def to_dict(self) -> dict:
        return {"label": self.label.value, "summary": self.summary, "failed": self.failed}


def parse_risk_response(text: str) -> RiskAssessment:
    label = RiskLabel.UNKNOWN
    for candidate in _LABEL_PRECEDENCE:
        if candidate.token in text:
            label = candidate
            break

    summary = text
    for candidate in _LABEL_PRECEDENCE:
        summary = summary.replace(candidate.token, "")

    return RiskAssessment(label=label, summary=summary.strip())


def build_risk_prompt(snapshot: VitalsSnapshot) -> str:
    return (
        "You are a preventive health AI. Analyze these vitals and give a brief, "
        "clear risk assessment (2-3 sentences max).\n"
        f"- Heart Rate: {snapshot.heart_rate_display}\n"
        f"- Blood Pressure: {snapshot.bp_display}\n"
        f"- Blood Glucose: {snapshot.glucose_display}\n"
        f"- Steps Today: {snapshot.steps}\n"
        f"- Oxygen Saturation: {snapshot.oxygen_display}\n"
        "\n"
        "End your response with one of these exact labels on a new line: "
        "RISK:LOW, RISK:MODERATE, or RISK:HIGH."
    )


class RiskAssessor:
    """Runs risk assessments off the alert lane.

    Failures never propagate; they come back as an UNKNOWN assessment
    carrying the fallback summary.
    """

    def __init__(self, client: ChatCompletionClient, max_workers: int = 1):
        self.client = client
        self.executor = ThreadPoolExecutor(max_workers=max_workers)

    def assess(self, snapshot: VitalsSnapshot) -> RiskAssessment:
        try:
            response = self.client.generate(build_risk_prompt(snapshot))
        except AIServiceError as e:
            logger.warning(f"Risk assessment failed: {e}")
            return RiskAssessment(label=RiskLabel.UNKNOWN, summary=FALLBACK_SUMMARY, failed=True)
        return parse_risk_response(response)

    def assess_async(self, snapshot: VitalsSnapshot) -> Future[RiskAssessment]:
        return self.executor.submit(self.assess, snapshot)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)
