"""Language model collaborators: risk assessment and assistant chat."""

from .client import AIResponseError, AIServiceError, ChatCompletionClient
from .chat import HealthAssistant
from .risk import RiskAssessment, RiskAssessor, RiskLabel, parse_risk_response

__all__ = [
    "AIResponseError",
    "AIServiceError",
    "ChatCompletionClient",
    "HealthAssistant",
    "RiskAssessment",
    "RiskAssessor",
    "RiskLabel",
    "parse_risk_response",
]
