import logging

from vitalguard.analysis.vitals import VitalsSnapshot
from vitalguard.assistant.client import AIServiceError, ChatCompletionClient

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "I'm having trouble connecting right now. For urgent medical concerns, please "
    "contact your healthcare provider or call emergency services."
)


def build_chat_prompt(text: str, snapshot: VitalsSnapshot) -> str:
    heart_rate = "unknown" if int(snapshot.heart_rate) == 0 else f"{int(snapshot.heart_rate)} BPM"
    context = (
        "You are a compassionate AI health assistant. Current user vitals: heart rate "
        f"{heart_rate}, steps today: {snapshot.steps}.\n"
        "You help with symptom triage, medication reminders, and general health guidance.\n"
        "Keep responses concise (2-4 sentences). For serious symptoms, always recommend "
        "seeing a doctor.\n"
        "Never diagnose, only guide and support."
    )
    return f"{context}\n\nUser: {text}\n\nAssistant:"


class HealthAssistant:
    def __init__(self, client: ChatCompletionClient):
        self.client = client

    def reply(self, text: str, snapshot: VitalsSnapshot) -> str | None:
        """Answer a user message; None when there is nothing to answer."""
        text = text.strip()
        if not text:
            return None
        try:
            return self.client.generate(build_chat_prompt(text, snapshot))
        except AIServiceError as e:
            logger.warning(f"Assistant reply failed: {e}")
            return FALLBACK_REPLY
