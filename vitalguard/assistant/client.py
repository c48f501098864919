import logging

import requests

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Network, HTTP or API-reported failure of the language model service."""


class AIResponseError(AIServiceError):
    """Response body is not the expected chat-completion JSON."""


class ChatCompletionClient:
    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        max_tokens: int = 512,
        temperature: float = 0.7,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def generate(self, prompt: str) -> str:
        """Send a single-turn prompt and return the generated text.

        Raises:
            AIServiceError: the request failed or the API reported an error
            AIResponseError: the response could not be parsed
        """
        try:
            response = requests.post(
                self.base_url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json=self.build_payload(prompt),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"AI request error: {e}")
            raise AIServiceError(str(e)) from e

        logger.debug(f"AI service HTTP status: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            if response.status_code != 200:
                raise AIServiceError(f"HTTP {response.status_code}") from e
            raise AIResponseError("Response is not valid JSON") from e

        if not isinstance(body, dict):
            raise AIResponseError("Response JSON is not an object")

        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            raise AIServiceError(error["message"])
        if response.status_code != 200:
            raise AIServiceError(f"HTTP {response.status_code}")

        try:
            text = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIResponseError("Missing choices[0].message.content") from e
        if not isinstance(text, str):
            raise AIResponseError("Message content is not text")

        return text
