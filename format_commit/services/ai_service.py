"""AI service for suggesting commit titles."""

import json
import logging
import math
import re

import requests

from ..config.settings import CommitConfig
from ..core.git import DiffData
from ..core.parser import accept_title, example_title
from ..core.renderer import CommitFormat

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 4
REQUEST_TIMEOUT = 30
MAX_TOKENS = 200

SYSTEM_PROMPT = (
    "You are a commit message generator. You MUST respond with ONLY a JSON array. "
    "NO explanations. NO markdown. NO additional text whatsoever."
)

FORMAT_INSTRUCTIONS = {
    CommitFormat.PAREN_SENTENCE: "Format: (type) Title with first letter capitalized",
    CommitFormat.PAREN_LOWER: "Format: (type) title in lowercase",
    CommitFormat.COLON_SENTENCE: "Format: type: Title with first letter capitalized",
    CommitFormat.COLON_LOWER: "Format: type: title in lowercase",
    CommitFormat.SCOPE_SENTENCE: "Format: type(scope) Title with first letter capitalized",
    CommitFormat.SCOPE_LOWER: "Format: type(scope) title in lowercase",
    CommitFormat.SCOPE_COLON_SENTENCE: "Format: type(scope): Title with first letter capitalized",
    CommitFormat.SCOPE_COLON_LOWER: "Format: type(scope): title in lowercase",
}


class AIServiceError(ValueError):
    """AI provider request failed or returned an unusable answer."""

    pass


class AIService:
    """Service for requesting title suggestions from Anthropic, OpenAI or Google."""

    def __init__(self, config: CommitConfig, api_key: str | None):
        if not api_key:
            raise AIServiceError(f"API key is required ({config.ai.key_name} not found)")
        self.config = config
        self.api_key = api_key

    @staticmethod
    def estimate_tokens(prompt: str) -> int:
        """Rough token count, one token per four characters."""
        return math.ceil(len(prompt) / 4)

    def _format_instruction(self) -> str:
        if self.config.format.is_custom:
            return (
                f"Format: {self.config.custom_format} "
                "(type, scope and description are placeholders, keep every other character exactly)"
            )
        return FORMAT_INSTRUCTIONS[self.config.format]

    def build_prompt(self, diff_data: DiffData, fields: dict[str, str] | None = None) -> str:
        """Generate the prompt for the AI model."""
        types = ", ".join(f"{t.value} ({t.description})" for t in self.config.types)
        if self.config.scopes:
            scopes_line = "- Available scopes: " + ", ".join(
                f"{s.value} ({s.description})" for s in self.config.scopes
            )
        else:
            scopes_line = "- No scopes - DO NOT include scope in output"

        return (
            "You must analyze git changes and return ONLY a valid JSON array. "
            "NO explanations, NO markdown, NO additional text.\n\n"
            f"Git diff stats:\n{diff_data.stats}\n\n"
            f"Git diff:\n{diff_data.diff}\n\n"
            "STRICT REQUIREMENTS:\n"
            f"- {self._format_instruction()}\n"
            f'- Example format: "{example_title(self.config, fields)}"\n'
            f"- Available types: {types}\n"
            f"{scopes_line}\n"
            f"- Length: {self.config.min_length}-{self.config.max_length} chars per title\n"
            f"- Return exactly {SUGGESTION_COUNT} different commit titles\n"
            "- Output MUST be a raw JSON array with NO text before or after\n\n"
            "YOUR RESPONSE MUST BE EXACTLY THIS FORMAT (no other text):\n"
            '["title 1", "title 2", "title 3", "title 4"]'
        )

    def _post(self, provider: str, url: str, headers: dict[str, str], data: dict) -> dict:
        try:
            response = requests.post(url, headers=headers, json=data, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise AIServiceError(f"API Request failed: {e}") from e

        if not response.ok:
            raise AIServiceError(f"{provider} API error: {response.status_code} {response.text}")
        try:
            return response.json()
        except ValueError as e:
            raise AIServiceError(f"{provider} returned a non-JSON response: {e}") from e

    def _call_anthropic(self, prompt: str) -> str:
        response_data = self._post(
            "Anthropic",
            "https://api.anthropic.com/v1/messages",
            {
                "Content-Type": "application/json",
                "x-api-key": self.api_key,
                "anthropic-version": "2023-06-01",
            },
            {
                "model": self.config.ai.model,
                "max_tokens": MAX_TOKENS,
                "system": SYSTEM_PROMPT,
                "messages": [{"role": "user", "content": prompt}],
            },
        )
        return response_data["content"][0]["text"]

    def _call_openai(self, prompt: str) -> str:
        response_data = self._post(
            "OpenAI",
            "https://api.openai.com/v1/chat/completions",
            {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            {
                "model": self.config.ai.model,
                "max_tokens": MAX_TOKENS,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            },
        )
        return response_data["choices"][0]["message"]["content"]

    def _call_google(self, prompt: str) -> str:
        response_data = self._post(
            "Gemini",
            f"https://generativelanguage.googleapis.com/v1beta/models/{self.config.ai.model}:generateContent",
            {
                "Content-Type": "application/json",
                "x-goog-api-key": self.api_key,
            },
            {
                "system_instruction": {"parts": [{"text": SYSTEM_PROMPT}]},
                "contents": [{"parts": [{"text": prompt}]}],
            },
        )
        return response_data["candidates"][0]["content"]["parts"][0]["text"]

    def request_completion(self, prompt: str) -> str:
        """Send the prompt to the configured provider and return its raw text."""
        provider = self.config.ai.provider
        logger.debug("Requesting suggestions from %s (%s)", provider, self.config.ai.model)
        try:
            if provider == "anthropic":
                return self._call_anthropic(prompt)
            if provider == "openai":
                return self._call_openai(prompt)
            if provider == "google":
                return self._call_google(prompt)
        except (KeyError, IndexError, TypeError) as e:
            raise AIServiceError(f"Unexpected {provider} response structure: {e}") from e
        raise AIServiceError(f"Unknown AI provider: {provider}")

    @staticmethod
    def extract_suggestions(text: str) -> list[str]:
        """Pull the JSON array of titles out of a model answer."""
        match = re.search(r"\[[\s\S]*\]", text)
        if not match:
            logger.debug("AI response without JSON array: %s", text)
            raise AIServiceError("No JSON array found in AI response")

        try:
            suggestions = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise AIServiceError(f"Failed to parse AI response as JSON: {e}") from e

        if (
            not isinstance(suggestions, list)
            or len(suggestions) != SUGGESTION_COUNT
            or not all(isinstance(s, str) for s in suggestions)
        ):
            raise AIServiceError("Invalid AI response format")
        return suggestions

    def validate_suggestions(self, suggestions: list[str], fields: dict[str, str] | None = None) -> list[str]:
        """Run suggestions through the same acceptance path as typed titles."""
        accepted = []
        for suggestion in suggestions:
            result = accept_title(suggestion, self.config, fields)
            if result.is_valid:
                if result.normalized not in accepted:
                    accepted.append(result.normalized)
            else:
                logger.debug("Rejected AI suggestion %r: %s", suggestion, result.error)
        return accepted

    def generate_suggestions(
        self,
        diff_data: DiffData,
        fields: dict[str, str] | None = None,
        prompt: str | None = None,
    ) -> list[str]:
        """Generate normalized commit title suggestions for the staged diff."""
        prompt = prompt or self.build_prompt(diff_data, fields)
        response_text = self.request_completion(prompt)
        return self.validate_suggestions(self.extract_suggestions(response_text), fields)
