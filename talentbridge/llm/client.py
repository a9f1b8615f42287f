"""
Thin wrapper over the OpenAI chat completions API.

One client is built by the application factory and shared read-only by all
requests. Calls are single-attempt: no retries, a bounded timeout, and any
failure surfaces as ``ExternalServiceError`` so call sites can fall back.
"""
import json
import re
from typing import Any, Dict, Optional

from openai import OpenAI

from talentbridge.exceptions import ExternalServiceError
from talentbridge.simple_logger import get_logger

logger = get_logger("llm")

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class LLMClient:
    """Generative-language client: prompt in, text out"""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0,
                 temperature: float = 0.2, max_tokens: int = 2048, client: Optional[Any] = None):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise ExternalServiceError(f"LLM request failed: {e}") from e

        if not content or not content.strip():
            raise ExternalServiceError("LLM returned an empty response")
        return content.strip()

    def generate_json(self, prompt: str, system: Optional[str] = None) -> Dict[str, Any]:
        """Generate and parse the first JSON object of the response"""
        return parse_json_object(self.generate(prompt, system=system))


def build_llm_client(config) -> Optional[LLMClient]:
    """Build the shared client, or None when no API key is configured"""
    api_key = config.get('OPENAI_API_KEY')
    if not api_key:
        logger.info("OPENAI_API_KEY not set, AI features use deterministic fallbacks")
        return None

    try:
        client = LLMClient(
            api_key=api_key,
            model=config.get('OPENAI_MODEL', 'gpt-4o-mini'),
            timeout=config.get('OPENAI_TIMEOUT', 30.0),
            temperature=config.get('OPENAI_TEMPERATURE', 0.2),
            max_tokens=config.get('OPENAI_MAX_TOKENS', 2048)
        )
        logger.info(f"LLM client initialized with model {client.model}")
        return client
    except Exception as e:
        logger.warning(f"Failed to initialize LLM client: {e}")
        return None


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def extract_json_object(text: str) -> str:
    """Return the first balanced top-level ``{...}`` in ``text``.

    Braces inside JSON string literals are ignored.
    """
    start = text.find("{")
    if start == -1:
        raise ExternalServiceError("No JSON object in LLM response")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    raise ExternalServiceError("Unterminated JSON object in LLM response")


def parse_json_object(text: str) -> Dict[str, Any]:
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(extract_json_object(cleaned))
    except json.JSONDecodeError as e:
        raise ExternalServiceError(f"Invalid JSON in LLM response: {e}") from e
    if not isinstance(data, dict):
        raise ExternalServiceError("LLM response is not a JSON object")
    return data
