"""
Remote Field Classifier.

Asks an OpenAI-compatible chat-completions endpoint to classify a field
into one of the semantic tags. Used only when explicitly enabled and
only as an override for fields local inference cannot place.

`classify` never raises: transport, auth and format problems come back
as a ClassificationResult with `error` set, and the caller keeps its
local answer.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

from fakeforge.errors import ClassifierError


logger = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"

TYPE_DESCRIPTIONS = [
    ("email", "Email addresses"),
    ("name", "Full names"),
    ("firstname", "First names only"),
    ("lastname", "Last names only"),
    ("phone", "Phone numbers"),
    ("address", "Street addresses"),
    ("city", "City names"),
    ("state", "State/province codes"),
    ("zipcode", "ZIP/postal codes"),
    ("country", "Country names"),
    ("company", "Company names"),
    ("uuid", "Unique identifiers"),
    ("date", "Dates (YYYY-MM-DD)"),
    ("datetime", "Date with time"),
    ("price", "Monetary amounts"),
    ("boolean", "True/false values"),
    ("text", "Long text content"),
    ("url", "Web URLs"),
    ("image", "Image URLs"),
    ("jobtitle", "Job titles"),
    ("department", "Department names"),
    ("skill", "Skills/technologies"),
    ("color", "Color names"),
    ("product", "Product names"),
    ("brand", "Brand names"),
    ("username", "Usernames"),
    ("password", "Passwords"),
    ("ipaddress", "IP addresses"),
    ("macaddress", "MAC addresses"),
    ("creditcard", "Credit card numbers"),
    ("bankaccount", "Bank account numbers"),
    ("ssn", "Social security numbers"),
    ("license", "License numbers"),
    ("version", "Software versions"),
    ("status", "Status values"),
    ("priority", "Priority levels"),
    ("duration", "Time durations"),
    ("filename", "File names"),
    ("hashtag", "Social media hashtags"),
    ("longitude", "Geographic longitude"),
    ("latitude", "Geographic latitude"),
    ("temperature", "Temperature values"),
    ("weight", "Weight measurements"),
    ("height", "Height measurements"),
    ("age", "Age values"),
    ("gender", "Gender values"),
    ("category", "Categories/classifications"),
    ("int", "Integer numbers"),
    ("float", "Decimal numbers"),
    ("string", "Generic text"),
]

CLASSIFY_PROMPT = """You are an expert database schema analyzer. Given the following field information, determine the most appropriate data type for generating realistic fake data.

Field Name: {field_name}
Declared Type: {field_type}
Table Name: {table_name}{samples}

Available data types:
{types}

Respond with ONLY the data type name and a confidence score (0.0-1.0) in this format:
datatype:confidence

Example: email:0.95"""

DESCRIBE_PROMPT = """Analyze this database table schema and provide a brief, professional description of what this table represents and its purpose.

Table Name: {table_name}
Fields: {fields}

Provide a 1-2 sentence description focusing on the business purpose and data it contains."""

SUGGEST_PROMPT = """Given this database table, suggest 3-5 additional fields that would commonly be found in this type of table.

Table Name: {table_name}
Existing Fields: {fields}

Respond with ONLY field names, one per line, without explanations."""


@dataclass
class ClassificationResult:
    tag: str = ""
    confidence: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FieldClassifier:
    """Interface for optional field classifiers."""

    @property
    def enabled(self) -> bool:
        return False

    def classify(self, field, table_name: str = "", samples: list = None) -> ClassificationResult:
        raise NotImplementedError


class NullClassifier(FieldClassifier):
    """Disabled classifier; inference runs purely locally."""

    def classify(self, field, table_name: str = "", samples: list = None) -> ClassificationResult:
        return ClassificationResult(error="remote classifier disabled")


def parse_classification(reply: str) -> ClassificationResult:
    """Parse a `datatype:confidence` reply."""
    reply = (reply or "").strip()
    parts = reply.split(":")
    if len(parts) != 2:
        return ClassificationResult(error=f"invalid response format: {reply}")

    tag = parts[0].strip().lower()
    confidence_str = parts[1].strip()
    try:
        confidence = float(confidence_str)
    except ValueError:
        return ClassificationResult(error=f"invalid confidence score: {confidence_str}")

    return ClassificationResult(tag=tag, confidence=confidence)


class OpenAIClassifier(FieldClassifier):
    """Field classifier backed by an OpenAI-compatible chat-completions API."""

    def __init__(self, api_key: str = None, model: str = DEFAULT_MODEL,
                 url: str = OPENAI_URL, timeout: float = 30,
                 max_tokens: int = 100, temperature: float = 0.1):
        self.api_key = api_key if api_key is not None else os.environ.get("OPENAI_API_KEY", "")
        self.model = model
        self.url = url
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def is_available(self) -> bool:
        """Check whether an API key is configured."""
        return self.enabled

    def build_prompt(self, field, table_name: str = "", samples: list = None) -> str:
        sample_line = f"\nSample Data: {', '.join(str(s) for s in samples)}" if samples else ""
        types = "\n".join(f"- {tag}: {desc}" for tag, desc in TYPE_DESCRIPTIONS)
        return CLASSIFY_PROMPT.format(
            field_name=field.name,
            field_type=field.type,
            table_name=table_name,
            samples=sample_line,
            types=types,
        )

    def _call(self, prompt: str) -> str:
        """POST one chat message and return the first choice's content."""
        if not self.enabled:
            raise ClassifierError("OpenAI API not configured (set OPENAI_API_KEY)")

        try:
            resp = requests.post(
                self.url,
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ClassifierError(f"failed to make request: {e}") from e

        if resp.status_code != 200:
            raise ClassifierError(f"API request failed with status {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ClassifierError(f"failed to decode response: {e}") from e

        if not isinstance(data, dict):
            raise ClassifierError(f"unexpected response body: {type(data).__name__}")

        error = data.get("error")
        if error:
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            raise ClassifierError(f"OpenAI API error: {message}")

        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise ClassifierError("no choices returned from OpenAI")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise ClassifierError("malformed choice in OpenAI response")

        content = message.get("content") or ""
        if not isinstance(content, str):
            raise ClassifierError("malformed message content in OpenAI response")
        return content

    def classify(self, field, table_name: str = "", samples: list = None) -> ClassificationResult:
        if not self.enabled:
            return ClassificationResult(error="OpenAI API not configured")
        try:
            reply = self._call(self.build_prompt(field, table_name, samples))
        except ClassifierError as e:
            return ClassificationResult(error=str(e))

        return parse_classification(reply)

    def describe_table(self, table_name: str, field_names: list) -> str:
        """Ask for a one or two sentence business description of a table."""
        prompt = DESCRIBE_PROMPT.format(table_name=table_name, fields=", ".join(field_names))
        return self._call(prompt).strip()

    def suggest_fields(self, table_name: str, field_names: list) -> list:
        """Ask for 3-5 field names commonly found alongside the given ones."""
        prompt = SUGGEST_PROMPT.format(table_name=table_name, fields=", ".join(field_names))
        reply = self._call(prompt)
        return [line.strip() for line in reply.strip().split("\n") if line.strip()]


def get_classifier(enabled: bool, model: str = DEFAULT_MODEL, url: str = OPENAI_URL) -> FieldClassifier:
    """Build the classifier for a run; disabled runs get a NullClassifier."""
    if not enabled:
        return NullClassifier()
    classifier = OpenAIClassifier(model=model, url=url)
    if not classifier.enabled:
        logger.warning("AI mode requested but OPENAI_API_KEY is not set; using local inference only")
    return classifier
