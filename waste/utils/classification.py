# waste/utils/classification.py
"""
Image classification through the Gemini generateContent REST API.

Two prompts are used: one that estimates waste type and quantity for a new
report, and one that checks a collector's photo against a report's declared
type and amount. The model is asked for bare JSON; replies are parsed
defensively because they often arrive wrapped in markdown code fences.
"""

import base64
import json
import logging
import re
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

ANALYZE_PROMPT = """You are an expert in waste management and recycling. Analyze this image and provide:
1. The type of waste (e.g., plastic, paper, glass, metal, organic)
2. An estimate of the quantity or amount (in kg or liters)
3. Your confidence level in this assessment

Respond in pure JSON format without any additional text like this:
{
  "wasteType": "type of waste",
  "quantity": "estimated quantity with unit",
  "confidence": confidence level as a number between 0 and 1
}"""

VERIFY_PROMPT = """You are an expert in waste management and recycling. Analyze this image and provide a JSON response. Follow this exact format:

{{
  "wasteTypeMatch": true/false,
  "quantityMatch": true/false,
  "confidence": confidence level as a number between 0 and 1
}}

Ensure your response is valid JSON with no additional text.

Confirm if:
1. The waste type matches: {waste_type}
2. The estimated quantity matches: {amount}
3. Confidence level in this assessment (0-1)."""

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class ClassificationError(Exception):
    """The classification service could not be reached or refused the request."""


class MalformedClassificationError(ClassificationError):
    """The service answered, but not with the JSON we asked for."""


class WasteAnalysis:
    """Classifier estimate for a new report."""
    def __init__(self, waste_type: str, quantity: str, confidence: float):
        self.waste_type = waste_type
        self.quantity = quantity
        self.confidence = confidence

    def to_dict(self):
        return {'wasteType': self.waste_type, 'quantity': self.quantity, 'confidence': self.confidence}


class MatchResult:
    """Classifier comparison between a collector's photo and the original report."""
    def __init__(self, waste_type_match: bool, quantity_match: bool, confidence: float):
        self.waste_type_match = waste_type_match
        self.quantity_match = quantity_match
        self.confidence = confidence

    @property
    def is_match(self) -> bool:
        return self.waste_type_match and self.quantity_match

    def to_dict(self):
        return {
            'wasteTypeMatch': self.waste_type_match,
            'quantityMatch': self.quantity_match,
            'confidence': self.confidence,
        }

    def __eq__(self, other):
        if not isinstance(other, MatchResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"MatchResult({self.waste_type_match}, {self.quantity_match}, {self.confidence})"


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub('', text or '').strip()


def parse_json_payload(text: str) -> dict:
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedClassificationError(f"Classifier reply is not valid JSON: {cleaned[:200]!r}") from e
    if not isinstance(payload, dict):
        raise MalformedClassificationError("Classifier reply is not a JSON object")
    return payload


def parse_confidence(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedClassificationError(f"Confidence must be a number, got {value!r}")
    confidence = float(value)
    if not 0 <= confidence <= 1:
        raise MalformedClassificationError(f"Confidence {confidence} is outside [0, 1]")
    return confidence


def parse_analysis(text: str) -> WasteAnalysis:
    payload = parse_json_payload(text)
    waste_type = payload.get('wasteType')
    quantity = payload.get('quantity')
    if not waste_type or not quantity or payload.get('confidence') is None:
        raise MalformedClassificationError(f"Incomplete analysis: {payload}")
    return WasteAnalysis(str(waste_type), str(quantity), parse_confidence(payload['confidence']))


def parse_flag(payload: dict, key: str) -> bool:
    value = payload.get(key)
    if not isinstance(value, bool):
        raise MalformedClassificationError(f"{key} must be true or false, got {value!r}")
    return value


def parse_match(text: str) -> MatchResult:
    payload = parse_json_payload(text)
    return MatchResult(
        waste_type_match=parse_flag(payload, 'wasteTypeMatch'),
        quantity_match=parse_flag(payload, 'quantityMatch'),
        confidence=parse_confidence(payload.get('confidence')),
    )


def apply_match_policy(result: MatchResult) -> MatchResult:
    """
    Adjust the classifier's verdict before deciding a verification.

    - confidence >= 0.9: a double mismatch is turned into a double match.
    - 0.8 < confidence < 0.9: any single match promotes the other flag.
    - confidence < 0.8 with a waste-type match: both flags are set.

    NOTE: this leans heavily toward accepting collections. It is kept as-is
    until product decides what verification should reject.
    """
    waste_type_match = result.waste_type_match
    quantity_match = result.quantity_match
    confidence = result.confidence

    if confidence > 0.8:
        if confidence >= 0.9:
            if not waste_type_match and not quantity_match:
                waste_type_match = quantity_match = True
        elif waste_type_match or quantity_match:
            waste_type_match = quantity_match = True

    if confidence < 0.8 and waste_type_match:
        waste_type_match = quantity_match = True

    return MatchResult(waste_type_match, quantity_match, confidence)


class GeminiVisionClient:
    """Thin client for Gemini generateContent with an inline image"""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, timeout: Optional[int] = None):
        self.api_key: str = api_key or getattr(settings, 'GEMINI_API_KEY', '') or ''
        self.model = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.GEMINI_TIMEOUT

    def is_available(self) -> bool:
        return bool(self.api_key)

    def generate(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        """Send the prompt and image, return the model's text reply."""
        if not self.is_available():
            raise ClassificationError("Gemini API key not configured. Set GEMINI_API_KEY.")

        payload = {
            "contents": [{
                "parts": [
                    {"text": prompt},
                    {"inline_data": {
                        "mime_type": mime_type or "image/jpeg",
                        "data": base64.b64encode(image_bytes).decode('ascii'),
                    }},
                ]
            }]
        }
        try:
            response = requests.post(
                self.BASE_URL.format(model=self.model),
                params={'key': self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ClassificationError(f"Gemini request failed: {e}") from e

        try:
            return data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedClassificationError(f"Unexpected Gemini response shape: {str(data)[:200]}") from e

    def analyze_waste(self, image_bytes: bytes, mime_type: str) -> WasteAnalysis:
        text = self.generate(image_bytes, mime_type, ANALYZE_PROMPT)
        return parse_analysis(text)

    def verify_collection(self, image_bytes: bytes, mime_type: str, waste_type: str, amount: str) -> MatchResult:
        """Raw verdict, before apply_match_policy."""
        text = self.generate(image_bytes, mime_type, VERIFY_PROMPT.format(waste_type=waste_type, amount=amount))
        return parse_match(text)


def get_classifier() -> GeminiVisionClient:
    return GeminiVisionClient()
