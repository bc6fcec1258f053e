import os
from typing import Optional

import requests

GEMINI_API_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent'
DEFAULT_MODEL = 'gemini-2.0-flash'
DEFAULT_TIMEOUT = 30

MISSING_KEY_MESSAGE = "Enter a valid API Key to get AI-powered statistical insights."
FAILURE_MESSAGE = "Unable to generate insights at this time."
EMPTY_MESSAGE = "No insight generated."

PROMPT_TEMPLATE = """
You are a Senior Data Scientist. Explain the following statistical result to a junior analyst.
Context: {context}
Data/Stats: {summary}

Requirements:
1. Explain what the metric means briefly.
2. Interpret the specific values provided.
3. Give a "Takeaway" or "Actionable Insight".
4. Keep it concise (under 100 words).
5. Do not use Markdown formatting like bold or headers, just plain text or simple bullet points.
"""


def get_api_key() -> Optional[str]:
    return os.environ.get('GEMINI_API_KEY') or os.environ.get('API_KEY') or None


def build_prompt(context: str, summary: str) -> str:
    return PROMPT_TEMPLATE.format(context=context, summary=summary)


def _configured_timeout() -> float:
    try:
        return float(os.environ.get('INSIGHT_TIMEOUT', DEFAULT_TIMEOUT))
    except ValueError:
        print(f"[WARN] Ignoring invalid INSIGHT_TIMEOUT, using {DEFAULT_TIMEOUT}s.")
        return float(DEFAULT_TIMEOUT)


def _extract_text(payload: dict) -> Optional[str]:
    candidates = payload.get('candidates') or []
    if not candidates:
        return None
    parts = (candidates[0].get('content') or {}).get('parts') or []
    text = ''.join(part.get('text', '') for part in parts)
    return text.strip() or None


def generate_statistical_insight(context: str, stats_summary: str,
                                 api_key: Optional[str] = None,
                                 model: Optional[str] = None,
                                 timeout: Optional[float] = None) -> str:
    """Asks Gemini to narrate a statistical result. Never raises; falls back to a fixed message."""
    api_key = api_key or get_api_key()
    if not api_key:
        print("[WARN] Gemini API key is missing. AI insights are disabled.")
        return MISSING_KEY_MESSAGE

    model = model or os.environ.get('GEMINI_MODEL', DEFAULT_MODEL)
    timeout = timeout or _configured_timeout()
    body = {"contents": [{"parts": [{"text": build_prompt(context, stats_summary)}]}]}

    try:
        resp = requests.post(GEMINI_API_URL.format(model=model), params={'key': api_key},
                             json=body, timeout=timeout)
        resp.raise_for_status()
        text = _extract_text(resp.json())
    except requests.exceptions.Timeout:
        print(f"[ERROR] Gemini request timed out after {timeout}s.")
        return FAILURE_MESSAGE
    except Exception as e:
        print(f"[ERROR] Gemini API error: {e}")
        return FAILURE_MESSAGE

    return text or EMPTY_MESSAGE


def explain(context: str, summary: str) -> str:
    return generate_statistical_insight(context, summary)
