"""
Gemini chat wrapper plus the homework-answer call built on it.
Uses the official google-generativeai SDK directly.
"""

import asyncio
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from app.config import logger, get_llm_api_key, GEMINI_MODEL, ANSWER_WORD_LIMIT

SYSTEM_PROMPT = (
    "You are a helpful homework assistant. Provide clear, concise educational responses. "
    f"Always limit your responses to {ANSWER_WORD_LIMIT} words maximum."
)


class UpstreamError(Exception):
    """The LLM provider refused or failed the request"""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


class LlmChat:
    """
    Thin chat session over google-generativeai.

    Supports the chaining API:
        chat = LlmChat(system_message=...).with_params(temperature=0.7, max_output_tokens=300)

    send_message() is async and returns a plain string.
    """

    def __init__(self, system_message: str = ""):
        self._system_message = system_message
        self._model_name = GEMINI_MODEL
        self._generation_config = {}
        self._chat = None  # lazily created

    def with_params(self, temperature: float = None, max_output_tokens: int = None) -> "LlmChat":
        """Set generation parameters."""
        if temperature is not None:
            self._generation_config["temperature"] = temperature
        if max_output_tokens is not None:
            self._generation_config["max_output_tokens"] = max_output_tokens
        return self

    def _ensure_chat(self):
        """Lazily create the underlying genai chat session."""
        if self._chat is None:
            model = genai.GenerativeModel(
                model_name=self._model_name,
                system_instruction=self._system_message if self._system_message else None,
                generation_config=self._generation_config if self._generation_config else None,
            )
            self._chat = model.start_chat(history=[])

    async def send_message(self, text: str) -> str:
        """
        Send a message and return the response text as a plain string.

        This is async: uses run_in_executor for the synchronous genai SDK call.
        """
        self._ensure_chat()

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None, lambda: self._chat.send_message(text)
        )

        return response.text


def build_prompt(question: str, subject: str, topic: Optional[str] = None) -> str:
    prompt = (
        f"Please provide a clear, concise answer to the following {subject} question. "
        f"Keep your response to a maximum of {ANSWER_WORD_LIMIT} words.\n\n"
        f"Question: {question}\n"
    )
    if topic:
        prompt += f"Topic: {topic}\n"
    prompt += "\nProvide a helpful, educational response:"
    return prompt


def truncate_words(text: str, limit: int = ANSWER_WORD_LIMIT) -> str:
    """Cut text to `limit` words, marking the cut with an ellipsis"""
    words = text.split()
    if len(words) <= limit:
        return text
    return " ".join(words[:limit]) + "..."


def map_provider_error(e: Exception) -> UpstreamError:
    """Translate a google-api-core exception into an UpstreamError with an HTTP status"""
    message = str(e)
    lowered = message.lower()

    if isinstance(e, google_exceptions.ResourceExhausted):
        if "quota" in lowered:
            return UpstreamError(429, "quota_exceeded", "AI provider quota exceeded. Please try again later.")
        return UpstreamError(429, "rate_limited", "Too many requests to the AI provider. Please slow down.")
    if isinstance(e, google_exceptions.PermissionDenied):
        return UpstreamError(403, "access_denied", "Access to the AI model was denied.")
    if isinstance(e, google_exceptions.Unauthenticated) or (
        isinstance(e, google_exceptions.InvalidArgument) and "api key" in lowered
    ):
        return UpstreamError(500, "invalid_api_key", "The AI provider API key is invalid.")
    return UpstreamError(500, "llm_error", "Failed to generate AI response.")


async def generate_answer(question: str, subject: str, topic: Optional[str] = None) -> str:
    """Ask the LLM for a homework answer, trimmed to the word limit"""
    if not get_llm_api_key():
        raise UpstreamError(500, "llm_not_configured", "AI provider API key is not configured.")

    chat = LlmChat(system_message=SYSTEM_PROMPT).with_params(temperature=0.7, max_output_tokens=300)
    try:
        answer = await chat.send_message(build_prompt(question, subject, topic))
    except google_exceptions.GoogleAPIError as e:
        logger.error(f"LLM provider error: {e}")
        raise map_provider_error(e) from e
    except ValueError as e:
        # Raised by the SDK when the response was blocked and has no text
        logger.error(f"LLM returned no usable text: {e}")
        raise UpstreamError(500, "llm_error", "Failed to generate AI response.") from e

    return truncate_words(answer.strip())
