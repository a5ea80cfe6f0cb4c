"""
Google Gemini interviewer client.

Persona goes in as the system instruction; transcript roles are mapped
assistant -> model. Analysis requests JSON output via the response MIME type.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from mock_interview.core.errors import ServiceError, ServiceUnavailableError
from mock_interview.core.prompt_templates import (
    ANALYSIS_SYSTEM_PROMPT,
    FALLBACK_REPLY,
    OPENING_INSTRUCTION,
    build_analysis_prompt,
    build_system_prompt,
)
from mock_interview.domain.models import AnswerAnalysis, ChatTurn
from mock_interview.domain.roles import InterviewRole
from mock_interview.services.interviewer import InterviewClient, parse_analysis


UNAVAILABLE_ERRORS = (
    google_exceptions.Unauthenticated,
    google_exceptions.PermissionDenied,
    google_exceptions.ServiceUnavailable,
)


class GeminiInterviewClient(InterviewClient):
    name = "gemini"

    def __init__(self, api_key: Optional[str], model: str = "gemini-2.5-flash") -> None:
        self.api_key = api_key
        self.model = model
        self._configured = False

    def _model(self, system_instruction: str, json_output: bool = False) -> genai.GenerativeModel:
        if not self.api_key:
            raise ServiceUnavailableError(
                "Environment variable 'GEMINI_API_KEY' (or 'GOOGLE_API_KEY') not found"
            )
        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True

        generation_config = None
        if json_output:
            generation_config = genai.types.GenerationConfig(response_mime_type="application/json")
        return genai.GenerativeModel(
            self.model,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

    async def _generate(self, model: genai.GenerativeModel, contents: Any) -> str:
        try:
            response = await model.generate_content_async(contents)
            return (response.text or "").strip()
        except UNAVAILABLE_ERRORS as e:
            raise ServiceUnavailableError(f"Gemini unavailable: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            raise ServiceError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            # response.text raises when the candidate was blocked or empty
            raise ServiceError(f"Gemini returned no text: {e}") from e

    async def initial_question(self, role: InterviewRole) -> str:
        model = self._model(build_system_prompt(role))
        contents = [{"role": "user", "parts": [OPENING_INSTRUCTION]}]
        return await self._generate(model, contents) or FALLBACK_REPLY

    async def respond(self, role: InterviewRole, history: List[ChatTurn]) -> str:
        model = self._model(build_system_prompt(role))
        contents: List[Dict[str, Any]] = [
            {"role": "model" if turn.role == "assistant" else "user", "parts": [turn.content]}
            for turn in history
        ]
        return await self._generate(model, contents) or FALLBACK_REPLY

    async def analyze(self, answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
        model = self._model(ANALYSIS_SYSTEM_PROMPT, json_output=True)
        text = await self._generate(model, build_analysis_prompt(answer, question, role))
        return parse_analysis(text)
