"""
OpenAI interviewer client.

Interviewer turns go through LangChain's ChatOpenAI (persona as system
message, transcript as AI/Human messages). Answer analysis calls the
chat completions API directly in JSON mode.
"""
from __future__ import annotations

from typing import List, Optional

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI

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


def _translate_error(e: Exception) -> ServiceError:
    if isinstance(e, (openai.APIConnectionError, openai.AuthenticationError, openai.PermissionDeniedError)):
        return ServiceUnavailableError(f"OpenAI unavailable: {e}")
    return ServiceError(f"OpenAI request failed: {e}")


def _content_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content.strip()
    # content blocks
    parts = [block.get("text", "") for block in content if isinstance(block, dict)]
    return "".join(parts).strip()


class OpenAIInterviewClient(InterviewClient):
    name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4.1-nano",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._chat: Optional[ChatOpenAI] = None
        self._client: Optional[AsyncOpenAI] = None

    def _require_key(self) -> str:
        if not self.api_key:
            raise ServiceUnavailableError("OPENAI_API_KEY not found in environment variables")
        return self.api_key

    @property
    def chat(self) -> ChatOpenAI:
        if self._chat is None:
            self._chat = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                api_key=self._require_key(),
                base_url=self.base_url,
                max_tokens=500,
            )
        return self._chat

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._require_key(), base_url=self.base_url)
        return self._client

    async def _invoke(self, messages: List[BaseMessage]) -> str:
        try:
            response = await self.chat.ainvoke(messages)
        except openai.OpenAIError as e:
            raise _translate_error(e) from e
        return _content_text(response) or FALLBACK_REPLY

    async def initial_question(self, role: InterviewRole) -> str:
        return await self._invoke([
            SystemMessage(content=build_system_prompt(role)),
            HumanMessage(content=OPENING_INSTRUCTION),
        ])

    async def respond(self, role: InterviewRole, history: List[ChatTurn]) -> str:
        messages: List[BaseMessage] = [SystemMessage(content=build_system_prompt(role))]
        for turn in history:
            if turn.role == "assistant":
                messages.append(AIMessage(content=turn.content))
            else:
                messages.append(HumanMessage(content=turn.content))
        return await self._invoke(messages)

    async def analyze(self, answer: str, question: str, role: InterviewRole) -> AnswerAnalysis:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {"role": "user", "content": build_analysis_prompt(answer, question, role)},
                ],
                response_format={"type": "json_object"},
                temperature=0.3,
                max_tokens=800,
            )
        except openai.OpenAIError as e:
            raise _translate_error(e) from e
        return parse_analysis(response.choices[0].message.content)
