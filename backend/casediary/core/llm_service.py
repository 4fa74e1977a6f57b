import json
import logging
from typing import AsyncIterator, List, Optional

from openai import AsyncOpenAI

from casediary.core import config
from casediary.core.system_prompt import (
    build_draft_prompt,
    build_review_prompt,
    build_stage_prompt,
    get_system_prompt,
)
from casediary.models.case import Case
from casediary.models.chat import ChatMessage

# Configure logging
logger = logging.getLogger("llm_service")

API_KEY_MISSING = "API Key not configured."
STAGE_FAILED = "Could not predict next stage."
DRAFT_FAILED = "Could not generate draft. Please try again."
REVIEW_FAILED = "Could not analyze document. An error occurred during streaming."
CHAT_FAILED = "Could not get advice. An error occurred during streaming."


class OpenAIService:
    """
    Gateway to the hosted model for stage prediction, drafting, document
    review and strategy chat.

    Every operation degrades to a fixed message instead of raising, so the
    rest of the application keeps working when the model is unreachable or
    no API key is configured.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        stage_model: Optional[str] = None,
        draft_model: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize the OpenAI service.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY)
            stage_model: Fast model used for stage prediction
            draft_model: Model used for drafting, review and chat
            client: Pre-built client, mainly for tests
        """
        self.api_key = api_key if api_key is not None else config.openai_api_key
        self.stage_model = stage_model or config.stage_model
        self.draft_model = draft_model or config.draft_model
        self.client = client
        if self.client is None and self.api_key:
            self.client = AsyncOpenAI(api_key=self.api_key)

        if self.client is None:
            logger.warning("⚠️ OPENAI_API_KEY NOT SET. AI features will not work.")
        else:
            logger.info(f"🔄 INITIALIZED OPENAI SERVICE: stage_model={self.stage_model}, draft_model={self.draft_model}")

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def predict_stage(self, case: Case) -> str:
        """Suggest the next procedural stage from the diary note and recent history."""
        if not self.configured:
            return API_KEY_MISSING
        try:
            logger.info(f"🔄 PREDICTING STAGE: id={case.id}, model={self.stage_model}")
            response = await self.client.chat.completions.create(
                model=self.stage_model,
                messages=[
                    {"role": "system", "content": get_system_prompt("stage")},
                    {"role": "user", "content": build_stage_prompt(case)},
                ],
                temperature=0.1,
            )
            stage = (response.choices[0].message.content or "").strip().strip('"')
            logger.info(f"✅ STAGE PREDICTED: id={case.id}, stage={stage!r}")
            return stage or STAGE_FAILED
        except Exception as e:
            logger.error(f"❌ ERROR PREDICTING STAGE: id={case.id}, error={str(e)}")
            return STAGE_FAILED

    async def generate_draft(self, request: str) -> str:
        if not self.configured:
            return API_KEY_MISSING
        try:
            logger.info(f"🔄 GENERATING DRAFT: model={self.draft_model}, request_length={len(request)}")
            response = await self.client.chat.completions.create(
                model=self.draft_model,
                messages=[
                    {"role": "system", "content": get_system_prompt("draft")},
                    {"role": "user", "content": build_draft_prompt(request)},
                ],
                temperature=0.3,
            )
            draft = response.choices[0].message.content or ""
            logger.info(f"✅ DRAFT GENERATED: length={len(draft)}")
            return draft or DRAFT_FAILED
        except Exception as e:
            logger.error(f"❌ ERROR GENERATING DRAFT: {str(e)}")
            return DRAFT_FAILED

    async def review_document_stream(self, document_text: str) -> AsyncIterator[str]:
        """
        Stream a structured review of a legal document.

        The concatenated chunks are expected to contain one JSON object with
        the six analysis fields. Failures are yielded as ``{"error": ...}``.
        """
        if not self.configured:
            yield json.dumps({"error": API_KEY_MISSING})
            return
        try:
            logger.info(f"🔄 REVIEWING DOCUMENT: model={self.draft_model}, length={len(document_text)}")
            messages = [
                {"role": "system", "content": get_system_prompt("review")},
                {"role": "user", "content": build_review_prompt(document_text)},
            ]
            async for text in self._stream(messages):
                yield text
            logger.info("✅ DOCUMENT REVIEW STREAM COMPLETE")
        except Exception as e:
            logger.error(f"❌ ERROR REVIEWING DOCUMENT: {str(e)}")
            yield json.dumps({"error": REVIEW_FAILED})

    async def chat_advice_stream(self, history: List[ChatMessage]) -> AsyncIterator[str]:
        """Stream the senior counsel's plain-text reply to the conversation so far."""
        if not self.configured:
            yield API_KEY_MISSING
            return
        try:
            logger.info(f"🔄 CHAT ADVICE: model={self.draft_model}, messages={len(history)}")
            messages = [{"role": "system", "content": get_system_prompt("counsel")}]
            messages.extend(
                {"role": "assistant" if m.role == "model" else "user", "content": m.content}
                for m in history
            )
            async for text in self._stream(messages):
                yield text
            logger.info("✅ CHAT ADVICE STREAM COMPLETE")
        except Exception as e:
            logger.error(f"❌ ERROR GETTING CHAT ADVICE: {str(e)}")
            yield CHAT_FAILED

    async def _stream(self, messages: List[dict]) -> AsyncIterator[str]:
        stream = await self.client.chat.completions.create(
            model=self.draft_model,
            messages=messages,
            temperature=0.2,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            text = chunk.choices[0].delta.content
            if text:
                yield text
