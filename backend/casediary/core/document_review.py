"""
Consuming streamed AI output.

A ``StreamRequest`` accumulates the increments of one streamed reply. A
``StreamChannel`` hands out requests one at a time: starting a new request
cancels the previous one, whose result is then flagged as superseded and
should be discarded by the caller.
"""
import json
import logging
from typing import AsyncIterator, Callable, Optional

from pydantic import ValidationError

from casediary.models.documents import DocumentAnalysis

logger = logging.getLogger("document_review")


def parse_analysis(text: str) -> DocumentAnalysis:
    """
    Extract the analysis object from a completed review response.

    The JSON object is taken from the first '{' to the last '}', so prose or
    code fences around it are ignored. Never raises: problems come back as an
    analysis carrying ``error``.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        logger.warning("⚠️ NO JSON OBJECT IN REVIEW RESPONSE")
        return DocumentAnalysis(
            error="Failed to process the AI's response. Reason: Valid JSON object not found in the AI response."
        )

    try:
        data = json.loads(text[start:end + 1])
        if not isinstance(data, dict):
            raise ValueError("response is not a JSON object")
        if data.get("error"):
            return DocumentAnalysis(error=str(data["error"]))
        return DocumentAnalysis.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.warning(f"⚠️ UNPARSEABLE REVIEW RESPONSE: {str(e)}")
        return DocumentAnalysis(error=f"Failed to process the AI's response. Reason: {str(e)}")


class StreamRequest:
    """One streamed AI reply, consumed into an accumulating buffer."""

    def __init__(self, generation: int):
        self.generation = generation
        self.text = ""
        self.complete = False
        self.interrupted = False
        self.cancelled = False
        self.error: Optional[str] = None

    @property
    def superseded(self) -> bool:
        return self.cancelled

    def cancel(self):
        self.cancelled = True

    async def chunks(self, stream: AsyncIterator[str]) -> AsyncIterator[str]:
        """
        Pass increments through while accumulating them, until the stream
        ends or the request is cancelled.

        Partial text survives an interruption; the request is marked complete
        either way and is not retried.
        """
        try:
            async for chunk in stream:
                if self.cancelled:
                    logger.info(f"⏹️ STREAM CANCELLED: generation={self.generation}, received={len(self.text)}")
                    break
                self.text += chunk
                yield chunk
        except Exception as e:
            self.interrupted = True
            self.error = str(e)
            logger.error(f"❌ STREAM INTERRUPTED: generation={self.generation}, kept={len(self.text)}, error={str(e)}")
        finally:
            self.complete = True
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    async def consume(
        self,
        stream: AsyncIterator[str],
        on_chunk: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Read the stream to the end (or until cancelled) and return the accumulated text."""
        async for chunk in self.chunks(stream):
            if on_chunk:
                on_chunk(chunk)
        return self.text


class StreamChannel:
    """Issues stream requests for one purpose; only the newest one counts."""

    def __init__(self, name: str):
        self.name = name
        self.generation = 0
        self.current: Optional[StreamRequest] = None

    def begin(self) -> StreamRequest:
        if self.current is not None and not self.current.complete:
            logger.info(f"⏹️ SUPERSEDING REQUEST: channel={self.name}, generation={self.current.generation}")
            self.current.cancel()
        self.generation += 1
        self.current = StreamRequest(self.generation)
        return self.current

    def is_current(self, request: StreamRequest) -> bool:
        return self.current is request and not request.cancelled
