import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

import google.generativeai as genai

from .config import CONFIG
from .errors import EmptyResponse, GatewayFailure, ParseFailure
from .schemas import Schema


logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "[": "]"}


def extract_json_block(text: str, opener: str = "{") -> Optional[str]:
    """Return the first balanced ``{...}`` (or ``[...]``) substring of ``text``.

    Brackets inside JSON string literals are ignored. Returns None when no
    balanced block exists.
    """
    closer = _CLOSERS[opener]
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from this opener; try the next one
        start = text.find(opener, start + 1)
    return None


def parse_model_text(text: str, opener: str = "{") -> Any:
    """Strict JSON parse, falling back to the first balanced block in ``text``."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    block = extract_json_block(text, opener)
    if block is None:
        raise ParseFailure(text, "No JSON object found in the AI model response")
    try:
        return json.loads(block)
    except json.JSONDecodeError as e:
        raise ParseFailure(text, f"Failed to parse JSON from the AI model ({e.msg})")


class ModelGateway:
    """One schema-constrained Gemini call per ``query``.

    Holds no per-request state; the underlying ``GenerativeModel`` is created
    on first use and then reused.
    """

    def __init__(self, kind: str, schema: Schema, model: Any = None) -> None:
        self.kind = kind
        self.schema = schema
        self._model = model

    @property
    def model(self) -> Any:
        if self._model is None:
            self._model = genai.GenerativeModel(
                CONFIG.gemini_model,
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": self.schema,
                    "temperature": CONFIG.temperature,
                },
            )
        return self._model

    async def query(self, prompt: str) -> Any:
        start_time = time.monotonic()
        ok = False
        try:
            try:
                response = await self.model.generate_content_async(prompt)
            except Exception as e:
                logger.error("Gemini API call failed (%s): %s", self.kind, e)
                raise GatewayFailure(str(e) or e.__class__.__name__) from e
            try:
                text = (response.text or "").strip()
            except ValueError as e:
                # No candidate or part, e.g. a blocked completion
                logger.warning("Gemini returned no text (%s): %s", self.kind, e)
                raise EmptyResponse() from e

            if not text:
                raise EmptyResponse()
            opener = "[" if self.schema.get("type") == "ARRAY" else "{"
            data = parse_model_text(text, opener)
            ok = True
            return data
        finally:
            latency_ms = (time.monotonic() - start_time) * 1000
            log_data = {
                "ts": datetime.now(timezone.utc).isoformat(),
                "tool": "gemini",
                "fn": self.kind,
                "latency_ms": f"{latency_ms:.2f}",
                "ok": ok,
            }
            logging.info(json.dumps(log_data))
