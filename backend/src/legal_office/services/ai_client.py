"""
Chat-completions client for the legal assistant.

Talks to a GLM-4 compatible ``/chat/completions`` endpoint over httpx and
keeps a bounded conversation history. Transient failures (timeouts, network
errors, 429 and 5xx) are retried with exponential backoff through tenacity.
"""

import time
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from legal_office.core import messages
from legal_office.core.config import get_config, DEFAULT_SYSTEM_PROMPT
from legal_office.core.exceptions import ExternalServiceError
from legal_office.core.constants import (
    GLM_MODELS, DEFAULT_GLM_MODEL, LEGAL_TEMPLATES, MAX_HISTORY_LENGTH,
    ANSWER_QUALITY_CHECKLIST, DEFAULT_PROMPT_JOINER, RETRY_MAX_WAIT,
)
from legal_office.services.content_formatter import format_legal_content

config = get_config()
logger = logging.getLogger(__name__)


class AIError(Exception):
    """Failure talking to an LLM provider."""

    TIMEOUT = "TIMEOUT"
    REQUEST_ABORTED = "REQUEST_ABORTED"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    NOT_CONFIGURED = "NOT_CONFIGURED"

    def __init__(self, message: str, code: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    @property
    def retryable(self) -> bool:
        if self.code in (self.TIMEOUT, self.NETWORK_ERROR):
            return True
        return self.status is not None and (self.status == 429 or self.status >= 500)

    def to_service_error(self, service_name: str) -> ExternalServiceError:
        """Map to the HTTP-facing error: 503 when unconfigured, 504 on timeout, 502 otherwise."""
        if self.code == self.NOT_CONFIGURED:
            status_code = 503
        elif self.code == self.TIMEOUT:
            status_code = 504
        else:
            status_code = 502
        return ExternalServiceError(
            f"{service_name} request failed with {self.code}: {self.message}",
            service_name=service_name,
            status_code=status_code,
            details={"code": self.code, "provider_status": self.status},
            user_message=self.message,
        )

    def __repr__(self):
        return f"AIError(code={self.code!r}, status={self.status!r}, message={self.message!r})"


@dataclass
class AIResponse:
    response: str
    formatted_content: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class AIClient:
    """
    Stateful wrapper around a chat-completions API.

    The history starts with the system prompt; every successful exchange
    appends the user and assistant turns. Only the last
    ``max_history_length`` entries are sent with a request.
    """

    Models = GLM_MODELS
    Templates = LEGAL_TEMPLATES

    def __init__(
        self,
        model: str = DEFAULT_GLM_MODEL,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        default_system_prompt: Optional[str] = None,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        max_history_length: int = MAX_HISTORY_LENGTH,
        retry_delay: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.model = model or DEFAULT_GLM_MODEL
        self.timeout = timeout if timeout is not None else config.ai.timeout_seconds
        self.max_retries = max_retries if max_retries is not None else config.ai.max_retries
        self.default_system_prompt = default_system_prompt or DEFAULT_SYSTEM_PROMPT
        self.api_key = api_key if api_key is not None else config.ai.glm_api_key
        self.api_url = api_url or config.ai.glm_api_url
        self.max_history_length = max_history_length
        self.retry_delay = retry_delay if retry_delay is not None else config.ai.retry_delay

        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=self.timeout)
        self._default_prompt: Optional[str] = None
        self.conversation_history: List[Dict[str, str]] = []
        self.clear_conversation()

    def set_default_prompt(self, prompt: Optional[str]) -> None:
        """Text prepended to every user message, ``None`` to disable."""
        self._default_prompt = prompt or None

    @property
    def default_prompt(self) -> Optional[str]:
        return self._default_prompt

    def load_history(self, turns: Iterable[Dict[str, str]]) -> None:
        """Replace the history with stored turns (``role``/``content`` dicts)."""
        self.clear_conversation()
        for turn in turns:
            self.conversation_history.append({"role": turn["role"], "content": turn["content"]})

    def clear_conversation(self) -> None:
        self.conversation_history = [{"role": "system", "content": self.default_system_prompt}]

    def dispose(self) -> None:
        if self._owns_client:
            self._http.close()
        self.clear_conversation()

    def build_user_content(self, content: str) -> str:
        if self._default_prompt:
            return DEFAULT_PROMPT_JOINER.format(prompt=self._default_prompt, content=content)
        return content

    def build_messages(self, content: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
        """Enhanced system prompt, recent history, then the current user message."""
        system_content = system_prompt or f"{self.default_system_prompt}{ANSWER_QUALITY_CHECKLIST}"
        recent_history = self.conversation_history[-self.max_history_length:] if self.max_history_length > 0 else []
        return [
            {"role": "system", "content": system_content},
            *recent_history,
            {"role": "user", "content": self.build_user_content(content)},
        ]

    def send_message(
        self,
        content: str,
        temperature: float = 0.7,
        top_p: float = 0.7,
        max_tokens: int = 2048,
        system_prompt: Optional[str] = None,
    ) -> AIResponse:
        """
        Send a user message and return the assistant reply.

        Raises:
            AIError: On timeout, transport failure, error status or empty reply
        """
        if not self.api_key:
            raise AIError(messages.AI_NOT_CONFIGURED, AIError.NOT_CONFIGURED)

        payload = {
            "model": self.model,
            "messages": self.build_messages(content, system_prompt),
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": max_tokens,
        }

        started = time.monotonic()
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_delay, max=RETRY_MAX_WAIT),
            retry=retry_if_exception(lambda e: isinstance(e, AIError) and e.retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )
        data = retrying(self._post, payload)

        ai_text = self._extract_content(data)
        usage = data.get("usage") or {}

        self.conversation_history.append({"role": "user", "content": content})
        self.conversation_history.append({"role": "assistant", "content": ai_text})

        return AIResponse(
            response=ai_text,
            formatted_content=format_legal_content(ai_text),
            metadata={
                "processing_time": usage.get("total_time", round(time.monotonic() - started, 3)),
                "tokens": usage.get("total_tokens", 0),
                "model": self.model,
            },
        )

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            response = self._http.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise AIError(messages.AI_TIMEOUT, AIError.TIMEOUT) from e
        except httpx.TransportError as e:
            raise AIError(f"{messages.AI_SERVICE_ERROR}: {e}", AIError.NETWORK_ERROR) from e
        except RuntimeError as e:
            # httpx refuses to send once the client has been closed
            raise AIError(messages.AI_ABORTED, AIError.REQUEST_ABORTED) from e

        if response.is_error:
            body = self._error_body(response)
            raise AIError(
                body.get("message") or messages.AI_SERVICE_ERROR,
                str(body.get("code") or AIError.API_ERROR),
                response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AIError(messages.AI_SERVICE_ERROR, AIError.API_ERROR, response.status_code) from e

    @staticmethod
    def _error_body(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        if not isinstance(body, dict):
            return {}
        # Providers nest the details under "error"
        if isinstance(body.get("error"), dict):
            return body["error"]
        return body

    @staticmethod
    def _extract_content(data: Dict[str, Any]) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise AIError(messages.AI_SERVICE_ERROR, AIError.EMPTY_RESPONSE)
        return content

    @staticmethod
    def _log_retry(retry_state) -> None:
        error = retry_state.outcome.exception()
        logger.warning(f"AI request attempt {retry_state.attempt_number} failed ({error!r}), retrying")
