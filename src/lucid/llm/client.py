# src/lucid/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return exc.__class__.__name__ in {"Timeout", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "LLM is not configured (missing API key). Set LUCID_LLM_API_KEY in .env (see .env.example)."
    if "LLM model list is empty" in msg:
        return "LLM is not configured (no models). Set LUCID_LLM_MODELS in .env (see .env.example)."
    if "LLM base URL is not set" in msg:
        return "LLM is not configured (missing base URL). Set LUCID_LLM_BASE_URL in .env (see .env.example)."
    return msg


def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Stream close failed.", exc_info=True)


class OpenRouterLLMClient:
    """
    OpenAI-compatible streaming chat client with model fallback.

    Behavior:
    - Tries models in the order from settings (LUCID_LLM_MODELS).
    - If a model doesn't produce a first content token within the first-token
      timeout, we abort and try the next model.
    - 404 (model not available) -> skip that model for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).

    Raises RuntimeError at construction when the API key or base URL is
    missing, so bootstrap can fall back to the offline client.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "llm_api_key", None)
        base_url = str(getattr(settings, "llm_base_url", "") or "")

        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set LUCID_LLM_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("LLM base URL is not set. Set LUCID_LLM_BASE_URL in your .env.")

        self._models: List[str] = list(getattr(settings, "llm_models", []) or [])
        self._headers: Dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._first_token_timeout = float(getattr(settings, "llm_first_token_timeout", 20.0))
        connect_s = float(getattr(settings, "llm_connect_timeout", 5.0))
        read_s = max(float(getattr(settings, "llm_read_timeout", 25.0)), self._first_token_timeout)

        self._timeout = httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

        # Automatic retries disabled to allow quick fallback across models.
        self._client = OpenAI(
            base_url=base_url,
            api_key=str(api_key),
            timeout=self._timeout,
            max_retries=0,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set LUCID_LLM_MODELS in your .env.")

        last_error: Optional[Exception] = None
        now = time.monotonic()

        for model in self._models:
            model = (model or "").strip()
            if not model:
                continue

            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("LLM: trying model=%s (first_token_timeout=%.1fs)", model, self._first_token_timeout)
            t0 = time.monotonic()
            deadline = t0 + self._first_token_timeout

            stream = None
            used_any = False

            try:
                stream = self._client.chat.completions.create(
                    model=model,
                    stream=True,
                    extra_headers=self._headers or None,
                    messages=[{"role": "system", "content": system_prompt}, *messages],
                    timeout=self._timeout,
                )

                for chunk in stream:
                    if not used_any and time.monotonic() > deadline:
                        last_error = TimeoutError(f"First token timeout on model: {model}")
                        logger.info("LLM: first token timeout on model=%s -> trying next", model)
                        break

                    content = None
                    if chunk.choices:
                        delta = getattr(chunk.choices[0], "delta", None)
                        content = getattr(delta, "content", None) if delta is not None else None

                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                if used_any:
                    logger.debug("LLM: completed with model=%s", model)
                    return

                if last_error is None:
                    last_error = RuntimeError(f"Model returned no content: {model}")

            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError(
                        "LLM authentication failed. Check your API key (LUCID_LLM_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + 3600.0  # 1 hour
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            finally:
                if stream is not None:
                    _close_stream(stream)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise RuntimeError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise RuntimeError("LLM network/timeout error. Try again later or change models.") from last_error
            raise RuntimeError("All LLM models failed.") from last_error

        raise RuntimeError("All LLM models failed.")
