"""
Assessment Client: one structured request to the advisor model per submission.

This module provides a dependency-injectable client that doesn't rely on globals.
All configuration is passed explicitly.

Design principles:
- No global state
- Configuration passed via constructor
- Exactly one upstream request per submit() (no retries, SDK retries disabled)
- At most one submission in flight per client
- Replies are validated against the Assessment schema before being returned
- Optional logging to file
"""

import asyncio
import json
import os
from dataclasses import dataclass
from datetime import datetime

import tiktoken
from openai import AsyncOpenAI
from pydantic import ValidationError

from config import LLMConfig
from logging_utils import get_logger
from prompts import SYSTEM_INSTRUCTION
from schemas import Assessment, parse_assessment, response_format

logger = get_logger(__name__)


class AssessmentError(Exception):
    """
    A submission failed: transport, authentication, quota, timeout or a reply
    that does not match the schema. The message is meant for the user.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to get assessment: {reason}")


class SubmissionInProgressError(RuntimeError):
    """Raised when submit() is called while another submission is outstanding."""


@dataclass
class LLMResponse:
    """Structured response from LLM call."""
    content: str
    prompt_tokens: int = 0
    completion_tokens: int = 0


@dataclass
class LLMStats:
    """Statistics for LLM usage tracking."""
    calls: int = 0
    failures: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0

    def record(self, prompt_tokens: int, completion_tokens: int) -> None:
        self.calls += 1
        self.prompt_tokens += prompt_tokens
        self.completion_tokens += completion_tokens

    def record_failure(self) -> None:
        self.calls += 1
        self.failures += 1

    def summary(self) -> str:
        return (
            f"{self.calls} call(s), {self.failures} failed, "
            f"{self.prompt_tokens}+{self.completion_tokens} tokens"
        )


def estimate_tokens(text: str) -> int:
    """Estimate token count using tiktoken cl100k_base encoding."""
    encoding = tiktoken.get_encoding("cl100k_base")
    return len(encoding.encode(text))


def _failure_reason(error: Exception) -> str:
    """Human-readable root cause for an AssessmentError."""
    if isinstance(error, asyncio.TimeoutError):
        return "the request timed out"
    if isinstance(error, ValidationError):
        return f"the response did not match the assessment schema ({error.error_count()} error(s))"
    return str(error) or error.__class__.__name__


class AssessmentClient:
    """
    Async client for convergence assessments.

    Usage:
        config = LLMConfig.from_env()
        client = AssessmentClient(config)

        assessment = await client.submit(prompt_text)

        # or, closing the connection pool afterwards
        async with AssessmentClient(config) as client:
            assessment = await client.submit(prompt_text)
    """

    def __init__(
        self,
        config: LLMConfig,
        log_path: str | None = None,
    ):
        """
        Initialize the assessment client.

        Args:
            config: LLM configuration (credentials, model, timeout).
            log_path: Optional path to write JSONL logs. If None, no logging.
        """
        self.config = config
        self.log_path = log_path
        self.stats = LLMStats()
        self._in_flight = False
        self._client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            max_retries=0,
        )

    @property
    def in_flight(self) -> bool:
        """True while a submission is outstanding."""
        return self._in_flight

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.close()

    async def __aenter__(self) -> "AssessmentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def submit(self, prompt_text: str) -> Assessment:
        """
        Request an assessment for an assembled setup prompt.

        Args:
            prompt_text: Output of prompts.build_setup_prompt().

        Returns:
            The validated Assessment.

        Raises:
            SubmissionInProgressError: If another submission is outstanding.
            AssessmentError: On any transport, timeout or schema failure.
        """
        if self._in_flight:
            raise SubmissionInProgressError("An assessment request is already in progress")

        self._in_flight = True
        messages = [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt_text},
        ]
        try:
            response = await asyncio.wait_for(
                self._call_api(messages),
                timeout=self.config.timeout_seconds,
            )
            assessment = parse_assessment(response.content)
        except Exception as e:
            self.stats.record_failure()
            reason = _failure_reason(e)
            if isinstance(e, asyncio.TimeoutError):
                reason = f"{reason} after {self.config.timeout_seconds:g}s"
            logger.warning(f"Assessment request failed: {reason}")
            self._log(messages, None, error=reason)
            raise AssessmentError(reason) from e
        finally:
            self._in_flight = False

        self.stats.record(response.prompt_tokens, response.completion_tokens)
        self._log(messages, response)
        logger.info(
            f"Assessment received: {assessment.overall_likelihood.level.value} "
            f"({response.prompt_tokens}+{response.completion_tokens} tokens)"
        )
        return assessment

    async def _call_api(self, messages: list[dict[str, str]]) -> LLMResponse:
        """Make the single API call with the strict JSON response format."""
        logger.debug(f"Requesting assessment from {self.config.model}")
        completion = await self._client.chat.completions.create(
            messages=messages,
            model=self.config.model,
            temperature=self.config.temperature,
            response_format=response_format(),
            stream=False,
        )

        content = completion.choices[0].message.content or ""
        if completion.usage:
            prompt_tokens = completion.usage.prompt_tokens
            completion_tokens = completion.usage.completion_tokens
        else:
            prompt_tokens = estimate_tokens(json.dumps(messages, ensure_ascii=False))
            completion_tokens = estimate_tokens(content)

        return LLMResponse(
            content=content,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )

    def _log(
        self,
        messages: list[dict[str, str]],
        response: LLMResponse | None,
        error: str | None = None,
    ) -> None:
        """Write log entry to file if log_path is set."""
        if not self.log_path:
            return

        log_entry = {
            "model": self.config.model,
            "messages": messages,
            "response": response.content if response else None,
            "prompt_tokens": response.prompt_tokens if response else 0,
            "completion_tokens": response.completion_tokens if response else 0,
            "error": error,
            "timestamp": datetime.now().isoformat(),
        }

        log_dir = os.path.dirname(self.log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')
