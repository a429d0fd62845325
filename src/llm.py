"""Claude calls for the summarizer.

With an API key the Anthropic Messages API is used; without one the prompt
is piped to the ``claude -p`` CLI.
"""

from __future__ import annotations

import logging
import os
import subprocess

import anthropic

from vaultdigest.errors import LLMError

logger = logging.getLogger(__name__)

NO_RESPONSE = "[No response]"
MAX_TOKENS = 4096

# Short names accepted in [llm] model and --model
MODEL_ALIASES: dict[str, str] = {
    "sonnet": "claude-sonnet-4-6",
    "haiku": "claude-haiku-4-5-20251001",
    "opus": "claude-opus-4-6",
}


def resolve_model(model: str | None) -> str:
    """Map an alias to its model ID; unknown names pass through unchanged."""
    name = model or "sonnet"
    return MODEL_ALIASES.get(name, name)


def _via_api(
    system_prompt: str,
    user_prompt: str,
    *,
    api_key: str,
    model: str | None,
    timeout: int,
    label: str,
) -> str:
    model_id = resolve_model(model)
    logger.debug("Anthropic request model=%s label=%s", model_id, label)

    client = anthropic.Anthropic(api_key=api_key, timeout=timeout)
    request: dict[str, object] = {
        "model": model_id,
        "max_tokens": MAX_TOKENS,
        "messages": [{"role": "user", "content": user_prompt}],
    }
    if system_prompt.strip():
        request["system"] = system_prompt

    response = client.messages.create(**request)  # type: ignore[arg-type]
    text = "".join(block.text for block in response.content if block.type == "text").strip()
    if not text:
        logger.warning("Empty completion for %s", label)
        return NO_RESPONSE
    return text


def _via_cli(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str | None,
    timeout: int,
    label: str,
) -> str:
    cmd = ["claude", "-p"]
    if model:
        cmd += ["--model", model]
    # a nested CLI refuses to start when it sees the parent session marker
    env = {k: v for k, v in os.environ.items() if k != "CLAUDECODE"}

    logger.debug("claude -p request label=%s", label)
    try:
        proc = subprocess.run(
            cmd,
            input=f"{system_prompt}\n\n{user_prompt}",
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except FileNotFoundError as exc:
        raise LLMError(f"'claude' executable not found on PATH ({label})") from exc
    except subprocess.TimeoutExpired as exc:
        raise LLMError(f"claude -p timed out after {timeout}s ({label})") from exc

    if proc.returncode != 0:
        raise LLMError(f"claude -p exited {proc.returncode} ({label}): {proc.stderr[:500]}")
    return proc.stdout.strip() or NO_RESPONSE


def call_llm(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str | None = None,
    api_key: str = "",
    timeout: int = 120,
    label: str = "summary",
) -> str:
    """Call Claude and return the response text.

    Uses the Anthropic API when an API key is given (or ``ANTHROPIC_API_KEY``
    is set), otherwise falls back to the ``claude -p`` CLI.

    Args:
        system_prompt: System prompt for the LLM.
        user_prompt: User/content prompt.
        model: Optional model override (e.g. "sonnet", "haiku", "opus").
        api_key: Anthropic API key; empty means read the environment.
        timeout: Timeout in seconds.
        label: Label for logging.

    Returns:
        The LLM response text (stripped), or ``[No response]`` when the model
        returned nothing.

    Raises:
        LLMError: On any failure. Single attempt, no retry.
    """
    key = api_key.strip() or os.environ.get("ANTHROPIC_API_KEY", "").strip()

    if key:
        try:
            return _via_api(
                system_prompt,
                user_prompt,
                api_key=key,
                model=model,
                timeout=timeout,
                label=label,
            )
        except LLMError:
            raise
        except Exception as exc:
            raise LLMError(f"Anthropic API failed (label={label}): {exc}") from exc

    return _via_cli(
        system_prompt,
        user_prompt,
        model=model,
        timeout=timeout,
        label=label,
    )
