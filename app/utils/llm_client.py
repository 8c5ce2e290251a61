"""Centralized OpenAI LLM client wrapper with operational logging."""

from __future__ import annotations

import json
import os
import re
import time
import urllib.error
import urllib.request
import uuid
from typing import Any

DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _short_request_id() -> str:
    return uuid.uuid4().hex[:8]


def _approx_prompt_size(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        return len(value)
    if isinstance(value, list):
        return sum(_approx_prompt_size(item) for item in value)
    if isinstance(value, dict):
        return sum(_approx_prompt_size(v) for v in value.values())
    return len(str(value))


def _extract_usage(data: dict[str, Any]) -> str:
    usage = data.get("usage")
    if not isinstance(usage, dict):
        return ""
    input_tokens = usage.get("input_tokens")
    output_tokens = usage.get("output_tokens")
    if isinstance(input_tokens, int) and isinstance(output_tokens, int):
        return f" input_tokens={input_tokens} output_tokens={output_tokens}"
    return ""


def require_api_key(env_var: str) -> str:
    key = os.environ.get(env_var, "").strip()
    if not key:
        raise ValueError(f"Missing API key in environment variable: {env_var}")
    return key


def llm_call(feature: str, **kwargs: Any) -> dict[str, Any]:
    """POST a Responses API request body; blocked entirely when DISABLE_LLM=1."""
    request_id = _short_request_id()
    prompt_size = _approx_prompt_size(kwargs.get("input"))

    if os.getenv("DISABLE_LLM", "").strip() == "1":
        print(
            f"[LLM BLOCKED] feature={feature} request_id={request_id} "
            f"reason=DISABLE_LLM prompt_chars={prompt_size}"
        )
        raise RuntimeError("LLM call blocked by DISABLE_LLM=1")

    api_key = str(kwargs.pop("api_key", "") or os.getenv("OPENAI_API_KEY", "")).strip()
    if not api_key:
        raise ValueError("Missing OpenAI API key")

    base_url = str(kwargs.pop("base_url", DEFAULT_BASE_URL)).strip()
    timeout_sec = int(kwargs.pop("timeout_sec", 60))
    url = f"{base_url.rstrip('/')}/responses"

    print(f"[LLM START] feature={feature} request_id={request_id}")
    started_at = time.monotonic()

    req = urllib.request.Request(
        url=url,
        data=json.dumps(kwargs).encode("utf-8"),
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout_sec) as resp:
            data = json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as exc:
        latency_ms = int((time.monotonic() - started_at) * 1000)
        print(f"[LLM ERROR] feature={feature} request_id={request_id} latency_ms={latency_ms} status={exc.code}")
        detail = exc.read().decode("utf-8", errors="ignore")
        raise RuntimeError(f"LLM request failed ({exc.code}): {detail}") from exc
    except urllib.error.URLError as exc:
        latency_ms = int((time.monotonic() - started_at) * 1000)
        print(f"[LLM ERROR] feature={feature} request_id={request_id} latency_ms={latency_ms} reason={exc}")
        raise RuntimeError(f"LLM request failed: {exc}") from exc

    latency_ms = int((time.monotonic() - started_at) * 1000)
    print(
        f"[LLM END] feature={feature} request_id={request_id} "
        f"latency_ms={latency_ms} prompt_chars={prompt_size}{_extract_usage(data)}"
    )
    return data


def extract_output_text(data: dict[str, Any]) -> str:
    """Support both Responses API output and legacy chat-completions shape."""
    output_text = data.get("output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text

    chunks: list[str] = []
    for item in data.get("output") or []:
        if not isinstance(item, dict):
            continue
        for part in item.get("content") or []:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                chunks.append(part["text"])
    if chunks:
        return "\n".join(chunks)

    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return str(choices[0].get("message", {}).get("content", "") or "")
    return ""


def extract_json_object(text: str) -> dict[str, Any]:
    s = text.strip()
    if s.startswith("```"):
        s = re.sub(r"^```[a-zA-Z0-9_-]*\n?", "", s)
        s = re.sub(r"\n?```$", "", s)
    try:
        parsed = json.loads(s)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", s, flags=re.DOTALL)
        if not match:
            raise ValueError("LLM reply does not contain a JSON object")
        parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("LLM reply JSON is not an object")
    return parsed
