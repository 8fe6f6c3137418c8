import json
from typing import Callable, List

import httpx
import pytest

from castengine.models import ApiProvider, ProviderConfig
from castengine.services.retry import RetryPolicy


class FakeClock:
    """Records backoff delays instead of sleeping"""

    def __init__(self):
        self.delays: List[float] = []

    async def sleep(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_policy(fake_clock) -> Callable[..., RetryPolicy]:
    def _make(max_retries: int = 3, base_delay_ms: int = 500, max_delay_ms: int = 30_000) -> RetryPolicy:
        return RetryPolicy(
            max_retries=max_retries,
            base_delay_ms=base_delay_ms,
            max_delay_ms=max_delay_ms,
            sleep=fake_clock.sleep,
        )
    return _make


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(
        provider=ApiProvider.OPENAI,
        base_url="https://api.openai.test/v1/",
        model_name="gpt-test",
        api_key="sk-test",
    )


@pytest.fixture
def anthropic_config() -> ProviderConfig:
    return ProviderConfig(
        provider=ApiProvider.ANTHROPIC,
        base_url="https://api.anthropic.test/v1",
        model_name="claude-test",
        api_key="ak-test",
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler`"""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def sse_body(*payloads) -> bytes:
    """Encode payloads as `data:` events; strings are sent verbatim"""
    events = []
    for payload in payloads:
        data = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        events.append(f"data: {data}\n\n")
    return "".join(events).encode("utf-8")


def openai_delta(text: str) -> dict:
    return {"choices": [{"delta": {"content": text}}]}


def anthropic_delta(text: str) -> dict:
    return {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}}


@pytest.fixture
def http_mock():
    return mock_client


@pytest.fixture(name="sse_body")
def sse_body_fixture():
    return sse_body


@pytest.fixture(name="openai_delta")
def openai_delta_fixture():
    return openai_delta


@pytest.fixture(name="anthropic_delta")
def anthropic_delta_fixture():
    return anthropic_delta
