"""
Pytest configuration and shared fixtures for Code Buddy tests.
"""

from types import SimpleNamespace

import pytest

from codebuddy.assistant import CodeAssistant
from codebuddy.executor import ExecutionClient
from codebuddy.server import create_app


class FakeResponse:
    """Stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload


class FakeSession:
    """Replays queued responses and records every request."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeOpenAI:
    """Mimics the parts of the OpenAI client the assistant uses."""

    def __init__(self, reply: str = "Hi there!"):
        self.reply = reply
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeGemini:
    """Mimics the parts of the google-genai client the assistant uses."""

    def __init__(self, reply: str = "Hello from Gemini"):
        self.reply = reply
        self.generated = []
        self.chats_created = []
        self.sent = []
        self.models = SimpleNamespace(generate_content=self._generate)
        self.chats = SimpleNamespace(create=self._create_chat)

    def _generate(self, **kwargs):
        self.generated.append(kwargs)
        return SimpleNamespace(text=self.reply)

    def _create_chat(self, **kwargs):
        self.chats_created.append(kwargs)

        def send_message(message):
            self.sent.append(message)
            return SimpleNamespace(text=self.reply)

        return SimpleNamespace(send_message=send_message)


def judge0_result(stdout="", stderr="", compile_output="", status_id=3, description="Accepted"):
    return FakeResponse(200, {
        "stdout": stdout,
        "stderr": stderr,
        "compile_output": compile_output,
        "status": {"id": status_id, "description": description},
    })


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def execution_client(fake_session):
    return ExecutionClient(
        api_url="https://judge0.test",
        api_key="secret",
        host="judge0.test",
        poll_interval=0,
        max_polls=3,
        session=fake_session,
        sleep=lambda seconds: None,
    )


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def assistant(fake_openai):
    return CodeAssistant(api_key="test-key", model="gpt-test", provider="openai", client=fake_openai)


@pytest.fixture
def app(tmp_path, execution_client, assistant):
    app = create_app(
        files_dir=str(tmp_path / "files"),
        executor=execution_client,
        assistant=assistant,
        debounce_seconds=0.01,
    )
    app.config["TESTING"] = True
    yield app
    app.extensions["live_checker"].stop()


@pytest.fixture
def client(app):
    return app.test_client()
