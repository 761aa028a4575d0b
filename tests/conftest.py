"""
Pytest configuration and shared fixtures.
"""
import functools
import subprocess
from pathlib import Path

import httpx
import pytest

FIXTURES = Path(__file__).parent / "fixtures"


# =============================================================================
# Git fixtures
# =============================================================================

class FakeGit:
    """Stands in for subprocess.run; records every command it receives."""

    def __init__(self):
        self.stdout = b""
        self.stderr = b""
        self.returncode = 0
        self.commands = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_git(monkeypatch):
    """Replace subprocess.run for the diff extractor."""
    git = FakeGit()
    monkeypatch.setattr(subprocess, "run", git)
    return git


@pytest.fixture
def recorded_diff():
    """`git diff 683ddd6 d2bbcc5 -- ':!*.lock'` from a frozen history."""
    return (FIXTURES / "diff_683ddd6_d2bbcc5.patch").read_text(encoding="utf-8")


@pytest.fixture
def recorded_prompt():
    return (FIXTURES / "prompt_683ddd6_d2bbcc5.txt").read_text(encoding="utf-8")


@pytest.fixture
def sample_diff():
    return (
        "diff --git a/app.py b/app.py\n"
        "index 1111111..2222222 100644\n"
        "--- a/app.py\n"
        "+++ b/app.py\n"
        "@@ -1,2 +1,2 @@\n"
        "-print('hello')\n"
        "+print('hello, world')\n"
    )


# =============================================================================
# HTTP fixtures
# =============================================================================

class RecordingHandler:
    """httpx.MockTransport handler answering with a canned response."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.json = {}
        self.text = None
        self.error = None

    def __call__(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json)

    @property
    def last_request(self):
        return self.requests[-1]


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.Client through a MockTransport."""
    handler = RecordingHandler()
    client_class = httpx.Client
    monkeypatch.setattr(
        httpx, "Client", functools.partial(client_class, transport=httpx.MockTransport(handler))
    )
    return handler


# =============================================================================
# Settings fixtures
# =============================================================================

@pytest.fixture
def anthropic_settings():
    from prai.core.settings import AnthropicSettings
    return AnthropicSettings(model="claude-3-5-sonnet-latest", api_key="sk-ant-secret-123")


@pytest.fixture
def openai_settings():
    from prai.core.settings import OpenAISettings
    return OpenAISettings(model="gpt-4o-mini", api_key="sk-openai-secret-456")


@pytest.fixture
def google_settings():
    from prai.core.settings import GoogleSettings
    return GoogleSettings(model="gemini-1.5-flash", api_key="google-secret-789")


@pytest.fixture
def ollama_settings():
    from prai.core.settings import OllamaSettings
    return OllamaSettings(model="llama3.2")


@pytest.fixture
def config_file(tmp_path):
    """A config file with one profile per provider."""
    path = tmp_path / "config.toml"
    path.write_text(
        'default = "claude"\n'
        "\n"
        "[[profile]]\n"
        'name = "claude"\n'
        'provider = "anthropic"\n'
        'model = "claude-3-5-sonnet-latest"\n'
        'api_key = "sk-ant-secret-123"\n'
        "\n"
        "[[profile]]\n"
        'name = "gpt"\n'
        'provider = "openai"\n'
        'model = "gpt-4o-mini"\n'
        'api_key = "sk-openai-secret-456"\n'
        "temperature = 0.1\n"
        "\n"
        "[[profile]]\n"
        'name = "gemini"\n'
        'provider = "google"\n'
        'model = "gemini-1.5-flash"\n'
        'api_key = "google-secret-789"\n'
        "\n"
        "[[profile]]\n"
        'name = "local"\n'
        'provider = "ollama"\n'
        'model = "llama3.2"\n'
        'role = "You are a senior Python engineer"\n'
        'directive = "Summarize the change in one paragraph."\n',
        encoding="utf-8",
    )
    return path
