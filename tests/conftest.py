from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import pytest
from flask.testing import FlaskClient

from millennium.app import create_app
from millennium.core.advisor import ProjectionAdvisor
from millennium.core.config import AppSettings


class FakeResponses:
    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: list = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.text)


class FakeClient:
    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.responses = FakeResponses(text=text, error=error)


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(_env_file=None, openai_api_key=None)


@pytest.fixture()
def fake_client() -> FakeClient:
    return FakeClient(text="Aporte com constância e deixe os juros trabalharem.")


@pytest.fixture()
def client(settings: AppSettings, fake_client: FakeClient) -> FlaskClient:
    app = create_app(settings=settings, advisor=ProjectionAdvisor(settings, client=fake_client))
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def make_client():
    return FakeClient
