"""Pytest configuration and fixtures for the optimization proxy tests"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings


class FakeProvider:
    """Stands in for the chat-completion API and records what it receives"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = {"choices": [{"message": {"role": "assistant", "content": "Optimized! #daily"}}]}

    def reply(self, status_code, body):
        self.status_code = status_code
        self.body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def sent_payloads(self):
        return [json.loads(r.content) for r in self.requests]

    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", openai_base_url="https://llm.test/v1")


@pytest.fixture
def client(settings, provider):
    return TestClient(create_app(settings, transport=provider.transport()))


@pytest.fixture
def unconfigured_client(provider):
    return TestClient(create_app(Settings(openai_api_key=None), transport=provider.transport()))
