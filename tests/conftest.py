"""Shared test fixtures for pytest."""
import json

import pytest

from models import ContentRow


class FakeResponse:
    """Stands in for a Gemini GenerateContentResponse."""

    def __init__(self, text=None, error=None):
        self._text = text
        self._error = error

    @property
    def text(self):
        if self._error is not None:
            raise self._error
        return self._text


class FakeModels:
    """Records generate_content calls and replies with a canned response or raises."""

    def __init__(self, response, error):
        self.calls = []
        self._response = response
        self._error = error

    def generate_content(self, model, contents, config):
        self.calls.append({'model': model, 'contents': contents, 'config': config})
        if self._error is not None:
            raise self._error
        return self._response


class FakeClient:
    """Stands in for google.genai.Client."""

    def __init__(self, response_text=None, error=None, response=None, api_key=None):
        self.api_key = api_key
        self.models = FakeModels(
            response if response is not None else FakeResponse(response_text),
            error
        )

    @property
    def prompts(self):
        return [call['contents'] for call in self.models.calls]


@pytest.fixture
def sample_csv_text():
    """CSV text with a header, a quoted headline and a thousands separator."""
    return (
        "URL,Headline,Total Users\n"
        'https://x.com/a,"Cancer breakthrough",1500\n'
        'https://x.com/b,"Breaking, News","1,234"\n'
        "https://x.com/c,Heart Attack Study,900\n"
    )


@pytest.fixture
def sample_rows():
    return [
        ContentRow(url="https://x.com/a", headline="Cancer breakthrough", total_users=1500),
        ContentRow(url="https://x.com/b", headline="Heart | Attack Study", total_users=900),
        ContentRow(url="https://x.com/c", headline="Diet myths", total_users=300),
    ]


@pytest.fixture
def sample_analysis_payload():
    """A complete response body matching the analysis schema."""
    return {
        "totalRecordsAnalyzed": 3,
        "themes": [
            {"theme": "Oncology", "storyCount": 1, "totalUsers": 1500, "usersPerStory": 1500.0},
            {"theme": "Cardiology", "storyCount": 1, "totalUsers": 900, "usersPerStory": 900.0},
            {"theme": "Nutrition", "storyCount": 1, "totalUsers": 300, "usersPerStory": 300.0},
        ],
        "keywords": [
            {"theme": "Oncology", "topKeywords": ["breakthrough"], "topEntities": ["Cancer"]},
        ],
        "keywordPerformance": [
            {"keyword": "Cancer", "storyCount": 1, "totalUsers": 1500, "usersPerStory": 1500.0},
            {"keyword": "Heart Attack", "storyCount": 1, "totalUsers": 900, "usersPerStory": 900.0},
        ],
        "styles": [
            {"style": "Question headline", "avgUsersPerStory": 450.5, "notes": "Underperforms statements."},
        ],
        "recommendations": {
            "increase": ["More oncology explainers"],
            "optimize": ["Sharpen cardiology headlines"],
            "decrease": ["Generic diet listicles"],
            "experiment": ["Patient story series"],
        },
        "insights": ["Oncology leads on efficiency.", "Nutrition lags."],
        "topPerformer": {
            "theme": "Oncology", "metric": "Users Per Story", "value": 1500.4,
            "explanation": "Breakthrough news travels.", "count": 1, "totalReach": 1500,
        },
        "bottomPerformer": {
            "theme": "Nutrition", "metric": "Users Per Story", "value": 299.6,
            "explanation": "Crowded topic.", "count": 1, "totalReach": 300,
        },
    }


@pytest.fixture
def sample_analysis_json(sample_analysis_payload):
    return json.dumps(sample_analysis_payload)


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""
    return FakeClient


@pytest.fixture
def fake_response():
    return FakeResponse
