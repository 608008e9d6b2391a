import json
import pytest
from fastapi.testclient import TestClient

from gapquiz.core.config import get_settings
from gapquiz.main import create_app
from gapquiz.models.quiz import Question, QuestionGroup
from gapquiz.services.bank import LoadFailure, QuestionBank


def _raw_question(qid, answer="的", options=("的", "得"), explanation="「的」接在名詞前面。"):
    return {
        "id": qid,
        "sentence_before_ruby": [{"word": "我", "bopomo": "ㄨㄛˇ"}],
        "sentence_after_ruby": [{"word": "書包", "bopomo": "ㄕㄨ ㄅㄠ"}, {"word": "。", "bopomo": ""}],
        "gap_options": list(options),
        "answer": answer,
        "explanation": explanation,
    }


@pytest.fixture
def raw_question():
    return _raw_question


@pytest.fixture
def make_question():
    def _make(qid, **kw):
        return Question.model_validate(_raw_question(qid, **kw))
    return _make


@pytest.fixture
def make_group(make_question):
    def _make(key, n, prefix=None):
        prefix = prefix or key
        return QuestionGroup(key=key, questions=[make_question(f"{prefix}-{i}") for i in range(1, n + 1)])
    return _make


@pytest.fixture
def bank_data():
    """
    group_de : 12 questions (id "1" -> réponse 的), group_zai : 3 questions.
    """
    return {
        "group_de": {"questions": [_raw_question(str(i)) for i in range(1, 13)]},
        "group_zai": {
            "questions": [
                _raw_question(f"z{i}", answer="在", options=("在", "再"), explanation="「在」表示位置。")
                for i in range(1, 4)
            ]
        },
    }


@pytest.fixture
def bank_file(tmp_path, bank_data):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(bank_data, ensure_ascii=False), encoding="utf-8")
    return path


class StaticLoader:
    def __init__(self, bank: QuestionBank):
        self.bank = bank
        self.calls = 0

    async def load(self) -> QuestionBank:
        self.calls += 1
        return self.bank


class FlakyLoader(StaticLoader):
    """Échoue `failures` fois avant de renvoyer la banque."""

    def __init__(self, bank: QuestionBank, failures: int = 1):
        super().__init__(bank)
        self.failures = failures

    async def load(self) -> QuestionBank:
        self.calls += 1
        if self.calls <= self.failures:
            raise LoadFailure("HTTP error! status: 404")
        return self.bank


@pytest.fixture
def static_loader():
    return StaticLoader


@pytest.fixture
def flaky_loader():
    return FlakyLoader


def _client(monkeypatch, questions_path):
    # Variables d'env pour les settings
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("APP_NAME", "GAPQUIZ (tests)")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost")
    monkeypatch.setenv("QUESTIONS_PATH", str(questions_path))
    monkeypatch.setenv("GROUP_KEYS", "group_de,group_zai")
    monkeypatch.setenv("ACTIVE_SET_SIZE", "10")

    # IMPORTANT: vider le cache des settings pour prendre en compte les env
    get_settings.cache_clear()

    app = create_app()
    return TestClient(app)


@pytest.fixture
def test_client(monkeypatch, bank_file):
    """
    TestClient sur une banque temporaire ; le `with` déclenche le chargement au démarrage.
    """
    with _client(monkeypatch, bank_file) as client:
        yield client
    get_settings.cache_clear()


@pytest.fixture
def broken_client(monkeypatch, tmp_path):
    with _client(monkeypatch, tmp_path / "missing.json") as client:
        yield client
    get_settings.cache_clear()
