import asyncio
import random

import pytest

from gapquiz.presentation.view import (
    FEEDBACK_CORRECT,
    FEEDBACK_INCORRECT,
    AlreadyAnswered,
    InvalidOption,
    QuizView,
)
from gapquiz.services.bank import QuestionBank
from gapquiz.services.session import SessionController


@pytest.fixture
def view(static_loader, make_group):
    bank = QuestionBank([make_group("group_de", 12), make_group("group_zai", 3)])
    v = QuizView(SessionController(static_loader(bank), group_keys=["group_de", "group_zai"], rng=random.Random(5)))
    asyncio.run(v.start())
    return v


def test_items_are_numbered_from_one(view):
    items = view.items("group_de")
    assert [it.number for it in items] == list(range(1, 11))
    assert not any(it.answered for it in items)
    assert all('<span class="gap"></span>' in it.html for it in items)


def test_wrong_answer_feedback(view):
    q = view.items("group_de")[0].question
    fb = view.answer("group_de", q.id, "得")
    assert fb.feedback == FEEDBACK_INCORRECT
    assert fb.outcome.is_correct is False
    assert fb.outcome.explanation
    assert "incorrect-highlight" in fb.html and "的" in fb.html
    assert fb.score.display == "0 / 10 (0%)"


def test_right_answer_feedback(view):
    q = view.items("group_de")[0].question
    fb = view.answer("group_de", q.id, "的")
    assert fb.feedback == FEEDBACK_CORRECT
    assert fb.outcome.explanation is None
    assert "correct-highlight" in fb.html
    assert fb.score.display == "1 / 10 (10%)"


def test_second_submission_is_rejected_and_state_kept(view):
    q = view.items("group_de")[0].question
    view.answer("group_de", q.id, "得")
    with pytest.raises(AlreadyAnswered):
        view.answer("group_de", q.id, "的")
    assert view.controller.session.answers[q.id] is False
    assert view.items("group_de")[0].chosen == "得"


def test_option_must_be_offered(view):
    q = view.items("group_de")[0].question
    with pytest.raises(InvalidOption):
        view.answer("group_de", q.id, "地")
    assert q.id not in view.controller.session.answers
    assert not view.is_answered("group_de", q.id)


def test_refresh_clears_answered_flags(view):
    q = view.items("group_de")[0].question
    view.answer("group_de", q.id, "的")
    assert view.refresh() is True
    assert not view.is_answered("group_de", q.id)
    assert view.controller.session.answers == {}
    assert view.score("group_de").display == "0 / 10 (0%)"


def test_score_follows_the_selected_tab(view):
    q = view.items("group_zai")[0].question
    fb = view.answer("group_zai", q.id, q.correct_answer)
    # onglet courant = group_de
    assert fb.score.total == 10 and fb.score.correct == 0
    s = view.switch_group("group_zai")
    assert (s.correct, s.total, s.percent) == (1, 3, 33)


def test_start_again_keeps_answers(view):
    q = view.items("group_de")[0].question
    view.answer("group_de", q.id, "的")
    asyncio.run(view.start())
    assert view.is_answered("group_de", q.id)
    assert view.controller.session.answers == {q.id: True}


def test_overlapping_starts_keep_answers(static_loader, make_group):
    class SlowLoader(static_loader):
        async def load(self):
            self.calls += 1
            await asyncio.sleep(0.01)
            return self.bank

    loader = SlowLoader(QuestionBank([make_group("group_de", 4)]))
    v = QuizView(SessionController(loader, group_keys=["group_de"]))

    async def both():
        await asyncio.gather(v.start(), v.start())

    asyncio.run(both())
    assert loader.calls == 1
    q = v.items("group_de")[0].question
    v.answer("group_de", q.id, "的")
    asyncio.run(v.start())
    assert v.is_answered("group_de", q.id)


def test_same_id_in_two_groups_has_separate_gates(static_loader, make_group):
    bank = QuestionBank([make_group("group_de", 3, prefix="q"), make_group("group_zai", 3, prefix="q")])
    v = QuizView(SessionController(static_loader(bank), group_keys=["group_de", "group_zai"]))
    asyncio.run(v.start())

    v.answer("group_de", "q-1", "得")
    assert v.is_answered("group_de", "q-1")
    assert not v.is_answered("group_zai", "q-1")

    zai = {it.question.id: it for it in v.items("group_zai")}
    assert zai["q-1"].answered is False
    assert '<span class="gap"></span>' in zai["q-1"].html

    fb = v.answer("group_zai", "q-1", "的")
    assert fb.outcome.is_correct is True
    with pytest.raises(AlreadyAnswered):
        v.answer("group_de", "q-1", "的")
