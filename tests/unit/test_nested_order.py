"""Unit tests for vocabulary and quiz order managers."""

import pytest

from lesson_activities.composition import errors
from lesson_activities.composition.nested_order import (
    QuizOrderManager,
    VocabularyOrderManager,
    new_question,
)
from lesson_activities.composition.ordering import Direction
from lesson_activities.kernel.models import QuestionType
from lesson_activities.schemas.payload import (
    ChoicePayload,
    QuestionPayload,
    QuizPayload,
    VocabularyItemPayload,
    VocabularyPayload,
)


def _vocabulary(*words):
    return VocabularyPayload(items=[
        VocabularyItemPayload(word=w, vocab_order=i) for i, w in enumerate(words)
    ])


def _words(manager):
    return [item.word for item in manager.items]


class TestVocabularyOrderManager:
    """Tests for VocabularyOrderManager."""

    def test_move_third_up(self):
        """[x, y, z] with z moved up becomes [x, z, y] with orders 0, 1, 2."""
        manager = VocabularyOrderManager(_vocabulary("x", "y", "z"))
        assert manager.move_item(2, Direction.UP) is True
        assert _words(manager) == ["x", "z", "y"]
        assert [i.vocab_order for i in manager.items] == [0, 1, 2]

    def test_move_first_up_is_noop(self):
        manager = VocabularyOrderManager(_vocabulary("x", "y"))
        assert manager.move_item(0, Direction.UP) is False
        assert _words(manager) == ["x", "y"]

    def test_sorted_on_load(self):
        payload = VocabularyPayload(items=[
            VocabularyItemPayload(word="b", vocab_order=5),
            VocabularyItemPayload(word="a", vocab_order=2),
        ])
        manager = VocabularyOrderManager(payload)
        assert _words(manager) == ["a", "b"]
        assert [i.vocab_order for i in manager.items] == [0, 1]

    def test_empty_gets_blank_term(self):
        manager = VocabularyOrderManager(VocabularyPayload())
        assert len(manager) == 1
        assert manager.items[0].word == ""

    def test_last_term_cannot_be_removed(self):
        manager = VocabularyOrderManager(_vocabulary("only"))
        with pytest.raises(errors.OrderingError):
            manager.remove_item(0)

    def test_remove_renumbers(self):
        manager = VocabularyOrderManager(_vocabulary("x", "y", "z"))
        manager.remove_item(0)
        assert _words(manager) == ["y", "z"]
        assert [i.vocab_order for i in manager.items] == [0, 1]

    def test_remove_missing_index(self):
        manager = VocabularyOrderManager(_vocabulary("x", "y"))
        with pytest.raises(errors.OrderingError):
            manager.remove_item(7)

    def test_add_appends(self):
        manager = VocabularyOrderManager(_vocabulary("x"))
        index = manager.add_item(VocabularyItemPayload(word="y"))
        assert index == 1
        assert manager.to_payload().items[1].vocab_order == 1


class TestQuizOrderManager:
    """Tests for QuizOrderManager."""

    def test_seeded_choices(self):
        manager = QuizOrderManager(QuizPayload())
        mc = manager.add_question(QuestionType.MULTIPLE_CHOICE)
        ms = manager.add_question(QuestionType.MULTIPLE_SELECT)
        oe = manager.add_question(QuestionType.OPEN_ENDED)
        assert len(manager.question(mc).choices) == 4
        assert len(manager.question(ms).choices) == 5
        assert manager.question(oe).choices == []

    def test_choice_minimum(self):
        manager = QuizOrderManager(QuizPayload())
        q = manager.add_question(QuestionType.MULTIPLE_CHOICE)
        manager.remove_choice(q, 0)
        manager.remove_choice(q, 0)
        with pytest.raises(errors.OrderingError):
            manager.remove_choice(q, 0)
        assert [c.order for c in manager.question(q).choices] == [0, 1]

    def test_mark_correct_single(self):
        manager = QuizOrderManager(QuizPayload())
        q = manager.add_question(QuestionType.MULTIPLE_CHOICE)
        manager.mark_correct(q, 1)
        manager.mark_correct(q, 2)
        assert [c.is_correct for c in manager.question(q).choices] == [False, False, True, False]

    def test_mark_correct_toggles_for_multiple_select(self):
        manager = QuizOrderManager(QuizPayload())
        q = manager.add_question(QuestionType.MULTIPLE_SELECT)
        manager.mark_correct(q, 0)
        manager.mark_correct(q, 3)
        manager.mark_correct(q, 0)
        assert [c.is_correct for c in manager.question(q).choices] == [False, False, False, True, False]

    def test_set_question_type_reseeds(self):
        manager = QuizOrderManager(QuizPayload())
        q = manager.add_question(QuestionType.OPEN_ENDED)
        manager.set_question_type(q, QuestionType.MULTIPLE_SELECT)
        assert len(manager.question(q).choices) == 5

    def test_choice_moves_are_per_question(self):
        quiz = QuizPayload(questions=[
            QuestionPayload(
                question_type=QuestionType.MULTIPLE_CHOICE,
                choices=[ChoicePayload(choice_text="a"), ChoicePayload(choice_text="b", order=1)],
            ),
            QuestionPayload(
                question_order=1,
                question_type=QuestionType.MULTIPLE_CHOICE,
                choices=[ChoicePayload(choice_text="c"), ChoicePayload(choice_text="d", order=1)],
            ),
        ])
        manager = QuizOrderManager(quiz)
        assert manager.move_choice(0, 1, Direction.UP) is True
        payload = manager.to_payload()
        assert [c.choice_text for c in payload.questions[0].choices] == ["b", "a"]
        assert [c.choice_text for c in payload.questions[1].choices] == ["c", "d"]
        assert [c.order for c in payload.questions[0].choices] == [0, 1]

    def test_move_question(self):
        quiz = QuizPayload(questions=[
            QuestionPayload(question_title="one"),
            QuestionPayload(question_title="two", question_order=1),
        ])
        manager = QuizOrderManager(quiz)
        assert manager.move_question(1, Direction.DOWN) is False
        assert manager.move_question(1, Direction.UP) is True
        titles = [q.question_title for q in manager.to_payload().questions]
        assert titles == ["two", "one"]

    def test_missing_question(self):
        manager = QuizOrderManager(QuizPayload())
        with pytest.raises(errors.OrderingError):
            manager.question(0)

    def test_remove_question_renumbers(self):
        quiz = QuizPayload(questions=[
            QuestionPayload(question_title=t, question_order=i) for i, t in enumerate("abc")
        ])
        manager = QuizOrderManager(quiz)
        removed = manager.remove_question(0)
        assert removed.question_title == "a"
        assert [(q.question_title, q.question_order) for q in manager.to_payload().questions] == [
            ("b", 0),
            ("c", 1),
        ]
        with pytest.raises(errors.OrderingError):
            manager.remove_question(5)

    def test_add_choice_appends_to_one_question(self):
        manager = QuizOrderManager(QuizPayload())
        first = manager.add_question(QuestionType.MULTIPLE_CHOICE)
        second = manager.add_question(QuestionType.MULTIPLE_CHOICE)
        index = manager.add_choice(first, ChoicePayload(choice_text="extra"))
        assert index == 4
        assert [c.order for c in manager.question(first).choices] == [0, 1, 2, 3, 4]
        assert manager.question(first).choices[4].choice_text == "extra"
        assert len(manager.question(second).choices) == 4

    def test_set_question_type_with_choices(self):
        manager = QuizOrderManager(QuizPayload())
        q = manager.add_question(QuestionType.OPEN_ENDED)
        manager.set_question_type(q, QuestionType.MULTIPLE_CHOICE, [
            ChoicePayload(choice_text="yes", is_correct=True, order=4),
            ChoicePayload(choice_text="no", order=9),
        ])
        choices = manager.question(q).choices
        assert [(c.choice_text, c.order) for c in choices] == [("yes", 0), ("no", 1)]

    def test_new_question_template(self):
        question = new_question(QuestionType.MULTIPLE_SELECT)
        assert question.id is None
        assert [c.choice_text for c in question.choices] == [""] * 5
        assert new_question(QuestionType.PART_A_PART_B).choices == []
