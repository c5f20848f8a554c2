"""
Unit tests for the QuizSession controller.

Uses a hand-driven clock and scheduler so timing and the post-scoring
feedback delay are deterministic.
"""

import pytest

from learniverse.quiz.models import Question
from learniverse.quiz.session import (
    BlockingScheduler,
    ImmediateScheduler,
    QuizSession,
    QuizSessionError,
    evaluate,
)


@pytest.fixture
def session(mc_questions, clock):
    return QuizSession(mc_questions, clock=clock)


class TestInitialState:
    def test_starts_at_first_question(self, session, mc_questions):
        assert session.current_index == 0
        assert session.current_question == mc_questions[0]
        assert session.total == 3
        assert session.score == 0
        assert session.analytics == []
        assert not session.is_terminal

    def test_empty_quiz_is_terminal(self):
        session = QuizSession([])
        assert session.is_terminal
        assert session.current_question is None
        summary = session.finish()
        assert (summary.score, summary.total) == (0, 0)


class TestAnswersAndFlags:
    def test_set_answer_overwrites(self, session):
        session.set_answer(1, "a")
        session.set_answer(1, "b")
        assert session.answers[1] == "b"

    def test_set_answer_stores_anything(self, session):
        session.set_answer(1, {"weird": ["shape"]})
        assert session.answers[1] == {"weird": ["shape"]}

    def test_flag_toggled_twice_is_unflagged(self, session):
        assert session.toggle_flag(1) is True
        assert session.is_flagged(1)
        assert session.toggle_flag(1) is False
        assert not session.is_flagged(1)
        assert session.analytics == []
        assert session.score == 0

    def test_flag_unknown_question_rejected(self, session):
        with pytest.raises(QuizSessionError):
            session.toggle_flag(12345)
        assert session.flagged == set()

    def test_answer_read_only_after_scoring(self, session):
        session.set_answer(1, "b")
        session.score_and_advance()
        assert session.set_answer(1, "a") is False
        assert session.answers[1] == "b"


class TestScoring:
    def test_score_adds_exactly_one_record(self, session, clock):
        session.set_answer(1, "b")
        clock.advance(12)
        result = session.score_and_advance()

        assert result.correct is True
        assert len(session.analytics) == 1
        record = session.analytics[0]
        assert record.question_id == 1
        assert record.time_spent_seconds == 12
        assert record.correct is True
        assert record.answer == "b"
        assert session.current_index == 1

    def test_missing_answer_scores_incorrect(self, session):
        result = session.score_and_advance()
        assert result.correct is False
        assert session.analytics[0].correct is False

    def test_malformed_answer_scores_incorrect(self, session):
        session.set_answer(1, ["not", "a", "letter"])
        assert session.score_and_advance().correct is False

    def test_skip_adds_no_record(self, session):
        session.skip(1)
        assert session.analytics == []
        assert session.skipped == {1}
        assert session.current_index == 1

    def test_skip_other_question_rejected(self, session):
        with pytest.raises(QuizSessionError):
            session.skip(999)
        assert session.skipped == set()
        assert session.current_index == 0

    def test_timer_restarts_on_navigation(self, session, clock):
        clock.advance(30)
        session.skip()
        assert session.elapsed_seconds == 0
        clock.advance(4)
        session.set_answer(2, "b")
        session.score_and_advance()
        assert session.analytics[0].time_spent_seconds == 4

    def test_rescoring_does_not_log_twice(self, session):
        session.set_answer(1, "b")
        session.score_and_advance()
        session.go_to_previous()
        result = session.score_and_advance()

        assert result.correct is True
        assert len(session.analytics) == 1
        assert session.score == 1

    def test_scoring_a_skipped_question_unskips_it(self, session):
        session.skip()
        session.go_to_previous()
        session.set_answer(1, "b")
        session.score_and_advance()
        assert 1 not in session.skipped


class TestFeedbackDelay:
    def test_advance_waits_for_scheduler(self, mc_questions, manual_scheduler):
        session = QuizSession(mc_questions, scheduler=manual_scheduler, feedback_delay=1.5)
        session.set_answer(1, "b")
        session.score_and_advance()

        assert session.showing_feedback
        assert session.current_index == 0
        assert manual_scheduler.delays == [1.5]

        manual_scheduler.run_pending()
        assert not session.showing_feedback
        assert session.current_index == 1

    def test_no_double_scoring_while_feedback_showing(self, mc_questions, manual_scheduler):
        session = QuizSession(mc_questions, scheduler=manual_scheduler)
        session.score_and_advance()
        with pytest.raises(QuizSessionError):
            session.score_and_advance()
        with pytest.raises(QuizSessionError):
            session.skip()
        assert session.go_to_previous() is False

    def test_close_cancels_pending_advance(self, mc_questions, manual_scheduler):
        closed = []
        session = QuizSession(mc_questions, scheduler=manual_scheduler, on_close=lambda: closed.append(True))
        session.score_and_advance()
        session.close()

        assert manual_scheduler.pending[0].cancelled
        assert manual_scheduler.run_pending() == 0
        assert session.current_index == 0
        assert closed == [True]

    def test_closed_session_rejects_actions(self, session):
        session.close()
        with pytest.raises(QuizSessionError):
            session.set_answer(1, "b")
        with pytest.raises(QuizSessionError):
            session.score_and_advance()

    def test_blocking_scheduler_sleeps_then_runs(self):
        slept = []
        ran = []
        BlockingScheduler(sleep=slept.append).call_later(1.5, lambda: ran.append(True))
        assert slept == [1.5]
        assert ran == [True]

    def test_immediate_scheduler(self):
        ran = []
        ImmediateScheduler().call_later(10, lambda: ran.append(True))
        assert ran == [True]


class TestNavigation:
    def test_previous_keeps_answer(self, session):
        session.skip()
        session.set_answer(2, "c")
        session.skip()
        assert session.current_index == 2

        assert session.go_to_previous() is True
        assert session.current_index == 1
        assert session.answers[2] == "c"

    def test_previous_keeps_scored_answer(self, session):
        session.skip()
        session.set_answer(2, "b")
        session.score_and_advance()
        assert session.current_index == 2

        assert session.go_to_previous() is True
        assert session.current_question.id == 2
        assert session.answers[2] == "b"
        assert session.set_answer(2, "c") is False
        assert session.answers[2] == "b"

    def test_previous_on_first_question(self, session):
        assert session.go_to_previous() is False
        assert session.current_index == 0

    def test_workspace_tolerates_corrupt_saved_answer(self, sample_hidden_word_question):
        session = QuizSession([sample_hidden_word_question])
        session.answers[4] = {"found": {"CAT": [["x", "0"]]}}

        workspace = session.workspace
        assert "CAT" in workspace.found_words
        assert not workspace.is_claimed((0, 0))

    def test_workspace_rebuilt_per_question(self, sample_matching_question):
        other = Question.from_dict(
            {"id": 99, "type": "true-false", "text": "Really?", "answer": "true"}
        )
        session = QuizSession([sample_matching_question, other])
        workspace = session.workspace
        assert workspace is session.workspace

        workspace.assign(0, workspace.definitions.index("Durable for stop signs"))
        assert session.answers[12]["Metal"] == "Durable for stop signs"

        session.skip()
        assert session.workspace is None
        session.go_to_previous()
        rebuilt = session.workspace
        assert rebuilt is not workspace
        assert rebuilt.mapping()["Metal"] == "Durable for stop signs"


class TestFinish:
    def test_right_skip_wrong(self, session):
        """Q1 right, Q2 skipped, Q3 wrong."""
        session.set_answer(1, "b")
        session.score_and_advance()
        session.skip(2)
        session.set_answer(3, "a")
        session.score_and_advance()

        assert session.is_terminal
        summary = session.finish()
        assert summary.score == 1
        assert summary.total == 3
        assert summary.flagged_count == 0
        assert summary.skipped_count == 1
        assert len(summary.records) == 2

    def test_score_matches_correct_records(self, session):
        for qid, answer in [(1, "b"), (2, "b"), (3, "d")]:
            session.set_answer(qid, answer)
            session.score_and_advance()
        summary = session.finish()
        assert summary.score == sum(1 for r in summary.records if r.correct) == 2
        assert summary.accuracy_percent == 67

    def test_on_complete_called_once(self, mc_questions):
        calls = []
        session = QuizSession(mc_questions, on_complete=calls.append)
        for _ in mc_questions:
            session.skip()
        first = session.finish()
        second = session.finish()

        assert len(calls) == 1
        assert calls[0] == []
        assert first is second

    def test_finish_before_end_raises(self, session):
        with pytest.raises(QuizSessionError):
            session.finish()

    def test_average_time_rounds_half_up(self, session, clock):
        clock.advance(1)
        session.score_and_advance()
        clock.advance(2)
        session.score_and_advance()
        session.skip()
        assert session.finish().average_time_seconds == 2

    def test_actions_after_end_raise(self, session):
        for _ in range(3):
            session.skip()
        with pytest.raises(QuizSessionError):
            session.skip()
        with pytest.raises(QuizSessionError):
            session.go_to_previous()


class TestUnsupportedType:
    def test_unsupported_question_is_skipped(self):
        questions = [
            Question.from_dict({"id": 1, "type": "drawing", "text": "Draw a roof"}),
            Question.from_dict({"id": 2, "type": "true-false", "text": "Ok?", "answer": "true"}),
        ]
        session = QuizSession(questions)
        result = session.score_and_advance()

        assert result.correct is False
        assert "not supported" in result.feedback
        assert session.analytics == []
        assert session.skipped == {1}
        assert session.current_index == 1

    def test_evaluate_unknown_type_raises(self):
        question = Question.from_dict({"id": 1, "type": "drawing", "text": "Draw"})
        with pytest.raises(QuizSessionError):
            evaluate(question, None)
