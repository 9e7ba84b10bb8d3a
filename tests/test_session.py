import random

from sympy import Rational

from division.generator import Problem, ProblemGenerator
from division.scoring import points_for_step
from division.session import (
    HINT_BUDGET,
    AnswerStatus,
    DivisionSession,
    GameState,
    parse_answer,
)
from division.tiers import TIERS

EASY = TIERS["EASY"]


def _game(dividend=84, divisor=4, include_multiply=True, **kw):
    division = DivisionSession.for_problem(
        EASY, Problem(dividend, divisor), include_multiply=include_multiply
    )
    return GameState(division=division, include_multiply=include_multiply, **kw)


def _play(state, answers):
    for a in answers:
        state = state.submit_answer(a).state
    return state


def test_parse_answer():
    assert parse_answer("04") == 4
    assert parse_answer(" 12 ") == 12
    assert parse_answer("0") == 0
    assert parse_answer("1.5") is None
    assert parse_answer("abc") is None
    assert parse_answer("") is None


def test_non_ascii_digits_are_not_numbers():
    assert parse_answer("\u0662") is None
    assert parse_answer("\uff12") is None
    result = _game().submit_answer("\u0662")
    assert result.status is AnswerStatus.INCORRECT
    assert result.state.division.current_step_index == 0


def test_two_step_walk_scores_max_plus_bonus():
    state = _play(_game(include_multiply=False), ["2", "0", "1", "0"])
    assert state.division.is_complete
    assert state.division.quotient_so_far == "21"
    assert state.score == 100 + 37
    assert state.streak == 4
    assert state.problems_completed == 1


def test_three_step_walk_scores_max_plus_bonus():
    state = _play(_game(), ["2", "8", "0", "1", "4", "0"])
    assert state.division.is_complete
    assert state.score == 100 + 25
    assert state.division.earned == 125
    assert state.snapshot()["score"] == 125


def test_working_history_records_subtractions():
    state = _play(_game(), ["2", "8", "00", "1", "4", "0"])
    lines = state.division.working_history
    assert [(w.product, w.remainder, w.position_index) for w in lines] == [(8, 0, 0), (4, 0, 1)]
    assert lines[0].submitted_value == "00"


def test_wrong_answer_keeps_position_and_resets_streak():
    state = _play(_game(), ["2", "8"])
    assert state.streak == 2
    before_score = state.score

    result = state.submit_answer("9")
    assert result.status is AnswerStatus.INCORRECT
    assert not result.correct
    assert result.feedback == "Try again!"
    assert result.state.division.current_step_index == 2
    assert result.state.streak == 0
    assert result.state.score == before_score
    assert result.state.division.hints_remaining == HINT_BUDGET


def test_non_numeric_answer_is_incorrect():
    result = _game().submit_answer("two")
    assert result.status is AnswerStatus.INCORRECT
    assert result.state.division.current_step_index == 0


def test_empty_answer_is_ignored():
    state = _play(_game(), ["2"])
    for raw in ("", "   ", None):
        result = state.submit_answer(raw)
        assert result.status is AnswerStatus.IGNORED
        assert result.state is state
        assert not result.accepted
    assert state.streak == 1


def test_submit_after_completion_is_ignored():
    state = _play(_game(include_multiply=False), ["2", "0", "1", "0"])
    result = state.submit_answer("0")
    assert result.status is AnswerStatus.IGNORED
    assert result.state.score == state.score
    assert result.feedback == "Problem already complete."


def test_leading_zero_answer_is_correct():
    result = _game().submit_answer("02")
    assert result.correct


def test_hint_halves_points_for_that_step():
    state = _game()
    hint, state = state.request_hint()
    assert hint == "8 ÷ 4 = 2"
    assert state.snapshot()["current_step_hint"] == "8 ÷ 4 = 2"

    result = state.submit_answer("2")
    total = len(state.division.steps)
    assert result.points == points_for_step(EASY, total, hint_used=False) // 2
    assert result.points == 8

    # the next step starts without a hint and earns full points
    nxt = result.state.submit_answer("8")
    assert nxt.points == Rational(100, 6)
    assert result.state.snapshot()["current_step_hint"] is None


def test_hint_budget_runs_out():
    state = _game()
    for answer in ("2", "8", "0"):
        hint, state = state.request_hint()
        assert hint is not None
        state = state.submit_answer(answer).state
    assert state.division.hints_remaining == 0

    hint, after = state.request_hint()
    assert hint is None
    assert after is state


def test_second_hint_on_same_step_is_noop():
    state = _game()
    _, state = state.request_hint()
    hint, again = state.request_hint()
    assert hint is None
    assert again is state
    assert state.division.hints_remaining == HINT_BUDGET - 1


def test_transitions_leave_old_state_untouched():
    start = _game()
    after = start.submit_answer("2").state
    assert start.division.current_step_index == 0
    assert start.score == 0
    assert after.division.current_step_index == 1


def test_score_and_history_never_decrease():
    rng = random.Random(5)
    gen = ProblemGenerator(random.Random(11))
    state = GameState.new(TIERS["HARD"], gen)
    last_score, last_len = state.score, 0

    for _ in range(300):
        if state.division.is_complete:
            state = state.start_new_problem(gen)
            last_len = 0
        step = state.division.current_step
        if rng.random() < 0.3:
            _, state = state.request_hint()
        if rng.random() < 0.25:
            result = state.submit_answer(str(step.expected_answer + 1))
            assert result.state.streak == 0
        else:
            result = state.submit_answer(str(step.expected_answer))
        state = result.state
        assert state.score >= last_score
        assert len(state.division.working_history) >= last_len
        last_score, last_len = state.score, len(state.division.working_history)


def test_streak_and_score_carry_across_problems():
    gen = ProblemGenerator(random.Random(2))
    state = _play(_game(include_multiply=False), ["2", "0", "1", "0"])
    state = state.start_new_problem(gen)
    assert state.streak == 4
    assert state.score == 137
    assert state.division.current_step_index == 0
    assert state.division.working_history == ()
    assert state.division.hints_remaining == HINT_BUDGET
    assert not state.division.is_complete
    assert state.division.earned == 0


def test_tier_change_regenerates_problem():
    gen = ProblemGenerator(random.Random(8))
    state = _game().start_new_problem(gen, TIERS["HARD"])
    assert state.tier is TIERS["HARD"]
    assert 3 <= len(str(state.division.problem.dividend)) <= 4


def test_time_up_freezes_answers_but_keeps_score():
    state = _play(_game(deadline=50.0), ["2"])
    assert state.expire(49.0) is state

    expired = state.expire(50.0)
    assert expired.time_up
    result = expired.submit_answer("8")
    assert result.status is AnswerStatus.TIME_UP
    assert result.state.score == state.score
    assert result.state.division.current_step_index == 1


def test_feedback_messages():
    state = _game(include_multiply=False)
    first = state.submit_answer("2")
    assert first.feedback == "Correct! +25 points"
    second = first.state.submit_answer("0")
    assert second.feedback == "Correct! +25 points (2x streak!)"
    done = _play(second.state, ["1"]).submit_answer("0")
    assert done.problem_completed
    assert done.feedback == "Problem Complete! +37 bonus points!"
