import random
import sys
import threading

import pytest

from division.generator import ProblemGenerator
from division.session import GameState
from division.store import SessionStore, _Entry
from division.tiers import TIERS


def _new_state(seed=1, deadline=None):
    gen = ProblemGenerator(random.Random(seed))
    return GameState.new(TIERS["EASY"], gen, deadline=deadline), gen


def test_create_get_put_discard(fake_clock):
    state, gen = _new_state()
    token = SessionStore.create(state, gen, user_id="kid-1")
    assert SessionStore.get(token) is state
    assert SessionStore.generator(token) is gen
    assert SessionStore.user_id(token) == "kid-1"

    moved = state.submit_answer("999999").state
    SessionStore.put(token, moved)
    assert SessionStore.get(token) is moved

    assert SessionStore.discard(token) is True
    assert SessionStore.get(token) is None
    assert SessionStore.discard(token) is False


def test_put_unknown_token():
    state, _ = _new_state()
    with pytest.raises(KeyError):
        SessionStore.put("missing", state)


def test_idle_sessions_expire(fake_clock, monkeypatch):
    monkeypatch.setattr(SessionStore, "ttl_s", 60.0)
    state, gen = _new_state()
    token = SessionStore.create(state, gen)

    fake_clock.advance(59)
    assert SessionStore.get(token) is not None
    fake_clock.advance(61)
    assert SessionStore.get(token) is None


def test_purge_idle(fake_clock):
    a, gen_a = _new_state(1)
    b, gen_b = _new_state(2)
    old = SessionStore.create(a, gen_a)
    fake_clock.advance(30)
    fresh = SessionStore.create(b, gen_b)

    assert SessionStore.purge_idle(max_idle_s=10) == 1
    assert SessionStore.get(old) is None
    assert SessionStore.get(fresh) is not None
    fake_clock.advance(1)
    assert SessionStore.purge_idle(max_idle_s=0) == 1
    assert SessionStore.count() == 0


def test_get_applies_countdown(fake_clock):
    state, gen = _new_state(deadline=fake_clock() + 5)
    token = SessionStore.create(state, gen)
    assert not SessionStore.get(token).time_up
    fake_clock.advance(5)
    assert SessionStore.get(token).time_up


def test_concurrent_create_and_purge():
    state, gen = _new_state()
    now = SessionStore.now()
    for i in range(2000):
        SessionStore._entries[f"live-{i}"] = _Entry(state, gen, None, now)

    errors = []
    tokens = []

    def creator():
        try:
            for _ in range(200):
                tokens.append(SessionStore.create(state, gen))
        except Exception as e:
            errors.append(e)

    def purger():
        try:
            for _ in range(100):
                SessionStore.purge_idle()
                SessionStore.count()
        except Exception as e:
            errors.append(e)

    old_interval = sys.getswitchinterval()
    sys.setswitchinterval(1e-6)
    try:
        threads = [threading.Thread(target=creator) for _ in range(8)]
        threads += [threading.Thread(target=purger) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
    finally:
        sys.setswitchinterval(old_interval)

    assert errors == []
    assert len(set(tokens)) == 8 * 200
    assert SessionStore.count() == 2000 + 8 * 200
