"""Tests for the session lifecycle manager and the observation model."""

from __future__ import annotations

from unittest import mock

import pytest

from src.platform.lifecycle import (
    Control,
    LifecycleTimeoutError,
    SessionLifecycle,
    SessionState,
)
from src.platform.observation import Observation


def _lifecycle(game, **kwargs) -> SessionLifecycle:
    kwargs.setdefault("timeout_s", 0.5)
    kwargs.setdefault("poll_interval_s", 0.0)
    return SessionLifecycle(game, game, **kwargs)


# -- Observation ---------------------------------------------------------------


class TestObservation:
    """The immutable snapshot type."""

    def test_defaults(self):
        obs = Observation()
        assert obs.score == 0
        assert obs.running is False
        assert obs.render_surface_valid is False

    def test_negative_score_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Observation(score=-1)

    def test_negative_high_score_rejected(self):
        with pytest.raises(ValueError):
            Observation(high_score=-5)

    def test_unavailable(self):
        obs = Observation.unavailable()
        assert obs.render_surface_valid is False
        assert obs.score == 0
        assert obs.stopped

    @pytest.mark.parametrize(
        "running, terminated, stopped",
        [(True, False, False), (False, False, True), (True, True, True), (False, True, True)],
    )
    def test_stopped(self, running, terminated, stopped):
        assert Observation(running=running, terminated=terminated).stopped is stopped

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Observation().score = 5  # type: ignore[misc]

    def test_as_dict(self):
        obs = Observation(score=10, high_score=20, running=True, surface_width=400)
        d = obs.as_dict()
        assert d["score"] == 10
        assert d["high_score"] == 20
        assert d["running"] is True
        assert d["surface_width"] == 400
        assert set(d) == {
            "score",
            "high_score",
            "running",
            "paused",
            "render_surface_valid",
            "terminated",
            "surface_width",
            "surface_height",
        }


# -- SessionState --------------------------------------------------------------


class TestSessionState:
    """Classification of snapshots."""

    @pytest.mark.parametrize(
        "obs, expected",
        [
            (Observation(), SessionState.IDLE),
            (Observation(running=True), SessionState.RUNNING),
            (Observation(running=True, paused=True), SessionState.PAUSED),
            (Observation(running=False, terminated=True), SessionState.TERMINATED),
            (Observation(running=True, paused=True, terminated=True), SessionState.TERMINATED),
        ],
    )
    def test_from_observation(self, obs, expected):
        assert SessionState.from_observation(obs) is expected


# -- SessionLifecycle ----------------------------------------------------------


class TestSessionLifecycle:
    """Commands press one control and wait for the visible effect."""

    def test_invalid_timeouts_rejected(self, scripted_game):
        game = scripted_game()
        with pytest.raises(ValueError):
            SessionLifecycle(game, game, timeout_s=0)
        with pytest.raises(ValueError):
            SessionLifecycle(game, game, poll_interval_s=-1)

    def test_start(self, scripted_game):
        game = scripted_game(running=False)
        lifecycle = _lifecycle(game)
        assert lifecycle.state() is SessionState.IDLE

        obs = lifecycle.start()
        assert obs.running
        assert game.presses == [Control.START]
        assert lifecycle.state() is SessionState.RUNNING

    def test_pause_then_resume(self, scripted_game):
        game = scripted_game(running=False)
        lifecycle = _lifecycle(game)
        lifecycle.start()

        assert lifecycle.pause().paused
        assert lifecycle.state() is SessionState.PAUSED
        assert not lifecycle.resume().paused
        assert lifecycle.state() is SessionState.RUNNING
        assert game.presses == [Control.START, Control.PAUSE_TOGGLE, Control.PAUSE_TOGGLE]

    def test_pause_resume_cycles(self, scripted_game):
        game = scripted_game(running=False)
        lifecycle = _lifecycle(game)
        lifecycle.start()
        for _ in range(3):
            lifecycle.pause()
            lifecycle.resume()
        assert lifecycle.state() is SessionState.RUNNING

    @pytest.mark.parametrize("pause_first", [False, True])
    def test_reset_from_running_or_paused(self, scripted_game, pause_first):
        game = scripted_game(running=False)
        lifecycle = _lifecycle(game)
        lifecycle.start()
        if pause_first:
            lifecycle.pause()
        game.score = 30

        obs = lifecycle.reset()
        assert not obs.running
        assert obs.score == 0
        assert lifecycle.state() is SessionState.IDLE

    @pytest.mark.parametrize("from_game_over", [True, False])
    def test_reset_waits_for_page_to_clear(self, scripted_game, from_game_over):
        """A reset that lands one poll late is still awaited."""

        class LaggingReset(scripted_game):
            reset_pending = False

            def press(self, control):
                if control is Control.RESET:
                    self.presses.append(control)
                    self.reset_pending = True
                    return
                super().press(control)

            def observe(self):
                obs = super().observe()
                if self.reset_pending:
                    self.reset_pending = False
                    self.running = self.paused = self.terminated = False
                    self.score = 0
                return obs

        game = LaggingReset(running=False, score=30, terminates_at=1)
        if from_game_over:
            game.running = True
            game.act(None, 0.0)
        before = game.observe()
        assert not before.running and before.score == 30

        obs = _lifecycle(game).reset()

        assert obs.score == 0
        assert not obs.running
        assert not obs.terminated
        assert game.observations >= 3
        assert game.presses == [Control.RESET]

    def test_play_again_dismisses_game_over(self, scripted_game):
        game = scripted_game(terminates_at=1)
        lifecycle = _lifecycle(game)
        game.act(None, 0.0)
        assert lifecycle.state() is SessionState.TERMINATED

        obs = lifecycle.play_again()
        assert not obs.terminated
        assert lifecycle.state() is SessionState.IDLE

    def test_wait_until_ready(self, scripted_game):
        assert _lifecycle(scripted_game()).wait_until_ready().render_surface_valid

    def test_wait_until_ready_times_out(self, scripted_game):
        game = scripted_game()
        game.render_surface_valid = False
        lifecycle = _lifecycle(game, timeout_s=0.05, poll_interval_s=0.01)
        with pytest.raises(LifecycleTimeoutError, match="render surface ready") as exc_info:
            lifecycle.wait_until_ready()
        assert exc_info.value.last_observation.render_surface_valid is False

    def test_start_times_out_when_control_ignored(self, scripted_game):
        game = scripted_game(running=False)
        game.press = mock.Mock()  # the button does nothing
        lifecycle = _lifecycle(game, timeout_s=0.05, poll_interval_s=0.01)
        with pytest.raises(LifecycleTimeoutError, match="session running"):
            lifecycle.start()
        game.press.assert_called_once_with(Control.START)

    def test_wait_until_polls_until_predicate(self, scripted_game):
        game = scripted_game()
        lifecycle = _lifecycle(game, poll_interval_s=0.2)
        with mock.patch("src.platform.lifecycle.time.sleep") as mock_sleep:
            seen = []

            def predicate(obs):
                seen.append(obs)
                return len(seen) == 3

            lifecycle.wait_until(predicate, "third poll")

        assert len(seen) == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(0.2)

    def test_timeout_uses_monotonic_deadline(self, scripted_game):
        game = scripted_game(running=False)
        lifecycle = _lifecycle(game, timeout_s=5.0, poll_interval_s=0.1)
        clock = iter([100.0, 101.0, 106.0])
        with mock.patch("src.platform.lifecycle.time.monotonic", side_effect=lambda: next(clock)), \
                mock.patch("src.platform.lifecycle.time.sleep"):
            with pytest.raises(LifecycleTimeoutError, match="5.0s"):
                lifecycle.wait_until(lambda o: o.running, "session running")
