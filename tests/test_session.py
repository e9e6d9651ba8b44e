"""
Unit tests for DJSession.

Tests the session lifecycle, tick catch-up against a fake clock, intents
and teardown between sets.
"""

import pytest
from unittest.mock import Mock, MagicMock

from openai import OpenAIError

from vibera.config import Config
from vibera.generate.source import FALLBACK_CAPTION, SetlistSource
from vibera.models import SetlistParams
from vibera.playback import simulator
from vibera.playback.session import DJSession, NoActiveSessionError


@pytest.fixture
def params():
    return SetlistParams(
        scene="House Party",
        music_profile="Global Top 40",
        duration_minutes=60,
        intensity="mid",
    )


@pytest.fixture
def setlist(make_track):
    return (make_track(0, 30), make_track(1, 60), make_track(2, 45))


@pytest.fixture
def source(setlist):
    """Setlist source stub returning a fixed set."""
    src = Mock()
    src.generate_setlist = Mock(return_value=setlist)
    src.describe_vibe = Mock(return_value="Hands in the air.")
    return src


@pytest.fixture
def session(source, fake_clock):
    return DJSession(source, tick_interval=1.0, default_volume=0.8, clock=fake_clock)


class TestStart:
    """Test starting a set."""

    def test_start_loads_and_plays(self, session, source, params, setlist):
        snap = session.start(params)

        assert snap["active"] is True
        assert snap["caption"] == "Hands in the air."
        assert snap["trackCount"] == 3
        assert snap["state"]["isPlaying"] is True
        assert snap["state"]["currentTrackIndex"] == 0
        assert snap["state"]["crossfade"] == -1.0
        source.generate_setlist.assert_called_once_with(params)
        source.describe_vibe.assert_called_once_with(setlist)

    def test_setlist_fetched_before_caption(self, session, source, params):
        calls = []
        source.generate_setlist.side_effect = lambda p: calls.append("setlist") or ()
        source.describe_vibe.side_effect = lambda s: calls.append("caption") or "ok"

        session.start(params)
        assert calls == ["setlist", "caption"]

    def test_no_ticks_during_fetch(self, session, source, params, fake_clock):
        """Time spent waiting on the remote call does not count as playback."""

        def slow_fetch(p):
            fake_clock.advance(20)
            return (Mock(duration_seconds=30),)

        source.generate_setlist.side_effect = slow_fetch
        session.start(params)
        assert session.advance().progress == 0.0

    def test_idle_session(self, session):
        assert session.is_active is False
        assert session.snapshot()["active"] is False

    def test_from_config(self, source, fake_clock):
        config = Config.defaults()
        config["playback"]["tick_interval_seconds"] = 0.5
        session = DJSession.from_config(source, config, clock=fake_clock)
        assert session.tick_interval == 0.5
        assert session.state.volume == 0.8


class TestPlayback:
    """Test tick catch-up."""

    def test_advance_applies_due_ticks(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(27)
        state = session.advance()
        assert state.current_track_index == 0
        assert state.progress == pytest.approx(90.0)

    def test_rollover_through_session(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(30)
        state = session.advance()
        assert state.current_track_index == 1
        assert state.progress == 0.0
        assert state.crossfade == 1.0

    def test_snapshot_catches_up(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(3)
        snap = session.snapshot()
        assert snap["state"]["progress"] == pytest.approx(10.0)
        assert snap["tracksRemaining"] == 3
        assert [item["position"] for item in snap["queue"]] == [2, 3]

    def test_long_absence_replays_at_most_one_cycle(self, session, params, fake_clock, monkeypatch):
        """A week away lands where the set would be without ticking every second."""
        real_tick = simulator.tick
        counted = Mock(side_effect=real_tick)
        monkeypatch.setattr(simulator, "tick", counted)

        session.start(params)
        fake_clock.advance(135 * 1000 + 27)
        state = session.advance()
        assert state.current_track_index == 0
        assert state.progress == pytest.approx(90.0)
        assert counted.call_count <= 135

    def test_empty_setlist_idles(self, session, source, params, fake_clock):
        source.generate_setlist.return_value = ()
        snap = session.start(params)
        assert snap["active"] is True
        assert snap["trackCount"] == 0
        assert snap["decks"][0]["title"] == "Waiting for Track..."

        fake_clock.advance(100)
        state = session.advance()
        assert state.progress == 0.0
        assert state.current_track_index == 0


class TestIntents:
    """Test toggle, volume and stop."""

    def test_pause_freezes_progress(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(3)
        paused = session.toggle()
        assert paused.playing is False
        assert paused.progress == pytest.approx(10.0)

        fake_clock.advance(100)
        assert session.advance().progress == pytest.approx(10.0)

    def test_resume_starts_fresh_interval(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(0.5)
        session.toggle()
        fake_clock.advance(10)
        session.toggle()

        fake_clock.advance(0.75)
        assert session.advance().progress == 0.0
        fake_clock.advance(0.25)
        assert session.advance().progress == pytest.approx(100 / 30)

    def test_set_volume(self, session, params):
        session.start(params)
        assert session.set_volume(0.25).volume == 0.25
        assert session.set_volume(3).volume == 1.0

    def test_intents_need_active_set(self, session):
        with pytest.raises(NoActiveSessionError):
            session.toggle()
        with pytest.raises(NoActiveSessionError):
            session.set_volume(0.5)

    def test_stop_discards_set(self, session, params, fake_clock):
        session.start(params)
        fake_clock.advance(5)
        session.stop()

        assert session.is_active is False
        assert session.setlist == ()
        assert session.caption == ""
        fake_clock.advance(50)
        state = session.advance()
        assert state.progress == 0.0
        assert state.playing is False

    def test_restart_tears_down_old_stream(self, session, params, fake_clock):
        session.start(params)
        old_ticks = session._ticks
        fake_clock.advance(10)

        session.start(params)
        assert old_ticks.stopped is True
        assert session._ticks is not old_ticks
        assert session.advance().progress == 0.0

    def test_volume_survives_restart(self, session, params):
        session.start(params)
        session.set_volume(0.4)
        session.start(params)
        assert session.state.volume == 0.4


class TestRemoteFailure:
    """Test a session whose remote calls fail."""

    def test_failed_remote_gives_empty_set(self, params, fake_clock):
        client = MagicMock()
        client.chat.completions.create.side_effect = OpenAIError("connection refused")
        session = DJSession(SetlistSource(client=client), clock=fake_clock)

        snap = session.start(params)
        assert snap["active"] is True
        assert snap["trackCount"] == 0
        assert snap["caption"] == FALLBACK_CAPTION
