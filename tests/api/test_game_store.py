"""
Tests for the GameStore composition root.
"""

import asyncio
import random
from unittest.mock import MagicMock

import pytest

from rpsgame.api import GameStore
from rpsgame.audio import ClipName, DummyAudioBackend, PygameAudioBackend
from rpsgame.engine import REVEAL_DELAY_MS, SUSPENSE_DELAY_MS, LoopScheduler
from rpsgame.events import EngineEventType, EventBus
from rpsgame.rps import Move, Outcome, RoundStage, Score, Suspense


@pytest.fixture
def store(clip_sources, backend, scheduler, event_bus):
    sounds = {clip.value: data for clip, data in clip_sources.items()}
    return GameStore(
        {"sounds": sounds},
        backend=backend,
        scheduler=scheduler,
        rng=random.Random(3),
        event_bus=event_bus,
    )


def test_default_config():
    store = GameStore(backend=DummyAudioBackend())

    assert store.config["move_volume"] == 1.0
    assert store.config["outcome_volume"] == 1.0
    assert isinstance(store.machine.scheduler, LoopScheduler)
    assert store.event_bus is EventBus.get_instance()
    slot = store.audio._get_slot(ClipName.WIN)
    assert slot.source.endswith("win.wav")


def test_default_backend_is_pygame():
    store = GameStore()
    assert isinstance(store.backend, PygameAudioBackend)
    assert store.backend.enabled is False


def test_sounds_dir_config(tmp_path):
    store = GameStore({"sounds_dir": str(tmp_path)}, backend=DummyAudioBackend())
    for clip in ClipName:
        assert store.audio._get_slot(clip).source == str(tmp_path / f"{clip.value}.wav")


def test_volume_config_reaches_machine(backend):
    store = GameStore(
        {"move_volume": 0.2, "outcome_volume": 0.7}, backend=backend
    )
    assert store.machine.move_volume == 0.2
    assert store.machine.outcome_volume == 0.7


@pytest.mark.asyncio
async def test_initialize_loads_sounds(store, backend, event_bus):
    init = MagicMock()
    event_bus.on(EngineEventType.ENGINE_INIT, init)

    await store.initialize()

    assert backend.initialized
    assert set(store.audio.ready_clips()) == set(ClipName)
    init.assert_called_once()
    assert sorted(init.call_args[0][0]["clips_ready"]) == sorted(
        clip.value for clip in ClipName
    )


@pytest.mark.asyncio
async def test_initialize_without_waiting(store):
    await store.initialize(wait_for_sounds=False)
    assert store.audio.ready_clips() == []

    await store.audio.start_loading()
    assert set(store.audio.ready_clips()) == set(ClipName)


@pytest.mark.asyncio
async def test_missing_sound_files_do_not_break_initialize(tmp_path, event_bus):
    store = GameStore(
        {"sounds_dir": str(tmp_path)}, backend=DummyAudioBackend(), event_bus=event_bus
    )
    await store.initialize()

    assert store.audio.ready_clips() == []


def test_play_move_accepts_strings(store):
    assert store.play_move("paper") is True
    assert store.round_state == Suspense(player_move=Move.PAPER)


def test_play_move_rejects_unknown_string(store):
    with pytest.raises(ValueError):
        store.play_move("lizard")
    assert store.state.stage == RoundStage.CHANT


def test_play_move_twice(store):
    store.play_move(Move.ROCK)
    assert store.play_move(Move.SCISSORS) is False
    assert store.round_state.player_move == Move.ROCK


@pytest.mark.asyncio
async def test_round_through_store(store, scheduler, backend):
    await store.initialize()

    store.play_move(Move.ROCK)
    scheduler.advance(SUSPENSE_DELAY_MS + REVEAL_DELAY_MS)

    view = store.get_state()
    assert view["stage"] == "evaluated"
    assert view["player_hand"] == "rock"
    assert view["can_reset"] is True
    outcome = Outcome(view["outcome"])
    assert store.score == Score().apply(outcome)
    assert len(backend.plays) == 2

    store.reset()
    assert store.get_state()["stage"] == "chant"
    assert store.score == Score().apply(outcome)


def test_new_game_through_store(store, scheduler):
    for _ in range(5):
        store.play_move(Move.ROCK)
        scheduler.run_all()
        store.reset()

    store.new_game()

    assert store.score == Score(0, 0)
    assert store.state.rounds_played == 0


def test_reset_while_pending_keeps_score(store, scheduler):
    store.play_move(Move.SCISSORS)
    store.reset()
    scheduler.run_all()

    assert store.state.stage == RoundStage.CHANT
    assert store.score == Score(0, 0)


def test_on_accepts_string_event_names(store):
    handler = MagicMock()
    store.on("move_committed", handler)

    store.play_move(Move.PAPER)

    handler.assert_called_once()
    assert handler.call_args[0][0]["player_move"] == "paper"


def test_once_handler(store, scheduler):
    handler = MagicMock()
    store.once(EngineEventType.ROUND_STARTED, handler)

    for _ in range(2):
        store.play_move(Move.PAPER)
        scheduler.run_all()
        store.reset()

    handler.assert_called_once()


@pytest.mark.asyncio
async def test_on_any_handler_sees_every_event(store, scheduler):
    events = []
    store.on_any(lambda event: events.append(event[0]))

    store.play_move(Move.ROCK)
    scheduler.run_all()
    await store.shutdown()
    store.play_move(Move.ROCK)

    assert events[:2] == ["ROUND_STARTED", "MOVE_COMMITTED"]
    assert "MOVE_REVEALED" in events
    assert "ROUND_ENDED" in events
    assert events[-1] == "ENGINE_SHUTDOWN"
    assert store.event_handlers == {}


@pytest.mark.asyncio
async def test_shutdown_unsubscribes_handlers(store, backend, event_bus):
    handler = MagicMock()
    shutdown = MagicMock()
    store.on(EngineEventType.UI_UPDATE_NEEDED, handler)
    event_bus.on(EngineEventType.ENGINE_SHUTDOWN, shutdown)

    await store.initialize()
    await store.shutdown()
    store.play_move(Move.ROCK)

    handler.assert_not_called()
    shutdown.assert_called_once()
    assert not backend.initialized
    assert store.event_handlers == {}


@pytest.mark.asyncio
async def test_round_on_real_event_loop(clip_sources, event_bus):
    """Drive a round with the real 800ms and 500ms delays."""
    backend = DummyAudioBackend()
    sounds = {clip.value: data for clip, data in clip_sources.items()}
    store = GameStore({"sounds": sounds}, backend=backend, event_bus=event_bus)
    played = []
    event_bus.on(EngineEventType.CLIP_PLAYED, lambda data: played.append(data["clip"]))
    await store.initialize()

    store.play_move(Move.PAPER)
    assert store.state.stage == RoundStage.SUSPENSE

    await asyncio.sleep(1.0)
    assert store.state.stage == RoundStage.REVEALED
    outcome = store.state.outcome
    assert played == ["paper"]

    await asyncio.sleep(0.6)
    assert store.state.stage == RoundStage.EVALUATED
    assert played == ["paper", outcome.value]
    assert store.score == Score().apply(outcome)

    await store.shutdown()


@pytest.mark.asyncio
async def test_reset_on_real_event_loop_neutralises_timer(clip_sources, event_bus):
    store = GameStore(
        {"sounds": {c.value: d for c, d in clip_sources.items()}},
        backend=DummyAudioBackend(),
        event_bus=event_bus,
    )
    await store.initialize()

    store.play_move(Move.ROCK)
    await asyncio.sleep(0.2)
    store.reset()
    await asyncio.sleep(1.0)

    assert store.state.stage == RoundStage.CHANT
    assert store.score == Score(0, 0)
    await store.shutdown()
