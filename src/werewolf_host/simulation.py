"""Offline match simulation with stub bots on a virtual clock."""

import random
from typing import Optional

from pydantic import BaseModel

from werewolf_host.bots.stub_bot import StubBot
from werewolf_host.engine.base import RecordingSink, StaticRoster
from werewolf_host.engine.scheduling import VirtualScheduler
from werewolf_host.engine.werewolf_engine import WerewolfEngine
from werewolf_host.events.actions import ActionKind
from werewolf_host.events.match_events import Phase, Winner
from werewolf_host.events.match_log import MatchEventLog
from werewolf_host.models.config import MatchConfig

# Upper bound on simulated seconds before a match is abandoned
MAX_SIMULATED_STEPS = 20_000


class SimulationResult(BaseModel):
    """Outcome of one simulated match."""

    seed: int
    winner: Optional[Winner] = None
    rounds: int = 0
    snapshots: int = 0
    log: MatchEventLog
    violations: list = []


def make_player_ids(count: int) -> list[str]:
    return [f"p{i}" for i in range(1, count + 1)]


def run_simulated_match(
    seed: int,
    player_count: int = 8,
    config: Optional[MatchConfig] = None,
    validator=None,
    activity: float = 0.8,
) -> SimulationResult:
    """Play one match with stub bots until it ends.

    Args:
        seed: Seed for dealing, bots and host decisions.
        player_count: Number of players (the first one is the host).
        config: Match configuration (defaults to MatchConfig()).
        validator: Optional MatchValidator to run during the match.
        activity: Probability that a bot acts on a given tick.

    Returns:
        SimulationResult with the winner and the match log.
    """
    rng = random.Random(seed)
    player_ids = make_player_ids(player_count)
    host = player_ids[0]

    sink = RecordingSink()
    scheduler = VirtualScheduler()
    engine = WerewolfEngine(
        sink,
        scheduler=scheduler,
        authority_id=host,
        rng=random.Random(seed),
        validator=validator,
    )
    engine.start_match(StaticRoster(players=player_ids), config)
    tick = engine.state.config.timing.tick

    bots = [
        StubBot(player_id, seed=seed * 100 + i, activity=activity)
        for i, player_id in enumerate(player_ids)
    ]

    for _ in range(MAX_SIMULATED_STEPS):
        state = engine.state
        if state is None or state.phase == Phase.END:
            break

        _host_step(engine, host, rng)

        rng.shuffle(bots)
        for bot in bots:
            if engine.state is None or engine.state.phase == Phase.END:
                break
            payload = bot.decide(sink.last)
            if payload is not None:
                engine.dispatch_raw(payload)

        scheduler.advance(tick)

    state = engine.state
    violations = validator.get_violations() if hasattr(validator, "get_violations") else []
    return SimulationResult(
        seed=seed,
        winner=state.winner if state else None,
        rounds=state.round if state else 0,
        snapshots=len(sink),
        log=engine.log,
        violations=violations,
    )


def _host_step(engine: WerewolfEngine, host: str, rng: random.Random) -> None:
    """Host-only controls: start the night, open discussion, force the vote."""
    phase = engine.state.phase
    if phase == Phase.ROLE_REVEAL:
        engine.dispatch_raw({"kind": ActionKind.START_NIGHT.value, "player_id": host})
    elif phase == Phase.DAY_ANNOUNCE and rng.random() < 0.3:
        engine.dispatch_raw({"kind": ActionKind.START_DISCUSS.value, "player_id": host})
    elif phase == Phase.DAY_DISCUSS and rng.random() < 0.05:
        engine.dispatch_raw({"kind": ActionKind.HOST_FORCE_VOTE.value, "player_id": host})
