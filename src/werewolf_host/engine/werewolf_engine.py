"""WerewolfEngine - the host-side controller that owns and mutates MatchState.

Match Flow:
    1. ROLE_REVEAL: roles dealt, host starts the first night
    2. NIGHT: simultaneous actions until everyone confirms or the countdown ends
    3. DAY_ANNOUNCE: night deaths announced, win checked after a short delay
    4. DAY_DISCUSS: discussion (and knight duels) until everyone is ready
    5. VOTE: lock-based vote until everyone locks or the countdown ends
    6. VOTE_RESULT: elimination shown, then NIGHT (or SPECIAL for a wolf-leader)
    7. ... until END

Every inbound action goes through dispatch(). Actions that do not fit the
current phase, role or target are dropped without a reply. Timers are
scheduled with the phase epoch they belong to and do nothing if the match
has moved on by the time they fire.
"""

import logging
import random
from typing import Any, Callable, Optional, TYPE_CHECKING

from pydantic import ValidationError as PayloadError

from werewolf_host.engine.base import BroadcastSink, PlayerRoster
from werewolf_host.engine.day_controller import DayController
from werewolf_host.engine.match_state import MatchState, SpecialPending
from werewolf_host.engine.night_resolver import NightResolver
from werewolf_host.engine.scheduling import Scheduler, TimerHandle
from werewolf_host.engine.win_evaluator import BOMBER_WIN_REASON, WinEvaluator
from werewolf_host.events.actions import (
    ABSTAIN,
    HOST_ONLY_KINDS,
    ActionKind,
    BaseAction,
    parse_action,
)
from werewolf_host.events.match_events import (
    DeathCause,
    MatchEvent,
    Phase,
    SpecialKind,
    Winner,
)
from werewolf_host.events.match_log import MatchEventLog
from werewolf_host.models.config import MatchConfig
from werewolf_host.models.role import RoleId, deal_roles

# Import validator for type hints (avoid circular import)
if TYPE_CHECKING:
    from werewolf_host.engine.validator import MatchValidator

logger = logging.getLogger(__name__)


# Phase in which each player action is accepted
ACTION_PHASES: dict[ActionKind, Phase] = {
    ActionKind.WOLF_VOTE: Phase.NIGHT,
    ActionKind.WOLF_CONFIRM: Phase.NIGHT,
    ActionKind.SEER_CHECK: Phase.NIGHT,
    ActionKind.WITCH_SAVE: Phase.NIGHT,
    ActionKind.WITCH_POISON: Phase.NIGHT,
    ActionKind.WITCH_PASS: Phase.NIGHT,
    ActionKind.HUNTER_LOCK: Phase.NIGHT,
    ActionKind.HUNTER_CONFIRM: Phase.NIGHT,
    ActionKind.NIGHT_DONE: Phase.NIGHT,
    ActionKind.KNIGHT_CHALLENGE: Phase.DAY_DISCUSS,
    ActionKind.DISCUSS_READY: Phase.DAY_DISCUSS,
    ActionKind.HOST_FORCE_VOTE: Phase.DAY_DISCUSS,
    ActionKind.VOTE_SELECT: Phase.VOTE,
    ActionKind.VOTE_ABSTAIN: Phase.VOTE,
    ActionKind.VOTE_LOCK: Phase.VOTE,
    ActionKind.VOTE_UNLOCK: Phase.VOTE,
    ActionKind.WOLF_LEADER_SHOOT: Phase.SPECIAL,
    ActionKind.START_NIGHT: Phase.ROLE_REVEAL,
    ActionKind.START_DISCUSS: Phase.DAY_ANNOUNCE,
}


class WerewolfEngine:
    """Sole mutator of MatchState and the only caller of broadcast_state."""

    def __init__(
        self,
        sink: BroadcastSink,
        scheduler: Scheduler,
        authority_id: str,
        rng: Optional[random.Random] = None,
        validator: Optional["MatchValidator"] = None,
        on_return_to_lobby: Optional[Callable[[], None]] = None,
    ):
        """Initialize the engine.

        Args:
            sink: Receives a full snapshot after every state change.
            scheduler: Runs countdown ticks and display delays.
            authority_id: Player id of the host; host-only actions must come
                          from this player.
            rng: Optional random.Random for reproducible dealing and
                 tie-breaks.
            validator: Optional validator for runtime invariant checking.
            on_return_to_lobby: Called after the match is dropped.
        """
        self._sink = sink
        self._scheduler = scheduler
        self.authority_id = authority_id
        self._rng = rng or random.Random()
        self._validator = validator
        self._on_return_to_lobby = on_return_to_lobby

        self._night = NightResolver(rng=self._rng)
        self._day = DayController()
        self._win = WinEvaluator()

        self.state: Optional[MatchState] = None
        self.log: Optional[MatchEventLog] = None

        self._epoch = 0
        self._countdown: Optional[TimerHandle] = None
        self._pending: list[TimerHandle] = []

        self._handlers: dict[ActionKind, Callable[[BaseAction], bool]] = {
            ActionKind.WOLF_VOTE: self._on_wolf_vote,
            ActionKind.WOLF_CONFIRM: self._on_wolf_confirm,
            ActionKind.SEER_CHECK: self._on_seer_check,
            ActionKind.WITCH_SAVE: self._on_witch_save,
            ActionKind.WITCH_POISON: self._on_witch_poison,
            ActionKind.WITCH_PASS: self._on_witch_pass,
            ActionKind.HUNTER_LOCK: self._on_hunter_lock,
            ActionKind.HUNTER_CONFIRM: self._on_hunter_confirm,
            ActionKind.NIGHT_DONE: self._on_night_done,
            ActionKind.WOLF_LEADER_SHOOT: self._on_wolf_leader_shoot,
            ActionKind.KNIGHT_CHALLENGE: self._on_knight_challenge,
            ActionKind.VOTE_SELECT: self._on_vote_select,
            ActionKind.VOTE_ABSTAIN: self._on_vote_abstain,
            ActionKind.VOTE_LOCK: self._on_vote_lock,
            ActionKind.VOTE_UNLOCK: self._on_vote_unlock,
            ActionKind.DISCUSS_READY: self._on_discuss_ready,
            ActionKind.HOST_FORCE_VOTE: self._on_host_force_vote,
            ActionKind.START_NIGHT: self._on_start_night,
            ActionKind.START_DISCUSS: self._on_start_discuss,
            ActionKind.RETURN_TO_LOBBY: self._on_return_to_lobby_action,
        }

    @property
    def epoch(self) -> int:
        return self._epoch

    # ------------------------------------------------------------------
    # Match lifecycle
    # ------------------------------------------------------------------

    def start_match(self, roster: PlayerRoster, config: Optional[MatchConfig] = None) -> MatchState:
        """Deal roles to every non-spectator player and publish ROLE_REVEAL.

        Raises:
            MatchConfigError: if the configuration cannot be dealt; no state
                              is created in that case.
        """
        config = config or MatchConfig()
        player_ids = [
            p for p in roster.alive_eligible_players() if not roster.is_spectator(p)
        ]
        config.check(len(player_ids))

        self._reset_timers()
        roles = deal_roles(config.roles, player_ids, rng=self._rng)
        self.state = MatchState.new_match(roles, config)
        self.log = MatchEventLog(roles_secret={p: r.value for p, r in roles.items()})
        self._record("match_start", detail=f"{len(roles)} players")
        logger.info("Match started with %d players", len(roles))

        if self._validator:
            self._validator.on_match_start(self.state)
        self._publish()
        return self.state

    def promote(self, snapshot: dict[str, Any]) -> MatchState:
        """Take over as authority from the last broadcast snapshot.

        Re-arms whichever timer belongs to the current phase and
        re-broadcasts so that followers resynchronize.
        """
        self._reset_timers()
        self.state = MatchState.from_snapshot(snapshot)
        if self.log is None:
            self.log = MatchEventLog(
                roles_secret={p: r.value for p, r in self.state.roles.items()},
            )
        self._record("promoted", actor=self.authority_id)
        logger.info("Promoted to authority in phase %s", self.state.phase.value)

        state = self.state
        timing = state.config.timing
        if state.phase == Phase.NIGHT:
            self._arm_night_countdown()
        elif state.phase == Phase.VOTE:
            self._arm_vote_countdown()
        elif state.phase == Phase.SPECIAL:
            if state.special_pending is None:
                # Shot already taken, only the return to night is left
                self._schedule(timing.special_return, self._start_night)
            else:
                self._arm_special_countdown()
        elif state.phase == Phase.DAY_ANNOUNCE:
            self._schedule(timing.announce_win_check, self._check_win)
        elif state.phase == Phase.VOTE_RESULT:
            self._schedule(timing.vote_result, self._after_vote_result)

        self._publish()
        return state

    def return_to_lobby(self) -> None:
        """Drop the match entirely."""
        self._reset_timers()
        self._record("return_to_lobby")
        self.state = None
        logger.info("Returned to lobby")
        if self._on_return_to_lobby:
            self._on_return_to_lobby()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, action: BaseAction) -> bool:
        """Apply one inbound action.

        Returns:
            True if the action was accepted, False if it was ignored.
        """
        state = self.state
        if state is None:
            return False

        kind = action.action_kind
        if kind in HOST_ONLY_KINDS:
            if action.player_id != self.authority_id:
                return self._ignore(action, "not the host")
        elif action.player_id not in state.roles:
            return self._ignore(action, "not a player in this match")

        if state.phase == Phase.END and kind != ActionKind.RETURN_TO_LOBBY:
            return self._ignore(action, "match has ended")

        required = ACTION_PHASES.get(kind)
        if required is not None and state.phase != required:
            return self._ignore(action, f"wrong phase {state.phase.value}")

        accepted = self._handlers[kind](action)
        if not accepted:
            return self._ignore(action, "precondition failed")
        return True

    def dispatch_raw(self, payload: dict[str, Any]) -> bool:
        """Parse and apply a payload relayed by the transport."""
        try:
            action = parse_action(payload)
        except PayloadError as e:
            logger.warning("Dropping malformed action %r: %s", payload, e.error_count())
            return False
        return self.dispatch(action)

    def _ignore(self, action: BaseAction, reason: str) -> bool:
        logger.debug("Ignored %s: %s", action, reason)
        return False

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    def _on_start_night(self, action: BaseAction) -> bool:
        self._start_night()
        return True

    def _start_night(self) -> None:
        state = self.state
        self._enter_phase(Phase.NIGHT)
        state.begin_night()
        self._record("night_start")
        self._publish()
        self._arm_night_countdown()

    def _on_wolf_vote(self, action) -> bool:
        return self._night_action(action, self._night.wolf_vote(self.state, action.player_id, action.target))

    def _on_wolf_confirm(self, action) -> bool:
        return self._night_action(action, self._night.wolf_confirm(self.state, action.player_id))

    def _on_seer_check(self, action) -> bool:
        return self._night_action(action, self._night.seer_check(self.state, action.player_id, action.target))

    def _on_witch_save(self, action) -> bool:
        return self._night_action(action, self._night.witch_save(self.state, action.player_id))

    def _on_witch_poison(self, action) -> bool:
        return self._night_action(action, self._night.witch_poison(self.state, action.player_id, action.target))

    def _on_witch_pass(self, action) -> bool:
        return self._night_action(action, self._night.witch_pass(self.state, action.player_id))

    def _on_hunter_lock(self, action) -> bool:
        return self._night_action(action, self._night.hunter_lock(self.state, action.player_id, action.target))

    def _on_hunter_confirm(self, action) -> bool:
        return self._night_action(action, self._night.hunter_confirm(self.state, action.player_id))

    def _on_night_done(self, action) -> bool:
        return self._night_action(action, self._night.night_done(self.state, action.player_id))

    def _night_action(self, action: BaseAction, accepted: bool) -> bool:
        if not accepted:
            return False
        self._record_action(action)
        self._publish()
        if self._night.is_complete(self.state):
            self._resolve_night()
        return True

    def _resolve_night(self) -> None:
        state = self.state
        if state is None or state.phase != Phase.NIGHT:
            return
        died = self._night.resolve(state)
        state.day.announcement.peaceful = not died
        state.day.announcement.died = died
        self._enter_phase(Phase.DAY_ANNOUNCE)
        for player_id in died:
            self._record("death", target=player_id, detail=state.death_log[player_id].value)
        self._publish()
        self._schedule(state.config.timing.announce_win_check, self._check_win)

    # ------------------------------------------------------------------
    # Day: discussion
    # ------------------------------------------------------------------

    def _on_start_discuss(self, action: BaseAction) -> bool:
        # The delayed post-announcement win check must not be skipped
        if self._check_win():
            return True
        state = self.state
        self._enter_phase(Phase.DAY_DISCUSS)
        state.day.discuss_ready = set()
        state.day.votes = {}
        state.day.vote_locked = set()
        self._record("discussion_start")
        self._publish()
        return True

    def _on_discuss_ready(self, action) -> bool:
        if not self._day.discuss_ready(self.state, action.player_id):
            return False
        self._record_action(action)
        self._publish()
        if self._day.everyone_ready(self.state):
            self._start_vote()
        return True

    def _on_host_force_vote(self, action: BaseAction) -> bool:
        self._record_action(action)
        self._start_vote()
        return True

    def _on_knight_challenge(self, action) -> bool:
        state = self.state
        outcome = self._day.knight_challenge(state, action.player_id, action.target)
        if outcome is None:
            return False
        self._record_action(action, detail=f"{outcome.victim} died")
        self._publish()
        if self._check_win():
            return True
        if outcome.triggers_special:
            self._enter_special(outcome.victim)
        elif self._day.everyone_ready(state):
            self._start_vote()
        return True

    # ------------------------------------------------------------------
    # Day: vote
    # ------------------------------------------------------------------

    def _start_vote(self) -> None:
        state = self.state
        self._enter_phase(Phase.VOTE)
        state.day.votes = {}
        state.day.vote_locked = set()
        state.day.vote_time_left = state.config.vote_time
        self._record("vote_start")
        self._publish()
        self._arm_vote_countdown()

    def _on_vote_select(self, action) -> bool:
        if action.target == ABSTAIN:
            return self._on_vote_abstain(action)
        if not self._day.vote_select(self.state, action.player_id, action.target):
            return False
        self._record_action(action)
        self._publish()
        return True

    def _on_vote_abstain(self, action) -> bool:
        if not self._day.vote_abstain(self.state, action.player_id):
            return False
        self._record_action(action)
        self._publish()
        self._try_end_vote()
        return True

    def _on_vote_lock(self, action) -> bool:
        if not self._day.vote_lock(self.state, action.player_id):
            return False
        self._record_action(action)
        self._publish()
        self._try_end_vote()
        return True

    def _on_vote_unlock(self, action) -> bool:
        if not self._day.vote_unlock(self.state, action.player_id):
            return False
        self._record_action(action)
        self._publish()
        return True

    def _try_end_vote(self) -> None:
        if self._day.everyone_locked(self.state):
            self._resolve_vote()

    def _vote_timeout(self) -> None:
        converted = self._day.auto_abstain(self.state)
        if converted:
            self._record("auto_abstain", detail=", ".join(converted))
            self._publish()
        self._resolve_vote()

    def _resolve_vote(self) -> None:
        state = self.state
        if state is None or state.phase != Phase.VOTE:
            return
        outcome = self._day.resolve_vote(state)
        self._record(
            "vote_result",
            target=outcome.eliminated,
            detail=outcome.reason.value if outcome.reason else f"voters: {', '.join(outcome.voters)}",
        )

        if outcome.bomber_win:
            self._end(Winner.BOMBER, BOMBER_WIN_REASON)
            return

        self._enter_phase(Phase.VOTE_RESULT)
        self._publish()
        self._schedule(state.config.timing.vote_result, self._after_vote_result)

    def _after_vote_result(self) -> None:
        state = self.state
        if self._check_win():
            return
        result = state.day.result
        if result is not None and result.blast_victims:
            self._schedule(state.config.timing.blast_extra, self._start_night)
        elif result is not None and result.eliminated is not None \
                and state.roles[result.eliminated] == RoleId.WOLF_LEADER:
            self._enter_special(result.eliminated)
        else:
            self._start_night()

    # ------------------------------------------------------------------
    # Special: wolf-leader's posthumous shot
    # ------------------------------------------------------------------

    def _enter_special(self, actor: str) -> None:
        state = self.state
        self._enter_phase(Phase.SPECIAL)
        state.special_pending = SpecialPending(
            actor=actor,
            kind=SpecialKind.WOLF_LEADER_SHOT,
            time_left=state.config.special_time,
        )
        self._record("special_start", actor=actor)
        self._publish()
        self._arm_special_countdown()

    def _on_wolf_leader_shoot(self, action) -> bool:
        state = self.state
        pending = state.special_pending
        if pending is None or pending.actor != action.player_id:
            return False
        if action.target == action.player_id or not state.is_alive(action.target):
            return False

        self._stop_countdown()
        state.kill(action.target, DeathCause.WOLF_LEADER_SHOT)
        state.special_pending = None
        self._record_action(action)
        self._publish()
        if self._check_win():
            return True
        self._schedule(state.config.timing.special_return, self._start_night)
        return True

    def _special_timeout(self) -> None:
        state = self.state
        if state.special_pending is None:
            return
        self._record("special_lapsed", actor=state.special_pending.actor)
        state.special_pending = None
        self._start_night()

    # ------------------------------------------------------------------
    # Win / end
    # ------------------------------------------------------------------

    def _check_win(self) -> bool:
        """Evaluate the win condition and end the match if it is met."""
        state = self.state
        if state is None:
            return False
        if state.phase == Phase.END:
            return True
        result = self._win.evaluate(state)
        if result is None:
            return False
        self._end(result.winner, result.reason)
        return True

    def _end(self, winner: Winner, reason: str) -> None:
        state = self.state
        self._enter_phase(Phase.END)
        state.winner = winner
        state.win_reason = reason
        state.special_pending = None
        if self.log is not None:
            self.log.winner = winner
            self.log.win_reason = reason
        self._record("match_end", detail=winner.value)
        logger.info("Match over: %s (%s)", winner.value, reason)
        self._publish()
        if self._validator:
            self._validator.on_match_end(state)

    def _on_return_to_lobby_action(self, action: BaseAction) -> bool:
        self.return_to_lobby()
        return True

    # ------------------------------------------------------------------
    # Phases and timers
    # ------------------------------------------------------------------

    def _enter_phase(self, phase: Phase) -> None:
        """Switch phase; every timer of the previous phase becomes stale."""
        previous = self.state.phase
        self._reset_timers()
        self.state.phase = phase
        logger.info("Round %d: %s -> %s", self.state.round, previous.value, phase.value)

    def _reset_timers(self) -> None:
        self._epoch += 1
        self._stop_countdown()
        for handle in self._pending:
            handle.cancel()
        self._pending = []

    def _stop_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _guarded(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Wrap a callback so it only runs if the epoch is unchanged."""
        epoch = self._epoch

        def run() -> None:
            if self._epoch != epoch or self.state is None:
                logger.debug("Stale timer for epoch %d skipped", epoch)
                return
            callback()

        return run

    def _schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = self._scheduler.call_later(delay, self._guarded(callback))
        self._pending.append(handle)
        return handle

    def _arm_countdown(
        self,
        read: Callable[[], int],
        write: Callable[[int], None],
        on_expire: Callable[[], None],
    ) -> None:
        """Tick a countdown once per interval, publishing every tick."""
        interval = self.state.config.timing.tick

        def tick() -> None:
            remaining = max(0, read() - 1)
            write(remaining)
            self._publish()
            if remaining <= 0:
                self._countdown = None
                on_expire()
            else:
                self._countdown = self._scheduler.call_later(interval, self._guarded(tick))

        self._stop_countdown()
        if read() <= 0:
            self._countdown = self._scheduler.call_later(0, self._guarded(on_expire))
        else:
            self._countdown = self._scheduler.call_later(interval, self._guarded(tick))

    def _arm_night_countdown(self) -> None:
        night = self.state.night
        self._arm_countdown(
            lambda: night.time_left,
            lambda value: setattr(night, "time_left", value),
            self._resolve_night,
        )

    def _arm_vote_countdown(self) -> None:
        day = self.state.day
        self._arm_countdown(
            lambda: day.vote_time_left,
            lambda value: setattr(day, "vote_time_left", value),
            self._vote_timeout,
        )

    def _arm_special_countdown(self) -> None:
        pending = self.state.special_pending
        if pending is None:
            return
        self._arm_countdown(
            lambda: pending.time_left,
            lambda value: setattr(pending, "time_left", value),
            self._special_timeout,
        )

    # ------------------------------------------------------------------
    # Publishing and history
    # ------------------------------------------------------------------

    def _publish(self) -> None:
        if self._validator:
            self._validator.on_state_published(self.state)
        self._sink.broadcast_state(self.state.to_snapshot())

    def _record(
        self,
        kind: str,
        actor: Optional[str] = None,
        target: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        if self.log is None or self.state is None:
            return
        self.log.add(MatchEvent(
            round=self.state.round,
            phase=self.state.phase,
            kind=kind,
            actor=actor,
            target=target,
            detail=detail,
        ))

    def _record_action(self, action: BaseAction, detail: Optional[str] = None) -> None:
        self._record(
            action.action_kind.value,
            actor=action.player_id,
            target=getattr(action, "target", None),
            detail=detail,
        )
