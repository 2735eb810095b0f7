"""
Match - Plays one game from its initial state to the end.

The match loop:
1. Ask every active role's player for a decision (concurrently)
2. Wait for all of them
3. Sample the chance variables, if any
4. Apply the joint transition and record it in the history
5. Repeat until the state is finished

Turns are strictly sequential. Aborting a match cancels the decisions it
is waiting for.
"""

from __future__ import annotations
import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, TYPE_CHECKING

from ..engine_core.action_generator import sample_haps
from ..engine_core.errors import MatchAborted
from ..engine_core.randomness import RandomSource

if TYPE_CHECKING:
    from ..engine_core.state import GameState, Result
    from ..players.policy import Player

logger = logging.getLogger(__name__)


class MatchState(Enum):
    """Lifecycle of a match."""
    CREATED = "created"
    RUNNING = "running"
    FINISHED = "finished"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass
class MatchEntry:
    """
    One step of a match's history.

    actions and haps are filled in when the state is left; the last entry
    of a finished match has neither.
    """
    state: GameState
    actions: dict[str, Any] | None = None
    haps: dict[str, Any] | None = None


class Match:
    """
    A single playthrough.

    Usage:
        match = Match(TicTacToe(), [RandomPlayer(), MiniMaxPlayer()])
        result = match.play()  # or: await match.run()
    """

    def __init__(
        self,
        game: GameState,
        players: Sequence[Player] | Mapping[str, Player],
        random: RandomSource | None = None,
        match_id: str | None = None,
    ):
        self.game = game
        self.random = random if random is not None else RandomSource()
        self.match_id = match_id or uuid.uuid4().hex[:12]
        self.history: list[MatchEntry] = [MatchEntry(state=game)]
        self.state = MatchState.CREATED
        self.abort_reason: str | None = None
        self.error: BaseException | None = None
        self._pending: asyncio.Future | None = None
        self.players = self._participate(players)

    def _participate(self, players: Sequence[Player] | Mapping[str, Player]) -> dict[str, Player]:
        roles = list(self.game.roles)
        if isinstance(players, Mapping):
            missing = [role for role in roles if role not in players]
            if missing:
                raise ValueError(f"Missing players for roles: {', '.join(missing)}")
            by_role = {role: players[role] for role in roles}
        else:
            players = list(players)
            if len(players) != len(roles):
                raise ValueError(f"Expected {len(roles)} players, but got {len(players)}")
            by_role = dict(zip(roles, players))
        for role, player in by_role.items():
            if not player.can_play(self.game):
                raise ValueError(f"Player {player.name!r} cannot play {self.game.name}")
        return {role: player.participate(self, role) for role, player in by_role.items()}

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def current(self) -> GameState:
        return self.history[-1].state

    @property
    def ply(self) -> int:
        """Number of transitions applied so far."""
        return len(self.history) - 1

    @property
    def is_finished(self) -> bool:
        return self.current.is_terminal

    def result(self) -> Result | None:
        return self.current.result()

    # ------------------------------------------------------------------
    # Playing
    # ------------------------------------------------------------------

    async def decisions(self, state: GameState | None = None) -> dict[str, Any] | None:
        """
        Ask the active roles' players for their actions.

        If one decision fails the others are cancelled. abort() cancels all
        of them and MatchAborted is raised here.
        """
        state = state if state is not None else self.current
        active = list(state.active_roles())
        if not active:
            return None
        tasks = [
            asyncio.ensure_future(self.players[role].decision(state.view(role), role))
            for role in active
        ]
        self._pending = asyncio.gather(*tasks)
        try:
            actions = await self._pending
        except asyncio.CancelledError:
            if self.abort_reason is None:
                raise
            raise MatchAborted(self.abort_reason) from None
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        finally:
            self._pending = None
        return dict(zip(active, actions))

    def haps(self, state: GameState | None = None) -> dict[str, Any] | None:
        """Sample every chance variable of the state with the match's random source."""
        state = state if state is not None else self.current
        return sample_haps(self.random, state)

    async def step(self) -> MatchEntry | None:
        """Play one turn. Returns the new history entry, or None if finished."""
        self._check_aborted()
        entry = self.history[-1]
        if entry.state.is_terminal:
            return None
        actions = await self.decisions(entry.state)
        self._check_aborted()
        haps = self.haps(entry.state)
        next_state = entry.state.transition(actions, haps)
        entry.actions = actions
        entry.haps = haps
        next_entry = MatchEntry(state=next_state)
        self.history.append(next_entry)
        logger.debug("Match %s ply %d: actions=%r haps=%r", self.match_id, self.ply, actions, haps)
        return next_entry

    async def run(self) -> Result:
        """
        Play until the game is finished.

        Raises:
            MatchAborted: abort() was called
            LudusError: a contract violation by the game or a player
        """
        self.state = MatchState.RUNNING
        try:
            while not self.is_finished:
                await self.step()
        except MatchAborted:
            self.state = MatchState.ABORTED
            raise
        except Exception as exc:
            self.state = MatchState.FAILED
            self.error = exc
            raise
        self.state = MatchState.FINISHED
        return self.result()

    def play(self) -> Result:
        """Synchronous version of run()."""
        return asyncio.run(self.run())

    def abort(self, reason: str = "aborted") -> None:
        """Stop the match, cancelling any pending decisions."""
        if self.state in (MatchState.FINISHED, MatchState.FAILED):
            return
        self.abort_reason = reason
        self.state = MatchState.ABORTED
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

    def _check_aborted(self) -> None:
        if self.abort_reason is not None:
            raise MatchAborted(self.abort_reason)

    def __repr__(self) -> str:
        return f"Match(id={self.match_id!r}, game={self.game.name}, ply={self.ply}, state={self.state.value})"
