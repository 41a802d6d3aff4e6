"""Memory-match game engine with state machine."""

import logging
import time
from dataclasses import dataclass
from random import Random
from typing import Any, Callable

from transitions import Machine

from core.analytics import AnalyticsSink, NullAnalytics, RoundSummary
from core.cards import Card, CardView, Deck
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.results import medal_indices, rank_players, solo_commentary, winners
from core.game.rules import MAX_CONSECUTIVE_MATCHES, RoundConfig
from core.game.scheduler import ImmediateScheduler, Scheduler
from core.game.state import GameMode, GameState
from core.player import Player

logger = logging.getLogger(__name__)

DEFAULT_RESOLVE_DELAY = 1.0


@dataclass(frozen=True)
class PendingResolution:
    """Two face-up cards waiting for the scheduled resolve."""

    generation: int
    sequence: int
    first_id: int
    second_id: int


@dataclass(frozen=True)
class PlayerView:
    """Read-only player state for the presentation layer."""

    name: str
    score: int
    found_symbols: tuple[int, ...]
    found_glyphs: tuple[str, ...]
    is_computer: bool


@dataclass(frozen=True)
class GameSnapshot:
    """Snapshot of game state for rendering."""

    state: GameState
    generation: int
    mode: GameMode | None
    theme: str | None
    num_pairs: int
    cards: tuple[CardView, ...]
    players: tuple[PlayerView, ...]
    current_player_index: int
    matches_this_turn: int
    attempts: int
    is_resolving: bool
    is_over: bool
    is_computer_turn: bool


class MemoryGame:
    """
    Memory-match game engine using a state machine.

    This is the core game logic, completely UI-agnostic. Intents come in
    through start/tap/end_round/reset; observers learn what happened through
    events and snapshots. The pair-resolution pause and any other delay go
    through the injected Scheduler, tagged with the round generation so a
    timer from an old round can never touch a new one.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_round", "source": "*", "dest": "awaiting_first"},
        {"trigger": "flip_first", "source": "awaiting_first", "dest": "awaiting_second"},
        {"trigger": "flip_second", "source": "awaiting_second", "dest": "resolving"},
        {"trigger": "pair_resolved", "source": "resolving", "dest": "awaiting_first"},
        {"trigger": "all_matched", "source": "resolving", "dest": "round_over"},
        {"trigger": "abandon_round", "source": "*", "dest": "setup"},
    ]

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        analytics: AnalyticsSink | None = None,
        rng: Random | None = None,
        resolve_delay: float = DEFAULT_RESOLVE_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize a new game engine with no round in progress.

        Args:
            scheduler: Runs delayed continuations (defaults to immediate)
            analytics: Receives a summary of every completed round
            rng: Random number generator for reproducible shuffles
            resolve_delay: Pause between the second flip and resolution
            clock: Monotonic clock used for round duration
        """
        self.scheduler = scheduler or ImmediateScheduler()
        self.analytics = analytics or NullAnalytics()
        self.resolve_delay = resolve_delay
        self._rng = rng or Random()
        self._clock = clock

        self.events = EventEmitter()
        self.config: RoundConfig | None = None
        self.players: list[Player] = []
        self.cards: list[Card] = []
        self._cards_by_id: dict[int, Card] = {}

        self.current_player_index = 0
        self.flipped: list[Card] = []
        self.matches_this_turn = 0
        self.attempts = 0
        self.generation = 0
        self.pending: PendingResolution | None = None
        self._pending_seq = 0

        self._started_at: float | None = None
        self._completion_reported = False

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="setup",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Intents

    def start(self, config: RoundConfig | dict[str, Any]) -> None:
        """
        Start a new round, discarding any round in progress.

        Args:
            config: Round setup, or a mapping accepted by RoundConfig.from_dict

        Raises:
            InvalidConfiguration: If the setup is out of range for its mode
        """
        if not isinstance(config, RoundConfig):
            config = RoundConfig.from_dict(config)

        self.config = config
        self.generation += 1

        self.players = [
            Player.computer() if config.has_computer and i == 1 else Player(name=name)
            for i, name in enumerate(config.players)
        ]

        deck = Deck(config.num_pairs, rng=self._rng)
        deck.shuffle()
        self.cards = deck.cards
        self._cards_by_id = {card.id: card for card in self.cards}

        self._clear_turn_state()
        self._started_at = self._clock()
        self._completion_reported = False

        self.begin_round()

        logger.info(
            "Round %d started: %s, %d pairs, players=%s",
            self.generation,
            config.mode.value,
            config.num_pairs,
            list(config.players),
        )
        self.events.emit_new(
            EventType.ROUND_STARTED,
            generation=self.generation,
            mode=config.mode.value,
            num_pairs=config.num_pairs,
            players=list(config.players),
            theme=config.theme.value,
        )

    def reset(self) -> bool:
        """Restart the current setup with a fresh shuffle."""
        if self.config is None:
            return False
        self.start(self.config)
        return True

    def end_round(self) -> bool:
        """
        Abandon the board and return to setup.

        Scores are cleared and in-flight continuations are invalidated.
        Completed-round analytics are not affected.
        """
        if self.state == GameState.SETUP:
            return False

        self.generation += 1
        self.cards = []
        self._cards_by_id = {}
        self._clear_turn_state()
        for player in self.players:
            player.reset()

        self.abandon_round()
        logger.info("Round ended by request")
        self.events.emit_new(EventType.ROUND_ENDED, generation=self.generation)
        return True

    def tap(self, card_id: int, by_computer: bool = False) -> bool:
        """
        Turn a card face-up.

        Invalid taps are ignored silently: no round running, a resolution
        already pending, an unknown/flipped/matched card, or a tap from the
        wrong side on a computer-opponent board.

        Args:
            card_id: Id of the card to flip
            by_computer: True when the computer opponent is tapping

        Returns:
            True if the card was flipped
        """
        if self.state not in (GameState.AWAITING_FIRST, GameState.AWAITING_SECOND):
            logger.debug("Ignored tap on %s in state %s", card_id, self.state.name)
            return False

        card = self._cards_by_id.get(card_id)
        if card is None or not card.is_available:
            logger.debug("Ignored tap on unavailable card %s", card_id)
            return False

        if by_computer != self.is_computer_turn:
            logger.debug("Ignored out-of-turn tap on %s", card_id)
            return False

        card.is_flipped = True
        self.flipped.append(card)

        if len(self.flipped) == 1:
            self.flip_first()
            self._emit_flip(card)
            return True

        self.flip_second()
        first, second = self.flipped
        self._pending_seq += 1
        pending = PendingResolution(self.generation, self._pending_seq, first.id, second.id)
        self.pending = pending
        self._emit_flip(card)
        self.events.emit_new(
            EventType.PAIR_PENDING,
            first_id=first.id,
            second_id=second.id,
            is_match=first.symbol_index == second.symbol_index,
        )

        self.scheduler.call_later(
            self.resolve_delay,
            lambda: self.resolve_pending(pending.generation, pending.sequence),
        )
        return True

    def resolve_pending(
        self, generation: int | None = None, sequence: int | None = None
    ) -> bool:
        """
        Resolve the two face-up cards.

        Called by the scheduled continuation with the generation and pair
        sequence it was created for; a stale tag or an empty window does
        nothing. Hosts may call it untagged to skip the pause.

        Returns:
            True if a pair was resolved
        """
        pending = self.pending
        if pending is None:
            return False
        if generation is not None and generation != pending.generation:
            logger.debug("Dropped stale resolution from round %d", generation)
            return False
        if sequence is not None and sequence != pending.sequence:
            logger.debug("Dropped stale resolution for pair %d", sequence)
            return False

        first = self._cards_by_id[pending.first_id]
        second = self._cards_by_id[pending.second_id]
        self.pending = None
        self.flipped = []
        first.is_flipped = False
        second.is_flipped = False
        self.attempts += 1

        player_index = self.current_player_index
        is_match = first.symbol_index == second.symbol_index
        rotated = False

        if is_match:
            first.is_matched = True
            second.is_matched = True
            self.players[player_index].claim(first.symbol_index)
            self.matches_this_turn += 1
            if self.matches_this_turn >= MAX_CONSECUTIVE_MATCHES:
                rotated = self._rotate_turn()

            if all(card.is_matched for card in self.cards):
                self.all_matched()
            else:
                self.pair_resolved()

            self.events.emit_new(
                EventType.MATCH_FOUND,
                player_index=player_index,
                symbol_index=first.symbol_index,
                card_ids=[first.id, second.id],
                score=self.players[player_index].score,
            )
        else:
            rotated = self._rotate_turn()
            self.pair_resolved()
            self.events.emit_new(
                EventType.MISMATCH,
                player_index=player_index,
                card_ids=[first.id, second.id],
            )

        if rotated:
            self.events.emit_new(
                EventType.TURN_CHANGED,
                player_index=self.current_player_index,
                player=self.current_player.name,
            )

        if self.is_over:
            self._report_completion()

        return True

    # Internals

    def _clear_turn_state(self) -> None:
        """Reset turn, flip and resolution state."""
        self.current_player_index = 0
        self.flipped = []
        self.pending = None
        self.matches_this_turn = 0
        self.attempts = 0

    def _rotate_turn(self) -> bool:
        """Pass the turn to the next seat. Solo play never rotates."""
        self.matches_this_turn = 0
        if len(self.players) <= 1:
            return False
        self.current_player_index = (self.current_player_index + 1) % len(self.players)
        return True

    def _emit_flip(self, card: Card) -> None:
        self.events.emit_new(
            EventType.CARD_FLIPPED,
            card_id=card.id,
            symbol_index=card.symbol_index,
            player_index=self.current_player_index,
        )

    def _report_completion(self) -> None:
        """Emit the completion event and notify analytics, once per round."""
        if self._completion_reported:
            return
        self._completion_reported = True

        summary = self.summary()
        logger.info(
            "Round %d complete in %ds, winners=%s",
            self.generation,
            summary.duration_seconds,
            summary.winner_names,
        )
        self.events.emit_new(
            EventType.ROUND_COMPLETE,
            winners=summary.winner_names,
            scores=summary.scores,
            duration_seconds=summary.duration_seconds,
            attempts=self.attempts,
        )

        try:
            self.analytics.log_completed_round(summary)
        except Exception:
            logger.warning("Analytics sink failed to log round", exc_info=True)

    # Observations

    @property
    def is_over(self) -> bool:
        """Check if every pair has been matched."""
        return self.state == GameState.ROUND_OVER

    @property
    def is_resolving(self) -> bool:
        """Check if two cards are waiting for resolution."""
        return self.pending is not None

    @property
    def current_player(self) -> Player | None:
        """Get the player whose turn it is."""
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def is_computer_turn(self) -> bool:
        """Check if the computer opponent holds the turn."""
        player = self.current_player
        return player is not None and player.is_computer

    @property
    def available_cards(self) -> list[CardView]:
        """Cards that can still be turned over, in board order."""
        return [card.view() for card in self.cards if card.is_available]

    def card(self, card_id: int) -> CardView | None:
        """Look up a card by id."""
        card = self._cards_by_id.get(card_id)
        return card.view() if card else None

    @property
    def ranked_players(self) -> list[Player]:
        """Players by score, highest first."""
        return rank_players(self.players)

    @property
    def winners(self) -> list[Player]:
        """Every player sharing the top score."""
        return winners(self.players)

    @property
    def medals(self) -> list[tuple[Player, int]]:
        """Ranked players paired with their medal index."""
        return list(zip(self.ranked_players, medal_indices(self.players)))

    @property
    def commentary(self) -> str | None:
        """End-of-round remark for finished solo rounds."""
        if self.config is None or self.config.mode != GameMode.SOLO or not self.is_over:
            return None
        return solo_commentary(self.attempts, self.config.num_pairs)

    def glyphs_for(self, player: Player) -> list[str]:
        """Theme faces of the pairs a player found."""
        if self.config is None:
            return []
        return [self.config.theme.glyph(i) for i in player.found_symbols]

    def summary(self) -> RoundSummary:
        """Summarize the round for analytics."""
        if self.config is None:
            raise RuntimeError("No round has been started")
        duration = 0
        if self._started_at is not None:
            duration = int(self._clock() - self._started_at)
        return RoundSummary(
            player_names=[p.name for p in self.players],
            scores=[p.score for p in self.players],
            winner_names=[p.name for p in self.winners],
            theme=self.config.theme.value,
            num_pairs=self.config.num_pairs,
            player_count=len(self.players),
            duration_seconds=duration,
        )

    def snapshot(self) -> GameSnapshot:
        """Capture the current state for rendering."""
        return GameSnapshot(
            state=self.state,
            generation=self.generation,
            mode=self.config.mode if self.config else None,
            theme=self.config.theme.value if self.config else None,
            num_pairs=self.config.num_pairs if self.config else 0,
            cards=tuple(card.view() for card in self.cards),
            players=tuple(
                PlayerView(
                    name=p.name,
                    score=p.score,
                    found_symbols=tuple(p.found_symbols),
                    found_glyphs=tuple(self.glyphs_for(p)),
                    is_computer=p.is_computer,
                )
                for p in self.players
            ),
            current_player_index=self.current_player_index,
            matches_this_turn=self.matches_this_turn,
            attempts=self.attempts,
            is_resolving=self.is_resolving,
            is_over=self.is_over,
            is_computer_turn=self.is_computer_turn,
        )
