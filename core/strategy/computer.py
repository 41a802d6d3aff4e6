"""Computer opponent for vs-computer rounds."""

import logging
from random import Random

from core.game.engine import MemoryGame
from core.game.events import EventType, GameEvent
from core.game.state import Difficulty, GameState
from core.strategy.memory import CardMemory

logger = logging.getLogger(__name__)

DEFAULT_THINK_DELAY = 0.6


class ComputerPlayer:
    """
    Plays the computer seat through the engine's public surface.

    Watches CARD_FLIPPED events (its own flips and the human's) to build an
    imperfect memory, and taps cards exactly as a human would. A turn is
    think, flip first, think, flip second; the engine then resolves the pair
    as usual. Only one turn is ever in flight, and every step is tagged
    with the engine generation so a restarted round drops it.
    """

    def __init__(
        self,
        game: MemoryGame,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: Random | None = None,
        think_delay: float = DEFAULT_THINK_DELAY,
    ) -> None:
        """
        Attach a computer opponent to a game.

        Args:
            game: Engine to observe and play
            difficulty: Recall level until a round config says otherwise
            rng: Random number generator for card picks and recall
            think_delay: Pause before each flip
        """
        self.game = game
        self.think_delay = think_delay
        self._rng = rng or Random()
        self.memory = CardMemory(difficulty, rng=self._rng)
        self.known_pair_turns = 0
        self._in_turn = False

        self._subscriptions = [
            (EventType.ROUND_STARTED, self._on_round_started),
            (EventType.ROUND_ENDED, self._on_round_ended),
            (EventType.CARD_FLIPPED, self._on_card_flipped),
            (EventType.MATCH_FOUND, self._on_match_found),
            (EventType.TURN_CHANGED, self._on_turn_changed),
        ]
        for event_type, handler in self._subscriptions:
            game.subscribe(handler, event_type)

    def detach(self) -> None:
        """Stop observing the game."""
        for event_type, handler in self._subscriptions:
            self.game.events.unsubscribe(handler, event_type)

    @property
    def active(self) -> bool:
        """Check if the current round has a computer seat."""
        return self.game.config is not None and self.game.config.has_computer

    @property
    def in_turn(self) -> bool:
        """Check if a computer turn is in flight."""
        return self._in_turn

    def can_act(self) -> bool:
        """Check if the computer holds the turn with no cards face-up."""
        return (
            self.active
            and self.game.is_computer_turn
            and self.game.state == GameState.AWAITING_FIRST
        )

    # Selection

    def _available_ids(self) -> set[int]:
        return {card.id for card in self.game.available_cards}

    def plan_first(self) -> tuple[int, int | None] | None:
        """
        Choose the first card, and the second too when a pair is known.

        Returns:
            (first_id, second_id or None), or None if fewer than two cards remain
        """
        available = self._available_ids()
        if len(available) < 2:
            return None

        known = self.memory.known_pair(available)
        if known is not None:
            return known

        return self._rng.choice(sorted(available)), None

    def plan_second(self, first_id: int) -> int | None:
        """
        Choose the second card once the first is face-up.

        Prefers a remembered partner for the revealed symbol, otherwise a
        uniformly random card from the rest of the board.
        """
        first = self.game.card(first_id)
        available = self._available_ids() - {first_id}
        if first is None or not available:
            return None

        partner = self.memory.partner(first.symbol_index, first_id, available)
        if partner is not None:
            return partner
        return self._rng.choice(sorted(available))

    # Turn sequence

    def take_turn(self) -> bool:
        """
        Start a computer turn if it is the computer's move.

        Returns:
            True if a turn was scheduled
        """
        if self._in_turn or not self.can_act():
            return False

        self._in_turn = True
        generation = self.game.generation
        self.game.scheduler.call_later(
            self.think_delay, lambda: self._flip_first(generation)
        )
        return True

    def _flip_first(self, generation: int) -> None:
        if generation != self.game.generation:
            return

        plan = self.plan_first() if self.can_act() else None
        if plan is None:
            logger.debug("Computer declined to move")
            self._in_turn = False
            return

        first_id, second_id = plan
        if second_id is not None:
            self.known_pair_turns += 1

        if not self.game.tap(first_id, by_computer=True):
            self._in_turn = False
            return

        self.game.scheduler.call_later(
            self.think_delay, lambda: self._flip_second(generation, first_id, second_id)
        )

    def _flip_second(self, generation: int, first_id: int, second_id: int | None) -> None:
        if generation != self.game.generation:
            return

        self._in_turn = False
        if second_id is not None and self.game.tap(second_id, by_computer=True):
            return

        second_id = self.plan_second(first_id)
        if second_id is not None:
            self.game.tap(second_id, by_computer=True)

    # Event handlers

    def _on_round_started(self, event: GameEvent) -> None:
        self.memory.clear()
        self._in_turn = False
        if self.active:
            self.memory.difficulty = self.game.config.difficulty  # type: ignore[union-attr]
        self.take_turn()

    def _on_round_ended(self, event: GameEvent) -> None:
        self.memory.clear()
        self._in_turn = False

    def _on_card_flipped(self, event: GameEvent) -> None:
        if self.active:
            self.memory.observe(event.data["symbol_index"], event.data["card_id"])

    def _on_match_found(self, event: GameEvent) -> None:
        self.memory.forget_symbol(event.data["symbol_index"])
        self.take_turn()

    def _on_turn_changed(self, event: GameEvent) -> None:
        self.take_turn()
