"""Tests for the computer opponent."""

import pytest
from random import Random

from core.game import Difficulty, EventType, GameState, MemoryGame, RoundConfig
from core.game.scheduler import ManualScheduler
from core.strategy import ComputerPlayer


HUMAN, COMPUTER = 0, 1


def vs_config(difficulty, num_pairs=6):
    return RoundConfig.versus_computer("Ann", difficulty=difficulty, num_pairs=num_pairs)


def human_mismatch(game, scheduler, pairs_of, symbols=(0, 1)):
    """Have the human miss with one card from each of two symbols."""
    board = pairs_of(game)
    assert game.tap(board[symbols[0]][0])
    assert game.tap(board[symbols[1]][0])
    scheduler.advance(game.resolve_delay)


def play_out(game, scheduler, human_rng, max_steps=5000):
    """Drive a vs-computer round to the end with a random human."""
    for _ in range(max_steps):
        if game.is_over:
            return
        human_can_tap = not game.is_computer_turn and game.state in (
            GameState.AWAITING_FIRST,
            GameState.AWAITING_SECOND,
        )
        if human_can_tap:
            choices = [c.id for c in game.available_cards]
            assert game.tap(human_rng.choice(choices))
        else:
            scheduler.advance(0.5)
    pytest.fail("round did not finish")


class FlipAudit:
    """Checks every computer attempt against what had been revealed."""

    def __init__(self, game):
        self.game = game
        self.seen: dict[int, int] = {}
        self.attempt: list[tuple[int, int]] = []
        self.missed_known_pair = 0
        self.missed_partner = 0
        self.computer_attempts = 0
        game.subscribe(self.on_flip, EventType.CARD_FLIPPED)

    def _playable_seen(self, current=None):
        return {
            cid: sym
            for cid, sym in self.seen.items()
            if cid == current or self.game.card(cid).is_available
        }

    def on_flip(self, event):
        card_id = event.data["card_id"]
        symbol = event.data["symbol_index"]

        if event.data["player_index"] == COMPUTER:
            if not self.attempt:
                playable = self._playable_seen(current=card_id)
                symbols = list(playable.values())
                known = {s for s in symbols if symbols.count(s) == 2}
                if known and symbol not in known:
                    self.missed_known_pair += 1
            else:
                first_id, first_symbol = self.attempt[0]
                playable = self._playable_seen()
                partner_seen = any(
                    s == first_symbol and cid != first_id for cid, s in playable.items()
                )
                if partner_seen and symbol != first_symbol:
                    self.missed_partner += 1

            self.attempt.append((card_id, symbol))
            if len(self.attempt) == 2:
                self.computer_attempts += 1
                self.attempt = []

        self.seen[card_id] = symbol


class TestComputerTurns:
    """Tests for when the computer moves."""

    def test_waits_for_its_turn(self, game, scheduler, computer):
        """Test the computer does nothing on the human's turn."""
        game.start(vs_config(Difficulty.HARD))
        scheduler.advance(30)

        assert not any(card.is_flipped for card in game.cards)
        assert not computer.in_turn

    def test_moves_after_human_misses(self, game, scheduler, computer, pairs_of):
        """Test the computer takes a turn when handed the move."""
        game.start(vs_config(Difficulty.HARD))
        human_mismatch(game, scheduler, pairs_of)

        assert game.is_computer_turn
        assert computer.in_turn

        scheduler.advance(computer.think_delay)
        assert game.state == GameState.AWAITING_SECOND
        scheduler.advance(computer.think_delay)
        assert game.state == GameState.RESOLVING
        assert not computer.in_turn

    def test_inactive_without_computer_seat(self, game, scheduler, computer, pairs_of):
        """Test the opponent ignores multiplayer rounds."""
        game.start(RoundConfig.multiplayer(["Ann", "Bob"], num_pairs=4))
        human_mismatch(game, scheduler, pairs_of)
        scheduler.advance(30)

        assert not computer.active
        assert len(computer.memory) == 0
        assert game.current_player_index == 1
        assert game.state == GameState.AWAITING_FIRST

    def test_restart_drops_pending_turn(self, game, scheduler, computer, pairs_of):
        """Test a restart cancels a computer turn in flight."""
        game.start(vs_config(Difficulty.HARD))
        human_mismatch(game, scheduler, pairs_of)
        assert computer.in_turn

        game.start(vs_config(Difficulty.HARD))
        scheduler.advance(30)

        assert not computer.in_turn
        assert not any(card.is_flipped for card in game.cards)
        assert not game.is_computer_turn

        # The next handover still works
        human_mismatch(game, scheduler, pairs_of)
        assert computer.in_turn

    def test_end_round_drops_pending_turn(self, game, scheduler, computer, pairs_of):
        """Test ending the round cancels a computer turn in flight."""
        game.start(vs_config(Difficulty.HARD))
        human_mismatch(game, scheduler, pairs_of)

        game.end_round()
        scheduler.advance(30)

        assert game.state == GameState.SETUP
        assert not computer.in_turn

    def test_detach(self, game, scheduler, computer, pairs_of):
        """Test a detached opponent stops playing."""
        computer.detach()
        game.start(vs_config(Difficulty.HARD))
        human_mismatch(game, scheduler, pairs_of)
        scheduler.advance(30)

        assert game.is_computer_turn
        assert game.state == GameState.AWAITING_FIRST

    def test_difficulty_follows_round(self, game, computer):
        """Test each round sets the recall level."""
        game.start(vs_config(Difficulty.EASY))
        assert computer.memory.difficulty == Difficulty.EASY
        game.start(vs_config(Difficulty.HARD))
        assert computer.memory.difficulty == Difficulty.HARD


class TestComputerPlanning:
    """Tests for card selection."""

    def test_known_pair_taken_first(self, game, computer, pairs_of):
        """Test a remembered pair is chosen over a guess."""
        game.start(vs_config(Difficulty.HARD))
        first, second = pairs_of(game)[4]
        computer.memory.observe(4, first)
        computer.memory.observe(4, second)

        assert computer.plan_first() == tuple(sorted((first, second)))

    def test_guess_when_nothing_known(self, game, computer):
        """Test a random available card and no planned second."""
        game.start(vs_config(Difficulty.HARD))
        first_id, second_id = computer.plan_first()

        assert second_id is None
        assert game.card(first_id).is_available

    def test_second_prefers_partner(self, game, computer, pairs_of):
        """Test the remembered twin is picked after a lucky first flip."""
        game.start(vs_config(Difficulty.HARD))
        first, second = pairs_of(game)[2]
        computer.memory.observe(2, second)

        assert computer.plan_second(first) == second

    def test_second_guess_excludes_first(self, game, computer):
        """Test a guessed second card is never the first card."""
        game.start(vs_config(Difficulty.EASY, num_pairs=2))
        first_id = game.cards[0].id
        for _ in range(20):
            assert computer.plan_second(first_id) != first_id

    def test_seeded_pair_played_through(self, game, scheduler, computer, pairs_of):
        """Test the computer flips and scores a pair it remembers."""
        game.start(vs_config(Difficulty.HARD))
        board = pairs_of(game)
        computer.memory.observe(0, board[0][0])
        computer.memory.observe(0, board[0][1])

        human_mismatch(game, scheduler, pairs_of, symbols=(1, 2))
        scheduler.advance(computer.think_delay * 2 + game.resolve_delay)

        assert game.players[COMPUTER].score >= 1
        assert 0 in game.players[COMPUTER].found_symbols
        assert computer.known_pair_turns >= 1


class TestComputerDifficulty:
    """Tests for recall levels over whole rounds."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_hard_never_misses_a_known_card(self, game, scheduler, computer, seed):
        """Test perfect recall always plays what it has seen."""
        game.start(vs_config(Difficulty.HARD, num_pairs=8))
        audit = FlipAudit(game)

        play_out(game, scheduler, Random(seed))

        assert game.is_over
        assert audit.computer_attempts > 0
        assert audit.missed_known_pair == 0
        assert audit.missed_partner == 0

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_easy_plays_blind(self, game, scheduler, computer, seed):
        """Test no-recall never stores a sighting or plays a known pair."""
        game.start(vs_config(Difficulty.EASY, num_pairs=8))
        audit = FlipAudit(game)
        memory_sizes = []
        game.subscribe(
            lambda event: memory_sizes.append(len(computer.memory)), EventType.CARD_FLIPPED
        )

        play_out(game, scheduler, Random(seed))

        assert game.is_over
        assert memory_sizes and max(memory_sizes) == 0
        assert audit.computer_attempts > 0
        assert computer.known_pair_turns == 0

    def test_medium_round_finishes(self, game, scheduler, computer, analytics):
        """Test a partial-recall round completes and is reported."""
        game.start(vs_config(Difficulty.MEDIUM, num_pairs=10))

        play_out(game, scheduler, Random(11))

        assert game.is_over
        assert sum(p.score for p in game.players) == 10
        assert len(analytics.rounds) == 1
        assert analytics.rounds[0].player_names == ["Ann", "Computer"]

    def test_hard_beats_easy_on_average(self):
        """Test better recall wins more pairs against the same human."""
        def computer_score(difficulty, seed):
            sched = ManualScheduler()
            game = MemoryGame(scheduler=sched, rng=Random(seed))
            ComputerPlayer(game, rng=Random(seed + 1000), think_delay=0.5)
            game.start(vs_config(difficulty, num_pairs=10))
            play_out(game, sched, Random(seed + 2000))
            return game.players[COMPUTER].score

        seeds = range(20)
        hard = sum(computer_score(Difficulty.HARD, s) for s in seeds)
        easy = sum(computer_score(Difficulty.EASY, s) for s in seeds)
        assert hard > easy
