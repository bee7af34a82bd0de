import json

import numpy as np
import pytest

from engine.board import IllegalMoveError, Move
from engine.game import Game, GameConfig, PlayerKind, TurnClock
from engine.pieces import Side


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_config_defaults() -> None:
    config = GameConfig({})
    assert config.seed == 4
    assert config.ai_players == 1
    assert config.human_side is Side.BLACK
    assert config.depth == 1
    assert config.cutoff == 9
    assert config.controllers() == {Side.BLACK: PlayerKind.HUMAN, Side.WHITE: PlayerKind.MACHINE}


def test_config_from_json(tmp_path) -> None:
    path = tmp_path / "game.json"
    path.write_text(
        json.dumps(
            {
                "seed": 17,
                "time_limit_minutes": 2.5,
                "ai_players": 2,
                "search": {"depth": 2, "cutoff": 4, "strategy": "random"},
            }
        ),
        encoding="utf-8",
    )
    config = GameConfig.from_json(path)
    assert config.seed == 17
    assert config.time_limit_minutes == 2.5
    assert config.depth == 2
    assert config.cutoff == 4
    assert config.strategy == "random"
    assert set(config.controllers().values()) == {PlayerKind.MACHINE}


def test_config_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        GameConfig({"ai_players": 3})
    with pytest.raises(ValueError):
        GameConfig({"search": {"strategy": "oracle"}})


def test_turn_clock_accumulates() -> None:
    fake = FakeClock()
    clock = TurnClock(10.0, now=fake)
    clock.start()
    fake.now = 4.0
    assert clock.stop() == 4.0
    clock.start()
    fake.now = 7.0
    assert clock.elapsed == 7.0
    clock.stop()
    assert clock.remaining == 3.0
    assert not clock.expired
    with pytest.raises(RuntimeError):
        clock.stop()


def test_same_seed_reproduces_machine_play() -> None:
    def transcript(seed: int):
        game = Game(GameConfig({"seed": seed, "ai_players": 2, "search": {"depth": 0}}))
        for _ in range(12):
            if game.is_over():
                break
            game.play_machine_turn()
        return game.transcript()

    first = transcript(21)
    assert first == transcript(21)
    assert len(first) > 0


def test_random_source_is_seeded() -> None:
    first = Game(GameConfig({"seed": 9})).random_source.random()
    second = Game(GameConfig({"seed": 9})).random_source.random()
    assert first == second


def test_machine_turn_commits_one_legal_move() -> None:
    game = Game(GameConfig({"ai_players": 2, "search": {"depth": 1}}))
    legal = game.board.legal_moves()
    move = game.play_machine_turn()
    assert move in legal
    assert game.board.moves_made == 1
    assert game.board.get_move(0) == move
    assert game.board.turn is Side.WHITE


def test_illegal_submission_is_rejected_without_change() -> None:
    game = Game(GameConfig({"ai_players": 0}))
    before = game.board.snapshot()
    with pytest.raises(IllegalMoveError):
        game.submit_move(Move(2, 1, 5, 6))
    assert np.array_equal(game.board.snapshot(), before)
    assert not game.is_over()


def test_connecting_move_wins(board_with) -> None:
    board = board_with(black=[(1, 1), (2, 2), (5, 2)], white=[(8, 8), (8, 5)])
    game = Game(GameConfig({"ai_players": 0}), board=board)
    assert not game.is_over()
    game.submit_move(Move(5, 2, 3, 2))
    outcome = game.outcome()
    assert outcome is not None
    assert outcome.winner is Side.BLACK
    assert outcome.reason == "connected"


def test_timeout_awards_opponent() -> None:
    fake = FakeClock()
    game = Game(GameConfig({"ai_players": 0, "time_limit_minutes": 1}), now=fake, deployed=True)
    with game.thinking(Side.BLACK):
        fake.now = 61.0
    outcome = game.outcome()
    assert outcome is not None
    assert outcome.winner is Side.WHITE
    assert outcome.reason == "timeout"


def test_machine_without_moves_loses(board_with) -> None:
    board = board_with(
        black=[(1, 1), (8, 8)],
        white=[(2, 1), (1, 2), (2, 2), (7, 8), (8, 7), (7, 7)],
    )
    game = Game(GameConfig({"ai_players": 2}), board=board)
    assert game.play_machine_turn() is None
    outcome = game.outcome()
    assert outcome.winner is Side.WHITE
    assert outcome.reason == "no_legal_moves"
    assert board.moves_made == 0


def test_quit_ends_game_without_winner() -> None:
    game = Game(GameConfig({"ai_players": 0}))
    game.quit()
    assert game.outcome().winner is None
    assert game.outcome().reason == "quit"
    with pytest.raises(RuntimeError):
        game.submit_move(Move(2, 1, 4, 3))


def test_sides_are_entered_by_hand_until_deploy() -> None:
    fake = FakeClock()
    game = Game(GameConfig({"ai_players": 1, "time_limit_minutes": 1}), now=fake)
    assert not game.deployed
    assert game.controller(Side.WHITE) is PlayerKind.HUMAN

    with game.thinking(Side.BLACK):
        fake.now = 600.0
    assert not game.is_over()
    assert game.remaining_seconds(Side.BLACK) == 60.0

    assert game.deploy()
    assert game.deployed
    assert game.controller(Side.BLACK) is PlayerKind.HUMAN
    assert game.controller(Side.WHITE) is PlayerKind.MACHINE
    assert not game.deploy()

    with game.thinking(Side.BLACK):
        fake.now = 630.0
    assert game.remaining_seconds(Side.BLACK) == 30.0
