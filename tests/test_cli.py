from typing import Callable, List

from cli.main import build_config, parse_args, parse_user_move, play
from engine.board import Move
from engine.game import Game, GameConfig
from engine.pieces import Side


def scripted(lines: List[str], prompts: List[str]) -> Callable[[str], str]:
    pending = list(lines)

    def read_line(prompt: str) -> str:
        prompts.append(prompt)
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read_line


def test_parse_user_move() -> None:
    assert parse_user_move("b8-b6") == Move(2, 8, 2, 6)
    assert parse_user_move("b8-b6  # opening") == Move(2, 8, 2, 6)
    assert parse_user_move("hello") is None
    assert parse_user_move("# b8-b6") is None
    assert parse_user_move("") is None


def test_build_config_from_flags() -> None:
    args = parse_args(["--white", "--ai=2", "--seed=9", "--time=1.5", "--depth", "0"])
    config = build_config(args)
    assert config.human_side is Side.WHITE
    assert config.ai_players == 2
    assert config.seed == 9
    assert config.time_limit_minutes == 1.5
    assert config.depth == 0


def test_human_commands() -> None:
    game = Game(GameConfig({"ai_players": 0}))
    output: List[str] = []
    prompts: List[str] = []
    play(game, scripted(["s", "# just a note", "b1-d3", "zz", "q"], prompts), output.append)

    assert prompts[:3] == ["black> ", "black> ", "black> "]
    assert prompts[3] == "white> "
    assert "===" in output
    assert "Next move: black" in output
    assert any("Commands:" in line for line in output)
    assert output[-1] == "  Thanks for playing!"
    assert game.board.moves_made == 1
    assert game.outcome().reason == "quit"


def test_illegal_move_is_reported_and_reprompted() -> None:
    game = Game(GameConfig({"ai_players": 0}))
    output: List[str] = []
    prompts: List[str] = []
    play(game, scripted(["b1-e6", "b1-d3"], prompts), output.append)

    assert "Invalid move" in output
    assert game.board.get_move(0) == Move(2, 1, 4, 3)


def test_machine_replies_to_human() -> None:
    game = Game(GameConfig({"ai_players": 1, "search": {"depth": 0}}))
    output: List[str] = []
    play(game, scripted(["p", "b1-d3", "q"], []), output.append)

    machine_lines = [line for line in output if line.startswith("W::")]
    assert len(machine_lines) == 1
    assert machine_lines[0] == f"W::{game.board.get_move(1)}"


def test_time_budget_exhaustion_ends_game() -> None:
    now = {"t": 0.0}

    def slow_read(prompt: str) -> str:
        now["t"] += 120.0
        return "b1-d3"

    game = Game(
        GameConfig({"ai_players": 0, "time_limit_minutes": 1}),
        now=lambda: now["t"],
        deployed=True,
    )
    output: List[str] = []
    play(game, slow_read, output.append)

    assert output == ["   You ran out of time.", "White wins."]
    assert game.board.moves_made == 0


def test_machine_stays_idle_until_deployed() -> None:
    game = Game(GameConfig({"ai_players": 1, "search": {"depth": 0}}))
    output: List[str] = []
    prompts: List[str] = []
    play(game, scripted(["b1-d3", "a2-c2", "p", "e1-e3", "q"], prompts), output.append)

    assert prompts[:4] == ["black> ", "white> ", "black> ", "black> "]
    assert game.board.get_move(1) == Move(1, 2, 3, 2)
    assert game.board.get_move(2) == Move(5, 1, 5, 3)
    assert game.board.moves_made == 4
    machine_lines = [line for line in output if line.startswith("W::")]
    assert machine_lines == [f"W::{game.board.get_move(3)}"]
    assert prompts[-1] == "black> "


def test_deploy_with_two_humans() -> None:
    game = Game(GameConfig({"ai_players": 0}))
    output: List[str] = []
    play(game, scripted(["p", "p", "q"], []), output.append)

    assert output[:2] == ["   There are two humans playing.", "   Players are already deployed."]
    assert game.deployed
