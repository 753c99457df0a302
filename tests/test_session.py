import pytest

from colorme.domains.errors import InvalidGrid
from colorme.domains.generator import GenerationResult
from colorme.domains.grid import Move, all_positions, clone_grid, uniform_grid
from colorme.domains.levels import LevelParams
from colorme.domains.session import GameSession


def make_puzzle(grid, colors=3, locked=None, path=None, power=frozenset()):
    path = path or []
    return GenerationResult(
        grid=grid, solved=uniform_grid(len(grid), 0), power=power, locked=dict(locked or {}),
        optimal_path=list(path), reverse_history=list(reversed(path)), colors=colors,
    )


@pytest.fixture
def session(plus_grid):
    puzzle = make_puzzle(clone_grid(plus_grid), locked={(0, 0): 1}, path=[Move(1, 1), Move(1, 1)])
    params = LevelParams(level=5, grid_size=3, colors=3, target_moves=2, tier="easy", max_undos=1)
    return GameSession(puzzle, params)


def test_click_applies_move_and_counts_down_locks(session):
    assert not session.click(0, 0)          # locked
    assert session.moves == 0
    assert session.click(1, 1)
    assert session.grid == [[0, 2, 0], [2, 2, 2], [0, 2, 0]]
    assert session.locked == {}
    assert session.moves == 1
    assert session.player_moves == [Move(1, 1)]
    assert session.on_optimal_path
    assert not session.won


def test_win_freezes_the_board(session):
    session.click(1, 1)
    session.click(1, 1)
    assert session.won
    assert session.grid == uniform_grid(3, 0)
    assert not session.click(0, 0)
    assert session.moves == 2


def test_out_of_bounds_click_is_ignored(session):
    assert not session.click(3, 0)
    assert not session.click(-1, 2)
    assert session.moves == 0


def test_off_path_move(session):
    session.click(0, 1)
    assert not session.on_optimal_path


def test_undo_respects_limit(session):
    session.click(1, 1)
    session.click(1, 1)
    assert session.undo()
    assert not session.won
    assert session.moves == 1
    assert session.grid == [[0, 2, 0], [2, 2, 2], [0, 2, 0]]
    assert session.undos_left == 0
    assert not session.undo()


def test_undo_restores_locks(session, plus_grid):
    session.click(1, 1)
    assert session.locked == {}
    session.undo()
    assert session.locked == {(0, 0): 1}
    assert session.grid == plus_grid
    assert session.player_moves == []


def test_undo_with_empty_history(session):
    assert not session.undo()


def test_reset(session, plus_grid):
    session.click(1, 1)
    session.click(0, 1)
    session.reset()
    assert session.grid == plus_grid
    assert session.locked == {(0, 0): 1}
    assert session.moves == 0
    assert session.undo_count == 0
    assert not session.won


def test_session_does_not_alias_puzzle_grid(session, plus_grid):
    session.click(1, 1)
    assert session.puzzle.grid == plus_grid


def test_snapshot_is_immutable(session):
    session.click(1, 1)
    snap = session.snapshot()
    assert isinstance(snap.grid, tuple) and isinstance(snap.grid[0], tuple)
    assert snap.moves == 1
    assert snap.player_moves == (Move(1, 1),)


def test_hint_and_solvability(session):
    hint = session.hint()
    assert isinstance(hint, Move)
    assert hint.position != (0, 0)
    assert session.check_solvable() is True


def test_hint_budget_exhaustion(session):
    assert session.check_solvable(max_states=1) is None


def test_stranded_session():
    locked = {p: 3 for p in all_positions(2)}
    s = GameSession(make_puzzle([[0, 1], [1, 0]], colors=2, locked=locked))
    assert s.check_solvable() is False
    assert s.hint() is None
    assert not s.click(0, 0)


def test_invalid_puzzle_grid():
    with pytest.raises(InvalidGrid):
        GameSession(make_puzzle([[0, 1], [1]], colors=2))


def test_start_and_follow_optimal_path():
    s = GameSession.start(4, seed=11)
    assert s.level == 4
    assert s.max_undos == -1
    assert s.params.target_moves == 4
    for m in s.optimal_path:
        if s.won:
            break
        assert s.click(m.row, m.col)
    assert s.won


def test_unlimited_undo_on_easy_levels():
    s = GameSession.start(2, seed=0)
    for m in s.optimal_path[:1]:
        s.click(m.row, m.col)
    assert s.undos_left is None
    assert s.undo()


def test_next_level():
    s = GameSession.start(10, seed=2)
    nxt = s.next_level(seed=3)
    assert nxt.level == 11
    assert nxt.params.tier == "medium"
    assert nxt.size == 4
