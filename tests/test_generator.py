import random

import pytest

from colorme.domains import generator as gen_mod
from colorme.domains.errors import GenerationExhausted
from colorme.domains.generator import generate, generate_puzzle, replay
from colorme.domains.grid import FORWARD, Move, apply_move, is_winning_state
from colorme.search.bfs import SOLVED
from colorme.search.solver import solve


def _play(grid, path, colors):
    for m in path:
        grid = apply_move(grid, m.position, colors, m.power, None, FORWARD)
    return grid


def test_level_one_single_move_solves_to_zero():
    for seed in range(10):
        res = generate(1, seed=seed)
        assert len(res.optimal_path) == 1
        assert not is_winning_state(res.grid)
        assert _play(res.grid, res.optimal_path, res.colors) == [[0, 0, 0]] * 3


@pytest.mark.parametrize("level", [1, 2, 5, 10, 11, 15, 20, 21, 30, 45])
def test_optimal_path_round_trips(level):
    res = generate(level, rng=random.Random(level))
    assert res.optimal_path == list(reversed(res.reverse_history))
    assert len(res.reverse_history) == res.params.target_moves
    final = _play(res.grid, res.optimal_path, res.colors)
    assert is_winning_state(final)
    assert final == res.solved


def test_defaults_emit_no_special_tiles():
    res = generate(12, seed=3)
    assert res.power == frozenset()
    assert res.locked == {}
    assert res.attempts == 1
    assert all(not m.power for m in res.optimal_path)


def test_seed_and_rng_are_reproducible():
    a = generate(14, seed=99)
    b = generate(14, rng=random.Random(99))
    assert a.grid == b.grid
    assert a.optimal_path == b.optimal_path


def test_generator_leaves_solved_grid_untouched():
    res = generate(8, seed=5)
    assert res.solved == [[0] * 3 for _ in range(3)]
    assert res.grid is not res.solved


def test_zero_moves_is_already_won(rng):
    res = generate_puzzle(3, 3, 0, rng)
    assert res.optimal_path == []
    assert res.reverse_history == []
    assert res.grid == res.solved
    assert is_winning_state(res.grid)


def test_bad_parameters(rng):
    with pytest.raises(ValueError):
        generate_puzzle(3, 3, -1, rng)
    with pytest.raises(ValueError):
        generate_puzzle(3, 1, 2, rng)


def test_power_tiles_are_used_while_scrambling(rng):
    res = generate_puzzle(3, 3, 5, rng, power_tiles=2)
    assert len(res.power) == 2
    for m in res.optimal_path:
        assert m.power == (m.position in res.power)
    final, _, _ = replay(res.grid, res.optimal_path, res.colors, res.locked)
    assert is_winning_state(final)


def test_locked_tiles_are_placed_off_the_scramble():
    for seed in range(5):
        res = generate_puzzle(4, 3, 2, random.Random(seed), locked_tiles=1,
                              lock_moves=(1, 1), max_retries=50)
        assert len(res.locked) == 1
        pos, count = next(iter(res.locked.items()))
        assert count == 1
        assert pos not in {m.position for m in res.reverse_history}
        final, locks, accepted = replay(res.grid, res.optimal_path, res.colors, res.locked)
        assert is_winning_state(final)
        assert locks == {}
        assert accepted == len(res.optimal_path)


def test_single_lock_placement_succeeds():
    # one click on a 4x4 board; the lock only fails an attempt when it sits in that plus
    for seed in range(20):
        res = generate_puzzle(4, 3, 1, random.Random(seed), locked_tiles=1,
                              lock_moves=(1, 1), max_retries=50)
        assert len(res.locked) == 1
        assert len(res.optimal_path) == 1
        assert solve(res.grid, res.power, res.locked, res.colors)["g"] == 1


def test_locked_puzzles_ship_a_shortest_path():
    shortened = 0
    for seed in range(80):
        res = generate_puzzle(3, 3, 4, random.Random(seed), locked_tiles=1,
                              lock_moves=(1, 1), max_retries=50)
        best = solve(res.grid, res.power, res.locked, res.colors)
        assert best["termination"] == SOLVED
        assert len(res.optimal_path) == best["g"]
        final, _, accepted = replay(res.grid, res.optimal_path, res.colors, res.locked)
        assert is_winning_state(final)
        assert accepted == len(res.optimal_path)
        if len(res.optimal_path) < len(res.reverse_history):
            shortened += 1
    # random scrambles are often longer than needed; the solver path replaces them
    assert shortened > 0


def test_unfinished_verification_regenerates(rng):
    with pytest.raises(GenerationExhausted) as ei:
        generate_puzzle(3, 3, 3, rng, power_tiles=1, max_retries=2, max_states=0)
    assert ei.value.attempts == 2


def test_retry_cap_raises(monkeypatch, rng):
    calls = []

    def never(*args, **kwargs):
        calls.append(1)
        return None

    monkeypatch.setattr(gen_mod, "_verify", never)
    with pytest.raises(GenerationExhausted) as ei:
        generate_puzzle(3, 3, 3, rng, power_tiles=1, max_retries=3)
    assert ei.value.attempts == 3
    assert len(calls) == 3


def test_replay_refuses_locked_clicks(plus_grid):
    final, locks, accepted = replay(plus_grid, [Move(1, 1), Move(1, 1)], 3, {(1, 1): 5})
    assert accepted == 0
    assert final == plus_grid
    assert locks == {(1, 1): 5}
