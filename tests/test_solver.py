# CubeSolve, copyright 2021 Zach Wegner
#
# This file is part of CubeSolve.
#
# CubeSolve is free software: you can redistribute it and/or modify it under the
# terms of the GNU Affero General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option) any
# later version.
#
# CubeSolve is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR
# A PARTICULAR PURPOSE.  See the GNU Affero General Public License for more
# details.
#
# You should have received a copy of the GNU Affero General Public License
# along with CubeSolve.  If not, see <https://www.gnu.org/licenses/>.

import time

import pytest

import config
import facelets
import solver
from facelets import CubeState, Move, apply_move, apply_moves

FACE_ORDER = 'UDRLFB'

def check_solution(state, moves):
    assert apply_moves(state, moves).is_solved()
    assert len(moves) <= config.MAX_SOLUTION_LENGTH
    for [a, b] in zip(moves, moves[1:]):
        assert a.face != b.face
        # Moves on opposite faces come in one order only (D U, never U D)
        if FACE_ORDER.index(a.face) >> 1 == FACE_ORDER.index(b.face) >> 1:
            assert FACE_ORDER.index(a.face) > FACE_ORDER.index(b.face)

def test_solved(solved):
    assert solver.solve(solved) == []

@pytest.mark.parametrize('move', facelets.ALL_MOVES, ids=str)
def test_single_move(solved, move):
    state = apply_move(solved, move)
    assert solver.solve(state) == [move.inverse()]

def test_inverse_r(solved):
    assert solver.solve(apply_move(solved, Move('R', 3))) == [Move('R', 1)]
    assert solver.solve(apply_move(solved, Move('R', 1))) == [Move('R', 3)]

@pytest.mark.parametrize('length', [3, 8, 20])
def test_random_move_scrambles(solved, rng, length):
    for _ in range(3):
        scramble = solver.gen_random_move_scramble(length, rng=rng)
        state = apply_moves(solved, ' '.join(scramble))
        moves = solver.solve(state, max_probes=5, time_limit=1)
        check_solution(state, moves)

def test_random_state(rng):
    for _ in range(3):
        state = facelets.from_cube(solver.random_cube(rng))
        moves = solver.solve(state, max_probes=5, time_limit=1)
        check_solution(state, moves)

def test_other_symbols(solved):
    table = str.maketrans('WRGYOB', 'UDLRFB')
    state = apply_moves(solved, "R U R' F2 D' L B2")
    state = CubeState.from_string(state.to_string().translate(table))
    check_solution(state, solver.solve(state, max_probes=5))

def test_random_state_scramble(solved, rng):
    scramble = solver.gen_random_state_scramble(rng=rng, max_probes=1)
    state = apply_moves(solved, ' '.join(scramble))
    assert not state.is_solved()
    check_solution(state, solver.solve(state, max_probes=1))

def test_deadline(solved, rng):
    state = facelets.from_cube(solver.random_cube(rng))
    with pytest.raises(solver.SolveTimeout):
        solver.solve(state, deadline=time.time() - 1)

def test_exhausted(solved, monkeypatch):
    monkeypatch.setattr(config, 'MAX_SOLUTION_LENGTH', 0)
    with pytest.raises(solver.InternalSearchExhausted):
        solver.solve(apply_move(solved, Move('R', 1)))

def test_simplify_moves():
    [U, D, R, L] = range(4)
    assert solver.simplify_moves([]) == []
    assert solver.simplify_moves([(U, 1), (D, 1), (U, 1)]) == [(D, 1), (U, 2)]
    assert solver.simplify_moves([(R, 1), (R, 3)]) == []
    assert solver.simplify_moves([(U, 1), (R, 2), (L, 1), (R, 2), (U, 3)]) == \
            [(U, 1), (L, 1), (U, 3)]
    assert solver.simplify_moves([(R, 2), (R, 3)]) == [(R, 1)]

def test_alg_helpers():
    assert solver.invert_alg("R U R' U'") == "U R U' R'"
    assert solver.invert_alg('F2 D') == "D' F2"
    assert solver.parse_alg("R U2 F'") == [(2, 1), (0, 2), (4, 3)]
    assert solver.move_str(5, 3) == "B'"
    with pytest.raises(ValueError):
        solver.parse_alg('x y')

def test_move_scramble_canonical(rng):
    scramble = solver.gen_random_move_scramble(50, rng=rng)
    assert len(scramble) == 50
    for [a, b] in zip(scramble, scramble[1:]):
        assert a[0] != b[0]

def test_random_cube_legal(rng):
    for _ in range(20):
        cube = solver.random_cube(rng)
        state = facelets.from_cube(cube)
        assert CubeState.from_string(state.to_string()) == state

def test_table_cache_rejects_bad_files(tmp_path):
    assert not solver.load_tables(str(tmp_path / 'missing.bin'))
    path = tmp_path / 'short.bin'
    path.write_bytes(b'\0' * 100)
    assert not solver.load_tables(str(path))

def test_table_cache_round_trip(tmp_path):
    path = str(tmp_path / 'rsrc' / 'tables.bin')
    solver.save_tables(path)
    assert solver.load_tables(path)
    solved = CubeState.solved()
    state = apply_moves(solved, "L2 D' B R U2")
    check_solution(state, solver.solve(state, max_probes=5))
