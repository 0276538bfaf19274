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

import pytest

import facelets
import solver
import validate
from facelets import CubeState, apply_moves

SOLVED = facelets.SOLVED_STRING

def swap(s, *pairs):
    s = list(s)
    for [a, b] in pairs:
        [s[a], s[b]] = [s[b], s[a]]
    return ''.join(s)

def test_solved_decodes():
    assert validate.validate(SOLVED) == solver.SOLVED_CUBE

def test_scrambled_decodes(rng):
    for _ in range(10):
        cube = solver.random_cube(rng)
        assert validate.validate(facelets.from_cube(cube)) == cube

def test_other_symbols():
    table = str.maketrans('WRGYOB', 'abcdef')
    state = apply_moves(CubeState.solved(), "R U2 F' L D B'")
    assert validate.validate(state.to_string().translate(table))

@pytest.mark.parametrize('s', [SOLVED[:53], SOLVED + 'W', ''])
def test_bad_length(s):
    with pytest.raises(validate.InvalidLength):
        validate.validate(s)

def test_not_a_string():
    with pytest.raises(TypeError):
        validate.validate(None)
    with pytest.raises(TypeError):
        validate.validate(list(SOLVED))

def test_bad_counts():
    with pytest.raises(validate.InvalidSymbolCount):
        validate.validate('R' + SOLVED[1:])
    with pytest.raises(validate.InvalidColorCount):
        validate.validate('X' + SOLVED[1:])

def test_duplicate_centers():
    # Swapping a center with an edge sticker keeps the counts right
    with pytest.raises(validate.InvalidPermutation):
        validate.validate(swap(SOLVED, (4, 10)))

def test_mirrored_corner():
    with pytest.raises(validate.InvalidPermutation):
        validate.validate(swap(SOLVED, (8, 20)))

def test_swapped_edges():
    # Swapping two whole edges makes the edge parity odd
    with pytest.raises(validate.InvalidPermutationParity):
        validate.validate(swap(SOLVED, (7, 5), (19, 10)))

def test_swapped_corners():
    with pytest.raises(validate.InvalidPermutation):
        validate.validate(swap(SOLVED, (8, 2), (20, 11), (9, 45)))

def test_flipped_edge():
    with pytest.raises(validate.InvalidOrientationParity):
        validate.validate(swap(SOLVED, (7, 19)))

def test_twisted_corner():
    s = list(SOLVED)
    [a, b, c] = facelets.CORNER_FACELETS[0]
    [s[a], s[b], s[c]] = [s[c], s[a], s[b]]
    with pytest.raises(validate.InvalidOrientation):
        validate.validate(''.join(s))

def test_two_flipped_edges_valid():
    state = apply_moves(CubeState.solved(), "F R' U2 B")
    s = swap(state.to_string(), (7, 19), (5, 10))
    assert validate.validate(s)

def test_from_string():
    with pytest.raises(validate.InvalidCube):
        CubeState.from_string(SOLVED[:53])
    with pytest.raises(ValueError):
        CubeState.from_string(swap(SOLVED, (7, 19)))

def test_is_valid():
    assert validate.is_valid(SOLVED) == (True, None)
    [valid, error] = validate.is_valid(SOLVED[:53])
    assert not valid
    assert error.reason == 'InvalidLength'
    assert '53' in error.message
