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

import collections

# Sticker-level cube model. A cube state is a string of 54 color symbols, with
# the faces in URFDLB order and each face in reading order as seen from
# outside the cube:
#
#              0  1  2
#              3  U  5
#              6  7  8
#   36 37 38  18 19 20   9 10 11  45 46 47
#   39  L 41  21  F 23  12  R 14  48  B 50
#   42 43 44  24 25 26  15 16 17  51 52 53
#             27 28 29
#             30  D 32
#             33 34 35

FACES = 'URFDLB'
FACE_OFFSET = {f: 9 * i for [i, f] in enumerate(FACES)}
N_STICKERS = 54

FACE_NAMES = {
    'U': 'Up',
    'R': 'Right',
    'F': 'Front',
    'D': 'Down',
    'L': 'Left',
    'B': 'Back',
}

# Symbols for the solver's piece colors, in its color order (white, yellow,
# red, orange, green, blue). The solver's color numbers double as its face
# numbers in UDRLFB order.
COLORS = 'WYROGB'
SOLVED_STRING = ''.join(c * 9 for c in 'WRGYOB')

# Center sticker of each face, in UDRLFB order
CENTER_FACELETS = (4, 31, 13, 40, 22, 49)

# Sticker indices of each edge and corner slot. The slots and the order of the
# stickers inside them line up with solver.EDGES and solver.CORNERS
EDGE_FACELETS = ((7, 19), (5, 10), (1, 46), (3, 37),
    (23, 12), (14, 48), (50, 39), (41, 21),
    (25, 28), (16, 32), (52, 34), (43, 30))
CORNER_FACELETS = ((8, 20, 9), (2, 11, 45), (0, 47, 36), (6, 38, 18),
    (35, 51, 17), (29, 15, 26), (27, 24, 44), (33, 42, 53))

# Clockwise rotation of a face's own 3x3 block: new[i] = old[FACE_ROTATION[i]]
FACE_ROTATION = (6, 3, 0, 7, 4, 1, 8, 5, 2)

# The four strips of neighboring stickers moved by a clockwise quarter turn of
# each face. The sticker at strips[k][j] moves to strips[k+1][j].
ADJACENT_STRIPS = {
    'U': ((18, 19, 20), (36, 37, 38), (45, 46, 47), (9, 10, 11)),
    'R': ((20, 23, 26), (2, 5, 8), (51, 48, 45), (29, 32, 35)),
    'F': ((6, 7, 8), (9, 12, 15), (29, 28, 27), (44, 41, 38)),
    'D': ((24, 25, 26), (15, 16, 17), (51, 52, 53), (42, 43, 44)),
    'L': ((0, 3, 6), (18, 21, 24), (27, 30, 33), (53, 50, 47)),
    'B': ((2, 1, 0), (36, 39, 42), (33, 34, 35), (17, 14, 11)),
}

TURN_STR = {1: '', 2: '2', 3: "'"}
INV_TURN_STR = {v: k for [k, v] in TURN_STR.items()}

class Move(collections.namedtuple('Move', 'face turns')):
    __slots__ = ()

    @classmethod
    def parse(cls, s):
        if not s or s[0] not in FACES or s[1:] not in INV_TURN_STR:
            raise ValueError('bad move: %r' % s)
        return cls(s[0], INV_TURN_STR[s[1:]])

    def inverse(self):
        return Move(self.face, 4 - self.turns)

    def __str__(self):
        return self.face + TURN_STR[self.turns]

ALL_MOVES = tuple(Move(f, t) for f in FACES for t in range(1, 4))

def parse_moves(alg):
    return [Move.parse(m) for m in alg.split()]

class CubeState:
    """An immutable cube, as a string of 54 sticker symbols."""
    __slots__ = ('stickers',)

    # Only checks the shape; from_string does the full validation
    def __init__(self, stickers):
        if not isinstance(stickers, str) or len(stickers) != N_STICKERS:
            raise ValueError('a cube state is a string of %s stickers, not %r' %
                    (N_STICKERS, stickers))
        object.__setattr__(self, 'stickers', stickers)

    def __setattr__(self, name, value):
        raise AttributeError('CubeState is immutable')

    @classmethod
    def from_string(cls, s):
        """Parse and validate a sticker string. Raises validate.InvalidCube."""
        import validate
        validate.validate(s)
        return cls(s)

    @classmethod
    def solved(cls):
        return cls(SOLVED_STRING)

    def to_string(self):
        return self.stickers

    def face(self, f):
        o = FACE_OFFSET[f]
        return self.stickers[o:o+9]

    def is_solved(self):
        return all(len(set(self.face(f))) == 1 for f in FACES)

    def __getitem__(self, i):
        return self.stickers[i]

    def __len__(self):
        return N_STICKERS

    def __eq__(self, other):
        return isinstance(other, CubeState) and self.stickers == other.stickers

    def __hash__(self):
        return hash(self.stickers)

    def __str__(self):
        return self.stickers

    def __repr__(self):
        return 'CubeState(%r)' % self.stickers

# Permutations, for each move, mapping new sticker positions to old ones

def gen_quarter_turn(face):
    perm = list(range(N_STICKERS))
    o = FACE_OFFSET[face]
    for [i, j] in enumerate(FACE_ROTATION):
        perm[o + i] = o + j
    strips = ADJACENT_STRIPS[face]
    for k in range(4):
        for [src, dst] in zip(strips[k], strips[(k + 1) % 4]):
            perm[dst] = src
    return perm

def compose(p, q):
    return [p[i] for i in q]

MOVE_PERMS = {}
for f in FACES:
    quarter = gen_quarter_turn(f)
    perm = quarter
    for t in range(1, 4):
        MOVE_PERMS[Move(f, t)] = tuple(perm)
        perm = compose(quarter, perm)

def apply_move(state, move):
    if not isinstance(move, Move):
        move = Move.parse(move)
    s = state.stickers
    return CubeState(''.join([s[i] for i in MOVE_PERMS[move]]))

def apply_moves(state, moves):
    if isinstance(moves, str):
        moves = parse_moves(moves)
    for move in moves:
        state = apply_move(state, move)
    return state

# Convert a cube from the solver's piece representation (a solver.Cube) to
# stickers
def from_cube(cube, colors=COLORS):
    stickers = [None] * N_STICKERS
    for [f, c] in zip(CENTER_FACELETS, cube.centers):
        stickers[f] = colors[c]
    for [facelets, edge] in zip(EDGE_FACELETS, cube.edges):
        for [f, c] in zip(facelets, edge):
            stickers[f] = colors[c]
    for [facelets, corner] in zip(CORNER_FACELETS, cube.corners):
        for [f, c] in zip(facelets, corner):
            stickers[f] = colors[c]
    return CubeState(''.join(stickers))
