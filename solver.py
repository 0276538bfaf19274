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

import array
import logging
import os
import random
import threading
import time

import config
import facelets
from util import time_execution

log = logging.getLogger(__name__)

################################################################################
## Cube logic ##################################################################
################################################################################

# Colors double as face indices: the solved cube has color i on face i
[W, Y, R, O, G, B] = range(6)

EDGES = ((W, G), (W, R), (W, B), (W, O),
    (G, R), (R, B), (B, O), (O, G),
    (G, Y), (R, Y), (B, Y), (O, Y))
CORNERS = ((W, G, R), (W, R, B), (W, B, O), (W, O, G),
    (Y, B, R), (Y, R, G), (Y, G, O), (Y, O, B))
CENTERS = (W, Y, R, O, G, B)

# Face tables: for each of the six faces, this table has the coordinates of the
# four edges and four corners that make up the face, as they correspond to the
# lists above of edges and corners in a solved cube. For each face, the four
# lists below are edge position, index in edge, corner position, index in corner
up    = [2, 1,  0,  3], [0, 0, 0, 0], [2, 1, 0, 3], [0, 0, 0, 0]
down  = [8, 9, 10, 11], [1, 1, 1, 1], [6, 5, 4, 7], [0, 0, 0, 0]
right = [1, 5,  9,  4], [1, 0, 0, 1], [0, 1, 4, 5], [2, 1, 2, 1]
left  = [3, 7, 11,  6], [1, 0, 0, 1], [2, 3, 6, 7], [2, 1, 2, 1]
front = [0, 4,  8,  7], [1, 0, 0, 1], [3, 0, 5, 6], [2, 1, 2, 1]
back  = [2, 6, 10,  5], [1, 0, 0, 1], [1, 2, 7, 4], [2, 1, 2, 1]

faces = [up, down, right, left, front, back]

# For edge orientation, the index in each edge slot of the sticker on the U/D
# face, or on the F/B face for the four E-slice slots
EDGE_ORIENT_SLOT = [0, 0, 0, 0, 0, 1, 0, 1, 1, 1, 1, 1]

FACE_STR = 'UDRLFB'
INV_FACE_STR = {f: i for [i, f] in enumerate(FACE_STR)}
TURN_STR = {-1: "'", 1: '', 2: '2', 3: "'"}
INV_TURN_STR = {v: k for [k, v] in TURN_STR.items()}
assert INV_TURN_STR["'"] == 3

class Cube:
    def __init__(self, centers=CENTERS, edges=EDGES, corners=CORNERS):
        self.centers = centers
        self.edges = edges
        self.corners = corners

    def turn(self, face, n):
        [self.edges, self.corners] = TURNS[face][n](self.edges, self.corners)

    def run_alg(self, alg):
        if isinstance(alg, (str, list)):
            alg = parse_alg(alg)
        for [face, n] in alg:
            self.turn(face, n)
        return self

    def __eq__(self, other):
        return (self.centers == other.centers and self.edges == other.edges and
                self.corners == other.corners)

    # To make a copy, just return a new cube object with the same attributes,
    # since they're all immutable
    def copy(self):
        return Cube(self.centers, self.edges, self.corners)

def rotate(l, n):
    return (*l[-n:], *l[:-n])

def find_shift(l, i):
    ii = i
    for s in range(len(i)):
        if i in l:
            return (l.index(i), s)
        i = rotate(i, 1)
    assert 0, (l, ii)

# Metaprogramming. Generate a function for each of the turn moves, which maps
# the edge and corner tuples of a cube to the turned ones.
TURNS = []
def gen_turns():
    for F in range(6):
        FR = {}
        TURNS.append(FR)
        face = faces[F]
        for n in range(1, 4):
            E = list(range(1, 13))
            C = [(x, 0) for x in range(8)]
            [idx, flip, cidx, cflip] = face
            edges = [E[i] for i in idx]
            new_edges = edges[n:] + edges[:n]
            new_flip = flip[n:] + flip[:n]
            for [i, e, f, nf] in zip(idx, new_edges, flip, new_flip):
                if f != nf:
                    e = -e
                E[i] = e

            corners = [C[i] for i in cidx]
            new_corners = corners[n:] + corners[:n]
            new_cflip = cflip[n:] + cflip[:n]
            for [i, [c, _], f, nf] in zip(cidx, new_corners, cflip, new_cflip):
                C[i] = (c, (nf-f)%3)

            idxs = []
            for e in E:
                if e > 0:
                    idxs.append('e[%s]' % (e-1))
                else:
                    e = -e - 1
                    idxs.append('(e[%s][1], e[%s][0])' % (e, e))

            cidxs = []
            for [c, f] in C:
                if f == 0:
                    cidxs.append('c[%s]' % (c))
                else:
                    [x, y, z] = [(i + f) % 3 for i in range(3)]
                    cidxs.append('(c[%s][%s], c[%s][%s], c[%s][%s])' % (c, x, c, y, c, z))

            name = 'turn_%s_%s' % (FACE_STR[F], n)
            code = '''
def {name}(e, c):
    return (({i}),
        ({c}))'''.format(name=name, i=', '.join(idxs), c=', '.join(cidxs))
            ctx = {}
            exec(code, ctx)
            # Pulling each piece n places forward around the face is a
            # clockwise turn of 4-n quarters
            FR[4 - n] = ctx[name]

gen_turns()

SOLVED_CUBE = Cube()

################################################################################
## Utilities ###################################################################
################################################################################

def move_str(face, turn):
    return FACE_STR[face] + TURN_STR[turn]

def parse_move(move):
    return (INV_FACE_STR[move[0]], INV_TURN_STR[move[1:]])

def parse_rot(m):
    m = m.replace("2'", '2')
    if m.endswith("'"):
        return 3
    elif m.endswith('2'):
        return 2
    # E.g. a Ub perm alg has R3 in it
    elif m.endswith('3'):
        return 3
    return 1

def parse_alg(alg):
    if isinstance(alg, list):
        alg = ' '.join(alg)

    moves = []
    for move in alg.split():
        if move[0] not in FACE_STR:
            raise ValueError('not a face turn: %r' % move)
        moves.append((FACE_STR.index(move[0]), parse_rot(move)))
    return moves

def invert_alg(alg):
    moves = []
    for m in reversed(alg.split()):
        turn = parse_rot(m[1:])
        moves.append(m[0] + TURN_STR[4 - turn])
    return ' '.join(moves)

# Reduce a list of (face, turn) moves to canonical form. Consecutive moves on
# one axis are merged per face, and come out with the odd face first (D U, not
# U D), which is the same order the search allows
def simplify_moves(moves):
    result = []
    for [face, turn] in moves:
        axis = face >> 1
        totals = [0, 0]
        totals[face & 1] = turn
        while result and result[-1][0] >> 1 == axis:
            [f, t] = result.pop()
            totals[f & 1] += t
        for f in [axis * 2 + 1, axis * 2]:
            t = totals[f & 1] % 4
            if t:
                result.append((f, t))
    return result

def gen_random_move_scramble(length, rng=random):
    scramble = []
    all_faces = set(range(6))
    blocked_faces = set()
    turns = [-1, 1, 2]
    for i in range(length):
        face = rng.choice(sorted(all_faces - blocked_faces))
        # Only allow one turn of each of an opposing pair of faces in a row.
        # E.g. F B' is allowed, F B' F is not
        if face ^ 1 not in blocked_faces:
            blocked_faces = set()
        blocked_faces.add(face)

        turn = rng.choice(turns)
        scramble.append(move_str(face, turn))
    return scramble

################################################################################
## Actual solver stuff #########################################################
################################################################################

# This solver is basically Kociemba's two-phase algorithm. The first phase puts
# a random cube into the G1 group (i.e. cubes that can be solved using only
# <U,D,R2,L2,F2,B2> moves). The second phase solves the cube completely using
# only the G1 moves.
#
# To make this problem much easier, each phase is broken down into subproblems
# that are solved simultaneously. For the first phase, the three subproblems are:
#   * Orienting all the corners, so the top or bottom color matches the top or
#       bottom center
#   * Orienting all the edges so they can be solved with G1 moves
#   * Putting all the E-slice edges in the E slice (i.e. not on the U or D layers)
# For phase 2, the subproblems are:
#   * Permuting all the corners
#   * Permuting all the U/D layer edges
#   * Permuting the E-slice edges
#
# So for each phase, we try to find a sequence of moves that solves all the
# subproblems at once. There are a huge number of possibilities to search here,
# but we can prune the search space considerably by utilizing lookup tables.
# If the table tells us that the current corner orientation needs at least 5
# moves to solve, then the entire phase 1 needs at least 5 moves as well. We
# use larger lookup tables that are based on pairs of subproblems in order to
# prune even more (e.g. for phase 1, we use three tables: corner/edge orientation,
# corner orientation/e-slice position, and edge orientation/e-slice position).
# These take a minute or two to generate, so we cache them on disk. For phase
# 2, the corner/edge permutation pair would be too big, so that table only
# tracks which four positions the U corners are in plus the corner parity.
#
# The overall search looks iteratively deeper at phase 1 solutions until the
# shortest sequence is found, then the shortest phase 2 solution is searched
# from there using another round of iterative deepening. After a solution is
# found, we can look for shorter solutions by allowing the phase 1 solution
# to get longer (but limiting the maximum overall depth of the phase 2 iterative
# deepening).
#
# To make the search faster, we can use a simplified cube representation for
# each phase. For all the "subproblems" of solving the cube, (e.g. orienting
# all corners), there's an index associated with each cube state for that
# subproblem. For orienting corners, there are 3^7 possibilities (7 corners
# with 3 orientations each, the last corner's orientation is determined by the
# others), and the state of the corners can be mapped to a number 0..2187 for
# each possibility. So we can represent the cube by three indices for each
# phase:
#   * Phase 1: c, e, s (corner orientation, edge orientation, slice position)
#       ranges: (3^7=2187, 2^11=2048, 12 choose 4=495)
#   * Phase 2: c, e, s (corner permutation, edge permutation, slice permutation)
#       ranges: (8!=40320, 8!=40320, 4!=24)
# To update these representations when moves are performed, we use more lookup
# tables. These give, for a given index, a list of successor indices when each
# of the 18 standard moves is applied (one of six faces with 90/180/270 degree
# rotation). Or for phase 2, 10 standard moves (since only 180 degree moves are
# allowed for RLFB).
#
# There's also a transition phase whenever we reach phase 2 to convert between
# the two index-based representations. We simply run the phase 1 solution
# on a normal cube and then convert that representation to the phase 2 indexing.
# This is a bit slow/weird, but is rare enough that indexing is still faster and
# simpler overall.

# Move tables, phase 1
CORNER_MOVES_1 = [None] * 2187
EDGE_MOVES_1 = [None] * 2048
ESLICE_MOVES_1 = [None] * 495
# ...and phase 2
CORNER_MOVES_2 = [None] * 40320
EDGE_MOVES_2 = [None] * 40320
ESLICE_MOVES_2 = [None] * 24

# Tables to convert tuples to dense indices for the indices that aren't easy
# to generate numerically
ESLICE_INDEX_1 = {}
CORNER_INDEX_2 = {}
EDGE_INDEX_2 = {}
ESLICE_INDEX_2 = {}
# And a table to convert corner permutation to permutation of four corners
# (to make a smaller pruning table for phase 2)
CCOMBP_INDEX = []

# Pruning tables, phase 1
CORNER_EDGE_LEN_1 = 2187 * 2048
CORNER_ESLICE_LEN_1 = 2187 * 495
EDGE_ESLICE_LEN_1 = 2048 * 495
CORNER_EDGE_DEPTH_1 = array.array('b', [-1] * CORNER_EDGE_LEN_1)
CORNER_ESLICE_DEPTH_1 = array.array('b', [-1] * CORNER_ESLICE_LEN_1)
EDGE_ESLICE_DEPTH_1 = array.array('b', [-1] * EDGE_ESLICE_LEN_1)
# ...and phase 2
CORNER_ESLICE_LEN_2 = 40320 * 24
EDGE_ESLICE_LEN_2 = 40320 * 24
CCOMBP_EDGE_LEN_2 = 140 * 40320
CORNER_ESLICE_DEPTH_2 = array.array('b', [-1] * CORNER_ESLICE_LEN_2)
EDGE_ESLICE_DEPTH_2 = array.array('b', [-1] * EDGE_ESLICE_LEN_2)
CCOMBP_EDGE_DEPTH_2 = array.array('b', [-1] * CCOMBP_EDGE_LEN_2)

PHASE_1_MOVES = [s + t for s in FACE_STR for t in ['', '2', "'"]]
PHASE_2_MOVES = [m for m in PHASE_1_MOVES if m[0] in 'UD' or m.endswith('2')]
PHASE_2_MOVE_SET = set(PHASE_2_MOVES)
FACE_1 = [f for f in range(6) for t in range(1, 4)]
FACE_2 = [f for f in range(6) for t in range(1, 4) if f >> 1 == 0 or t == 2]

SOLVED_C_1 = 0
SOLVED_E_1 = 0
SOLVED_S_1 = 0
SOLVED_INDICES_1 = (SOLVED_C_1, SOLVED_E_1, SOLVED_S_1)

SOLVED_C_2 = 0
SOLVED_E_2 = 0
SOLVED_S_2 = 0
SOLVED_INDICES_2 = (SOLVED_C_2, SOLVED_E_2, SOLVED_S_2)

FACTORIAL = [1, 1]
for i in range(2, 13):
    FACTORIAL.append(FACTORIAL[i-1] * i)

TABLES_LOCK = threading.Lock()
TABLES_READY = False

class SolveTimeout(Exception):
    pass

class InternalSearchExhausted(RuntimeError):
    pass

# Index helper functions. These convert a regular cube (i.e. the Cube class)
# into the index representations used for searching

# Phase 1 indices

def get_corner_index_1(cube):
    index = 0
    # Find the position of the white or yellow face on the first seven corners
    for [i, corner] in enumerate(cube.corners[:7]):
        if W in corner:
            s = corner.index(W)
        else:
            s = corner.index(Y)
        index += 3 ** i * s
    return index

# An edge is flipped unless its reference sticker (U/D if it has one, else F/B)
# sits on the slot's reference face. Only F and B quarter turns change this.
def is_edge_flipped(edge, i):
    if W in edge or Y in edge:
        ref = (W, Y)
    else:
        ref = (G, B)
    return edge[EDGE_ORIENT_SLOT[i]] not in ref

def get_edge_index_1(cube):
    index = 0
    for [i, edge] in enumerate(cube.edges[:11]):
        index |= is_edge_flipped(edge, i) << i
    return index

# It's a bit hard to generate an index for the e-slice orientation, since
# it's permutation-invariant, so we just generate a sorted tuple here. We
# use this to generate a dense lookup table that converts tuple to index.
def get_eslice_sparse_index_1(cube):
    index = [None] * 4
    for [i, edge] in enumerate(EDGES[4:8]):
        (j, s) = find_shift(cube.edges, edge)
        index[i] = j
    return tuple(sorted(index))

def get_eslice_index_1(cube):
    return ESLICE_INDEX_1[get_eslice_sparse_index_1(cube)]

# Phase 2 indices

def get_corner_sparse_index_2(cube):
    index = [None] * 8
    for [i, corner] in enumerate(CORNERS):
        (j, s) = find_shift(cube.corners, corner)
        index[i] = j
    return tuple(index)

def get_edge_sparse_index_2(cube):
    index = [None] * 8
    for [i, edge] in enumerate(EDGES[0:4] + EDGES[8:12]):
        (j, s) = find_shift(cube.edges, edge)
        index[i] = j
    return tuple(index)

def get_eslice_sparse_index_2(cube):
    index = [None] * 4
    for [i, edge] in enumerate(EDGES[4:8]):
        (j, s) = find_shift(cube.edges, edge)
        index[i] = j
    return tuple(index)

def get_corner_index_2(cube):
    return CORNER_INDEX_2[get_corner_sparse_index_2(cube)]

def get_edge_index_2(cube):
    return EDGE_INDEX_2[get_edge_sparse_index_2(cube)]

def get_eslice_index_2(cube):
    return ESLICE_INDEX_2[get_eslice_sparse_index_2(cube)]

# Get position of the first 4 corners
def get_ccomb_index(cube):
    index = [None] * 4
    for [i, corner] in enumerate(CORNERS[:4]):
        (j, s) = find_shift(cube.corners, corner)
        index[i] = j
    return tuple(sorted(index))

def get_parity(index, n):
    parity = 0
    for i in range(2, n + 1):
        [index, m] = divmod(index, i)
        parity ^= m
    return parity & 1

# Permute and orient a piece set (corners or edges). This pulls pieces from
# the <solved> list according to the <perm> number, then orients them
# according to the <orient> number. This works over <n> pieces with <r>
# possible orientations each.
def permute_orient(solved, orient, perm, n, r):
    result = [None] * n
    # Copy to a mutable list so we can pull items out when permuting
    solved = list(solved)
    # Permute
    for i in range(n):
        [d, perm] = divmod(perm, FACTORIAL[n - i - 1])
        result[i] = solved.pop(d)
    # Orient
    total = 0
    for i in range(n - 1):
        [orient, d] = divmod(orient, r)
        result[i] = rotate(result[i], d)
        total += d
    # Orient the last piece so the total orientation is 0 modulo r
    result[n - 1] = rotate(result[n - 1], -total % r)
    return result

# Generate reduced corner (perm of first 4 corners only)/parity index for phase 2
def gen_ccomb_indices():
    global CCOMBP_INDEX
    CCOMBP_INDEX = [None] * FACTORIAL[8]
    ccomb_index = {}
    for cp in range(FACTORIAL[8]):
        corners = permute_orient(SOLVED_CUBE.corners, 0, cp, 8, 3)
        cube = Cube(corners=tuple(corners))

        cc = (get_parity(cp, 8), *get_ccomb_index(cube))
        if cc not in ccomb_index:
            ccomb_index[cc] = len(ccomb_index)
        cc = ccomb_index[cc]
        c = get_corner_index_2(cube)
        CCOMBP_INDEX[c] = cc
    assert len(ccomb_index) == 140, len(ccomb_index)

# For a given index function, generate all the possiblities and a table to
# transition between indices from the standard moves. If the given index function
# is not a dense integer representation, then we also fill in the index_table to
# convert to one.
def gen_move_tables(get_index, move_set, move_table, index_table=None):
    cube = Cube()
    i = get_index(cube)
    if index_table is not None:
        index_table[i] = 0
        i = 0

    current = [(cube, i)]

    seen = {i}

    while current:
        next = []
        while current:
            [cube, i] = current.pop()

            moves = move_table[i] = []

            for [face, turn] in move_set:
                child = cube.copy()
                child.turn(face, turn)

                i = get_index(child)

                if index_table is not None:
                    if i not in index_table:
                        index_table[i] = len(index_table)
                    i = index_table[i]

                moves.append(i)

                if i not in seen:
                    seen.add(i)
                    next.append((child, i))

        current = next

# Fill in a pruning table using a pair of index functions. We use the move
# tables to exhaustively enumerate all the possibilities, by making successive
# moves starting from a solved cube. We keep track of how many moves are
# required and fill the value into the given depth table, which is the minimum
# number of moves required to solve the two given subproblems together.
def gen_prune_tables(i_1, i_2, i_base, move_table_1, move_table_2, depth_table,
        remap=None):
    i = remap[i_1] if remap else i_1
    key = i + i_2 * i_base
    depth_table[key] = 0
    current = [(i_1, i_2)]

    depth = 1
    while current:
        next = []
        # From the current list of positions that take <depth-1> moves to reach,
        # find all the positions that take <depth> moves to reach
        while current:
            [i_1, i_2] = current.pop()

            for [c_1, c_2] in zip(move_table_1[i_1], move_table_2[i_2]):
                c = remap[c_1] if remap else c_1
                key = c + c_2 * i_base

                # Only search further if the position hasn't been found before
                if depth_table[key] == -1:
                    depth_table[key] = depth
                    next.append((c_1, c_2))

        current = next
        depth += 1

# Byte lengths of each chunk of the table cache, in the order they're written
CACHE_LENGTHS = [
    # Phase 1 moves
    2*18*2187, 2*18*2048, 2*18*495,
    # Phase 1 index lookups
    2*5*495,
    # Phase 1 pruning tables
    CORNER_EDGE_LEN_1, CORNER_ESLICE_LEN_1, EDGE_ESLICE_LEN_1,
    # Phase 2 moves
    2*10*40320, 2*10*40320, 2*10*24,
    # Phase 2 index lookups
    2*9*40320, 2*9*40320, 5*24, 40320,
    # Phase 2 pruning tables
    CORNER_ESLICE_LEN_2, EDGE_ESLICE_LEN_2, CCOMBP_EDGE_LEN_2,
]

def load_tables(path):
    global CORNER_MOVES_1, EDGE_MOVES_1, ESLICE_MOVES_1
    global ESLICE_INDEX_1
    global CORNER_EDGE_DEPTH_1, CORNER_ESLICE_DEPTH_1, EDGE_ESLICE_DEPTH_1
    global CORNER_MOVES_2, EDGE_MOVES_2, ESLICE_MOVES_2
    global CORNER_INDEX_2, EDGE_INDEX_2, ESLICE_INDEX_2, CCOMBP_INDEX
    global CORNER_ESLICE_DEPTH_2, EDGE_ESLICE_DEPTH_2, CCOMBP_EDGE_DEPTH_2

    if not os.path.exists(path):
        return False

    with open(path, 'rb') as f:
        data = f.read()

    if len(data) != sum(CACHE_LENGTHS):
        log.warning('ignoring table cache %s: expected %d bytes, got %d', path,
                sum(CACHE_LENGTHS), len(data))
        return False

    # Split the binary data into a bunch of chunks of the given lengths
    chunks = []
    for l in CACHE_LENGTHS:
        chunks.append(data[:l])
        data = data[l:]

    [c_m_1, e_m_1, s_m_1, s_i_1, c_e_d_1, c_s_d_1, e_s_d_1,
            c_m_2, e_m_2, s_m_2, c_i_2, e_i_2, s_i_2, cc_i_2,
            c_s_d_2, e_s_d_2, c_e_d_2] = chunks

    # Helper to create an array of the given type from the given data,
    # splitting it into sublists of a given length if requested
    def make(t, b, split=0):
        a = array.array(t)
        a.frombytes(b)
        if split:
            a = [a[i:i+split] for i in range(0, len(a), split)]
        return a

    # Helper to make an index table from the data in t, into l entries
    # mapping c-1 values to one index
    def make_index(t, l, c, tp='H'):
        t = make(tp, t)
        return {tuple(t[i:i+c-1]): t[i+c-1] for i in range(0, c*l, c)}

    CORNER_MOVES_1 = make('H', c_m_1, split=18)
    EDGE_MOVES_1 = make('H', e_m_1, split=18)
    ESLICE_MOVES_1 = make('H', s_m_1, split=18)

    ESLICE_INDEX_1 = make_index(s_i_1, 495, 5)

    CORNER_EDGE_DEPTH_1 = make('b', c_e_d_1)
    CORNER_ESLICE_DEPTH_1 = make('b', c_s_d_1)
    EDGE_ESLICE_DEPTH_1 = make('b', e_s_d_1)

    CORNER_MOVES_2 = make('H', c_m_2, split=10)
    EDGE_MOVES_2 = make('H', e_m_2, split=10)
    ESLICE_MOVES_2 = make('H', s_m_2, split=10)

    CORNER_INDEX_2 = make_index(c_i_2, 40320, 9)
    EDGE_INDEX_2 = make_index(e_i_2, 40320, 9)
    ESLICE_INDEX_2 = make_index(s_i_2, 24, 5, tp='B')

    CCOMBP_INDEX = make('B', cc_i_2)

    CORNER_ESLICE_DEPTH_2 = make('b', c_s_d_2)
    EDGE_ESLICE_DEPTH_2 = make('b', e_s_d_2)
    CCOMBP_EDGE_DEPTH_2 = make('b', c_e_d_2)

    return True

def gen_tables():
    phase_1_moves = [(f, t) for f in range(6) for t in range(1, 4)]
    phase_2_moves = [(f, t) for [f, t] in phase_1_moves
            if f >> 1 == 0 or t == 2]

    gen_move_tables(get_corner_index_1, phase_1_moves, CORNER_MOVES_1)
    gen_move_tables(get_edge_index_1, phase_1_moves, EDGE_MOVES_1)
    gen_move_tables(get_eslice_sparse_index_1, phase_1_moves, ESLICE_MOVES_1,
            index_table=ESLICE_INDEX_1)

    gen_move_tables(get_corner_sparse_index_2, phase_2_moves, CORNER_MOVES_2,
            index_table=CORNER_INDEX_2)
    gen_move_tables(get_edge_sparse_index_2, phase_2_moves, EDGE_MOVES_2,
            index_table=EDGE_INDEX_2)
    gen_move_tables(get_eslice_sparse_index_2, phase_2_moves, ESLICE_MOVES_2,
            index_table=ESLICE_INDEX_2)

    gen_ccomb_indices()

    gen_prune_tables(SOLVED_C_1, SOLVED_E_1, 2187, CORNER_MOVES_1, EDGE_MOVES_1,
            CORNER_EDGE_DEPTH_1)
    gen_prune_tables(SOLVED_C_1, SOLVED_S_1, 2187, CORNER_MOVES_1, ESLICE_MOVES_1,
            CORNER_ESLICE_DEPTH_1)
    gen_prune_tables(SOLVED_E_1, SOLVED_S_1, 2048, EDGE_MOVES_1, ESLICE_MOVES_1,
            EDGE_ESLICE_DEPTH_1)

    gen_prune_tables(SOLVED_C_2, SOLVED_S_2, 40320, CORNER_MOVES_2, ESLICE_MOVES_2,
            CORNER_ESLICE_DEPTH_2)
    gen_prune_tables(SOLVED_E_2, SOLVED_S_2, 40320, EDGE_MOVES_2, ESLICE_MOVES_2,
            EDGE_ESLICE_DEPTH_2)
    gen_prune_tables(SOLVED_C_2, SOLVED_E_2, 140, CORNER_MOVES_2, EDGE_MOVES_2,
            CCOMBP_EDGE_DEPTH_2, remap=CCOMBP_INDEX)

def save_tables(path):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    # Write to a temporary file first, so a concurrent reader never sees
    # a half-written cache
    tmp_path = '%s.%s.tmp' % (path, os.getpid())
    with open(tmp_path, 'wb') as f:
        # Helper to flatten a list of lists into just a list. I'd usually use
        # sum(ll, []) but that has some O(n^2) behavior apparently
        def flatten(ll):
            return [i for l in ll for i in l]

        # Phase 1
        moves_1 = array.array('H', flatten(CORNER_MOVES_1 + EDGE_MOVES_1 +
                ESLICE_MOVES_1))
        s_i_1 = array.array('H', flatten([[*k, v]
                for [k, v] in ESLICE_INDEX_1.items()]))
        f.write(moves_1.tobytes())
        f.write(s_i_1.tobytes())
        f.write(CORNER_EDGE_DEPTH_1.tobytes())
        f.write(CORNER_ESLICE_DEPTH_1.tobytes())
        f.write(EDGE_ESLICE_DEPTH_1.tobytes())

        # Phase 2
        moves_2 = array.array('H', flatten(CORNER_MOVES_2 + EDGE_MOVES_2 +
                ESLICE_MOVES_2))
        c_i_2 = array.array('H', flatten([[*k, v]
                for [k, v] in CORNER_INDEX_2.items()]))
        e_i_2 = array.array('H', flatten([[*k, v]
                for [k, v] in EDGE_INDEX_2.items()]))
        s_i_2 = array.array('B', flatten([[*k, v]
                for [k, v] in ESLICE_INDEX_2.items()]))
        cc_i_2 = array.array('B', CCOMBP_INDEX)
        f.write(moves_2.tobytes())
        f.write(c_i_2.tobytes() + e_i_2.tobytes() + s_i_2.tobytes())
        f.write(cc_i_2.tobytes())
        f.write(CORNER_ESLICE_DEPTH_2.tobytes())
        f.write(EDGE_ESLICE_DEPTH_2.tobytes())
        f.write(CCOMBP_EDGE_DEPTH_2.tobytes())
    os.replace(tmp_path, path)

# Load the tables from the disk cache, or generate (and cache) them. Safe to
# call from any thread; only the first call does any work.
def init_tables(path=None):
    global TABLES_READY
    with TABLES_LOCK:
        if TABLES_READY:
            return
        if path is None:
            path = config.TABLE_CACHE_PATH
        if load_tables(path):
            log.info('loaded solver tables from %s', path)
        else:
            with time_execution('generating solver tables'):
                gen_tables()
            try:
                save_tables(path)
            except OSError as e:
                log.warning('could not write table cache %s: %s', path, e)
            else:
                log.info('wrote solver tables to %s', path)
        TABLES_READY = True

class SolverContext:
    def __init__(self, cube, max_probes=None, time_limit=None, deadline=None):
        self.probes = 0
        self.nodes = 0
        # Solutions must be strictly shorter than this
        self.max_depth = config.MAX_SOLUTION_LENGTH + 1
        self.initial_cube = cube
        self.solution_cache = set()
        self.best_solution = None
        self.max_probes = config.MAX_PROBES if max_probes is None else max_probes
        self.start = time.time()
        if time_limit is None:
            time_limit = config.SEARCH_TIME_LIMIT
        self.soft_deadline = self.start + time_limit
        self.deadline = deadline

    def set_best(self, moves_1, moves_2):
        moves = [parse_move(PHASE_1_MOVES[i]) for i in moves_1]
        moves += [parse_move(PHASE_2_MOVES[i]) for i in moves_2]
        self.best_solution = simplify_moves(moves)
        # Set overall max depth so we only try to find solutions shorter than this
        self.max_depth = len(self.best_solution)
        log.debug('found %d move solution after %d probes, %d nodes',
                self.max_depth, self.probes, self.nodes)

    def out_of_time(self):
        return self.deadline is not None and time.time() > self.deadline

    # Whether we should stop looking for shorter solutions
    def is_done(self):
        if self.best_solution is None:
            return False
        return (self.probes >= self.max_probes or
                time.time() > self.soft_deadline or self.out_of_time())

    # Called every so often from the search. Returns whether to unwind with
    # the current best solution.
    def check_deadline(self):
        if not self.out_of_time():
            return False
        if self.best_solution is None:
            raise SolveTimeout('no solution found within %.1fs' %
                    (time.time() - self.start))
        return True

# Phase 1 recursive search
def phase_1(ctx, c, e, s, last_face, moves, depth):
    ctx.nodes += 1
    if ctx.nodes & 4095 == 0 and ctx.check_deadline():
        return True

    # See if we've solved phase 1
    if (c, e, s) == SOLVED_INDICES_1:
        # Make sure we haven't searched this exact sequence before
        key = tuple(moves)
        if key in ctx.solution_cache:
            return False
        ctx.solution_cache.add(key)

        # If the last move is also a phase 2 move, the sequence without it
        # already reached G1 and was searched from there
        if moves and PHASE_1_MOVES[moves[-1]] in PHASE_2_MOVE_SET:
            return False

        # Set up cube for phase 2
        cube = ctx.initial_cube.copy()
        cube.run_alg([PHASE_1_MOVES[i] for i in moves])
        c_2 = get_corner_index_2(cube)
        e_2 = get_edge_index_2(cube)
        s_2 = get_eslice_index_2(cube)
        # And search phase 2. The first phase 2 move is allowed on the same
        # axis as the last phase 1 move; the seam is simplified afterwards.
        ctx.probes += 1
        limit = min(config.PHASE_2_MAX_DEPTH, ctx.max_depth - len(moves) - 1)
        for d in range(limit + 1):
            if phase_2(ctx, c_2, e_2, s_2, None, moves, [], d):
                break
        return ctx.is_done()
    if depth == 0:
        return False

    # Look through all the possible moves
    for [m, [c_n, e_n, s_n]] in enumerate(zip(CORNER_MOVES_1[c], EDGE_MOVES_1[e],
            ESLICE_MOVES_1[s])):
        # Don't turn the same face twice in a row, and only turn the opposite face
        # if it's lower (so D U is allowed but not U D)
        face = FACE_1[m]
        if face == last_face or face & ~1 == last_face:
            continue

        # Prune the search if this move leads to a position needing too many
        # moves to solve
        if (CORNER_EDGE_DEPTH_1[c_n + 2187*e_n] >= depth or
                CORNER_ESLICE_DEPTH_1[c_n + 2187*s_n] >= depth or
                EDGE_ESLICE_DEPTH_1[e_n + 2048*s_n] >= depth):
            continue

        if phase_1(ctx, c_n, e_n, s_n, face, moves + [m], depth - 1):
            return True

    return False

# Phase 2 recursive search
def phase_2(ctx, c, e, s, last_face, moves_1, moves_2, depth):
    ctx.nodes += 1
    if ctx.nodes & 4095 == 0 and ctx.check_deadline():
        return True

    # See if we've solved phase 2
    if (c, e, s) == SOLVED_INDICES_2:
        ctx.set_best(moves_1, moves_2)
        return True
    if depth == 0:
        return False

    # Look through all the possible moves
    for [m, [c_n, e_n, s_n]] in enumerate(zip(CORNER_MOVES_2[c], EDGE_MOVES_2[e],
            ESLICE_MOVES_2[s])):
        # Don't turn the same face twice in a row, and only turn the opposite face
        # if it's lower (so D U is allowed but not U D)
        face = FACE_2[m]
        if face == last_face or face & ~1 == last_face:
            continue

        # Prune the search if this move leads to a position needing too many
        # moves to solve
        if (CORNER_ESLICE_DEPTH_2[c_n + 40320*s_n] >= depth or
                EDGE_ESLICE_DEPTH_2[e_n + 40320*s_n] >= depth or
                CCOMBP_EDGE_DEPTH_2[CCOMBP_INDEX[c_n] + 140*e_n] >= depth):
            continue

        if phase_2(ctx, c_n, e_n, s_n, face, moves_1, moves_2 + [m], depth - 1):
            return True

    return False

# Solve a legal cube, returning a list of (face, turn) moves. The cube must
# have been validated already: an illegal cube would just run out of depth.
def solve_cube(cube, max_probes=None, time_limit=None, deadline=None):
    init_tables()

    ctx = SolverContext(cube, max_probes=max_probes, time_limit=time_limit,
            deadline=deadline)
    if ctx.out_of_time():
        raise SolveTimeout('deadline passed before the search started')
    c = get_corner_index_1(cube)
    e = get_edge_index_1(cube)
    s = get_eslice_index_1(cube)

    # Main iterative deepening search loop
    for depth in range(config.MAX_SOLUTION_LENGTH + 1):
        # No phase 1 solution this long can beat the best one
        if depth >= ctx.max_depth:
            break
        if phase_1(ctx, c, e, s, None, [], depth):
            break

    log.debug('search finished: %d probes, %d nodes, %.3fs', ctx.probes,
            ctx.nodes, time.time() - ctx.start)

    if ctx.best_solution is None:
        raise InternalSearchExhausted('no solution within %d moves' %
                config.MAX_SOLUTION_LENGTH)
    return ctx.best_solution

# Solve a facelets.CubeState, returning a list of facelets.Move. The result is
# replayed on the sticker model before being handed back. Callers that already
# decoded the stickers with validate.validate can pass the Cube along.
def solve(state, cube=None, max_probes=None, time_limit=None, deadline=None):
    if cube is None:
        import validate
        cube = validate.validate(state)
    if isinstance(state, str):
        state = facelets.CubeState(state)
    moves = solve_cube(cube, max_probes=max_probes, time_limit=time_limit,
            deadline=deadline)
    solution = [facelets.Move(FACE_STR[f], t) for [f, t] in moves]

    if not facelets.apply_moves(state, solution).is_solved():
        raise InternalSearchExhausted('solution %s does not solve %s' %
                (' '.join(map(str, solution)), state))
    return solution

# Generate a uniformly random legal cube
def random_cube(rng=random):
    # Generate random corner/edge orientation/permutation
    co = rng.randrange(2187) # 3^7
    eo = rng.randrange(2048) # 2^11
    while True:
        cp = rng.randrange(FACTORIAL[8])
        ep = rng.randrange(FACTORIAL[12])
        if get_parity(cp, 8) == get_parity(ep, 12):
            break

    corners = permute_orient(SOLVED_CUBE.corners, co, cp, 8, 3)
    edges = permute_orient(SOLVED_CUBE.edges, eo, ep, 12, 2)
    # Pieces moved to slots on another axis can come out flipped, so fix up the
    # last edge to keep the total flip even
    if sum(is_edge_flipped(edge, i) for [i, edge] in enumerate(edges)) % 2:
        edges[11] = rotate(edges[11], 1)
    return Cube(corners=tuple(corners), edges=tuple(edges))

# Random state scramble generator: solve a random cube, and the scramble is
# the inverse of the solution
def gen_random_state_scramble(rng=random, **kwargs):
    moves = solve_cube(random_cube(rng), **kwargs)
    alg = invert_alg(' '.join(move_str(f, t) for [f, t] in moves))
    return alg.split()
