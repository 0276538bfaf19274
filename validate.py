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
import logging

import facelets
import solver
from solver import W, Y

log = logging.getLogger(__name__)

# Validation errors. These all mean the input can never be solved, so callers
# get them back as rejections.

class InvalidCube(ValueError):
    @property
    def reason(self):
        return type(self).__name__

    @property
    def message(self):
        return str(self)

class InvalidLength(InvalidCube):
    pass

class InvalidSymbolCount(InvalidCube):
    pass

class InvalidPermutation(InvalidCube):
    pass

class InvalidOrientation(InvalidCube):
    pass

InvalidColorCount = InvalidSymbolCount
InvalidPermutationParity = InvalidPermutation
InvalidOrientationParity = InvalidOrientation

# Lookup tables from every rotation of every piece (as a tuple of colors) to
# (piece index, rotation). Mirrored pieces aren't in here, since they can't be
# built from real stickers.
def gen_piece_lookup(pieces):
    lookup = {}
    for [i, piece] in enumerate(pieces):
        for r in range(len(piece)):
            lookup[solver.rotate(piece, r)] = (i, r)
    return lookup

EDGE_LOOKUP = gen_piece_lookup(solver.EDGES)
CORNER_LOOKUP = gen_piece_lookup(solver.CORNERS)

# Parity of a permutation given as a list, by counting cycles
def perm_parity(perm):
    seen = [False] * len(perm)
    parity = 0
    for i in range(len(perm)):
        if seen[i]:
            continue
        j = i
        length = 0
        while not seen[j]:
            seen[j] = True
            j = perm[j]
            length += 1
        parity ^= (length - 1) & 1
    return parity

def decode_pieces(colors, slots, lookup, kind):
    pieces = []
    perm = []
    for [i, facelets_idx] in enumerate(slots):
        piece = tuple(colors[f] for f in facelets_idx)
        if piece not in lookup:
            raise InvalidPermutation('%s at stickers %s is not a real piece' %
                    (kind, ', '.join(map(str, facelets_idx))))
        [p, _] = lookup[piece]
        if p in perm:
            raise InvalidPermutation('%s at stickers %s appears twice' %
                    (kind, ', '.join(map(str, facelets_idx))))
        pieces.append(piece)
        perm.append(p)
    return [tuple(pieces), perm]

# Check a sticker string, returning the equivalent solver.Cube. The checks run
# in a fixed order, and the first one that fails raises.
def validate(s):
    if isinstance(s, facelets.CubeState):
        s = s.to_string()
    if not isinstance(s, str):
        raise TypeError('cube state must be a string, not %s' % type(s).__name__)
    if len(s) != facelets.N_STICKERS:
        raise InvalidLength('cube state must have %s stickers, got %s' %
                (facelets.N_STICKERS, len(s)))

    counts = collections.Counter(s)
    if len(counts) != 6:
        raise InvalidSymbolCount('cube state must have 6 colors, got %s' %
                len(counts))
    for [symbol, count] in sorted(counts.items()):
        if count != 9:
            raise InvalidSymbolCount('color %r appears %s times, not 9' %
                    (symbol, count))

    # The centers define which color goes on which face
    centers = [s[f] for f in facelets.CENTER_FACELETS]
    if len(set(centers)) != 6:
        raise InvalidPermutation('center stickers must all be different')
    color_map = {symbol: c for [c, symbol] in enumerate(centers)}
    colors = [color_map[symbol] for symbol in s]

    [edges, edge_perm] = decode_pieces(colors, facelets.EDGE_FACELETS,
            EDGE_LOOKUP, 'edge')
    [corners, corner_perm] = decode_pieces(colors, facelets.CORNER_FACELETS,
            CORNER_LOOKUP, 'corner')

    if perm_parity(edge_perm) != perm_parity(corner_perm):
        raise InvalidPermutation('corner and edge permutation parities differ '
                '(two pieces swapped)')

    twist = 0
    for corner in corners:
        twist += corner.index(W) if W in corner else corner.index(Y)
    if twist % 3:
        raise InvalidOrientation('corner twist is %s mod 3, not 0' % (twist % 3))

    flip = sum(solver.is_edge_flipped(edge, i) for [i, edge] in enumerate(edges))
    if flip % 2:
        raise InvalidOrientation('an odd number of edges are flipped')

    return solver.Cube(edges=edges, corners=corners)

def is_valid(s):
    try:
        validate(s)
    except InvalidCube as e:
        log.debug('invalid cube %r: %s', s, e)
        return (False, e)
    return (True, None)
