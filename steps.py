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

from facelets import FACE_NAMES

# One instruction for a person turning the cube by hand

DIRECTION_STR = {
    1: 'clockwise',
    2: '180 degrees',
    3: 'counter-clockwise',
}

class Step(collections.namedtuple('Step', 'instruction move is_clockwise '
        'face_to_blink turns notation')):
    __slots__ = ()

    def to_json(self):
        return {
            'instruction': self.instruction,
            'move': self.move,
            'isClockwise': self.is_clockwise,
            'faceToBlink': self.face_to_blink,
            'turns': self.turns,
            'notation': self.notation,
        }

def format_move(move):
    instruction = 'Rotate the %s face %s' % (FACE_NAMES[move.face],
            DIRECTION_STR[move.turns])
    return Step(instruction, move.face, move.turns == 1, move.face, move.turns,
            str(move))

def format_solution(moves):
    return [format_move(m) for m in moves]
