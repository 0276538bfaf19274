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

from facelets import Move
from steps import Step, format_move, format_solution

def test_clockwise():
    step = format_move(Move('R', 1))
    assert step == Step('Rotate the Right face clockwise', 'R', True, 'R', 1, 'R')

def test_counter_clockwise():
    step = format_move(Move('U', 3))
    assert step.instruction == 'Rotate the Up face counter-clockwise'
    assert step.move == 'U'
    assert not step.is_clockwise
    assert step.notation == "U'"

def test_double():
    step = format_move(Move('B', 2))
    assert step.instruction == 'Rotate the Back face 180 degrees'
    assert not step.is_clockwise
    assert step.turns == 2
    assert step.face_to_blink == 'B'

def test_to_json():
    assert format_move(Move('L', 3)).to_json() == {
        'instruction': 'Rotate the Left face counter-clockwise',
        'move': 'L',
        'isClockwise': False,
        'faceToBlink': 'L',
        'turns': 3,
        'notation': "L'",
    }

def test_format_solution():
    moves = [Move('D', 1), Move('F', 2)]
    assert [s.notation for s in format_solution(moves)] == ['D', 'F2']
    assert format_solution([]) == []
