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

import logging
import time

from facelets import CubeState
import config
import solver
import steps
import validate
from util import time_execution

log = logging.getLogger(__name__)

# Solve a cube given as a sticker string, returning the list of steps. Raises
# validate.InvalidCube for cubes that can't be solved, solver.SolveTimeout if
# the search runs out of time, and solver.InternalSearchExhausted on a bug.
# The timeout covers the search only: loading or generating the tables comes
# first and isn't counted.
def get_solution(cube_state, timeout=None, max_probes=None, time_limit=None):
    try:
        cube = validate.validate(cube_state)
    except validate.InvalidCube as e:
        log.info('rejected cube: %s: %s', e.reason, e)
        raise
    if isinstance(cube_state, CubeState):
        state = cube_state
    else:
        state = CubeState(cube_state)

    solver.init_tables()

    if timeout is None:
        timeout = config.SOLVE_TIMEOUT
    deadline = time.time() + timeout
    with time_execution('solve', logger=log):
        moves = solver.solve(state, cube=cube, max_probes=max_probes,
                time_limit=time_limit, deadline=deadline)
    log.info('solved %s in %d moves: %s', state, len(moves),
            ' '.join(map(str, moves)))
    return steps.format_solution(moves)

def check_state(cube_state):
    return validate.is_valid(cube_state)
