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

import os

# Settings, each overridable from the environment

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))

TABLE_CACHE_PATH = os.environ.get('CUBESOLVE_TABLE_CACHE',
        os.path.join(ROOT_DIR, 'rsrc', 'solver-tables.bin'))

# Number of phase 2 probes to run after finding the first solution, looking
# for a shorter one
MAX_PROBES = int(os.environ.get('CUBESOLVE_MAX_PROBES', 100))
# Seconds after which the best solution found so far is returned
SEARCH_TIME_LIMIT = float(os.environ.get('CUBESOLVE_SEARCH_TIME_LIMIT', 2.0))
# Seconds after which a solve request gives up if it has no solution yet
SOLVE_TIMEOUT = float(os.environ.get('CUBESOLVE_SOLVE_TIMEOUT', 30))

LOG_LEVEL = os.environ.get('CUBESOLVE_LOG_LEVEL', 'INFO').upper()

HOST = os.environ.get('CUBESOLVE_HOST', '127.0.0.1')
PORT = int(os.environ.get('CUBESOLVE_PORT', 8080))

# Search bounds. Every legal cube can be solved in 20 moves, and two-phase
# solutions come in well under these
MAX_SOLUTION_LENGTH = 30
PHASE_2_MAX_DEPTH = 18
