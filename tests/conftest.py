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

import random

import pytest

import facelets
import solver

@pytest.fixture(scope='session', autouse=True)
def solver_tables():
    # Generating the tables takes a minute or two the first time; after that
    # they load from the cache
    solver.init_tables()

@pytest.fixture
def rng():
    return random.Random(1234)

@pytest.fixture
def solved():
    return facelets.CubeState.solved()
