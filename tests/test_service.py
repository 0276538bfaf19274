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
from fastapi.testclient import TestClient

import server
import service
import solver
import validate
from facelets import Move, apply_move, apply_moves

def slow_tables(delay, calls):
    # Stand-in for a cold start: the first call takes a while, later ones
    # find the tables ready
    def init_tables(path=None):
        if not calls:
            time.sleep(delay)
        calls.append(path)
    return init_tables

def test_timeout_starts_after_tables(monkeypatch, solved):
    calls = []
    monkeypatch.setattr(solver, 'init_tables', slow_tables(1.0, calls))
    state = apply_move(solved, Move('R', 3))
    # The table load takes longer than the timeout, but the search itself
    # is quick
    steps = service.get_solution(state.to_string(), timeout=0.5)
    assert [s.notation for s in steps] == ['R']
    assert calls

def test_returns_within_timeout(monkeypatch, solved):
    calls = []
    monkeypatch.setattr(solver, 'init_tables', slow_tables(1.0, calls))
    state = apply_moves(solved, "R U F' L2 D B' R2 U'")
    start = time.time()
    try:
        steps = service.get_solution(state.to_string(), timeout=2,
                time_limit=0.5)
    except solver.SolveTimeout:
        steps = None
    elapsed = time.time() - start
    assert elapsed < 1.0 + 2 + 1
    if steps is not None:
        moves = [Move.parse(s.notation) for s in steps]
        assert apply_moves(state, moves).is_solved()

def test_decodes_once(monkeypatch, solved):
    decoded = []
    real_validate = validate.validate
    def counting_validate(s):
        decoded.append(s)
        return real_validate(s)
    monkeypatch.setattr(validate, 'validate', counting_validate)
    state = apply_moves(solved, "F2 U L'")
    service.get_solution(state.to_string(), max_probes=5)
    assert len(decoded) == 1

def test_rejects_before_loading_tables(monkeypatch):
    calls = []
    monkeypatch.setattr(solver, 'init_tables', slow_tables(0, calls))
    with pytest.raises(validate.InvalidLength):
        service.get_solution('W' * 53)
    assert not calls

def test_server_loads_tables_on_startup(monkeypatch):
    calls = []
    monkeypatch.setattr(solver, 'init_tables', slow_tables(0, calls))
    with TestClient(server.app) as client:
        assert calls == [None]
        assert client.get('/health').json() == {'status': 'ok'}
