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

import contextlib
import logging
import time
from typing import List, Optional

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import service
import solver
import validate

log = logging.getLogger(__name__)

# HTTP interface. The solve route is a plain function, so FastAPI runs it in
# its worker threadpool and requests can solve concurrently.

class CubeRequest(BaseModel):
    cubeState: str

class StepModel(BaseModel):
    instruction: str
    move: str
    isClockwise: bool
    faceToBlink: str
    turns: int
    notation: str

class SolveResponse(BaseModel):
    steps: List[StepModel]
    solveTime: int
    moveCount: int

class ValidateResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
    message: Optional[str] = None

class ErrorResponse(BaseModel):
    error: str
    message: str

# Load or build the solver tables before taking requests, so the first solve
# doesn't wait for them
@contextlib.asynccontextmanager
async def lifespan(app):
    await run_in_threadpool(solver.init_tables)
    yield

app = FastAPI(title='CubeSolve', lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_methods=['*'],
    allow_headers=['*'],
)

@app.exception_handler(validate.InvalidCube)
def invalid_cube_handler(request, exc):
    return JSONResponse(status_code=400,
            content={'error': exc.reason, 'message': exc.message})

@app.exception_handler(solver.SolveTimeout)
def solve_timeout_handler(request, exc):
    log.warning('solve timed out: %s', exc)
    return JSONResponse(status_code=503, headers={'Retry-After': '1'},
            content={'error': 'SolveTimeout', 'message': str(exc)})

@app.get('/health')
def health():
    return {'status': 'ok'}

@app.post('/api/solve', response_model=SolveResponse,
        responses={400: {'model': ErrorResponse}, 503: {'model': ErrorResponse}})
def solve(request: CubeRequest):
    start = time.time()
    solution = service.get_solution(request.cubeState)
    solve_ms = int((time.time() - start) * 1000)
    return SolveResponse(steps=[StepModel(**s.to_json()) for s in solution],
            solveTime=solve_ms, moveCount=len(solution))

@app.post('/api/validate', response_model=ValidateResponse)
def check(request: CubeRequest):
    [valid, error] = service.check_state(request.cubeState)
    if valid:
        return ValidateResponse(valid=True)
    return ValidateResponse(valid=False, error=error.reason, message=error.message)
