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

import argparse
import json
import logging
import random
import sys

import config
import facelets
import service
import solver
import validate

log = logging.getLogger(__name__)

def cmd_solve(args):
    try:
        solution = service.get_solution(args.state, timeout=args.timeout,
                max_probes=args.probes)
    except validate.InvalidCube as e:
        print('%s: %s' % (e.reason, e), file=sys.stderr)
        return 1
    except solver.SolveTimeout as e:
        print('timed out: %s' % e, file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps([s.to_json() for s in solution], indent=2))
    else:
        print(' '.join(s.notation for s in solution) or '(solved)')
        for [i, s] in enumerate(solution):
            print('%2d. %s' % (i + 1, s.instruction))
    return 0

def cmd_validate(args):
    [valid, error] = service.check_state(args.state)
    if valid:
        print('valid')
        return 0
    print('%s: %s' % (error.reason, error))
    return 1

def cmd_scramble(args):
    rng = random.Random(args.seed)
    if args.moves:
        scramble = solver.gen_random_move_scramble(args.moves, rng=rng)
    else:
        scramble = solver.gen_random_state_scramble(rng=rng)
    state = facelets.apply_moves(facelets.CubeState.solved(), ' '.join(scramble))
    print(' '.join(scramble))
    print(state)
    return 0

def cmd_tables(args):
    solver.init_tables(args.path)
    return 0

def cmd_serve(args):
    import uvicorn
    uvicorn.run('server:app', host=args.host, port=args.port,
            log_level=config.LOG_LEVEL.lower())
    return 0

def main(argv=None):
    parser = argparse.ArgumentParser(description='Rubik\'s cube solver')
    parser.add_argument('-v', '--verbose', action='store_true',
            help='log search details')
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('solve', help='solve a cube given as 54 stickers '
            'in URFDLB order')
    p.add_argument(action='store', dest='state', help='sticker string')
    p.add_argument('--json', action='store_true', help='print steps as JSON')
    p.add_argument('-t', '--timeout', type=float, default=None,
            help='give up after this many seconds without a solution')
    p.add_argument('-p', '--probes', type=int, default=None,
            help='phase 2 probes to spend looking for shorter solutions')
    p.set_defaults(fn=cmd_solve)

    p = subparsers.add_parser('validate', help='check whether a cube is solvable')
    p.add_argument(action='store', dest='state', help='sticker string')
    p.set_defaults(fn=cmd_validate)

    p = subparsers.add_parser('scramble', help='print a scramble and the '
            'resulting sticker string')
    p.add_argument('-m', '--moves', type=int, default=0, help='random moves '
            'instead of a random state scramble')
    p.add_argument('-s', '--seed', type=int, default=None, help='random seed')
    p.set_defaults(fn=cmd_scramble)

    p = subparsers.add_parser('tables', help='generate or load the solver tables')
    p.add_argument('--path', default=None, help='table cache file, default %s' %
            config.TABLE_CACHE_PATH)
    p.set_defaults(fn=cmd_tables)

    p = subparsers.add_parser('serve', help='run the HTTP server')
    p.add_argument('--host', default=config.HOST)
    p.add_argument('--port', type=int, default=config.PORT)
    p.set_defaults(fn=cmd_serve)

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
            format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    return args.fn(args)

if __name__ == '__main__':
    sys.exit(main())
