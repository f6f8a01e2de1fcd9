"""
Evaluate one big integer expression and print the result in decimal.
OP is one of  + - * / % & | ^ << >>
Put '--' before a negative LHS so that it is not taken for an option.
"""

import sys

from py.io import ansi_print

from cowint.config.bigintoption import get_bigint_config, apply_config
from cowint.config.bigintoption import save_state, restore_state
from cowint.config.config import to_optparse, ConfigError
from cowint.rlib.rbigint import bigint


def _quotient(division):
    if division == 'truncate':
        return lambda a, b: a.divrem(b)[0]
    return bigint.floordiv


def _remainder(division):
    if division == 'truncate':
        return lambda a, b: a.divrem(b)[1]
    return bigint.mod


def _shift(method):
    return lambda a, b: method(a, b.toint())


BINARY_OPS = {
    '+': lambda division: bigint.add,
    '-': lambda division: bigint.sub,
    '*': lambda division: bigint.mul,
    '/': _quotient,
    '%': _remainder,
    '&': lambda division: bigint.and_,
    '|': lambda division: bigint.or_,
    '^': lambda division: bigint.xor,
    '<<': lambda division: _shift(bigint.lshift),
    '>>': lambda division: _shift(bigint.rshift),
}

UNARY_OPS = {
    '~': bigint.invert,
    'neg': bigint.neg,
}


class UsageError(Exception):
    pass


def evaluate(args, division='floor'):
    """Evaluate the expression given as a list of command line words."""
    if len(args) == 1:
        return bigint(args[0])
    if len(args) == 2:
        op, value = args
        if op not in UNARY_OPS:
            raise UsageError("unknown unary operator %r" % (op,))
        return UNARY_OPS[op](bigint(value))
    if len(args) == 3:
        lhs, op, rhs = args
        if op not in BINARY_OPS:
            raise UsageError("unknown operator %r" % (op,))
        return BINARY_OPS[op](division)(bigint(lhs), bigint(rhs))
    raise UsageError("expected LHS [OP RHS], got %d arguments" % (len(args),))


USAGE = """%prog [options] LHS [OP RHS]
       %prog [options] ~|neg VALUE"""


def get_standard_options():
    config = get_bigint_config()
    parser = to_optparse(config)
    parser.set_usage(USAGE)
    parser.set_description(__doc__.strip())
    return config, parser


def process_options(parser, argv=None):
    parser.disable_interspersed_args()
    options, args = parser.parse_args(argv)
    return args


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    config, parser = get_standard_options()
    args = process_options(parser, argv)
    state = save_state()
    try:
        return execute(config, parser, args)
    finally:
        restore_state(state)


def execute(config, parser, args):
    try:
        apply_config(config)
    except ConfigError as e:
        parser.error(str(e))
    try:
        result = evaluate(args, config.arith.division)
    except UsageError as e:
        parser.error(str(e))
    except (ArithmeticError, ValueError) as e:
        ansi_print("error: %s" % (e,), (1, 31))
        return 1
    print(result.str())
    if config.stats:
        print("storage: %(mode)s, %(limbs)d limbs, capacity %(capacity)d, "
              "refcount %(refcount)d" % result.storage_info())
    return 0
