import py

from cowint.config.config import OptionDescription, BoolOption, IntOption
from cowint.config.config import ChoiceOption, Config, ConfigError
from cowint.rlib import rbigint
from cowint.rlib.rhybrid import LimbVector
from cowint.tool import ansi_print

DIVISION_MODES = ["floor", "truncate"]

bigint_optiondescription = OptionDescription("cowint", "Big integer options", [
    OptionDescription("storage", "Limb storage options", [
        IntOption("inline_capacity",
                  "number of limbs kept inline before moving to shared "
                  "storage (0: as many as fit in a shared handle)",
                  default=0, cmdline="--inline-capacity"),
    ]),

    OptionDescription("arith", "Arithmetic options", [
        BoolOption("check_limbs",
                   "check the range of every limb of every result",
                   default=False, cmdline="--check-limbs"),
        ChoiceOption("division", "rounding of the / and % operators",
                     DIVISION_MODES, default="floor",
                     cmdline="--division"),
    ]),

    BoolOption("log", "print storage and division events on stderr",
               default=False, cmdline="--log"),
    BoolOption("stats", "print the storage of the result",
               default=False, cmdline="--stats"),
])


def get_bigint_config(**overrides):
    """Return a fresh Config; overrides are given as dotted paths,
    e.g. get_bigint_config(**{'arith.division': 'truncate'})."""
    return Config(bigint_optiondescription, **overrides)


def apply_config(config):
    """Push the values of 'config' into the library."""
    capacity = config.storage.inline_capacity
    if capacity < 0:
        raise ConfigError("inline capacity must not be negative, got %d"
                          % (capacity,))
    LimbVector.CAPACITY = capacity
    rbigint.CHECK_LIMBS = config.arith.check_limbs
    if config.log:
        ansi_print.enable_logging()
    else:
        ansi_print.disable_logging()


def save_state():
    """Snapshot what apply_config() changes, for restore_state()."""
    return LimbVector.CAPACITY, rbigint.CHECK_LIMBS, py.log._getstate()


def restore_state(state):
    capacity, check_limbs, logstate = state
    LimbVector.CAPACITY = capacity
    rbigint.CHECK_LIMBS = check_limbs
    py.log._setstate(logstate)
