"""
A simple color logger.
"""

import py
from py.io import ansi_print

LOG_CHANNELS = ("rshared", "rhybrid", "rbigint")


class AnsiLog:
    KW_TO_COLOR = {
        # color supress
        'rshared': ((34,), False),
        'rhybrid': ((35,), False),
        'rbigint': ((1,), False),
        'clone': ((33,), False),
        'promote': ((32,), False),
        'divide': ((36,), False),
        'WARNING': ((31,), False),
        'ERROR': ((1, 31), False),
    }

    def __init__(self, kw_to_color={}, file=None):
        self.kw_to_color = self.KW_TO_COLOR.copy()
        self.kw_to_color.update(kw_to_color)
        self.file = file

    def __call__(self, msg):
        keywords = []
        esc = []
        for kw in msg.keywords:
            color, supress = self.kw_to_color.get(kw, (None, False))
            if color:
                esc.extend(color)
            if not supress:
                keywords.append(kw)
        esc = tuple(esc)
        for line in msg.content().splitlines():
            ansi_print("[%s] %s" % (":".join(keywords), line), esc,
                       file=self.file)


ansi_log = AnsiLog()


def enable_logging(consumer=ansi_log):
    for name in LOG_CHANNELS:
        py.log.setconsumer(name, consumer)


def disable_logging():
    for name in LOG_CHANNELS:
        py.log.setconsumer(name, None)
