#
# perch/middleware/logger.py
#
"""
Provides middleware which logs every request once it has been answered.
"""

import time
import logging

from termcolor import colored

logger = logging.getLogger(__name__)


class Logger:
    """
    Middleware logging method, path, caller address and the time the rest
    of the chain took, after the downstream handler has returned:

        GET /users accessed 127.0.0.1:52114 in 1.532ms
    """

    UNIT_TO_FACTOR_MAP = {
        's': 1,
        'ms': 1000,
        'us': 1000000,
    }

    METHOD_COLOR = 'cyan'

    def __init__(self, log=None, digits=3, units='ms', color=True):
        """
        Construct Logger middleware.

        Parameters:
            log (logging.Logger or None): Where to write, this module's
                logger by default
            digits (int): precision
            units (str): Time units (default: milliseconds 'ms')
            color (bool): Highlight the method with terminal colors
        """
        if units not in self.UNIT_TO_FACTOR_MAP:
            raise ValueError("Unknown time unit %r" % units)
        self.log = log or logger
        self.digits = digits
        self.units = units
        self.color = color

    def __call__(self, req, res, next):
        start_time = time.monotonic()
        next(req, res)
        elapsed = self.format_timediff(time.monotonic() - start_time)

        method = colored(req.method, self.METHOD_COLOR) if self.color else req.method
        self.log.info("%s %s accessed %s in %s%s",
                      method, req.path, req.remote_addr, elapsed, self.units)

    def format_timediff(self, td):
        factor = self.UNIT_TO_FACTOR_MAP[self.units]
        return str(round(factor * td, self.digits))
