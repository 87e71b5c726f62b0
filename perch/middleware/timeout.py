#
# perch/middleware/timeout.py
#

import datetime


class Timeout:
    """
    Middleware bounding the rest of the chain with a deadline.

    The request handed downstream carries a context derived from the
    incoming one which expires after `seconds`. Downstream code observes it
    through ``req.context``; nothing is interrupted forcibly.
    """

    def __init__(self, seconds):
        if isinstance(seconds, datetime.timedelta):
            seconds = seconds.total_seconds()
        if seconds <= 0:
            raise ValueError("Timeout must be positive, got %r" % seconds)
        self.seconds = seconds

    def __call__(self, req, res, next):
        ctx, cancel = req.context.with_timeout(self.seconds)
        try:
            next(req.with_context(ctx), res)
        finally:
            cancel()
