#
# perch/http/context.py
#
"""
Cancellation signals attached to requests.

Every request carries a :class:`Context`. Middleware (see
:class:`perch.middleware.Timeout`) may derive a child context bounded by a
deadline and hand a request carrying it further down the chain. Nothing is
ever interrupted forcibly: handlers doing long or blocking work should poll
:attr:`Context.done`, call :meth:`Context.raise_if_done`, or use
:meth:`Context.wait` as an interruptible sleep.

.. code:: python

    def slow_report(req, res):
        for chunk in build_report():
            req.context.raise_if_done()
            ...
"""

import time
import threading

from perch.errors import Cancelled, DeadlineExceeded


class Context:
    """
    A cancellation signal with an optional deadline.

    Contexts form a tree: cancelling a context cancels all the contexts
    derived from it, and a child's deadline is never later than its
    parent's.
    """

    def __init__(self, parent=None, deadline=None):
        """
        Args:
            parent (Context or None): Context this one is derived from.
            deadline (float or None): Absolute :func:`time.monotonic`
                value after which the context counts as expired.
        """
        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline

        self.deadline = deadline
        self._parent = parent
        self._children = []
        self._error = None
        self._done = threading.Event()
        self._lock = threading.Lock()

        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls):
        """A root context that has no deadline."""
        return cls()

    def with_timeout(self, seconds):
        """
        Derive a child context which expires `seconds` from now.

        Returns:
            tuple: The child context and a function that cancels it.
                The cancel function should always be called once the work
                bound by the context is finished; it releases the timer.
        """
        child = Context(self, time.monotonic() + seconds)
        timer = threading.Timer(max(child.remaining(), 0),
                                child.cancel,
                                args=(DeadlineExceeded("context deadline exceeded"),))
        timer.daemon = True
        timer.start()

        def cancel():
            timer.cancel()
            child.cancel()

        return child, cancel

    def cancel(self, error=None):
        """
        Cancel this context and every context derived from it.
        Cancelling an already finished context does nothing.
        """
        with self._lock:
            if self._error is not None:
                return
            self._error = error or Cancelled("context canceled")
            children, self._children = self._children, []
            self._done.set()

        for child in children:
            child.cancel(self._error)

        if self._parent is not None:
            self._parent._release(self)

    @property
    def done(self):
        """True once the context is cancelled or its deadline passed."""
        if not self._done.is_set() and self.deadline is not None:
            if time.monotonic() >= self.deadline:
                self.cancel(DeadlineExceeded("context deadline exceeded"))
        return self._done.is_set()

    @property
    def error(self):
        """
        The reason the context finished: a :class:`Cancelled` or
        :class:`DeadlineExceeded` instance, None while still active.
        """
        if self.done:
            return self._error
        return None

    def remaining(self):
        """Seconds left until the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def wait(self, timeout=None):
        """
        Block until the context is done or `timeout` seconds elapse.

        Returns:
            bool: True if the context is done.
        """
        remaining = self.remaining()
        if remaining is not None and (timeout is None or remaining < timeout):
            timeout = max(remaining, 0)
        self._done.wait(timeout)
        return self.done

    def raise_if_done(self):
        """Raise the context's error if it has finished."""
        error = self.error
        if error is not None:
            raise error

    def _adopt(self, child):
        with self._lock:
            error = self._error
            if error is None:
                self._children.append(child)
        if error is not None:
            child.cancel(error)

    def _release(self, child):
        with self._lock:
            try:
                self._children.remove(child)
            except ValueError:
                pass

    def __repr__(self):
        state = 'done' if self.done else 'active'
        return "<%s %s deadline=%r>" % (type(self).__name__, state, self.deadline)
