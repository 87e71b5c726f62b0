#
# perch/path_builder.py
#
"""
Fluent construction of route paths and their dispatch keys.

.. code:: python

    users = PathBuilder('users')
    profile = users.append(':id', 'profile')

    profile.path            #=> '/users/:id/profile'
    profile.methods().GET   #=> 'GET /users/:id/profile'
"""

from collections import namedtuple

from perch.http.methods import HTTPMethod


HTTPMethods = namedtuple('HTTPMethods', [
    'GET',
    'POST',
    'PUT',
    'PATCH',
    'DELETE',
])
HTTPMethods.__doc__ = "The dispatch keys of one path, one per routable method."


class PathBuilder:
    """
    An immutable, normalized url path.

    The path always starts with a '/' and never ends with one, unless it
    is the root path '/' itself. :meth:`append` returns a new builder and
    leaves this one untouched.
    """

    __slots__ = ('_base', )

    def __init__(self, base=''):
        if not base.startswith('/'):
            base = '/' + base
        if base != '/':
            base = base.rstrip('/') or '/'
        object.__setattr__(self, '_base', base)

    def __setattr__(self, name, value):
        raise AttributeError("%s is immutable" % type(self).__name__)

    @property
    def path(self):
        return self._base

    def append(self, *parts):
        """
        Returns a new builder with `parts` joined by '/' added to the end of
        this path. Slashes at the start and end of the joined parts are
        dropped, so parts may be given with or without them.
        """
        joined = '/'.join(parts).strip('/')
        if not joined:
            return self
        if self._base == '/':
            return PathBuilder('/' + joined)
        return PathBuilder(self._base + '/' + joined)

    def key(self, method):
        """The dispatch key of this path for a single method."""
        return "%s %s" % (method, self._base)

    def methods(self):
        """
        Returns the dispatch keys ('GET /path', 'POST /path', ...) of this
        path as an :class:`HTTPMethods` tuple.
        """
        return HTTPMethods(
            GET=self.key(HTTPMethod.GET),
            POST=self.key(HTTPMethod.POST),
            PUT=self.key(HTTPMethod.PUT),
            PATCH=self.key(HTTPMethod.PATCH),
            DELETE=self.key(HTTPMethod.DELETE),
        )

    def __str__(self):
        return self._base

    def __repr__(self):
        return "PathBuilder(%r)" % self._base

    def __eq__(self, other):
        if isinstance(other, PathBuilder):
            return self._base == other._base
        return NotImplemented

    def __hash__(self):
        return hash(self._base)
