#
#  This file is part of vside, Visual Studio projects generator
#
#  Copyright (C) 2012-2013 Vaclav Slavik
#
#  Permission is hereby granted, free of charge, to any person obtaining a copy
#  of this software and associated documentation files (the "Software"), to
#  deal in the Software without restriction, including without limitation the
#  rights to use, copy, modify, merge, publish, distribute, sublicense, and/or
#  sell copies of the Software, and to permit persons to whom the Software is
#  furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included in
#  all copies or substantial portions of the Software.
#
#  THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
#  IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
#  FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
#  AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
#  LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
#  FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
#  IN THE SOFTWARE.
#

"""
Live container classes used by the build model.

Unlike plain lists, these containers let clients subscribe to elements that
don't exist yet: an action registered with :meth:`DomainObjectSet.all` is
invoked for every element already in the container and then for every element
added later. This is how plugins react to components, binaries and tasks
regardless of the order in which the build is configured.
"""

import logging
logger = logging.getLogger("vside.containers")

from vside.error import NotFoundError


class DomainObjectSet(object):
    """
    Insertion-ordered set of model objects with live subscriptions.

    Elements are expected to have a ``name`` attribute if they are to be
    looked up with :meth:`__getitem__`.
    """
    def __init__(self):
        self._items = []
        self._actions = []

    def add(self, obj):
        """
        Adds *obj* to the set and notifies all subscribers. Returns
        :const:`False` if the object was already present.
        """
        if obj in self._items:
            return False
        self._items.append(obj)
        for action in list(self._actions):
            action(obj)
        return True

    def all(self, action):
        """
        Runs *action* for all current elements and for all elements added in
        the future.
        """
        self._actions.append(action)
        for obj in list(self._items):
            action(obj)

    def with_type(self, cls):
        """Returns live view of the elements that are instances of *cls*."""
        return FilteredSet(self, lambda x: isinstance(x, cls))

    def matching(self, predicate):
        """Returns live view of the elements for which *predicate* is true."""
        return FilteredSet(self, predicate)

    def find(self, name):
        """Returns the element called *name* or :const:`None`."""
        for x in self._items:
            if x.name == name:
                return x
        return None

    def __getitem__(self, name):
        x = self.find(name)
        if x is None:
            raise NotFoundError("no element named \"%s\"" % name)
        return x

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __contains__(self, obj):
        return obj in self._items


class FilteredSet(object):
    """
    Live filtered view of a :class:`DomainObjectSet`.
    """
    def __init__(self, parent, predicate):
        self.parent = parent
        self.predicate = predicate

    def all(self, action):
        def _filtered(obj):
            if self.predicate(obj):
                action(obj)
        self.parent.all(_filtered)

    def with_type(self, cls):
        return FilteredSet(self.parent, lambda x: self.predicate(x) and isinstance(x, cls))

    def __iter__(self):
        return iter([x for x in self.parent if self.predicate(x)])

    def __len__(self):
        return len(list(iter(self)))


class FinalizableSet(DomainObjectSet):
    """
    Set of elements that go through two stages: they are first added (and can
    still be modified) and later finalized, after which they must not change.

    Elements must implement ``finalize()`` and ``is_finalized``.
    """
    def __init__(self):
        super(FinalizableSet, self).__init__()
        self._finalize_actions = []

    def when_element_finalized(self, action):
        """
        Runs *action* for every element that is finalized, including those
        finalized before this call.
        """
        self._finalize_actions.append(action)
        for obj in list(self._items):
            if obj.is_finalized:
                action(obj)

    def finalize(self, obj):
        """
        Finalizes *obj*, which must be an element of this set, and notifies
        subscribers. Finalizing an already finalized element does nothing.
        """
        assert obj in self._items, "finalizing element not in the set"
        if obj.is_finalized:
            return
        obj.finalize()
        logger.debug("finalized %s", obj)
        for action in list(self._finalize_actions):
            action(obj)

    def finalize_all(self):
        """Finalizes all elements not finalized yet, in insertion order."""
        for obj in list(self._items):
            self.finalize(obj)
