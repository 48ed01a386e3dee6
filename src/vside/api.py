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

from abc import ABCMeta, abstractmethod

from vside import error
from vside.utils import capitalize
from vside.tasks import Delete


# Metaclass used for all extensions in order to implement automatic
# extensions registration. For internal use only.
class _ExtensionMetaclass(ABCMeta):
    def __init__(cls, name, bases, dct):
        super(_ExtensionMetaclass, cls).__init__(name, bases, dct)

        if len(bases) > 1:
            assert bases[0] is Extension, "multiple inheritance only supported if first base class is Extension"

        # skip base classes, only register implementations:
        if name == "Extension":
            return
        if cls.__base__ is Extension:
            # initialize list of implementations for direct extensions:
            cls._implementations = {}
            return

        if cls.name is None:
            # This must be a helper class derived from a particular extension,
            # but not a fully implemented extension; see e.g. IdePlugin.
            return

        # for "normal" implementations of extensions, find the extension
        # type class (we need to handle the case of deriving from an existing
        # extension):
        base = cls.__base__
        while not base.__base__ is Extension:
            base = base.__base__
        if cls.name in base._implementations:
            existing = base._implementations[cls.name]
            raise RuntimeError("conflicting implementations for %s \"%s\": %s.%s and %s.%s" %
                               (base.__name__,
                                cls.name,
                                cls.__module__, cls.__name__,
                                existing.__module__, existing.__name__))
        base._implementations[cls.name] = cls



# instances of all already requested extensions, keyed by (type,name)
_extension_instances = {}


class Extension(object, metaclass=_ExtensionMetaclass):
    """
    Base class for all vside extensions.

    Extensions are singletons, there's always only one instance of given
    extension at runtime. Use the get() method called on appropriate extension
    type to obtain it. For example:

        vs = Plugin.get("visual-studio")
        # ...do something with it...

    Because of this, extensions must not keep per-build state in their own
    attributes; such state belongs to the build unit they are applied to.

    .. attribute:: name

       Use-visible name of the extension.
    """

    name = None

    @classmethod
    def get(cls, name=None):
        """
        This class method is used to get an instance of an extension. In can
        be used in one of two ways:

        1. When called on an extension type class with *name* argument, it
           returns instance of extension with given name and of the extension
           type on which this classmethod was called:

           >>> vside.api.Plugin.get("visual-studio")
               <vside.plugins.visualstudio.VisualStudioPlugin object at 0x2232950>

        2. When called without the *name* argument, it must be called on
           particular extension class and returns its (singleton) instance:

           >>> VisualStudioPlugin.get()
               <vside.plugins.visualstudio.VisualStudioPlugin object at 0x2232950>

        :param name: Name of the extension to read; this corresponds to
            class' "name" attribute. If not specified, then get() must be
            called on a extension, not extension base class.
        """
        if name is None:
            assert cls.name is not None, \
                   "get() can only be called on fully implemented extension"
            name = cls.name
            # find the extension base class:
            while not cls.__base__ is Extension:
                cls = cls.__base__
        else:
            assert cls.name is None, \
                   "get(name) can only be called on extension base class"

        key = (cls, name)
        if key not in _extension_instances:
            try:
                impl = cls._implementations[name]
            except KeyError:
                raise error.NotFoundError("unknown %s \"%s\"" % (cls.__name__.lower(), name))
            _extension_instances[key] = impl()
        return _extension_instances[key]

    @classmethod
    def all(cls):
        """
        Returns iterator over instances of all implementations of this extension
        type.
        """
        for name in cls.all_names():
            yield cls.get(name)

    @classmethod
    def all_names(cls):
        """
        Returns names of all implementations of this extension type.
        """
        return sorted(cls._implementations.keys())


class Property(object):
    """
    Typed setting with a documented default value.

    .. attribute:: name

       Name of the property, e.g. ``"version"``.

    .. attribute:: type

       Python type (or tuple of types) that values must be instances of.

    .. attribute:: default

       Default value of the property. May be a callable, in which case it is
       called with the object the property is read from and the returned
       value is used.

    .. attribute:: choices

       If not :const:`None`, list of all allowed values.

    .. attribute:: doc

       Optional documentation for the property.
    """
    def __init__(self, name, type, default=None, choices=None, doc=None):
        self.name = name
        self.type = type
        self.default = default
        self.choices = choices
        self.doc = doc

    def __str__(self):
        return "property %s" % self.name

    def default_value(self, for_obj):
        """Returns the value of the property if it wasn't set explicitly."""
        if callable(self.default):
            return self.default(for_obj)
        return self.default

    def validate(self, value):
        """Checks that *value* is acceptable for this property."""
        # bool is a subclass of int, don't let True pass as a version number
        if isinstance(value, bool) and self.type is not bool:
            raise error.TypeError(self, value, "expected %s" % self.type.__name__)
        if not isinstance(value, self.type):
            raise error.TypeError(self, value, "expected %s" % self.type.__name__)
        if self.choices is not None and value not in self.choices:
            raise error.TypeError(self, value,
                                  "must be one of %s" % ", ".join(str(x) for x in self.choices))


class PropertiesHolder(object):
    """
    Mixin for objects configured using :class:`Property` values, accessed with
    dictionary-like syntax:

    >>> ext["version"] = 2019
    >>> ext["version"]
        2019

    Derived classes list their properties in the :attr:`properties` class
    attribute.
    """

    #: List of all properties supported by this object, as
    #: :class:`Property` instances.
    properties = []

    def _get_prop(self, name):
        for p in self.properties:
            if p.name == name:
                return p
        raise error.NotFoundError("unknown property \"%s\"" % name)

    def _property_values(self):
        try:
            return self.__dict__["_values"]
        except KeyError:
            self._values = {}
            return self._values

    def __getitem__(self, name):
        prop = self._get_prop(name)
        values = self._property_values()
        if name in values:
            return values[name]
        return prop.default_value(self)

    def __setitem__(self, name, value):
        prop = self._get_prop(name)
        prop.validate(value)
        self._property_values()[name] = value

    def is_explicitly_set(self, name):
        """Returns true if the property *name* was set and not defaulted."""
        self._get_prop(name)
        return name in self._property_values()


class Plugin(Extension):
    """
    Plugins add functionality to build units: they are applied to a unit once
    and usually register extensions, react to components being added and
    create tasks.
    """

    def __str__(self):
        return "plugin %s" % self.name

    @abstractmethod
    def apply(self, unit):
        """
        Applies the plugin to :class:`vside.model.BuildUnit` *unit*.

        This is called during the configuration phase, possibly before any
        components were added to the unit.
        """
        raise NotImplementedError


class IdePlugin(Plugin):
    """
    Base class for plugins generating IDE files.

    Takes care of creating the lifecycle task (e.g. ``visualStudio``) which
    generates all of the IDE files and the corresponding clean task (e.g.
    ``cleanVisualStudio``) which deletes them.
    """

    #: Name of the lifecycle task, must be set by derived classes.
    lifecycle_task_name = None

    @property
    def clean_task_name(self):
        return "clean" + capitalize(self.lifecycle_task_name)

    def apply(self, unit):
        lifecycle = unit.tasks.maybe_create(self.lifecycle_task_name)
        lifecycle.group = "IDE"
        lifecycle.description = "Generates IDE configuration files."

        clean = unit.tasks.maybe_create(self.clean_task_name, Delete)
        clean.group = "IDE"
        clean.description = "Cleans IDE configuration files."

        self.on_apply(unit)

    def get_lifecycle_task(self, unit):
        return unit.tasks[self.lifecycle_task_name]

    def get_clean_task(self, unit):
        return unit.tasks[self.clean_task_name]

    @abstractmethod
    def on_apply(self, unit):
        """
        Plugin-specific part of :meth:`apply()`, called after the lifecycle
        and clean tasks were created.
        """
        raise NotImplementedError
