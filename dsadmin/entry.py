"""
Task entries: ldaptor entries that keep the order of attribute values.

Task entries carry ordered multi-valued attributes (dependency IDs, index
names, command arguments), which plain ldaptor attribute sets would
reorder.
"""

from copy import deepcopy

from ldaptor import attributeset, entry
from ldaptor._encoder import to_unicode


class OrderedAttributeSet(attributeset.LDAPAttributeSet):
    """
    An LDAPAttributeSet iterating over its values in insertion order.
    """

    def __init__(self, key, *a, **kw):
        super().__init__(key)
        self._order = []
        if a:
            self.update(*a)

    def __iter__(self):
        return iter(list(self._order))

    def __repr__(self):
        attributes = ", ".join([repr(x) for x in self._order])
        return "%s(%r, [%s])" % (self.__class__.__name__, self.key, attributes)

    def add(self, value):
        if value not in self:
            self._order.append(value)
        super().add(value)

    def update(self, *others):
        for other in others:
            for value in other:
                self.add(value)

    def discard(self, value):
        if value in self:
            self._order.remove(value)
        super().discard(value)

    def remove(self, value):
        super().remove(value)
        self._order.remove(value)

    def pop(self):
        if not self._order:
            raise KeyError("pop from an empty set")
        value = self._order[0]
        self.remove(value)
        return value

    def clear(self):
        super().clear()
        self._order = []

    def __deepcopy__(self, memo):
        result = self.__class__(self.key)
        memo[id(self)] = result
        result.update(deepcopy(list(self), memo))
        return result


class TaskEntry(entry.BaseLDAPEntry):
    """
    A BaseLDAPEntry whose attribute values keep their order.

    Attribute names are case-insensitive, as with any ldaptor entry.
    """

    def buildAttributeSet(self, key, values):
        return OrderedAttributeSet(key, values)


def getAttributeValues(e, name):
    """
    Get all values of an attribute as text.

    @param e: any ldaptor entry.

    @param name: the attribute name, matched case-insensitively.

    @return: list of str, empty if the attribute is missing.
    """
    return [to_unicode(v) for v in e.get(name, [])]


def getAttributeValue(e, name):
    """
    Get the first value of an attribute as text, or None.
    """
    values = getAttributeValues(e, name)
    if values:
        return values[0]
    return None


def hasObjectClass(e, name):
    name = name.lower()
    for value in getAttributeValues(e, "objectClass"):
        if value.lower() == name:
            return True
    return False
