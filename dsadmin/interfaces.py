from zope.interface import Interface, Attribute


class ITaskConfig(Interface):
    def getScheduledTasksBaseDN():
        """
        Get the DN of the container holding scheduled task entries.

        @return: The container DN.

        @rtype: ldaptor.protocols.ldap.distinguishedname.DistinguishedName
        """

    def getDecodeFallback():
        """
        Should decodeTask fall back to a generic task when a known
        task type rejects an entry?

        @rtype: bool
        """

    def copy(**kw):
        """
        Make a copy of this configuration, with the given keyword
        arguments overriding the stored values.
        """


class ITask(Interface):
    """
    A directory server administrative task.

    A task is built from typed arguments, from a task entry read from
    the server or from a map of task properties. It can always be
    rendered back into a task entry.
    """

    taskClassName = Attribute("Server-side implementation class of the task.")

    def getTaskID():
        """Return the unique identifier of this task."""

    def getState():
        """Return the TaskState of this task."""

    def createTaskEntry():
        """
        Render this task as a directory entry.

        Calling this has no side effects, and the result only depends on
        the current field values of the task.

        @rtype: dsadmin.entry.TaskEntry
        """

    def getTaskPropertyValues():
        """
        Return a dict mapping every TaskProperty this task type declares
        to the list of its current values.
        """


class IControl(Interface):
    """An LDAP control with an OID, a criticality and an optional value."""

    def getOID():
        """Return the control OID as text."""

    def isCritical():
        """Return True if the server must reject the request when it does
        not support the control."""

    def getValue():
        """Return the encoded control value as bytes, or None."""

    def toJSON():
        """Return the JSON-compatible dict representation."""


class ILogMessage(Interface):
    """One parsed access log line."""

    def getTimestamp():
        """Return the aware datetime of the message."""

    def getNamedValue(name):
        """Return the value of the named token, or None."""
