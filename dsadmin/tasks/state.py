"""Task lifecycle states and failed dependency actions."""


class _NamedConstant:
    """A constant identified by its wire name."""

    _byName = None

    def __init__(self, name):
        self.name = name

    def getName(self):
        return self.name

    def __repr__(self):
        return "{}.{}".format(
            self.__class__.__name__,
            self.name.upper().replace("-", "_"),
        )

    def __str__(self):
        return self.name

    @classmethod
    def _register(klass, *constants):
        klass._byName = {}
        for c in constants:
            klass._byName[c.name] = c
            setattr(klass, c.name.upper().replace("-", "_"), c)

    @classmethod
    def values(klass):
        return list(klass._byName.values())

    @classmethod
    def forName(klass, name):
        """
        Look up a constant by name.

        Case is ignored and underscores may be used in place of dashes.

        @return: the constant, or None if the name is not known.
        """
        if name is None:
            return None
        return klass._byName.get(name.lower().replace("_", "-"))


PENDING = "pending"
RUNNING = "running"
COMPLETED = "completed"


class TaskState(_NamedConstant):
    """
    The state of a task, as reported by the server in ds-task-state.

    Transitions happen on the server only; a task object reflects the
    state held in the entry it was read from.
    """

    def __init__(self, name, category):
        _NamedConstant.__init__(self, name)
        self.category = category

    def isPending(self):
        return self.category == PENDING

    def isRunning(self):
        return self.category == RUNNING

    def isCompleted(self):
        return self.category == COMPLETED


TaskState._register(
    TaskState("canceled-before-starting", COMPLETED),
    TaskState("completed-successfully", COMPLETED),
    TaskState("completed-with-errors", COMPLETED),
    TaskState("disabled", PENDING),
    TaskState("running", RUNNING),
    TaskState("stopped-by-administrator", COMPLETED),
    TaskState("stopped-by-error", COMPLETED),
    TaskState("stopped-by-shutdown", COMPLETED),
    TaskState("unscheduled", PENDING),
    TaskState("waiting-on-dependency", PENDING),
    TaskState("waiting-on-start-time", PENDING),
)


class FailedDependencyAction(_NamedConstant):
    """What the server does with a task when one of its dependencies fails."""


FailedDependencyAction._register(
    FailedDependencyAction("cancel"),
    FailedDependencyAction("disable"),
    FailedDependencyAction("process"),
)
