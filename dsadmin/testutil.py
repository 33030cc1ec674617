"""Utilities for writing dsadmin tests."""

from dsadmin import config
from dsadmin.entry import TaskEntry
from dsadmin.tasks.base import ATTR_TASK_CLASS, ATTR_TASK_ID, OC_TASK

TASKS_BASE = "cn=Scheduled Tasks,cn=tasks"


def taskConfig(decodeFallback=False):
    """
    Get a configuration that does not depend on the global
    configuration files.
    """
    return config.TaskConfig(baseDN=TASKS_BASE, decodeFallback=decodeFallback)


def taskEntry(
    taskClassName,
    taskID="test-task",
    objectClasses=(),
    attributes=None,
    dn=None,
    taskObjectClass=True,
):
    """
    Build a task entry the way the server would return it.

    @param attributes: dict mapping attribute names to a value or a
    list of values.

    @param taskObjectClass: whether to include the ds-task object
    class.
    """
    ocs = ["top"]
    if taskObjectClass:
        ocs.append(OC_TASK)
    ocs.extend(objectClasses)

    attrs = {"objectClass": ocs}
    if taskID is not None:
        attrs[ATTR_TASK_ID] = [taskID]
    if taskClassName is not None:
        attrs[ATTR_TASK_CLASS] = [taskClassName]
    for name, values in (attributes or {}).items():
        if isinstance(values, (str, bytes)):
            values = [values]
        attrs[name] = list(values)

    if dn is None:
        dn = "%s=%s,%s" % (ATTR_TASK_ID, taskID or "unnamed", TASKS_BASE)
    return TaskEntry(dn, attrs)


def entryForType(klass, attributes=None, taskID="test-task", **kw):
    """
    Build a task entry for the task type C{klass}.
    """
    return taskEntry(
        klass.taskClassName,
        taskID=taskID,
        objectClasses=klass.additionalObjectClasses,
        attributes=attributes,
        **kw
    )
