"""
Administrative task entries.

L{decodeTask} turns a task entry read from the directory into an
instance of the matching task type, or a generic L{Task} when the task
class is not known.
"""

from twisted.python import log

from dsadmin import config, errors
from dsadmin.entry import getAttributeValue, getAttributeValues
from dsadmin.tasks.backup import BackupTask, RestoreTask
from dsadmin.tasks.base import ATTR_TASK_CLASS, OC_TASK, Task, TypedTask
from dsadmin.tasks.command import ExecTask
from dsadmin.tasks.delay import DelayTask
from dsadmin.tasks.extensions import GroovyScriptedTask, ThirdPartyTask
from dsadmin.tasks.index import RebuildTask, ReloadGlobalIndexTask
from dsadmin.tasks.ldif import ExportTask, ImportTask, ReEncodeEntriesTask
from dsadmin.tasks.retention import FileRetentionTask, FileRetentionTimestampFormat
from dsadmin.tasks.schema import AddSchemaFileTask, RemoveAttributeTypeTask
from dsadmin.tasks.search import AuditDataSecurityTask, SearchScope, SearchTask
from dsadmin.tasks.server import (
    AlertTask,
    DisconnectClientTask,
    EnterLockdownModeTask,
    LeaveLockdownModeTask,
    RefreshEncryptionSettingsTask,
    ShutdownTask,
)
from dsadmin.tasks.state import FailedDependencyAction, TaskState
from dsadmin.tasks.support import CollectSupportDataTask, SecurityLevel

TASK_TYPES = [
    AddSchemaFileTask,
    AlertTask,
    AuditDataSecurityTask,
    BackupTask,
    CollectSupportDataTask,
    DelayTask,
    DisconnectClientTask,
    EnterLockdownModeTask,
    ExecTask,
    ExportTask,
    FileRetentionTask,
    GroovyScriptedTask,
    ImportTask,
    LeaveLockdownModeTask,
    RebuildTask,
    ReEncodeEntriesTask,
    RefreshEncryptionSettingsTask,
    ReloadGlobalIndexTask,
    RemoveAttributeTypeTask,
    RestoreTask,
    SearchTask,
    ShutdownTask,
    ThirdPartyTask,
]


class TaskDecoderContext:
    """
    Map task class names, and failing that object classes, to task
    types.
    """

    Identities = {t.taskClassName: t for t in TASK_TYPES}
    ObjectClasses = {t.additionalObjectClasses[0].lower(): t for t in TASK_TYPES}

    def __init__(self, fallback=None):
        self.fallback = fallback

    def lookup_class(self, taskClassName):
        try:
            return self.Identities[taskClassName]
        except KeyError:
            if self.fallback:
                return self.fallback.lookup_class(taskClassName)
            else:
                return None

    def lookup_objectclass(self, objectClasses):
        for oc in objectClasses:
            klass = self.ObjectClasses.get(oc.lower())
            if klass is not None:
                return klass
        if self.fallback:
            return self.fallback.lookup_objectclass(objectClasses)
        return None


def decodeTask(e, context=None, config=None):
    """
    Decode a task entry.

    @param e: an ldaptor entry.

    @param context: a L{TaskDecoderContext}; the default one knows
    every task type in this package.

    @param config: an L{interfaces.ITaskConfig}. When its decode
    fallback is enabled, an entry a task type rejects is decoded as a
    generic L{Task} instead. Without one, the fallback is off.

    @raise errors.TaskError: if the entry is not a task entry, or cannot
    be decoded.
    """
    if context is None:
        context = TaskDecoderContext()
    if config is None:
        config = _defaultConfig()

    objectClasses = getAttributeValues(e, "objectClass")
    if OC_TASK not in [oc.lower() for oc in objectClasses]:
        raise errors.TaskError(
            "Entry %s is not a task entry: it lacks object class %s"
            % (e.dn.getText(), OC_TASK)
        )

    taskClassName = getAttributeValue(e, ATTR_TASK_CLASS)
    if taskClassName is None:
        raise errors.TaskError(
            "Task entry %s does not have attribute %s"
            % (e.dn.getText(), ATTR_TASK_CLASS)
        )

    klass = context.lookup_class(taskClassName)
    if klass is None:
        klass = context.lookup_objectclass(objectClasses)
    if klass is None:
        log.msg(
            "No task type for class %s of %s, decoding as a generic task"
            % (taskClassName, e.dn.getText()),
            debug=True,
        )
        return Task.fromEntry(e)

    try:
        return klass.fromEntry(e)
    except errors.TaskError as err:
        if not config.getDecodeFallback():
            raise
        log.msg(
            "Cannot decode %s as %s (%s), decoding as a generic task"
            % (e.dn.getText(), klass.__name__, err.message)
        )
        return Task.fromEntry(e)


def _defaultConfig():
    return config.defaultTaskConfig()


def getAvailableTaskTypes():
    """
    Return the task types L{decodeTask} knows, by default.
    """
    return list(TASK_TYPES)


__all__ = [
    "AddSchemaFileTask",
    "AlertTask",
    "AuditDataSecurityTask",
    "BackupTask",
    "CollectSupportDataTask",
    "DelayTask",
    "DisconnectClientTask",
    "EnterLockdownModeTask",
    "ExecTask",
    "ExportTask",
    "FailedDependencyAction",
    "FileRetentionTask",
    "FileRetentionTimestampFormat",
    "GroovyScriptedTask",
    "ImportTask",
    "LeaveLockdownModeTask",
    "RebuildTask",
    "ReEncodeEntriesTask",
    "RefreshEncryptionSettingsTask",
    "ReloadGlobalIndexTask",
    "RemoveAttributeTypeTask",
    "RestoreTask",
    "SearchScope",
    "SearchTask",
    "SecurityLevel",
    "ShutdownTask",
    "Task",
    "TaskDecoderContext",
    "TaskState",
    "ThirdPartyTask",
    "TypedTask",
    "decodeTask",
    "getAvailableTaskTypes",
]
