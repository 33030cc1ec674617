"""
The task base class.

A task can be built three ways: from typed constructor arguments, from a
task entry read from the directory (L{Task.fromEntry}) or from a
property map (L{Task.fromProperties}). The two decoding paths turn their
input into constructor keywords and then call the constructor, so every
task passes through the same validation.
"""

import uuid

from zope.interface import implementer

from dsadmin import config, errors, interfaces
from dsadmin.entry import TaskEntry, getAttributeValue, getAttributeValues
from dsadmin.tasks import fields
from dsadmin.tasks.properties import parseString
from dsadmin.tasks.state import FailedDependencyAction, TaskState
from ldaptor._encoder import to_unicode
from ldaptor.protocols.ldap import distinguishedname

OC_TASK = "ds-task"

ATTR_TASK_ID = "ds-task-id"
ATTR_TASK_CLASS = "ds-task-class-name"
ATTR_TASK_STATE = "ds-task-state"
ATTR_SCHEDULED_START_TIME = "ds-task-scheduled-start-time"
ATTR_ACTUAL_START_TIME = "ds-task-actual-start-time"
ATTR_COMPLETION_TIME = "ds-task-completion-time"
ATTR_DEPENDENCY_ID = "ds-task-dependency-id"
ATTR_FAILED_DEPENDENCY_ACTION = "ds-task-failed-dependency-action"
ATTR_LOG_MESSAGE = "ds-task-log-message"
ATTR_NOTIFY_ON_START = "ds-task-notify-on-start"
ATTR_NOTIFY_ON_COMPLETION = "ds-task-notify-on-completion"
ATTR_NOTIFY_ON_SUCCESS = "ds-task-notify-on-success"
ATTR_NOTIFY_ON_ERROR = "ds-task-notify-on-error"
ATTR_ALERT_ON_START = "ds-task-alert-on-start"
ATTR_ALERT_ON_SUCCESS = "ds-task-alert-on-success"
ATTR_ALERT_ON_ERROR = "ds-task-alert-on-error"

PROPERTY_TASK_ID = fields.stringProperty(
    ATTR_TASK_ID,
    "Task ID",
    "The ID to use for the task. If none is given, one will be generated.",
    advanced=True,
)
PROPERTY_SCHEDULED_START_TIME = fields.dateProperty(
    ATTR_SCHEDULED_START_TIME,
    "Scheduled Start Time",
    "The time the task should start running.",
    advanced=True,
)
PROPERTY_DEPENDENCY_ID = fields.stringProperty(
    ATTR_DEPENDENCY_ID,
    "Dependency ID",
    "The IDs of tasks that must complete before this task may start.",
    multiValued=True,
    advanced=True,
)
PROPERTY_FAILED_DEPENDENCY_ACTION = fields.stringProperty(
    ATTR_FAILED_DEPENDENCY_ACTION,
    "Failed Dependency Action",
    "What to do with this task if one of its dependencies fails.",
    advanced=True,
    allowedValues=["cancel", "disable", "process"],
)
PROPERTY_NOTIFY_ON_START = fields.stringProperty(
    ATTR_NOTIFY_ON_START,
    "Start Notification Addresses",
    "Email addresses to notify when the task starts running.",
    multiValued=True,
    advanced=True,
)
PROPERTY_NOTIFY_ON_COMPLETION = fields.stringProperty(
    ATTR_NOTIFY_ON_COMPLETION,
    "Completion Notification Addresses",
    "Email addresses to notify when the task completes.",
    multiValued=True,
    advanced=True,
)
PROPERTY_NOTIFY_ON_SUCCESS = fields.stringProperty(
    ATTR_NOTIFY_ON_SUCCESS,
    "Success Notification Addresses",
    "Email addresses to notify when the task completes successfully.",
    multiValued=True,
    advanced=True,
)
PROPERTY_NOTIFY_ON_ERROR = fields.stringProperty(
    ATTR_NOTIFY_ON_ERROR,
    "Error Notification Addresses",
    "Email addresses to notify when the task fails.",
    multiValued=True,
    advanced=True,
)
PROPERTY_ALERT_ON_START = fields.booleanProperty(
    ATTR_ALERT_ON_START,
    "Generate Alert on Start",
    "Whether the server should generate an alert when the task starts.",
    advanced=True,
)
PROPERTY_ALERT_ON_SUCCESS = fields.booleanProperty(
    ATTR_ALERT_ON_SUCCESS,
    "Generate Alert on Success",
    "Whether the server should generate an alert when the task succeeds.",
    advanced=True,
)
PROPERTY_ALERT_ON_ERROR = fields.booleanProperty(
    ATTR_ALERT_ON_ERROR,
    "Generate Alert on Error",
    "Whether the server should generate an alert when the task fails.",
    advanced=True,
)

# Scheduling fields every task accepts, in rendering order.
COMMON_FIELDS = [
    fields.TaskField(
        "scheduledStartTime", fields.Timestamp(), PROPERTY_SCHEDULED_START_TIME
    ),
    fields.TaskField("dependencyIDs", fields.TextList(), PROPERTY_DEPENDENCY_ID),
    fields.TaskField(
        "failedDependencyAction",
        fields.Choice(FailedDependencyAction),
        PROPERTY_FAILED_DEPENDENCY_ACTION,
    ),
    fields.TaskField("notifyOnStart", fields.TextList(), PROPERTY_NOTIFY_ON_START),
    fields.TaskField(
        "notifyOnCompletion", fields.TextList(), PROPERTY_NOTIFY_ON_COMPLETION
    ),
    fields.TaskField(
        "notifyOnSuccess", fields.TextList(), PROPERTY_NOTIFY_ON_SUCCESS
    ),
    fields.TaskField("notifyOnError", fields.TextList(), PROPERTY_NOTIFY_ON_ERROR),
    fields.TaskField("alertOnStart", fields.Flag(), PROPERTY_ALERT_ON_START),
    fields.TaskField("alertOnSuccess", fields.Flag(), PROPERTY_ALERT_ON_SUCCESS),
    fields.TaskField("alertOnError", fields.Flag(), PROPERTY_ALERT_ON_ERROR),
]

# Fields only the server writes.
STATUS_FIELDS = [
    fields.TaskField(
        "state",
        fields.Choice(TaskState),
        attributeName=ATTR_TASK_STATE,
        default=TaskState.UNSCHEDULED,
    ),
    fields.TaskField(
        "actualStartTime", fields.Timestamp(), attributeName=ATTR_ACTUAL_START_TIME
    ),
    fields.TaskField(
        "completionTime", fields.Timestamp(), attributeName=ATTR_COMPLETION_TIME
    ),
    fields.TaskField(
        "logMessages", fields.TextList(), attributeName=ATTR_LOG_MESSAGE
    ),
]


def _knownAttributes(*fieldLists):
    known = {"objectclass", ATTR_TASK_ID, ATTR_TASK_CLASS}
    for l in fieldLists:
        for f in l:
            known.add(f.attributeName.lower())
    return known


@implementer(interfaces.ITask)
class Task:
    """
    An administrative task.

    Used directly, this is the generic task: it carries the common task
    attributes for any task class name. Subclasses set
    C{taskClassName}, C{additionalObjectClasses} and C{taskFields}.
    """

    taskClassName = None
    additionalObjectClasses = ()
    taskFields = ()

    taskName = "Generic Task"
    taskDescription = "A task of a type without a specific implementation."

    state = TaskState.UNSCHEDULED
    actualStartTime = None
    completionTime = None
    logMessages = ()
    _decoding = False

    def __init__(
        self,
        taskClassName,
        taskID=None,
        scheduledStartTime=None,
        dependencyIDs=None,
        failedDependencyAction=None,
        notifyOnStart=None,
        notifyOnCompletion=None,
        notifyOnSuccess=None,
        notifyOnError=None,
        alertOnStart=None,
        alertOnSuccess=None,
        alertOnError=None,
    ):
        """
        @param taskClassName: the fully-qualified name of the server
        class implementing the task.

        @param taskID: the task ID; a random UUID is used when None.

        @param scheduledStartTime: a datetime, or None to start as soon
        as possible. Naive datetimes are taken to be in UTC.

        @param dependencyIDs: IDs of tasks that must complete first.

        @param failedDependencyAction: a L{FailedDependencyAction}, or
        None to leave it to the server.

        @raise errors.UsageError: if an argument is invalid.
        """
        if taskClassName is None:
            raise errors.UsageError("A task class name is required")
        if taskID is not None and not isinstance(taskID, str):
            raise errors.UsageError("taskID must be a string, not %r" % (taskID,))
        if taskID is None:
            taskID = str(uuid.uuid4())

        self.taskClassName = taskClassName
        self.taskID = taskID
        self._taskEntry = None
        self._extraObjectClasses = []
        self._extraAttributes = []

        self._setFields(
            COMMON_FIELDS,
            dict(
                scheduledStartTime=scheduledStartTime,
                dependencyIDs=dependencyIDs,
                failedDependencyAction=failedDependencyAction,
                notifyOnStart=notifyOnStart,
                notifyOnCompletion=notifyOnCompletion,
                notifyOnSuccess=notifyOnSuccess,
                notifyOnError=notifyOnError,
                alertOnStart=alertOnStart,
                alertOnSuccess=alertOnSuccess,
                alertOnError=alertOnError,
            ),
        )

    def _setFields(self, fieldList, values):
        for f in fieldList:
            setattr(self, f.name, f.check(values.get(f.name)))

    def setTaskFields(self, **values):
        """
        Check and store the values of the fields this task type declares,
        then run L{validate}.
        """
        self._setFields(self.taskFields, values)
        self.validate()

    def validate(self):
        """
        Check constraints spanning several fields.

        Subclasses override this and raise L{errors.UsageError}. Checks
        that only apply to new tasks are skipped while C{_decoding} is
        set.
        """

    # decoding

    @classmethod
    def _decodeTaskID(klass, e):
        taskID = getAttributeValue(e, ATTR_TASK_ID)
        if taskID is not None:
            return taskID
        rdns = e.dn.split()
        if rdns:
            ava = rdns[0].split()[0]
            if ava.attributeType.lower() == ATTR_TASK_ID:
                return ava.value
        raise errors.TaskError(
            "Task entry %s does not have a task ID" % e.dn.getText()
        )

    @classmethod
    def _decodeCommon(klass, e):
        """
        Read the attributes shared by all tasks from a task entry.

        @return: (taskClassName, constructor keywords, status values)
        """
        objectClasses = [v.lower() for v in getAttributeValues(e, "objectClass")]
        if OC_TASK not in objectClasses:
            raise errors.TaskError(
                "Entry %s is not a task entry: it lacks object class %s"
                % (e.dn.getText(), OC_TASK)
            )

        kw = {"taskID": klass._decodeTaskID(e)}

        taskClassName = getAttributeValue(e, ATTR_TASK_CLASS)
        if taskClassName is None:
            raise errors.TaskError(
                "Task entry %s does not have attribute %s"
                % (e.dn.getText(), ATTR_TASK_CLASS)
            )

        status = {}
        for f in STATUS_FIELDS:
            status[f.name] = f.fromEntry(e)
        for f in COMMON_FIELDS:
            kw[f.name] = f.fromEntry(e)
        return taskClassName, kw, status

    @classmethod
    def fromEntry(klass, e):
        """
        Decode a task entry.

        The generic task object class is checked before anything else,
        then the common attributes, then the attributes of this task type.

        @param e: an ldaptor entry, as returned by a search.

        @raise errors.TaskError: if the entry cannot be decoded. The
        message names the offending attribute.
        """
        taskClassName, kw, status = klass._decodeCommon(e)
        for f in klass.taskFields:
            kw[f.name] = f.fromEntry(e)

        if klass.taskClassName is None:
            kw["taskClassName"] = taskClassName
        task = klass._construct(kw)

        for name, value in status.items():
            setattr(task, name, value)
        task._taskEntry = e
        if klass.taskClassName is None:
            task._keepUnknown(e)
        return task

    def _keepUnknown(self, e):
        known = _knownAttributes(COMMON_FIELDS, STATUS_FIELDS, self.taskFields)
        base = {"top", OC_TASK}
        for oc in getAttributeValues(e, "objectClass"):
            if oc.lower() not in base:
                self._extraObjectClasses.append(oc)
        for key in e:
            name = to_unicode(key)
            if name.lower() not in known:
                self._extraAttributes.append((name, getAttributeValues(e, name)))

    @classmethod
    def _construct(klass, kw):
        task = klass.__new__(klass)
        # Set while a decoded task runs its constructor.
        task._decoding = True
        try:
            task.__init__(**kw)
        except errors.UsageError as e:
            raise errors.TaskError(e.message)
        task._decoding = False
        return task

    @classmethod
    def fromProperties(klass, properties, taskClassName=None):
        """
        Build a task from a property map.

        @param properties: dict mapping L{TaskProperty} to a list of
        values. Values are str, bool, int or datetime according to the
        data type of the property; string forms are also accepted.

        @param taskClassName: the task class name, only used (and then
        required) when building a generic task.

        @raise errors.TaskError: if the map is empty, misses a required
        property or holds values of the wrong type.
        """
        if not properties:
            raise errors.TaskError("No task properties were provided")

        kw = {}
        taskID = properties.get(PROPERTY_TASK_ID)
        if taskID:
            kw["taskID"] = parseString(PROPERTY_TASK_ID, list(taskID))

        for f in COMMON_FIELDS:
            kw[f.name] = f.fromProperties(properties)
        for f in klass.taskFields:
            if f.property is not None:
                kw[f.name] = f.fromProperties(properties)

        if klass.taskClassName is None:
            if taskClassName is None:
                raise errors.UsageError(
                    "A task class name is required to build a generic task"
                )
            kw["taskClassName"] = taskClassName
        return klass._construct(kw)

    # encoding

    def getTaskEntryDN(self, config=None):
        """
        Get the DN of the entry for this task.

        This is the DN of the entry the task was read from, if any.
        """
        if self._taskEntry is not None:
            return distinguishedname.DistinguishedName(self._taskEntry.dn)
        return self._buildDN(config)

    def _buildDN(self, cfg=None):
        if cfg is None:
            cfg = config.defaultTaskConfig()
        base = cfg.getScheduledTasksBaseDN()
        rdn = distinguishedname.RelativeDistinguishedName(
            attributeTypesAndValues=[
                distinguishedname.LDAPAttributeTypeAndValue(
                    attributeType=ATTR_TASK_ID, value=self.taskID
                )
            ]
        )
        return distinguishedname.DistinguishedName(
            listOfRDNs=(rdn,) + tuple(base.split())
        )

    def getAdditionalObjectClasses(self):
        return list(self.additionalObjectClasses) + list(self._extraObjectClasses)

    def getAdditionalAttributes(self):
        """
        Get the attributes specific to this task type.

        @return: list of (attribute name, list of values), without
        attributes that have no value.
        """
        l = []
        for f in self.taskFields:
            values = f.toEntry(getattr(self, f.name))
            if values:
                l.append((f.attributeName, values))
        for name, values in self._extraAttributes:
            l.append((name, list(values)))
        return l

    def createTaskEntry(self, config=None):
        """
        Render this task as an entry suitable for adding to the server.

        This never modifies the task.

        @param config: an L{interfaces.ITaskConfig} giving the scheduled
        tasks container, or None for the default container. Pass a
        L{config.TaskConfig} to use the configuration files.

        @rtype: L{TaskEntry}
        """
        attributes = {
            "objectClass": ["top", OC_TASK] + self.getAdditionalObjectClasses(),
            ATTR_TASK_ID: [self.taskID],
            ATTR_TASK_CLASS: [self.taskClassName],
        }
        for f in COMMON_FIELDS:
            values = f.toEntry(getattr(self, f.name))
            if values:
                attributes[f.attributeName] = values
        for name, values in self.getAdditionalAttributes():
            attributes[name] = values
        return TaskEntry(self._buildDN(config), attributes)

    def getTaskEntry(self):
        """
        Get the entry this task was decoded from, or None.
        """
        return self._taskEntry

    # properties

    @staticmethod
    def getCommonTaskProperties():
        return [PROPERTY_TASK_ID] + [f.property for f in COMMON_FIELDS]

    @classmethod
    def getTaskSpecificProperties(klass):
        return [f.property for f in klass.taskFields if f.property is not None]

    def getTaskPropertyValues(self):
        """
        Get the values of all the properties of this task.

        @return: a dict mapping each common and task-specific
        L{TaskProperty} to a list of values; the list is empty for
        unset properties.
        """
        d = {PROPERTY_TASK_ID: [self.taskID]}
        for f in COMMON_FIELDS:
            d[f.property] = f.toProperty(getattr(self, f.name))
        for f in self.taskFields:
            if f.property is not None:
                d[f.property] = f.toProperty(getattr(self, f.name))
        return d

    # accessors

    def getTaskName(self):
        return self.taskName

    def getTaskDescription(self):
        return self.taskDescription

    def getTaskID(self):
        return self.taskID

    def getTaskClassName(self):
        return self.taskClassName

    def getState(self):
        return self.state

    def isPending(self):
        return self.state.isPending()

    def isRunning(self):
        return self.state.isRunning()

    def isCompleted(self):
        return self.state.isCompleted()

    def getScheduledStartTime(self):
        return self.scheduledStartTime

    def getActualStartTime(self):
        return self.actualStartTime

    def getCompletionTime(self):
        return self.completionTime

    def getDependencyIDs(self):
        return list(self.dependencyIDs)

    def getFailedDependencyAction(self):
        return self.failedDependencyAction

    def getLogMessages(self):
        return list(self.logMessages)

    def getNotifyOnStartAddresses(self):
        return list(self.notifyOnStart)

    def getNotifyOnCompletionAddresses(self):
        return list(self.notifyOnCompletion)

    def getNotifyOnSuccessAddresses(self):
        return list(self.notifyOnSuccess)

    def getNotifyOnErrorAddresses(self):
        return list(self.notifyOnError)

    def getAlertOnStart(self):
        return self.alertOnStart

    def getAlertOnSuccess(self):
        return self.alertOnSuccess

    def getAlertOnError(self):
        return self.alertOnError

    def __eq__(self, other):
        if not isinstance(other, Task):
            return NotImplemented
        if self.__class__ is not other.__class__:
            return False
        return self.createTaskEntry() == other.createTaskEntry()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.taskID)

    def __repr__(self):
        l = []
        for p, values in self.getTaskPropertyValues().items():
            if values:
                l.append("%s=%r" % (p.getAttributeName(), values))
        return "%s(name=%r, className=%r, properties={%s})" % (
            self.__class__.__name__,
            self.getTaskName(),
            self.taskClassName,
            ", ".join(l),
        )


class TypedTask(Task):
    """
    Base class for tasks with a fixed class name.

    Subclass constructors take the task ID first, then their own
    arguments, then the scheduling keywords of L{Task}.
    """

    def __init__(self, taskID=None, **kw):
        Task.__init__(self, self.__class__.taskClassName, taskID, **kw)

