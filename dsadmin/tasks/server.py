"""Tasks acting on the server process and its client connections."""

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask

PROPERTY_SHUTDOWN_MESSAGE = fields.stringProperty(
    "ds-task-shutdown-message",
    "Shutdown Message",
    "A message to record in the error log as the reason for the shutdown.",
)
PROPERTY_RESTART_SERVER = fields.booleanProperty(
    "ds-task-restart-server",
    "Restart Server",
    "Whether to restart the server rather than stopping it.",
)

PROPERTY_CONNECTION_ID = fields.integerProperty(
    "ds-task-disconnect-connection-id",
    "Connection ID",
    "The ID of the client connection to terminate.",
    required=True,
)
PROPERTY_DISCONNECT_MESSAGE = fields.stringProperty(
    "ds-task-disconnect-message",
    "Disconnect Message",
    "A message to send to the client and record in the log.",
)
PROPERTY_NOTIFY_CLIENT = fields.booleanProperty(
    "ds-task-disconnect-notify-client",
    "Notify Client",
    "Whether to send the client a notice of disconnection.",
)

PROPERTY_ENTER_LOCKDOWN_REASON = fields.stringProperty(
    "ds-task-enter-lockdown-reason",
    "Reason",
    "The reason for placing the server in lockdown mode.",
)
PROPERTY_LEAVE_LOCKDOWN_REASON = fields.stringProperty(
    "ds-task-leave-lockdown-reason",
    "Reason",
    "The reason for taking the server out of lockdown mode.",
)


class ShutdownTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.ShutdownTask"
    additionalObjectClasses = ("ds-task-shutdown",)
    taskFields = [
        fields.TaskField("shutdownMessage", fields.Text(), PROPERTY_SHUTDOWN_MESSAGE),
        fields.TaskField(
            "restartServer", fields.Flag(), PROPERTY_RESTART_SERVER, default=False
        ),
    ]
    taskName = "Shutdown"
    taskDescription = "Stops or restarts the server."

    def __init__(self, taskID=None, shutdownMessage=None, restartServer=False, **kw):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            shutdownMessage=shutdownMessage,
            restartServer=restartServer,
        )

    def getShutdownMessage(self):
        return self.shutdownMessage

    def isRestart(self):
        return self.restartServer


class DisconnectClientTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.DisconnectClientTask"
    additionalObjectClasses = ("ds-task-disconnect",)
    taskFields = [
        fields.TaskField("connectionID", fields.Integer(), PROPERTY_CONNECTION_ID),
        fields.TaskField(
            "disconnectMessage", fields.Text(), PROPERTY_DISCONNECT_MESSAGE
        ),
        fields.TaskField(
            "notifyClient", fields.Flag(), PROPERTY_NOTIFY_CLIENT, default=False
        ),
    ]
    taskName = "Disconnect Client"
    taskDescription = "Terminates a client connection."

    def __init__(
        self,
        taskID=None,
        connectionID=None,
        disconnectMessage=None,
        notifyClient=False,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            connectionID=connectionID,
            disconnectMessage=disconnectMessage,
            notifyClient=notifyClient,
        )

    def getConnectionID(self):
        return self.connectionID

    def getDisconnectMessage(self):
        return self.disconnectMessage

    def shouldNotifyClient(self):
        return self.notifyClient


class EnterLockdownModeTask(TypedTask):
    """
    Place the server in lockdown mode, where only root users may
    connect and only over the loopback interface.
    """

    taskClassName = "com.unboundid.directory.server.tasks.EnterLockdownModeTask"
    additionalObjectClasses = ("ds-task-enter-lockdown-mode",)
    taskFields = [
        fields.TaskField("reason", fields.Text(), PROPERTY_ENTER_LOCKDOWN_REASON),
    ]
    taskName = "Enter Lockdown Mode"
    taskDescription = "Places the server in lockdown mode."

    def __init__(self, taskID=None, reason=None, **kw):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(reason=reason)

    def getReason(self):
        return self.reason


class LeaveLockdownModeTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.LeaveLockdownModeTask"
    additionalObjectClasses = ("ds-task-leave-lockdown-mode",)
    taskFields = [
        fields.TaskField("reason", fields.Text(), PROPERTY_LEAVE_LOCKDOWN_REASON),
    ]
    taskName = "Leave Lockdown Mode"
    taskDescription = "Takes the server out of lockdown mode."

    def __init__(self, taskID=None, reason=None, **kw):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(reason=reason)

    def getReason(self):
        return self.reason


class RefreshEncryptionSettingsTask(TypedTask):
    taskClassName = (
        "com.unboundid.directory.server.tasks.RefreshEncryptionSettingsTask"
    )
    additionalObjectClasses = ("ds-task-refresh-encryption-settings",)
    taskName = "Refresh Encryption Settings"
    taskDescription = (
        "Reloads the encryption settings definitions from the encryption "
        "settings database."
    )

    def __init__(self, taskID=None, **kw):
        TypedTask.__init__(self, taskID, **kw)


PROPERTY_ALERT_TYPE = fields.stringProperty(
    "ds-task-alert-type",
    "Alert Type",
    "The type of administrative alert to generate.",
)
PROPERTY_ALERT_MESSAGE = fields.stringProperty(
    "ds-task-alert-message",
    "Alert Message",
    "The message for the administrative alert to generate.",
)
PROPERTY_ADD_DEGRADED_TYPE = fields.stringProperty(
    "ds-task-alert-add-degraded-type",
    "Add Degraded Alert Type",
    "An alert type to add to the set of types that mark the server as "
    "degraded.",
    multiValued=True,
)
PROPERTY_REMOVE_DEGRADED_TYPE = fields.stringProperty(
    "ds-task-alert-remove-degraded-type",
    "Remove Degraded Alert Type",
    "An alert type to remove from the set of types that mark the server as "
    "degraded.",
    multiValued=True,
)
PROPERTY_ADD_UNAVAILABLE_TYPE = fields.stringProperty(
    "ds-task-alert-add-unavailable-type",
    "Add Unavailable Alert Type",
    "An alert type to add to the set of types that mark the server as "
    "unavailable.",
    multiValued=True,
)
PROPERTY_REMOVE_UNAVAILABLE_TYPE = fields.stringProperty(
    "ds-task-alert-remove-unavailable-type",
    "Remove Unavailable Alert Type",
    "An alert type to remove from the set of types that mark the server as "
    "unavailable.",
    multiValued=True,
)


class AlertTask(TypedTask):
    """
    Generate an administrative alert, and change the alert types that
    mark the server as degraded or unavailable.

    The alert type and message go together. Without them, at least one
    of the degraded or unavailable type lists must be given.
    """

    taskClassName = "com.unboundid.directory.server.tasks.AlertTask"
    additionalObjectClasses = ("ds-task-alert",)
    taskFields = [
        fields.TaskField("alertType", fields.Text(), PROPERTY_ALERT_TYPE),
        fields.TaskField("alertMessage", fields.Text(), PROPERTY_ALERT_MESSAGE),
        fields.TaskField(
            "addDegradedTypes", fields.TextList(), PROPERTY_ADD_DEGRADED_TYPE
        ),
        fields.TaskField(
            "removeDegradedTypes", fields.TextList(), PROPERTY_REMOVE_DEGRADED_TYPE
        ),
        fields.TaskField(
            "addUnavailableTypes", fields.TextList(), PROPERTY_ADD_UNAVAILABLE_TYPE
        ),
        fields.TaskField(
            "removeUnavailableTypes",
            fields.TextList(),
            PROPERTY_REMOVE_UNAVAILABLE_TYPE,
        ),
    ]
    taskName = "Alert"
    taskDescription = (
        "Generates an administrative alert or updates the alert types that "
        "affect the server health."
    )

    def __init__(
        self,
        taskID=None,
        alertType=None,
        alertMessage=None,
        addDegradedTypes=None,
        removeDegradedTypes=None,
        addUnavailableTypes=None,
        removeUnavailableTypes=None,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            alertType=alertType,
            alertMessage=alertMessage,
            addDegradedTypes=addDegradedTypes,
            removeDegradedTypes=removeDegradedTypes,
            addUnavailableTypes=addUnavailableTypes,
            removeUnavailableTypes=removeUnavailableTypes,
        )

    def validate(self):
        if (self.alertType is None) != (self.alertMessage is None):
            raise errors.UsageError(
                "%s and %s must be given together"
                % (
                    PROPERTY_ALERT_TYPE.getAttributeName(),
                    PROPERTY_ALERT_MESSAGE.getAttributeName(),
                )
            )
        if self.alertType is None and not (
            self.addDegradedTypes
            or self.removeDegradedTypes
            or self.addUnavailableTypes
            or self.removeUnavailableTypes
        ):
            raise errors.UsageError(
                "An alert task needs an alert to generate or an alert type "
                "to add or remove"
            )

    def getAlertType(self):
        return self.alertType

    def getAlertMessage(self):
        return self.alertMessage

    def getAddDegradedAlertTypes(self):
        return list(self.addDegradedTypes)

    def getRemoveDegradedAlertTypes(self):
        return list(self.removeDegradedTypes)

    def getAddUnavailableAlertTypes(self):
        return list(self.addUnavailableTypes)

    def getRemoveUnavailableAlertTypes(self):
        return list(self.removeUnavailableTypes)
