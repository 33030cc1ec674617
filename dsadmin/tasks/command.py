"""The exec task, which runs a command on the server host."""

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask
from dsadmin.tasks.state import TaskState

# States a command exiting with a nonzero code may leave the task in.
NONZERO_EXIT_STATES = (
    TaskState.STOPPED_BY_ERROR,
    TaskState.COMPLETED_WITH_ERRORS,
    TaskState.COMPLETED_SUCCESSFULLY,
)

PROPERTY_COMMAND_PATH = fields.stringProperty(
    "ds-task-exec-command-path",
    "Command Path",
    "The absolute path of the command to run.",
    required=True,
)
PROPERTY_COMMAND_ARGUMENTS = fields.stringProperty(
    "ds-task-exec-command-arguments",
    "Command Arguments",
    "The argument string to pass to the command.",
)
PROPERTY_COMMAND_OUTPUT_FILE = fields.stringProperty(
    "ds-task-exec-command-output-file",
    "Command Output File",
    "The path of a file to which the command output is written.",
)
PROPERTY_LOG_COMMAND_OUTPUT = fields.booleanProperty(
    "ds-task-exec-log-command-output",
    "Log Command Output",
    "Whether to record the command output in the task log.",
)
PROPERTY_NONZERO_EXIT_STATE = fields.stringProperty(
    "ds-task-exec-task-completion-state-for-nonzero-exit-code",
    "Task State for Non-Zero Exit Code",
    "The state the task should be left in when the command exits with a "
    "nonzero code.",
    allowedValues=[s.getName() for s in NONZERO_EXIT_STATES],
)
PROPERTY_WORKING_DIRECTORY = fields.stringProperty(
    "ds-task-exec-working-directory",
    "Working Directory",
    "The directory to run the command in.",
)


class ExecTask(TypedTask):
    """
    Run a command on the server host.

    The server only runs commands named in its exec task allow list.
    """

    taskClassName = "com.unboundid.directory.server.tasks.ExecTask"
    additionalObjectClasses = ("ds-task-exec",)
    taskFields = [
        fields.TaskField("commandPath", fields.Text(), PROPERTY_COMMAND_PATH),
        fields.TaskField("commandArguments", fields.Text(), PROPERTY_COMMAND_ARGUMENTS),
        fields.TaskField(
            "commandOutputFile", fields.Text(), PROPERTY_COMMAND_OUTPUT_FILE
        ),
        fields.TaskField("logCommandOutput", fields.Flag(), PROPERTY_LOG_COMMAND_OUTPUT),
        fields.TaskField(
            "taskStateForNonZeroExitCode",
            fields.Choice(TaskState, NONZERO_EXIT_STATES),
            PROPERTY_NONZERO_EXIT_STATE,
        ),
        fields.TaskField(
            "workingDirectory", fields.Text(), PROPERTY_WORKING_DIRECTORY
        ),
    ]
    taskName = "Exec"
    taskDescription = "Runs a command on the server host."

    def __init__(
        self,
        taskID=None,
        commandPath=None,
        commandArguments=None,
        commandOutputFile=None,
        logCommandOutput=None,
        taskStateForNonZeroExitCode=None,
        workingDirectory=None,
        **kw
    ):
        """
        @param taskStateForNonZeroExitCode: a L{TaskState} or state name.
        Only C{stopped-by-error}, C{completed-with-errors} and
        C{completed-successfully} are accepted.

        @raise errors.TaskError: if another state is given.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            commandPath=commandPath,
            commandArguments=commandArguments,
            commandOutputFile=commandOutputFile,
            logCommandOutput=logCommandOutput,
            taskStateForNonZeroExitCode=taskStateForNonZeroExitCode,
            workingDirectory=workingDirectory,
        )

    def validate(self):
        state = self.taskStateForNonZeroExitCode
        if state is not None and state not in NONZERO_EXIT_STATES:
            raise errors.TaskError(
                "Unsupported state %s for a nonzero exit code; use one of %s"
                % (state, ", ".join(s.getName() for s in NONZERO_EXIT_STATES))
            )

    def getCommandPath(self):
        return self.commandPath

    def getCommandArguments(self):
        return self.commandArguments

    def getCommandOutputFile(self):
        return self.commandOutputFile

    def shouldLogCommandOutput(self):
        return self.logCommandOutput

    def getTaskStateForNonZeroExitCode(self):
        return self.taskStateForNonZeroExitCode

    def getWorkingDirectory(self):
        return self.workingDirectory
