"""Tasks running code supplied through the server extension SDK."""

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask

PROPERTY_SCRIPT_CLASS = fields.stringProperty(
    "ds-scripted-task-class",
    "Groovy Script Class",
    "The fully-qualified name of the Groovy class implementing the task.",
    required=True,
)
PROPERTY_SCRIPT_ARGUMENT = fields.stringProperty(
    "ds-scripted-task-argument",
    "Script Argument",
    "An argument for the script, in the form name=value.",
    multiValued=True,
)

PROPERTY_EXTENSION_CLASS = fields.stringProperty(
    "ds-third-party-task-java-class",
    "Java Extension Class",
    "The fully-qualified name of the Java class implementing the task.",
    required=True,
)
PROPERTY_EXTENSION_ARGUMENT = fields.stringProperty(
    "ds-third-party-task-argument",
    "Extension Argument",
    "An argument for the extension, in the form name=value.",
    multiValued=True,
)


def checkArguments(name, arguments):
    for argument in arguments:
        if "=" not in argument or argument.startswith("="):
            raise errors.UsageError(
                "%s must be of the form name=value, not %r" % (name, argument)
            )


class GroovyScriptedTask(TypedTask):
    taskClassName = "com.unboundid.directory.sdk.extensions.GroovyScriptedTask"
    additionalObjectClasses = ("ds-groovy-scripted-task",)
    taskFields = [
        fields.TaskField("scriptClass", fields.Text(), PROPERTY_SCRIPT_CLASS),
        fields.TaskField(
            "scriptArguments", fields.TextList(), PROPERTY_SCRIPT_ARGUMENT
        ),
    ]
    taskName = "Groovy-Scripted Task"
    taskDescription = "Runs a task implemented as a Groovy script."

    def __init__(self, taskID=None, scriptClass=None, scriptArguments=None, **kw):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(scriptClass=scriptClass, scriptArguments=scriptArguments)

    def validate(self):
        checkArguments("scriptArguments", self.scriptArguments)

    def getGroovyScriptedTaskClassName(self):
        return self.scriptClass

    def getGroovyScriptedTaskArguments(self):
        return list(self.scriptArguments)


class ThirdPartyTask(TypedTask):
    taskClassName = "com.unboundid.directory.sdk.extensions.ThirdPartyTask"
    additionalObjectClasses = ("ds-third-party-task",)
    taskFields = [
        fields.TaskField("extensionClass", fields.Text(), PROPERTY_EXTENSION_CLASS),
        fields.TaskField(
            "extensionArguments", fields.TextList(), PROPERTY_EXTENSION_ARGUMENT
        ),
    ]
    taskName = "Third-Party Task"
    taskDescription = "Runs a task implemented in Java with the server SDK."

    def __init__(
        self, taskID=None, extensionClass=None, extensionArguments=None, **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            extensionClass=extensionClass,
            extensionArguments=extensionArguments,
        )

    def validate(self):
        checkArguments("extensionArguments", self.extensionArguments)

    def getThirdPartyTaskClassName(self):
        return self.extensionClass

    def getThirdPartyTaskArguments(self):
        return list(self.extensionArguments)
