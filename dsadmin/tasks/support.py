"""The collect support data task."""

from dsadmin import errors, timeutil
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask
from dsadmin.tasks.state import _NamedConstant

ATTR_PREFIX = "ds-task-collect-support-data-"


class SecurityLevel(_NamedConstant):
    """How much sensitive information a support data archive may hold."""


SecurityLevel._register(
    SecurityLevel("none"),
    SecurityLevel("obscure-secrets"),
    SecurityLevel("maximum"),
)


def _property(factory, suffix, displayName, description, **kw):
    return factory(ATTR_PREFIX + suffix, displayName, description, **kw)


PROPERTY_OUTPUT_PATH = _property(
    fields.stringProperty,
    "output-path",
    "Output Path",
    "The path of the archive to write, or of the directory to write it in.",
)
PROPERTY_ENCRYPTION_PASSPHRASE_FILE = _property(
    fields.stringProperty,
    "encryption-passphrase-file",
    "Encryption Passphrase File",
    "The file holding the passphrase to encrypt the archive with.",
)
PROPERTY_INCLUDE_EXPENSIVE_DATA = _property(
    fields.booleanProperty,
    "include-expensive-data",
    "Include Expensive Data",
    "Whether to include data that may be expensive to collect.",
)
PROPERTY_INCLUDE_REPLICATION_STATE_DUMP = _property(
    fields.booleanProperty,
    "include-replication-state-dump",
    "Include Replication State Dump",
    "Whether to include a dump of the replication state.",
)
PROPERTY_INCLUDE_BINARY_FILES = _property(
    fields.booleanProperty,
    "include-binary-files",
    "Include Binary Files",
    "Whether to include binary files.",
)
PROPERTY_INCLUDE_EXTENSION_SOURCE = _property(
    fields.booleanProperty,
    "include-extension-source",
    "Include Extension Source",
    "Whether to include the source code of installed extensions.",
)
PROPERTY_USE_SEQUENTIAL_MODE = _property(
    fields.booleanProperty,
    "use-sequential-mode",
    "Use Sequential Mode",
    "Whether to collect the data one item at a time.",
)
PROPERTY_SECURITY_LEVEL = _property(
    fields.stringProperty,
    "security-level",
    "Security Level",
    "How much sensitive information the archive may hold.",
    allowedValues=[l.getName() for l in SecurityLevel.values()],
)
PROPERTY_JSTACK_COUNT = _property(
    fields.integerProperty,
    "jstack-count",
    "Jstack Count",
    "The number of thread stack traces to collect.",
)
PROPERTY_REPORT_COUNT = _property(
    fields.integerProperty,
    "report-count",
    "Report Count",
    "The number of intervals for which to collect sampled metrics.",
)
PROPERTY_REPORT_INTERVAL_SECONDS = _property(
    fields.integerProperty,
    "report-interval-seconds",
    "Report Interval Seconds",
    "The length in seconds of each sampling interval.",
)
PROPERTY_LOG_DURATION = _property(
    fields.stringProperty,
    "log-duration",
    "Log Duration",
    "How far back to collect log messages, as a duration.",
)
PROPERTY_LOG_FILE_HEAD_SIZE = _property(
    fields.integerProperty,
    "log-file-head-collection-size-kb",
    "Log File Head Collection Size (KB)",
    "The amount of data in kilobytes to collect from the start of each log.",
)
PROPERTY_LOG_FILE_TAIL_SIZE = _property(
    fields.integerProperty,
    "log-file-tail-collection-size-kb",
    "Log File Tail Collection Size (KB)",
    "The amount of data in kilobytes to collect from the end of each log.",
)
PROPERTY_COMMENT = _property(
    fields.stringProperty,
    "comment",
    "Comment",
    "A comment to include in the archive.",
)
PROPERTY_RETAIN_PREVIOUS_ARCHIVE_COUNT = _property(
    fields.integerProperty,
    "retain-previous-support-data-archive-count",
    "Retain Previous Support Data Archive Count",
    "The number of earlier archives in the output directory to keep.",
)
PROPERTY_RETAIN_PREVIOUS_ARCHIVE_AGE = _property(
    fields.stringProperty,
    "retain-previous-support-data-archive-age",
    "Retain Previous Support Data Archive Age",
    "The age, as a duration, below which earlier archives are kept.",
)


def _count(name, property):
    return fields.TaskField(name, fields.Integer(minimum=0), property)


class CollectSupportDataTask(TypedTask):
    """
    Collect an archive of information for troubleshooting the server.

    Every argument is optional; the server picks defaults for whatever
    is left out.
    """

    taskClassName = "com.unboundid.directory.server.tasks.CollectSupportDataTask"
    additionalObjectClasses = ("ds-task-collect-support-data",)
    taskFields = [
        fields.TaskField("outputPath", fields.Text(), PROPERTY_OUTPUT_PATH),
        fields.TaskField(
            "encryptionPassphraseFile",
            fields.Text(),
            PROPERTY_ENCRYPTION_PASSPHRASE_FILE,
        ),
        fields.TaskField(
            "includeExpensiveData", fields.Flag(), PROPERTY_INCLUDE_EXPENSIVE_DATA
        ),
        fields.TaskField(
            "includeReplicationStateDump",
            fields.Flag(),
            PROPERTY_INCLUDE_REPLICATION_STATE_DUMP,
        ),
        fields.TaskField(
            "includeBinaryFiles", fields.Flag(), PROPERTY_INCLUDE_BINARY_FILES
        ),
        fields.TaskField(
            "includeExtensionSource", fields.Flag(), PROPERTY_INCLUDE_EXTENSION_SOURCE
        ),
        fields.TaskField(
            "useSequentialMode", fields.Flag(), PROPERTY_USE_SEQUENTIAL_MODE
        ),
        fields.TaskField(
            "securityLevel", fields.Choice(SecurityLevel), PROPERTY_SECURITY_LEVEL
        ),
        _count("jstackCount", PROPERTY_JSTACK_COUNT),
        _count("reportCount", PROPERTY_REPORT_COUNT),
        _count("reportIntervalSeconds", PROPERTY_REPORT_INTERVAL_SECONDS),
        fields.TaskField("logDuration", fields.Text(), PROPERTY_LOG_DURATION),
        _count("logFileHeadCollectionSizeKB", PROPERTY_LOG_FILE_HEAD_SIZE),
        _count("logFileTailCollectionSizeKB", PROPERTY_LOG_FILE_TAIL_SIZE),
        fields.TaskField("comment", fields.Text(), PROPERTY_COMMENT),
        _count("retainPreviousArchiveCount", PROPERTY_RETAIN_PREVIOUS_ARCHIVE_COUNT),
        fields.TaskField(
            "retainPreviousArchiveAge",
            fields.Text(),
            PROPERTY_RETAIN_PREVIOUS_ARCHIVE_AGE,
        ),
    ]
    taskName = "Collect Support Data"
    taskDescription = "Collects a support data archive for troubleshooting."

    def __init__(self, taskID=None, **kw):
        """
        Task-specific arguments are given by keyword, named as in
        C{taskFields}: C{outputPath}, C{includeExpensiveData},
        C{securityLevel}, C{logDuration} and so on. Any other keyword is
        passed on to L{TypedTask}.
        """
        values = {}
        for f in self.taskFields:
            if f.name in kw:
                values[f.name] = kw.pop(f.name)
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(**values)

    def validate(self):
        for name in ("logDuration", "retainPreviousArchiveAge"):
            value = getattr(self, name)
            if value is None:
                continue
            try:
                timeutil.parseDuration(value)
            except ValueError:
                raise errors.UsageError(
                    "%s is not a valid duration: %r" % (name, value)
                )

    def getOutputPath(self):
        return self.outputPath

    def getEncryptionPassphraseFile(self):
        return self.encryptionPassphraseFile

    def getIncludeExpensiveData(self):
        return self.includeExpensiveData

    def getIncludeReplicationStateDump(self):
        return self.includeReplicationStateDump

    def getIncludeBinaryFiles(self):
        return self.includeBinaryFiles

    def getIncludeExtensionSource(self):
        return self.includeExtensionSource

    def getUseSequentialMode(self):
        return self.useSequentialMode

    def getSecurityLevel(self):
        return self.securityLevel

    def getJStackCount(self):
        return self.jstackCount

    def getReportCount(self):
        return self.reportCount

    def getReportIntervalSeconds(self):
        return self.reportIntervalSeconds

    def getLogDuration(self):
        return self.logDuration

    def getLogDurationMillis(self):
        """Return the log duration in milliseconds, or None if unset."""
        if self.logDuration is None:
            return None
        return timeutil.parseDuration(self.logDuration)

    def getLogFileHeadCollectionSizeKB(self):
        return self.logFileHeadCollectionSizeKB

    def getLogFileTailCollectionSizeKB(self):
        return self.logFileTailCollectionSizeKB

    def getComment(self):
        return self.comment

    def getRetainPreviousSupportDataArchiveCount(self):
        return self.retainPreviousArchiveCount

    def getRetainPreviousSupportDataArchiveAge(self):
        return self.retainPreviousArchiveAge
