"""The file retention task."""

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask
from dsadmin.tasks.state import _NamedConstant


class FileRetentionTimestampFormat(_NamedConstant):
    """
    How the timestamp is embedded in the names of the files a retention
    task examines.

    The wire name is the upper case form, such as
    C{GENERALIZED_TIME_UTC_WITH_SECONDS}.
    """

    def __init__(self, name, generalizedTime, withMilliseconds=False):
        _NamedConstant.__init__(self, name)
        self.generalizedTime = generalizedTime
        self.withMilliseconds = withMilliseconds

    def getName(self):
        return self.name.upper().replace("-", "_")

    def isGeneralizedTime(self):
        return self.generalizedTime


FileRetentionTimestampFormat._register(
    FileRetentionTimestampFormat("generalized-time-utc-with-milliseconds", True, True),
    FileRetentionTimestampFormat("generalized-time-utc-with-seconds", True),
    FileRetentionTimestampFormat("generalized-time-utc-with-minutes", True),
    FileRetentionTimestampFormat("local-time-with-milliseconds", False, True),
    FileRetentionTimestampFormat("local-time-with-seconds", False),
    FileRetentionTimestampFormat("local-time-with-minutes", False),
    FileRetentionTimestampFormat("local-date", False),
)


PROPERTY_TARGET_DIRECTORY = fields.stringProperty(
    "ds-task-file-retention-target-directory",
    "Target Directory",
    "The path of the directory holding the files to examine.",
    required=True,
)
PROPERTY_FILENAME_PATTERN = fields.stringProperty(
    "ds-task-file-retention-filename-pattern",
    "Filename Pattern",
    "The pattern for names of files to examine. It must contain a single "
    "${timestamp} token.",
    required=True,
)
PROPERTY_TIMESTAMP_FORMAT = fields.stringProperty(
    "ds-task-file-retention-timestamp-format",
    "Timestamp Format",
    "The format of the timestamp in matching file names.",
    required=True,
    allowedValues=[f.getName() for f in FileRetentionTimestampFormat.values()],
)
PROPERTY_RETAIN_FILE_COUNT = fields.integerProperty(
    "ds-task-file-retention-retain-file-count",
    "Retain File Count",
    "The smallest number of matching files to keep.",
)
PROPERTY_RETAIN_FILE_AGE = fields.stringProperty(
    "ds-task-file-retention-retain-file-age",
    "Retain File Age",
    "The age below which matching files are kept, as a duration.",
)
PROPERTY_RETAIN_SIZE = fields.integerProperty(
    "ds-task-file-retention-retain-aggregate-file-size-bytes",
    "Retain Aggregate File Size (Bytes)",
    "The smallest total size in bytes of matching files to keep.",
)


class FileRetentionTask(TypedTask):
    """
    Remove old files matching a pattern from a directory.

    A file is kept when any of the retention criteria keeps it; at least
    one criterion is required.
    """

    taskClassName = "com.unboundid.directory.server.tasks.FileRetentionTask"
    additionalObjectClasses = ("ds-task-file-retention",)
    taskFields = [
        fields.TaskField("targetDirectory", fields.Text(), PROPERTY_TARGET_DIRECTORY),
        fields.TaskField("filenamePattern", fields.Text(), PROPERTY_FILENAME_PATTERN),
        fields.TaskField(
            "timestampFormat",
            fields.Choice(FileRetentionTimestampFormat),
            PROPERTY_TIMESTAMP_FORMAT,
        ),
        fields.TaskField(
            "retainFileCount", fields.Integer(minimum=0), PROPERTY_RETAIN_FILE_COUNT
        ),
        fields.TaskField(
            "retainFileAgeMillis", fields.Duration(minimum=1), PROPERTY_RETAIN_FILE_AGE
        ),
        fields.TaskField(
            "retainAggregateFileSizeBytes",
            fields.Integer(minimum=1),
            PROPERTY_RETAIN_SIZE,
        ),
    ]
    taskName = "File Retention"
    taskDescription = "Removes old files from a directory."

    def __init__(
        self,
        taskID=None,
        targetDirectory=None,
        filenamePattern=None,
        timestampFormat=None,
        retainFileCount=None,
        retainFileAgeMillis=None,
        retainAggregateFileSizeBytes=None,
        **kw
    ):
        """
        @param timestampFormat: a L{FileRetentionTimestampFormat} or its
        name.

        @param retainFileCount: keep at least this many files; zero or
        more.

        @param retainFileAgeMillis: keep files younger than this many
        milliseconds.

        @param retainAggregateFileSizeBytes: keep the newest files up to
        this total size.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            targetDirectory=targetDirectory,
            filenamePattern=filenamePattern,
            timestampFormat=timestampFormat,
            retainFileCount=retainFileCount,
            retainFileAgeMillis=retainFileAgeMillis,
            retainAggregateFileSizeBytes=retainAggregateFileSizeBytes,
        )

    def validate(self):
        if (
            self.retainFileCount is None
            and self.retainFileAgeMillis is None
            and self.retainAggregateFileSizeBytes is None
        ):
            raise errors.UsageError(
                "At least one of %s, %s and %s is required"
                % (
                    PROPERTY_RETAIN_FILE_COUNT.getAttributeName(),
                    PROPERTY_RETAIN_FILE_AGE.getAttributeName(),
                    PROPERTY_RETAIN_SIZE.getAttributeName(),
                )
            )

    def getTargetDirectory(self):
        return self.targetDirectory

    def getFilenamePattern(self):
        return self.filenamePattern

    def getTimestampFormat(self):
        return self.timestampFormat

    def getRetainFileCount(self):
        return self.retainFileCount

    def getRetainFileAgeMillis(self):
        return self.retainFileAgeMillis

    def getRetainAggregateFileSizeBytes(self):
        return self.retainAggregateFileSizeBytes
