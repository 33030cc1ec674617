"""Backup and restore tasks."""

from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask

ATTR_BACKUP_ALL = "ds-task-backup-all"

PROPERTY_BACKUP_DIRECTORY = fields.stringProperty(
    "ds-backup-directory-path",
    "Backup Directory",
    "The path of the directory holding the backups, relative to the "
    "server root when not absolute.",
    required=True,
)
PROPERTY_BACKEND_ID = fields.stringProperty(
    "ds-task-backup-backend-id",
    "Backend ID",
    "The backend to back up. All backends are backed up when none is given.",
    multiValued=True,
)
PROPERTY_BACKUP_ID = fields.stringProperty(
    "ds-backup-id",
    "Backup ID",
    "The ID of the backup.",
)
PROPERTY_INCREMENTAL = fields.booleanProperty(
    "ds-task-backup-incremental",
    "Incremental Backup",
    "Whether to make an incremental backup.",
)
PROPERTY_INCREMENTAL_BASE_ID = fields.stringProperty(
    "ds-task-backup-incremental-base-id",
    "Incremental Base ID",
    "The ID of the backup an incremental backup is based on.",
)
PROPERTY_COMPRESS = fields.booleanProperty(
    "ds-task-backup-compress",
    "Compress",
    "Whether to compress the backup.",
)
PROPERTY_ENCRYPT = fields.booleanProperty(
    "ds-task-backup-encrypt",
    "Encrypt",
    "Whether to encrypt the backup.",
)
PROPERTY_HASH = fields.booleanProperty(
    "ds-task-backup-hash",
    "Generate Hash",
    "Whether to compute a hash of the backup contents.",
)
PROPERTY_SIGN_HASH = fields.booleanProperty(
    "ds-task-backup-sign-hash",
    "Sign Hash",
    "Whether to sign the backup hash.",
)

PROPERTY_RESTORE_BACKUP_DIRECTORY = fields.stringProperty(
    "ds-backup-directory-path",
    "Backup Directory",
    "The path of the directory holding the backup to restore.",
    required=True,
)
PROPERTY_RESTORE_BACKUP_ID = fields.stringProperty(
    "ds-backup-id",
    "Backup ID",
    "The ID of the backup to restore. The latest one is used if none is given.",
)
PROPERTY_VERIFY_ONLY = fields.booleanProperty(
    "ds-task-restore-verify-only",
    "Verify Only",
    "Whether to only check that the backup could be restored.",
)
PROPERTY_ENCRYPTION_PASSPHRASE_FILE = fields.stringProperty(
    "ds-task-restore-encryption-passphrase-file",
    "Encryption Passphrase File",
    "The file holding the passphrase the backup was encrypted with.",
    advanced=True,
)


class BackupTask(TypedTask):
    """
    Back up one or more backends.

    An empty list of backend IDs means all backends, and is written to
    the task entry as C{ds-task-backup-all: true}.
    """

    taskClassName = "com.unboundid.directory.server.tasks.BackupTask"
    additionalObjectClasses = ("ds-task-backup",)
    taskFields = [
        fields.TaskField("backupDirectory", fields.Text(), PROPERTY_BACKUP_DIRECTORY),
        fields.TaskField("backendIDs", fields.TextList(), PROPERTY_BACKEND_ID),
        fields.TaskField("backupID", fields.Text(), PROPERTY_BACKUP_ID),
        fields.TaskField(
            "incremental", fields.Flag(), PROPERTY_INCREMENTAL, default=False
        ),
        fields.TaskField(
            "incrementalBaseID", fields.Text(), PROPERTY_INCREMENTAL_BASE_ID
        ),
        fields.TaskField("compress", fields.Flag(), PROPERTY_COMPRESS, default=False),
        fields.TaskField("encrypt", fields.Flag(), PROPERTY_ENCRYPT, default=False),
        fields.TaskField("hash", fields.Flag(), PROPERTY_HASH, default=False),
        fields.TaskField("signHash", fields.Flag(), PROPERTY_SIGN_HASH, default=False),
    ]
    taskName = "Backup"
    taskDescription = "Backs up one or more backends."

    def __init__(
        self,
        taskID=None,
        backupDirectory=None,
        backendIDs=None,
        backupID=None,
        incremental=False,
        incrementalBaseID=None,
        compress=False,
        encrypt=False,
        hash=False,
        signHash=False,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            backupDirectory=backupDirectory,
            backendIDs=backendIDs,
            backupID=backupID,
            incremental=incremental,
            incrementalBaseID=incrementalBaseID,
            compress=compress,
            encrypt=encrypt,
            hash=hash,
            signHash=signHash,
        )

    def getAdditionalAttributes(self):
        l = TypedTask.getAdditionalAttributes(self)
        if not self.backendIDs:
            l.append((ATTR_BACKUP_ALL, ["true"]))
        return l

    def getBackupDirectory(self):
        return self.backupDirectory

    def backupAll(self):
        return not self.backendIDs

    def getBackendIDs(self):
        return list(self.backendIDs)

    def getBackupID(self):
        return self.backupID

    def incrementalBackup(self):
        return self.incremental

    def getIncrementalBaseID(self):
        return self.incrementalBaseID

    def compressBackup(self):
        return self.compress

    def encryptBackup(self):
        return self.encrypt

    def hashBackup(self):
        return self.hash

    def signHashBackup(self):
        return self.signHash


class RestoreTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.RestoreTask"
    additionalObjectClasses = ("ds-task-restore",)
    taskFields = [
        fields.TaskField(
            "backupDirectory", fields.Text(), PROPERTY_RESTORE_BACKUP_DIRECTORY
        ),
        fields.TaskField("backupID", fields.Text(), PROPERTY_RESTORE_BACKUP_ID),
        fields.TaskField(
            "verifyOnly", fields.Flag(), PROPERTY_VERIFY_ONLY, default=False
        ),
        fields.TaskField(
            "encryptionPassphraseFile",
            fields.Text(),
            PROPERTY_ENCRYPTION_PASSPHRASE_FILE,
        ),
    ]
    taskName = "Restore"
    taskDescription = "Restores a backend from a backup."

    def __init__(
        self,
        taskID=None,
        backupDirectory=None,
        backupID=None,
        verifyOnly=False,
        encryptionPassphraseFile=None,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            backupDirectory=backupDirectory,
            backupID=backupID,
            verifyOnly=verifyOnly,
            encryptionPassphraseFile=encryptionPassphraseFile,
        )

    def getBackupDirectory(self):
        return self.backupDirectory

    def getBackupID(self):
        return self.backupID

    def isVerifyOnly(self):
        return self.verifyOnly

    def getEncryptionPassphraseFile(self):
        return self.encryptionPassphraseFile
