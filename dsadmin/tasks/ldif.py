"""
Tasks moving backend contents to and from LDIF, and re-encoding
entries in place.
"""

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask


def _branchProperties(prefix, what):
    """
    Build the include/exclude branch and filter properties shared by
    the LDIF tasks.
    """
    return [
        fields.stringProperty(
            prefix + "include-branch",
            "Include Branch",
            "The base DN of a branch to include in the %s." % what,
            multiValued=True,
            advanced=True,
        ),
        fields.stringProperty(
            prefix + "exclude-branch",
            "Exclude Branch",
            "The base DN of a branch to exclude from the %s." % what,
            multiValued=True,
            advanced=True,
        ),
        fields.stringProperty(
            prefix + "include-filter",
            "Include Filter",
            "A filter matching entries to include in the %s." % what,
            multiValued=True,
            advanced=True,
        ),
        fields.stringProperty(
            prefix + "exclude-filter",
            "Exclude Filter",
            "A filter matching entries to exclude from the %s." % what,
            multiValued=True,
            advanced=True,
        ),
    ]


def _attributeProperties(prefix, what):
    return [
        fields.stringProperty(
            prefix + "include-attribute",
            "Include Attribute",
            "The name of an attribute to include in the %s." % what,
            multiValued=True,
            advanced=True,
        ),
        fields.stringProperty(
            prefix + "exclude-attribute",
            "Exclude Attribute",
            "The name of an attribute to exclude from the %s." % what,
            multiValued=True,
            advanced=True,
        ),
    ]


def _selectionFields(branchProperties, attributeProperties=()):
    names = ["includeBranches", "excludeBranches", "includeFilters", "excludeFilters"]
    l = [
        fields.TaskField(name, fields.TextList(), p)
        for name, p in zip(names, branchProperties)
    ]
    names = ["includeAttributes", "excludeAttributes"]
    l.extend(
        fields.TaskField(name, fields.TextList(), p)
        for name, p in zip(names, attributeProperties)
    )
    return l


PROPERTY_EXPORT_BACKEND_ID = fields.stringProperty(
    "ds-task-export-backend-id",
    "Backend ID",
    "The ID of the backend to export.",
    required=True,
)
PROPERTY_EXPORT_LDIF_FILE = fields.stringProperty(
    "ds-task-export-ldif-file",
    "LDIF File",
    "The path of the LDIF file to write.",
    required=True,
)
PROPERTY_APPEND_TO_LDIF = fields.booleanProperty(
    "ds-task-export-append-to-ldif",
    "Append to LDIF",
    "Whether to append to an existing LDIF file rather than replace it.",
)
PROPERTY_EXPORT_COMPRESS = fields.booleanProperty(
    "ds-task-export-compress-ldif",
    "Compress",
    "Whether to compress the LDIF data.",
)
PROPERTY_EXPORT_ENCRYPT = fields.booleanProperty(
    "ds-task-export-encrypt-ldif",
    "Encrypt",
    "Whether to encrypt the LDIF data.",
)
PROPERTY_EXPORT_SIGN = fields.booleanProperty(
    "ds-task-export-sign-hash",
    "Sign Hash",
    "Whether to generate a signed hash of the exported data.",
)
EXPORT_BRANCH_PROPERTIES = _branchProperties("ds-task-export-", "export")
EXPORT_ATTRIBUTE_PROPERTIES = _attributeProperties("ds-task-export-", "export")
PROPERTY_WRAP_COLUMN = fields.integerProperty(
    "ds-task-export-wrap-column",
    "Wrap Column",
    "The column at which to wrap long lines. Lines are not wrapped if none "
    "is given.",
    advanced=True,
)


class ExportTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.ExportTask"
    additionalObjectClasses = ("ds-task-export",)
    taskFields = (
        [
            fields.TaskField("backendID", fields.Text(), PROPERTY_EXPORT_BACKEND_ID),
            fields.TaskField("ldifFile", fields.Text(), PROPERTY_EXPORT_LDIF_FILE),
            fields.TaskField(
                "appendToLDIF", fields.Flag(), PROPERTY_APPEND_TO_LDIF, default=False
            ),
            fields.TaskField(
                "compress", fields.Flag(), PROPERTY_EXPORT_COMPRESS, default=False
            ),
            fields.TaskField(
                "encrypt", fields.Flag(), PROPERTY_EXPORT_ENCRYPT, default=False
            ),
            fields.TaskField("sign", fields.Flag(), PROPERTY_EXPORT_SIGN, default=False),
        ]
        + _selectionFields(EXPORT_BRANCH_PROPERTIES, EXPORT_ATTRIBUTE_PROPERTIES)
        + [fields.TaskField("wrapColumn", fields.Integer(), PROPERTY_WRAP_COLUMN)]
    )
    taskName = "LDIF Export"
    taskDescription = "Exports the contents of a backend to LDIF."

    def __init__(
        self,
        taskID=None,
        backendID=None,
        ldifFile=None,
        appendToLDIF=False,
        includeBranches=None,
        excludeBranches=None,
        includeFilters=None,
        excludeFilters=None,
        includeAttributes=None,
        excludeAttributes=None,
        wrapColumn=None,
        compress=False,
        encrypt=False,
        sign=False,
        **kw
    ):
        """
        @param wrapColumn: the column to wrap long lines at. None, or
        any value below one, disables wrapping.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            backendID=backendID,
            ldifFile=ldifFile,
            appendToLDIF=appendToLDIF,
            includeBranches=includeBranches,
            excludeBranches=excludeBranches,
            includeFilters=includeFilters,
            excludeFilters=excludeFilters,
            includeAttributes=includeAttributes,
            excludeAttributes=excludeAttributes,
            wrapColumn=wrapColumn,
            compress=compress,
            encrypt=encrypt,
            sign=sign,
        )
        if self.wrapColumn is not None and self.wrapColumn < 1:
            self.wrapColumn = None

    def getBackendID(self):
        return self.backendID

    def getLDIFFile(self):
        return self.ldifFile

    def shouldAppendToLDIF(self):
        return self.appendToLDIF

    def getIncludeBranches(self):
        return list(self.includeBranches)

    def getExcludeBranches(self):
        return list(self.excludeBranches)

    def getIncludeFilters(self):
        return list(self.includeFilters)

    def getExcludeFilters(self):
        return list(self.excludeFilters)

    def getIncludeAttributes(self):
        return list(self.includeAttributes)

    def getExcludeAttributes(self):
        return list(self.excludeAttributes)

    def getWrapColumn(self):
        """Return the wrap column, or -1 if lines are not wrapped."""
        if self.wrapColumn is None:
            return -1
        return self.wrapColumn

    def compressData(self):
        return self.compress

    def encryptData(self):
        return self.encrypt

    def signData(self):
        return self.sign


PROPERTY_IMPORT_LDIF_FILE = fields.stringProperty(
    "ds-task-import-ldif-file",
    "LDIF File Path",
    "The path of an LDIF file to import.",
    required=True,
    multiValued=True,
)
PROPERTY_APPEND = fields.booleanProperty(
    "ds-task-import-append",
    "Append to Existing Data",
    "Whether to add the data to the backend rather than replace its contents.",
)
PROPERTY_REPLACE_EXISTING = fields.booleanProperty(
    "ds-task-import-replace-existing",
    "Replace Existing Entries",
    "Whether imported entries replace existing ones with the same DN when "
    "appending.",
)
PROPERTY_OVERWRITE_REJECTS = fields.booleanProperty(
    "ds-task-import-overwrite-rejects",
    "Overwrite Reject File",
    "Whether to replace an existing reject file rather than append to it.",
    advanced=True,
)
PROPERTY_CLEAR_BACKEND = fields.booleanProperty(
    "ds-task-import-clear-backend",
    "Clear Backend",
    "Whether to remove all entries from the backend before importing.",
)
PROPERTY_IS_COMPRESSED = fields.booleanProperty(
    "ds-task-import-is-compressed",
    "Is Compressed",
    "Whether the LDIF data is compressed.",
)
PROPERTY_IS_ENCRYPTED = fields.booleanProperty(
    "ds-task-import-is-encrypted",
    "Is Encrypted",
    "Whether the LDIF data is encrypted.",
)
PROPERTY_SKIP_SCHEMA_VALIDATION = fields.booleanProperty(
    "ds-task-import-skip-schema-validation",
    "Skip Schema Validation",
    "Whether to skip schema checking of the imported entries.",
    advanced=True,
)
PROPERTY_STRIP_TRAILING_SPACES = fields.booleanProperty(
    "ds-task-import-strip-trailing-spaces",
    "Strip Trailing Spaces",
    "Whether to strip illegal trailing spaces from LDIF records.",
    advanced=True,
)
PROPERTY_IMPORT_BACKEND_ID = fields.stringProperty(
    "ds-task-import-backend-id",
    "Backend ID",
    "The ID of the backend to import into.",
)
PROPERTY_REJECT_FILE = fields.stringProperty(
    "ds-task-import-reject-file",
    "Reject File",
    "The path of a file to which rejected entries are written.",
)
IMPORT_BRANCH_PROPERTIES = _branchProperties("ds-task-import-", "import")
IMPORT_ATTRIBUTE_PROPERTIES = _attributeProperties("ds-task-import-", "import")
PROPERTY_IMPORT_PASSPHRASE_FILE = fields.stringProperty(
    "ds-task-import-encryption-passphrase-file",
    "Encryption Passphrase File",
    "The file holding the passphrase the LDIF data was encrypted with.",
    advanced=True,
)


class ImportTask(TypedTask):
    """
    Import one or more LDIF files into a backend.

    Either a backend ID or at least one include branch is needed to pick
    the target backend. When building a task directly, the caller must
    also say whether the backend is appended to, cleared, or restricted
    to the included branches.
    """

    taskClassName = "com.unboundid.directory.server.tasks.ImportTask"
    additionalObjectClasses = ("ds-task-import",)
    taskFields = (
        [
            fields.TaskField("ldifFiles", fields.TextList(), PROPERTY_IMPORT_LDIF_FILE),
            fields.TaskField("append", fields.Flag(), PROPERTY_APPEND, default=False),
            fields.TaskField(
                "replaceExisting",
                fields.Flag(),
                PROPERTY_REPLACE_EXISTING,
                default=False,
            ),
            fields.TaskField(
                "overwriteRejects",
                fields.Flag(),
                PROPERTY_OVERWRITE_REJECTS,
                default=False,
            ),
            fields.TaskField(
                "clearBackend", fields.Flag(), PROPERTY_CLEAR_BACKEND, default=False
            ),
            fields.TaskField(
                "compressed", fields.Flag(), PROPERTY_IS_COMPRESSED, default=False
            ),
            fields.TaskField(
                "encrypted", fields.Flag(), PROPERTY_IS_ENCRYPTED, default=False
            ),
            fields.TaskField(
                "skipSchemaValidation",
                fields.Flag(),
                PROPERTY_SKIP_SCHEMA_VALIDATION,
                default=False,
            ),
            fields.TaskField(
                "stripTrailingSpaces", fields.Flag(), PROPERTY_STRIP_TRAILING_SPACES
            ),
            fields.TaskField("backendID", fields.Text(), PROPERTY_IMPORT_BACKEND_ID),
            fields.TaskField("rejectFile", fields.Text(), PROPERTY_REJECT_FILE),
        ]
        + _selectionFields(IMPORT_BRANCH_PROPERTIES, IMPORT_ATTRIBUTE_PROPERTIES)
        + [
            fields.TaskField(
                "encryptionPassphraseFile",
                fields.Text(),
                PROPERTY_IMPORT_PASSPHRASE_FILE,
            ),
        ]
    )
    taskName = "LDIF Import"
    taskDescription = "Imports data from LDIF into a backend."

    def __init__(
        self,
        taskID=None,
        ldifFiles=None,
        backendID=None,
        append=False,
        replaceExisting=False,
        rejectFile=None,
        overwriteRejects=False,
        clearBackend=False,
        includeBranches=None,
        excludeBranches=None,
        includeFilters=None,
        excludeFilters=None,
        includeAttributes=None,
        excludeAttributes=None,
        compressed=False,
        encrypted=False,
        encryptionPassphraseFile=None,
        skipSchemaValidation=False,
        stripTrailingSpaces=False,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            ldifFiles=ldifFiles,
            backendID=backendID,
            append=append,
            replaceExisting=replaceExisting,
            rejectFile=rejectFile,
            overwriteRejects=overwriteRejects,
            clearBackend=clearBackend,
            includeBranches=includeBranches,
            excludeBranches=excludeBranches,
            includeFilters=includeFilters,
            excludeFilters=excludeFilters,
            includeAttributes=includeAttributes,
            excludeAttributes=excludeAttributes,
            compressed=compressed,
            encrypted=encrypted,
            encryptionPassphraseFile=encryptionPassphraseFile,
            skipSchemaValidation=skipSchemaValidation,
            stripTrailingSpaces=stripTrailingSpaces,
        )
        # Only written to the entry when set.
        if not self.stripTrailingSpaces:
            self.stripTrailingSpaces = None

    def validate(self):
        if self.backendID is None and not self.includeBranches:
            raise errors.UsageError(
                "Either a backend ID or at least one include branch is required"
            )
        if not self._decoding and not (
            self.clearBackend or self.append or self.includeBranches
        ):
            raise errors.UsageError(
                "One of clearBackend, append or includeBranches must be given"
            )

    def getLDIFFiles(self):
        return list(self.ldifFiles)

    def getBackendID(self):
        return self.backendID

    def shouldAppend(self):
        return self.append

    def shouldReplaceExistingEntries(self):
        return self.replaceExisting

    def getRejectFile(self):
        return self.rejectFile

    def shouldOverwriteRejectFile(self):
        return self.overwriteRejects

    def shouldClearBackend(self):
        return self.clearBackend

    def getIncludeBranches(self):
        return list(self.includeBranches)

    def getExcludeBranches(self):
        return list(self.excludeBranches)

    def getIncludeFilters(self):
        return list(self.includeFilters)

    def getExcludeFilters(self):
        return list(self.excludeFilters)

    def getIncludeAttributes(self):
        return list(self.includeAttributes)

    def getExcludeAttributes(self):
        return list(self.excludeAttributes)

    def isCompressed(self):
        return self.compressed

    def isEncrypted(self):
        return self.encrypted

    def getEncryptionPassphraseFile(self):
        return self.encryptionPassphraseFile

    def skipSchemaValidationChecks(self):
        return self.skipSchemaValidation

    def stripTrailingSpacesFromValues(self):
        return bool(self.stripTrailingSpaces)


PROPERTY_REENCODE_BACKEND_ID = fields.stringProperty(
    "ds-task-reencode-backend-id",
    "Backend ID",
    "The ID of the backend whose entries should be re-encoded.",
    required=True,
)
REENCODE_BRANCH_PROPERTIES = _branchProperties("ds-task-reencode-", "re-encode")
PROPERTY_REENCODE_MAX_RATE = fields.integerProperty(
    "ds-task-reencode-max-entries-per-second",
    "Maximum Re-Encode Rate",
    "The largest number of entries to re-encode per second.",
    advanced=True,
)
PROPERTY_SKIP_FULLY_UNCACHED = fields.booleanProperty(
    "ds-task-reencode-skip-fully-uncached-entries",
    "Skip Fully Uncached Entries",
    "Whether to skip entries that are not cached at all.",
)
PROPERTY_SKIP_PARTIALLY_UNCACHED = fields.booleanProperty(
    "ds-task-reencode-skip-partially-uncached-entries",
    "Skip Partially Uncached Entries",
    "Whether to skip entries that are only partly cached.",
)


class ReEncodeEntriesTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.ReEncodeEntriesTask"
    additionalObjectClasses = ("ds-task-reencode",)
    taskFields = (
        [
            fields.TaskField(
                "backendID", fields.Text(), PROPERTY_REENCODE_BACKEND_ID
            ),
            fields.TaskField(
                "skipFullyUncachedEntries",
                fields.Flag(),
                PROPERTY_SKIP_FULLY_UNCACHED,
                default=False,
            ),
            fields.TaskField(
                "skipPartiallyUncachedEntries",
                fields.Flag(),
                PROPERTY_SKIP_PARTIALLY_UNCACHED,
                default=False,
            ),
        ]
        + _selectionFields(REENCODE_BRANCH_PROPERTIES)
        + [
            fields.TaskField(
                "maxEntriesPerSecond",
                fields.Integer(minimum=1),
                PROPERTY_REENCODE_MAX_RATE,
            ),
        ]
    )
    taskName = "Re-Encode Entries"
    taskDescription = (
        "Re-encodes the entries of a local DB backend with the current "
        "encoding settings."
    )

    def __init__(
        self,
        taskID=None,
        backendID=None,
        includeBranches=None,
        excludeBranches=None,
        includeFilters=None,
        excludeFilters=None,
        maxEntriesPerSecond=None,
        skipFullyUncachedEntries=False,
        skipPartiallyUncachedEntries=False,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            backendID=backendID,
            includeBranches=includeBranches,
            excludeBranches=excludeBranches,
            includeFilters=includeFilters,
            excludeFilters=excludeFilters,
            maxEntriesPerSecond=maxEntriesPerSecond,
            skipFullyUncachedEntries=skipFullyUncachedEntries,
            skipPartiallyUncachedEntries=skipPartiallyUncachedEntries,
        )

    def getBackendID(self):
        return self.backendID

    def getIncludeBranches(self):
        return list(self.includeBranches)

    def getExcludeBranches(self):
        return list(self.excludeBranches)

    def getIncludeFilters(self):
        return list(self.includeFilters)

    def getExcludeFilters(self):
        return list(self.excludeFilters)

    def getMaxEntriesPerSecond(self):
        return self.maxEntriesPerSecond

    def skipFullyUncached(self):
        return self.skipFullyUncachedEntries

    def skipPartiallyUncached(self):
        return self.skipPartiallyUncachedEntries
