"""
Test cases for the concrete task types.
"""

from ldaptor.protocols import pureldap
from twisted.trial import unittest

from dsadmin import errors, testutil
from dsadmin.entry import getAttributeValue, getAttributeValues
from dsadmin.tasks import (
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
    FailedDependencyAction,
    FileRetentionTask,
    FileRetentionTimestampFormat,
    GroovyScriptedTask,
    ImportTask,
    LeaveLockdownModeTask,
    RebuildTask,
    ReEncodeEntriesTask,
    RefreshEncryptionSettingsTask,
    ReloadGlobalIndexTask,
    RemoveAttributeTypeTask,
    RestoreTask,
    SearchScope,
    SearchTask,
    SecurityLevel,
    ShutdownTask,
    TaskState,
    ThirdPartyTask,
    decodeTask,
    getAvailableTaskTypes,
)
from dsadmin.tasks import command, delay, retention, search

DAY = 86400 * 1000


def sampleTasks():
    """
    Build a valid instance of every task type, populating most of the
    fields.
    """
    return [
        AddSchemaFileTask("schema", ["99-user.ldif", "98-app.ldif"]),
        RemoveAttributeTypeTask("remove", "obsoleteAttr"),
        BackupTask(
            "backup",
            "bak",
            ["userRoot", "changelog"],
            backupID="b1",
            incremental=True,
            incrementalBaseID="b0",
            compress=True,
            hash=True,
        ),
        BackupTask("backup-all", "bak"),
        RestoreTask("restore", "bak/userRoot", backupID="b1", verifyOnly=True),
        RebuildTask("rebuild", "dc=example,dc=com", ["uid", "cn"], maxRebuildThreads=4),
        ReloadGlobalIndexTask(
            "reload",
            "dc=example,dc=com",
            ["uid"],
            reloadFromDS=True,
            reloadInBackground=False,
            maxEntriesPerSecond=100,
        ),
        ShutdownTask("shutdown", "maintenance", restartServer=True),
        DisconnectClientTask("disconnect", 42, "bye", notifyClient=True),
        EnterLockdownModeTask("lockdown", "upgrade"),
        LeaveLockdownModeTask("unlock"),
        RefreshEncryptionSettingsTask(
            "refresh",
            dependencyIDs=["lockdown"],
            failedDependencyAction=FailedDependencyAction.CANCEL,
            notifyOnError=["ops@example.com"],
            alertOnError=True,
        ),
        ExecTask(
            "exec",
            "/bin/echo",
            "hello world",
            logCommandOutput=True,
            taskStateForNonZeroExitCode=TaskState.COMPLETED_WITH_ERRORS,
            workingDirectory="/tmp",
        ),
        FileRetentionTask(
            "retention",
            "logs",
            "access.${timestamp}",
            FileRetentionTimestampFormat.GENERALIZED_TIME_UTC_WITH_SECONDS,
            retainFileCount=10,
            retainFileAgeMillis=30 * DAY,
        ),
        GroovyScriptedTask("groovy", "com.example.Script", ["a=1", "b=2"]),
        ThirdPartyTask("third-party", "com.example.Extension", ["x=y"]),
        ExportTask(
            "export",
            "userRoot",
            "export.ldif",
            includeBranches=["ou=People,dc=example,dc=com"],
            excludeAttributes=["userPassword"],
            wrapColumn=76,
            compress=True,
        ),
        ImportTask(
            "import",
            ["a.ldif", "b.ldif"],
            backendID="userRoot",
            append=True,
            replaceExisting=True,
            rejectFile="rejects.ldif",
            stripTrailingSpaces=True,
        ),
        ReEncodeEntriesTask(
            "reencode",
            "userRoot",
            includeFilters=["(objectClass=person)"],
            maxEntriesPerSecond=500,
            skipFullyUncachedEntries=True,
        ),
        CollectSupportDataTask(
            "support",
            outputPath="support.zip",
            includeExpensiveData=True,
            securityLevel=SecurityLevel.OBSCURE_SECRETS,
            jstackCount=3,
            logDuration="2 hours",
            comment="slow binds",
        ),
        AlertTask(
            "alert",
            "com.example.alert",
            "Disk almost full",
            addDegradedTypes=["low-disk-space-warning"],
        ),
        AlertTask("health", removeUnavailableTypes=["replication-backlogged"]),
        DelayTask(
            "delay",
            sleepDurationMillis=5000,
            ldapURLsForSearchesExpectedToReturnEntries=[
                "ldap:///dc=example,dc=com??sub?(uid=ready)"
            ],
            millisBetweenSearches=100,
            searchTimeLimitMillis=1000,
            totalDurationMillisForEachLDAPURL=60000,
            taskStateIfTimeoutIsEncountered=TaskState.COMPLETED_WITH_ERRORS,
        ),
        AuditDataSecurityTask(
            "audit",
            includeAuditors=["weakly-encoded-password"],
            backendIDs=["userRoot"],
            reportFilters=["(objectClass=person)"],
            outputDirectory="reports",
        ),
        SearchTask(
            "search",
            "dc=example,dc=com",
            SearchScope.SUB,
            "(uid=jdoe)",
            ["cn", "mail"],
            "search.ldif",
            authzDN="uid=admin,dc=example,dc=com",
        ),
    ]


class TestRoundTrip(unittest.TestCase):
    def setUp(self):
        self.config = testutil.taskConfig()

    def testEveryTypeSampled(self):
        sampled = {t.__class__ for t in sampleTasks()}
        self.assertEqual(sampled, set(getAvailableTaskTypes()))

    def testEntry(self):
        """
        Decoding the entry rendered for a task gives back an equal task
        of the same type.
        """
        for t in sampleTasks():
            decoded = decodeTask(t.createTaskEntry(self.config), config=self.config)
            self.assertIdentical(decoded.__class__, t.__class__)
            self.assertEqual(decoded, t)
            self.assertEqual(decoded.getTaskPropertyValues(), t.getTaskPropertyValues())

    def testProperties(self):
        for t in sampleTasks():
            other = t.__class__.fromProperties(t.getTaskPropertyValues())
            self.assertEqual(other, t)

    def testPropertyValueTypes(self):
        for t in sampleTasks():
            for p, values in t.getTaskPropertyValues().items():
                if p.isRequired():
                    self.assertTrue(values, p.getAttributeName())
                if not p.isMultiValued():
                    self.assertTrue(len(values) <= 1, p.getAttributeName())
                for v in values:
                    self.assertIsInstance(v, p.getDataType())

    def testEmptyPropertyMap(self):
        for klass in getAvailableTaskTypes():
            self.assertRaises(errors.TaskError, klass.fromProperties, {})

    def testSpecificPropertiesDeclared(self):
        for t in sampleTasks():
            specific = t.getTaskSpecificProperties()
            values = t.getTaskPropertyValues()
            for p in specific:
                self.assertIn(p, values)


class TestSchemaTasks(unittest.TestCase):
    def testAddSchemaFile(self):
        t = AddSchemaFileTask("foo", "bar")
        self.assertEqual(t.getSchemaFileNames(), ["bar"])
        self.assertEqual(
            t.getTaskClassName(),
            "com.unboundid.directory.server.tasks.AddSchemaFileTask",
        )
        self.assertEqual(t.getAdditionalObjectClasses(), ["ds-task-add-schema-file"])

    def testAddSchemaFileRequired(self):
        self.assertRaises(errors.UsageError, AddSchemaFileTask, "foo", [])
        e = testutil.entryForType(AddSchemaFileTask)
        err = self.assertRaises(errors.TaskError, AddSchemaFileTask.fromEntry, e)
        self.assertIn("ds-task-schema-file-name", err.message)

    def testRemoveAttributeTypeRequired(self):
        self.assertRaises(errors.UsageError, RemoveAttributeTypeTask, "foo")


class TestBackupTask(unittest.TestCase):
    def testBackupAll(self):
        t = BackupTask("foo", "bak", None)
        self.assertTrue(t.backupAll())
        self.assertEqual(t.getBackendIDs(), [])
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(getAttributeValue(e, "ds-task-backup-all"), "true")

    def testBackends(self):
        t = BackupTask("foo", "bak", ["userRoot"])
        self.assertFalse(t.backupAll())
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertFalse("ds-task-backup-all" in e)
        self.assertEqual(getAttributeValues(e, "ds-task-backup-backend-id"), ["userRoot"])

    def testDefaults(self):
        t = BackupTask("foo", "bak")
        self.assertFalse(t.incrementalBackup())
        self.assertFalse(t.compressBackup())
        self.assertFalse(t.encryptBackup())
        self.assertFalse(t.hashBackup())
        self.assertFalse(t.signHashBackup())
        self.assertEqual(t.getBackupID(), None)

    def testDirectoryRequired(self):
        self.assertRaises(errors.UsageError, BackupTask, "foo")
        self.assertRaises(errors.UsageError, RestoreTask, "foo")

    def testBooleanStrictness(self):
        e = testutil.entryForType(
            BackupTask,
            {"ds-backup-directory-path": "bak", "ds-task-backup-compress": "yes"},
        )
        err = self.assertRaises(errors.TaskError, BackupTask.fromEntry, e)
        self.assertIn("ds-task-backup-compress", err.message)

    def testBooleanCase(self):
        e = testutil.entryForType(
            BackupTask,
            {"ds-backup-directory-path": "bak", "ds-task-backup-compress": "TRUE"},
        )
        self.assertTrue(BackupTask.fromEntry(e).compressBackup())

    def testRestore(self):
        e = testutil.entryForType(
            RestoreTask,
            {
                "ds-backup-directory-path": "bak/userRoot",
                "ds-task-restore-verify-only": "true",
            },
        )
        t = RestoreTask.fromEntry(e)
        self.assertEqual(t.getBackupDirectory(), "bak/userRoot")
        self.assertEqual(t.getBackupID(), None)
        self.assertTrue(t.isVerifyOnly())


class TestIndexTasks(unittest.TestCase):
    def testRebuild(self):
        t = RebuildTask("foo", "dc=example,dc=com", ["uid", "cn"])
        self.assertEqual(t.getIndexNames(), ["uid", "cn"])
        self.assertEqual(t.getBaseDN(), "dc=example,dc=com")
        self.assertEqual(t.getMaxRebuildThreads(), -1)

    def testRebuildNoIndexes(self):
        self.assertRaises(
            errors.UsageError, RebuildTask, "foo", "dc=example,dc=com", []
        )

    def testRebuildThreads(self):
        t = RebuildTask("foo", "dc=example,dc=com", ["uid"], maxRebuildThreads=0)
        self.assertEqual(t.getMaxRebuildThreads(), -1)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertFalse("ds-task-rebuild-max-threads" in e)

    def testRebuildBadThreadCount(self):
        e = testutil.entryForType(
            RebuildTask,
            {
                "ds-task-rebuild-base-dn": "dc=example,dc=com",
                "ds-task-rebuild-index": "uid",
                "ds-task-rebuild-max-threads": "many",
            },
        )
        self.assertRaises(errors.TaskError, RebuildTask.fromEntry, e)

    def testRebuildNonASCIIThreadCount(self):
        e = testutil.entryForType(
            RebuildTask,
            {
                "ds-task-rebuild-base-dn": "dc=example,dc=com",
                "ds-task-rebuild-index": "uid",
                "ds-task-rebuild-max-threads": "\u0664",
            },
        )
        self.assertRaises(errors.TaskError, RebuildTask.fromEntry, e)

    def testReloadAllIndexes(self):
        t = ReloadGlobalIndexTask("foo", "dc=example,dc=com")
        self.assertEqual(t.getIndexNames(), [])
        self.assertEqual(t.getReloadFromDS(), None)

    def testReloadRate(self):
        self.assertRaises(
            errors.UsageError,
            ReloadGlobalIndexTask,
            "foo",
            "dc=example,dc=com",
            maxEntriesPerSecond=0,
        )


class TestServerTasks(unittest.TestCase):
    def testShutdown(self):
        t = ShutdownTask("foo")
        self.assertFalse(t.isRestart())
        self.assertEqual(t.getShutdownMessage(), None)

    def testDisconnect(self):
        e = testutil.entryForType(
            DisconnectClientTask, {"ds-task-disconnect-connection-id": "17"}
        )
        t = DisconnectClientTask.fromEntry(e)
        self.assertEqual(t.getConnectionID(), 17)
        self.assertFalse(t.shouldNotifyClient())

    def testDisconnectBadID(self):
        e = testutil.entryForType(
            DisconnectClientTask, {"ds-task-disconnect-connection-id": "seventeen"}
        )
        err = self.assertRaises(errors.TaskError, DisconnectClientTask.fromEntry, e)
        self.assertIn("ds-task-disconnect-connection-id", err.message)

    def testDisconnectMalformedID(self):
        """
        Connection IDs are plain ASCII decimal integers.
        """
        for text in ["1_2", "\u0661\u0662", "0x11"]:
            e = testutil.entryForType(
                DisconnectClientTask, {"ds-task-disconnect-connection-id": text}
            )
            self.assertRaises(errors.TaskError, DisconnectClientTask.fromEntry, e)

    def testDisconnectRequiresID(self):
        self.assertRaises(errors.UsageError, DisconnectClientTask, "foo")
        self.assertRaises(errors.UsageError, DisconnectClientTask, "foo", "17")

    def testLockdownReason(self):
        t = EnterLockdownModeTask("foo", "upgrade")
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(getAttributeValue(e, "ds-task-enter-lockdown-reason"), "upgrade")
        self.assertEqual(LeaveLockdownModeTask("bar").getReason(), None)


class TestExecTask(unittest.TestCase):
    def testStateName(self):
        t = ExecTask("foo", "/bin/true", taskStateForNonZeroExitCode="STOPPED_BY_ERROR")
        self.assertIdentical(t.getTaskStateForNonZeroExitCode(), TaskState.STOPPED_BY_ERROR)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(
            getAttributeValue(
                e, "ds-task-exec-task-completion-state-for-nonzero-exit-code"
            ),
            "stopped-by-error",
        )

    def testUnsupportedState(self):
        """
        States other than the three completion states are rejected the
        same way whichever way the task is built.
        """
        self.assertRaises(
            errors.TaskError,
            ExecTask,
            "foo",
            "/bin/true",
            taskStateForNonZeroExitCode=TaskState.RUNNING,
        )

        e = testutil.entryForType(
            ExecTask,
            {
                "ds-task-exec-command-path": "/bin/true",
                "ds-task-exec-task-completion-state-for-nonzero-exit-code": "running",
            },
        )
        self.assertRaises(errors.TaskError, ExecTask.fromEntry, e)

        self.assertRaises(
            errors.TaskError,
            ExecTask.fromProperties,
            {
                command.PROPERTY_COMMAND_PATH: ["/bin/true"],
                command.PROPERTY_NONZERO_EXIT_STATE: ["running"],
            },
        )

    def testUnknownState(self):
        self.assertRaises(
            errors.UsageError,
            ExecTask,
            "foo",
            "/bin/true",
            taskStateForNonZeroExitCode="sleeping",
        )

    def testCommandPathRequired(self):
        self.assertRaises(errors.UsageError, ExecTask, "foo")


class TestFileRetentionTask(unittest.TestCase):
    def entry(self, attributes):
        attrs = {
            "ds-task-file-retention-target-directory": "logs",
            "ds-task-file-retention-filename-pattern": "access.${timestamp}",
            "ds-task-file-retention-timestamp-format": (
                "GENERALIZED_TIME_UTC_WITH_SECONDS"
            ),
        }
        attrs.update(attributes)
        return testutil.entryForType(FileRetentionTask, attrs)

    def testNoCriteria(self):
        self.assertRaises(errors.TaskError, FileRetentionTask.fromEntry, self.entry({}))

    def testOneCriterion(self):
        t = FileRetentionTask.fromEntry(
            self.entry({"ds-task-file-retention-retain-file-age": "7 days"})
        )
        self.assertEqual(t.getRetainFileAgeMillis(), 7 * DAY)
        self.assertEqual(t.getRetainFileCount(), None)
        self.assertEqual(t.getRetainAggregateFileSizeBytes(), None)
        self.assertIdentical(
            t.getTimestampFormat(),
            FileRetentionTimestampFormat.GENERALIZED_TIME_UTC_WITH_SECONDS,
        )

    def testConstructNoCriteria(self):
        self.assertRaises(
            errors.UsageError,
            FileRetentionTask,
            "foo",
            "logs",
            "access.${timestamp}",
            FileRetentionTimestampFormat.LOCAL_DATE,
        )

    def testEntryValues(self):
        t = FileRetentionTask(
            "foo",
            "logs",
            "access.${timestamp}",
            "local-time-with-minutes",
            retainFileAgeMillis=30 * DAY,
            retainAggregateFileSizeBytes=1024,
        )
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(
            getAttributeValue(e, "ds-task-file-retention-timestamp-format"),
            "LOCAL_TIME_WITH_MINUTES",
        )
        self.assertEqual(
            getAttributeValue(e, "ds-task-file-retention-retain-file-age"), "30 days"
        )
        self.assertEqual(
            getAttributeValue(
                e, "ds-task-file-retention-retain-aggregate-file-size-bytes"
            ),
            "1024",
        )

    def testUnknownFormat(self):
        e = self.entry(
            {
                "ds-task-file-retention-timestamp-format": "SOMETIME",
                "ds-task-file-retention-retain-file-count": "5",
            }
        )
        err = self.assertRaises(errors.TaskError, FileRetentionTask.fromEntry, e)
        self.assertIn("ds-task-file-retention-timestamp-format", err.message)

    def testBadAge(self):
        e = self.entry({"ds-task-file-retention-retain-file-age": "forever"})
        self.assertRaises(errors.TaskError, FileRetentionTask.fromEntry, e)

    def testNegativeCount(self):
        self.assertRaises(
            errors.UsageError,
            FileRetentionTask,
            "foo",
            "logs",
            "access.${timestamp}",
            FileRetentionTimestampFormat.LOCAL_DATE,
            retainFileCount=-1,
        )

    def testAgePropertyMustBeString(self):
        """
        The retain-file-age property is string typed; a bare number of
        milliseconds is rejected rather than reinterpreted.
        """
        t = FileRetentionTask(
            "foo",
            "logs",
            "access.${timestamp}",
            FileRetentionTimestampFormat.LOCAL_DATE,
            retainFileAgeMillis=30 * DAY,
        )
        values = t.getTaskPropertyValues()
        self.assertEqual(values[retention.PROPERTY_RETAIN_FILE_AGE], ["30 days"])
        values[retention.PROPERTY_RETAIN_FILE_AGE] = [30 * DAY]
        self.assertRaises(errors.TaskError, FileRetentionTask.fromProperties, values)
        values[retention.PROPERTY_RETAIN_FILE_AGE] = ["14d"]
        other = FileRetentionTask.fromProperties(values)
        self.assertEqual(other.getRetainFileAgeMillis(), 14 * DAY)


class TestExtensionTasks(unittest.TestCase):
    def testGroovy(self):
        t = GroovyScriptedTask("foo", "com.example.Script", ["a=1"])
        self.assertEqual(t.getGroovyScriptedTaskClassName(), "com.example.Script")
        self.assertEqual(t.getGroovyScriptedTaskArguments(), ["a=1"])

    def testBadArgument(self):
        self.assertRaises(
            errors.UsageError,
            GroovyScriptedTask,
            "foo",
            "com.example.Script",
            ["novalue"],
        )
        self.assertRaises(
            errors.UsageError,
            ThirdPartyTask,
            "foo",
            "com.example.Extension",
            ["=value"],
        )

    def testBadArgumentInEntry(self):
        e = testutil.entryForType(
            ThirdPartyTask,
            {
                "ds-third-party-task-java-class": "com.example.Extension",
                "ds-third-party-task-argument": ["a=1", "oops"],
            },
        )
        self.assertRaises(errors.TaskError, ThirdPartyTask.fromEntry, e)

    def testClassRequired(self):
        e = testutil.entryForType(GroovyScriptedTask)
        err = self.assertRaises(errors.TaskError, GroovyScriptedTask.fromEntry, e)
        self.assertIn("ds-scripted-task-class", err.message)


class TestLDIFTasks(unittest.TestCase):
    def testExportWrapColumn(self):
        t = ExportTask("foo", "userRoot", "export.ldif", wrapColumn=0)
        self.assertEqual(t.getWrapColumn(), -1)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertFalse("ds-task-export-wrap-column" in e)

    def testExportRequired(self):
        self.assertRaises(errors.UsageError, ExportTask, "foo", "userRoot")
        e = testutil.entryForType(
            ExportTask, {"ds-task-export-ldif-file": "export.ldif"}
        )
        err = self.assertRaises(errors.TaskError, ExportTask.fromEntry, e)
        self.assertIn("ds-task-export-backend-id", err.message)

    def testImportMode(self):
        """
        A directly built import task must say how the backend contents
        are treated.
        """
        self.assertRaises(
            errors.UsageError, ImportTask, "foo", ["a.ldif"], backendID="userRoot"
        )
        t = ImportTask("foo", ["a.ldif"], backendID="userRoot", clearBackend=True)
        self.assertTrue(t.shouldClearBackend())

    def testImportModeNotCheckedWhenDecoding(self):
        e = testutil.entryForType(
            ImportTask,
            {
                "ds-task-import-ldif-file": "a.ldif",
                "ds-task-import-backend-id": "userRoot",
            },
        )
        t = ImportTask.fromEntry(e)
        self.assertEqual(t.getLDIFFiles(), ["a.ldif"])
        self.assertFalse(t.shouldAppend())
        self.assertFalse(t.stripTrailingSpacesFromValues())

        fromProperties = ImportTask.fromProperties(t.getTaskPropertyValues())
        self.assertEqual(fromProperties.getBackendID(), "userRoot")
        self.assertFalse(fromProperties.shouldClearBackend())

    def testImportModeCannotBeSkipped(self):
        """
        The import mode check has no constructor switch; only decoding
        skips it.
        """
        self.assertRaises(
            TypeError,
            ImportTask,
            "foo",
            ["a.ldif"],
            backendID="userRoot",
            _checkImportMode=False,
        )
        e = testutil.entryForType(
            ImportTask,
            {
                "ds-task-import-ldif-file": "a.ldif",
                "ds-task-import-backend-id": "userRoot",
            },
        )
        self.assertFalse(ImportTask.fromEntry(e)._decoding)

    def testImportNeedsBackend(self):
        e = testutil.entryForType(ImportTask, {"ds-task-import-ldif-file": "a.ldif"})
        self.assertRaises(errors.TaskError, ImportTask.fromEntry, e)
        t = ImportTask(
            "foo", ["a.ldif"], includeBranches=["ou=People,dc=example,dc=com"]
        )
        self.assertEqual(t.getBackendID(), None)

    def testImportStripTrailingSpaces(self):
        t = ImportTask("foo", "a.ldif", backendID="userRoot", append=True)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertFalse("ds-task-import-strip-trailing-spaces" in e)
        self.assertEqual(getAttributeValue(e, "ds-task-import-append"), "true")

    def testReEncodeRate(self):
        self.assertRaises(
            errors.UsageError,
            ReEncodeEntriesTask,
            "foo",
            "userRoot",
            maxEntriesPerSecond=0,
        )


class TestCollectSupportDataTask(unittest.TestCase):
    def testDefaults(self):
        t = CollectSupportDataTask()
        self.assertEqual(t.getOutputPath(), None)
        self.assertEqual(t.getSecurityLevel(), None)
        self.assertEqual(t.getLogDurationMillis(), None)
        self.assertEqual(
            t.getTaskSpecificProperties()[0].getAttributeName(),
            "ds-task-collect-support-data-output-path",
        )

    def testSecurityLevel(self):
        t = CollectSupportDataTask("foo", securityLevel="maximum")
        self.assertIdentical(t.getSecurityLevel(), SecurityLevel.MAXIMUM)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(
            getAttributeValue(e, "ds-task-collect-support-data-security-level"),
            "maximum",
        )

    def testUnknownSecurityLevel(self):
        e = testutil.entryForType(
            CollectSupportDataTask,
            {"ds-task-collect-support-data-security-level": "paranoid"},
        )
        self.assertRaises(errors.TaskError, CollectSupportDataTask.fromEntry, e)

    def testDurations(self):
        t = CollectSupportDataTask("foo", logDuration="90 minutes")
        self.assertEqual(t.getLogDurationMillis(), 90 * 60 * 1000)
        self.assertRaises(
            errors.UsageError, CollectSupportDataTask, "foo", logDuration="a while"
        )
        self.assertRaises(
            errors.UsageError,
            CollectSupportDataTask,
            "foo",
            retainPreviousArchiveAge="7 fortnights",
        )

    def testNegativeCount(self):
        self.assertRaises(
            errors.UsageError, CollectSupportDataTask, "foo", jstackCount=-1
        )


class TestAlertTask(unittest.TestCase):
    def testAlert(self):
        t = AlertTask("foo", "com.example.alert", "Something happened")
        self.assertEqual(t.getAlertType(), "com.example.alert")
        self.assertEqual(t.getAlertMessage(), "Something happened")
        self.assertEqual(t.getAddDegradedAlertTypes(), [])
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(getAttributeValue(e, "ds-task-alert-type"), "com.example.alert")
        self.assertFalse("ds-task-alert-add-degraded-type" in e)

    def testTypeWithoutMessage(self):
        self.assertRaises(errors.UsageError, AlertTask, "foo", "com.example.alert")
        e = testutil.entryForType(AlertTask, {"ds-task-alert-message": "hello"})
        err = self.assertRaises(errors.TaskError, AlertTask.fromEntry, e)
        self.assertIn("ds-task-alert-type", err.message)

    def testNothingToDo(self):
        self.assertRaises(errors.UsageError, AlertTask, "foo")
        e = testutil.entryForType(AlertTask)
        self.assertRaises(errors.TaskError, AlertTask.fromEntry, e)

    def testHealthTypesOnly(self):
        e = testutil.entryForType(
            AlertTask,
            {
                "ds-task-alert-add-unavailable-type": ["a", "b"],
                "ds-task-alert-remove-degraded-type": "c",
            },
        )
        t = AlertTask.fromEntry(e)
        self.assertEqual(t.getAlertType(), None)
        self.assertEqual(t.getAddUnavailableAlertTypes(), ["a", "b"])
        self.assertEqual(t.getRemoveDegradedAlertTypes(), ["c"])
        self.assertEqual(t.getRemoveUnavailableAlertTypes(), [])


class TestDelayTask(unittest.TestCase):
    URL = "ldap://ds.example.com:389/dc=example,dc=com??sub?(uid=ready)"

    def testSleep(self):
        t = DelayTask("foo", sleepDurationMillis=1500)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(
            getAttributeValue(e, "ds-task-delay-sleep-duration"), "1500 milliseconds"
        )
        self.assertEqual(DelayTask.fromEntry(e).getSleepDurationMillis(), 1500)

    def testPropertiesAreMilliseconds(self):
        t = DelayTask("foo", millisToWaitForWorkQueueToBecomeIdle=60000)
        values = t.getTaskPropertyValues()
        p = delay.PROPERTY_WAIT_FOR_WORK_QUEUE_IDLE
        self.assertEqual(values[p], [60000])
        values[p] = ["120000"]
        other = DelayTask.fromProperties(values)
        self.assertEqual(other.getMillisToWaitForWorkQueueToBecomeIdle(), 120000)
        values[p] = ["2 minutes"]
        self.assertRaises(errors.TaskError, DelayTask.fromProperties, values)

    def testNonPositiveDuration(self):
        self.assertRaises(errors.UsageError, DelayTask, "foo", sleepDurationMillis=0)
        e = testutil.entryForType(
            DelayTask, {"ds-task-delay-sleep-duration": "0 seconds"}
        )
        self.assertRaises(errors.TaskError, DelayTask.fromEntry, e)

    def testTimeoutState(self):
        t = DelayTask(
            "foo",
            sleepDurationMillis=10,
            taskStateIfTimeoutIsEncountered="stopped-by-error",
        )
        self.assertIdentical(
            t.getTaskStateIfTimeoutIsEncountered(), TaskState.STOPPED_BY_ERROR
        )
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(
            getAttributeValue(
                e, "ds-task-delay-task-return-state-if-timeout-is-encountered"
            ),
            "STOPPED_BY_ERROR",
        )
        self.assertRaises(
            errors.UsageError,
            DelayTask,
            "foo",
            taskStateIfTimeoutIsEncountered=TaskState.RUNNING,
        )

    def testSearchNeedsTiming(self):
        self.assertRaises(
            errors.UsageError,
            DelayTask,
            "foo",
            ldapURLsForSearchesExpectedToReturnEntries=[self.URL],
            millisBetweenSearches=100,
        )
        self.assertRaises(
            errors.UsageError,
            DelayTask,
            "foo",
            ldapURLsForSearchesExpectedToReturnEntries=[self.URL],
            millisBetweenSearches=5000,
            searchTimeLimitMillis=100,
            totalDurationMillisForEachLDAPURL=5000,
        )
        t = DelayTask(
            "foo",
            ldapURLsForSearchesExpectedToReturnEntries=self.URL,
            millisBetweenSearches=100,
            searchTimeLimitMillis=100,
            totalDurationMillisForEachLDAPURL=5000,
        )
        self.assertEqual(t.getLDAPURLsForSearchesExpectedToReturnEntries(), [self.URL])

    def testSearchTimingNotCheckedWhenDecoding(self):
        e = testutil.entryForType(
            DelayTask,
            {"ds-task-delay-ldap-url-for-search-expected-to-return-entries": self.URL},
        )
        t = DelayTask.fromEntry(e)
        self.assertEqual(t.getMillisBetweenSearches(), None)

    def testMalformedURL(self):
        for url in [
            "http://example.com/",
            "ldap:///dc=example,dc=com??everywhere",
            "ldap:///dc=example,dc=com??sub?(uid=ready",
        ]:
            self.assertRaises(
                errors.UsageError,
                DelayTask,
                "foo",
                ldapURLsForSearchesExpectedToReturnEntries=[url],
                millisBetweenSearches=100,
                searchTimeLimitMillis=100,
                totalDurationMillisForEachLDAPURL=5000,
            )
            e = testutil.entryForType(
                DelayTask,
                {"ds-task-delay-ldap-url-for-search-expected-to-return-entries": url},
            )
            self.assertRaises(errors.TaskError, DelayTask.fromEntry, e)


class TestAuditDataSecurityTask(unittest.TestCase):
    def testDefaults(self):
        t = AuditDataSecurityTask("foo")
        self.assertEqual(t.getIncludeAuditors(), [])
        self.assertEqual(t.getBackendIDs(), [])
        self.assertEqual(t.getReportFilters(), [])
        self.assertEqual(t.getOutputDirectory(), None)

    def testIncludeAndExclude(self):
        self.assertRaises(
            errors.UsageError,
            AuditDataSecurityTask,
            "foo",
            includeAuditors=["a"],
            excludeAuditors=["b"],
        )
        e = testutil.entryForType(
            AuditDataSecurityTask,
            {
                "ds-task-audit-data-security-include-auditor": "a",
                "ds-task-audit-data-security-exclude-auditor": "b",
            },
        )
        self.assertRaises(errors.TaskError, AuditDataSecurityTask.fromEntry, e)

    def testReportFilters(self):
        t = AuditDataSecurityTask("foo", reportFilters="(uid=*)")
        self.assertEqual(t.getReportFilterStrings(), ["(uid=*)"])
        [f] = t.getReportFilters()
        self.assertIsInstance(f, pureldap.LDAPFilter_present)
        self.assertRaises(
            errors.UsageError, AuditDataSecurityTask, "foo", reportFilters=["uid=("]
        )


class TestSearchTask(unittest.TestCase):
    def testEntry(self):
        t = SearchTask(
            "foo",
            "dc=example,dc=com",
            "one",
            "(cn=a*)",
            outputFile="out.ldif",
        )
        self.assertIdentical(t.getScope(), SearchScope.ONE)
        self.assertEqual(t.getAttributes(), [])
        self.assertEqual(t.getAuthzDN(), None)
        self.assertIsInstance(t.getFilter(), pureldap.LDAPFilter_substrings)
        e = t.createTaskEntry(testutil.taskConfig())
        self.assertEqual(getAttributeValue(e, "ds-task-search-scope"), "1")
        self.assertEqual(getAttributeValue(e, "ds-task-search-filter"), "(cn=a*)")
        self.assertFalse("ds-task-search-return-attribute" in e)

    def testFilterObject(self):
        f = pureldap.LDAPFilter_equalityMatch(
            attributeDesc=pureldap.LDAPAttributeDescription("uid"),
            assertionValue=pureldap.LDAPAssertionValue("jdoe"),
        )
        t = SearchTask("foo", "dc=example,dc=com", "sub", f, outputFile="out.ldif")
        self.assertEqual(t.getFilterString(), "(uid=jdoe)")

    def testScopeNames(self):
        for name, scope in [
            ("base", SearchScope.BASE),
            ("baseObject", SearchScope.BASE),
            ("singleLevel", SearchScope.ONE),
            ("2", SearchScope.SUB),
            ("wholeSubtree", SearchScope.SUB),
            ("subordinateSubtree", SearchScope.SUBORDINATE_SUBTREE),
            ("3", SearchScope.SUBORDINATE_SUBTREE),
        ]:
            self.assertIdentical(SearchScope.forName(name), scope, name)
        self.assertIdentical(SearchScope.forName("everything"), None)
        self.assertIdentical(SearchScope.forInt(0), SearchScope.BASE)

    def testRequired(self):
        self.assertRaises(
            errors.UsageError, SearchTask, "foo", "dc=example,dc=com", "sub", "(uid=a)"
        )
        e = testutil.entryForType(
            SearchTask,
            {
                "ds-task-search-base-dn": "dc=example,dc=com",
                "ds-task-search-scope": "sub",
                "ds-task-search-output-file": "out.ldif",
            },
        )
        err = self.assertRaises(errors.TaskError, SearchTask.fromEntry, e)
        self.assertIn("ds-task-search-filter", err.message)

    def testInvalidValues(self):
        attrs = {
            "ds-task-search-base-dn": "dc=example,dc=com",
            "ds-task-search-scope": "wholeSubtree",
            "ds-task-search-filter": "(uid=a)",
            "ds-task-search-output-file": "out.ldif",
        }
        t = SearchTask.fromEntry(testutil.entryForType(SearchTask, attrs))
        self.assertIdentical(t.getScope(), SearchScope.SUB)

        bad = dict(attrs)
        bad["ds-task-search-scope"] = "everywhere"
        self.assertRaises(
            errors.TaskError,
            SearchTask.fromEntry,
            testutil.entryForType(SearchTask, bad),
        )
        bad = dict(attrs)
        bad["ds-task-search-filter"] = "uid=a)"
        self.assertRaises(
            errors.TaskError,
            SearchTask.fromEntry,
            testutil.entryForType(SearchTask, bad),
        )
        self.assertRaises(
            errors.UsageError,
            SearchTask,
            "foo",
            "dc=example,dc=com",
            "sub",
            "(uid=a",
            outputFile="out.ldif",
        )

    def testScopeProperty(self):
        t = SearchTask("foo", "dc=example,dc=com", "base", "(uid=a)", outputFile="o")
        values = t.getTaskPropertyValues()
        p = search.PROPERTY_SCOPE
        self.assertEqual(values[p], ["0"])
        values[p] = ["subordinate"]
        other = SearchTask.fromProperties(values)
        self.assertIdentical(other.getScope(), SearchScope.SUBORDINATE_SUBTREE)
        values[p] = ["everywhere"]
        self.assertRaises(errors.TaskError, SearchTask.fromProperties, values)
