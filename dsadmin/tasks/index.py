"""Index rebuild and reload tasks."""

from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask

PROPERTY_BASE_DN = fields.stringProperty(
    "ds-task-rebuild-base-dn",
    "Base DN",
    "The base DN of the backend holding the indexes to rebuild.",
    required=True,
)
PROPERTY_INDEX = fields.stringProperty(
    "ds-task-rebuild-index",
    "Index Name",
    "The name of an index to rebuild.",
    required=True,
    multiValued=True,
)
PROPERTY_MAX_THREADS = fields.integerProperty(
    "ds-task-rebuild-max-threads",
    "Maximum Number of Threads",
    "The largest number of threads to use for the rebuild.",
    advanced=True,
)

PROPERTY_RELOAD_BASE_DN = fields.stringProperty(
    "ds-task-reload-base-dn",
    "Base DN",
    "The base DN of the entry-balancing request processor whose global "
    "indexes should be reloaded.",
    required=True,
)
PROPERTY_RELOAD_INDEX_NAME = fields.stringProperty(
    "ds-task-reload-index-name",
    "Index Name",
    "The name of a global index to reload. All are reloaded when none is given.",
    multiValued=True,
)
PROPERTY_RELOAD_FROM_DS = fields.booleanProperty(
    "ds-task-reload-from-ds",
    "Reload From Directory Servers",
    "Whether to rebuild the indexes from the backend directory servers "
    "rather than from persistent storage.",
)
PROPERTY_RELOAD_BACKGROUND = fields.booleanProperty(
    "ds-task-reload-background",
    "Reload in Background",
    "Whether to keep using the current index contents while reloading.",
)
PROPERTY_MAX_ENTRIES_PER_SECOND = fields.integerProperty(
    "ds-task-search-entry-per-second",
    "Maximum Entries per Second",
    "The largest number of entries per second to read from each server.",
    advanced=True,
)


class RebuildTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.RebuildTask"
    additionalObjectClasses = ("ds-task-rebuild",)
    taskFields = [
        fields.TaskField("baseDN", fields.Text(), PROPERTY_BASE_DN),
        fields.TaskField("indexNames", fields.TextList(), PROPERTY_INDEX),
        fields.TaskField(
            "maxRebuildThreads", fields.Integer(), PROPERTY_MAX_THREADS
        ),
    ]
    taskName = "Rebuild Index"
    taskDescription = "Rebuilds one or more indexes of a local DB backend."

    def __init__(
        self, taskID=None, baseDN=None, indexNames=None, maxRebuildThreads=None, **kw
    ):
        """
        @param baseDN: the base DN of the backend.

        @param indexNames: the indexes to rebuild; may not be empty.

        @param maxRebuildThreads: a thread count, or None to let the
        server decide. Counts below one also mean no limit.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            baseDN=baseDN,
            indexNames=indexNames,
            maxRebuildThreads=maxRebuildThreads,
        )
        if self.maxRebuildThreads is not None and self.maxRebuildThreads < 1:
            self.maxRebuildThreads = None

    def getBaseDN(self):
        return self.baseDN

    def getIndexNames(self):
        return list(self.indexNames)

    def getMaxRebuildThreads(self):
        """Return the thread limit, or -1 if there is none."""
        if self.maxRebuildThreads is None:
            return -1
        return self.maxRebuildThreads


class ReloadGlobalIndexTask(TypedTask):
    taskClassName = "com.unboundid.directory.proxy.tasks.ReloadTask"
    additionalObjectClasses = ("ds-task-reload-index",)
    taskFields = [
        fields.TaskField("baseDN", fields.Text(), PROPERTY_RELOAD_BASE_DN),
        fields.TaskField("indexNames", fields.TextList(), PROPERTY_RELOAD_INDEX_NAME),
        fields.TaskField("reloadFromDS", fields.Flag(), PROPERTY_RELOAD_FROM_DS),
        fields.TaskField(
            "reloadInBackground", fields.Flag(), PROPERTY_RELOAD_BACKGROUND
        ),
        fields.TaskField(
            "maxEntriesPerSecond",
            fields.Integer(minimum=1),
            PROPERTY_MAX_ENTRIES_PER_SECOND,
        ),
    ]
    taskName = "Reload Global Index"
    taskDescription = (
        "Reloads the global indexes of a Directory Proxy Server "
        "entry-balancing request processor."
    )

    def __init__(
        self,
        taskID=None,
        baseDN=None,
        indexNames=None,
        reloadFromDS=None,
        reloadInBackground=None,
        maxEntriesPerSecond=None,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            baseDN=baseDN,
            indexNames=indexNames,
            reloadFromDS=reloadFromDS,
            reloadInBackground=reloadInBackground,
            maxEntriesPerSecond=maxEntriesPerSecond,
        )

    def getBaseDN(self):
        return self.baseDN

    def getIndexNames(self):
        return list(self.indexNames)

    def getReloadFromDS(self):
        return self.reloadFromDS

    def getReloadInBackground(self):
        return self.reloadInBackground

    def getMaxEntriesPerSecond(self):
        return self.maxEntriesPerSecond
