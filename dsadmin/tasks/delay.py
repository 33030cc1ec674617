"""The delay task, used to hold back tasks that depend on it."""

from urllib.parse import unquote, urlsplit

from ldaptor import ldapfilter

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask
from dsadmin.tasks.state import TaskState

LDAP_URL_SCHEMES = ("ldap", "ldaps", "ldapi")
LDAP_URL_SCOPES = ("", "base", "one", "sub", "subordinates")

# States a delay task ends in when a wait times out.
TIMEOUT_STATES = (
    TaskState.STOPPED_BY_ERROR,
    TaskState.COMPLETED_WITH_ERRORS,
    TaskState.COMPLETED_SUCCESSFULLY,
)


def checkLDAPURL(url):
    """
    Check the syntax of an LDAP URL of the form
    C{ldap://host:port/dn?attributes?scope?filter?extensions}.

    @raise ValueError: if the URL is malformed.
    """
    parts = urlsplit(url)
    if parts.scheme.lower() not in LDAP_URL_SCHEMES:
        raise ValueError("Unsupported scheme in LDAP URL %r" % url)
    if parts.fragment:
        raise ValueError("LDAP URL %r has a fragment" % url)
    query = parts.query.split("?")
    if len(query) > 4:
        raise ValueError("Too many components in LDAP URL %r" % url)
    query.extend([""] * (4 - len(query)))
    _, scope, filterText, _ = query
    if scope.lower() not in LDAP_URL_SCOPES:
        raise ValueError("Invalid scope %r in LDAP URL %r" % (scope, url))
    if filterText:
        try:
            ldapfilter.parseFilter(unquote(filterText))
        except ldapfilter.InvalidLDAPFilter as e:
            raise ValueError("Invalid filter in LDAP URL %r: %s" % (url, e))


class LDAPURLList(fields.TextList):
    def fromEntry(self, e, attributeName):
        urls = fields.TextList.fromEntry(self, e, attributeName)
        for url in urls:
            try:
                checkLDAPURL(url)
            except ValueError as err:
                raise errors.TaskError(
                    "Malformed value of attribute %s: %s" % (attributeName, err)
                )
        return urls

    def check(self, value, name):
        urls = fields.TextList.check(self, value, name)
        for url in urls:
            try:
                checkLDAPURL(url)
            except ValueError as err:
                raise errors.UsageError("Malformed %s: %s" % (name, err))
        return urls


class TimeoutState(fields.Choice):
    """A task state, written as C{STOPPED_BY_ERROR} and so on."""

    def encode(self, value):
        return value.getName().upper().replace("-", "_")

    def toProperty(self, value):
        if value is None:
            return []
        return [self.encode(value)]


PROPERTY_SLEEP_DURATION = fields.integerProperty(
    "ds-task-delay-sleep-duration",
    "Sleep Duration (Milliseconds)",
    "The length of time to sleep.",
)
PROPERTY_WAIT_FOR_WORK_QUEUE_IDLE = fields.integerProperty(
    "ds-task-delay-duration-to-wait-for-work-queue-idle",
    "Wait for Work Queue Idle (Milliseconds)",
    "The longest time to wait for the work queue to become idle.",
)
PROPERTY_SEARCH_URL = fields.stringProperty(
    "ds-task-delay-ldap-url-for-search-expected-to-return-entries",
    "LDAP URL for Search Expected to Return Entries",
    "An LDAP URL for a search to repeat until it returns at least one entry.",
    multiValued=True,
)
PROPERTY_SEARCH_INTERVAL = fields.integerProperty(
    "ds-task-delay-search-interval",
    "Search Interval (Milliseconds)",
    "The time to wait between attempts of the same search.",
)
PROPERTY_SEARCH_TIME_LIMIT = fields.integerProperty(
    "ds-task-delay-search-time-limit",
    "Search Time Limit (Milliseconds)",
    "The time limit for each search attempt.",
)
PROPERTY_SEARCH_DURATION = fields.integerProperty(
    "ds-task-delay-duration-to-wait-for-search-to-return-entries",
    "Search Duration (Milliseconds)",
    "The longest time to wait for each search to return entries.",
)
PROPERTY_TIMEOUT_RETURN_STATE = fields.stringProperty(
    "ds-task-delay-task-return-state-if-timeout-is-encountered",
    "Task Return State if Timeout is Encountered",
    "The state to leave the task in if a wait times out.",
    allowedValues=[
        name
        for s in TIMEOUT_STATES
        for name in (s.getName().upper().replace("-", "_"), s.getName().upper())
    ],
)


class DelayTask(TypedTask):
    """
    Wait before completing: sleep for a while, wait for the work queue
    to become idle, and wait for searches to return entries, in that
    order.

    Searches need the interval, time limit and total duration, and the
    interval and time limit must be shorter than the total duration.
    """

    taskClassName = "com.unboundid.directory.server.tasks.DelayTask"
    additionalObjectClasses = ("ds-task-delay",)
    taskFields = [
        fields.TaskField(
            "sleepDurationMillis",
            fields.DurationMillis(minimum=1),
            PROPERTY_SLEEP_DURATION,
        ),
        fields.TaskField(
            "millisToWaitForWorkQueueToBecomeIdle",
            fields.DurationMillis(minimum=1),
            PROPERTY_WAIT_FOR_WORK_QUEUE_IDLE,
        ),
        fields.TaskField(
            "ldapURLsForSearchesExpectedToReturnEntries",
            LDAPURLList(),
            PROPERTY_SEARCH_URL,
        ),
        fields.TaskField(
            "millisBetweenSearches",
            fields.DurationMillis(minimum=1),
            PROPERTY_SEARCH_INTERVAL,
        ),
        fields.TaskField(
            "searchTimeLimitMillis",
            fields.DurationMillis(minimum=1),
            PROPERTY_SEARCH_TIME_LIMIT,
        ),
        fields.TaskField(
            "totalDurationMillisForEachLDAPURL",
            fields.DurationMillis(minimum=1),
            PROPERTY_SEARCH_DURATION,
        ),
        fields.TaskField(
            "taskStateIfTimeoutIsEncountered",
            TimeoutState(TaskState, TIMEOUT_STATES),
            PROPERTY_TIMEOUT_RETURN_STATE,
        ),
    ]
    taskName = "Delay"
    taskDescription = (
        "Sleeps, waits for the work queue to become idle or waits for "
        "searches to return entries."
    )

    def __init__(
        self,
        taskID=None,
        sleepDurationMillis=None,
        millisToWaitForWorkQueueToBecomeIdle=None,
        ldapURLsForSearchesExpectedToReturnEntries=None,
        millisBetweenSearches=None,
        searchTimeLimitMillis=None,
        totalDurationMillisForEachLDAPURL=None,
        taskStateIfTimeoutIsEncountered=None,
        **kw
    ):
        """
        All durations are positive numbers of milliseconds.

        @param ldapURLsForSearchesExpectedToReturnEntries: LDAP URLs of
        searches to repeat until each returns an entry.

        @param taskStateIfTimeoutIsEncountered: a L{TaskState} or state
        name; one of C{stopped-by-error}, C{completed-with-errors} and
        C{completed-successfully}.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            sleepDurationMillis=sleepDurationMillis,
            millisToWaitForWorkQueueToBecomeIdle=millisToWaitForWorkQueueToBecomeIdle,
            ldapURLsForSearchesExpectedToReturnEntries=(
                ldapURLsForSearchesExpectedToReturnEntries
            ),
            millisBetweenSearches=millisBetweenSearches,
            searchTimeLimitMillis=searchTimeLimitMillis,
            totalDurationMillisForEachLDAPURL=totalDurationMillisForEachLDAPURL,
            taskStateIfTimeoutIsEncountered=taskStateIfTimeoutIsEncountered,
        )

    def validate(self):
        state = self.taskStateIfTimeoutIsEncountered
        if state is not None and state not in TIMEOUT_STATES:
            raise errors.UsageError(
                "Unsupported state %s for a timeout; use one of %s"
                % (state, ", ".join(s.getName() for s in TIMEOUT_STATES))
            )
        if self._decoding or not self.ldapURLsForSearchesExpectedToReturnEntries:
            return
        if None in (
            self.millisBetweenSearches,
            self.searchTimeLimitMillis,
            self.totalDurationMillisForEachLDAPURL,
        ):
            raise errors.UsageError(
                "Searches need a search interval, a search time limit and a "
                "search duration"
            )
        if self.millisBetweenSearches >= self.totalDurationMillisForEachLDAPURL:
            raise errors.UsageError(
                "The search interval must be shorter than the search duration"
            )
        if self.searchTimeLimitMillis >= self.totalDurationMillisForEachLDAPURL:
            raise errors.UsageError(
                "The search time limit must be shorter than the search duration"
            )

    def getSleepDurationMillis(self):
        return self.sleepDurationMillis

    def getMillisToWaitForWorkQueueToBecomeIdle(self):
        return self.millisToWaitForWorkQueueToBecomeIdle

    def getLDAPURLsForSearchesExpectedToReturnEntries(self):
        return list(self.ldapURLsForSearchesExpectedToReturnEntries)

    def getMillisBetweenSearches(self):
        return self.millisBetweenSearches

    def getSearchTimeLimitMillis(self):
        return self.searchTimeLimitMillis

    def getTotalDurationMillisForEachLDAPURL(self):
        return self.totalDurationMillisForEachLDAPURL

    def getTaskStateIfTimeoutIsEncountered(self):
        return self.taskStateIfTimeoutIsEncountered
