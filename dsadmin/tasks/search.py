"""
Tasks that search or audit backend contents on the server side.

Filters are held as text and checked with L{ldaptor.ldapfilter}.
"""

from ldaptor import ldapfilter
from ldaptor.protocols import pureldap

from dsadmin import errors
from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask
from dsadmin.tasks.state import _NamedConstant


class SearchScope(_NamedConstant):
    """
    The scope of a search. The wire form is the protocol integer, and
    the usual names are accepted when parsing.
    """

    def __init__(self, name, intValue, aliases):
        _NamedConstant.__init__(self, name)
        self.intValue = intValue
        self.aliases = (name, str(intValue)) + tuple(aliases)

    def getName(self):
        return str(self.intValue)

    @classmethod
    def forName(klass, name):
        if name is None:
            return None
        name = name.strip().lower()
        for scope in klass._byName.values():
            if name in scope.aliases:
                return scope
        return None

    @classmethod
    def forInt(klass, value):
        for scope in klass._byName.values():
            if scope.intValue == value:
                return scope
        return None


SearchScope._register(
    SearchScope("base", pureldap.LDAP_SCOPE_baseObject, ["baseobject"]),
    SearchScope("one", pureldap.LDAP_SCOPE_singleLevel, ["onelevel", "singlelevel"]),
    SearchScope("sub", pureldap.LDAP_SCOPE_wholeSubtree, ["subtree", "wholesubtree"]),
    SearchScope(
        "subordinate-subtree", 3, ["subord", "subordinate", "subordinatesubtree"]
    ),
)


def filterText(value, name):
    """
    Check a filter given as text or as an ldaptor filter object.

    @return: the filter text.

    @raise errors.UsageError: if the text is not a valid filter.
    """
    if isinstance(value, pureldap.LDAPFilter):
        return value.asText()
    if not isinstance(value, str):
        raise errors.UsageError("%s must be a filter, not %r" % (name, value))
    try:
        ldapfilter.parseFilter(value)
    except ldapfilter.InvalidLDAPFilter as e:
        raise errors.UsageError("Invalid %s %r: %s" % (name, value, e))
    return value


class Filter(fields.Text):
    def check(self, value, name):
        if value is None:
            return None
        return filterText(value, name)


class FilterList(fields.TextList):
    def check(self, value, name):
        if value is None:
            return []
        if isinstance(value, (str, pureldap.LDAPFilter)):
            value = [value]
        return [filterText(v, name) for v in value]


PROPERTY_BASE_DN = fields.stringProperty(
    "ds-task-search-base-dn",
    "Base DN",
    "The base DN of the search.",
    required=True,
)
PROPERTY_SCOPE = fields.stringProperty(
    "ds-task-search-scope",
    "Search Scope",
    "The scope of the search.",
    required=True,
    allowedValues=[a for s in SearchScope.values() for a in s.aliases],
)
PROPERTY_FILTER = fields.stringProperty(
    "ds-task-search-filter",
    "Filter",
    "The filter entries must match to be returned.",
    required=True,
)
PROPERTY_RETURN_ATTRIBUTE = fields.stringProperty(
    "ds-task-search-return-attribute",
    "Requested Attribute",
    "An attribute to include in matching entries.",
    multiValued=True,
)
PROPERTY_AUTHZ_DN = fields.stringProperty(
    "ds-task-search-authz-dn",
    "Authorization DN",
    "The DN of the user as whom the search is processed.",
    advanced=True,
)
PROPERTY_OUTPUT_FILE = fields.stringProperty(
    "ds-task-search-output-file",
    "Output File",
    "The path of the LDIF file matching entries are written to.",
    required=True,
)


class SearchTask(TypedTask):
    """
    Run a search inside the server and write the matching entries to
    an LDIF file on the server host.
    """

    taskClassName = "com.unboundid.directory.server.tasks.SearchTask"
    additionalObjectClasses = ("ds-task-search",)
    taskFields = [
        fields.TaskField("baseDN", fields.Text(), PROPERTY_BASE_DN),
        fields.TaskField("scope", fields.Choice(SearchScope), PROPERTY_SCOPE),
        fields.TaskField("filter", Filter(), PROPERTY_FILTER),
        fields.TaskField("attributes", fields.TextList(), PROPERTY_RETURN_ATTRIBUTE),
        fields.TaskField("authzDN", fields.Text(), PROPERTY_AUTHZ_DN),
        fields.TaskField("outputFile", fields.Text(), PROPERTY_OUTPUT_FILE),
    ]
    taskName = "Search"
    taskDescription = "Writes the entries matching a search to a file."

    def __init__(
        self,
        taskID=None,
        baseDN=None,
        scope=None,
        filter=None,
        attributes=None,
        outputFile=None,
        authzDN=None,
        **kw
    ):
        """
        @param scope: a L{SearchScope}, or a name such as C{"sub"} or
        C{"2"}.

        @param filter: the filter text, or an ldaptor filter object.

        @param attributes: the attributes to return; all user
        attributes when empty.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            baseDN=baseDN,
            scope=scope,
            filter=filter,
            attributes=attributes,
            outputFile=outputFile,
            authzDN=authzDN,
        )

    def getBaseDN(self):
        return self.baseDN

    def getScope(self):
        return self.scope

    def getFilterString(self):
        return self.filter

    def getFilter(self):
        """Get the filter as an ldaptor filter object."""
        return ldapfilter.parseFilter(self.filter)

    def getAttributes(self):
        return list(self.attributes)

    def getAuthzDN(self):
        return self.authzDN

    def getOutputFile(self):
        return self.outputFile


PROPERTY_INCLUDE_AUDITOR = fields.stringProperty(
    "ds-task-audit-data-security-include-auditor",
    "Include Auditor",
    "The name of an auditor to run. All auditors run when neither include "
    "nor exclude auditors are given.",
    multiValued=True,
)
PROPERTY_EXCLUDE_AUDITOR = fields.stringProperty(
    "ds-task-audit-data-security-exclude-auditor",
    "Exclude Auditor",
    "The name of an auditor not to run.",
    multiValued=True,
)
PROPERTY_AUDIT_BACKEND_ID = fields.stringProperty(
    "ds-task-audit-data-security-backend-id",
    "Backend ID",
    "The ID of a backend to audit. All backends supporting the audit are "
    "examined when none is given.",
    multiValued=True,
)
PROPERTY_REPORT_FILTER = fields.stringProperty(
    "ds-task-audit-data-security-report-filter",
    "Report Filter",
    "A filter restricting the entries the audit reports on.",
    multiValued=True,
)
PROPERTY_AUDIT_OUTPUT_DIRECTORY = fields.stringProperty(
    "ds-task-audit-data-security-output-directory",
    "Output Directory",
    "The directory the audit reports are written to.",
)


class AuditDataSecurityTask(TypedTask):
    """
    Examine backend contents for potential security problems, such as
    weak password storage or accounts lacking policy.
    """

    taskClassName = "com.unboundid.directory.server.tasks.AuditDataSecurityTask"
    additionalObjectClasses = ("ds-task-audit-data-security",)
    taskFields = [
        fields.TaskField("includeAuditors", fields.TextList(), PROPERTY_INCLUDE_AUDITOR),
        fields.TaskField("excludeAuditors", fields.TextList(), PROPERTY_EXCLUDE_AUDITOR),
        fields.TaskField("backendIDs", fields.TextList(), PROPERTY_AUDIT_BACKEND_ID),
        fields.TaskField("reportFilters", FilterList(), PROPERTY_REPORT_FILTER),
        fields.TaskField(
            "outputDirectory", fields.Text(), PROPERTY_AUDIT_OUTPUT_DIRECTORY
        ),
    ]
    taskName = "Audit Data Security"
    taskDescription = "Audits backend contents for potential security issues."

    def __init__(
        self,
        taskID=None,
        includeAuditors=None,
        excludeAuditors=None,
        backendIDs=None,
        reportFilters=None,
        outputDirectory=None,
        **kw
    ):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(
            includeAuditors=includeAuditors,
            excludeAuditors=excludeAuditors,
            backendIDs=backendIDs,
            reportFilters=reportFilters,
            outputDirectory=outputDirectory,
        )

    def validate(self):
        if self.includeAuditors and self.excludeAuditors:
            raise errors.UsageError(
                "Include and exclude auditors cannot both be given"
            )

    def getIncludeAuditors(self):
        return list(self.includeAuditors)

    def getExcludeAuditors(self):
        return list(self.excludeAuditors)

    def getBackendIDs(self):
        return list(self.backendIDs)

    def getReportFilterStrings(self):
        return list(self.reportFilters)

    def getReportFilters(self):
        return [ldapfilter.parseFilter(f) for f in self.reportFilters]

    def getOutputDirectory(self):
        return self.outputDirectory
