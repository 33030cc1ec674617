"""Tasks changing the server schema."""

from dsadmin.tasks import fields
from dsadmin.tasks.base import TypedTask

PROPERTY_SCHEMA_FILE = fields.stringProperty(
    "ds-task-schema-file-name",
    "Schema File Name",
    "The name of a file in the server schema directory to load.",
    required=True,
    multiValued=True,
)

PROPERTY_ATTRIBUTE_TYPE = fields.stringProperty(
    "ds-task-remove-attribute-type-attribute",
    "Attribute Type",
    "The name or OID of the attribute type to remove from the schema.",
    required=True,
)


class AddSchemaFileTask(TypedTask):
    """
    Load one or more schema files placed in the schema directory into
    the running server.
    """

    taskClassName = "com.unboundid.directory.server.tasks.AddSchemaFileTask"
    additionalObjectClasses = ("ds-task-add-schema-file",)
    taskFields = [
        fields.TaskField("schemaFileNames", fields.TextList(), PROPERTY_SCHEMA_FILE),
    ]
    taskName = "Add Schema File"
    taskDescription = "Loads new schema files into the server schema."

    def __init__(self, taskID=None, schemaFileNames=None, **kw):
        """
        @param schemaFileNames: a file name or list of file names. At
        least one is required.
        """
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(schemaFileNames=schemaFileNames)

    def getSchemaFileNames(self):
        return list(self.schemaFileNames)


class RemoveAttributeTypeTask(TypedTask):
    taskClassName = "com.unboundid.directory.server.tasks.RemoveAttributeTypeTask"
    additionalObjectClasses = ("ds-task-remove-attribute-type",)
    taskFields = [
        fields.TaskField("attributeType", fields.Text(), PROPERTY_ATTRIBUTE_TYPE),
    ]
    taskName = "Remove Attribute Type"
    taskDescription = (
        "Removes an attribute type from the server schema, provided no "
        "entries and no other schema elements use it."
    )

    def __init__(self, taskID=None, attributeType=None, **kw):
        TypedTask.__init__(self, taskID, **kw)
        self.setTaskFields(attributeType=attributeType)

    def getAttributeType(self):
        return self.attributeType
