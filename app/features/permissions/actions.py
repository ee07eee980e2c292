"""
The closed set of guardable actions.

Every CRUD operation on an organization-scoped entity names exactly one of
these. Grants store the string value.
"""
import enum


class Action(str, enum.Enum):
    CREATE_ORG = "createOrg"
    DELETE_ORG = "deleteOrg"
    GET_ORG = "getOrg"
    LIST_ORGS = "listOrgs"
    UPDATE_ORG = "updateOrg"
    CREATE_SITE = "createSite"
    DELETE_SITE = "deleteSite"
    GET_SITE = "getSite"
    LIST_SITES = "listSites"
    UPDATE_SITE = "updateSite"
    CREATE_RESOURCE = "createResource"
    DELETE_RESOURCE = "deleteResource"
    GET_RESOURCE = "getResource"
    LIST_RESOURCES = "listResources"
    UPDATE_RESOURCE = "updateResource"
    CREATE_TARGET = "createTarget"
    DELETE_TARGET = "deleteTarget"
    GET_TARGET = "getTarget"
    LIST_TARGETS = "listTargets"
    UPDATE_TARGET = "updateTarget"
    GET_USER = "getUser"
    DELETE_USER = "deleteUser"
    LIST_USERS = "listUsers"

    def __str__(self) -> str:
        return self.value
