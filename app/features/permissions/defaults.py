"""
Roles every organization starts with.
"""
from app.features.permissions.actions import Action


ADMIN_ROLE = "Admin"

READ_ACTIONS = [
    Action.GET_ORG,
    Action.GET_SITE, Action.LIST_SITES,
    Action.GET_RESOURCE, Action.LIST_RESOURCES,
    Action.GET_TARGET, Action.LIST_TARGETS,
    Action.GET_USER, Action.LIST_USERS,
]

DEFAULT_ROLES = {
    ADMIN_ROLE: {
        "description": "Organization administrators",
        "is_admin": True,
        "actions": "ALL"  # Special case - gets every action
    },
    "Member": {
        "description": "Read-only access to the organization's topology",
        "is_admin": False,
        "actions": READ_ACTIONS,
    },
}
