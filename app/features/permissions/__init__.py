"""
Action-based access control feature module.

Implements organization-scoped checks of direct user grants and role grants
against the closed set of guardable actions.
"""
