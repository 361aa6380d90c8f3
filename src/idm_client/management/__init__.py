"""Resource managers, one per resource family."""

from idm_client.management.base import BaseManager
from idm_client.management.connections import ConnectionsManager
from idm_client.management.users import UsersManager

__all__ = [
    "BaseManager",
    "ConnectionsManager",
    "UsersManager",
]
