"""
models/__init__.py
------------------
Re-export all models so create_tables.py (and Alembic's env.py, if added)
can import Base and discover all tables via a single import:

    from erp_api.models import Base
"""

from erp_api.db.base import Base
from erp_api.models.company import Company
from erp_api.models.user import ActivationState, Role, User, UserClaim, user_roles
from erp_api.models.credential import ArtifactKind, ExternalLogin, OneTimeToken
from erp_api.models.inventory_item import InventoryItem
from erp_api.models.project import Project

__all__ = [
    "Base",
    "Company",
    "ActivationState",
    "Role",
    "User",
    "UserClaim",
    "user_roles",
    "ArtifactKind",
    "ExternalLogin",
    "OneTimeToken",
    "InventoryItem",
    "Project",
]
