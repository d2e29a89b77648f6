# Re-export all models for convenient imports
from soc_portal.models.admin import AdminInfo, AccountStatus
from soc_portal.models.user import UserInfo, USER_ROLE_TYPES
from soc_portal.models.login_tracker import AdminLoginTracker, UserLoginTracker
from soc_portal.models.activity_log import ActivityLog, AuthAuditLog
from soc_portal.models.notification import AdminNotification, UserNotification, NotificationStatus
from soc_portal.models.roster import RosterEntry, RosterScheduleNote
from soc_portal.models.role_permission import RolePermission

__all__ = [
    # Identity stores
    "AdminInfo",
    "UserInfo",
    "AccountStatus",
    "USER_ROLE_TYPES",
    # Login tracking
    "AdminLoginTracker",
    "UserLoginTracker",
    # Audit
    "ActivityLog",
    "AuthAuditLog",
    # Notifications
    "AdminNotification",
    "UserNotification",
    "NotificationStatus",
    # Roster
    "RosterEntry",
    "RosterScheduleNote",
    # Permissions
    "RolePermission",
]
