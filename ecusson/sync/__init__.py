"""Cross-process propagation package."""

from ecusson.sync.bridge import SyncBridge
from ecusson.sync.widget import WidgetControl, WidgetTimeline

__all__ = ["SyncBridge", "WidgetControl", "WidgetTimeline"]
