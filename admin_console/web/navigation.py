"""Sidebar navigation."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    icon: str

    def is_active(self, current_path: str) -> bool:
        if self.path == "/":
            return current_path == "/"
        return current_path == self.path or current_path.startswith(self.path + "/")


NAV_ITEMS: Tuple[NavItem, ...] = (
    NavItem("/", "Dashboard", "📊"),
    NavItem("/reports", "Review reports", "🚩"),
    NavItem("/chat-reports", "Chat reports", "💬"),
    NavItem("/receipt-reviews", "Receipt verification", "🧾"),
    NavItem("/restaurants", "Restaurant approval", "🏪"),
    NavItem("/gatherings", "Gatherings", "👥"),
    NavItem("/refunds", "Failed refunds", "💸"),
)
