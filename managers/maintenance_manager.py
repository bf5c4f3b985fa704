"""
Maintenance Manager
Periodic background jobs: presence refresh and selection expiry
"""

from bot.transport import MessagingTransport
from commands.selection_store import SelectionStore
from managers.base_manager import BaseManager
from managers.settings_manager import SettingsManager

PRESENCE_INTERVAL_MS = 30_000
SWEEP_INTERVAL_MS = 60_000


class MaintenanceManager(BaseManager):
    """Runs the bot's periodic jobs while started."""

    def __init__(self, transport: MessagingTransport, settings: SettingsManager, selections: SelectionStore):
        super().__init__("Maintenance")
        self.transport = transport
        self.settings = settings
        self.selections = selections

    def start(self) -> None:
        self.set_periodic_timer("presence", self.refresh_presence, PRESENCE_INTERVAL_MS)
        self.set_periodic_timer("selection-sweep", self.sweep_selections, SWEEP_INTERVAL_MS)
        self.set_enabled(True)

    async def refresh_presence(self) -> None:
        """Mark the bot available while always-online is on."""
        if not await self.settings.is_always_online_enabled():
            return
        try:
            await self.transport.send_presence_update("available")
        except Exception as e:
            self.debug(f"Presence update failed: {e}")

    def sweep_selections(self) -> int:
        return self.selections.sweep()
