"""Explorer widgets."""

from avb.explorer.widgets.ad_view import AdView, SlotList
from avb.explorer.widgets.help import HelpOverlay
from avb.explorer.widgets.status_bar import ExplorerStatusBar

__all__ = ["AdView", "ExplorerStatusBar", "HelpOverlay", "SlotList"]
