"""Explorer - interactive inspection of the combination space.

Usage:
    from avb.explorer import ExplorerApp

    app = ExplorerApp(session, export_dir="exports")
    app.run()
"""

from avb.explorer.app import ExplorerApp
from avb.explorer.controller import ExplorerController

__all__ = ["ExplorerApp", "ExplorerController"]
