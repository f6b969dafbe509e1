from .browser_view import BrowserView
from .help_panel import HelpPanel
from .status_bar import StatusBar

__all__ = [
    "BrowserView",
    "HelpPanel",
    "StatusBar",
]
