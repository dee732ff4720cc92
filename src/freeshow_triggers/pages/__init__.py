"""NiceGUI pages.

Import this module to register all page routes with NiceGUI.
"""

from freeshow_triggers.pages import document, settings

__all__ = ["document", "settings"]

# Touch modules to prevent linter from removing "unused" imports.
# These imports register @ui.page decorators as a side effect.
_PAGES = (document, settings)
