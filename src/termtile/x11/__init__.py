"""X11 adapter: EWMH desktop/window operations and RandR monitors."""

from termtile.x11.connection import Connection as Connection
from termtile.x11.connection import WindowNotFoundError as WindowNotFoundError
from termtile.x11.connection import X11Error as X11Error
from termtile.x11.desktop import STICKY as STICKY
from termtile.x11.desktop import find_window_by_title as find_window_by_title
from termtile.x11.desktop import focus_window as focus_window
from termtile.x11.desktop import get_current_desktop as get_current_desktop
from termtile.x11.desktop import get_desktop_count as get_desktop_count
from termtile.x11.desktop import get_window_desktop as get_window_desktop
from termtile.x11.desktop import set_window_desktop as set_window_desktop
from termtile.x11.monitors import Monitor as Monitor
from termtile.x11.monitors import get_monitors as get_monitors
