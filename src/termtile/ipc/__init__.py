"""IPC subsystem: daemon server, client, and the wire protocol between them."""

from termtile.ipc.client import ClientError as ClientError
from termtile.ipc.client import DaemonClient as DaemonClient
from termtile.ipc.client import DaemonError as DaemonError
from termtile.ipc.client import DaemonUnreachableError as DaemonUnreachableError
from termtile.ipc.protocol import CommandType as CommandType
from termtile.ipc.protocol import Response as Response
from termtile.ipc.server import IpcServer as IpcServer
from termtile.ipc.sync import ReloadSignal as ReloadSignal
