"""Listening-port discovery via lsof, and forced process termination."""
import re
import subprocess
from dataclasses import dataclass

import psutil

from .log import debug_log

# lsof columns: COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME
LSOF_CMD = ["lsof", "-iTCP", "-iUDP", "-sTCP:LISTEN", "-P", "-n"]
KILL_CMD = ["kill", "-9"]

PROTO_TCP = "TCP"
PROTO_UDP = "UDP"
PROTO_UNKNOWN = "Unknown"

MIN_FIELDS = 9
MAX_PID = 2**32 - 1
MAX_PORT = 2**16 - 1

_UINT_RE = re.compile(r"\+?[0-9]+")


class KillError(Exception):
    """Raised when the kill utility could not terminate a process."""


@dataclass(frozen=True)
class PortBinding:
    """One listening process as reported by a single lsof row."""
    pid: int
    port: int
    protocol: str
    name: str


def _parse_uint(text, limit):
    if not _UINT_RE.fullmatch(text):
        return None
    value = int(text)
    if value > limit:
        return None
    return value


def _classify_protocol(type_field, node_field):
    if PROTO_TCP in type_field or PROTO_TCP in node_field:
        return PROTO_TCP
    if PROTO_UDP in type_field or PROTO_UDP in node_field:
        return PROTO_UDP
    return PROTO_UNKNOWN


def _parse_port(addr):
    """Port after the last ':' of an lsof NAME field, 0 if there is none."""
    if ":" not in addr:
        return 0
    port = _parse_uint(addr.rsplit(":", 1)[1], MAX_PORT)
    return port or 0


def parse_lsof(text):
    """
    Turn a raw lsof report into PortBindings sorted by port.

    The header line is skipped. Rows that are short, carry a bad pid or
    resolve to port 0 are dropped. Only the first kept row per pid survives.
    """
    bindings = []
    seen_pids = set()
    for line in text.splitlines()[1:]:
        parts = line.split()
        if len(parts) < MIN_FIELDS:
            continue

        name = parts[0]
        pid = _parse_uint(parts[1], MAX_PID)
        if pid is None or pid in seen_pids:
            continue

        protocol = _classify_protocol(parts[4], parts[7])
        port = _parse_port(parts[8])
        if port == 0:
            # pid stays unseen so a later usable row can still claim it
            continue

        seen_pids.add(pid)
        bindings.append(PortBinding(pid=pid, port=port, protocol=protocol, name=name))

    bindings.sort(key=lambda b: b.port)
    return bindings


def scan_ports():
    """Listening TCP/UDP sockets, one binding per pid. Empty on any failure."""
    try:
        result = subprocess.run(
            LSOF_CMD,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace"
        )
    except OSError as e:
        debug_log(f"SCAN: Could not run {LSOF_CMD[0]}: {e}")
        return []

    bindings = parse_lsof(result.stdout or "")
    debug_log(f"SCAN: lsof exit {result.returncode}, {len(bindings)} bindings")
    return bindings


def get_full_cmdline(pid):
    try:
        cmdline = " ".join(psutil.Process(pid).cmdline())
        return cmdline if cmdline else "-"
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return "-"


def kill_process(pid):
    """Send SIGKILL to pid through the kill utility. Raises KillError on failure."""
    debug_log(f"KILL: Targeted PID {pid}. Cmd: {get_full_cmdline(pid)}")
    try:
        res = subprocess.run(KILL_CMD + [str(pid)], capture_output=True, text=True)
    except OSError as e:
        debug_log(f"KILL: Exception - {e}")
        raise KillError(str(e)) from e

    err = (res.stderr or "").strip()
    debug_log(f"KILL: Result - Code {res.returncode}, Err: {err}")
    if res.returncode != 0:
        msg = f"kill command failed with status: {res.returncode}"
        if err:
            msg += f" ({err})"
        raise KillError(msg)
