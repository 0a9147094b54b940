"""Daily cron registration for the audit.

Registrations are the user's crontab lines tagged with a marker comment
(``# meeting-audit:<handler>``). Installing checks for an existing tag first,
so repeated installs never create duplicates.
"""
from __future__ import annotations

import logging
import os
import shlex
import subprocess  # nosec B404 - crontab is invoked with fixed argv
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .constants import CRON_MARKER, DEFAULT_HANDLER, DEFAULT_SCHEDULE_HOUR, DEFAULT_SCHEDULE_MINUTE
from .errors import ScheduleError

LOG = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


def _run(cmd: Sequence[str], input: Optional[str] = None) -> subprocess.CompletedProcess:
    return subprocess.run(  # noqa: S603 - fixed argv
        list(cmd), input=input, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, check=False
    )


@dataclass(frozen=True)
class ScheduleEntry:
    handler: str
    schedule: str
    command: str

    def to_line(self) -> str:
        return f"{self.schedule} {self.command} {CRON_MARKER}{self.handler}"


def parse_entry(line: str) -> Optional[ScheduleEntry]:
    """Return a ScheduleEntry for a tagged crontab line, else None."""
    if CRON_MARKER not in line or line.lstrip().startswith("#"):
        return None
    body, _, handler = line.rpartition(CRON_MARKER)
    parts = body.split(None, 5)
    if len(parts) < 6 or not handler.strip():
        return None
    return ScheduleEntry(handler=handler.strip(), schedule=" ".join(parts[:5]), command=parts[5].strip())


def default_command(handler: str = DEFAULT_HANDLER, profile: Optional[str] = None, config: Optional[str] = None) -> str:
    argv = [sys.executable, "-m", "meeting_audit"]
    if profile:
        argv += ["--profile", profile]
    if config:
        # cron starts jobs in $HOME
        argv += ["--config", os.path.abspath(os.path.expanduser(config))]
    argv.append(handler)
    return " ".join(shlex.quote(a) for a in argv)


class CronScheduler:
    def __init__(self, runner: Runner = _run, crontab_bin: str = "crontab") -> None:
        self._runner = runner
        self._bin = crontab_bin

    def _read_lines(self) -> List[str]:
        try:
            proc = self._runner([self._bin, "-l"])
        except OSError as exc:
            raise ScheduleError(f"Cannot run {self._bin}: {exc}", hint="Install cron or check PATH.") from exc
        if proc.returncode != 0:
            # `crontab -l` exits non-zero when the user has no crontab yet
            if "no crontab" in (proc.stderr or "").lower():
                return []
            raise ScheduleError(f"crontab -l failed: {(proc.stderr or '').strip()}")
        return (proc.stdout or "").splitlines()

    def _write_lines(self, lines: List[str]) -> None:
        text = "\n".join(lines).rstrip("\n") + "\n" if lines else ""
        try:
            proc = self._runner([self._bin, "-"], input=text)
        except OSError as exc:
            raise ScheduleError(f"Cannot run {self._bin}: {exc}") from exc
        if proc.returncode != 0:
            raise ScheduleError(f"crontab install failed: {(proc.stderr or '').strip()}")

    def list_registrations(self, handler: Optional[str] = None) -> List[ScheduleEntry]:
        out: List[ScheduleEntry] = []
        for line in self._read_lines():
            entry = parse_entry(line)
            if entry and (handler is None or entry.handler == handler):
                out.append(entry)
        return out

    def ensure_daily(
        self,
        handler: str = DEFAULT_HANDLER,
        *,
        hour: int = DEFAULT_SCHEDULE_HOUR,
        minute: int = DEFAULT_SCHEDULE_MINUTE,
        command: Optional[str] = None,
    ) -> bool:
        """Install a once-daily entry unless one for ``handler`` exists.

        Returns True when a new entry was written.
        """
        lines = self._read_lines()
        for line in lines:
            entry = parse_entry(line)
            if entry and entry.handler == handler:
                LOG.info("Daily schedule for %r already installed (%s)", handler, entry.schedule)
                return False
        entry = ScheduleEntry(
            handler=handler,
            schedule=f"{int(minute)} {int(hour)} * * *",
            command=command or default_command(handler),
        )
        self._write_lines(lines + [entry.to_line()])
        LOG.info("Installed daily schedule for %r at %02d:%02d", handler, hour, minute)
        return True

    def remove_all(self, handler: Optional[str] = None) -> int:
        """Remove tagged entries (all handlers when ``handler`` is None)."""
        lines = self._read_lines()
        keep: List[str] = []
        removed = 0
        for line in lines:
            entry = parse_entry(line)
            if entry and (handler is None or entry.handler == handler):
                removed += 1
                continue
            keep.append(line)
        if removed:
            self._write_lines(keep)
        LOG.info("Removed %d schedule registration(s)", removed)
        return removed
