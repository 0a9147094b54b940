"""Meeting Audit CLI

Commands:
- run: audit the lookahead window now and email the report (cron-safe)
- preview: same audit, printed instead of emailed
- auth: authorize the Google OAuth token interactively
- install-schedule / remove-schedule / list-schedules: manage the daily cron entry
"""
from __future__ import annotations

import argparse
import logging
from typing import Any, Dict

from . import __version__
from .applog import configure_logging
from .cli_framework import CLIApp
from .config import AuditConfig, load_config
from .constants import DEFAULT_HANDLER
from .google_api import GoogleAuth, GoogleServices
from .pipeline import AuditRequest, run_audit
from .scheduler import CronScheduler, default_command

LOG = logging.getLogger(__name__)

app = CLIApp(
    "meeting-audit",
    "Flag meetings you organized that nobody has accepted yet, and email a summary.",
    version=__version__,
)


def _load(args: argparse.Namespace, **overrides: Any) -> AuditConfig:
    clean: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    cfg = load_config(
        config_path=getattr(args, "config", None),
        profile=getattr(args, "profile", None),
        overrides=clean,
    )
    if cfg.log_file:
        configure_logging(
            verbose=bool(getattr(args, "verbose", False)),
            quiet=bool(getattr(args, "quiet", False)),
            log_file=cfg.log_file,
        )
    return cfg


def _build_services(cfg: AuditConfig, *, interactive: bool) -> GoogleServices:
    return GoogleServices(GoogleAuth(cfg.credentials, cfg.token, interactive=interactive))


def _scheduler() -> CronScheduler:
    return CronScheduler()


def _audit_request(args: argparse.Namespace, *, interactive: bool, dry_run: bool) -> AuditRequest:
    cfg = _load(
        args,
        calendar_id=getattr(args, "calendar", None),
        lookahead_days=getattr(args, "days", None),
        recipient=getattr(args, "to", None),
    )
    return AuditRequest(
        services=_build_services(cfg, interactive=interactive),
        calendar_id=cfg.calendar_id,
        lookahead_days=cfg.lookahead_days,
        recipient=cfg.recipient,
        dry_run=dry_run,
        output=getattr(args, "output", "text") or "text",
    )


@app.command("run", help="Audit the lookahead window now and email the report")
@app.argument("--calendar", help="Calendar ID (default primary)")
@app.argument("--days", type=int, help="Lookahead window in days (default 7)")
@app.argument("--to", help="Report recipient (default: your own address)")
def cmd_run(args: argparse.Namespace) -> int:
    return run_audit(_audit_request(args, interactive=False, dry_run=False))


@app.command("preview", help="Audit the lookahead window and print the result instead of emailing it")
@app.argument("--calendar", help="Calendar ID (default primary)")
@app.argument("--days", type=int, help="Lookahead window in days (default 7)")
@app.argument("--output", "-o", choices=["text", "json", "yaml"], default="text", help="Output format (default text)")
def cmd_preview(args: argparse.Namespace) -> int:
    return run_audit(_audit_request(args, interactive=True, dry_run=True))


@app.command("auth", help="Authorize Google Calendar/Gmail access and store the token")
def cmd_auth(args: argparse.Namespace) -> int:
    cfg = _load(args)
    GoogleAuth(cfg.credentials, cfg.token, interactive=True).authenticate()
    print(f"Token saved to {cfg.token}")
    return 0


@app.command("install-schedule", help="Install the once-daily cron entry for `run` (idempotent)")
@app.argument("--hour", type=int, help="Hour of day, 0-23 (default 8)")
@app.argument("--minute", type=int, help="Minute, 0-59 (default 0)")
def cmd_install_schedule(args: argparse.Namespace) -> int:
    cfg = _load(args, schedule_hour=getattr(args, "hour", None), schedule_minute=getattr(args, "minute", None))
    command = default_command(DEFAULT_HANDLER, profile=getattr(args, "profile", None), config=getattr(args, "config", None))
    created = _scheduler().ensure_daily(
        DEFAULT_HANDLER, hour=cfg.schedule_hour, minute=cfg.schedule_minute, command=command
    )
    if created:
        print(f"Installed daily audit at {cfg.schedule_hour:02d}:{cfg.schedule_minute:02d}")
    else:
        print("Daily audit already installed")
    return 0


@app.command("remove-schedule", help="Remove every installed audit cron entry")
def cmd_remove_schedule(args: argparse.Namespace) -> int:
    removed = _scheduler().remove_all()
    print(f"Removed {removed} schedule(s)")
    return 0


@app.command("list-schedules", help="List installed audit cron entries")
def cmd_list_schedules(args: argparse.Namespace) -> int:
    entries = _scheduler().list_registrations()
    if not entries:
        print("No schedules installed")
        return 0
    for e in entries:
        print(f"{e.handler}: {e.schedule}  {e.command}")
    return 0


def main(argv=None) -> int:
    return app.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
