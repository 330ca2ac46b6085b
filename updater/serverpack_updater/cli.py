from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict
from pydantic import ValidationError
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .errors import UpdaterError
from .models import SelectionPolicy
from .orchestrator import Updater

log = get_logger("serverpack.updater.cli")

def _add_overrides(p: argparse.ArgumentParser) -> None:
    p.add_argument("--launch-file", type=Path, help="Launch script to patch (default: $LAUNCH_FILE or launch.sh)")
    p.add_argument("--policy", choices=[s.value for s in SelectionPolicy],
                   help="Server pack selection policy (default: $SELECTION_POLICY or pointer)")
    p.add_argument("--project-id", type=int, help="CurseForge project id (default: $CURSEFORGE_PROJECT_ID)")

def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: Dict[str, Any] = {}
    if getattr(args, "launch_file", None) is not None:
        overrides["launch_file"] = args.launch_file
    if getattr(args, "policy", None):
        overrides["selection_policy"] = SelectionPolicy(args.policy)
    if getattr(args, "project_id", None) is not None:
        overrides["project_id"] = args.project_id
    settings = Settings()
    return settings.model_copy(update=overrides) if overrides else settings

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="serverpack-updater")
    sub = parser.add_subparsers(dest="cmd")

    run_p = sub.add_parser("run", help="Fetch latest server pack and patch the launch file")
    run_p.add_argument("--dry-run", action="store_true", help="Report what would change; don't write the launch file")
    _add_overrides(run_p)

    plan_p = sub.add_parser("plan", help="Print a dry-run plan as JSON and exit")
    _add_overrides(plan_p)

    args = parser.parse_args(argv)
    cmd = args.cmd or "run"

    try:
        settings = _settings_from_args(args)
    except ValidationError as e:
        # logging is not configured yet
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    setup_logging(settings)

    updater = Updater(settings)
    try:
        if cmd == "plan":
            plan = updater.plan().to_dict()
            print(json.dumps(plan, indent=2, ensure_ascii=False))
            return 0

        updater.run(dry_run=bool(getattr(args, "dry_run", False)))
        return 0
    except UpdaterError as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.exception(f"Unexpected failure: {e}")
        return 1
