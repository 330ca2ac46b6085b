from __future__ import annotations
from pathlib import Path
from typing import Optional
from .settings import Settings
from .logging_setup import get_logger
from .curseforge import CurseForgeClient
from .models import Candidate, SelectionPolicy
from .selector import select_latest
from .patcher import PatchResult, patch_launch_file
from .planner import PlanAction, UpdatePlan

log = get_logger("serverpack.updater.orch")

class Updater:
    """Fetch -> select -> patch, once per call."""

    def __init__(self, settings: Settings, client: Optional[CurseForgeClient] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> CurseForgeClient:
        if self._client is None:
            self._client = CurseForgeClient.from_settings(self.settings)
        return self._client

    @property
    def policy(self) -> SelectionPolicy:
        return SelectionPolicy(self.settings.selection_policy)

    @property
    def launch_file(self) -> Path:
        return Path(self.settings.launch_file)

    def select(self) -> Candidate:
        project_id = self.settings.project_id
        log.info("Looking up latest server pack for project %s (policy=%s)", project_id, self.policy.value)
        files = self.client.list_files(project_id, page_size=self.settings.page_size)
        latest = select_latest(
            files,
            policy=self.policy,
            resolve=lambda file_id: self.client.get_file(project_id, file_id),
        )
        log.info("Latest server pack: id=%s fileName=%s serverVersion=%s",
                 latest.id, latest.fileName, latest.serverVersion)
        return latest

    def run(self, *, dry_run: bool = False) -> PatchResult:
        latest = self.select()
        return patch_launch_file(
            self.launch_file,
            latest,
            strict=self.policy is SelectionPolicy.STRICT,
            dry_run=dry_run,
        )

    def plan(self) -> UpdatePlan:
        latest = self.select()
        result = patch_launch_file(
            self.launch_file,
            latest,
            strict=self.policy is SelectionPolicy.STRICT,
            dry_run=True,
        )
        detail = "update SERVER_VERSION and SERVER_FILE_ID" if result.changed else "no changes needed"
        action = PlanAction(
            action="patch_launch_file",
            target=str(self.launch_file),
            detail=detail,
            values={"SERVER_VERSION": latest.serverVersion, "SERVER_FILE_ID": str(latest.id)},
            will_change=result.changed,
        )
        return UpdatePlan(
            policy=self.policy.value,
            candidate=latest.model_dump(),
            actions=[action],
        )
