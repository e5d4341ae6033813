"""
Filesystem adapter — file and directory operations.

Provides a receipt-returning interface for the filesystem operations
provisioning needs, so they can be dry-run and tested like commands.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.core.models.action import Receipt

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def backup_target(path: Path, suffix: str = BACKUP_SUFFIX) -> Path:
    """Pick the backup name for ``path``.

    ``PATH.bak`` when free, otherwise ``PATH.bak.YYYYMMDD_HHMMSS`` so
    an earlier backup is never clobbered.
    """
    candidate = path.with_name(path.name + suffix)
    if not candidate.exists():
        return candidate
    ts = time.strftime("%Y%m%d_%H%M%S")
    return path.with_name(f"{path.name}{suffix}.{ts}")


class FilesystemAdapter(Adapter):
    """File and directory operations with receipts.

    Action params:
        operation (str): One of 'read', 'copy', 'mkdir', 'backup',
            'remove'.
        path (str): Target path (absolute).
        src (str): Source file (for 'copy').
        suffix (str): Backup suffix (for 'backup', default '.bak').
    """

    VALID_OPS = {"read", "copy", "mkdir", "backup", "remove"}

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in self.VALID_OPS:
            valid = ", ".join(sorted(self.VALID_OPS))
            return False, f"Unknown operation '{operation}'. Valid: {valid}"

        if not context.params.get("path"):
            return False, "Missing required param: 'path'"

        if operation == "copy" and not context.params.get("src"):
            return False, "Missing required param: 'src' for copy operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = Path(context.params["path"])

        try:
            if operation == "read":
                return self._read(context, target)
            elif operation == "copy":
                return self._copy(context, target)
            elif operation == "mkdir":
                return self._mkdir(context, target)
            elif operation == "backup":
                return self._backup(context, target)
            elif operation == "remove":
                return self._remove(context, target)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    def _read(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if not target.is_file():
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"File not found: {target}",
            )
        content = target.read_text(encoding="utf-8")
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=content,
            metadata={"path": str(target), "size": len(content)},
        )

    def _copy(self, ctx: ExecutionContext, target: Path) -> Receipt:
        src = Path(ctx.params["src"])
        if not src.is_file():
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Source file not found: {src}",
            )
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, target)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Copied {src} to {target}",
            metadata={"src": str(src), "path": str(target)},
        )

    def _mkdir(self, ctx: ExecutionContext, target: Path) -> Receipt:
        target.mkdir(parents=True, exist_ok=True)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Directory created: {target}",
            metadata={"path": str(target)},
        )

    def _backup(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if not target.exists():
            return Receipt.skip(
                adapter=self.name,
                action_id=ctx.action.id,
                reason=f"Nothing to back up at {target}",
            )
        dest = backup_target(target, ctx.params.get("suffix", BACKUP_SUFFIX))
        target.rename(dest)
        logger.info("Backed up %s → %s", target, dest)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=str(dest),
            metadata={"path": str(target), "backup": str(dest)},
        )

    def _remove(self, ctx: ExecutionContext, target: Path) -> Receipt:
        if target.is_dir():
            shutil.rmtree(target)
        elif target.exists():
            target.unlink()
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Removed {target}",
            metadata={"path": str(target)},
        )
