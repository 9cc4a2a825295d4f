"""
Backup-and-delete of action files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
import logging
import shutil

import git

logger = logging.getLogger(__name__)


@dataclass
class DeletionReport:
    deleted: List[str] = field(default_factory=list)
    backed_up: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


def delete_action_files(
    project_root: Union[str, Path],
    file_paths: Iterable[str],
    backup_dir: Optional[Union[str, Path]] = None,
    dry_run: bool = False,
) -> DeletionReport:
    """
    Delete action declaration files one by one.

    A file is only deleted after its backup copy (if requested) succeeded.
    Failures are collected per file and never stop the batch.

    Args:
        project_root: Project root the paths are relative to
        file_paths: Project-relative files to delete
        backup_dir: Optional directory receiving copies, keeping relative paths
        dry_run: Only report what would be deleted

    Returns:
        DeletionReport describing the outcome of every file
    """
    root = Path(project_root)
    backup_root = Path(backup_dir) if backup_dir else None
    report = DeletionReport(dry_run=dry_run)

    for rel_path in file_paths:
        source = root / rel_path

        if not source.exists():
            report.missing.append(rel_path)
            continue

        if dry_run:
            report.deleted.append(rel_path)
            continue

        if backup_root is not None:
            target = backup_root / rel_path
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
                report.backed_up.append(rel_path)
            except OSError as e:
                logger.error(f"Backup of {rel_path} failed, not deleting it: {e}")
                report.errors.append({"path": rel_path, "error": f"backup failed: {e}"})
                continue

        try:
            source.unlink()
            report.deleted.append(rel_path)
            logger.debug(f"Deleted {rel_path}")
        except OSError as e:
            logger.error(f"Failed to delete {rel_path}: {e}")
            report.errors.append({"path": rel_path, "error": str(e)})

    return report


def untracked_files(
    project_root: Union[str, Path], file_paths: Iterable[str]
) -> Optional[List[str]]:
    """
    List the files git could not restore after deletion.

    Args:
        project_root: Project root the paths are relative to
        file_paths: Project-relative files about to be deleted

    Returns:
        Paths not tracked by git, or None if the project is not in a git work tree
    """
    root = Path(project_root).resolve()
    try:
        repo = git.Repo(root, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        return None

    work_tree = Path(repo.working_tree_dir).resolve()
    try:
        tracked = set(repo.git.ls_files().splitlines())
    except git.GitCommandError as e:
        logger.warning(f"Could not list tracked files: {e}")
        return None

    untracked = []
    for rel_path in file_paths:
        repo_path = (root / rel_path).resolve().relative_to(work_tree).as_posix()
        if repo_path not in tracked:
            untracked.append(rel_path)
    return untracked
