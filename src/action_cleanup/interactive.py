"""
Interactive cleanup session driven by click prompts.
"""

from pathlib import Path
from typing import List, Optional, Set, Tuple
import asyncio
import logging

import click

from .config import CleanupConfig
from .deletion import delete_action_files, untracked_files
from .errors import CleanupError
from .ignore_list import IgnoreList
from .reporter import Reporter
from .routes import RoutesScanner
from .scanner.empty_folders import EmptyFolderFinder
from .scanner.index import ActionResult, Confidence, ScanResult
from .scanner.orchestrator import Scanner

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 10


def parse_numbers(text: str, upper: int) -> List[int]:
    """Turn '1,3 4' into zero-based indexes, dropping anything out of range."""
    indexes = []
    for token in text.replace(",", " ").split():
        if token.isdigit() and 1 <= int(token) <= upper:
            indexes.append(int(token) - 1)
    return indexes


class InteractiveMode:
    def __init__(
        self,
        result: ScanResult,
        project_root: Path,
        config: CleanupConfig,
        dry_run: bool = False,
        scanner: Optional[Scanner] = None,
    ):
        self.result = result
        self.project_root = Path(project_root)
        self.config = config
        self.dry_run = dry_run
        self.scanner = scanner or Scanner(self.project_root, config.scan)
        self.selected: Set[str] = set()
        self.current_filter = "safe-only"
        self.ignore_list = IgnoreList(
            config.ignore.resolve(self.project_root, config.ignore.actions_file)
        ).load()
        self.routes_ignore_list = IgnoreList(
            config.ignore.resolve(self.project_root, config.ignore.routes_file)
        ).load()

    def start(self):
        click.echo(Reporter(self.result).format_summary(len(self.ignore_list)))

        handlers = {
            "actions": self.manage_actions,
            "routes": self.manage_dead_routes,
            "folders": self.manage_empty_folders,
            "ignored": self.view_ignored_actions,
            "export": self.export_results,
            "delete": self.execute_delete,
        }
        while True:
            choice = self.main_menu()
            if choice == "exit":
                click.echo(click.style("Goodbye!", fg="green"))
                return
            handlers[choice]()

    def _choose(self, title: str, options: List[Tuple[str, str]]) -> str:
        click.echo("")
        click.echo(click.style(title, bold=True))
        for number, (_, label) in enumerate(options, start=1):
            click.echo(f"  {number}. {label}")
        picked = click.prompt("Select", type=click.IntRange(1, len(options)))
        return options[picked - 1][0]

    def main_menu(self) -> str:
        options = [
            ("actions", "Manage server actions (mark/ignore/delete)"),
            ("routes", "Scan dead routes in routes.json"),
            ("folders", f"Manage empty folders ({len(self.result.empty_folders)})"),
        ]
        if len(self.ignore_list):
            options.append(("ignored", f"View ignored actions ({len(self.ignore_list)})"))
        options.append(("export", "Export results"))
        if self.selected:
            options.append(
                ("delete", click.style(f"DELETE marked actions ({len(self.selected)})", fg="red", bold=True))
            )
        options.append(("exit", "Exit"))
        return self._choose("What would you like to do?", options)

    def visible_actions(self) -> List[ActionResult]:
        actions = []
        for action in self.result.actions:
            ignored = self.ignore_list.is_ignored(action.url_path)
            if self.current_filter == "ignored":
                if ignored:
                    actions.append(action)
            elif ignored:
                continue
            elif self.current_filter == "all" or action.confidence == Confidence.SAFE_TO_DELETE:
                actions.append(action)
        return actions

    def format_action(self, number: int, action: ActionResult) -> str:
        mark = click.style("[x]", fg="red") if action.url_path in self.selected else "[ ]"
        color = "red" if action.confidence == Confidence.SAFE_TO_DELETE else "yellow"
        refs = click.style(f"({action.reference_count} refs)", fg="bright_black")
        return f"{number:>3}. {mark} {click.style(action.url_path, fg=color)} {refs}"

    def manage_actions(self):
        while True:
            actions = self.visible_actions()
            click.echo("")
            click.echo(click.style(f"Filter: {self.current_filter}", fg="blue"))
            if not actions:
                click.echo(click.style("No actions to show with current filter.", fg="yellow"))
            for number, action in enumerate(actions, start=1):
                click.echo(self.format_action(number, action))

            command = click.prompt(
                "m <n> mark/unmark, i <n> ignore/unignore, r <n> references, "
                "f filter, d delete marked, b back",
                default="b",
                show_default=False,
            ).strip()
            verb, _, rest = command.partition(" ")
            verb = verb.lower()

            if verb == "b":
                return
            if verb == "f":
                self.change_filter()
            elif verb == "d":
                self.execute_delete()
            elif verb in ("m", "i", "r"):
                for index in parse_numbers(rest, len(actions)):
                    self._apply(verb, actions[index])
            else:
                click.echo(click.style(f"Unknown command: {command}", fg="yellow"))

    def _apply(self, verb: str, action: ActionResult):
        key = action.url_path
        if verb == "m":
            if key in self.selected:
                self.selected.discard(key)
            else:
                self.selected.add(key)
        elif verb == "i":
            if self.ignore_list.is_ignored(key):
                self.ignore_list.remove(key)
            else:
                self.ignore_list.add(key)
                self.selected.discard(key)
        else:
            click.echo(click.style(f"References to {key}:", bold=True))
            if not action.references:
                click.echo("  none found")
            for ref in action.references:
                click.echo(f"  {ref.source_file} [{ref.type.value}] {ref.original_reference}")

    def change_filter(self):
        self.current_filter = self._choose(
            "Show which actions?",
            [
                ("safe-only", "Safe to delete only"),
                ("all", "All actions"),
                ("ignored", "Ignored actions"),
            ],
        )

    def _view_ignored(self, ignore_list: IgnoreList, label: str):
        while True:
            keys = ignore_list.keys()
            click.echo("")
            if not keys:
                click.echo(click.style(f"No ignored {label}.", fg="green"))
                return
            for number, key in enumerate(keys, start=1):
                click.echo(f"{number:>3}. {key}")
            command = click.prompt("u <n> unignore, b back", default="b", show_default=False)
            verb, _, rest = command.strip().partition(" ")
            if verb.lower() != "u":
                return
            for index in parse_numbers(rest, len(keys)):
                ignore_list.remove(keys[index])

    def view_ignored_actions(self):
        self._view_ignored(self.ignore_list, "actions")

    def view_ignored_routes(self):
        self._view_ignored(self.routes_ignore_list, "routes")

    def export_results(self):
        filename = click.prompt("Output file (.json or .html)", default="cleanup-results.json")
        Reporter(self.result).save(filename)
        click.echo(click.style(f"Results saved to {filename}", fg="green"))

    def _preview(self, items: List[str]):
        for number, item in enumerate(items[:PREVIEW_LIMIT], start=1):
            click.echo(f"{number:>3}. {click.style(item, fg='red')}")
        if len(items) > PREVIEW_LIMIT:
            click.echo(click.style(f"     ... and {len(items) - PREVIEW_LIMIT} more", fg="bright_black"))

    def execute_delete(self):
        if not self.selected:
            click.echo(click.style("No actions marked for deletion.", fg="yellow"))
            return

        actions = [a for a in self.result.actions if a.url_path in self.selected]
        files = [a.file_path for a in actions]
        click.echo(click.style(f"\nAbout to delete {len(files)} server actions:", fg="red", bold=True))
        self._preview(files)

        if self.dry_run:
            click.echo(click.style("Dry run: nothing was deleted.", fg="blue"))
            return

        untracked = untracked_files(self.project_root, files)
        if untracked is None:
            click.echo(click.style("Project is not a git repository; deleted files cannot be restored with git.", fg="yellow"))
        elif untracked:
            click.echo(click.style(f"{len(untracked)} of these files are not tracked by git:", fg="yellow"))
            self._preview(untracked)

        if not click.confirm(click.style("This cannot be undone. Are you sure?", fg="red", bold=True), default=False):
            click.echo(click.style("Deletion cancelled", fg="green"))
            return

        backup_dir = self.config.delete.backup_dir
        if not backup_dir and click.confirm("Copy the files to a backup directory first?", default=False):
            backup_dir = click.prompt("Backup directory", default=str(self.project_root / ".action-cleanup" / "backup"))

        report = delete_action_files(self.project_root, files, backup_dir=backup_dir)
        if report.ok:
            click.echo(click.style(f"Deleted {len(report.deleted)} server actions", fg="green"))
        else:
            click.echo(click.style(f"Deleted {len(report.deleted)} files, but {len(report.errors)} failed:", fg="yellow"))
            for error in report.errors:
                click.echo(click.style(f"  {error['path']}: {error['error']}", fg="red"))
        if report.backed_up:
            click.echo(f"Backed up {len(report.backed_up)} files to {backup_dir}")

        deleted = {a.url_path for a in actions if a.file_path in report.deleted or a.file_path in report.missing}
        self.selected -= deleted
        self.offer_empty_folder_cleanup()
        self.rescan(deleted)

    def rescan(self, deleted: Set[str]):
        """Recompute classifications after files changed on disk."""
        try:
            self.result = asyncio.run(self.scanner.scan())
        except CleanupError as e:
            logger.warning(f"Rescan failed, dropping deleted actions only: {e}")
            self.result = self.result.without(deleted)
        self.selected &= {a.url_path for a in self.result.actions}
        click.echo(Reporter(self.result).format_summary(len(self.ignore_list)))

    def offer_empty_folder_cleanup(self):
        finder = EmptyFolderFinder(self.project_root, self.config.scan.action_dirs)
        folders = asyncio.run(finder.find())
        if not folders:
            return

        click.echo(click.style(f"\nFound {len(folders)} empty folders:", fg="yellow"))
        self._preview([f.relative_path for f in folders])
        if click.confirm(f"Delete these {len(folders)} empty folders?", default=True):
            self._delete_folders(finder, [f.path for f in folders])

    def _delete_folders(self, finder: EmptyFolderFinder, paths: List[str]):
        result = asyncio.run(finder.delete(paths))
        if result.errors:
            click.echo(click.style(f"Deleted {len(result.deleted)} folders, {len(result.errors)} failed", fg="yellow"))
            for error in result.errors:
                click.echo(click.style(f"  {error['path']}: {error['error']}", fg="red"))
        else:
            click.echo(click.style(f"Deleted {len(result.deleted)} empty folders", fg="green"))

    def manage_empty_folders(self):
        finder = EmptyFolderFinder(self.project_root, self.config.scan.action_dirs)
        folders = asyncio.run(finder.find())
        if not folders:
            click.echo(click.style("No empty folders found.", fg="green"))
            return

        click.echo(click.style(f"\n{len(folders)} empty folders:", fg="yellow"))
        self._preview([f.relative_path for f in folders])
        if self.dry_run:
            click.echo(click.style("Dry run: nothing was deleted.", fg="blue"))
            return
        if click.confirm(f"Delete these {len(folders)} empty folders?", default=False):
            self._delete_folders(finder, [f.path for f in folders])
        self.result = ScanResult(
            actions=self.result.actions,
            empty_folders=tuple(asyncio.run(finder.find())),
            warnings=self.result.warnings,
            unresolved=self.result.unresolved,
        )

    def manage_dead_routes(self):
        routes_scanner = RoutesScanner(self.project_root, self.config.scan)
        try:
            scan = asyncio.run(routes_scanner.scan())
        except CleanupError as e:
            click.echo(click.style(f"Routes scan failed: {e}", fg="red"))
            return
        if not scan.found:
            click.echo(click.style("routes.json not found", fg="yellow"))
            return

        while True:
            dead = [r for r in scan.dead_routes if not self.routes_ignore_list.is_ignored(r.path)]
            click.echo("")
            click.echo(f"{scan.total_routes} routes, {len(scan.dead_routes)} dead, {len(self.routes_ignore_list)} ignored")
            if not dead:
                click.echo(click.style("No dead routes found!", fg="green"))
                # Ignored routes can still be brought back
                if not len(self.routes_ignore_list):
                    return
            for number, route in enumerate(dead, start=1):
                click.echo(f"{number:>3}. {click.style(str(route.path), fg='cyan')}")
                for issue in route.issues:
                    click.echo(click.style(f"       {issue.message}", fg="bright_black"))

            command = click.prompt(
                "i <n> ignore, d <n> delete, a delete all, u view ignored, b back",
                default="b",
                show_default=False,
            ).strip()
            verb, _, rest = command.partition(" ")
            verb = verb.lower()

            if verb == "b":
                return
            if verb == "i":
                for index in parse_numbers(rest, len(dead)):
                    if dead[index].path:
                        self.routes_ignore_list.add(dead[index].path)
                continue
            if verb == "u":
                self.view_ignored_routes()
                continue
            if verb in ("d", "a"):
                targets = dead if verb == "a" else [dead[i] for i in parse_numbers(rest, len(dead))]
                if targets and self.execute_route_delete(routes_scanner, [r.path for r in targets]):
                    scan = asyncio.run(routes_scanner.scan())
                continue
            click.echo(click.style(f"Unknown command: {command}", fg="yellow"))

    def execute_route_delete(self, routes_scanner: RoutesScanner, paths: List[str]) -> bool:
        click.echo(click.style(f"\nAbout to remove {len(paths)} routes from routes.json:", fg="red", bold=True))
        self._preview([str(p) for p in paths])
        if self.dry_run:
            click.echo(click.style("Dry run: nothing was deleted.", fg="blue"))
            return False
        if not click.confirm("Remove these routes?", default=False):
            click.echo(click.style("Deletion cancelled", fg="green"))
            return False
        removed = asyncio.run(routes_scanner.delete_routes(paths))
        click.echo(click.style(f"Removed {removed} routes", fg="green"))
        return True
