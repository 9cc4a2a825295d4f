"""
Dead route detection for the declarative routing table.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import json
import logging

from .config import ScanConfig
from .errors import StructuralParseError
from .scanner.normalizer import route_exec_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteIssue:
    type: str
    message: str
    expected_path: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type,
            "message": self.message,
            "expectedPath": self.expected_path,
        }


@dataclass(frozen=True)
class DeadRoute:
    path: Optional[str]
    route: Dict[str, Any]
    issues: tuple

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "route": self.route,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class RouteScanResult:
    total_routes: int = 0
    dead_routes: tuple = ()
    found: bool = True

    @property
    def valid_routes(self) -> int:
        return self.total_routes - len(self.dead_routes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRoutes": self.total_routes,
            "validRoutes": self.valid_routes,
            "deadRoutes": [route.to_dict() for route in self.dead_routes],
        }


class RoutesScanner:
    """Checks every route's page, exec and layout against the file system."""

    def __init__(self, project_root: Union[str, Path], config: Optional[ScanConfig] = None):
        self.project_root = Path(project_root)
        self.config = config or ScanConfig()
        self.routes_file = self.project_root / self.config.routes_file

    def _read_table(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.routes_file.read_text(encoding="utf-8-sig"))
        except ValueError as e:
            raise StructuralParseError(self.routes_file, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise StructuralParseError(self.routes_file, "expected a JSON object")
        return data

    async def scan(self) -> RouteScanResult:
        """
        Find routes that point at missing files.

        Returns:
            RouteScanResult; empty with found=False when there is no routes file
        """
        if not self.routes_file.exists():
            logger.warning(f"Routes file not found: {self.routes_file}")
            return RouteScanResult(found=False)

        routes = self._read_table().get("routes") or []
        logger.info(f"Found {len(routes)} routes. Checking for dead references...")

        dead = []
        for route in routes:
            if not isinstance(route, dict):
                continue
            issues = self.check_route(route)
            if issues:
                dead.append(DeadRoute(path=route.get("path"), route=route, issues=tuple(issues)))

        logger.info(f"Found {len(dead)} dead routes out of {len(routes)} total")
        return RouteScanResult(total_routes=len(routes), dead_routes=tuple(dead))

    def check_route(self, route: Dict[str, Any]) -> List[RouteIssue]:
        issues = []

        page = route.get("page")
        if page:
            expected = f"views/{page}.ejs"
            if not (self.project_root / expected).exists():
                issues.append(
                    RouteIssue("missing_page", f"Page file not found: {expected}", expected)
                )

        exec_ref = route.get("exec")
        if exec_ref:
            expected = route_exec_path(exec_ref)
            if expected and not (self.project_root / expected).exists():
                issues.append(
                    RouteIssue("missing_exec", f"Server action not found: {expected}", expected)
                )

        layout = route.get("layout")
        if layout:
            expected = f"views/layouts/{layout}.ejs"
            if not (self.project_root / expected).exists():
                issues.append(
                    RouteIssue("missing_layout", f"Layout file not found: {expected}", expected)
                )

        return issues

    async def delete_routes(self, route_paths: Iterable[str]) -> int:
        """
        Remove routes from the routing table.

        Args:
            route_paths: Route paths to drop

        Returns:
            Number of route entries removed
        """
        to_delete = set(route_paths)
        table = self._read_table()
        routes = table.get("routes") or []
        kept = [
            r for r in routes if not (isinstance(r, dict) and r.get("path") in to_delete)
        ]
        table["routes"] = kept

        temp_file = self.routes_file.with_suffix(".tmp")
        try:
            temp_file.write_text(json.dumps(table, indent=2) + "\n", encoding="utf-8")
            temp_file.replace(self.routes_file)
        except Exception as e:
            logger.error(f"Error writing routes file: {e}")
            if temp_file.exists():
                temp_file.unlink()
            raise

        removed = len(routes) - len(kept)
        logger.info(f"Deleted {removed} routes from {self.routes_file}")
        return removed
