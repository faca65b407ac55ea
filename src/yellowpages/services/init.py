"""InitService — create a catalog and onboard coding agents.

These operations run before (or independently of) a loaded catalog, so
they are plain functions over a directory rather than BaseService
methods.
"""

from __future__ import annotations

from pathlib import Path

from yellowpages.infrastructure.store import init_store
from yellowpages.services.result import ServiceResult
from yellowpages.services.telemetry import traced

AGENT_FILES = ("CLAUDE.md", "AGENTS.md", "COPILOT.md")
ONBOARD_TARGET = "CLAUDE.md"
ONBOARD_MARKER = "<yellowpages>"

ONBOARD_BLOCK = """\
<yellowpages>
Use `yp` to explore the service catalog before making changes. Data is stored in `.yellowpages/` as JSON files, tracked by git.

<commands>
- `yp service list` - List all services
- `yp service show <id-or-name>` - Full service profile (owner, deps, APIs, dependents)
- `yp service list --system <name>` - Services in a system
- `yp service list --owner <name>` - Services owned by a team
- `yp system list` - List all systems
- `yp system show <id-or-name>` - System details with its services
- `yp owner list` - List all owners
- `yp owner show <id-or-name>` - Owner details with their services and systems
- `yp deps <service>` - Dependency graph: what depends on it AND what it depends on
- `yp deps <service> --direction up` - Only what depends on this service
- `yp deps --orphans` - Find isolated services (no deps in or out)
- `yp search <query>` - Full-text search across all entities
- `yp search --unowned` - Find services with no owner
- `yp lint` - Validate catalog integrity (orphaned refs, circular deps, etc.)
- `yp discover --dir <path>` - Auto-discover services from local repos
- `yp discover --github-org <org>` - Auto-discover from GitHub org
- `yp discover --dry-run` - Preview what would be added without changing anything
- `yp export graph --format dot` - Export the dependency graph
</commands>

<rules>
- ALWAYS use `--json` flag to get structured output for parsing
- Check the service catalog before modifying infrastructure
- Respect ownership: check who owns a service before changing it
- ALWAYS check `yp --json deps <service> --direction up` before modifying a service
- Run `yp --json lint` after making catalog changes to verify integrity
</rules>
</yellowpages>"""


class InitService:
    """Catalog bootstrap operations."""

    @staticmethod
    @traced
    def init(cwd: Path) -> ServiceResult:
        """Create ``.yellowpages/`` in *cwd*. Idempotent."""
        root, created = init_store(cwd)
        return ServiceResult(
            ok=True,
            op="init",
            data={"path": str(root), "created": created},
        )

    @staticmethod
    @traced
    def onboard(project_dir: Path) -> ServiceResult:
        """Append the agent instruction block to ``CLAUDE.md``.

        Skipped when any known agent file already carries the block.
        """
        for name in AGENT_FILES:
            path = project_dir / name
            if path.is_file() and ONBOARD_MARKER in path.read_text(encoding="utf-8"):
                return ServiceResult(
                    ok=True,
                    op="onboard",
                    data={"file": name, "created": False, "updated": False},
                )

        target = project_dir / ONBOARD_TARGET
        existing = target.read_text(encoding="utf-8") if target.is_file() else ""
        if existing:
            content = f"{existing.rstrip()}\n\n{ONBOARD_BLOCK}\n"
        else:
            content = f"# CLAUDE.md\n\n{ONBOARD_BLOCK}\n"
        target.write_text(content, encoding="utf-8")
        return ServiceResult(
            ok=True,
            op="onboard",
            data={"file": ONBOARD_TARGET, "created": not existing, "updated": True},
        )
