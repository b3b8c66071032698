"""Landing pages listing the modules that produced coverage or source xref reports.

A multi-module build writes one report per module; the landing pages at the
site root link to each of them. A module is listed when its build directory
holds ``staging/<report>/index.html`` or, failing that,
``site/<report>/index.html``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from jxr2prism.fileio import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class ModuleReport:
    artifact_id: str
    description: str
    relative_path: str


@dataclass(frozen=True)
class ReportKind:
    report_dir: str
    output_name: str
    heading: str
    link_label: str


COVERAGE = ReportKind("jacoco", "coverage.html", "Code Coverage", "View Coverage →")
XREF = ReportKind("xref", "source-xref.html", "Source Cross-Reference", "Browse Source →")


@dataclass(frozen=True)
class Templates:
    env: Environment

    def render_landing(self, context: dict[str, Any]) -> str:
        tpl = self.env.get_template("landing.html")
        return str(tpl.render(**context))


def create_environment(templates_dir: Path = DEFAULT_TEMPLATES_DIR) -> Templates:
    loader = FileSystemLoader(str(templates_dir))
    env = Environment(loader=loader, undefined=StrictUndefined, autoescape=True)
    return Templates(env=env)


def find_report_index(module_dir: Path, report_dir: str) -> Path | None:
    for stage in ("staging", "site"):
        index = module_dir / stage / report_dir / "index.html"
        if index.exists():
            return index
    return None


def _read_description(module_dir: Path) -> str:
    desc = module_dir / "description.txt"
    if desc.is_file():
        return desc.read_text(encoding="utf-8").strip()
    return ""


def scan_module_reports(
    module_dirs: Iterable[Path], kind: ReportKind, descriptions: dict[str, str] | None = None
) -> list[ModuleReport]:
    """List modules whose build directory contains a report of the given kind.

    The artifact id is the module directory name. Descriptions come from the
    ``descriptions`` mapping, else from ``description.txt`` in the module dir.
    """

    reports: list[ModuleReport] = []
    for module_dir in module_dirs:
        artifact_id = module_dir.name
        index = find_report_index(module_dir, kind.report_dir)
        if index is None:
            logger.debug("No %s report found for %s", kind.report_dir, artifact_id)
            continue
        logger.info("Found %s report in: %s", kind.report_dir, artifact_id)
        description = (descriptions or {}).get(artifact_id) or _read_description(module_dir)
        reports.append(ModuleReport(artifact_id, description, artifact_id))
    return reports


def render_landing_page(
    templates: Templates, kind: ReportKind, modules: list[ModuleReport], project_name: str
) -> str:
    return templates.render_landing(
        {
            "heading": kind.heading,
            "project_name": project_name,
            "modules": modules,
            "report_dir": kind.report_dir,
            "link_label": kind.link_label,
        }
    )


def render_coverage_page(
    modules: list[ModuleReport], project_name: str, templates: Templates | None = None
) -> str:
    return render_landing_page(templates or create_environment(), COVERAGE, modules, project_name)


def render_xref_page(
    modules: list[ModuleReport], project_name: str, templates: Templates | None = None
) -> str:
    return render_landing_page(templates or create_environment(), XREF, modules, project_name)


def landing_output_dir(build_dir: Path) -> Path:
    staging = build_dir / "staging"
    return staging if staging.exists() else build_dir / "site"


def generate_landing_pages(
    build_dir: Path,
    module_dirs: Iterable[Path],
    project_name: str,
    templates: Templates | None = None,
) -> list[Path]:
    """Write coverage.html / source-xref.html for the modules that have reports.

    Pages are written to ``staging/`` when it exists, else ``site/``. A page
    with no modules to list is not written. Returns the written paths.
    """

    module_dirs = list(module_dirs)
    templates = templates or create_environment()
    out_dir = landing_output_dir(build_dir)
    written: list[Path] = []

    for kind in (COVERAGE, XREF):
        modules = scan_module_reports(module_dirs, kind)
        if not modules:
            continue
        path = out_dir / kind.output_name
        atomic_write_text(path, render_landing_page(templates, kind, modules, project_name))
        logger.info("Generated %s landing page: %s", kind.report_dir, path)
        written.append(path)

    if not written:
        logger.info("No modules with coverage or xref reports found")
    return written


__all__ = [
    "COVERAGE",
    "XREF",
    "ModuleReport",
    "ReportKind",
    "Templates",
    "create_environment",
    "generate_landing_pages",
    "render_coverage_page",
    "render_xref_page",
    "scan_module_reports",
]
