"""Environment and dependency preflight checks.

Run before any GTK module is imported so a missing binding or display
produces a readable message instead of a traceback.
Set CONTEXTGRAPH_SKIP_PREFLIGHT=1 to bypass (useful for development).
"""

from __future__ import annotations

import importlib
import os
import sys
from dataclasses import dataclass
from typing import Optional

MIN_PYTHON = (3, 9)


@dataclass(frozen=True)
class PreflightResult:
    ok: bool
    message: str


def _has_display() -> bool:
    return bool(os.environ.get("WAYLAND_DISPLAY") or os.environ.get("DISPLAY"))


def _check_python_version() -> Optional[str]:
    if sys.version_info < MIN_PYTHON:
        found = ".".join(str(part) for part in sys.version_info[:3])
        wanted = ".".join(str(part) for part in MIN_PYTHON)
        return f"ContextGraph needs Python {wanted} or newer, found {found}."
    return None


# Introspection namespaces the UI imports, with the versions it pins.
GI_NAMESPACES = (("Gtk", "4.0"), ("Gdk", "4.0"), ("Adw", "1"), ("Pango", "1.0"))


def _check_python_deps() -> Optional[str]:
    """Return an error message if pycairo or a GI namespace is unusable."""
    try:
        import cairo  # type: ignore[import-not-found]  # noqa: F401
    except ImportError as exc:
        return f"pycairo cannot be imported ({exc}). Install it with: pip install pycairo"

    try:
        import gi  # type: ignore[import-not-found]
    except ImportError as exc:
        return f"PyGObject cannot be imported ({exc}). Install python3-gobject or: pip install PyGObject"

    missing = []
    for namespace, version in GI_NAMESPACES:
        try:
            gi.require_version(namespace, version)
            importlib.import_module(f"gi.repository.{namespace}")
        except (ValueError, ImportError):
            missing.append(f"{namespace} {version}")
    if missing:
        return (
            "Missing GObject introspection typelibs: " + ", ".join(missing) + ". "
            "Install the system packages providing gtk4 and libadwaita."
        )

    return None


def run_preflight(
    *,
    require_display: bool = True,
    check_deps: bool = True,
) -> PreflightResult:
    """Run checks and return a structured result."""
    if os.environ.get("CONTEXTGRAPH_SKIP_PREFLIGHT") == "1":
        return PreflightResult(True, "Preflight skipped via CONTEXTGRAPH_SKIP_PREFLIGHT=1")

    version_error = _check_python_version()
    if version_error:
        return PreflightResult(False, version_error)

    if require_display and not _has_display():
        return PreflightResult(
            False,
            "No graphical display found (neither WAYLAND_DISPLAY nor DISPLAY is set). "
            "Set CONTEXTGRAPH_SKIP_PREFLIGHT=1 to bypass.",
        )

    if check_deps:
        dep_error = _check_python_deps()
        if dep_error:
            return PreflightResult(False, dep_error)

    return PreflightResult(True, "Preflight OK")


def run_preflight_or_die(
    *,
    require_display: bool = True,
    check_deps: bool = True,
) -> None:
    result = run_preflight(require_display=require_display, check_deps=check_deps)
    if result.ok:
        return

    sys.stderr.write("\nContextGraph preflight check failed:\n")
    sys.stderr.write(result.message)
    sys.stderr.write("\n\n")
    sys.stderr.write(
        "Suggested setup:\n"
        "  Fedora:  sudo dnf install gtk4 libadwaita python3-gobject cairo-devel\n"
        "  Debian:  sudo apt install gir1.2-gtk-4.0 gir1.2-adw-1 python3-gi libcairo2-dev\n"
        "  pip install -e .\n\n"
    )
    raise SystemExit(1)
