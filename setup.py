#!/usr/bin/env python3
"""Setup script for ContextGraph."""

import os
import sys
from setuptools import setup, find_packages


def _run_install_preflight() -> None:
    """Fail fast on unsupported interpreters.

    Note: installing from a wheel will not execute setup.py, so the full
    check (bindings, display) runs at startup via `contextgraph.launcher`.
    """
    if os.environ.get("CONTEXTGRAPH_SKIP_PREFLIGHT") == "1":
        return
    try:
        from contextgraph.preflight import run_preflight_or_die
        # Do NOT require a display or Python deps before pip has had a
        # chance to install them.
        run_preflight_or_die(require_display=False, check_deps=False)
    except SystemExit:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        sys.stderr.write("\nContextGraph preflight error while installing:\n")
        sys.stderr.write(str(exc) + "\n")
        raise SystemExit(1)


_run_install_preflight()

setup(
    name="contextgraph",
    version="1.0.0",
    description="An interactive force-directed concept graph for GNOME",
    author="ContextGraph Project",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "PyGObject>=3.46.0",
        "pycairo>=1.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "contextgraph=contextgraph.launcher:main",
        ],
        "gui_scripts": [
            "contextgraph-gui=contextgraph.launcher:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications :: GTK",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Visualization",
    ],
)
