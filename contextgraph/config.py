"""Configuration values for the simulation, the view and the application."""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the application configuration directory."""
    config_dir = Path.home() / ".config" / "contextgraph"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Get the application data directory."""
    data_dir = Path.home() / ".local" / "share" / "contextgraph"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_settings_path() -> Path:
    """Get the settings file path (``CONTEXTGRAPH_CONFIG`` overrides it)."""
    override = os.environ.get("CONTEXTGRAPH_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "settings.json"


def _known_fields(cls, data: dict) -> dict:
    # Filter to only known fields to handle schema evolution
    known = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in known}


@dataclass
class SimulationConfig:
    """Force constants and cooling schedule for the physics engine."""
    base_alpha: float = 0.3
    min_alpha: float = 0.05
    cooling: float = 0.995
    center_force: float = 0.0025
    repulsion: float = 5000.0
    attraction: float = 0.01
    damping: float = 0.8
    velocity_epsilon: float = 0.0001
    min_distance: float = 1.0
    energize_amount: float = 0.1
    seed: Optional[int] = None

    def __post_init__(self):
        if not 0 < self.min_alpha <= self.base_alpha:
            raise ValueError(
                f"min_alpha must be in (0, base_alpha], got {self.min_alpha} "
                f"with base_alpha={self.base_alpha}"
            )
        if not 0 < self.cooling <= 1:
            raise ValueError(f"cooling must be in (0, 1], got {self.cooling}")
        if not 0 <= self.damping < 1:
            raise ValueError(f"damping must be in [0, 1), got {self.damping}")
        if self.min_distance <= 0:
            raise ValueError(f"min_distance must be positive, got {self.min_distance}")
        for name in ("center_force", "repulsion", "attraction",
                     "velocity_epsilon", "energize_amount"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: Optional[str]) -> "SimulationConfig":
        if not data:
            return cls()
        try:
            return cls(**_known_fields(cls, json.loads(data)))
        except (json.JSONDecodeError, TypeError):
            return cls()


@dataclass
class ViewConfig:
    """Camera limits and pointer handling constants."""
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    pick_radius: float = 12.0
    default_width: float = 800.0
    default_height: float = 600.0

    def __post_init__(self):
        if not 0 < self.min_zoom <= 1 <= self.max_zoom:
            raise ValueError(
                f"zoom bounds must satisfy 0 < min_zoom <= 1 <= max_zoom, "
                f"got [{self.min_zoom}, {self.max_zoom}]"
            )
        if self.zoom_in_factor <= 1 or not 0 < self.zoom_out_factor < 1:
            raise ValueError("zoom_in_factor must be > 1 and zoom_out_factor in (0, 1)")
        if self.pick_radius <= 0:
            raise ValueError(f"pick_radius must be positive, got {self.pick_radius}")


@dataclass
class RenderConfig:
    """Node and label geometry used by the renderer."""
    node_radius: float = 10.0
    hovered_radius: float = 12.0
    outline_width: float = 2.0
    label_zoom_threshold: float = 1.5
    label_offset: float = 15.0
    font_size: float = 12.0
    font_family: str = "Sans"
    dash: Tuple[float, float] = (5.0, 5.0)


@dataclass
class AppSettings:
    """User-level settings persisted between sessions."""
    dark: bool = True
    filter_strength: float = 0.0
    log_level: str = "WARNING"
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @classmethod
    def from_json(cls, data: Optional[str]) -> "AppSettings":
        if not data:
            return cls()
        try:
            d = json.loads(data)
            if not isinstance(d, dict):
                raise TypeError("settings root must be an object")
            simulation = SimulationConfig(**_known_fields(SimulationConfig, d.pop("simulation", {})))
            view = ViewConfig(**_known_fields(ViewConfig, d.pop("view", {})))
            render_data = _known_fields(RenderConfig, d.pop("render", {}))
            if "dash" in render_data:
                render_data["dash"] = tuple(render_data["dash"])
            render = RenderConfig(**render_data)
            return cls(simulation=simulation, view=view, render=render,
                       **_known_fields(cls, d))
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Ignoring invalid settings, using defaults: %s", exc)
            return cls()


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """Load settings from disk, falling back to defaults."""
    path = path or get_settings_path()
    if not path.exists():
        return AppSettings()
    try:
        data = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not read settings file %s: %s", path, exc)
        return AppSettings()
    return AppSettings.from_json(data)


def save_settings(settings: AppSettings, path: Optional[Path] = None) -> None:
    """Write settings to disk."""
    path = path or get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(settings.to_json(), encoding="utf-8")
    logger.debug("Saved settings to %s", path)
