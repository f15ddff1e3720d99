#!/usr/bin/env python3
"""
Configuration loader for swipe keyboard variants.

Geometries, penalty weights and named layouts live in a YAML file:

    common:
      logging: {...}
      output: {...}
    keyboards:
      <name>:
        description: ...
        geometry: {...}
        penalties: {...}
        required_chars: "..."
        empty_marker: "·"
        reference_layout: initial
        layouts:
          initial: [[cell, ...], ...]

Common settings are merged under every keyboard section.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from keyswipe.exceptions import LayoutError
from keyswipe.geometry import Geometry
from keyswipe.layout import DEFAULT_EMPTY_MARKER, Layout
from keyswipe.penalty import PenaltyModel, PenaltyParams

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class ConfigLoader:
    """Handles loading and processing of YAML configuration files."""

    def __init__(self, config_path=DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self._config_cache: Optional[Dict[str, Any]] = None

    def load_config(self) -> Dict[str, Any]:
        """
        Load the YAML configuration file.

        Returns:
            Full configuration dictionary

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")

        if config is None:
            config = {}

        self._config_cache = config
        return config

    def get_keyboard_config(self, keyboard_name: str) -> Dict[str, Any]:
        """
        Get configuration for one keyboard with common settings merged.

        Raises:
            ValueError: If the keyboard is not in the configuration
        """
        full_config = self.load_config()
        keyboards = full_config.get('keyboards', {})

        if keyboard_name not in keyboards:
            raise ValueError(
                f"Keyboard '{keyboard_name}' not found in configuration. "
                f"Available keyboards: {list(keyboards.keys())}"
            )

        common_config = full_config.get('common', {})
        keyboard_config = dict(keyboards[keyboard_name])

        # Keyboard-specific settings take precedence
        return {**common_config, **keyboard_config}

    def get_common_config(self) -> Dict[str, Any]:
        return self.load_config().get('common', {})

    def get_available_keyboards(self) -> List[str]:
        return list(self.load_config().get('keyboards', {}).keys())

    def validate_keyboard_config(self, keyboard_name: str) -> List[str]:
        """
        Validate a keyboard's configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            config = self.get_keyboard_config(keyboard_name)
        except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
            return [f"Configuration error: {e}"]

        issues = []

        for section in ('geometry', 'penalties', 'layouts'):
            if section not in config:
                issues.append(f"Missing required section: {section}")
        if issues:
            return issues

        try:
            keyboard = build_keyboard(keyboard_name, config)
            keyboard.reference_layout()
        except ValueError as e:
            issues.append(str(e))

        return issues


@dataclass
class Keyboard:
    """Everything the configuration defines for one keyboard variant."""

    name: str
    geometry: Geometry
    params: PenaltyParams
    layout_cells: Dict[str, List[List[str]]]
    required_chars: str = ""
    empty_marker: str = DEFAULT_EMPTY_MARKER
    reference_name: str = ""
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def layout_names(self) -> List[str]:
        return list(self.layout_cells.keys())

    def layout(self, name: Optional[str] = None) -> Layout:
        """
        Build a named layout (the reference layout when name is None).

        Raises:
            ValueError: If the layout is not defined
            LayoutError: If the cells do not match the geometry
        """
        name = name or self.reference_name
        if name not in self.layout_cells:
            raise ValueError(f"Layout '{name}' not defined for '{self.name}'. Available: {self.layout_names}")
        return Layout.from_cells(self.geometry, self.layout_cells[name], self.empty_marker)

    def reference_layout(self, name: Optional[str] = None) -> Layout:
        """
        Build a layout and check it covers required_chars exactly once.

        Raises:
            MissingCharacterError: If a required character is missing
            LayoutError: If a character is duplicated
        """
        layout = self.layout(name)
        layout.validate(self.required_chars)
        return layout

    def model(self) -> PenaltyModel:
        return PenaltyModel(self.geometry, self.params)


def build_keyboard(name: str, config: Dict[str, Any]) -> Keyboard:
    """Create a Keyboard from a merged keyboard configuration."""
    geometry_config = dict(config.get('geometry', {}))
    geometry_config.setdefault('description', config.get('description', ''))
    geometry = Geometry.from_config(name, geometry_config)
    params = PenaltyParams.from_config(config.get('penalties', {}), geometry)

    layouts = config.get('layouts') or {}
    if not layouts:
        raise LayoutError(f"No layouts defined for '{name}'")

    reference_name = config.get('reference_layout') or next(iter(layouts))

    return Keyboard(
        name=name,
        geometry=geometry,
        params=params,
        layout_cells=layouts,
        required_chars=config.get('required_chars', ''),
        empty_marker=config.get('empty_marker', DEFAULT_EMPTY_MARKER),
        reference_name=reference_name,
        config=config,
    )


# Global configuration loader instance
_config_loader: Optional[ConfigLoader] = None


def get_config_loader(config_path=DEFAULT_CONFIG_PATH) -> ConfigLoader:
    """Get global configuration loader instance (singleton pattern)."""
    global _config_loader

    if _config_loader is None or _config_loader.config_path != Path(config_path):
        _config_loader = ConfigLoader(config_path)

    return _config_loader


def load_keyboard_config(keyboard_name: str, config_path=DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Convenience function to load the merged configuration of one keyboard."""
    return get_config_loader(config_path).get_keyboard_config(keyboard_name)


def load_keyboard(keyboard_name: str, config_path=DEFAULT_CONFIG_PATH) -> Keyboard:
    """
    Load a keyboard variant and validate its reference layout.

    Raises:
        FileNotFoundError: If the configuration file is missing
        ValueError: If the keyboard is unknown or its definition is invalid
    """
    config = load_keyboard_config(keyboard_name, config_path)
    keyboard = build_keyboard(keyboard_name, config)
    keyboard.reference_layout()
    logger.info("Loaded keyboard '%s' (%d positions, %d layouts)",
                keyboard_name, keyboard.geometry.size, len(keyboard.layout_names))
    return keyboard
