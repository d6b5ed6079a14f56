"""
Configuration management for the decision queue
Handles loading and saving pipeline and display settings
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional


class Config:
    """Configuration manager for the decision queue"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to ./config)
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.display_file = self.config_dir / "display.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.display = self._load_json(self.display_file, self._default_display())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file, filling missing keys from defaults"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            return {**default, **loaded}
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default pipeline settings"""
        return {
            "dashboard_limit": 6,
            "dedupe": True,
            "resolve_conflicts": True,
            "log_level": "INFO",
            "timezone": "UTC",
        }

    def _default_display(self) -> Dict[str, Any]:
        """Default terminal display preferences"""
        return {
            "title_width": 48,
            "show_chips": True,
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'display')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "display": self.display,
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'display')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "display": (self.display, self.display_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    @property
    def dashboard_limit(self) -> int:
        """Maximum number of curated dashboard rows"""
        return int(self.settings.get("dashboard_limit", 6))

    @property
    def dedupe(self) -> bool:
        return bool(self.settings.get("dedupe", True))

    @property
    def resolve_conflicts(self) -> bool:
        return bool(self.settings.get("resolve_conflicts", True))

    @property
    def log_level(self) -> str:
        return str(self.settings.get("log_level", "INFO")).upper()
