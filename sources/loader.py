"""Source configuration loader for fluxui-docs.

Loads and validates documentation source configurations from YAML files.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "FluxUI-CLI/1.0 (Documentation Scraper)"


@dataclass
class SourceConfig:
    """Configuration for a documentation source."""
    name: str
    base_url: str = "https://fluxui.dev"
    discovery_path: str = "/docs"
    rate_limit: float = 0.5
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    enabled: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.name:
            raise ValueError("Source name cannot be empty")

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must be http(s): {self.base_url}")

        if not self.discovery_path.startswith("/"):
            raise ValueError(f"Discovery path must start with '/': {self.discovery_path}")

        if self.rate_limit < 0:
            raise ValueError("Rate limit cannot be negative")

        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SourceConfig':
        """Create SourceConfig from dictionary."""
        return cls(
            name=data['name'],
            base_url=data.get('base_url', "https://fluxui.dev"),
            discovery_path=data.get('discovery_path', "/docs"),
            rate_limit=float(data.get('rate_limit', 0.5)),
            timeout=float(data.get('timeout', 30.0)),
            user_agent=data.get('user_agent', DEFAULT_USER_AGENT),
            enabled=data.get('enabled', True)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'base_url': self.base_url,
            'discovery_path': self.discovery_path,
            'rate_limit': self.rate_limit,
            'timeout': self.timeout,
            'user_agent': self.user_agent,
            'enabled': self.enabled
        }


class SourceLoader:
    """Loads source configurations from YAML files."""

    def __init__(self, sources_dir: Optional[Path] = None):
        """Initialize source loader.

        Args:
            sources_dir: Directory containing source YAML files.
                        Defaults to the directory of this module.
        """
        if sources_dir is None:
            sources_dir = Path(__file__).parent

        self.sources_dir = Path(sources_dir)
        self._cache: Dict[str, SourceConfig] = {}
        self._last_modified: Dict[str, float] = {}

    def load_source_config(self, source_name: str) -> Optional[SourceConfig]:
        """Load configuration for a specific source.

        Args:
            source_name: Name of the source (without .yaml extension)

        Returns:
            SourceConfig if found and valid, None otherwise
        """
        yaml_file = self.sources_dir / f"{source_name}.yaml"

        if not yaml_file.exists():
            logger.warning(f"Source configuration not found: {yaml_file}")
            return None

        current_mtime = yaml_file.stat().st_mtime
        if (source_name in self._cache and
                self._last_modified.get(source_name, 0) >= current_mtime):
            return self._cache[source_name]

        try:
            with open(yaml_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.error(f"Empty or invalid YAML file: {yaml_file}")
                return None

            # The file name is authoritative
            if data.get('name') not in (None, source_name):
                logger.warning(f"Source name mismatch in {yaml_file}: {data['name']} != {source_name}")
            data['name'] = source_name

            config = SourceConfig.from_dict(data)

            self._cache[source_name] = config
            self._last_modified[source_name] = current_mtime

            logger.info(f"Loaded source configuration: {source_name}")
            return config

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file {yaml_file}: {e}")
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Invalid source configuration in {yaml_file}: {e}")
            return None


# Global source loader instance
_source_loader = SourceLoader()


def load_source_config(source_name: str) -> Optional[SourceConfig]:
    """Convenience function to load a bundled source configuration."""
    return _source_loader.load_source_config(source_name)
