"""Sources package for fluxui-docs.

Provides documentation source configuration loading.
"""

from .loader import (
    SourceConfig,
    SourceLoader,
    load_source_config
)

__all__ = [
    'SourceConfig',
    'SourceLoader',
    'load_source_config'
]
