"""
LayerNet Run Package

Modules:
    config: Config class, reading network descriptions from INI files
"""

from layernet.run.config import Config

__all__ = ['Config']
