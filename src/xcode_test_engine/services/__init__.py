"""Services package for the xcode test engine."""

from .base_service import BaseService
from .build_service import BuildService
from .coverage_service import CoverageService

__all__ = [
    'BaseService',
    'BuildService',
    'CoverageService',
]
