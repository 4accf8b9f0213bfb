"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    │   ├── ForbiddenError
    │   │   └── SortNotAllowedError
    │   └── ConfigError      (mp_pager.config.validation)
    │       └── PagerConfigurationError
    └── InfrastructureError  (infrastructure.py)
        └── SerializationError
            ├── StateEncodeError
            └── StateDecodeError
"""

from mp_pager.kernel.errors.application import (
    ApplicationError,
    ForbiddenError,
    SortNotAllowedError,
)
from mp_pager.kernel.errors.base import BaseError
from mp_pager.kernel.errors.domain import DomainError, ValidationError
from mp_pager.kernel.errors.infrastructure import (
    InfrastructureError,
    SerializationError,
    StateDecodeError,
    StateEncodeError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "SerializationError",
    "SortNotAllowedError",
    "StateDecodeError",
    "StateEncodeError",
    "ValidationError",
]
