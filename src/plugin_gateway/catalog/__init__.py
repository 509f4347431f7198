"""Catalog module - Operation descriptors and usage tracking."""

from .schemas import OperationDescriptor, CatalogStatistics, UsageEntry
from .exceptions import CatalogError, DuplicateOperationError, OperationNotFoundError
from .usage import UsageTracker
from .service import Catalog
from .categorize import extract_categories, infer_category


__all__ = [
    # Schemas
    "OperationDescriptor",
    "CatalogStatistics",
    "UsageEntry",
    # Exceptions
    "CatalogError",
    "DuplicateOperationError",
    "OperationNotFoundError",
    # Service
    "Catalog",
    "UsageTracker",
    # Categorization
    "extract_categories",
    "infer_category",
]
