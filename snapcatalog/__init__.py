"""Photograph a product and match it against a local shop catalog."""

from .camera import CameraCapture, ShopCamera
from .config import (
    AppConfig,
    CameraConfig,
    CatalogRulesConfig,
    StoreConfig,
    VisionConfig,
    load_config,
)
from .engine import IdentificationEngine
from .errors import (
    CatalogError,
    CorruptCatalogError,
    InferenceError,
    PersistenceError,
    ScanInProgressError,
    ValidationError,
)
from .models import Category, MatchResult, Product, ProductDraft
from .query import CategoryGroup, CollapseState, filter_products, group_by_category
from .scanner import ScanOutcome, ScanSession
from .store import CatalogStore, create_storage, open_store
from .validation import ProductRules, create_product, validate_product_draft
from .vision import VisionBackend, create_backend

__all__ = [
    "Category",
    "Product",
    "ProductDraft",
    "MatchResult",
    "CatalogStore",
    "create_storage",
    "open_store",
    "CategoryGroup",
    "CollapseState",
    "filter_products",
    "group_by_category",
    "ProductRules",
    "create_product",
    "validate_product_draft",
    "IdentificationEngine",
    "VisionBackend",
    "create_backend",
    "ScanSession",
    "ScanOutcome",
    "ShopCamera",
    "CameraCapture",
    "AppConfig",
    "StoreConfig",
    "CatalogRulesConfig",
    "CameraConfig",
    "VisionConfig",
    "load_config",
    "CatalogError",
    "ValidationError",
    "PersistenceError",
    "CorruptCatalogError",
    "InferenceError",
    "ScanInProgressError",
]
