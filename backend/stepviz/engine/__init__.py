"""StepViz visualization data pipeline."""

from stepviz.engine.classifier import classify, detect_analysis_type
from stepviz.engine.config import PipelineConfig
from stepviz.engine.fallback import FallbackResolver, categorize_error, resolve_fallback
from stepviz.engine.normalizer import slim
from stepviz.engine.pipeline import StepBundle, VisualizationEngine, enhance_step
from stepviz.engine.registry import get_registry, validator
from stepviz.engine.types import CanonicalType, describe_type, map_to_canonical_type
from stepviz.engine.validation import (
    register_validators,
    sanitize_visualization_data,
    validate_visualization_data,
)

__all__ = [
    "CanonicalType",
    "FallbackResolver",
    "PipelineConfig",
    "StepBundle",
    "VisualizationEngine",
    "categorize_error",
    "classify",
    "describe_type",
    "detect_analysis_type",
    "enhance_step",
    "get_registry",
    "map_to_canonical_type",
    "register_validators",
    "resolve_fallback",
    "sanitize_visualization_data",
    "slim",
    "validate_visualization_data",
    "validator",
]
