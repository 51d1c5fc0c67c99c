from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pde-base")  # Matches the name in pyproject.toml
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0-dev"

from .boundary import (  # noqa: E402
    BoundaryClassifier,
    BoundaryKind,
    BoundaryMap,
    EdgeBoundary,
    HigherOrderInterfaceBoundary,
    InterfaceBoundary,
    PeriodicMap,
    classify_boundary,
)
from .config import ClassificationConfig, PDEBaseConfig, create_default_config  # noqa: E402
from .core import Equation, PDESystem, VariableMap, build_variable_map  # noqa: E402
from .discretization import ParsedSystem, parse_pde_system  # noqa: E402
from .hooks import DiscretizationHooks, MultiHook  # noqa: E402
from .utils.exceptions import (  # noqa: E402
    DomainResolutionError,
    PDEBaseError,
    SignatureInconsistencyError,
    UnclassifiableBoundaryError,
    ValidationError,
)
from .utils.pde_logging import configure_logging, get_logger  # noqa: E402

__all__ = [
    "BoundaryClassifier",
    "BoundaryKind",
    "BoundaryMap",
    "ClassificationConfig",
    "DiscretizationHooks",
    "DomainResolutionError",
    "EdgeBoundary",
    "Equation",
    "HigherOrderInterfaceBoundary",
    "InterfaceBoundary",
    "MultiHook",
    "PDEBaseConfig",
    "PDEBaseError",
    "PDESystem",
    "ParsedSystem",
    "PeriodicMap",
    "SignatureInconsistencyError",
    "UnclassifiableBoundaryError",
    "ValidationError",
    "VariableMap",
    "build_variable_map",
    "classify_boundary",
    "configure_logging",
    "create_default_config",
    "get_logger",
    "parse_pde_system",
]
