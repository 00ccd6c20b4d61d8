from .cargo import (
    CargoDependency,
    CargoMetadata,
    CargoPackage,
    filter_contract_packages,
    get_resolved_workspace,
)

__all__ = [
    "CargoDependency",
    "CargoMetadata",
    "CargoPackage",
    "filter_contract_packages",
    "get_resolved_workspace",
]
