"""Upstream notice sources."""

from .contracts_finder import ContractsFinderClient, JurisdictionResult, extract_releases

__all__ = [
    "ContractsFinderClient",
    "JurisdictionResult",
    "extract_releases",
]
