"""
License Use Cases

Seat ledger reads and billing-side allocation.
"""

from .dtos import LicenseSummaryResponse, UpdateLicenseAllocationResponse
from .get_license_summary_use_case import GetLicenseSummaryUseCase
from .update_license_allocation_use_case import UpdateLicenseAllocationUseCase

__all__ = [
    "GetLicenseSummaryUseCase",
    "UpdateLicenseAllocationUseCase",
    "LicenseSummaryResponse",
    "UpdateLicenseAllocationResponse",
]
