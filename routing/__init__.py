#Marks routing as a package.
#Re-exports the clean public API (OTPClient, PlanResult, extract_crs)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .otp_client import (
    NoRoutesFoundError,
    OTPClient,
    OTPError,
    OTPTimeoutError,
    PlanResult,
    extract_crs,
)

__all__ = [
           "OTPClient",
           "OTPError",
             "OTPTimeoutError",
             "NoRoutesFoundError",
             "PlanResult",
             "extract_crs",
             ]
