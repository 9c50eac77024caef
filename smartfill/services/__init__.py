"""Services layer - Application orchestration.

Available services:
- AutofillResolver: normalize, cache and resolve Smart Fill requests
- ProviderDispatcher: route requests to the flight, train or place provider
"""

from .autofill_resolver import AutofillResolver
from .dispatcher import ProviderDispatcher

__all__ = ["AutofillResolver", "ProviderDispatcher"]
