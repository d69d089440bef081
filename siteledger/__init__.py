"""Mini README: Core package initializer for the siteledger console.

siteledger fetches receipts and payments from the back-office REST API,
merges them into one dated transaction view, and derives expense metrics
from the company's financial settings. Subpackages:

    * records - typed backend records and company settings.
    * sources - async HTTP adapters for the backend.
    * aggregation - transaction merge and filter view.
    * metrics - expense totals, cost per square metre, settings validation.
    * interface - FastAPI console, tab dispatch and presentation helpers.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
