"""Currency constants shared by the converter, rate sources and API validation.

Order matters: it is the order currencies are offered in selection lists.
"""

from typing import Tuple

SUPPORTED_CURRENCIES: Tuple[str, ...] = (
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CHF",
    "CAD",
    "AUD",
    "NZD",
    "INR",
    "MXN",
    "SGD",
    "HKD",
    "CNY",
    "SEK",
    "NOK",
)

FETCH_ERROR_MESSAGE = "Unable to fetch rates. Please try again."
RATE_PLACEHOLDER = "--"
ZERO_AMOUNT = "0.00"
