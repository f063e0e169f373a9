"""Smoke test for the external-http rate source (needs network access).
Loads USD rates, then switches base to EUR, showing either live values or the
error message with the previous table retained. Set RATES_API_ACCESS_KEY if the
endpoint requires one.
"""

import json
import os

from fastapi.testclient import TestClient

from fxboard.core.config import Settings
from fxboard.main import create_app


def run():
    settings = Settings(
        rate_source="external-http",
        rates_api_access_key=os.environ.get("RATES_API_ACCESS_KEY"),
    )
    app = create_app(settings_override=settings)
    with TestClient(app) as client:
        usd = client.get("/converter", params={"wait": True}).json()
        client.put("/converter/base", json={"currency": "EUR"})
        eur = client.get("/converter", params={"wait": True}).json()

    keep = ("base_currency", "target_currency", "exchange_rate", "converted_amount", "error", "last_updated_label")
    print(
        json.dumps(
            {
                "usd_base": {k: usd[k] for k in keep},
                "eur_base": {k: eur[k] for k in keep},
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    run()
