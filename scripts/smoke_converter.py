"""Smoke test for the converter flow on the built-in static rate source.
Walks amount change, target change, swap and favorite toggle and prints each
snapshot so the derived values can be eyeballed.
"""

import json

from fastapi.testclient import TestClient

from fxboard.core.config import Settings
from fxboard.main import create_app


def run():
    app = create_app(settings_override=Settings(rate_source="static"))
    with TestClient(app) as client:
        steps = {
            "initial": client.get("/converter", params={"wait": True}),
            "amount_250": client.put("/converter/amount", json={"amount": "250"}),
            "target_jpy": client.put("/converter/target", json={"currency": "JPY"}),
        }
        client.post("/converter/swap")
        steps["swapped"] = client.get("/converter", params={"wait": True})
        steps["favorite"] = client.post("/converter/favorite")

        print(
            json.dumps(
                {
                    name: {
                        k: v
                        for k, v in resp.json().items()
                        if k != "trend_samples"
                    }
                    for name, resp in steps.items()
                },
                indent=2,
            )
        )


if __name__ == "__main__":
    run()
