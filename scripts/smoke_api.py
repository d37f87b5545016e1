# scripts/smoke_api.py
"""
Проверка запущенного сервиса: пишем пару событий и читаем отчёт

    python scripts/smoke_api.py [http://localhost:3000]
"""
import sys
import json
from datetime import datetime, timezone

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"


def check_endpoint(method, url, params=None, data=None):
    try:
        if method == "GET":
            response = requests.get(f"{BASE_URL}{url}", params=params, timeout=10)
        else:
            response = requests.post(f"{BASE_URL}{url}", params=params, json=data, timeout=10)

        print(f"\n{method} {url}")
        print(f"Status: {response.status_code}")
        if response.status_code < 400:
            print(f"Response: {json.dumps(response.json(), indent=2)[:300]}...")
        else:
            print(f"Error: {response.text[:200]}")
        return response.status_code < 400
    except requests.RequestException as e:
        print(f"Exception: {e}")
        return False


if __name__ == "__main__":
    print("=== Проверка API дашборда ===")

    now = datetime.now(timezone.utc).isoformat()
    challenge_id = "smoke-challenge"

    steps = [
        ("GET", "/", None, None),
        ("GET", "/health", None, None),
        ("GET", "/database/health", None, None),
        ("POST", "/api/v1/insert_stat", None, {
            "container_id": "smoke", "miner_id": "smoke-miner", "hash_rate": 1000.0, "timestamp": now
        }),
        ("POST", "/api/v1/insert_api_return", None, {
            "container_id": "smoke", "wallet_addr": "smoke-wallet", "endpoint": "/challenge",
            "url": "https://example.invalid/challenge",
            "api_response": {"challenge": {"challenge_id": challenge_id, "difficulty": "000FFFFF",
                                           "day": 1, "issued_at": now}}
        }),
        ("POST", "/api/v1/insert_api_return", None, {
            "container_id": "smoke", "wallet_addr": "smoke-wallet", "endpoint": "/solution",
            "url": f"https://example.invalid/solution/smoke-wallet/{challenge_id}/00ff"
        }),
        ("GET", "/api/v1/report", None, None),
        ("GET", "/api/v1/report", {"window_minutes": 60}, None),
        ("GET", "/api/stats", None, None),
        ("GET", "/api/v1/latest/hashrate", None, None),
        ("GET", "/api/v1/latest/api-calls", None, None),
    ]

    all_ok = True
    for method, url, params, data in steps:
        if not check_endpoint(method, url, params=params, data=data):
            all_ok = False

    if all_ok:
        print("\nВсе эндпоинты работают!")
    else:
        print("\nНекоторые эндпоинты не работают")
        sys.exit(1)
