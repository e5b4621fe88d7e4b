"""
Rush Hour Simulation Script

Fires many concurrent requests at a running server to check that order
ids stay unique and totals stay consistent under load.
Run from project root: python scripts/simulate.py

Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any, Optional

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:9090"
TOTAL_ORDERS = 50

# Mostly real menu ids, plus a few that are not on the menu
ITEM_ID_POOL = [1, 1, 2, 2, 3, 3, 99]
STATUSES = ["Diproses", "Diantar", "Selesai"]


def generate_random_items() -> list[int]:
    """Generate a random selection of item ids."""
    return [random.choice(ITEM_ID_POOL) for _ in range(random.randint(0, 4))]


async def timed_post(
    client: httpx.AsyncClient,
    base_url: str,
    path: str,
    payload: Any,
) -> dict[str, Any]:
    """POST a payload and record status, body and latency."""
    start_time = time.time()

    try:
        response = await client.post(f"{base_url}{path}", json=payload, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)
        return {
            "path": path,
            "success": response.status_code == 200,
            "status_code": response.status_code,
            "data": response.json() if response.status_code == 200 else None,
            "error": None if response.status_code == 200 else response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "path": path,
            "success": False,
            "status_code": None,
            "data": None,
            "error": str(e)[:100],
            "time": elapsed,
        }


# =============================================================================
# PHASES
# =============================================================================

async def create_orders(
    client: httpx.AsyncClient,
    base_url: str,
    num_orders: int,
) -> list[dict[str, Any]]:
    """Create orders concurrently."""
    tasks = [
        timed_post(client, base_url, "/order", generate_random_items())
        for _ in range(num_orders)
    ]
    return await asyncio.gather(*tasks)


async def mutate_orders(
    client: httpx.AsyncClient,
    base_url: str,
    order_ids: list[int],
) -> list[dict[str, Any]]:
    """Add items, pay twice and override status, all concurrently."""
    tasks = []
    for order_id in order_ids:
        tasks.append(timed_post(
            client, base_url, "/order/add",
            {"order_id": order_id, "items": generate_random_items()},
        ))
        # Second payment is expected to be rejected
        tasks.append(timed_post(client, base_url, "/order/pay", {"order_id": order_id}))
        tasks.append(timed_post(client, base_url, "/order/pay", {"order_id": order_id}))
        if random.random() < 0.3:
            tasks.append(timed_post(
                client, base_url, "/order/status",
                {"order_id": order_id, "status": random.choice(STATUSES)},
            ))
    return await asyncio.gather(*tasks)


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

def summarize(label: str, results: list[dict[str, Any]]) -> None:
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\n{label}")
    print(f"   ✅ Successful: {len(successful)}/{len(results)}")
    print(f"   ❌ Failed: {len(failed)}/{len(results)}")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"   Average Response: {avg_time}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")

    by_code: dict[Optional[int], int] = {}
    for r in failed:
        by_code[r["status_code"]] = by_code.get(r["status_code"], 0) + 1
    for code, count in sorted(by_code.items(), key=lambda kv: str(kv[0])):
        print(f"   HTTP {code}: {count}")


async def run_simulation(
    base_url: str = API_BASE_URL,
    num_orders: int = TOTAL_ORDERS,
) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        base_url: Server to target
        num_orders: Number of orders to create
    """
    print("=" * 70)
    print("🔥 RUSH HOUR SIMULATION - HIGH CONCURRENCY TEST")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        created = await create_orders(client, base_url, num_orders)
        order_ids = [r["data"]["id"] for r in created if r["success"]]
        mutated = await mutate_orders(client, base_url, order_ids)

    total_time = round(time.time() - start_time, 2)
    duplicates = len(order_ids) - len(set(order_ids))

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    summarize("🚀 Create Order", created)
    summarize("🔁 Add / Pay / Status", mutated)
    print(f"\n⏱️  Total Time: {total_time}s")
    if duplicates:
        print(f"⚠️  {duplicates} duplicate order ids returned!")
    else:
        print("✅ No duplicate order ids")

    print("\n" + "=" * 70)
    print("🔍 Next: python scripts/verify.py")
    print("=" * 70)

    return {
        "created": len(order_ids),
        "duplicate_ids": duplicates,
        "total_time": total_time,
    }


async def preflight_checks(base_url: str) -> bool:
    """Make sure the server answers before firing the simulation."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{base_url}/health")
        except httpx.HTTPError as e:
            print(f"❌ Server unreachable: {e}")
            return False

        if response.status_code != 200:
            print(f"❌ Health check failed: {response.text}")
            return False

        data = response.json()
        print(f"✅ Status: {data.get('status')} ({data.get('menu_items')} menu items)")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rush Hour Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    if not asyncio.run(preflight_checks(args.url)):
        sys.exit(1)

    asyncio.run(run_simulation(base_url=args.url, num_orders=args.orders))
