"""
Order History Verification Script

Checks the integrity of the order history held by a running server.
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import argparse
from datetime import datetime

import httpx
import pandas as pd

API_BASE_URL = "http://localhost:9090"


def verify_history(base_url: str = API_BASE_URL) -> bool:
    """Verify order history after a simulation."""

    print("=" * 60)
    print("🔍 ORDER HISTORY VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🎯 Server: {base_url}")
    print("=" * 60)

    try:
        orders = httpx.get(f"{base_url}/order/history", timeout=30.0).json()
    except httpx.HTTPError as e:
        print(f"\n❌ Could not fetch order history: {e}")
        return False

    if not orders:
        print("\n⚠️ No orders found. Run the simulation first: python scripts/simulate.py")
        return True

    df = pd.DataFrame([
        {
            "order_id": o["id"],
            "item_count": len(o["items"]),
            "items_sum": sum(item["price"] for item in o["items"]),
            "total": o["total"],
            "status": o["status"],
        }
        for o in orders
    ])

    print(f"\n📊 STATISTICS:")
    print(f"   Total Orders: {len(df)}")
    print(f"   Items Ordered: {df['item_count'].sum()}")

    ok = True

    duplicates = df["order_id"].duplicated().sum()
    if duplicates > 0:
        print(f"\n⚠️ {duplicates} duplicate order IDs found!")
        ok = False
    else:
        print(f"✅ No duplicate order IDs")

    mismatched = df[(df["items_sum"] - df["total"]).abs() > 0.001]
    if len(mismatched) > 0:
        print(f"\n⚠️ {len(mismatched)} orders whose total differs from their items:")
        print(mismatched.to_string(index=False))
        ok = False
    else:
        print(f"✅ All totals match their items")

    print(f"\n📦 STATUS BREAKDOWN:")
    for status, count in df["status"].value_counts().items():
        print(f"   {status}: {count}")

    print(f"\n💰 REVENUE:")
    print(f"   Total: {df['total'].sum():,.0f}")
    print(f"   Average: {df['total'].mean():,.0f}")

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "❌ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order History Verification")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    verify_history(args.url)
