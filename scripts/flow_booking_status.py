#!/usr/bin/env python3
"""
Booking lifecycle flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_booking_status.py --customer-id <UUID> --technician-id <UUID>
    python scripts/flow_booking_status.py --customer-id <UUID> --technician-id <UUID> --cancel

Tokens are signed locally with SUPABASE_JWT_SECRET, so the secret must match
the running server's.

Flow:
    1. Create booking (as customer)
    2. Customer tries to confirm (expect 403)
    3. Confirm booking (as technician)
    4. Schedule booking
    5. Start work
    6. Complete booking (or cancel as customer with --cancel)
    7. Try to reopen the finished booking (expect 409)
    8. List the technician's bookings
"""

import argparse
import json
import sys

import httpx

from techcare.core.security import create_access_token

BASE_URL = "http://localhost:8000"


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0)
    elif method == "PUT":
        response = httpx.put(url, headers=headers, json=data or {}, timeout=10.0)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict):
    """Print API result."""
    status = result["status"]
    status_icon = "OK" if 200 <= status < 300 else "FAIL"
    print(f"[{status_icon}] Status: {status}")
    print(json.dumps(result["data"], indent=2, default=str))


def expect(result: dict, status: int, step: str):
    """Stop the flow when a step returns something unexpected."""
    if result["status"] != status:
        print(f"\nERROR: {step} returned {result['status']}, expected {status}")
        sys.exit(1)


def update_status(token: str, booking_id: str, status: str, notes: str | None = None) -> dict:
    data = {"status": status}
    if notes:
        data["notes"] = notes
    return api_request(token, "PUT", f"/api/bookings/{booking_id}/status", data)


def main():
    parser = argparse.ArgumentParser(description="Walk a booking through its lifecycle")
    parser.add_argument("--customer-id", required=True, help="Customer user UUID")
    parser.add_argument("--technician-id", required=True, help="Technician user UUID")
    parser.add_argument("--service-type", default="Laptop repair")
    parser.add_argument("--price", type=int, default=15000, help="Price in RWF")
    parser.add_argument("--cancel", action="store_true", help="Customer cancels instead of completing")
    args = parser.parse_args()

    customer_token = create_access_token(args.customer_id, role="CUSTOMER")
    technician_token = create_access_token(args.technician_id, role="TECHNICIAN")

    print_step(1, "Create booking (customer)")
    result = api_request(customer_token, "POST", "/api/bookings", {
        "customer_id": args.customer_id,
        "technician_id": args.technician_id,
        "service_id": 1,
        "service_type": args.service_type,
        "problem_description": "Device does not power on",
        "customer_location": "Kigali, Kicukiro",
        "price_rwf": args.price,
    })
    print_result(result)
    expect(result, 200, "Create booking")
    booking_id = result["data"]["booking"]["id"]

    print_step(2, "Customer tries to confirm (expect 403)")
    result = update_status(customer_token, booking_id, "confirmed")
    print_result(result)
    expect(result, 403, "Customer confirm")

    print_step(3, "Confirm booking (technician)")
    result = update_status(technician_token, booking_id, "confirmed", "Will call before arriving")
    print_result(result)
    expect(result, 200, "Confirm booking")

    print_step(4, "Schedule booking")
    result = update_status(technician_token, booking_id, "scheduled")
    print_result(result)
    expect(result, 200, "Schedule booking")

    print_step(5, "Start work")
    result = update_status(technician_token, booking_id, "in_progress")
    print_result(result)
    expect(result, 200, "Start work")

    if args.cancel:
        print_step(6, "Cancel booking (customer)")
        result = update_status(customer_token, booking_id, "cancelled")
    else:
        print_step(6, "Complete booking")
        result = update_status(technician_token, booking_id, "completed", "Replaced power board")
    print_result(result)
    expect(result, 200, "Finish booking")

    print_step(7, "Try to reopen (expect 409)")
    result = update_status(technician_token, booking_id, "pending")
    print_result(result)
    expect(result, 409, "Reopen booking")

    print_step(8, "List technician bookings")
    result = api_request(technician_token, "GET", f"/api/bookings/technician/{args.technician_id}")
    print_result(result)
    expect(result, 200, "List bookings")

    print(f"\n{'='*60}")
    print(f"Flow finished for booking {booking_id}")
    print("="*60)


if __name__ == "__main__":
    main()
