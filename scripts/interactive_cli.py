# /scripts/interactive_cli.py
# Interactive CLI to exercise the MediScan Verify service end-to-end:
# 1) Verify a typed/scanned code          -> POST /v1/verify
# 2) Show scan history (newest first)     -> GET  /v1/history
# 3) Add a medicine to the database       -> POST /v1/records
# 4) Clear scan history                   -> DELETE /v1/history
#
# Usage:
#   python scripts/interactive_cli.py
#   python scripts/interactive_cli.py --base-url http://127.0.0.1:8000
#
# Requires: requests

from __future__ import annotations
import argparse, datetime as dt
from typing import Optional

import requests


# -------------------------------
# HTTP helpers
# -------------------------------
def post_verify(base_url: str, code: str, timeout: int = 30) -> dict:
    resp = requests.post(f"{base_url}/v1/verify", json={"code": code}, timeout=timeout)
    resp.raise_for_status()
    return resp.json()

def get_history(base_url: str, status: Optional[str] = None, limit: Optional[int] = None,
                timeout: int = 30) -> dict:
    params = {}
    if status: params["status"] = status
    if limit: params["limit"] = limit
    resp = requests.get(f"{base_url}/v1/history", params=params, timeout=timeout)
    resp.raise_for_status()
    return resp.json()

def post_record(base_url: str, payload: dict, timeout: int = 30) -> dict:
    resp = requests.post(f"{base_url}/v1/records", json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json()

def delete_history(base_url: str, timeout: int = 30) -> None:
    resp = requests.delete(f"{base_url}/v1/history", timeout=timeout)
    resp.raise_for_status()


# -------------------------------
# CLI utilities
# -------------------------------
def parse_args():
    ap = argparse.ArgumentParser(description="Interactive MediScan CLI (verify + history + add medicine)")
    ap.add_argument("--base-url", default="http://127.0.0.1:8000", help="Service base URL")
    ap.add_argument("--timeout", type=int, default=30)
    return ap.parse_args()

def print_div():
    print("-" * 64)

def color(s: str, c: str) -> str:
    # minimal ANSI color
    colors = {
        "green": "\033[92m", "red": "\033[91m", "yellow": "\033[93m",
        "cyan": "\033[96m", "grey": "\033[90m", "end": "\033[0m"
    }
    return f"{colors.get(c,'')}{s}{colors['end']}"

def status_color(status: str) -> str:
    return {
        "genuine": "green",
        "expiring_soon": "yellow",
        "expired": "red",
        "counterfeit": "red",
        "not_found": "grey",
    }.get(status or "", "yellow")

def http_error_text(e: requests.HTTPError) -> str:
    body = getattr(e, "response", None)
    return body.text if body is not None else ""


# -------------------------------
# Rendering
# -------------------------------
def print_verify_summary(resp: dict):
    print_div()
    data = resp.get("data", {}) or {}
    rec  = data.get("record") or {}
    st   = data.get("status") or "not_found"

    print(f"{color(data.get('title', st), status_color(st))}")
    print(data.get("message", ""))
    if rec:
        print(f"{color('NAME', 'cyan')}: {rec.get('name')}")
        print(f"{color('MFR', 'cyan')}: {rec.get('manufacturer')}")
        print(f"{color('EXPIRES', 'cyan')}: {rec.get('expirationDate')}")
        print(f"{color('BATCH', 'cyan')}: {rec.get('batchNumber')}")
        print(f"{color('INDICATION', 'cyan')}: {rec.get('indication')}")
        print(f"{color('DOSAGE', 'cyan')}: {rec.get('dosage')}")
        for k, label in (("sideEffects", "SIDE EFFECTS"), ("warnings", "WARNINGS")):
            if rec.get(k) and rec.get(k) != "Not provided":
                print(f"{color(label, 'cyan')}: {rec.get(k)}")
    if data.get("report_url"):
        print(f"{color('REPORT', 'red')}: {data['report_url']}")
    if not resp.get("saved", True):
        print(color("Failed to save scan to history (result above is still valid).", "yellow"))
    print(color("This information is for reference only. Always consult your doctor or pharmacist.", "grey"))

def print_history(resp: dict):
    print_div()
    items = resp.get("items") or []
    if not items:
        print("No scan history found.")
        return
    for it in items:
        st = it.get("status") or ""
        print(f"{color(st.ljust(14), status_color(st))} {it.get('drugName')}  "
              f"(code {it.get('scannedCode')})  {color(it.get('label', ''), 'grey')}")


# -------------------------------
# Flows
# -------------------------------
def prompt_menu() -> str:
    print_div()
    print("MediScan Interactive")
    print("1) Verify a product code")
    print("2) Show scan history")
    print("3) Add medicine")
    print("4) Clear scan history")
    print("q) Quit")
    return input("Choose [1/2/3/4/q]: ").strip().lower()

def verify_flow(base_url: str, timeout: int):
    code = input("Product code: ").strip()
    if not code:
        print("No input. Cancelled.")
        return
    print_verify_summary(post_verify(base_url, code, timeout=timeout))

def history_flow(base_url: str, timeout: int):
    status = input("Filter by status [enter for all]: ").strip() or None
    print_history(get_history(base_url, status=status, timeout=timeout))

def add_flow(base_url: str, timeout: int):
    payload = {
        "id": input("Barcode*: ").strip(),
        "name": input("Name*: ").strip(),
        "manufacturer": input("Manufacturer: ").strip(),
        "expirationDate": input("Expiration date (YYYY-MM-DD): ").strip(),
        "batchNumber": input("Batch number: ").strip(),
        "indication": input("Indication: ").strip(),
        "dosage": input("Dosage: ").strip(),
        "sideEffects": input("Side effects: ").strip(),
        "warnings": input("Warnings: ").strip(),
        "genuine": input("Genuine? [Y/n]: ").strip().lower() != "n",
    }
    if payload["expirationDate"]:
        try:
            dt.date.fromisoformat(payload["expirationDate"])
        except ValueError:
            print("Invalid date, expected YYYY-MM-DD.")
            return
    rec = post_record(base_url, payload, timeout=timeout)
    print(color(f"Medicine added successfully! ({rec.get('id')})", "green"))

def clear_flow(base_url: str, timeout: int):
    if input("Delete ALL scan history? [y/N]: ").strip().lower() == "y":
        delete_history(base_url, timeout=timeout)
        print("History cleared.")


# -------------------------------
# Main
# -------------------------------
def main():
    args = parse_args()
    print(color(f"Server: {args.base_url}", "cyan"))
    flows = {"1": verify_flow, "2": history_flow, "3": add_flow, "4": clear_flow}

    while True:
        choice = prompt_menu()
        if choice == "q":
            break
        flow = flows.get(choice)
        if flow is None:
            print("Unknown choice.")
            continue
        try:
            flow(args.base_url, args.timeout)
        except requests.HTTPError as e:
            print(color("HTTP error:", "red"), e, http_error_text(e))
        except requests.RequestException as e:
            print(color("Connection error:", "red"), e)


if __name__ == "__main__":
    main()
