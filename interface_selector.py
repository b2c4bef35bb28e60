# FILE: interface_selector.py
# PURPOSE: Reusable module to list host network interfaces and pick one per role.

import socket
import sys
from typing import Dict, List, Optional

import psutil


def list_interfaces() -> List[Dict[str, object]]:
    """Name, up/down status and primary IPv4 address of every local interface."""
    interfaces_addrs = psutil.net_if_addrs()
    interfaces_stats = psutil.net_if_stats()
    found = []
    for iface_name, addrs in interfaces_addrs.items():
        ipv4 = next((addr.address for addr in addrs if addr.family == socket.AF_INET), "")
        is_up = iface_name in interfaces_stats and interfaces_stats[iface_name].isup
        found.append({"name": iface_name, "up": is_up, "ip": ipv4})
    return found


def describe(iface: Dict[str, object]) -> str:
    status_text = "[ON]" if iface["up"] else "[OFF]"
    ip_address = f"(IP: {iface['ip']})" if iface["ip"] else ""
    return f"{status_text} {iface['name']} {ip_address}".rstrip()


def select_interface(role: str, interface_list: List[Dict[str, object]],
                     exclude: Optional[List[str]] = None) -> str:
    """
    Prompts for the interface that plays `role` (lan, wan0, wan1).
    Interfaces already taken by another role are not offered.
    Returns the name of the selected interface.
    """
    choices = [iface for iface in interface_list if iface["name"] not in (exclude or [])]
    if not choices:
        print(f"Error: No interfaces left to assign to {role}.")
        sys.exit(1)

    print(f"\nSelect the interface for {role.upper()}:")
    for i, iface in enumerate(choices):
        print(f"  {i + 1}: {describe(iface)}")

    while True:
        try:
            choice = int(input(f"Enter the number (1-{len(choices)}): "))
            if 1 <= choice <= len(choices):
                return choices[choice - 1]["name"]
            else:
                print("Invalid number. Please try again.")
        except ValueError:
            print("Invalid input. Please enter a number.")
        except (EOFError, KeyboardInterrupt):
            print("\nSelection cancelled. Exiting.")
            sys.exit(0)
