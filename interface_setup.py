# FILE: interface_setup.py
# PURPOSE: Interactive wizard that writes nic.json (lan / wan0 / wan1).

import argparse
import sys

from core.config import DEFAULT_NIC_CONFIG, NIC_SLOTS, save_interfaces
from core.data_models import InterfaceSet
from interface_selector import list_interfaces, select_interface


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the NIC role mapping used by the bandwidth monitor.")
    parser.add_argument("--output", default=DEFAULT_NIC_CONFIG, help="where to write the mapping (default: nic.json)")
    args = parser.parse_args(argv)

    print("Detecting network interfaces...")
    try:
        interface_list = list_interfaces()
    except Exception as e:
        print(f"Unable to retrieve interfaces: {e}")
        sys.exit(1)

    if not interface_list:
        print("Error: No network interfaces found on this system.")
        sys.exit(1)

    chosen = {}
    for slot in NIC_SLOTS:
        chosen[slot] = select_interface(slot, interface_list, exclude=list(chosen.values()))

    interfaces = InterfaceSet(**chosen)
    save_interfaces(interfaces, args.output)
    print(f"\nWrote {args.output}: LAN={interfaces.lan} WAN0={interfaces.wan0} WAN1={interfaces.wan1}")


if __name__ == '__main__':
    main()
