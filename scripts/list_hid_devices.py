from __future__ import annotations

from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from hidticker.config.settings import get_settings
from hidticker.integrations.hid_transport import HidTransport


def main() -> None:
    target = get_settings().device_target()
    transport = HidTransport()
    print("Printing hid devices: ")
    for descriptor in transport.enumerate(target.vendor_id, target.product_id):
        marker = "*" if target.matches(descriptor) else " "
        print(
            f"{marker} {descriptor.vendor_id:04x}:{descriptor.product_id:04x} "
            f"usage={descriptor.usage:#x} usage_page={descriptor.usage_page:#x} "
            f"{descriptor.manufacturer!r} {descriptor.product!r} path={descriptor.path!r}"
        )


if __name__ == "__main__":
    main()
