from __future__ import annotations

from typing import Any, Optional

from hidticker.errors import TransportError
from hidticker.schemas.device import DeviceDescriptor


def _default_hid_module() -> Any:
    import hid

    return hid


def descriptor_from_info(info: dict[str, Any]) -> DeviceDescriptor:
    path = info.get("path") or b""
    if isinstance(path, str):
        path = path.encode("utf-8")
    return DeviceDescriptor(
        vendor_id=int(info.get("vendor_id", 0)),
        product_id=int(info.get("product_id", 0)),
        usage=int(info.get("usage", 0) or 0),
        usage_page=int(info.get("usage_page", 0) or 0),
        path=path,
        manufacturer=info.get("manufacturer_string") or None,
        product=info.get("product_string") or None,
    )


class HidTransport:
    """Thin wrapper over the hidapi bindings: enumerate, open, write, close."""

    def __init__(self, hid_module: Optional[Any] = None) -> None:
        self._hid = hid_module

    @property
    def hid(self) -> Any:
        if self._hid is None:
            try:
                self._hid = _default_hid_module()
            except ImportError as exc:
                raise TransportError(f"hidapi unavailable: {exc}") from exc
        return self._hid

    def enumerate(self, vendor_id: int = 0, product_id: int = 0) -> list[DeviceDescriptor]:
        try:
            infos = self.hid.enumerate(vendor_id, product_id)
        except (OSError, ValueError) as exc:
            raise TransportError(f"enumerate failed: {exc}") from exc
        return [descriptor_from_info(info) for info in infos]

    def open(self, descriptor: DeviceDescriptor) -> Any:
        handle = self.hid.device()
        try:
            handle.open_path(descriptor.path)
        except (OSError, ValueError) as exc:
            raise TransportError(f"open failed path={descriptor.path!r}: {exc}") from exc
        return handle

    def write(self, handle: Any, data: bytes) -> int:
        try:
            written = handle.write(data)
        except (OSError, ValueError) as exc:
            raise TransportError(f"write failed: {exc}") from exc
        if written is None or written < 0:
            raise TransportError(f"write failed: returned {written}")
        return int(written)

    def close(self, handle: Any) -> None:
        try:
            handle.close()
        except (OSError, ValueError) as exc:
            print(f"[HID][close_error] error={exc}", flush=True)
