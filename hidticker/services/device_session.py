from __future__ import annotations

from hidticker.errors import DeviceNotFound, TransportError
from hidticker.integrations.hid_transport import HidTransport
from hidticker.schemas.device import DeviceDescriptor, DeviceTarget, SendResult


class DeviceSession:
    """Resolves the target HID interface on every send; never caches a path."""

    def __init__(self, *, target: DeviceTarget, transport: HidTransport | None = None) -> None:
        self.target = target
        self.transport = transport or HidTransport()
        self._metrics = {
            "sends": 0,
            "ok": 0,
            "not_found": 0,
            "transport_errors": 0,
        }
        self.last_error: str | None = None
        self.last_path: bytes | None = None

    def resolve(self) -> DeviceDescriptor:
        descriptors = self.transport.enumerate(self.target.vendor_id, self.target.product_id)
        for descriptor in descriptors:
            if self.target.matches(descriptor):
                return descriptor
        raise DeviceNotFound(
            f"no interface {self.target.vendor_id:04x}:{self.target.product_id:04x} "
            f"usage={self.target.usage:#x} usage_page={self.target.usage_page:#x}"
        )

    def is_present(self) -> bool:
        try:
            self.resolve()
        except (DeviceNotFound, TransportError):
            return False
        return True

    def _fail(self, status: str, reason: str) -> SendResult:
        self.last_error = reason
        if status == "DEVICE_NOT_FOUND":
            self._metrics["not_found"] += 1
        else:
            self._metrics["transport_errors"] += 1
        print(f"[HID][send_failed] status={status} reason={reason}", flush=True)
        return SendResult(status=status, reason=reason)

    def send(self, buffer: bytes) -> SendResult:
        if len(buffer) != self.target.report_size:
            raise ValueError(
                f"buffer must be exactly {self.target.report_size} bytes, got {len(buffer)}"
            )
        self._metrics["sends"] += 1

        try:
            descriptor = self.resolve()
        except DeviceNotFound as exc:
            return self._fail("DEVICE_NOT_FOUND", str(exc))
        except TransportError as exc:
            return self._fail("TRANSPORT_ERROR", str(exc))

        self.last_path = descriptor.path
        try:
            handle = self.transport.open(descriptor)
        except TransportError as exc:
            # path may have gone stale between enumerate and open
            return self._fail("TRANSPORT_ERROR", str(exc))

        try:
            written = self.transport.write(handle, bytes(buffer))
        except TransportError as exc:
            return self._fail("TRANSPORT_ERROR", str(exc))
        finally:
            self.transport.close(handle)

        if written < len(buffer):
            return self._fail("TRANSPORT_ERROR", f"short write: {written} of {len(buffer)} bytes")

        self.last_error = None
        self._metrics["ok"] += 1
        print(f"[HID][send_ok] path={descriptor.path!r} bytes={written}", flush=True)
        return SendResult(status="OK", bytes_written=written)

    def metrics(self) -> dict:
        return {
            **self._metrics,
            "last_error": self.last_error,
            "last_path": self.last_path,
        }
