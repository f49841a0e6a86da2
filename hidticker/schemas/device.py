from typing import Literal

from pydantic import BaseModel, ConfigDict

SendStatus = Literal["OK", "DEVICE_NOT_FOUND", "TRANSPORT_ERROR"]


class DeviceTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    vendor_id: int
    product_id: int
    usage: int
    usage_page: int
    report_size: int = 32

    def matches(self, descriptor: "DeviceDescriptor") -> bool:
        return (
            descriptor.vendor_id == self.vendor_id
            and descriptor.product_id == self.product_id
            and descriptor.usage == self.usage
            and descriptor.usage_page == self.usage_page
        )


class DeviceDescriptor(BaseModel):
    vendor_id: int
    product_id: int
    usage: int = 0
    usage_page: int = 0
    path: bytes
    manufacturer: str | None = None
    product: str | None = None


class SendResult(BaseModel):
    status: SendStatus
    reason: str | None = None
    bytes_written: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "OK"
