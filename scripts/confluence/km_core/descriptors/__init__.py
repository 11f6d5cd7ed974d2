"""Registry of service descriptors, resolved by node id."""

from __future__ import annotations

from km_core.descriptors.base import ServiceDescriptor
from km_core.descriptors.confluence import ConfluenceDescriptor

DESCRIPTORS: dict[str, type[ServiceDescriptor]] = {
    ServiceDescriptor.node_id: ServiceDescriptor,
    ConfluenceDescriptor.node_id: ConfluenceDescriptor,
}


def register(descriptor: type[ServiceDescriptor]) -> type[ServiceDescriptor]:
    DESCRIPTORS[descriptor.node_id] = descriptor
    return descriptor


def resolve(node_id: str) -> type[ServiceDescriptor]:
    """Most specific descriptor registered for ``node_id`` or one of its parents."""
    parts = node_id.split(":")
    while parts:
        descriptor = DESCRIPTORS.get(":".join(parts))
        if descriptor is not None:
            return descriptor
        parts.pop()
    return ServiceDescriptor
