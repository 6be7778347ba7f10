"""Collision-free job names.

The generated name is written to the Job and to its pod template, so pods
carry the same unique name as the Job that owns them.
"""

from __future__ import annotations

import uuid

from runit.execution._types import DEFAULT_NAMESPACE, WorkDescriptor


def unique_name(base: str) -> str:
    """Return ``<base>-<uuid4>``.

    Concurrent requests sharing a base name get distinct names.
    """
    return f"{base}-{uuid.uuid4()}"


def assign_unique_name(descriptor: WorkDescriptor) -> str:
    """Rewrite the descriptor's name in place and return the new name.

    Sets ``metadata.name`` and ``spec.template.metadata.name``, creating the
    nested mappings when the manifest omits them. The base name is not
    validated; an invalid name surfaces later as a submission error.
    """
    metadata = descriptor.setdefault("metadata", {})
    name = unique_name(metadata.get("name") or "")

    metadata["name"] = name
    template = descriptor.setdefault("spec", {}).setdefault("template", {})
    template.setdefault("metadata", {})["name"] = name
    return name


def descriptor_namespace(descriptor: WorkDescriptor) -> str:
    """Namespace the descriptor targets, ``default`` when unset."""
    metadata = descriptor.get("metadata") or {}
    return metadata.get("namespace") or DEFAULT_NAMESPACE
