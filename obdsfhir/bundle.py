"""FHIR R4 transaction bundle assembly.

Every entry addresses its resource by ``{resourceType}/{id}`` and carries a
``PUT`` request to the same address, so applying a bundle twice leaves the
server in the same state as applying it once.  Resources are plain dicts;
nothing here generates ids or timestamps, so the same resources always
produce the same bundle.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

APP_NAME = "obds-to-fhir"


def resource_address(resource: dict[str, Any]) -> str:
    """Return the upsert address ``{resourceType}/{id}`` of *resource*."""
    resource_type = resource.get("resourceType")
    resource_id = resource.get("id")
    if not resource_type or not resource_id:
        raise ValueError(
            f"Resource needs both 'resourceType' and 'id' to be addressed, got "
            f"resourceType={resource_type!r}, id={resource_id!r}"
        )
    return f"{resource_type}/{resource_id}"


def add_resource_entry(bundle: dict[str, Any], resource: dict[str, Any]) -> dict[str, Any]:
    """Append *resource* to *bundle* as a replace-or-create entry."""
    address = resource_address(resource)
    bundle.setdefault("entry", []).append(
        {
            "fullUrl": address,
            "resource": resource,
            "request": {"method": "PUT", "url": address},
        }
    )
    return bundle


def build_transaction_bundle(resources: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Wrap *resources* in a FHIR ``transaction`` Bundle, keeping their order.

    Parameters
    ----------
    resources:
        FHIR resource dicts, each with ``resourceType`` and ``id``.

    Returns
    -------
    dict
        A JSON-serializable FHIR R4 Bundle dict.
    """
    bundle: dict[str, Any] = {
        "resourceType": "Bundle",
        "type": "transaction",
        "entry": [],
    }
    for resource in resources:
        add_resource_entry(bundle, resource)
    return bundle


def generate_profile_meta_source(
    sender_id: Optional[str],
    software_id: Optional[str],
    app_version: str,
) -> str:
    """Build the ``meta.source`` provenance string for produced resources."""
    if sender_id is not None and software_id is not None:
        return f"{sender_id}.{software_id}:{APP_NAME}:{app_version}"
    return f"{APP_NAME}:{app_version}"
