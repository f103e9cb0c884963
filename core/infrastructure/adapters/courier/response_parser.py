"""
Courier response parsing.

Provider payloads have no fixed shape: the same logical value may sit at the
top level or under a wrapper object, and under one of several names. Each
logical value is described by an ordered list of ``(wrapper path, field)``
candidates; the first non-empty match wins.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

Candidate = Tuple[Tuple[str, ...], str]

WRAPPERS: Sequence[Tuple[str, ...]] = (
    (),
    ("data",),
    ("result",),
    ("payload",),
    ("response",),
    ("consignment",),
    ("data", "consignment"),
)

ID_FIELDS = ("consignment_id", "consignmentId", "id", "tracking_code", "trackingCode")
TRACKING_NUMBER_FIELDS = ("tracking_number", "trackingNumber", "tracking_code", "trackingCode", "awb")
TRACKING_URL_FIELDS = ("tracking_url", "trackingUrl", "tracking_link", "trackingLink")
LABEL_URL_FIELDS = ("label_url", "labelUrl", "label", "label_link", "invoice_url")
STATUS_FIELDS = ("status", "delivery_status", "deliveryStatus", "current_status", "state")
EVENT_FIELDS = ("events", "tracking_events", "history", "timeline", "logs")


def candidates(fields: Iterable[str], wrappers: Sequence[Tuple[str, ...]] = WRAPPERS) -> List[Candidate]:
    """Expand field names into ordered candidates, wrapper by wrapper."""
    fields = list(fields)
    return [(wrapper, name) for wrapper in wrappers for name in fields]


def _descend(payload: Any, path: Tuple[str, ...]) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def pick_value(payload: Any, options: Iterable[Candidate]) -> Optional[Any]:
    """
    Return the first non-empty value among ``options``.

    Args:
        payload: Decoded JSON body (any shape)
        options: Ordered ``(wrapper path, field)`` pairs

    Returns:
        The matched value, or None
    """
    for path, name in options:
        node = _descend(payload, path)
        if not isinstance(node, dict):
            continue
        value = node.get(name)
        if not _is_empty(value):
            return value
    return None


def pick_text(payload: Any, fields: Iterable[str]) -> Optional[str]:
    value = pick_value(payload, candidates(fields))
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).strip()


def pick_events(payload: Any) -> List[Dict[str, Any]]:
    """Tracking events as a list of dicts (scalar entries become ``{"status": ...}``)."""
    value = pick_value(payload, candidates(EVENT_FIELDS))
    if not isinstance(value, list):
        return []
    events = []
    for entry in value:
        if isinstance(entry, dict):
            events.append(dict(entry))
        elif not _is_empty(entry):
            events.append({"status": str(entry)})
    return events


def parse_consignment(payload: Any) -> Dict[str, Optional[str]]:
    """Logical consignment fields of a create response."""
    return {
        "consignment_id": pick_text(payload, ID_FIELDS),
        "tracking_number": pick_text(payload, TRACKING_NUMBER_FIELDS),
        "tracking_url": pick_text(payload, TRACKING_URL_FIELDS),
        "label_url": pick_text(payload, LABEL_URL_FIELDS),
        "status": pick_text(payload, STATUS_FIELDS),
    }


def parse_tracking(payload: Any) -> Dict[str, Any]:
    """Logical fields of a tracking response."""
    return {
        "status": pick_text(payload, STATUS_FIELDS),
        "tracking_url": pick_text(payload, TRACKING_URL_FIELDS),
        "events": pick_events(payload),
    }
