from typing import Any, Dict, Iterable, List, Optional

Record = Dict[str, Any]


def full_name(record: Record) -> str:
    parts = [record.get("first_name"), record.get("last_name")]
    return " ".join(str(p) for p in parts if p)


def _field_text(record: Record, field: str) -> Optional[str]:
    if field == "full_name":
        return full_name(record)
    value = record.get(field)
    if value is None:
        return None
    return str(value)


def search(records: List[Record], term: Optional[str], fields: Iterable[str]) -> List[Record]:
    """Keep records where any of ``fields`` contains ``term``, ignoring case."""
    if not term or not term.strip():
        return records
    needle = term.strip().lower()
    fields = list(fields)
    matched = []
    for record in records:
        for field in fields:
            text = _field_text(record, field)
            if text is not None and needle in text.lower():
                matched.append(record)
                break
    return matched


def match_field(records: List[Record], field: str, value: Optional[Any]) -> List[Record]:
    if value is None or str(value) in ("", "all"):
        return records
    return [r for r in records if r.get(field) is not None and str(r.get(field)) == str(value)]


def filtered_view(filtered: List[Record], total: int) -> Dict[str, Any]:
    return {
        "items": filtered,
        "showing": len(filtered),
        "total": total,
    }
