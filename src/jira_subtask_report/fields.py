# src/jira_subtask_report/fields.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Set, Tuple

from .shapes import expect_bool, expect_list, expect_object, expect_str, require

log = logging.getLogger(__name__)

# Standard-IDs, die nicht komplett klein geschrieben sind
CAMEL_CASE_IDS: Dict[str, str] = {
    "fixversions": "fixVersions",
    "lastviewed": "lastViewed",
}


def resolve_field_catalog(definitions: Any) -> Dict[str, str]:
    """
    Map lower-cased field display name -> lower-cased field id.

    Reihenfolge der Antwort zählt: unter Custom Fields gewinnt das zuerst
    gesehene. Ein Standardfeld mit gleichem Namen entfernt einen bereits
    eingetragenen Custom-Eintrag; gab es keinen, sperrt es den Namen für
    spätere Custom Fields.
    """
    entries = expect_list(definitions, "fields")
    catalog: Dict[str, str] = {}
    standard_names: Set[str] = set()

    for idx, raw in enumerate(entries):
        where = f"fields[{idx}]"
        entry = expect_object(raw, where)
        name = expect_str(require(entry, "name", where), f"{where}.name").lower()
        field_id = expect_str(require(entry, "id", where), f"{where}.id").lower()
        custom = expect_bool(require(entry, "custom", where), f"{where}.custom")

        if custom:
            if name not in catalog and name not in standard_names:
                catalog[name] = field_id
        else:
            if catalog.pop(name, None) is not None:
                # nur entfernen; ein späteres Custom Field darf den Namen wieder belegen
                log.debug("Standard field reclaims name", extra={"field": name, "id": field_id})
            else:
                standard_names.add(name)

    return catalog


def fetch_field_catalog(client) -> Dict[str, str]:
    """Lädt /rest/api/2/field und löst die Namen auf (einmal pro Lauf)."""
    catalog = resolve_field_catalog(client.get_fields())
    log.info("Field catalog resolved", extra={"custom_fields": len(catalog)})
    return catalog


def resolve_columns(catalog: Dict[str, str], names: Iterable[str]) -> List[Tuple[str, str]]:
    """
    Anzeigenamen -> (Name, Feld-ID). Unbekannte Namen gelten als Standard-IDs
    und werden klein geschrieben (bis auf CAMEL_CASE_IDS). Zeigen zwei Namen
    auf dieselbe ID, bleibt nur der erste, damit Kopfzeile und Werte gleich
    lang sind.
    """
    columns: List[Tuple[str, str]] = []
    seen: Set[str] = set()
    for name in names:
        name = name.strip()
        if not name:
            continue
        low = name.lower()
        field_id = catalog.get(low) or CAMEL_CASE_IDS.get(low, low)
        if field_id in seen:
            log.debug("Duplicate field dropped", extra={"field": name, "id": field_id})
            continue
        seen.add(field_id)
        columns.append((name, field_id))
    return columns


def resolve_field_ids(catalog: Dict[str, str], names: Iterable[str]) -> List[str]:
    return [field_id for _, field_id in resolve_columns(catalog, names)]
