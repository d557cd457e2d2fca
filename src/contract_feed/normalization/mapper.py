"""Map one raw upstream record onto the canonical ContractRecord."""

from typing import Any, Optional
from urllib.parse import quote

from contract_feed.models.contract import (
    Award,
    Awardee,
    ContractRecord,
    PlaceOfPerformance,
    StateRef,
    non_negative_amount,
)
from contract_feed.models.raw import RawContract

from .fields import (
    as_list,
    description_text,
    first_date,
    first_present,
    first_text,
    parse_bool,
)
from .mappings import MAPPINGS, SourceMapping


def _derive_link(data: dict[str, Any], mapping: SourceMapping, upstream_id: Optional[str]) -> Optional[str]:
    """Detail-page URL from the upstream id, else an explicit URL field, else None."""
    link_id = first_text(data, mapping.link_key) if mapping.link_key else upstream_id
    if mapping.detail_url and link_id:
        return mapping.detail_url.format(key=quote(link_id, safe=""))
    return first_text(data, mapping.paths("link"))


def _contacts(data: dict[str, Any], mapping: SourceMapping) -> list[Any]:
    """Contact list verbatim when upstream has one; else one entry built from flat fields."""
    contacts = first_present(data, mapping.paths("point_of_contact"))
    if contacts is not None:
        return as_list(contacts)
    entry = {
        out_key: data[in_key]
        for out_key, in_key in mapping.contact_fields.items()
        if isinstance(data.get(in_key), str) and data[in_key].strip()
    }
    return [entry] if entry else []


def _award(data: dict[str, Any], mapping: SourceMapping) -> Award:
    awardee_name = first_text(data, mapping.paths("awardee_name"))
    awardee_id = first_text(data, mapping.paths("awardee_id"))
    location = first_present(data, mapping.paths("awardee_location"))
    awardee = None
    if awardee_name or awardee_id or isinstance(location, dict):
        awardee = Awardee(
            name=awardee_name,
            id=awardee_id,
            location=location if isinstance(location, dict) else None,
        )
    return Award(
        date=first_date(data, mapping.paths("award_date")),
        number=first_text(data, mapping.paths("award_number")),
        amount=non_negative_amount(first_present(data, mapping.paths("award_amount"))),
        awardee=awardee,
    )


def _place_of_performance(data: dict[str, Any], mapping: SourceMapping) -> PlaceOfPerformance:
    return PlaceOfPerformance(
        state=StateRef(
            code=first_text(data, mapping.paths("state_code")) or mapping.default_state_code,
            name=first_text(data, mapping.paths("state_name")) or mapping.default_state_name,
        ),
        city=first_text(data, mapping.paths("city")),
        country=first_text(data, mapping.paths("country")),
        zip=first_text(data, mapping.paths("zip")),
    )


def normalize_record(raw: RawContract | dict[str, Any], mapping: SourceMapping) -> Optional[ContractRecord]:
    """
    Convert one raw record with the given mapping.
    Returns None only when neither an upstream id nor a title can be resolved.
    """
    data = raw.data if isinstance(raw, RawContract) else raw
    if not isinstance(data, dict):
        return None

    title = first_text(data, mapping.paths("title"))
    if title and title.lower() in mapping.placeholder_titles:
        title = None
    upstream_id = first_text(data, mapping.natural_key)
    natural_key = upstream_id or title
    if not natural_key:
        return None

    set_aside = first_text(data, mapping.paths("set_aside"))
    set_aside_description = first_text(data, mapping.paths("set_aside_description"))

    return ContractRecord(
        natural_key=natural_key,
        source=mapping.source,
        title=title or "",
        description=description_text(first_present(data, mapping.paths("description"))),
        posted_date=first_date(data, mapping.paths("posted_date")),
        due_date=first_date(data, mapping.paths("due_date")),
        type=first_text(data, mapping.paths("type")),
        classification=first_text(data, mapping.paths("classification")),
        naics_code=first_text(data, mapping.paths("naics_code")),
        set_aside=set_aside,
        type_of_set_aside=set_aside,
        type_of_set_aside_description=set_aside_description,
        award=_award(data, mapping),
        place_of_performance=_place_of_performance(data, mapping),
        link=_derive_link(data, mapping, upstream_id),
        ui_link=first_text(data, mapping.paths("ui_link")),
        additional_info_link=first_text(data, mapping.paths("additional_info_link")),
        resource_links=as_list(first_present(data, mapping.paths("resource_links"))),
        point_of_contact=_contacts(data, mapping),
        solicitation_number=first_text(data, mapping.paths("solicitation_number")),
        agency=first_text(data, mapping.paths("agency")),
        active=parse_bool(first_present(data, mapping.paths("active"))),
        archive_date=first_date(data, mapping.paths("archive_date")),
    )


def normalize(source_tag: str, raw: RawContract | dict[str, Any]) -> Optional[ContractRecord]:
    """Normalize a raw record for a source tag; None means drop the record."""
    mapping = MAPPINGS.get(source_tag.lower())
    if mapping is None:
        raise ValueError(f"Unknown source: {source_tag}. Available: {list(MAPPINGS.keys())}")
    return normalize_record(raw, mapping)
