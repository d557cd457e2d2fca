"""Per-source field alias tables. New upstream names are added here, first match wins."""

from dataclasses import dataclass, field
from typing import Optional

# Amount aliases shared by every source, tried before source-specific ones.
AMOUNT_PATHS = ("award.amount", "awardAmount", "totalValue")


@dataclass(frozen=True)
class SourceMapping:
    """Ordered candidate paths per canonical field for one upstream source."""

    source: str
    natural_key: tuple[str, ...]
    fields: dict[str, tuple[str, ...]]
    detail_url: Optional[str] = None
    link_key: tuple[str, ...] = ()
    contact_fields: dict[str, str] = field(default_factory=dict)
    default_state_code: Optional[str] = None
    default_state_name: Optional[str] = None
    placeholder_titles: frozenset[str] = frozenset({"untitled"})

    def paths(self, name: str) -> tuple[str, ...]:
        return self.fields.get(name, ())


FEDERAL = SourceMapping(
    source="federal",
    natural_key=("noticeId", "noticeID", "id"),
    fields={
        "title": ("title", "subject"),
        "description": ("description", "descriptionText"),
        "posted_date": ("postedDate", "publishDate"),
        "due_date": ("responseDeadLine", "responseDateLine", "reponseDeadLine"),
        "type": ("type", "baseType", "noticeType"),
        "classification": ("classificationCode", "classification"),
        "naics_code": ("naicsCode", "naics", "naicsCodes.0"),
        "set_aside": ("typeOfSetAside", "setAside", "setAsideCode"),
        "set_aside_description": ("typeOfSetAsideDescription", "setAsideDescription"),
        "award_amount": AMOUNT_PATHS,
        "award_date": ("award.date", "awardDate"),
        "award_number": ("award.number", "awardNumber"),
        "awardee_name": ("award.awardee.name", "awardeeName"),
        "awardee_id": ("award.awardee.ueiSAM", "award.awardee.duns", "award.awardee.id"),
        "awardee_location": ("award.awardee.location",),
        "state_code": ("placeOfPerformance.state.code", "placeOfPerformance.stateCode", "popState"),
        "state_name": ("placeOfPerformance.state.name",),
        "city": ("placeOfPerformance.city.name", "placeOfPerformance.city"),
        "country": ("placeOfPerformance.country.code", "placeOfPerformance.country"),
        "zip": ("placeOfPerformance.zip", "placeOfPerformance.zipCode"),
        "link": ("link", "url"),
        "ui_link": ("uiLink",),
        "additional_info_link": ("additionalInfoLink", "additionalInfo.link"),
        "resource_links": ("resourceLinks", "links"),
        "point_of_contact": ("pointOfContact", "pointsOfContact"),
        "solicitation_number": ("solicitationNumber", "solicitationNo"),
        "agency": ("fullParentPathName", "departmentName", "department"),
        "active": ("active",),
        "archive_date": ("archiveDate",),
    },
    detail_url="https://sam.gov/opp/{key}/view",
)

NEW_YORK = SourceMapping(
    source="ny",
    natural_key=("request_id", "epin"),
    fields={
        "title": ("short_title", "type_of_notice_description"),
        "description": ("printout_1", "additional_description_1", "other_info_1"),
        "posted_date": ("registration_date", "start_date"),
        "due_date": ("due_date",),
        "type": ("type_of_notice_description",),
        "classification": ("category_description", "section_name"),
        "award_amount": AMOUNT_PATHS + ("contract_amount",),
        "awardee_name": ("vendor_name",),
        "city": ("city",),
        "zip": ("zip_code",),
        "link": ("link", "url"),
        "resource_links": ("document_links",),
        "agency": ("agency_name",),
    },
    detail_url="https://passport.cityofnewyork.us/page.aspx/en/ctr/contract_public?cn={key}",
    link_key=("epin",),
    contact_fields={"fullName": "contact_name", "phone": "contact_phone", "email": "email"},
    default_state_code="NY",
    default_state_name="New York",
)

COOK_COUNTY = SourceMapping(
    source="il",
    natural_key=("contract_number",),
    fields={
        "title": ("contract_title", "description"),
        "description": ("description", "contract_title"),
        "posted_date": ("award_date", "start_date"),
        "due_date": ("end_date",),
        "type": ("procurement_type", "contract_type"),
        "award_amount": AMOUNT_PATHS + ("contract_amount", "amount"),
        "award_date": ("award_date",),
        "award_number": ("contract_number",),
        "awardee_name": ("vendor_name", "vendor"),
        "awardee_id": ("vendor_id",),
        "link": ("link", "url"),
        "agency": ("department", "using_department"),
    },
    detail_url="https://datacatalog.cookcountyil.gov/resource/qh8j-6k63?contract_number={key}",
    default_state_code="IL",
    default_state_name="Illinois",
)

MAPPINGS: dict[str, SourceMapping] = {
    m.source: m for m in (FEDERAL, NEW_YORK, COOK_COUNTY)
}
