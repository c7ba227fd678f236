"""Complaint rows to Complaint/Location/Person entities and their links."""

from __future__ import annotations

from connect_samples.graph.builder import ResultGraph
from connect_samples.graph.mapping import FromField, FromPoint, RecordMapping, require
from connect_samples.graph.models import RawRecord, ResultEntity, SourceReference
from connect_samples.schema.models import ItemType
from connect_samples.schema.nypd import COMPLAINT, LOCATION, PERSON

NYPD_SOURCE = SourceReference(
    name="NYPD Complaint Dataset",
    type="Open source data",
    description="A source reference to the corresponding record from the NYPD Complaint Dataset.",
)

COMPLAINT_FIELDS: RecordMapping = {
    "Complaint Number": FromField("cmplnt_num", mandatory=True),
    "Complaint Start Date": FromField("cmplnt_fr_dt"),
    "Complaint End Date": FromField("cmplnt_to_dt"),
    "Complaint Start Time": FromField("cmplnt_fr_tm"),
    "Complaint End Time": FromField("cmplnt_to_tm"),
    "Crime Status": FromField("crm_atpt_cptd_cd"),
    "Jurisdiction Code": FromField("jurisdiction_code"),
    "Jurisdiction Description": FromField("juris_desc"),
    "Offence Classification Code": FromField("ky_cd"),
    "Level Of Offence": FromField("law_cat_cd"),
    "Offence Description": FromField("ofns_desc"),
    "Internal Classification Code": FromField("pd_cd"),
    "Classification Description": FromField("pd_desc"),
    "Date Reported": FromField("rpt_dt"),
    "Location Of Occurrence": FromField("loc_of_occur_desc"),
}

LOCATION_FIELDS: RecordMapping = {
    "Precinct Code": FromField("addr_pct_cd", mandatory=True),
    "Borough Name": FromField("boro_nm", mandatory=True),
    "Housing Development": FromField("hadevelopt"),
    "Park Name": FromField("parks_nm"),
    "Patrol Borough": FromField("patrol_boro"),
    "Premises Description": FromField("prem_typ_desc"),
    "Station Name": FromField("station_name"),
    "Transit District": FromField("transit_district"),
    "Coordinates": FromPoint(latitude="latitude", longitude="longitude"),
}

SUSPECT_FIELDS: RecordMapping = {
    "Age Group": FromField("susp_age_group"),
    "Race": FromField("susp_race"),
    "Sex": FromField("susp_sex"),
}

VICTIM_FIELDS: RecordMapping = {
    "Age Group": FromField("vic_age_group"),
    "Race": FromField("vic_race"),
    "Sex": FromField("vic_sex"),
}


def add_location(graph: ResultGraph, datum: RawRecord) -> ResultEntity:
    key = f"Borough: {require(datum, 'boro_nm')} Precinct: {require(datum, 'addr_pct_cd')}"
    return graph.add_entity_from_record(LOCATION, datum, LOCATION_FIELDS, key=key, source=NYPD_SOURCE)


def add_complaint(graph: ResultGraph, datum: RawRecord) -> ResultEntity:
    key = f"Complaint: {require(datum, 'cmplnt_num')}"
    return graph.add_entity_from_record(COMPLAINT, datum, COMPLAINT_FIELDS, key=key, source=NYPD_SOURCE)


def add_suspect(graph: ResultGraph, datum: RawRecord) -> ResultEntity:
    key = f"Suspect: {require(datum, 'cmplnt_num')}"
    return graph.add_entity_from_record(PERSON, datum, SUSPECT_FIELDS, key=key, source=NYPD_SOURCE)


def add_victim(graph: ResultGraph, datum: RawRecord) -> ResultEntity:
    key = f"Victim: {require(datum, 'cmplnt_num')}"
    return graph.add_entity_from_record(PERSON, datum, VICTIM_FIELDS, key=key, source=NYPD_SOURCE)


def add_link(
    graph: ResultGraph,
    link_type: ItemType,
    datum: RawRecord,
    from_end: ResultEntity,
    to_end: ResultEntity,
):
    """Links of one complaint row share its complaint number as identifier."""
    return graph.add_link(link_type, require(datum, "cmplnt_num"), from_end, to_end, source=NYPD_SOURCE)
