"""Static schema for the NYPD complaint dataset."""

from __future__ import annotations

from .models import ConnectorSchema, entity_type, link_type, possible_values, prop

COMPLAINT = entity_type(
    "ET1",
    "Complaint",
    prop("PT1", "Complaint Number", "singleLineString"),
    prop("PT2", "Complaint Start Date", "date"),
    prop("PT3", "Complaint End Date", "date"),
    prop("PT4", "Complaint Start Time", "time"),
    prop("PT5", "Complaint End Time", "time"),
    prop("PT6", "Crime Status", "suggestedFromList", possible_values("Completed", "Attempted")),
    prop("PT7", "Jurisdiction Code", "integer"),
    prop("PT8", "Jurisdiction Description", "singleLineString"),
    prop("PT9", "Offence Classification Code", "integer"),
    prop("PT10", "Level Of Offence", "suggestedFromList", possible_values("Misdemeanor", "Violation", "Felony")),
    prop("PT11", "Offence Description", "singleLineString"),
    prop("PT12", "Internal Classification Code", "integer"),
    prop("PT13", "Classification Description", "singleLineString"),
    prop("PT14", "Date Reported", "date"),
    prop(
        "PT29",
        "Location Of Occurrence",
        "suggestedFromList",
        possible_values("Inside", "Opposite Of", "Front Of", "Rear Of"),
    ),
)

LOCATION = entity_type(
    "ET2",
    "Location",
    prop("PT15", "Precinct Code", "integer"),
    prop("PT16", "Borough Name", "singleLineString"),
    prop("PT17", "Housing Development", "singleLineString"),
    prop("PT19", "Park Name", "singleLineString"),
    prop("PT20", "Patrol Borough", "singleLineString"),
    prop("PT21", "Premises Description", "singleLineString"),
    prop("PT22", "Station Name", "singleLineString"),
    prop("PT23", "Transit District", "integer"),
    prop("PT18", "Coordinates", "geospatial"),
)

PERSON = entity_type(
    "ET3",
    "Person",
    prop("PT26", "Age Group", "suggestedFromList", possible_values("<18", "18-24", "25-44", "45-64", "65+")),
    prop("PT27", "Race", "singleLineString"),
    prop("PT28", "Sex", "suggestedFromList", possible_values("M", "F", "U")),
)

CHART = entity_type(
    "CHART",
    "AnalystsNotebookChart",
    prop("CHART1", "Name", "singleLineString"),
    prop("CHART2", "Description", "multipleLineString"),
)

LOCATED_AT = link_type("LT1", "Locatedat")
SUSPECT_OF = link_type("LT2", "Suspectof")
VICTIM_OF = link_type("LT3", "Victimof")

NYPD_SCHEMA = ConnectorSchema(
    name="nypd",
    entity_types=(COMPLAINT, LOCATION, PERSON, CHART),
    link_types=(LOCATED_AT, SUSPECT_OF, VICTIM_OF),
)
