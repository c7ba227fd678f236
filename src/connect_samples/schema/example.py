"""Static schema for the example connector's mock dataset."""

from __future__ import annotations

from .models import ConnectorSchema, entity_type, link_type, prop

PERSON = entity_type(
    "ET1",
    "Person",
    prop("PER1", "First Name", "singleLineString"),
    prop("PER2", "Middle Name", "singleLineString"),
    prop("PER3", "Last Name", "singleLineString"),
    prop("PER4", "Year of Birth", "date"),
    prop("PER5", "Age", "integer"),
    prop("PER6", "SSN", "singleLineString"),
    prop("PER7", "SSN Issued Date and Time", "dateAndTime"),
)

TWEET = entity_type(
    "ET2",
    "Tweet",
    prop("TWT1", "Contents", "multipleLineString"),
    prop("TWT2", "User name", "singleLineString"),
    prop("TWT3", "Length", "integer"),
)

ADDRESS = entity_type(
    "ET3",
    "Address",
    prop("ADD1", "First line", "singleLineString"),
    prop("ADD2", "Postcode", "singleLineString"),
    prop("ADD3", "Coordinates", "geospatial"),
)

FRIENDS_WITH = link_type("LT1", "Friendswith")

EXAMPLE_SCHEMA = ConnectorSchema(
    name="example",
    entity_types=(PERSON, TWEET, ADDRESS),
    link_types=(FRIENDS_WITH,),
)
