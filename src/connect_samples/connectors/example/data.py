"""In-memory people dataset standing in for an external data source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator


@dataclass(frozen=True, slots=True)
class Person:
    id: str
    forename: str
    surname: str
    dob: str  # YYYY-MM-DD
    ssn: str
    issued_date_and_time: str  # local ISO date and time
    friends: tuple[str, ...] = ()


PEOPLE: tuple[Person, ...] = (
    Person("p1", "Mary", "Smith", "1980-03-14", "123-45-6789", "1998-06-01T09:30:00", ("p2", "p3")),
    Person("p2", "John", "Smith", "1979-11-02", "234-56-7890", "1997-01-15T14:00:00", ("p1", "p4")),
    Person("p3", "Alice", "Jones", "1980-07-21", "345-67-8901", "1998-09-12T11:45:00", ("p1",)),
    Person("p4", "Robert", "Brown", "1965-01-30", "456-78-9012", "1983-03-03T08:15:00", ("p2", "p5")),
    Person("p5", "Linda", "Taylor", "1991-05-05", "567-89-0123", "2009-05-05T16:20:00", ("p4", "p6")),
    Person("p6", "James", "Wilson", "1991-12-24", "678-90-1234", "2009-12-30T10:00:00", ("p5",)),
    Person("p7", "Patricia", "Jones", "1972-08-08", "789-01-2345", "1990-08-10T13:10:00", ()),
    Person("p8", "Michael", "Davies", "1985-02-17", "890-12-3456", "2003-02-20T09:05:00", ("p3",)),
)


def lookup_people(predicate: Callable[[Person], bool], people: tuple[Person, ...] = PEOPLE) -> Iterator[Person]:
    """Matches in dataset order. The dataset itself is never modified."""
    return (p for p in people if predicate(p))
