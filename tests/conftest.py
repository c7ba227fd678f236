"""
Pytest configuration and shared fixtures
"""

from typing import Any, Callable

import httpx
import pytest

from connect_samples.connectors.nypd import NypdClient, NypdConnector
from connect_samples.graph.models import ConnectorKey, Seed
from connect_samples.schema.example import PERSON

NYPD_URL = "https://nypd.test/resource/complaints.json"


@pytest.fixture
def sample_complaint() -> dict[str, Any]:
    """A full row as returned by the complaint dataset"""
    return {
        "cmplnt_num": "261427284",
        "cmplnt_fr_dt": "2023-01-03T00:00:00.000",
        "cmplnt_fr_tm": "17:45:00",
        "cmplnt_to_dt": "2023-01-03T00:00:00.000",
        "cmplnt_to_tm": "18:00:00",
        "addr_pct_cd": "75",
        "rpt_dt": "2023-01-04T00:00:00.000",
        "ky_cd": "341",
        "ofns_desc": "PETIT LARCENY",
        "pd_cd": "333",
        "pd_desc": "LARCENY,PETIT FROM STORE-SHOPL",
        "crm_atpt_cptd_cd": "COMPLETED",
        "law_cat_cd": "MISDEMEANOR",
        "boro_nm": "BROOKLYN",
        "loc_of_occur_desc": "INSIDE",
        "prem_typ_desc": "CHAIN STORE",
        "juris_desc": "N.Y. POLICE DEPT",
        "jurisdiction_code": "0",
        "patrol_boro": "PATROL BORO BKLYN NORTH",
        "latitude": "40.6660",
        "longitude": "-73.8820",
        "susp_age_group": "25-44",
        "susp_race": "BLACK",
        "susp_sex": "M",
        "vic_age_group": "UNKNOWN",
        "vic_race": "UNKNOWN",
        "vic_sex": "D",
    }


@pytest.fixture
def minimal_complaint() -> dict[str, Any]:
    return {"cmplnt_num": "100", "boro_nm": "BROOKLYN", "addr_pct_cd": "1"}


@pytest.fixture
def nypd_backend():
    """Build a connector whose client talks to an httpx.MockTransport.

    Returns (connector, requests); `requests` collects every request sent.
    """

    def _backend(
        rows: Any = None,
        status: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ):
        requests: list[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(status, json=rows if rows is not None else [])

        transport = httpx.MockTransport(_handle)
        connector = NypdConnector(
            client_factory=lambda: NypdClient(base_url=NYPD_URL, app_token="", transport=transport)
        )
        return connector, requests

    return _backend


@pytest.fixture
def person_seed() -> Callable[..., Seed]:
    def _seed(seed_id: str, *ids: str, properties: dict[str, Any] | None = None) -> Seed:
        return Seed(
            seed_id=seed_id,
            type_id=PERSON.id,
            properties=dict(properties or {}),
            connector_keys=tuple(ConnectorKey(type_id=PERSON.id, id=i) for i in ids),
        )

    return _seed
