import pytest

from ingest.loader import load_records
from ingest.sample import SAMPLE_TRACKER

SCENARIO = (
    "Bidding Authority,Bidding Authority,RFS No.,Company,Won Capacity,Final Tariff,Status (e-RA/LOA/PPA/COD)\n"
    "APTransco,State,RFS-1,Ecoren,275,1.5,e-RA\n"
    "APTransco,State,RFS-1,Acme,0,,LOA\n"
)


@pytest.fixture
def scenario_text():
    return SCENARIO


@pytest.fixture
def scenario_records():
    return load_records(SCENARIO)


@pytest.fixture
def sample_records():
    return load_records(SAMPLE_TRACKER)
