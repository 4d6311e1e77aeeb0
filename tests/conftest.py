from typing import Any

import pytest

from fjson import Decoder
from tests.models import A_DATE, Pojo, Pojo2, pojo_decoder


@pytest.fixture(scope="function")
def pojo_json() -> dict[str, Any]:
    return {
        "aString": "A string",
        "pojos": [{"value": "A value"}],
        "optLocalDate": A_DATE.isoformat(),
    }


@pytest.fixture(scope="function")
def pojo_read() -> Decoder[Pojo]:
    return pojo_decoder()


@pytest.fixture(scope="function")
def expected_pojo() -> Pojo:
    return Pojo(
        a_string="A string",
        opt_string=None,
        pojos=[Pojo2("A value")],
        opt_local_date=A_DATE,
    )
