from __future__ import annotations

import pytest

# Well-known development key (//Alice)
ALICE_PUBLIC_KEY = "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
ALICE_SS58_GENERIC = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE_SS58_POLKADOT = "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"
ALICE_H160 = "0xd43593c715fdd31c61141abd04a99fd6822c8558"


@pytest.fixture
def short_addresses() -> list[str]:
    return [
        "0x" + "00" * 20,
        "0x" + "ff" * 20,
        "0x5FbDB2315678afecb367f032d93F642f64180aa3",
        "f39fd6e51aad88f6f4ce6ab8827279cfffb92266",
        ALICE_H160,
    ]


def trust_record(
    borrower: str,
    new_score: int = 10,
    kind: str = "InstallmentPaid",
    block_number: int | None = None,
    **extra: object,
) -> dict:
    data = {"borrower": borrower, "kind": kind, "newScore": new_score}
    data.update(extra)
    record: dict = {"data": data}
    if block_number is not None:
        record["blockNumber"] = block_number
    return record
