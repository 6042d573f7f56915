import pytest

from fakes import FakeSheetsBackend, StepClock
from labsheets.records import EXAM_HEADER, ORDER_HEADER
from labsheets.store import SheetStore


@pytest.fixture
def backend():
    # Exames is deliberately not the first tab: its structural id is 1, not 0.
    return FakeSheetsBackend({
        "Resumo": [["painel"]],
        "Exames": [EXAM_HEADER],
        "Pedidos": [ORDER_HEADER],
    })


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(backend, clock):
    return SheetStore(backend, clock=clock)


@pytest.fixture
def order_payload():
    return {
        "customer": {
            "name": "Maria Souza",
            "cpf": "123.456.789-00",
            "phone": "11999990000",
            "email": "maria@example.com",
        },
        "items": [
            {"name": "Hemograma", "price": 25.5, "prazo": "1 dia", "id": "171"},
            {"name": "Glicose", "price": 12, "prazo": "2 dias"},
        ],
        "total": 37.5,
        "collectionType": "Domiciliar",
        "address": {
            "street": "Rua A",
            "number": "10",
            "neighborhood": "Centro",
            "city": "X",
            "zip": "00000",
        },
        "scheduledDate": "2024-03-15",
    }
