import json

import pytest

from labsheets.errors import OrderNotFound
from labsheets.records import OrderItem


def order_rows(backend):
    return backend.tabs["Pedidos"][1:]


def test_create_home_collection_order(store, backend, order_payload):
    order = store.create_order(order_payload)
    assert order.protocol == "00001"
    assert order.address == "Rua A, 10 - Centro, X (00000)"
    assert order.scheduled_date == "15/03/2024"
    assert order.timestamp == "10/03/2024, 09:30:00"
    assert order.status == "A Realizar"
    assert order.observation == ""
    assert order.items == [
        OrderItem(name="Hemograma", price=25.5, prazo="1 dia"),
        OrderItem(name="Glicose", price=12.0, prazo="2 dias"),
    ]

    (row,) = order_rows(backend)
    assert len(row) == 11
    assert row[9] == "Rua A, 10 - Centro, X (00000)"
    assert row[10] == "15/03/2024"
    assert ("append", "Pedidos", "A:K", "USER_ENTERED") in backend.calls


def test_create_reads_key_column_before_append(store, backend, order_payload):
    store.create_order(order_payload)
    ops = [c[:3] for c in backend.calls]
    assert ops == [("read", "Pedidos", "A:A"), ("append", "Pedidos", "A:K")]


def test_protocols_increase_across_creates(store, order_payload):
    protocols = [store.create_order(order_payload).protocol for _ in range(3)]
    assert protocols == ["00001", "00002", "00003"]


def test_protocol_seeded_from_last_existing_row(store, backend, order_payload):
    backend.tabs["Pedidos"] += [["00040", "Ana"], ["00041", "Bia"]]
    assert store.create_order(order_payload).protocol == "00042"


def test_corrupt_last_protocol_reseeds_instead_of_failing(store, backend, order_payload):
    backend.tabs["Pedidos"] += [["00040", "Ana"], ["???", "Bia"]]
    assert store.create_order(order_payload).protocol == "00001"


def test_create_logs_raw_payload(store, order_payload, capsys):
    store.create_order(order_payload)
    first = json.loads(capsys.readouterr().out.splitlines()[0])
    assert first["lvl"] == "INFO"
    assert first["msg"] == "order.create"
    assert first["payload"]["customer"]["name"] == "Maria Souza"
    assert first["payload"]["scheduledDate"] == "2024-03-15"


def test_lab_collection_has_no_address(store, order_payload):
    payload = dict(order_payload, collectionType=None, scheduledDate="")
    order = store.create_order(payload)
    assert order.collection_type == "Laboratório"
    assert order.address == ""
    assert order.scheduled_date == ""


def test_get_orders_round_trips_created_order(store, order_payload):
    created = store.create_order(order_payload)
    assert store.get_orders() == [created]


def test_get_orders_survives_malformed_items(store, backend, capsys):
    backend.tabs["Pedidos"] += [
        ["00001", "Ana", "", "", "", "{broken", "10"],
        ["00002", "Bia", "", "", "", '[{"name":"TSH","price":40}]', "40"],
    ]
    orders = store.get_orders()
    assert [o.protocol for o in orders] == ["00001", "00002"]
    assert orders[0].items == []
    assert orders[1].items == [OrderItem(name="TSH", price=40.0)]
    assert "order.items_malformed" in capsys.readouterr().out


def test_update_order_touches_only_status_and_observation(store, backend, order_payload):
    store.create_order(order_payload)
    target = store.create_order(order_payload)
    store.create_order(order_payload)
    before_rows = [list(r) for r in order_rows(backend)]
    before = store.get_orders()

    updated = store.update_order(target.protocol, {"status": "Concluído", "observation": "coletado às 8h"})

    after_rows = order_rows(backend)
    assert after_rows[1][:11] == before_rows[1][:11]
    assert after_rows[1][11:] == ["Concluído", "coletado às 8h"]
    assert after_rows[0] == before_rows[0]
    assert after_rows[2] == before_rows[2]

    after = store.get_orders()
    assert after[0] == before[0] and after[2] == before[2]
    assert after[1].status == "Concluído"
    assert after[1].observation == "coletado às 8h"
    assert after[1].customer == before[1].customer
    assert after[1].items == before[1].items
    assert after[1].address == before[1].address
    assert updated == after[1]

    update_calls = [c for c in backend.calls if c[0] == "update"]
    assert update_calls == [("update", "Pedidos", "L3:M3", "USER_ENTERED")]


def test_update_order_absent_field_leaves_cell(store, backend, order_payload):
    order = store.create_order(order_payload)
    store.update_order(order.protocol, {"status": "Em andamento", "observation": "ligar antes"})
    updated = store.update_order(order.protocol, {"status": "Concluído"})
    assert updated.status == "Concluído"
    assert updated.observation == "ligar antes"


def test_update_missing_order_raises_without_writing(store, backend, order_payload):
    store.create_order(order_payload)
    writes_before = len(backend.writes())
    with pytest.raises(OrderNotFound) as exc:
        store.update_order("00099", {"status": "Concluído"})
    assert str(exc.value) == "Order not found: 00099"
    assert len(backend.writes()) == writes_before


def test_update_order_requires_exact_protocol(store, order_payload):
    store.create_order(order_payload)
    with pytest.raises(OrderNotFound):
        store.update_order("1", {"status": "Concluído"})
