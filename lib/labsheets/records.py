"""Row <-> record codecs for the Exames and Pedidos tabs.

Decoding is permissive: unparsable numbers become 0, an unreadable items cell
becomes an empty list and missing trailing cells fall back to their defaults.
A single bad row never aborts a list read.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .logs import err_text, log

HEADER_TOKENS = frozenset({"ID", "id"})
DEFAULT_CATEGORY = "Geral"
DEFAULT_STATUS = "A Realizar"
LAB_COLLECTION = "Laboratório"
HOME_COLLECTION = "Domiciliar"
ITEM_KEYS = ("name", "price", "prazo")

# Column order is the sheet contract: A..H for exams, A..M for orders.
EXAM_HEADER = ["ID", "Nome", "Preço", "Prazo", "Preparo", "Jejum", "Descrição", "Categoria"]
ORDER_HEADER = [
    "Protocolo", "Nome", "CPF", "Telefone", "Email", "Itens", "Total", "Data",
    "Tipo de Coleta", "Endereço", "Data Agendada", "Status", "Observação",
]

_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

Row = List[Any]


def parse_number(value: Any) -> float:
    """Parse the leading numeric part of a cell; anything unusable is 0.0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        m = _NUMBER_PREFIX.match(str(value))
        if not m:
            return 0.0
        num = float(m.group(0))
    return num if math.isfinite(num) else 0.0


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _cell(row: Sequence[Any], idx: int) -> str:
    return _text(row[idx]) if idx < len(row) else ""


@dataclass
class Exam:
    id: str
    name: str = ""
    price: float = 0.0
    prazo: str = ""
    preparo: str = ""
    jejum: str = ""
    description: str = ""
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_input(cls, exam_id: str, data: Mapping[str, Any]) -> "Exam":
        """Build an exam from a client payload; any ``id`` in the payload is ignored."""
        return cls(
            id=exam_id,
            name=_text(data.get("name")),
            price=parse_number(data.get("price")),
            prazo=_text(data.get("prazo")),
            preparo=_text(data.get("preparo")),
            jejum=_text(data.get("jejum")),
            description=_text(data.get("description")),
            category=_text(data.get("category")) or DEFAULT_CATEGORY,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def row_to_exam(row: Sequence[Any]) -> Exam:
    return Exam(
        id=_cell(row, 0),
        name=_cell(row, 1),
        price=parse_number(row[2] if len(row) > 2 else None),
        prazo=_cell(row, 3),
        preparo=_cell(row, 4),
        jejum=_cell(row, 5),
        description=_cell(row, 6),
        category=_cell(row, 7) or DEFAULT_CATEGORY,
    )


def exam_to_row(exam: Exam) -> Row:
    return [
        exam.id,
        exam.name,
        exam.price,
        exam.prazo or "",
        exam.preparo or "",
        exam.jejum or "",
        exam.description or "",
        exam.category or DEFAULT_CATEGORY,
    ]


def is_header_row(exam: Exam) -> bool:
    return exam.id in HEADER_TOKENS


@dataclass
class Customer:
    name: str = ""
    cpf: str = ""
    phone: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Customer":
        data = data or {}
        return cls(
            name=_text(data.get("name")),
            cpf=_text(data.get("cpf")),
            phone=_text(data.get("phone")),
            email=_text(data.get("email")),
        )


@dataclass
class OrderItem:
    name: str = ""
    price: float = 0.0
    prazo: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderItem":
        return cls(
            name=_text(data.get("name")),
            price=parse_number(data.get("price")),
            prazo=_text(data.get("prazo")),
        )


@dataclass
class Order:
    protocol: str
    customer: Customer = field(default_factory=Customer)
    items: List[OrderItem] = field(default_factory=list)
    total: float = 0.0
    timestamp: str = ""
    collection_type: str = ""
    address: str = ""
    scheduled_date: str = ""
    status: str = DEFAULT_STATUS
    observation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def encode_items(items: Optional[Iterable[Mapping[str, Any]]]) -> str:
    """Serialize order items as compact JSON, keeping only name/price/prazo."""
    out = []
    for item in items or []:
        out.append({k: item[k] for k in ITEM_KEYS if item.get(k) is not None})
    return json.dumps(out, separators=(",", ":"), ensure_ascii=False)


def decode_items(cell: Any, protocol: str = "") -> List[OrderItem]:
    """Parse the items cell; malformed JSON is logged and read as no items."""
    try:
        raw = json.loads(_text(cell) or "[]")
        if not isinstance(raw, list) or not all(isinstance(i, Mapping) for i in raw):
            raise ValueError(f"expected a list of objects, got {type(raw).__name__}")
    except ValueError as e:
        log("WARN", "order.items_malformed", protocol=protocol, err=err_text(e))
        return []
    return [OrderItem.from_dict(i) for i in raw]


def format_address(collection_type: Any, address: Optional[Mapping[str, Any]]) -> str:
    """Render the home-collection address; empty for any other collection mode."""
    if collection_type != HOME_COLLECTION or not address:
        return ""
    out = "{}, {} - {}, {} ({})".format(
        _text(address.get("street")),
        _text(address.get("number")),
        _text(address.get("neighborhood")),
        _text(address.get("city")),
        _text(address.get("zip")),
    )
    if address.get("complement"):
        out += f" comp: {_text(address.get('complement'))}"
    return out


def format_scheduled_date(value: Any) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY. Input that does not split into three parts yields ''."""
    text = _text(value)
    if not text:
        return ""
    parts = text.split("-")
    if len(parts) != 3:
        log("WARN", "order.date_malformed", value=text)
        return ""
    year, month, day = parts
    return f"{day}/{month}/{year}"


def order_to_row(protocol: str, data: Mapping[str, Any], timestamp: str) -> Row:
    """Build the A..K row of a new order. Status and observation start blank."""
    customer = Customer.from_dict(data.get("customer"))
    collection_type = data.get("collectionType") or LAB_COLLECTION
    return [
        protocol,
        customer.name,
        customer.cpf,
        customer.phone,
        customer.email,
        encode_items(data.get("items")),
        data.get("total"),
        timestamp,
        collection_type,
        format_address(collection_type, data.get("address")),
        format_scheduled_date(data.get("scheduledDate")),
    ]


def row_to_order(row: Sequence[Any]) -> Order:
    protocol = _cell(row, 0)
    return Order(
        protocol=protocol,
        customer=Customer(
            name=_cell(row, 1),
            cpf=_cell(row, 2),
            phone=_cell(row, 3),
            email=_cell(row, 4),
        ),
        items=decode_items(row[5] if len(row) > 5 else None, protocol),
        total=parse_number(row[6] if len(row) > 6 else None),
        timestamp=_cell(row, 7),
        collection_type=_cell(row, 8),
        address=_cell(row, 9),
        scheduled_date=_cell(row, 10),
        status=_cell(row, 11) or DEFAULT_STATUS,
        observation=_cell(row, 12),
    )
