"""Unit tests for the JSON-RPC client and block parsing."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from eth_wallet.exceptions import TransportError
from eth_wallet.core.rpc_client import EthereumRPCClient
from eth_wallet.core.transaction_parser import TransactionParser, parse_quantity

from conftest import GENESIS_TIME, OTHER_ADDRESS, THIRD_ADDRESS


def rpc_response(result=None, error=None):
    response = MagicMock()
    response.raise_for_status.return_value = None
    payload = {"jsonrpc": "2.0", "id": 1}
    if error is not None:
        payload["error"] = error
    else:
        payload["result"] = result
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session, headers={})


@pytest.fixture
def rpc(config, session):
    return EthereumRPCClient(config, session=session)


def sent_payload(session, call_index=-1):
    return session.post.call_args_list[call_index].kwargs["json"]


SAMPLE_BLOCK = {
    "number": "0x64",
    "hash": "0x" + "11" * 32,
    "timestamp": hex(int(GENESIS_TIME.timestamp())),
    "transactions": [
        {
            "hash": "0x" + "aa" * 32,
            "from": OTHER_ADDRESS,
            "to": THIRD_ADDRESS,
            "value": "0xde0b6b3a7640000",
            "gas": "0x5208",
            "gasPrice": "0x3b9aca00",
            "blockNumber": "0x64",
        },
        {
            "hash": "0x" + "bb" * 32,
            "from": OTHER_ADDRESS,
            "to": None,
            "value": "0x0",
            "gas": "0x100000",
            "gasPrice": "0x1",
        },
    ],
}


class TestRequests:
    """Test suite for JSON-RPC request handling."""

    def test_latest_block_number(self, rpc, session):
        session.post.return_value = rpc_response("0x1b4")

        assert rpc.latest_block_number() == 436
        assert sent_payload(session)["method"] == "eth_blockNumber"

    def test_rpc_error_raises_transport_error(self, rpc, session):
        session.post.return_value = rpc_response(error={"code": -32000, "message": "header not found"})

        with pytest.raises(TransportError) as exc_info:
            rpc.balance(OTHER_ADDRESS, 5)

        assert "header not found" in str(exc_info.value)
        assert exc_info.value.method == "eth_getBalance"

    def test_retries_then_gives_up(self, rpc, session):
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TransportError):
            rpc.latest_block_number()

        assert session.post.call_count == 2

    def test_recovers_after_transient_failure(self, rpc, session):
        session.post.side_effect = [requests.Timeout("slow"), rpc_response("0x10")]

        assert rpc.latest_block_number() == 16

    def test_invalid_json_is_transport_error(self, rpc, session):
        response = MagicMock()
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        session.post.return_value = response

        with pytest.raises(TransportError):
            rpc.latest_block_number()

    def test_balance_at_block(self, rpc, session):
        session.post.return_value = rpc_response("0xde0b6b3a7640000")

        assert rpc.balance(OTHER_ADDRESS, 100) == 10 ** 18
        assert sent_payload(session)["params"] == [OTHER_ADDRESS, "0x64"]

    def test_pending_transaction_count(self, rpc, session):
        session.post.return_value = rpc_response("0x3")

        assert rpc.transaction_count(OTHER_ADDRESS) == 3
        assert sent_payload(session)["params"] == [OTHER_ADDRESS, "pending"]

    def test_submit_raw_transaction_hex_encodes(self, rpc, session):
        session.post.return_value = rpc_response("0x" + "cc" * 32)

        tx_hash = rpc.submit_raw_transaction(b"\x02\xf8\x01")

        assert tx_hash == "0x" + "cc" * 32
        payload = sent_payload(session)
        assert payload["method"] == "eth_sendRawTransaction"
        assert payload["params"] == ["0x02f801"]

    def test_connection_check(self, rpc, session):
        session.post.side_effect = requests.ConnectionError("refused")

        assert rpc.test_connection() is False


class TestBlockFetch:
    """Test suite for EthereumRPCClient.block_with_transactions."""

    def test_requests_full_transactions(self, rpc, session):
        session.post.return_value = rpc_response(SAMPLE_BLOCK)

        block = rpc.block_with_transactions(100)

        assert sent_payload(session)["params"] == ["0x64", True]
        assert block.number == 100
        assert block.timestamp == GENESIS_TIME
        assert len(block.transactions) == 2

    def test_missing_block_returns_none(self, rpc, session):
        session.post.return_value = rpc_response(None)

        assert rpc.block_with_transactions(10 ** 9) is None

    def test_malformed_block_is_transport_error(self, rpc, session):
        session.post.return_value = rpc_response({"hash": "0x01"})

        with pytest.raises(TransportError):
            rpc.block_with_transactions(5)


class TestTransactionParser:
    """Test suite for block parsing."""

    def test_transaction_fields(self):
        block = TransactionParser().parse_block(SAMPLE_BLOCK)
        tx = block.transactions[0]

        assert tx.sender == OTHER_ADDRESS
        assert tx.recipient == THIRD_ADDRESS
        assert tx.value_wei == 10 ** 18
        assert tx.gas == 21000
        assert tx.gas_price_wei == 10 ** 9
        assert tx.fee_wei == 21000 * 10 ** 9

    def test_contract_creation_has_no_recipient(self):
        block = TransactionParser().parse_block(SAMPLE_BLOCK)

        assert block.transactions[1].recipient is None
        assert block.transactions[1].block_number == 100

    def test_hash_only_transactions_rejected(self):
        block = dict(SAMPLE_BLOCK, transactions=["0x" + "aa" * 32])

        with pytest.raises(ValueError):
            TransactionParser().parse_block(block)

    @pytest.mark.parametrize("value, expected", [
        ("0x0", 0),
        ("0x", 0),
        ("0xff", 255),
        (42, 42),
        ("17", 17),
    ])
    def test_parse_quantity(self, value, expected):
        assert parse_quantity(value) == expected

    def test_parse_quantity_default(self):
        assert parse_quantity(None, 7) == 7


class TestNullAndMalformedResults:
    """Test suite for results that are absent or cannot be decoded."""

    @pytest.mark.parametrize("call, method", [
        (lambda rpc: rpc.latest_block_number(), "eth_blockNumber"),
        (lambda rpc: rpc.transaction_count(OTHER_ADDRESS), "eth_getTransactionCount"),
        (lambda rpc: rpc.balance(OTHER_ADDRESS, 100), "eth_getBalance"),
        (lambda rpc: rpc.submit_raw_transaction(b"\x01"), "eth_sendRawTransaction"),
    ])
    def test_null_result_is_transport_error(self, rpc, session, call, method):
        session.post.return_value = rpc_response(None)

        with pytest.raises(TransportError) as exc_info:
            call(rpc)

        assert exc_info.value.method == method

    @pytest.mark.parametrize("result", ["0xzz", "latest", {"value": 1}, "-0x1"])
    def test_malformed_quantity_is_transport_error(self, rpc, session, result):
        session.post.return_value = rpc_response(result)

        with pytest.raises(TransportError):
            rpc.latest_block_number()

    def test_empty_submission_hash_is_transport_error(self, rpc, session):
        session.post.return_value = rpc_response("")

        with pytest.raises(TransportError):
            rpc.submit_raw_transaction(b"\x01")
