from wg_rsc_scripts import PeerRecord, RejectReason, join_continuations, parse_peers
from wg_rsc_scripts.routeros import (
    combine_tokens,
    is_key_token,
    parse_peer_line,
    split_fields_preserve_quotes,
    split_lines,
    tokenize_entry,
)


# Line continuation joiner
def test_split_lines_normalizes_all_endings():
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]


def test_join_continuations_merges_with_single_space():
    lines = ["add a=1   \\", "    b=2  "]
    assert join_continuations(lines) == ["add a=1 b=2"]


def test_join_continuations_only_left_trims_the_closing_line():
    lines = ["add a=1 \\", "  b=2 \\", "  c=3"]
    assert join_continuations(lines) == ["add a=1   b=2 c=3"]


def test_join_continuations_keeps_plain_lines_verbatim():
    lines = ["  /interface wireguard  ", "", "add x=1"]
    assert join_continuations(lines) == lines


def test_join_continuations_flushes_dangling_buffer():
    assert join_continuations(["first", "add a=1 \\"]) == ["first", "add a=1 "]


# Tokenizer
def test_split_fields_preserves_quoted_spaces():
    tokens = split_fields_preserve_quotes('comment="hello  world" name=x\tmtu=1420')
    assert tokens == ['comment="hello  world"', "name=x", "mtu=1420"]


def test_is_key_token():
    assert is_key_token("client-address=10.0.0.2/32")
    assert is_key_token("name=")
    assert not is_key_token('"a=b"')
    assert not is_key_token("=value")
    assert not is_key_token("bare")
    assert not is_key_token("we.ird=1")


def test_empty_value_absorbs_following_bare_tokens():
    pairs = combine_tokens(["name=", "Laptop", "of", "Bob", "client-address=10.0.0.2/32"])
    assert pairs == [("name", "Laptop of Bob"), ("client-address", "10.0.0.2/32")]


def test_bare_tokens_after_non_empty_value_are_dropped():
    pairs = combine_tokens(["stray", "name=a", "b", "mtu=1"])
    assert pairs == [("name", "a"), ("mtu", "1")]


def test_empty_value_followed_by_key_stays_empty():
    assert combine_tokens(["name=", "mtu=1"]) == [("name", ""), ("mtu", "1")]


def test_tokenize_entry_quotes_equals_and_case():
    kv = tokenize_entry('Private-Key=abc= preshared-key="x=y z" name=a name=b')
    assert kv == {"private-key": "abc=", "preshared-key": "x=y z", "name": "b"}


def test_alias_priority_and_empty_fallthrough():
    record, _ = parse_peer_line("add address=10.0.0.9/32 client-address=10.0.0.2/32")
    assert record.client_address == "10.0.0.2/32"
    record, _ = parse_peer_line('add client-address="" address=10.0.0.3/32 endpoint=5.6.7.8')
    assert record.client_address == "10.0.0.3/32"
    assert record.endpoint_address == "5.6.7.8"


def test_parse_peer_line_without_tokens():
    record, kv = parse_peer_line("add ")
    assert record is None
    assert kv == {}


# Section scanning
def test_parse_peers_keeps_complete_entries(export_text):
    result = parse_peers(export_text)
    assert [p.name for p in result.peers] == ["alice", "bob"]
    alice = result.peers[0]
    assert alice == PeerRecord(
        name="alice",
        client_address="10.7.0.12/32",
        client_dns="10.7.0.1",
        endpoint_address="1.2.3.4",
        endpoint_port="13231",
        private_key="PRIVA=",
        public_key="PUBA=",
        preshared_key="PSKA=",
        allowed_address="10.7.0.12/32",
    )


def test_responder_entry_is_rejected_not_raised(export_text):
    result = parse_peers(export_text)
    assert len(result.rejected) == 1
    rejected = result.rejected[0]
    assert rejected.line_number == 7
    assert RejectReason.MISSING_PRIVATE_KEY in rejected.reasons
    assert RejectReason.MISSING_PRESHARED_KEY in rejected.reasons
    assert RejectReason.MISSING_CLIENT_ADDRESS in rejected.reasons
    assert "responder" in rejected.keys


def test_continued_entry_matches_single_line_entry(export_text):
    one_line = (
        "/interface wireguard peers\n"
        "add allowed-address=10.7.0.12/32 client-address=10.7.0.12/32 client-dns=10.7.0.1 "
        "endpoint-address=1.2.3.4 endpoint-port=13231 interface=wg1 name=alice "
        'private-key="PRIVA=" preshared-key="PSKA=" public-key="PUBA="\n'
    )
    assert parse_peers(one_line).peers[0] == parse_peers(export_text).peers[0]


def test_entries_outside_section_are_ignored():
    text = (
        "/ip address\n"
        "add client-address=10.0.0.2/32 private-key=K preshared-key=P endpoint-address=h endpoint-port=1\n"
        "/interface wireguard peers\n"
        "set 0 comment=x\n"
        "add client-address=10.0.0.3/32 private-key=K preshared-key=P endpoint-address=h endpoint-port=1\n"
        "/interface wireguard peers extra\n"
    )
    result = parse_peers(text)
    assert [p.client_address for p in result.peers] == ["10.0.0.3/32"]


def test_missing_endpoint_is_rejected():
    text = "/interface wireguard peers\nadd client-address=10.0.0.2/32 private-key=K preshared-key=P\n"
    result = parse_peers(text)
    assert result.peers == []
    assert result.rejected[0].reasons == (
        RejectReason.MISSING_ENDPOINT_ADDRESS,
        RejectReason.MISSING_ENDPOINT_PORT,
    )


def test_custom_section_path():
    text = "/custom peers\nadd client-address=1/32 private-key=K preshared-key=P endpoint-address=h endpoint-port=1\n"
    assert parse_peers(text).peers == []
    assert len(parse_peers(text, section="/custom peers").peers) == 1


def test_crlf_export(export_text):
    crlf = export_text.replace("\n", "\r\n")
    assert parse_peers(crlf).peers == parse_peers(export_text).peers


def test_key_token_requires_ascii_key():
    assert not is_key_token("ключ=1")
    assert not is_key_token("²=1")
    assert combine_tokens(["name=", "ключ=значение", "mtu=1"]) == [("name", "ключ=значение"), ("mtu", "1")]
