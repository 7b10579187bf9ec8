from __future__ import annotations

from locally.models import (
    DomainRecord,
    decode_annotation,
    encode_record,
    loopback_hostnames,
    parse_annotation,
)


def test_encode_record_lines():
    record = DomainRecord(hostname="app.local", cert_dir="/proj/_localcerts")
    assert encode_record(record) == [
        "#--- app.local: certdir(/proj/_localcerts) ---#",
        "::1 app.local",
        "127.0.0.1 app.local",
    ]


def test_decode_reverses_encode():
    for record in [
        DomainRecord("app.local", "/proj/_localcerts"),
        DomainRecord("api.shop.local", "/Users/me/My Projects/shop/_localcerts"),
        DomainRecord("x.local", "/odd/path (1) ---#"),
    ]:
        annotation = encode_record(record)[0]
        assert decode_annotation(annotation) == record.cert_dir
        assert parse_annotation(annotation) == record


def test_decode_ignores_other_lines():
    for line in [
        "",
        "::1 app.local",
        "127.0.0.1 app.local",
        "# just a comment",
        "#--- app.local: certdir(/x) ---",
        "## START: locallyCLI configurations ##",
    ]:
        assert decode_annotation(line) is None


def test_loopback_hostnames():
    assert loopback_hostnames("::1 app.local") == ["app.local"]
    assert loopback_hostnames("127.0.0.1\tapp.local www.app.local # note") == [
        "app.local",
        "www.app.local",
    ]
    assert loopback_hostnames("10.0.0.1 app.local") == []
    assert loopback_hostnames("#--- app.local: certdir(/x) ---#") == []
    assert loopback_hostnames("::1") == []
