from __future__ import annotations

import subprocess
from pathlib import Path
from unittest import mock

import pytest

from locally.certs import CertificateTool
from locally.errors import CertificateError


def _fake_mkcert(cmd, **kwargs):
    args = cmd[1:]
    for flag in ("-cert-file", "-key-file"):
        if flag in args:
            Path(args[args.index(flag) + 1]).write_text("pem", encoding="utf-8")
    return subprocess.CompletedProcess(cmd, 0, stdout="v1.4.4\n", stderr="")


def test_issue_creates_dir_and_files(tmp_path: Path, logger):
    cert_dir = tmp_path / "_localcerts"
    tool = CertificateTool(logger)

    with mock.patch("locally.certs.subprocess.run", side_effect=_fake_mkcert) as run:
        pair = tool.issue("app.local", str(cert_dir))

    assert pair.cert_file == cert_dir / "app.local.pem"
    assert pair.key_file == cert_dir / "app.local-key.pem"
    assert pair.cert_file.exists() and pair.key_file.exists()
    assert (pair.key_file.stat().st_mode & 0o777) == 0o644
    assert run.call_args.args[0] == [
        "mkcert",
        "-cert-file", str(pair.cert_file),
        "-key-file", str(pair.key_file),
        "app.local",
    ]


def test_issue_failure(tmp_path: Path, logger):
    tool = CertificateTool(logger)
    error = subprocess.CalledProcessError(1, ["mkcert"], stderr="nope")

    with mock.patch("locally.certs.subprocess.run", side_effect=error):
        with pytest.raises(CertificateError):
            tool.issue("app.local", str(tmp_path / "_localcerts"))


def test_missing_mkcert(logger):
    tool = CertificateTool(logger, mkcert_path="definitely-not-mkcert")
    assert tool.is_available() is False
    with pytest.raises(CertificateError):
        tool.version()


def test_delete_removes_files_and_empty_dir(tmp_path: Path, logger):
    cert_dir = tmp_path / "_localcerts"
    cert_dir.mkdir()
    (cert_dir / "app.local.pem").write_text("pem", encoding="utf-8")
    (cert_dir / "app.local-key.pem").write_text("pem", encoding="utf-8")

    CertificateTool(logger).delete("app.local", str(cert_dir))

    assert not cert_dir.exists()


def test_delete_keeps_dir_with_other_certs(tmp_path: Path, logger):
    cert_dir = tmp_path / "_localcerts"
    cert_dir.mkdir()
    (cert_dir / "app.local.pem").write_text("pem", encoding="utf-8")
    (cert_dir / "api.app.local.pem").write_text("pem", encoding="utf-8")

    CertificateTool(logger).delete("app.local", str(cert_dir))

    assert sorted(p.name for p in cert_dir.iterdir()) == ["api.app.local.pem"]


def test_version_and_install(logger):
    tool = CertificateTool(logger)
    with mock.patch("locally.certs.subprocess.run", side_effect=_fake_mkcert) as run:
        assert tool.version() == "v1.4.4"
        tool.install_ca()
    assert run.call_args.args[0] == ["mkcert", "-install"]
