from datetime import datetime, timezone

import httpx
import pytest

from conftest import SIGNED_URL, json_response
from pf9_upload.cli import main
from pf9_upload.core.config import Settings, get_settings
from pf9_upload.core.exceptions import ExitCode
from pf9_upload.services.uploader import UploadService

FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def service(settings, client):
    return UploadService(settings, client, clock=lambda: FIXED)


def run(service, *argv):
    return main(list(argv), service=service)


def test_end_to_end_upload(service, api, report_file, scratch_dir, capsys):
    code = run(service, "tok-secret", "TCK-9", str(report_file))

    assert code == ExitCode.OK
    out, err = capsys.readouterr()
    assert "File Path: cust1/TCK-9/20240102T030405Z_report.log" in out
    assert "Customer: c1" in out
    assert "b1" in err
    assert [r.method for r in api.requests] == ["GET", "POST", "PUT"]
    assert api.bodies[2] == b"0123456789"
    assert list(scratch_dir.iterdir()) == []


def test_secrets_never_printed(service, api, report_file, capsys):
    run(service, "-v", "tok-secret", "TCK-9", str(report_file))

    out, err = capsys.readouterr()
    for secret in ("tok-secret", SIGNED_URL, "secret-signature"):
        assert secret not in out
        assert secret not in err


def test_customer_line_omitted_when_unknown(service, api, report_file, capsys):
    api.whoami = lambda request: json_response({"allowed_prefix": "cust1"})

    assert run(service, "tok", "T", str(report_file)) == ExitCode.OK
    out, _ = capsys.readouterr()
    assert "Customer:" not in out


def test_missing_prefix_stops_before_presign(service, api, report_file):
    api.whoami = lambda request: json_response({"bucket": "b1", "customer_id": "c1"})

    assert run(service, "tok", "T", str(report_file)) == ExitCode.PREFIX_MISSING
    assert api.calls("POST") == []
    assert api.calls("PUT") == []


def test_oversized_file_makes_no_requests(service, api, tmp_path):
    big = tmp_path / "big.bin"
    big.write_bytes(b"x" * 2048)

    assert run(service, "tok", "T", str(big)) == ExitCode.FILE_TOO_LARGE
    assert api.requests == []


def test_missing_file(service, api, tmp_path, capsys):
    assert run(service, "tok", "T", str(tmp_path / "absent.log")) == ExitCode.FILE_MISSING
    assert api.requests == []
    assert "file not found" in capsys.readouterr().err


def test_empty_token(service, api, report_file):
    assert run(service, "", "T", str(report_file)) == ExitCode.MISSING_TOKEN
    assert api.requests == []


def test_token_and_ticket_may_start_with_dash(service, api, report_file, capsys):
    code = run(service, "-AbC_base64url", "-T1", str(report_file))

    assert code == ExitCode.OK
    assert api.requests[0].headers["x-upload-token"] == "-AbC_base64url"
    assert "File Path: cust1/-T1/20240102T030405Z_report.log" in capsys.readouterr().out


def test_flags_mix_with_dash_positionals(service, api, report_file):
    assert run(service, "-v", "--", "-v", "T", str(report_file)) == ExitCode.OK
    assert api.requests[0].headers["x-upload-token"] == "-v"


def test_numeric_customer_id_is_ignored(service, api, report_file, capsys):
    api.whoami = lambda request: json_response({"allowed_prefix": "cust1", "customer_id": 42})

    assert run(service, "tok", "T", str(report_file)) == ExitCode.OK
    assert "Customer:" not in capsys.readouterr().out


def test_presign_error_wins_over_url(service, api, report_file, capsys):
    api.presign = lambda request: json_response({"error": "invalid key", "url": SIGNED_URL})

    assert run(service, "tok", "T", str(report_file)) == ExitCode.PRESIGN_REJECTED
    assert api.calls("PUT") == []
    err = capsys.readouterr().err
    assert "invalid key" in err
    assert SIGNED_URL not in err


def test_forbidden_put_reports_body_and_cleans_up(service, api, report_file, scratch_dir, capsys):
    api.put = lambda request: httpx.Response(403, content=b"SignatureDoesNotMatch\n")

    assert run(service, "tok", "T", str(report_file)) == ExitCode.UPLOAD_FAILED
    assert "SignatureDoesNotMatch" in capsys.readouterr().err
    assert list(scratch_dir.iterdir()) == []


@pytest.mark.parametrize(
    ("whoami", "expected"),
    [
        (lambda request: httpx.Response(200, content=b""), ExitCode.IDENTITY_UNREACHABLE),
        (lambda request: json_response({"message": "Not Found"}, 404), ExitCode.IDENTITY_NOT_FOUND),
        (lambda request: json_response({"allowed_prefix": "///"}), ExitCode.PREFIX_EMPTY),
    ],
)
def test_identity_failures_map_to_exit_codes(service, api, report_file, whoami, expected):
    api.whoami = whoami

    assert run(service, "tok", "T", str(report_file)) == expected
    assert api.calls("POST") == []


def test_failure_classes_have_distinct_exit_codes():
    codes = [code.value for code in ExitCode]
    assert len(codes) == len(set(codes))


@pytest.mark.parametrize("argv", [[], ["tok"], ["tok", "T"], ["tok", "T", "f", "extra"]])
def test_wrong_argument_count_prints_usage(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)

    assert excinfo.value.code == ExitCode.USAGE
    assert "usage:" in capsys.readouterr().err


def test_settings_join_urls():
    settings = Settings(api_base="https://api.test/", whoami_path="whoami")

    assert settings.whoami_url == "https://api.test/whoami"
    assert settings.presign_url == "https://api.test/presign"


def test_default_settings():
    settings = get_settings()

    assert settings.presign_expires == 900
    assert settings.max_file_bytes == 5368709120
    assert settings.api_base == "https://uploads.platform9.com"
