"""Tests for upload policies and pre-flight validation."""

import pytest

from thinktank_api.core.errors import ValidationError
from thinktank_api.lib.uploads import (
    build_object_path,
    content_policy,
    extract_extension,
    image_policy,
    normalize_content_type,
    report_policy,
    validate_upload,
)

MB = 1024 * 1024


class TestValidateUpload:
    def test_accepts_allowed_content_file(self) -> None:
        validate_upload(content_policy(), filename="brief.pdf", content_type="application/pdf", size=10 * MB)

    def test_rejects_file_over_100mb(self) -> None:
        with pytest.raises(ValidationError, match="less than 100MB") as exc_info:
            validate_upload(content_policy(), filename="big.mp4", content_type="video/mp4", size=100 * MB + 1)
        assert exc_info.value.field == "file"

    def test_exactly_100mb_is_allowed(self) -> None:
        validate_upload(content_policy(), filename="edge.mp4", content_type="video/mp4", size=100 * MB)

    def test_report_limit_is_50mb(self) -> None:
        with pytest.raises(ValidationError, match="less than 50MB"):
            validate_upload(report_policy(), filename="r.pdf", content_type="application/pdf", size=51 * MB)

    @pytest.mark.parametrize(
        "content_type",
        ["application/x-msdownload", "application/zip", "text/html", "image/svg+xml"],
    )
    def test_rejects_disallowed_content_types(self, content_type: str) -> None:
        with pytest.raises(ValidationError, match="is not allowed for content uploads"):
            validate_upload(content_policy(), filename="x", content_type=content_type, size=1)

    def test_spreadsheets_allowed_for_reports_not_content(self) -> None:
        xlsx = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        validate_upload(report_policy(), filename="data.xlsx", content_type=xlsx, size=1)
        with pytest.raises(ValidationError):
            validate_upload(content_policy(), filename="data.xlsx", content_type=xlsx, size=1)

    def test_missing_content_type_rejected(self) -> None:
        with pytest.raises(ValidationError, match="File type unknown"):
            validate_upload(content_policy(), filename="x", content_type=None, size=1)

    def test_empty_file_rejected(self) -> None:
        with pytest.raises(ValidationError, match="empty.pdf is empty"):
            validate_upload(content_policy(), filename="empty.pdf", content_type="application/pdf", size=0)

    def test_image_policy_accepts_any_image(self) -> None:
        validate_upload(image_policy(), filename="logo.svg", content_type="image/svg+xml", size=1, field="logo")

    def test_image_policy_rejects_documents(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_upload(image_policy(), filename="a.pdf", content_type="application/pdf", size=1, field="logo")
        assert exc_info.value.field == "logo"

    def test_content_type_parameters_ignored(self) -> None:
        validate_upload(content_policy(), filename="a.txt", content_type="Text/Plain; charset=utf-8", size=1)


class TestPaths:
    def test_normalize_content_type(self) -> None:
        assert normalize_content_type("Image/PNG ; q=1") == "image/png"

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [("report.PDF", ".pdf"), ("archive.tar.gz", ".gz"), ("noext", ""), (".hidden", ""), ("trailing.", "")],
    )
    def test_extract_extension(self, filename: str, expected: str) -> None:
        assert extract_extension(filename) == expected

    def test_build_object_path_drops_original_name(self) -> None:
        path = build_object_path("content", "abc123", "Quarterly Brief.PDF", 1700000000000)
        assert path == "content/abc123-1700000000000.pdf"
