"""Tests for the upload size guard."""

import math

import pytest

from ea_discovery.core.exceptions import PayloadTooLargeError
from ea_discovery.documents.guard import approximate_decoded_size, check_upload_size, total_upload_size
from ea_discovery.schemas.documents import UploadedDocument

pytestmark = pytest.mark.unit


def _doc(length: int) -> UploadedDocument:
    return UploadedDocument(name="f.pdf", base64_data="A" * length)


class TestApproximateDecodedSize:
    @pytest.mark.parametrize("length", [0, 1, 3, 4, 5, 1000, 1001])
    def test_ceil_three_quarters(self, length):
        assert approximate_decoded_size("A" * length) == math.ceil(length * 3 / 4)

    def test_total_sums_files(self):
        assert total_upload_size([_doc(4), _doc(8)]) == 9


class TestCheckUploadSize:
    def test_under_limit_passes(self):
        assert check_upload_size([_doc(400)], limit_bytes=1000) == 300

    def test_at_limit_passes(self):
        assert check_upload_size([_doc(400), _doc(400)], limit_bytes=600) == 600

    def test_over_limit_rejected_with_both_sizes(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            check_upload_size([_doc(4096), _doc(4096)], limit_bytes=4096)

        err = exc_info.value
        assert err.status_code == 413
        assert err.measured_bytes == 6144
        assert err.limit_bytes == 4096
        assert "(6 KB)" in str(err)
        assert "Limit is 4 KB" in str(err)
        assert err.to_payload()["measuredBytes"] == 6144
