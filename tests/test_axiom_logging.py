"""Axiom 로깅 미들웨어 헬퍼 테스트."""

from civicconnect.middleware.axiom_logging import _error_detail, scrub


class TestScrub:

    def test_masks_identity_and_secrets(self):
        body = {"identity": {"id": "u1", "email": "u1@test.com"}, "api_key": "k"}
        assert scrub(body) == {"identity": {"id": "u1", "email": "***"}, "api_key": "***"}

    def test_truncates_image_payload(self):
        result = scrub({"image": {"data": "A" * 5000}})
        data = result["image"]["data"]
        assert data.startswith("A" * 2000)
        assert data.endswith("...(truncated 3000 chars)")

    def test_limits_list_length(self):
        assert len(scrub(list(range(50)))) == 20


class TestErrorDetail:

    def test_includes_validation_errors(self):
        body = b'{"detail": "Please fill in all required fields", "errors": ["title is required"]}'
        assert _error_detail(body) == "Please fill in all required fields: ['title is required']"

    def test_non_json_body(self):
        assert _error_detail(b"Internal Server Error") == "Internal Server Error"
