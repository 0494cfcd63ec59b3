"""Unit tests for mapping portal errors to HTTP responses."""

import pytest

from unitportal.api.errors import map_portal_error
from unitportal.kernel.errors import (
    AlreadyAwarded,
    DuplicateIdentity,
    InvalidInput,
    NoPendingRequest,
    NotAwarded,
    NotFound,
    Unauthorized,
)


class TestMapPortalError:

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (Unauthorized("nope"), 403),
            (NotFound("gone"), 404),
            (InvalidInput("bad"), 422),
            (DuplicateIdentity("dup"), 409),
            (AlreadyAwarded("dup"), 409),
            (NotAwarded("none"), 409),
            (NoPendingRequest("none"), 409),
        ],
    )
    def test_status_codes(self, error, status_code):
        assert map_portal_error(error).status_code == status_code

    def test_guest_gets_401(self):
        exc = map_portal_error(Unauthorized("sign in", code="not_authenticated"))
        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}

    def test_detail_carries_code_and_field(self):
        exc = map_portal_error(InvalidInput("Nickname is required", field="nickname"))
        assert exc.detail == {
            "code": "invalid_input",
            "message": "Nickname is required",
            "field": "nickname",
        }

    def test_detail_without_field(self):
        exc = map_portal_error(AlreadyAwarded("twice"))
        assert exc.detail == {"code": "already_awarded", "message": "twice"}
