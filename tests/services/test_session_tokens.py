from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from tests.conftest import TEST_SESSION_SECRET, backdated_clock
from trayex.services.keyring import MissingSigningSecret
from trayex.services.session_tokens import InvalidSessionToken, SessionTokenService


class TestSessionTokens:
    def test_issue_and_verify(self, session_tokens):
        claims = session_tokens.verify(session_tokens.issue("user-1", "STUDENT"))
        assert claims.subject_id == "user-1"
        assert claims.role == "STUDENT"
        assert claims.expires_at - claims.issued_at == session_tokens.default_ttl

    def test_missing_secret(self):
        with pytest.raises(MissingSigningSecret):
            SessionTokenService("")

    def test_expired(self):
        old = SessionTokenService(TEST_SESSION_SECRET, clock=backdated_clock(120))
        token = old.issue("user-1", "STUDENT", ttl=timedelta(seconds=60))
        with pytest.raises(InvalidSessionToken):
            SessionTokenService(TEST_SESSION_SECRET).verify(token)

    def test_wrong_secret(self, session_tokens):
        token = SessionTokenService("another-secret").issue("user-1", "STUDENT")
        with pytest.raises(InvalidSessionToken):
            session_tokens.verify(token)

    @pytest.mark.parametrize(
        "payload",
        [
            {"role": "STUDENT", "exp": 2**31},
            {"sub": "user-1", "exp": 2**31},
            {"sub": "user-1", "role": "STUDENT"},
        ],
    )
    def test_incomplete_claims(self, session_tokens, payload):
        token = jwt.encode(payload, TEST_SESSION_SECRET, algorithm="HS256")
        with pytest.raises(InvalidSessionToken):
            session_tokens.verify(token)

    def test_pass_token_is_not_a_session(self, session_tokens, pass_service):
        with pytest.raises(InvalidSessionToken):
            session_tokens.verify(pass_service.mint("user-1"))


ISSUED = datetime(2020, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize("offset,accepted", [(0, True), (1, False)])
def test_expiry_uses_injected_clock(offset, accepted):
    ttl = timedelta(hours=1)
    token = SessionTokenService(TEST_SESSION_SECRET, clock=lambda: ISSUED).issue(
        "user-1", "STUDENT", ttl=ttl
    )
    verifier = SessionTokenService(
        TEST_SESSION_SECRET, clock=lambda: ISSUED + ttl + timedelta(seconds=offset)
    )
    if accepted:
        assert verifier.verify(token).subject_id == "user-1"
    else:
        with pytest.raises(InvalidSessionToken):
            verifier.verify(token)
