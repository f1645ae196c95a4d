from __future__ import annotations

import threading

import pytest

from authgate.domain.contracts import Credentials, VerifiedIdentity
from authgate.domain.service import AuthenticationService, ProfileService, RegistrationService
from authgate.errors import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from authgate.security.passwords import BcryptPasswordHasher
from authgate.security.tokens import JwtTokenIssuer


@pytest.fixture(scope="module")
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=10)


@pytest.fixture
def tokens() -> JwtTokenIssuer:
    return JwtTokenIssuer("flow-secret")


@pytest.fixture
def flows(directory, hasher, tokens):
    return (
        RegistrationService(directory, hasher),
        AuthenticationService(directory, hasher, tokens),
        ProfileService(directory),
    )


def test_register_then_login_returns_verifiable_token(flows, tokens, directory):
    registration, authentication, _ = flows
    account = registration.register(Credentials("a@x.com", "pw123"))

    token = authentication.authenticate(Credentials("a@x.com", "pw123"))

    assert tokens.verify(token) == account.id
    stored = directory.find_by_email("a@x.com")
    assert stored.password_hash != "pw123"


def test_registration_returns_public_projection(flows):
    registration, _, _ = flows
    account = registration.register(Credentials("a@x.com", "pw123"))
    assert not hasattr(account, "password_hash")
    assert account.email == "a@x.com"


@pytest.mark.parametrize(
    "email,password",
    [(None, "pw"), ("", "pw"), ("a@x.com", None), ("a@x.com", ""), (None, None)],
)
def test_missing_fields_are_rejected_without_writes(flows, directory, email, password):
    registration, authentication, _ = flows
    with pytest.raises(ValidationError):
        registration.register(Credentials(email, password))
    with pytest.raises(ValidationError):
        authentication.authenticate(Credentials(email, password))
    assert directory.create_calls == 0


def test_duplicate_email_is_rejected(flows, directory):
    registration, _, _ = flows
    registration.register(Credentials("a@x.com", "pw123"))
    with pytest.raises(DuplicateEmail):
        registration.register(Credentials("a@x.com", "other"))
    assert directory.count("a@x.com") == 1
    assert directory.create_calls == 1


def test_concurrent_duplicate_registration_yields_one_account(directory):
    barrier = threading.Barrier(2)

    class BarrierHasher:
        """Holds both registrations after their uniqueness checks."""

        def hash(self, plaintext: str) -> str:
            barrier.wait(timeout=5)
            return "hashed:" + plaintext

        def verify(self, plaintext: str, hashed: str) -> bool:
            return hashed == "hashed:" + plaintext

    registration = RegistrationService(directory, BarrierHasher())
    outcomes: list[str] = []

    def attempt() -> None:
        try:
            registration.register(Credentials("race@x.com", "pw"))
            outcomes.append("created")
        except DuplicateEmail:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["created", "duplicate"]
    assert directory.count("race@x.com") == 1


def test_wrong_password_and_unknown_email_fail_identically(flows):
    registration, authentication, _ = flows
    registration.register(Credentials("a@x.com", "pw123"))

    with pytest.raises(InvalidCredentials) as wrong_password:
        authentication.authenticate(Credentials("a@x.com", "nope"))
    with pytest.raises(InvalidCredentials) as unknown_email:
        authentication.authenticate(Credentials("ghost@x.com", "pw123"))

    assert wrong_password.value.message == unknown_email.value.message
    assert wrong_password.value.status_code == unknown_email.value.status_code == 401


def test_profile_lookup_resolves_identity(flows):
    registration, _, profiles = flows
    account = registration.register(Credentials("a@x.com", "pw123"))

    profile = profiles.get_profile(VerifiedIdentity(account_id=account.id))

    assert profile == account


def test_profile_lookup_for_missing_account_raises_not_found(flows):
    _, _, profiles = flows
    with pytest.raises(NotFound):
        profiles.get_profile(VerifiedIdentity(account_id="does-not-exist"))


def test_credentials_repr_hides_password():
    assert "hunter2" not in repr(Credentials("a@x.com", "hunter2"))
