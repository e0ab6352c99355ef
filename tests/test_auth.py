import pytest
from fastapi import HTTPException

from groomroute.auth import _check_claims, provision_user, resolve_user_groomer
from groomroute.models import Groomer, User


def test_provision_user_creates_account_and_owner_groomer(db):
    user = provision_user(db, "uid-new", "sam@example.com", "")

    assert user.account.name == "sam"
    assert user.groomer.email == "sam@example.com"
    assert resolve_user_groomer(db, user).id == user.groomer_id


def test_resolve_groomer_by_email_links_user(db, account, groomer):
    user = User(firebase_uid="uid-2", email="jamie@example.com", account_id=account.id)
    db.add(user)
    db.commit()

    assert resolve_user_groomer(db, user).id == groomer.id
    assert user.groomer_id == groomer.id


def test_resolve_groomer_skips_inactive_link(db, account, groomer):
    retired = Groomer(account_id=account.id, name="Old", is_active=False)
    db.add(retired)
    db.commit()
    user = User(
        firebase_uid="uid-3", email="other@example.com", account_id=account.id, groomer_id=retired.id
    )
    db.add(user)
    db.commit()

    assert resolve_user_groomer(db, user).id == groomer.id


def test_no_groomer_is_400(client, db, groomer):
    groomer.is_active = False
    db.commit()

    response = client.get("/routes/assistant")

    assert response.status_code == 400
    assert response.json()["detail"] == "No groomer found"


def test_expired_token_claims_rejected():
    with pytest.raises(HTTPException) as exc:
        _check_claims({"exp": 0, "iat": 0, "aud": "x", "iss": "y", "sub": "z"})

    assert exc.value.status_code == 401


def test_sign_ins_without_email_each_get_an_account(db):
    first = provision_user(db, "uid-phone-1", "", "")
    second = provision_user(db, "uid-phone-2", "", "")

    assert first.email is None
    assert second.email is None
    assert first.account_id != second.account_id
    assert second.account.name == "My Business"
    assert resolve_user_groomer(db, second).id == second.groomer_id
