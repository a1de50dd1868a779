from datetime import timedelta

from jose import jwt

from storefront.utils.security import create_access_token, decode_access_token, hash_password, verify_password


def test_password_hash_roundtrip():
    hashed = hash_password("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_token_carries_user_id():
    assert decode_access_token(create_access_token(42)) == 42


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_delta=timedelta(seconds=-10))
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode({"userId": 42}, "another-secret", algorithm="HS256")
    assert decode_access_token(forged) is None


def test_token_without_user_id_is_rejected():
    from storefront.utils.settings import JWT_ALGORITHM, JWT_SECRET

    token = jwt.encode({"sub": "42"}, JWT_SECRET, algorithm=JWT_ALGORITHM)
    assert decode_access_token(token) is None
