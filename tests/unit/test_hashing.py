from utils.hashing import verify_password, get_password_hash

def test_password_hashing():
    password = "supersecretpassword"
    hashed = get_password_hash(password)
    assert hashed != password
    assert hashed.startswith("$2")

    # Salted: same input, different hashes
    assert get_password_hash(password) != hashed


def test_password_verification():
    password = "supersecretpassword"
    hashed = get_password_hash(password)

    assert verify_password(password, hashed) is True
    assert verify_password("wrongpassword", hashed) is False


def test_long_password_is_truncated_consistently():
    long_pass = "a" * 100
    hashed_long = get_password_hash(long_pass)

    assert verify_password(long_pass, hashed_long) is True
    # bcrypt only looks at the first 72 bytes
    assert verify_password("a" * 72, hashed_long) is True


def test_multibyte_password():
    password = "비밀번호1234"
    hashed = get_password_hash(password)

    assert verify_password(password, hashed) is True
    assert verify_password("비밀번호1235", hashed) is False
