import bcrypt


def hash_password(password: str) -> str:
    """Salted bcrypt hash, safe to store"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    encoded = password.encode("utf-8")
    # Anything longer could never have been hashed at sign-up
    if len(encoded) > 72:
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
