"""Helper values for tests."""

# HS256 keys shorter than 32 bytes trigger PyJWT warnings
TEST_SECRET = "test-secret-that-is-at-least-32-bytes-long"
