"""Constants shared by the test modules."""

# Fixed clock used by the verifier under test
NOW = 1_700_000_000.0
NOW_MS = 1_700_000_000_000
GRACE_MS = 300_000

KEY_ENDPOINT = "http://gateway.test/public-key"
