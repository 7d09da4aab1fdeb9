"""Request/response boundary: error classification and success envelopes."""
