"""Grove System — restaurant operations backend.

Identity and request-boundary core: login/registration, signed session
tokens, the access gate in front of every route, and the success/error
envelopes every response is normalised into.
"""

__version__ = "1.0.0"
