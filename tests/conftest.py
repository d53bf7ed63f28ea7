import os

from hypothesis import HealthCheck, settings

# Slow CI runners trip hypothesis deadlines on the first (import-heavy) example
settings.register_profile(
    "ci",
    deadline=None,
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile("dev", max_examples=50)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
