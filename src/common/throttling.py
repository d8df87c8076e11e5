"""Request rate limits, keyed by client IP for anonymous callers and by user otherwise."""

from ninja_extra.throttling import AnonRateThrottle, UserRateThrottle


class AnonDefaultThrottle(AnonRateThrottle):
    rate = "60/min"


class UserDefaultThrottle(UserRateThrottle):
    rate = "120/min"


class AuthThrottle(AnonRateThrottle):
    """Login and registration attempts."""

    rate = "20/min"


class UserRegistrationThrottle(AnonRateThrottle):
    rate = "50/day"


class WriteThrottle(UserRateThrottle):
    """Questionnaire and user mutations."""

    rate = "60/min"


class QuestionnaireSubmissionThrottle(UserRateThrottle):
    rate = "30/min"
