from enum import Enum


class SacModelType(str, Enum):
    """Stable identifiers of the sample consensus models, used by drivers to know which strategy is active."""

    RIGID_REGISTRATION = "rigid_registration"
    SIMILARITY_REGISTRATION = "similarity_registration"
