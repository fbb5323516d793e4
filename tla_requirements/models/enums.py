from enum import Enum

class Kind(str, Enum):
    FUNCTIONAL = "Functional"
    NON_FUNCTIONAL = "Non-functional"

class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

class ProofStatus(str, Enum):
    UNPROVEN = "Unproven"
    PROVED = "Proved"
    FAILED = "Failed"
    UNCLEAR = "Unclear"

class NFRCluster(str, Enum):
    PERFORMANCE = "Performance"
    RELIABILITY = "Reliability"
    SAFETY = "Safety"
    SECURITY = "Security"
    USABILITY = "Usability"
    MAINTAINABILITY = "Maintainability"
