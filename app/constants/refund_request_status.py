PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

ALL_STATUSES = (PENDING, APPROVED, REJECTED)

# a refund decision is final
ALLOWED_TRANSITIONS = {
    PENDING: [APPROVED, REJECTED],
    APPROVED: [],
    REJECTED: [],
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, [])
