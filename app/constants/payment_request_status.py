PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

ALL_STATUSES = (PENDING, APPROVED, REJECTED)

# revoke sends an approved request back to pending so it can be reconsidered
ALLOWED_TRANSITIONS = {
    PENDING: [APPROVED, REJECTED],
    APPROVED: [PENDING],
    REJECTED: [APPROVED],
}

# statuses that block a fresh submission for the same user/product
ACTIVE_STATUSES = (PENDING, APPROVED)


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, [])
