PENDING = "pending"
READ = "read"
REPLIED = "replied"
RESOLVED = "resolved"

# admins move contact requests freely between these
ALL_STATUSES = (PENDING, READ, REPLIED, RESOLVED)
