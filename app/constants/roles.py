USER = "user"
ADMIN = "admin"
SUPER_ADMIN = "super_admin"

# super_admin can do everything admin can
ADMIN_ROLES = (ADMIN, SUPER_ADMIN)

ALL_ROLES = (USER, ADMIN, SUPER_ADMIN)
