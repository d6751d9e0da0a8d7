ROLE_EMPLOYEE = "employee"
ROLE_MANAGER = "manager"

ROLES = (ROLE_EMPLOYEE, ROLE_MANAGER)
