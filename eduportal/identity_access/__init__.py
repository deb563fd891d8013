"""Identity and access: roles, sessions, auth use cases and the request throttle."""
