"""Account-scoped reminder CRUD service."""
