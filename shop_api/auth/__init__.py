"""Registration, login and profile endpoints for users and buyers."""
