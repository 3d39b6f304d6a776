"""GitHub and git services for the protected push flow."""
