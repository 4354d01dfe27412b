"""userhub - user account service."""
