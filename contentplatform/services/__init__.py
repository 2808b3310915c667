"""Business services built on the authorization core."""
