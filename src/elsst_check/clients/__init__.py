"""HTTP clients for the OAI-PMH repository and the ELSST label service."""
