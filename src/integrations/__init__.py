"""
Integrations for external services and APIs.

This package contains the GitHub REST integration used to enact policies.
"""
